"""ringlab -- correlation and lag analysis for fitness-ring daily records."""

__version__ = "0.1.0"
