"""Analytics engine over ring API daily records.

Modules:
    stats        -- Means, medians, rank correlation, detrending, histograms
    rows         -- One merged row per calendar day, plus derived sleep timing
    correlation  -- Pairwise-complete matrices and lagged correlations
    dashboards   -- Dashboard cards assembled from rows, matrices and lags
    insights     -- Averages, trends and recommendations from the daily lists
"""

from ringlab.analytics.stats import (
    MIN_PAIRS,
    HistogramBin,
    correlate,
    detrend,
    histogram,
    mean,
    median,
    pairwise,
    pearson,
    pstdev,
    rank,
    spearman,
)
from ringlab.analytics.rows import (
    DailyRow,
    build_daily_rows,
    build_raw_rows,
    derive_fields,
    social_jetlag,
)
from ringlab.analytics.correlation import (
    LAG_SPECS,
    METRIC_KEYS,
    CorrelationMatrix,
    LagAnalysis,
    LagCorrelation,
    LagSpec,
    compute_lag_analyses,
    compute_lag_analysis,
    correlation_matrix,
    correlation_matrix_detrended,
    lag_correlation,
)
from ringlab.analytics.dashboards import (
    GRANULARITY_NOTES,
    BarChart,
    DashboardCard,
    DashboardsResult,
    DashboardSummary,
    HeatmapChart,
    HistogramChart,
    ScatterChart,
    build_dashboards,
)
from ringlab.analytics.insights import (
    HealthInsights,
    Recommendation,
    analyze_health_data,
    classify_trend,
    consistency_score,
    round_half_up,
)

__all__ = [
    # stats
    "MIN_PAIRS",
    "HistogramBin",
    "correlate",
    "detrend",
    "histogram",
    "mean",
    "median",
    "pairwise",
    "pearson",
    "pstdev",
    "rank",
    "spearman",
    # rows
    "DailyRow",
    "build_daily_rows",
    "build_raw_rows",
    "derive_fields",
    "social_jetlag",
    # correlation
    "LAG_SPECS",
    "METRIC_KEYS",
    "CorrelationMatrix",
    "LagAnalysis",
    "LagCorrelation",
    "LagSpec",
    "compute_lag_analyses",
    "compute_lag_analysis",
    "correlation_matrix",
    "correlation_matrix_detrended",
    "lag_correlation",
    # dashboards
    "GRANULARITY_NOTES",
    "BarChart",
    "DashboardCard",
    "DashboardsResult",
    "DashboardSummary",
    "HeatmapChart",
    "HistogramChart",
    "ScatterChart",
    "build_dashboards",
    # insights
    "HealthInsights",
    "Recommendation",
    "analyze_health_data",
    "classify_trend",
    "consistency_score",
    "round_half_up",
]
