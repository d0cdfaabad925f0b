"""Shared fixtures and helpers for the ringlab test suite."""

from __future__ import annotations

import json
from datetime import date, timedelta
from pathlib import Path

import pytest

from ringlab.records import CategoryRecords


# ---------------------------------------------------------------------------
# Export-building helpers
# ---------------------------------------------------------------------------


def day_range(start: str, n: int) -> list[str]:
    first = date.fromisoformat(start)
    return [(first + timedelta(days=i)).isoformat() for i in range(n)]


def two_week_export() -> dict:
    """14 days (Mon 2024-01-01 .. Sun 2024-01-14) touching every category."""
    days = day_range("2024-01-01", 14)
    summaries = ("stressed", "restored", "normal")
    return {
        "sleep": [{"day": d, "score": 70 + i} for i, d in enumerate(days)],
        "activity": {
            "data": [
                {
                    "day": d,
                    "score": 60 + (i * 7) % 20,
                    "steps": 5000 + 300 * i,
                    "total_calories": 2200,
                    "active_calories": 400 + 10 * i,
                }
                for i, d in enumerate(days)
            ],
            "next_token": None,
        },
        "readiness": [{"day": d, "score": 65 + i} for i, d in enumerate(days)],
        "stress": [
            {
                "day": d,
                "stress_high": 3600 + 60 * i,
                "recovery_high": 1800,
                "day_summary": summaries[i % 3],
            }
            for i, d in enumerate(days)
        ],
        "spo2": [
            {"day": d, "spo2_percentage": {"average": 96 + (i % 3)}, "breathing_disturbance_index": 5 + i % 4}
            for i, d in enumerate(days)
        ],
        "workouts": [
            {"day": days[0], "activity": "running", "intensity": "hard"},
            {"day": days[0], "activity": "walking", "intensity": "easy"},
            {"day": days[3], "activity": "running", "intensity": "moderate"},
        ],
        "sleep_detailed": [
            {
                "day": d,
                "bedtime_start": f"{d}T22:{2 * i:02d}:00.000Z",
                "bedtime_end": f"{d}T23:59:00.000Z",
                "type": "long_sleep",
                "total_sleep_duration": 28800,
                "deep_sleep_duration": 5760,
                "rem_sleep_duration": 7200,
                "light_sleep_duration": 14400,
                "awake_time": 1440,
                "efficiency": 85 + i % 5,
                "average_heart_rate": 55,
                "average_hrv": 40 + i,
            }
            for i, d in enumerate(days)
        ],
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def export() -> dict:
    return two_week_export()


@pytest.fixture
def records(export) -> CategoryRecords:
    return CategoryRecords.from_dict(export)


@pytest.fixture
def shifted_records() -> CategoryRecords:
    """Readiness trails activity by one day over six consecutive days."""
    days = day_range("2024-01-01", 6)
    return CategoryRecords.from_dict({
        "activity": [
            {"day": d, "score": i + 1, "steps": 1000, "total_calories": 2000, "active_calories": 500}
            for i, d in enumerate(days)
        ],
        "readiness": [{"day": d, "score": 0 if i == 0 else i} for i, d in enumerate(days)],
    })


@pytest.fixture
def export_file(tmp_path: Path, export) -> Path:
    path = tmp_path / "export.json"
    path.write_text(json.dumps(export), encoding="utf-8")
    return path
