"""Tests for ringlab.report -- markdown rendering and chart series."""

import pytest

from ringlab.analytics.dashboards import build_dashboards
from ringlab.analytics.insights import analyze_health_data
from ringlab.records import CategoryRecords, DailySleep, DailyStress
from ringlab.report import (
    ScoreSeries,
    SeriesPoint,
    daily_score_series,
    format_dashboards,
    format_insights,
    format_series,
    progress_bar,
    rating_symbol,
    series_to_dict,
    trend_symbol,
)


class TestSymbols:
    @pytest.mark.parametrize("score,symbol", [(85, "🌟"), (70, "✅"), (55, "⚠️"), (54.9, "🔴")])
    def test_rating(self, score, symbol):
        assert rating_symbol(score) == symbol

    def test_trend(self):
        assert trend_symbol("improving") == "📈"
        assert trend_symbol("declining") == "📉"
        assert trend_symbol("stable") == "➡️"


class TestProgressBar:
    def test_twenty_cells(self):
        bar = progress_bar(80, 100, "Sleep score")
        assert bar == "Sleep score: [" + "█" * 16 + "░" * 4 + "] 80% ✅"

    def test_capped(self):
        assert progress_bar(250, 100).startswith("[" + "█" * 20 + "]")
        assert "100%" in progress_bar(250, 100)

    def test_rounding_half_up(self):
        # 52.5% -> 10.5 cells -> 11
        assert progress_bar(52.5, 100).count("█") == 11

    def test_empty(self):
        assert progress_bar(0, 100) == "[" + "░" * 20 + "] 0% 🔴"


class TestFormatInsights:
    def test_sections(self, records):
        text = format_insights(analyze_health_data(records))
        for heading in ("## 😴 SLEEP", "## 🏃 ACTIVITY", "## 💪 READINESS", "## 🧘 STRESS",
                        "## 🏋️ WORKOUTS", "## 🧾 SUMMARY", "## 🎯 RECOMMENDATIONS"):
            assert heading in text
        assert "Best day: 2024-01-14" in text
        assert "Steps/day: 6,950" in text
        assert "- running: 2" in text
        assert "- Protocol: Athletic Recovery Protocol" in text

    def test_without_recommendations(self, records):
        text = format_insights(analyze_health_data(records), include_recommendations=False)
        assert "RECOMMENDATIONS" not in text

    def test_empty(self):
        text = format_insights(analyze_health_data(CategoryRecords()))
        assert "Days Analyzed:** 0 days" in text
        assert "Best day" not in text


class TestFormatDashboards:
    def test_digest(self, records):
        text = format_dashboards(build_dashboards(records))
        assert "Days: 14" in text
        assert "Social jetlag: 7 min" in text
        assert "## Lag Lab" in text
        assert "## Correlation Overview" in text
        assert "do not establish cause" in text

    def test_no_jetlag(self):
        text = format_dashboards(build_dashboards(CategoryRecords()))
        assert "Social jetlag: n/a" in text
        assert "best lag n/a" in text


class TestDailyScoreSeries:
    def test_names_and_order(self, records):
        series = daily_score_series(records)
        assert [s.name for s in series] == [
            "Sleep score",
            "Activity score",
            "Readiness score",
            "Steps",
            "Stress high (min)",
            "Recovery high (min)",
        ]
        assert series[0].points[0].x == "2024-01-01"
        assert series[4].points[0].y == 60.0

    def test_sorted_with_nulls(self):
        records = CategoryRecords(
            sleep=(DailySleep(day="2024-01-02", score=None), DailySleep(day="2024-01-01", score=75)),
            stress=(DailyStress(day="2024-01-01"),),
        )
        sleep, *_, stress, _recovery = daily_score_series(records)
        assert [(p.x, p.y) for p in sleep.points] == [("2024-01-01", 75.0), ("2024-01-02", None)]
        assert stress.points[0].y is None


class TestFormatSeries:
    def test_missing_values_dashed(self):
        table = format_series([
            ScoreSeries("Sleep score", (SeriesPoint("2024-01-02", 81.25), SeriesPoint("2024-01-01", None))),
            ScoreSeries("Steps", (SeriesPoint("2024-01-01", 8000.0),)),
        ])
        assert table.splitlines() == [
            "| Day | Sleep score | Steps |",
            "|---|---|---|",
            "| 2024-01-01 | - | 8000 |",
            "| 2024-01-02 | 81.3 | - |",
        ]

    def test_empty(self):
        assert format_series(daily_score_series(CategoryRecords())) == "No daily scores."

    def test_to_dict(self, records):
        data = series_to_dict(daily_score_series(records))
        assert list(data) == [s.name for s in daily_score_series(records)]
        assert data["Stress high (min)"][1] == {"x": "2024-01-02", "y": 61.0}
