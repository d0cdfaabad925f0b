"""Dashboard assembly: daily rows, matrices, lag analyses and chart cards.

:func:`build_dashboards` is the top-level entry point.  It runs the whole
pipeline over one set of category records and returns a
:class:`DashboardsResult` that serialises straight to JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Union

from ringlab.analytics.correlation import (
    METRIC_KEYS,
    CorrelationMatrix,
    LagAnalysis,
    LagCorrelation,
    compute_lag_analyses,
    correlation_matrix,
    correlation_matrix_detrended,
)
from ringlab.analytics.rows import DailyRow, build_daily_rows, social_jetlag
from ringlab.analytics.stats import HistogramBin, histogram, is_number
from ringlab.config import AnalysisConfig
from ringlab.dates import MINUTES_PER_DAY
from ringlab.knowledge import DEFAULT_KNOWLEDGE, KnowledgeBase
from ringlab.records import CategoryRecords

log = logging.getLogger(__name__)

GRANULARITY_NOTES: tuple[str, ...] = (
    "Ring API max granularity: heart rate at 5-minute intervals.",
    "Sleep stages at 5-minute resolution; movement during sleep at 30-second resolution (when available).",
    "Raw/second-level sensor streams are not exposed via the public ring API.",
)


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeatmapChart:
    title: str
    data: CorrelationMatrix
    type: Literal["heatmap"] = "heatmap"


@dataclass(frozen=True)
class ScatterChart:
    """Points are drawn by the renderer from ``daily_rows``.

    *lag* shifts ``y_key`` by that many calendar days; None means same day.
    """

    title: str
    x_key: str
    y_key: str
    lag: int | None = None
    type: Literal["scatter"] = "scatter"


@dataclass(frozen=True)
class BarChart:
    title: str
    x_key: str
    y_key: str
    lags: tuple[LagCorrelation, ...]
    type: Literal["bar"] = "bar"


@dataclass(frozen=True)
class HistogramChart:
    title: str
    key: str
    bins: tuple[HistogramBin, ...]
    type: Literal["histogram"] = "histogram"


Chart = Union[HeatmapChart, ScatterChart, BarChart, HistogramChart]


def _chart_dict(chart: Chart) -> dict[str, Any]:
    if isinstance(chart, HeatmapChart):
        return {"type": chart.type, "title": chart.title, "data": chart.data.to_dict()}
    return asdict(chart)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DashboardCard:
    id: str
    title: str
    why_it_matters: str
    science_notes: tuple[str, ...]
    charts: tuple[Chart, ...]
    key_findings: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "why_it_matters": self.why_it_matters,
            "science_notes": list(self.science_notes),
            "charts": [_chart_dict(c) for c in self.charts],
            "key_findings": list(self.key_findings),
        }


@dataclass(frozen=True)
class DashboardSummary:
    days: int
    social_jetlag_min: float | None


@dataclass
class DashboardsResult:
    summary: DashboardSummary
    daily_rows: list[DailyRow]
    correlation: CorrelationMatrix
    correlation_detrended: CorrelationMatrix
    lag_analyses: list[LagAnalysis]
    cards: list[DashboardCard]
    granularity_notes: tuple[str, ...] = field(default=GRANULARITY_NOTES)

    def card(self, card_id: str) -> DashboardCard:
        for c in self.cards:
            if c.id == card_id:
                return c
        raise KeyError(card_id)

    def __repr__(self) -> str:
        jetlag = self.summary.social_jetlag_min
        return (
            f"DashboardsResult(days={self.summary.days}, "
            f"jetlag={'n/a' if jetlag is None else f'{jetlag:.0f}min'}, "
            f"cards={len(self.cards)})"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": asdict(self.summary),
            "granularity_notes": list(self.granularity_notes),
            "daily_rows": [r.to_dict() for r in self.daily_rows],
            "correlation": self.correlation.to_dict(),
            "correlation_detrended": self.correlation_detrended.to_dict(),
            "lag_analyses": [a.to_dict() for a in self.lag_analyses],
            "cards": [c.to_dict() for c in self.cards],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def _build_cards(
    lag_activity: LagAnalysis,
    bedtime_bins: list[HistogramBin],
    correlation: CorrelationMatrix,
    correlation_detrended: CorrelationMatrix,
    kb: KnowledgeBase,
) -> list[DashboardCard]:
    return [
        DashboardCard(
            id="lag_lab",
            title="Lag Lab",
            why_it_matters=(
                "Training load and activity often affect readiness with a 1–3 day delay. "
                "Understanding your personal lag helps avoid overreaching."
            ),
            science_notes=tuple(kb.findings("activity") + kb.findings("hrv")),
            charts=(
                BarChart(
                    title="Activity → Readiness lag correlations",
                    x_key=lag_activity.x_key,
                    y_key=lag_activity.y_key,
                    lags=tuple(lag_activity.lags),
                ),
                ScatterChart(
                    title="Best-lag scatter (Activity vs Readiness)",
                    x_key=lag_activity.x_key,
                    y_key=lag_activity.y_key,
                    lag=lag_activity.best_lag if lag_activity.best_lag is not None else 0,
                ),
            ),
            key_findings=("Identify which lag days show the strongest correlation with readiness.",),
        ),
        DashboardCard(
            id="sleep_architecture",
            title="Sleep Architecture vs Recovery",
            why_it_matters=(
                "Deep and REM proportions plus HRV are strong signals for physiological recovery quality."
            ),
            science_notes=tuple(kb.findings("sleep", 0, 2) + kb.findings("hrv", 0, 2)),
            charts=(
                ScatterChart("Deep sleep % vs Readiness", "deep_pct", "readiness_score"),
                ScatterChart("HRV vs Readiness", "avg_hrv", "readiness_score"),
            ),
            key_findings=("Look for non-linear clusters (e.g., HRV plateaus at higher readiness).",),
        ),
        DashboardCard(
            id="stress_sleep",
            title="Stress-Sleep Coupling",
            why_it_matters=(
                "High stress load often reduces sleep efficiency and quality; "
                "the relationship can be nonlinear."
            ),
            science_notes=tuple(kb.findings("stress", 0, 2)),
            charts=(
                ScatterChart("Stress high minutes vs Sleep efficiency", "stress_high_min", "sleep_efficiency"),
                ScatterChart("Stress high minutes vs Sleep score", "stress_high_min", "sleep_score"),
            ),
            key_findings=("Check if high-stress days predict lower sleep scores the same night.",),
        ),
        DashboardCard(
            id="bedtime_consistency",
            title="Bedtime Consistency Map",
            why_it_matters=(
                "Bedtime regularity improves sleep quality and circadian alignment; "
                "deviations can erode sleep score."
            ),
            science_notes=tuple(kb.findings("sleep", 3, 4)),
            charts=(
                HistogramChart(
                    title="Bedtime distribution (minutes from midnight UTC)",
                    key="bedtime_clock_min",
                    bins=tuple(bedtime_bins),
                ),
                ScatterChart("Bedtime deviation vs Sleep score", "bedtime_deviation_min", "sleep_score"),
            ),
            key_findings=("Look for a ‘sweet spot’ range where sleep scores cluster higher.",),
        ),
        DashboardCard(
            id="breathing_oxygen",
            title="Breathing & Oxygen",
            why_it_matters=(
                "Oxygen saturation and breathing disturbances can surface subtle "
                "recovery or respiratory issues."
            ),
            science_notes=(
                "Lower SpO₂ or higher breathing disturbance index can coincide with worse recovery.",
            ),
            charts=(
                ScatterChart("SpO₂ average vs Sleep score", "spo2_avg", "sleep_score"),
                ScatterChart(
                    "Breathing disturbance vs Readiness", "breathing_disturbance_index", "readiness_score"
                ),
            ),
            key_findings=("If breathing disturbance increases, check for sleep score drops.",),
        ),
        DashboardCard(
            id="correlation_overview",
            title="Correlation Overview",
            why_it_matters=(
                "Shared weekly trends can make unrelated metrics look coupled; "
                "comparing raw and detrended matrices separates the two."
            ),
            science_notes=(
                "Correlation is not causation; small samples produce unstable coefficients.",
            ),
            charts=(
                HeatmapChart(title=f"{correlation.method.value.title()} correlation", data=correlation),
                HeatmapChart(
                    title=f"{correlation_detrended.method.value.title()} correlation (detrended)",
                    data=correlation_detrended,
                ),
            ),
            key_findings=("Pairs that stay strong after detrending are the most trustworthy.",),
        ),
    ]


def build_dashboards(
    records: CategoryRecords,
    config: AnalysisConfig | None = None,
    knowledge: KnowledgeBase = DEFAULT_KNOWLEDGE,
) -> DashboardsResult:
    """Run the full dashboard pipeline over *records*."""
    config = config or AnalysisConfig()

    rows = build_daily_rows(records)
    log.debug("Building dashboards over %d days (%s, max lag %d)",
             len(rows), config.method.value, config.max_lag_days)

    correlation = correlation_matrix(rows, METRIC_KEYS, config.method)
    correlation_detrended = correlation_matrix_detrended(
        rows, METRIC_KEYS, config.method, window=config.detrend_window
    )
    lag_analyses = compute_lag_analyses(rows, config.max_lag_days, config.method)

    bedtimes = [r.bedtime_clock_min for r in rows if is_number(r.bedtime_clock_min)]
    bedtime_bins = histogram(bedtimes, config.bedtime_bin_min, 0, MINUTES_PER_DAY)

    cards = _build_cards(lag_analyses[0], bedtime_bins, correlation, correlation_detrended, knowledge)

    result = DashboardsResult(
        summary=DashboardSummary(days=len(rows), social_jetlag_min=social_jetlag(rows)),
        daily_rows=rows,
        correlation=correlation,
        correlation_detrended=correlation_detrended,
        lag_analyses=lag_analyses,
        cards=cards,
    )
    log.debug("%r", result)
    return result
