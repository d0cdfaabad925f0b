"""Markdown renderings of insight and dashboard results, plus chart series."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Sequence

from ringlab.analytics.dashboards import DashboardsResult
from ringlab.analytics.insights import HealthInsights, round_half_up
from ringlab.analytics.stats import is_number
from ringlab.records import CategoryRecords

BAR_CELLS = 20
RULE = "-" * 70
DOUBLE_RULE = "=" * 70


def rating_symbol(score: float) -> str:
    if score >= 85:
        return "🌟"
    if score >= 70:
        return "✅"
    if score >= 55:
        return "⚠️"
    return "🔴"


def trend_symbol(trend: str) -> str:
    if trend == "improving":
        return "📈"
    if trend == "declining":
        return "📉"
    return "➡️"


def progress_bar(value: float, maximum: float, label: str | None = None) -> str:
    """``label: [████░░…] 80% ✅``, 20 cells, capped at 100%."""
    pct = min(value / maximum * 100, 100) if maximum else 0.0
    pct = max(pct, 0.0)
    filled = int(round_half_up(pct / (100 / BAR_CELLS)))
    bar = "█" * filled + "░" * (BAR_CELLS - filled)
    prefix = f"{label}: " if label else ""
    return f"{prefix}[{bar}] {int(round_half_up(pct))}% {rating_symbol(pct)}"


def _bullets(title: str, items: Iterable[str]) -> list[str]:
    items = list(items)
    if not items:
        return []
    return [f"\n{title}:"] + [f"- {i}" for i in items]


def format_insights(insights: HealthInsights, include_recommendations: bool = True) -> str:
    """Multi-section markdown report."""
    s = insights
    lines = [
        "# 📊 Health Insights Report",
        "",
        f"📈 **Days Analyzed:** {s.summary.days_analyzed} days",
        "",
        DOUBLE_RULE,
        "",
        "## 😴 SLEEP",
        "",
        progress_bar(s.sleep.avg_score, 100, "Sleep score"),
        f"Trend: {trend_symbol(s.sleep.trend)} {s.sleep.trend}",
        f"Consistency: {s.sleep.consistency_score}%",
    ]
    if s.sleep.best_day:
        lines.append(f"Best day: {s.sleep.best_day}")
    if s.sleep.worst_day:
        lines.append(f"Worst day: {s.sleep.worst_day}")
    lines += _bullets("Insights", s.sleep.insights)
    lines += ["", RULE, "", "## 🏃 ACTIVITY", ""]

    lines += [
        progress_bar(s.activity.avg_score, 100, "Activity score"),
        f"Steps/day: {s.activity.avg_steps:,}",
        f"Workout frequency: {s.activity.workout_frequency}/day",
        f"Trend: {trend_symbol(s.activity.trend)} {s.activity.trend}",
    ]
    lines += _bullets("Insights", s.activity.insights)
    lines += ["", RULE, "", "## 💪 READINESS", ""]

    lines += [
        progress_bar(s.readiness.avg_score, 100, "Readiness score"),
        f"Trend: {trend_symbol(s.readiness.trend)} {s.readiness.trend}",
        f"Well-rested days: {s.readiness.well_rested_days}",
        f"Low readiness days: {s.readiness.low_readiness_days}",
    ]
    lines += _bullets("Insights", s.readiness.insights)
    lines += ["", RULE, "", "## 🧘 STRESS", ""]

    lines += [
        f"Avg high-stress: {s.stress.avg_stress_time} min/day",
        f"Avg high-recovery: {s.stress.avg_recovery_time} min/day",
        f"Stressed days: {s.stress.stressed_days}",
        f"Restored days: {s.stress.restored_days}",
    ]
    lines += _bullets("Insights", s.stress.insights)
    lines += ["", RULE, "", "## 🏋️ WORKOUTS", ""]

    lines.append(f"Total workouts: {s.workouts.total_workouts}")
    if s.workouts.top_activities:
        lines.append("Top activities:")
        lines += [f"- {a.activity}: {a.count}" for a in s.workouts.top_activities]
    lines += ["", RULE, "", "## 🧾 SUMMARY", ""]

    score = s.summary.overall_health_score
    km = s.summary.key_metrics
    lines += [
        f"Overall health score: {score} {rating_symbol(score)}",
        f"Avg sleep/activity/readiness: "
        f"{km.avg_sleep_score}/{km.avg_activity_score}/{km.avg_readiness_score}",
    ]
    lines += _bullets("Key insights", s.key_insights)

    if include_recommendations and s.recommendations:
        lines += ["", DOUBLE_RULE, "", "## 🎯 RECOMMENDATIONS", ""]
        for r in s.recommendations:
            lines.append(f"### {r.category} ({r.priority})")
            lines.append(f"- {r.recommendation}")
            if r.rationale:
                lines.append(f"- Rationale: {r.rationale}")
            if r.protocol:
                lines.append(f"- Protocol: {r.protocol.name}")
            if r.action_steps:
                lines.append("- Action steps:")
                lines += [f"  - {step}" for step in r.action_steps]
            lines.append("")

    return "\n".join(lines)


def format_dashboards(result: DashboardsResult) -> str:
    """Short markdown digest of a dashboard run."""
    jetlag = result.summary.social_jetlag_min
    lines = [
        "# Dashboards",
        "",
        f"Days: {result.summary.days}",
        f"Social jetlag: {'n/a' if jetlag is None else f'{jetlag:.0f} min'}",
        "",
    ]
    for analysis in result.lag_analyses:
        best = (
            "n/a" if analysis.best_lag is None
            else f"{analysis.best_lag:+d} days (r={analysis.best_r:.2f})"
        )
        lines.append(f"- {analysis.title}: best lag {best}")
    lines.append("")

    for card in result.cards:
        lines.append(f"## {card.title}")
        lines.append("")
        lines.append(card.why_it_matters)
        lines += _bullets("Science", card.science_notes)
        lines += _bullets("Look for", card.key_findings)
        lines.append("")

    lines.append("## Notes")
    lines.append("")
    lines += [f"- {note}" for note in result.granularity_notes]
    lines.append(
        "- Correlations are associations over your own history; "
        "they do not establish cause and can shift as more days arrive."
    )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Chart series
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeriesPoint:
    x: str
    y: float | None


@dataclass(frozen=True)
class ScoreSeries:
    name: str
    points: tuple[SeriesPoint, ...]


def _series(name: str, items: Iterable[Any], pick: Callable[[Any], Any]) -> ScoreSeries:
    points = []
    for item in sorted(items, key=lambda i: i.day):
        value = pick(item)
        points.append(SeriesPoint(item.day, float(value) if is_number(value) else None))
    return ScoreSeries(name, tuple(points))


def _per_minute(seconds: float | None) -> float | None:
    return seconds / 60 if is_number(seconds) else None


def daily_score_series(records: CategoryRecords) -> list[ScoreSeries]:
    """Per-day score series sorted by day; missing values are None."""
    return [
        _series("Sleep score", records.sleep, lambda d: d.score),
        _series("Activity score", records.activity, lambda d: d.score),
        _series("Readiness score", records.readiness, lambda d: d.score),
        _series("Steps", records.activity, lambda d: d.steps),
        _series("Stress high (min)", records.stress, lambda d: _per_minute(d.stress_high)),
        _series("Recovery high (min)", records.stress, lambda d: _per_minute(d.recovery_high)),
    ]


def series_to_dict(series: Iterable[ScoreSeries]) -> dict[str, list[dict[str, Any]]]:
    """Series keyed by name, each point as ``{"x": day, "y": value}``."""
    return {s.name: [asdict(p) for p in s.points] for s in series}


def _cell(value: float) -> str:
    value = round_half_up(value, 1)
    return str(int(value)) if value.is_integer() else f"{value:.1f}"


def format_series(series: Sequence[ScoreSeries]) -> str:
    """Markdown table with one row per day and one column per series."""
    days = sorted({p.x for s in series for p in s.points})
    if not days:
        return "No daily scores."

    lookup = [{p.x: p.y for p in s.points} for s in series]
    lines = [
        "| Day | " + " | ".join(s.name for s in series) + " |",
        "|---" * (len(series) + 1) + "|",
    ]
    for day in days:
        cells = []
        for values in lookup:
            value = values.get(day)
            cells.append("-" if value is None else _cell(value))
        lines.append(f"| {day} | " + " | ".join(cells) + " |")
    return "\n".join(lines)
