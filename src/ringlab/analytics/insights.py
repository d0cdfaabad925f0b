"""Trend and insight summarizer over the daily category lists.

Unlike the dashboard pipeline this reads the sleep / activity / readiness /
stress / workout lists directly, without building day rows, and reports
plain same-day Pearson correlations.
"""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Literal, Sequence

from ringlab.analytics.stats import is_number, mean, pearson, pstdev
from ringlab.knowledge import (
    DEFAULT_KNOWLEDGE,
    RECOVERY_PROTOCOL,
    SLEEP_PROTOCOL,
    STRESS_PROTOCOL,
    HealthProtocol,
    KnowledgeBase,
    ScientificReference,
)
from ringlab.records import CategoryRecords

log = logging.getLogger(__name__)

Trend = Literal["improving", "declining", "stable"]

TREND_MIN_VALUES = 7
TREND_THRESHOLD = 2.0
WELL_RESTED_SCORE = 80
LOW_READINESS_SCORE = 65

ENDPOINTS_USED: tuple[str, ...] = (
    "daily_sleep",
    "daily_activity",
    "daily_readiness",
    "daily_stress",
    "workout",
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties toward +inf (``round(2.5) == 3``, ``round(-2.5) == -2``)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _round(value: float) -> int:
    return int(round_half_up(value))


def classify_trend(values: Sequence[float]) -> Trend:
    """Compare the mean of the second half against the first half."""
    if len(values) < TREND_MIN_VALUES:
        return "stable"
    mid = len(values) // 2
    diff = mean(values[mid:]) - mean(values[:mid])
    if diff > TREND_THRESHOLD:
        return "improving"
    if diff < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def consistency_score(values: Sequence[float]) -> int:
    """``max(0, round(100 - 3 * population stdev))``."""
    return max(0, _round(100 - pstdev(values) * 3))


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class KeyMetrics:
    avg_sleep_score: int = 0
    avg_activity_score: int = 0
    avg_readiness_score: int = 0
    avg_stress_level: int = 0


@dataclass
class InsightSummary:
    days_analyzed: int = 0
    overall_health_score: int = 0
    key_metrics: KeyMetrics = field(default_factory=KeyMetrics)


@dataclass
class SleepInsights:
    avg_score: int = 0
    trend: Trend = "stable"
    best_day: str | None = None
    worst_day: str | None = None
    consistency_score: int = 0
    insights: list[str] = field(default_factory=list)


@dataclass
class ActivityInsights:
    avg_score: int = 0
    avg_steps: int = 0
    workout_frequency: float = 0.0
    trend: Trend = "stable"
    insights: list[str] = field(default_factory=list)


@dataclass
class ReadinessInsights:
    avg_score: int = 0
    well_rested_days: int = 0
    low_readiness_days: int = 0
    trend: Trend = "stable"
    insights: list[str] = field(default_factory=list)


@dataclass
class StressInsights:
    avg_stress_time: int = 0
    avg_recovery_time: int = 0
    stressed_days: int = 0
    restored_days: int = 0
    insights: list[str] = field(default_factory=list)


@dataclass
class ActivityCount:
    activity: str
    count: int


@dataclass
class WorkoutInsights:
    total_workouts: int = 0
    intensity_distribution: dict[str, int] = field(default_factory=dict)
    top_activities: list[ActivityCount] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


@dataclass
class Correlations:
    sleep_readiness: float | None = None
    activity_sleep: float | None = None
    stress_sleep: float | None = None


@dataclass
class Recommendation:
    category: str
    priority: Literal["HIGH", "MEDIUM", "LOW"]
    recommendation: str
    rationale: str | None = None
    protocol: HealthProtocol | None = None
    action_steps: list[str] | None = None


@dataclass
class HealthInsights:
    summary: InsightSummary = field(default_factory=InsightSummary)
    sleep: SleepInsights = field(default_factory=SleepInsights)
    activity: ActivityInsights = field(default_factory=ActivityInsights)
    readiness: ReadinessInsights = field(default_factory=ReadinessInsights)
    stress: StressInsights = field(default_factory=StressInsights)
    workouts: WorkoutInsights = field(default_factory=WorkoutInsights)
    correlations: Correlations = field(default_factory=Correlations)
    recommendations: list[Recommendation] = field(default_factory=list)
    key_insights: list[str] = field(default_factory=list)
    science: dict[str, tuple[ScientificReference, ...]] = field(default_factory=dict)
    endpoints_used: list[str] = field(default_factory=lambda: list(ENDPOINTS_USED))

    def __repr__(self) -> str:
        return (
            f"HealthInsights(days={self.summary.days_analyzed}, "
            f"score={self.summary.overall_health_score}, "
            f"recs={len(self.recommendations)})"
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _scores(items: Iterable[Any], attr: str = "score") -> list[tuple[str, float]]:
    """(day, value) pairs for the items whose *attr* is a number."""
    return [(i.day, float(getattr(i, attr))) for i in items if is_number(getattr(i, attr))]


def _sleep_section(records: CategoryRecords, kb: KnowledgeBase) -> SleepInsights:
    out = SleepInsights()
    scored = _scores(records.sleep)
    if not scored:
        return out
    scores = [s for _, s in scored]
    out.avg_score = _round(mean(scores))
    out.trend = classify_trend(scores)

    # First max wins for best; last min wins for worst.
    best = max(scores)
    worst = min(scores)
    out.best_day = next(day for day, s in scored if s == best)
    out.worst_day = next(day for day, s in reversed(scored) if s == worst)

    out.consistency_score = consistency_score(scores)
    out.insights.append(
        f"Your average sleep score is {out.avg_score} ({kb.interpret(out.avg_score, 'sleep_score')})."
    )
    if out.consistency_score < 70:
        out.insights.append(
            "Sleep consistency appears variable. Stabilizing bedtime/wake time often improves scores."
        )
    return out


def _activity_section(records: CategoryRecords, days: int, kb: KnowledgeBase) -> ActivityInsights:
    out = ActivityInsights()
    if not records.activity:
        return out
    scores = [s for _, s in _scores(records.activity)]
    steps = [s for _, s in _scores(records.activity, "steps")]
    out.avg_score = _round(mean(scores))
    out.trend = classify_trend(scores)
    out.avg_steps = _round(mean(steps))
    if records.workouts:
        out.workout_frequency = round_half_up(len(records.workouts) / max(1, days), 1)

    interp = kb.interpret(out.avg_score, "activity_score")
    out.insights.append(
        f"Your average activity score is {out.avg_score} ({interp})."
        if interp
        else f"Your average activity score is {out.avg_score}."
    )
    out.insights.append(f"Average steps: {out.avg_steps:,}/day.")
    return out


def _readiness_section(records: CategoryRecords, kb: KnowledgeBase) -> ReadinessInsights:
    out = ReadinessInsights()
    if not records.readiness:
        return out
    scores = [s for _, s in _scores(records.readiness)]
    out.avg_score = _round(mean(scores))
    out.trend = classify_trend(scores)
    out.well_rested_days = sum(1 for s in scores if s >= WELL_RESTED_SCORE)
    out.low_readiness_days = sum(1 for s in scores if s < LOW_READINESS_SCORE)
    out.insights.append(
        f"Your average readiness score is {out.avg_score} "
        f"({kb.interpret(out.avg_score, 'readiness_score')})."
    )
    return out


def _stress_section(records: CategoryRecords) -> StressInsights:
    out = StressInsights()
    if not records.stress:
        return out
    # Stress durations arrive in seconds.
    out.avg_stress_time = _round(mean([s for _, s in _scores(records.stress, "stress_high")]) / 60)
    out.avg_recovery_time = _round(mean([s for _, s in _scores(records.stress, "recovery_high")]) / 60)
    out.stressed_days = sum(1 for d in records.stress if d.day_summary == "stressed")
    out.restored_days = sum(1 for d in records.stress if d.day_summary == "restored")
    out.insights.append(f"Average high-stress time: {out.avg_stress_time} min/day.")
    out.insights.append(f"Average high-recovery time: {out.avg_recovery_time} min/day.")
    return out


def _workout_section(records: CategoryRecords) -> WorkoutInsights:
    out = WorkoutInsights(total_workouts=len(records.workouts))
    if not records.workouts:
        return out
    out.intensity_distribution = dict(Counter(str(w.intensity) for w in records.workouts))
    # most_common keeps first-seen order among equal counts.
    activities = Counter(str(w.activity) for w in records.workouts)
    out.top_activities = [ActivityCount(a, c) for a, c in activities.most_common(5)]
    return out


def _correlations(records: CategoryRecords) -> Correlations:
    sleep = dict(_scores(records.sleep))
    activity = dict(_scores(records.activity))
    readiness = dict(_scores(records.readiness))
    stress = dict(_scores(records.stress, "stress_high"))

    # name -> (x by day, y by day)
    pairs = {
        "sleep_readiness": (sleep, readiness),
        "activity_sleep": (activity, sleep),
        "stress_sleep": (stress, sleep),
    }
    days = sorted(set(sleep) | set(activity) | set(readiness) | set(stress))

    result: dict[str, float | None] = {}
    for name, (x_by_day, y_by_day) in pairs.items():
        xs: list[float] = []
        ys: list[float] = []
        for day in days:
            if day in x_by_day and day in y_by_day:
                xs.append(x_by_day[day])
                ys.append(y_by_day[day])
        result[name] = pearson(xs, ys)
    return Correlations(**result)


def _recommendations(insights: HealthInsights, kb: KnowledgeBase) -> list[Recommendation]:
    protocols = kb.recommended_protocols(
        sleep_avg=insights.sleep.avg_score,
        avg_steps=insights.activity.avg_steps,
        well_rested_days=insights.readiness.well_rested_days,
        days_analyzed=insights.summary.days_analyzed,
        stressed_days=insights.stress.stressed_days,
        restored_days=insights.stress.restored_days,
    )

    def attached(name: str) -> HealthProtocol | None:
        return next((p for p in protocols if p.name == name), None)

    recs: list[Recommendation] = []
    sleep, activity, readiness, stress = (
        insights.sleep, insights.activity, insights.readiness, insights.stress,
    )
    if 0 < sleep.avg_score < 70:
        recs.append(Recommendation(
            category="🌙 Sleep Quality Optimization",
            priority="HIGH",
            recommendation=(
                "Your average sleep score is below optimal. "
                "Implement evidence-based sleep hygiene protocol."
            ),
            rationale=(
                "Sleep scores below 70 indicate significant room for improvement. "
                "Sleep consistency and timing often matter more than duration alone."
            ),
            protocol=attached(SLEEP_PROTOCOL),
        ))
    if 0 < activity.avg_steps < 7000:
        recs.append(Recommendation(
            category="🏃 Daily Movement",
            priority="MEDIUM",
            recommendation=(
                "Increase daily step count to reach the minimum threshold "
                "associated with meaningful health benefits."
            ),
            rationale=f"Current average ({activity.avg_steps} steps) is below 7,000 steps/day.",
            action_steps=[
                "Add 1,000-2,000 steps daily (gradual increase)",
                "Take a 10-15 minute walk after meals",
                "Break up long sitting periods with short movement breaks",
            ],
        ))
    if 0 < readiness.avg_score < 75:
        recs.append(Recommendation(
            category="💪 Recovery Optimization",
            priority="HIGH",
            recommendation="Prioritize recovery to prevent overreaching and improve readiness.",
            rationale=(
                f"Low readiness (avg {readiness.avg_score}) suggests insufficient recovery. "
                "Consider reducing intensity on low-readiness days."
            ),
            protocol=attached(RECOVERY_PROTOCOL),
        ))
    if stress.stressed_days > stress.restored_days:
        recs.append(Recommendation(
            category="🧘 Stress Management",
            priority="HIGH",
            recommendation=(
                "Implement a daily stress reduction protocol to improve recovery and sleep quality."
            ),
            rationale=(
                f"More stressed days ({stress.stressed_days}) than restored "
                f"({stress.restored_days}) can indicate chronic stress load."
            ),
            protocol=attached(STRESS_PROTOCOL),
        ))
    return recs


def _key_insights(insights: HealthInsights, n_readiness: int) -> list[str]:
    out: list[str] = []
    if insights.sleep.trend == "declining":
        out.append("⚠️ Your sleep quality trend is declining. Review recent lifestyle changes.")
    if insights.activity.workout_frequency > 5:
        out.append("💡 High workout frequency detected. Ensure adequate recovery between sessions.")
    if n_readiness > 0 and insights.readiness.well_rested_days / n_readiness < 0.5:
        out.append(
            "📊 You're well-rested less than 50% of the time. Consider optimizing sleep and recovery."
        )
    return out


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def analyze_health_data(
    records: CategoryRecords,
    knowledge: KnowledgeBase = DEFAULT_KNOWLEDGE,
) -> HealthInsights:
    """Summarise averages, trends, correlations and recommendations."""
    days = max(len(records.sleep), len(records.activity), len(records.readiness), len(records.stress))

    insights = HealthInsights(
        summary=InsightSummary(days_analyzed=days),
        sleep=_sleep_section(records, knowledge),
        activity=_activity_section(records, days, knowledge),
        readiness=_readiness_section(records, knowledge),
        stress=_stress_section(records),
        workouts=_workout_section(records),
        correlations=_correlations(records),
        science={topic: knowledge.science(topic) for topic in ("sleep", "hrv", "activity", "stress")},
    )

    parts = [
        s for s in (insights.sleep.avg_score, insights.activity.avg_score, insights.readiness.avg_score)
        if s > 0
    ]
    insights.summary.overall_health_score = _round(mean(parts)) if parts else 0
    insights.summary.key_metrics = KeyMetrics(
        avg_sleep_score=insights.sleep.avg_score,
        avg_activity_score=insights.activity.avg_score,
        avg_readiness_score=insights.readiness.avg_score,
        avg_stress_level=insights.stress.avg_stress_time,
    )

    insights.recommendations = _recommendations(insights, knowledge)
    insights.key_insights = _key_insights(insights, len(records.readiness))

    log.debug("Analysed %d days: %r", days, insights)
    return insights
