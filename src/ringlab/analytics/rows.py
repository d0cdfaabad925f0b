"""Daily-row builder: fold every category into one row per calendar day.

Two stages, both pure:

1. :func:`build_raw_rows` copies fields from each category record into a
   per-day row.  A day seen in any category gets a row; fields from
   categories without data for that day stay ``None``.
2. :func:`derive_fields` sorts the rows and adds the fields that need a
   second look: clock-minute conversions, midsleep, and the deviation from
   the median bedtime across all days.

:func:`social_jetlag` then compares weekend and weekday midsleep.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ringlab.analytics.stats import is_number, median
from ringlab.dates import MINUTES_PER_DAY, clock_minutes, is_weekend
from ringlab.records import CategoryRecords

log = logging.getLogger(__name__)

# Per-workout weights summed into workout_intensity_score.
INTENSITY_WEIGHTS: Mapping[str, int] = MappingProxyType({"easy": 1, "moderate": 2, "hard": 3})
DEFAULT_INTENSITY_WEIGHT = 1


@dataclass(frozen=True)
class DailyRow:
    """All metrics known for one calendar day.  ``None`` means no data."""

    day: str

    # Daily scores / summaries
    sleep_score: float | None = None
    activity_score: float | None = None
    readiness_score: float | None = None
    stress_high_min: float | None = None
    recovery_high_min: float | None = None
    steps: float | None = None
    total_calories: float | None = None
    active_calories: float | None = None
    resilience_level: str | None = None
    spo2_avg: float | None = None
    breathing_disturbance_index: float | None = None
    cardiovascular_age: float | None = None
    vo2_max: float | None = None

    # Detailed sleep
    sleep_duration_h: float | None = None
    sleep_efficiency: float | None = None
    avg_hr: float | None = None
    avg_hrv: float | None = None
    temperature_delta: float | None = None
    respiratory_rate: float | None = None
    deep_pct: float | None = None
    rem_pct: float | None = None
    light_pct: float | None = None
    awake_pct: float | None = None
    bedtime_start: str | None = None
    bedtime_end: str | None = None

    # Derived in the second pass
    bedtime_clock_min: int | None = None
    wake_clock_min: int | None = None
    midsleep_clock_min: float | None = None
    bedtime_deviation_min: float | None = None

    # Workouts
    workout_count: int | None = None
    workout_intensity_score: int | None = None

    def value(self, key: str) -> Any:
        """Field lookup by name; raises ValueError for unknown keys."""
        if key not in ROW_FIELDS:
            raise ValueError(f"unknown DailyRow field: {key!r}")
        return getattr(self, key)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ROW_FIELDS = frozenset(f.name for f in fields(DailyRow))


# ---------------------------------------------------------------------------
# Stage 1: raw fields
# ---------------------------------------------------------------------------


def _minutes(seconds: float | None) -> float | None:
    return seconds / 60 if seconds is not None else None


def _pct(part: float | None, total: float) -> float | None:
    return part / total * 100 if part is not None else None


def build_raw_rows(records: CategoryRecords) -> dict[str, DailyRow]:
    """Fold all category records into ``{day: DailyRow}`` (raw fields only)."""
    by_day: dict[str, dict[str, Any]] = {}

    def ensure(day: str) -> dict[str, Any]:
        return by_day.setdefault(day, {})

    for d in records.sleep:
        ensure(d.day)["sleep_score"] = d.score

    for d in records.activity:
        row = ensure(d.day)
        row["activity_score"] = d.score
        row["steps"] = d.steps
        row["total_calories"] = d.total_calories
        row["active_calories"] = d.active_calories

    for d in records.readiness:
        ensure(d.day)["readiness_score"] = d.score

    for d in records.stress:
        row = ensure(d.day)
        row["stress_high_min"] = _minutes(d.stress_high)
        row["recovery_high_min"] = _minutes(d.recovery_high)

    for d in records.resilience:
        ensure(d.day)["resilience_level"] = d.level

    for d in records.spo2:
        row = ensure(d.day)
        row["spo2_avg"] = d.spo2_average
        row["breathing_disturbance_index"] = d.breathing_disturbance_index

    for d in records.cardio_age:
        ensure(d.day)["cardiovascular_age"] = d.cardiovascular_age

    for d in records.vo2_max:
        ensure(d.day)["vo2_max"] = d.vo2_max

    # Several periods may share a day; a later period only overrides the
    # values it actually has.
    for s in records.sleep_detailed:
        row = ensure(s.day)
        if s.total_sleep_duration:
            row["sleep_duration_h"] = s.total_sleep_duration / 3600
        for src, dst in (
            ("efficiency", "sleep_efficiency"),
            ("average_heart_rate", "avg_hr"),
            ("average_hrv", "avg_hrv"),
            ("temperature_delta", "temperature_delta"),
            ("respiratory_rate", "respiratory_rate"),
            ("bedtime_start", "bedtime_start"),
            ("bedtime_end", "bedtime_end"),
        ):
            value = getattr(s, src)
            if value is not None:
                row[dst] = value

        total = s.total_sleep_duration
        if total is not None and total > 0:
            row["deep_pct"] = _pct(s.deep_sleep_duration, total)
            row["rem_pct"] = _pct(s.rem_sleep_duration, total)
            row["light_pct"] = _pct(s.light_sleep_duration, total)
            row["awake_pct"] = _pct(s.awake_time or 0, total)

    workout_totals: dict[str, list[int]] = {}
    for w in records.workouts:
        totals = workout_totals.setdefault(w.day, [0, 0])
        totals[0] += 1
        totals[1] += INTENSITY_WEIGHTS.get(w.intensity or "", DEFAULT_INTENSITY_WEIGHT)
    for day, (count, score) in workout_totals.items():
        row = ensure(day)
        row["workout_count"] = count
        row["workout_intensity_score"] = score

    log.debug("Built %d raw day rows", len(by_day))
    return {day: DailyRow(day=day, **values) for day, values in by_day.items()}


# ---------------------------------------------------------------------------
# Stage 2: derived fields
# ---------------------------------------------------------------------------


def derive_fields(rows: Mapping[str, DailyRow]) -> list[DailyRow]:
    """Return the rows sorted by day with clock/midsleep/deviation fields set."""
    ordered = sorted(rows.values(), key=lambda r: r.day)

    bedtimes = [clock_minutes(r.bedtime_start) for r in ordered]
    bedtime_median = median([m for m in bedtimes if m is not None])

    derived: list[DailyRow] = []
    for row, bedtime in zip(ordered, bedtimes):
        midsleep = None
        if bedtime is not None and row.sleep_duration_h is not None:
            midsleep = (bedtime + row.sleep_duration_h * 60 * 0.5) % MINUTES_PER_DAY
        deviation = None
        if bedtime_median is not None and bedtime is not None:
            deviation = bedtime - bedtime_median
        derived.append(
            replace(
                row,
                bedtime_clock_min=bedtime,
                wake_clock_min=clock_minutes(row.bedtime_end),
                midsleep_clock_min=midsleep,
                bedtime_deviation_min=deviation,
            )
        )
    return derived


def build_daily_rows(records: CategoryRecords) -> list[DailyRow]:
    """Both stages: sorted, fully derived day rows."""
    return derive_fields(build_raw_rows(records))


def social_jetlag(rows: Iterable[DailyRow]) -> float | None:
    """Absolute weekend-vs-weekday difference of median midsleep (minutes).

    None when either side has no midsleep values.
    """
    weekend: list[float] = []
    weekday: list[float] = []
    for row in rows:
        if not is_number(row.midsleep_clock_min):
            continue
        (weekend if is_weekend(row.day) else weekday).append(row.midsleep_clock_min)

    weekend_mid = median(weekend)
    weekday_mid = median(weekday)
    if weekend_mid is None or weekday_mid is None:
        return None
    return abs(weekend_mid - weekday_mid)
