"""Typed per-category daily records as returned by the ring cloud API.

Every record carries a ``day`` key (``YYYY-MM-DD``).  The fetch layer hands
us plain JSON dicts; :meth:`CategoryRecords.from_dict` turns an export of
all categories into frozen dataclasses.  Parsing is lenient: a missing or
non-numeric field becomes ``None`` rather than an error, and entries without
a ``day`` are skipped.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

log = logging.getLogger(__name__)


def _number(value: Any) -> float | int | None:
    """Return *value* if it is a finite number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SampleSeries:
    """A fixed-interval numeric series block (``{interval, items, timestamp}``)."""

    interval: float
    items: tuple[float | None, ...]
    timestamp: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SampleSeries | None:
        if not isinstance(data, Mapping):
            return None
        items = data.get("items") or []
        return cls(
            interval=_number(data.get("interval")) or 0,
            items=tuple(_number(v) for v in items),
            timestamp=_text(data.get("timestamp")),
        )


# ---------------------------------------------------------------------------
# Daily categories
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailySleep:
    day: str
    score: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailySleep:
        return cls(day=data["day"], score=_number(data.get("score")))


@dataclass(frozen=True)
class DailyActivity:
    day: str
    score: float | None = None
    steps: float | None = None
    total_calories: float | None = None
    active_calories: float | None = None
    class_5_min: str | None = None
    met: SampleSeries | None = None
    timestamp: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyActivity:
        return cls(
            day=data["day"],
            score=_number(data.get("score")),
            steps=_number(data.get("steps")),
            total_calories=_number(data.get("total_calories")),
            active_calories=_number(data.get("active_calories")),
            class_5_min=_text(data.get("class_5_min")),
            met=SampleSeries.from_dict(data.get("met")),
            timestamp=_text(data.get("timestamp")),
        )


@dataclass(frozen=True)
class DailyReadiness:
    day: str
    score: float | None = None
    temperature_deviation: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyReadiness:
        return cls(
            day=data["day"],
            score=_number(data.get("score")),
            temperature_deviation=_number(data.get("temperature_deviation")),
        )


@dataclass(frozen=True)
class DailyStress:
    """Daily stress summary.  ``stress_high`` / ``recovery_high`` are seconds."""

    day: str
    stress_high: float | None = None
    recovery_high: float | None = None
    day_summary: str | None = None  # "restored" | "normal" | "stressed"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyStress:
        return cls(
            day=data["day"],
            stress_high=_number(data.get("stress_high")),
            recovery_high=_number(data.get("recovery_high")),
            day_summary=_text(data.get("day_summary")),
        )


@dataclass(frozen=True)
class DailyResilience:
    day: str
    level: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyResilience:
        return cls(day=data["day"], level=_text(data.get("level")))


@dataclass(frozen=True)
class DailySpo2:
    day: str
    spo2_average: float | None = None
    breathing_disturbance_index: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailySpo2:
        pct = data.get("spo2_percentage")
        average = pct.get("average") if isinstance(pct, Mapping) else None
        return cls(
            day=data["day"],
            spo2_average=_number(average),
            breathing_disturbance_index=_number(data.get("breathing_disturbance_index")),
        )


@dataclass(frozen=True)
class DailyCardiovascularAge:
    day: str
    cardiovascular_age: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DailyCardiovascularAge:
        return cls(day=data["day"], cardiovascular_age=_number(data.get("cardiovascular_age")))


@dataclass(frozen=True)
class VO2Max:
    day: str
    vo2_max: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VO2Max:
        return cls(day=data["day"], vo2_max=_number(data.get("vo2_max")))


@dataclass(frozen=True)
class Workout:
    day: str
    activity: str | None = None
    intensity: str | None = None  # "easy" | "moderate" | "hard"
    calories: float | None = None
    distance: float | None = None
    start_datetime: str | None = None
    end_datetime: str | None = None
    heart_rate: SampleSeries | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Workout:
        return cls(
            day=data["day"],
            activity=_text(data.get("activity")),
            intensity=_text(data.get("intensity")),
            calories=_number(data.get("calories")),
            distance=_number(data.get("distance")),
            start_datetime=_text(data.get("start_datetime")),
            end_datetime=_text(data.get("end_datetime")),
            heart_rate=SampleSeries.from_dict(data.get("heart_rate")),
        )


@dataclass(frozen=True)
class SleepPeriod:
    """One detailed sleep period (summary numbers plus encoded series).

    Durations are seconds.  A day may hold several periods (naps, rests).
    """

    day: str
    bedtime_start: str | None = None
    bedtime_end: str | None = None
    type: str | None = None
    total_sleep_duration: float | None = None
    deep_sleep_duration: float | None = None
    light_sleep_duration: float | None = None
    rem_sleep_duration: float | None = None
    awake_time: float | None = None
    efficiency: float | None = None
    latency: float | None = None
    average_heart_rate: float | None = None
    lowest_heart_rate: float | None = None
    average_hrv: float | None = None
    temperature_delta: float | None = None
    respiratory_rate: float | None = None
    heart_rate: SampleSeries | None = None
    hrv: SampleSeries | None = None
    sleep_phase_5_min: str | None = None
    movement_30_sec: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SleepPeriod:
        return cls(
            day=data["day"],
            bedtime_start=_text(data.get("bedtime_start")),
            bedtime_end=_text(data.get("bedtime_end")),
            type=_text(data.get("type")),
            total_sleep_duration=_number(data.get("total_sleep_duration")),
            deep_sleep_duration=_number(data.get("deep_sleep_duration")),
            light_sleep_duration=_number(data.get("light_sleep_duration")),
            rem_sleep_duration=_number(data.get("rem_sleep_duration")),
            awake_time=_number(data.get("awake_time")),
            efficiency=_number(data.get("efficiency")),
            latency=_number(data.get("latency")),
            average_heart_rate=_number(data.get("average_heart_rate")),
            lowest_heart_rate=_number(data.get("lowest_heart_rate")),
            average_hrv=_number(data.get("average_hrv")),
            temperature_delta=_number(data.get("temperature_delta")),
            respiratory_rate=_number(data.get("respiratory_rate")),
            heart_rate=SampleSeries.from_dict(data.get("heart_rate")),
            hrv=SampleSeries.from_dict(data.get("hrv")),
            sleep_phase_5_min=_text(data.get("sleep_phase_5_min")),
            movement_30_sec=_text(data.get("movement_30_sec")),
        )


# ---------------------------------------------------------------------------
# Bundle of all categories for one date range
# ---------------------------------------------------------------------------

# Export key (also the CategoryRecords attribute) -> record class
_CATEGORIES: dict[str, type] = {
    "sleep": DailySleep,
    "activity": DailyActivity,
    "readiness": DailyReadiness,
    "stress": DailyStress,
    "resilience": DailyResilience,
    "spo2": DailySpo2,
    "cardio_age": DailyCardiovascularAge,
    "vo2_max": VO2Max,
    "workouts": Workout,
    "sleep_detailed": SleepPeriod,
}


def _parse_list(key: str, cls: type, raw: Any) -> tuple:
    # Accept either a bare list or an API page {"data": [...], "next_token": ...}
    if isinstance(raw, Mapping):
        raw = raw.get("data")
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        return ()
    parsed = []
    for item in raw:
        if not isinstance(item, Mapping) or not _text(item.get("day")):
            log.debug("Skipping %s entry without a day: %r", key, item)
            continue
        parsed.append(cls.from_dict(item))
    return tuple(parsed)


@dataclass(frozen=True)
class CategoryRecords:
    """All category record lists for one analysis request."""

    sleep: tuple[DailySleep, ...] = field(default_factory=tuple)
    activity: tuple[DailyActivity, ...] = field(default_factory=tuple)
    readiness: tuple[DailyReadiness, ...] = field(default_factory=tuple)
    stress: tuple[DailyStress, ...] = field(default_factory=tuple)
    resilience: tuple[DailyResilience, ...] = field(default_factory=tuple)
    spo2: tuple[DailySpo2, ...] = field(default_factory=tuple)
    cardio_age: tuple[DailyCardiovascularAge, ...] = field(default_factory=tuple)
    vo2_max: tuple[VO2Max, ...] = field(default_factory=tuple)
    workouts: tuple[Workout, ...] = field(default_factory=tuple)
    sleep_detailed: tuple[SleepPeriod, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CategoryRecords:
        """Parse a JSON export keyed by category name.

        Unknown keys are ignored; missing categories are empty.
        """
        return cls(**{key: _parse_list(key, rec_cls, data.get(key)) for key, rec_cls in _CATEGORIES.items()})

    @property
    def days(self) -> list[str]:
        """Sorted union of days across every category."""
        seen: set[str] = set()
        for key in _CATEGORIES:
            seen.update(rec.day for rec in getattr(self, key))
        return sorted(seen)
