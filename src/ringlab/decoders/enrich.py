"""Decode the series blocks embedded in sleep, activity and workout records.

Resolution of each block:

    sleep_phase_5_min   300 s, anchored on bedtime_start
    movement_30_sec      30 s, anchored on bedtime_start
    class_5_min         300 s, anchored on the activity record timestamp
    heart_rate / hrv / met   own interval and timestamp
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from ringlab.decoders.series import (
    ACTIVITY_CLASS_LABELS,
    MOVEMENT_LABELS,
    SLEEP_STAGE_LABELS,
    DiscreteSeries,
    NumericSeries,
    decode_discrete_series,
    expand_numeric_series,
)
from ringlab.records import DailyActivity, SampleSeries, SleepPeriod, Workout

SLEEP_PHASE_INTERVAL_SEC = 300
MOVEMENT_INTERVAL_SEC = 30
ACTIVITY_CLASS_INTERVAL_SEC = 300


@dataclass(frozen=True)
class DecodedSleep:
    sleep_phase_5_min: DiscreteSeries | None = None
    movement_30_sec: DiscreteSeries | None = None
    heart_rate: NumericSeries | None = None
    hrv: NumericSeries | None = None


@dataclass(frozen=True)
class DecodedActivity:
    class_5_min: DiscreteSeries | None = None
    met: NumericSeries | None = None


def _expand(block: SampleSeries | None) -> NumericSeries | None:
    if block is None:
        return None
    return expand_numeric_series(block.items, block.timestamp, block.interval)


def decode_sleep_period(period: SleepPeriod) -> DecodedSleep:
    """Decode hypnogram, movement, HR and HRV series of a sleep period."""
    return DecodedSleep(
        sleep_phase_5_min=decode_discrete_series(
            period.sleep_phase_5_min,
            period.bedtime_start,
            SLEEP_PHASE_INTERVAL_SEC,
            SLEEP_STAGE_LABELS,
        ),
        movement_30_sec=decode_discrete_series(
            period.movement_30_sec,
            period.bedtime_start,
            MOVEMENT_INTERVAL_SEC,
            MOVEMENT_LABELS,
        ),
        heart_rate=_expand(period.heart_rate),
        hrv=_expand(period.hrv),
    )


def decode_activity(activity: DailyActivity) -> DecodedActivity:
    """Decode the 5-minute activity classes and the MET series."""
    return DecodedActivity(
        class_5_min=decode_discrete_series(
            activity.class_5_min,
            activity.timestamp,
            ACTIVITY_CLASS_INTERVAL_SEC,
            ACTIVITY_CLASS_LABELS,
        ),
        met=_expand(activity.met),
    )


def decode_workout(workout: Workout) -> NumericSeries | None:
    """Heart rate series of a workout, if the record carries one."""
    return _expand(workout.heart_rate)


def stage_minutes(series: DiscreteSeries | None) -> dict[str, float]:
    """Minutes spent per label in a decoded discrete series.

    Labels appear in first-seen order.
    """
    if series is None:
        return {}
    counts = Counter(point.label for point in series.points)
    return {label: count * series.interval_sec / 60.0 for label, count in counts.items()}
