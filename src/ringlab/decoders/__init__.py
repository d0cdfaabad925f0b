"""Decoders for the compact series encodings in ring API records."""

from ringlab.decoders.series import (
    ACTIVITY_CLASS_LABELS,
    MOVEMENT_LABELS,
    SLEEP_STAGE_LABELS,
    DiscretePoint,
    DiscreteSeries,
    NumericPoint,
    NumericSeries,
    decode_discrete_series,
    expand_numeric_series,
    tokenize_series,
)
from ringlab.decoders.enrich import (
    DecodedActivity,
    DecodedSleep,
    decode_activity,
    decode_sleep_period,
    decode_workout,
    stage_minutes,
)

__all__ = [
    # series
    "ACTIVITY_CLASS_LABELS",
    "MOVEMENT_LABELS",
    "SLEEP_STAGE_LABELS",
    "DiscretePoint",
    "DiscreteSeries",
    "NumericPoint",
    "NumericSeries",
    "decode_discrete_series",
    "expand_numeric_series",
    "tokenize_series",
    # enrich
    "DecodedActivity",
    "DecodedSleep",
    "decode_activity",
    "decode_sleep_period",
    "decode_workout",
    "stage_minutes",
]
