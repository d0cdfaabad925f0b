"""Decoder for the compact time-series encodings used by the ring API.

The API ships several per-sample series as strings rather than arrays:

    sleep_phase_5_min   "4422211133..."   one digit per 5-min sample
    movement_30_sec     "1112221..."      one digit per 30-s sample
    class_5_min         "0001122..."      one digit per 5-min sample

Some endpoints separate the codes with commas or whitespace instead, so
:func:`tokenize_series` tries commas first, then whitespace, and finally
falls back to one token per character.

Numeric blocks (heart rate, HRV, MET) arrive as ``{interval, items,
timestamp}`` and are expanded with the same timestamp stride:
``timestamp[i] = start + i * interval``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from ringlab.dates import add_seconds

# ---------------------------------------------------------------------------
# Code -> label tables
# ---------------------------------------------------------------------------

SLEEP_STAGE_LABELS: Mapping[str, str] = MappingProxyType({
    "1": "deep",
    "2": "light",
    "3": "rem",
    "4": "awake",
})

MOVEMENT_LABELS: Mapping[str, str] = MappingProxyType({
    "0": "still",
    "1": "low",
    "2": "medium",
    "3": "high",
    "4": "very_high",
})

ACTIVITY_CLASS_LABELS: Mapping[str, str] = MappingProxyType({
    "0": "inactive",
    "1": "rest",
    "2": "low",
    "3": "medium",
    "4": "high",
    "5": "non_wear",
})

_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiscretePoint:
    """One decoded sample of a coded series.

    ``known`` is False when the code is missing from the label table; the
    label then reads ``unknown(<code>)``.
    """

    timestamp: str
    code: str
    label: str
    known: bool = True


@dataclass(frozen=True)
class DiscreteSeries:
    raw: str
    interval_sec: float
    points: list[DiscretePoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class NumericPoint:
    timestamp: str
    value: float | None


@dataclass(frozen=True)
class NumericSeries:
    interval_sec: float
    points: list[NumericPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def tokenize_series(raw: str) -> list[str]:
    """Split an encoded series into code tokens.

    >>> tokenize_series("1,2,3")
    ['1', '2', '3']
    >>> tokenize_series("012")
    ['0', '1', '2']
    """
    trimmed = raw.strip()
    if not trimmed:
        return []
    if "," in trimmed:
        return [tok.strip() for tok in trimmed.split(",") if tok.strip()]
    if _WHITESPACE.search(trimmed):
        return _WHITESPACE.split(trimmed)
    return list(trimmed)


def label_for(code: str, labels: Mapping[str, str]) -> tuple[str, bool]:
    """Look up *code*; returns ``(label, known)``."""
    label = labels.get(code)
    if label is None:
        return f"unknown({code})", False
    return label, True


def decode_discrete_series(
    raw: str | None,
    start: str | None,
    interval_sec: float,
    labels: Mapping[str, str],
) -> DiscreteSeries | None:
    """Decode a coded string into timestamped, labelled points.

    Args:
        raw: Encoded series (e.g. ``"4422211"``).
        start: ISO timestamp of the first sample.
        interval_sec: Seconds between samples.
        labels: Code -> label table.

    Returns:
        A DiscreteSeries, or None when *raw* or *start* is absent or the
        string holds no tokens.
    """
    if not raw or not start:
        return None
    tokens = tokenize_series(raw)
    if not tokens:
        return None

    points = []
    for idx, code in enumerate(tokens):
        label, known = label_for(code, labels)
        points.append(
            DiscretePoint(
                timestamp=add_seconds(start, idx * interval_sec),
                code=code,
                label=label,
                known=known,
            )
        )
    return DiscreteSeries(raw=raw, interval_sec=interval_sec, points=points)


def expand_numeric_series(
    items: Sequence[float | None] | None,
    start: str | None,
    interval_sec: float,
) -> NumericSeries | None:
    """Attach timestamps to a fixed-interval numeric series.

    Returns None when *items* is empty/absent or *start* is absent.
    """
    if not items or not start:
        return None
    points = [
        NumericPoint(timestamp=add_seconds(start, idx * interval_sec), value=value)
        for idx, value in enumerate(items)
    ]
    return NumericSeries(interval_sec=interval_sec, points=points)
