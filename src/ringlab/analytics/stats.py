"""Statistics primitives shared by the correlation engine and the summarizer.

Missing data policy: values are ``None`` (or non-finite) when absent.
Nothing here imputes; :func:`pairwise` is the only masking step.  Short or
constant inputs produce ``None`` instead of NaN.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from scipy.stats import rankdata

from ringlab.config import CorrelationMethod

# Fewer paired observations than this and a coefficient is not reported.
MIN_PAIRS = 5


def is_number(value: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(value)


# ---------------------------------------------------------------------------
# Location / spread
# ---------------------------------------------------------------------------


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def median(values: Sequence[float]) -> float | None:
    """Median (even length averages the middle pair); None for empty input."""
    if len(values) == 0:
        return None
    return float(np.median(np.asarray(values, dtype=np.float64)))


def pstdev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=0))


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------


def rank(values: Sequence[float]) -> list[float]:
    """1-based ranks with ties sharing the average of their positions."""
    if len(values) == 0:
        return []
    return [float(r) for r in rankdata(np.asarray(values, dtype=np.float64), method="average")]


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float | None:
    """Pearson's r.

    Returns None if the inputs differ in length, hold fewer than
    ``MIN_PAIRS`` points, or either side has zero variance.
    """
    if len(xs) != len(ys) or len(xs) < MIN_PAIRS:
        return None
    x = np.asarray(xs, dtype=np.float64)
    y = np.asarray(ys, dtype=np.float64)
    # An exactly constant side has no variance, however the mean rounds.
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return None

    dx = x - np.mean(x)
    dy = y - np.mean(y)
    den = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if den == 0:
        return None
    r = float(np.sum(dx * dy)) / den
    return r if math.isfinite(r) else None


def spearman(xs: Sequence[float], ys: Sequence[float]) -> float | None:
    """Spearman's rho: Pearson on average ranks."""
    if len(xs) != len(ys) or len(xs) < MIN_PAIRS:
        return None
    return pearson(rank(xs), rank(ys))


def correlate(method: CorrelationMethod | str, xs: Sequence[float], ys: Sequence[float]) -> float | None:
    """Dispatch to :func:`spearman` or :func:`pearson`.

    Raises ValueError for an unknown method name.
    """
    if CorrelationMethod(method) is CorrelationMethod.SPEARMAN:
        return spearman(xs, ys)
    return pearson(xs, ys)


def pairwise(
    xs: Sequence[Any],
    ys: Sequence[Any],
) -> tuple[list[float], list[float]]:
    """Keep only the indices where both sides are finite numbers.

    Pairs by position up to the shorter of the two inputs.
    """
    x_out: list[float] = []
    y_out: list[float] = []
    for x, y in zip(xs, ys):
        if is_number(x) and is_number(y):
            x_out.append(float(x))
            y_out.append(float(y))
    return x_out, y_out


# ---------------------------------------------------------------------------
# Detrending
# ---------------------------------------------------------------------------


def detrend(values: Sequence[Any], window: int = 7) -> list[float | None]:
    """Subtract the trailing *window*-day mean from each present value.

    The window covers the current position and the ``window - 1`` before
    it, averaging only present values.  Never looks ahead; absent inputs
    stay None.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    out: list[float | None] = [None] * len(values)
    for i, value in enumerate(values):
        if not is_number(value):
            continue
        start = max(0, i - window + 1)
        trailing = [float(v) for v in values[start:i + 1] if is_number(v)]
        out[i] = float(value) - mean(trailing)
    return out


# ---------------------------------------------------------------------------
# Histogram
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HistogramBin:
    x0: float
    x1: float
    count: int


def histogram(
    values: Sequence[float],
    bin_size: float,
    lo: float | None = None,
    hi: float | None = None,
) -> list[HistogramBin]:
    """Fixed-width histogram over ``[floor(lo/w)*w, ceil(hi/w)*w)``.

    *lo* / *hi* default to the data range.  Values past the last edge land
    in the last bin; values below the first edge are dropped.
    """
    if bin_size <= 0:
        raise ValueError(f"bin_size must be > 0, got {bin_size}")
    if len(values) == 0:
        return []

    lo = min(values) if lo is None else lo
    hi = max(values) if hi is None else hi
    start = math.floor(lo / bin_size) * bin_size
    end = math.ceil(hi / bin_size) * bin_size

    n_bins = max(0, int(round((end - start) / bin_size)))
    if n_bins == 0:
        return []
    counts = [0] * n_bins
    for v in values:
        idx = min(math.floor((v - start) / bin_size), n_bins - 1)
        if idx >= 0:
            counts[idx] += 1

    return [
        HistogramBin(x0=start + i * bin_size, x1=start + (i + 1) * bin_size, count=c)
        for i, c in enumerate(counts)
    ]
