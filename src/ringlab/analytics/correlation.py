"""Correlation matrices and lag analysis over daily rows.

Matrices are pairwise-complete: every cell pairs only the days where both
metrics are present, so neighbouring cells may rest on different day
subsets.  ``counts`` records how many pairs each cell used.

Lag analysis pairs ``x`` on day D with ``y`` on day D+L, where D+L is found
by calendar arithmetic rather than by row offset.  A gap in the day
sequence therefore drops the pair instead of shifting it onto the wrong
day.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

from ringlab.analytics.rows import DailyRow
from ringlab.analytics.stats import correlate, detrend, is_number, pairwise
from ringlab.config import CorrelationMethod
from ringlab.dates import add_days

log = logging.getLogger(__name__)

# Matrix rows/columns, in this order.
METRIC_KEYS: tuple[str, ...] = (
    "sleep_score",
    "readiness_score",
    "activity_score",
    "stress_high_min",
    "recovery_high_min",
    "steps",
    "avg_hrv",
    "avg_hr",
    "sleep_duration_h",
    "sleep_efficiency",
    "deep_pct",
    "rem_pct",
    "bedtime_clock_min",
    "workout_intensity_score",
    "spo2_avg",
    "breathing_disturbance_index",
    "vo2_max",
    "cardiovascular_age",
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class CorrelationMatrix:
    method: CorrelationMethod
    labels: list[str]
    matrix: list[list[float | None]]
    counts: list[list[int]]

    def cell(self, x_key: str, y_key: str) -> float | None:
        return self.matrix[self.labels.index(x_key)][self.labels.index(y_key)]

    def count(self, x_key: str, y_key: str) -> int:
        return self.counts[self.labels.index(x_key)][self.labels.index(y_key)]

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["method"] = self.method.value
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True)
class LagCorrelation:
    lag: int
    r: float | None
    n: int


@dataclass(frozen=True)
class LagSpec:
    """Which pair a lag analysis compares: x leads, y follows."""

    id: str
    title: str
    x_key: str
    y_key: str


@dataclass
class LagAnalysis:
    id: str
    title: str
    x_key: str
    y_key: str
    lags: list[LagCorrelation] = field(default_factory=list)
    best_lag: int | None = None
    best_r: float | None = None

    def __repr__(self) -> str:
        best = f"{self.best_lag:+d}d r={self.best_r:.2f}" if self.best_lag is not None else "none"
        return f"LagAnalysis({self.id}: {len(self.lags)} lags, best={best})"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


LAG_SPECS: tuple[LagSpec, ...] = (
    LagSpec("lag_activity_readiness", "Activity → Readiness (lag)", "activity_score", "readiness_score"),
    LagSpec("lag_workout_readiness", "Training Load → Readiness (lag)", "workout_intensity_score", "readiness_score"),
    LagSpec("lag_stress_sleep", "Stress → Sleep (lag)", "stress_high_min", "sleep_score"),
    LagSpec("lag_sleep_readiness", "Sleep Duration → Readiness (lag)", "sleep_duration_h", "readiness_score"),
)


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------


def _matrix_from_columns(
    columns: Sequence[Sequence[Any]],
    labels: list[str],
    method: CorrelationMethod,
) -> CorrelationMatrix:
    size = len(columns)
    matrix: list[list[float | None]] = [[None] * size for _ in range(size)]
    counts: list[list[int]] = [[0] * size for _ in range(size)]

    # Pairing and both coefficients are symmetric in their arguments, so
    # the upper triangle is computed once and mirrored.
    for i in range(size):
        for j in range(i, size):
            xs, ys = pairwise(columns[i], columns[j])
            r = correlate(method, xs, ys)
            matrix[i][j] = matrix[j][i] = r
            counts[i][j] = counts[j][i] = len(xs)

    n_null = sum(1 for row in matrix for r in row if r is None)
    log.debug("%s matrix %dx%d, %d empty cells", method.value, size, size, n_null)
    return CorrelationMatrix(method=method, labels=labels, matrix=matrix, counts=counts)


def correlation_matrix(
    rows: Sequence[DailyRow],
    keys: Sequence[str] = METRIC_KEYS,
    method: CorrelationMethod | str = CorrelationMethod.SPEARMAN,
) -> CorrelationMatrix:
    """Pairwise-complete correlation matrix over *keys*."""
    method = CorrelationMethod(method)
    columns = [[row.value(k) for row in rows] for k in keys]
    return _matrix_from_columns(columns, list(keys), method)


def correlation_matrix_detrended(
    rows: Sequence[DailyRow],
    keys: Sequence[str] = METRIC_KEYS,
    method: CorrelationMethod | str = CorrelationMethod.SPEARMAN,
    window: int = 7,
) -> CorrelationMatrix:
    """Same as :func:`correlation_matrix` after detrending every column.

    Each metric is detrended on its own against its trailing *window*-row
    mean before pairing.
    """
    method = CorrelationMethod(method)
    columns = [detrend([row.value(k) for row in rows], window) for k in keys]
    return _matrix_from_columns(columns, list(keys), method)


# ---------------------------------------------------------------------------
# Lags
# ---------------------------------------------------------------------------


def lag_correlation(
    rows: Sequence[DailyRow],
    x_key: str,
    y_key: str,
    lag: int,
    method: CorrelationMethod | str = CorrelationMethod.SPEARMAN,
) -> LagCorrelation:
    """Correlate ``x`` on each day with ``y`` *lag* calendar days later."""
    by_day = {row.day: row for row in rows}
    xs: list[float] = []
    ys: list[float] = []
    for row in rows:
        target = by_day.get(add_days(row.day, lag))
        if target is None:
            continue
        x = row.value(x_key)
        y = target.value(y_key)
        if is_number(x) and is_number(y):
            xs.append(float(x))
            ys.append(float(y))
    return LagCorrelation(lag=lag, r=correlate(method, xs, ys), n=len(xs))


def compute_lag_analysis(
    rows: Sequence[DailyRow],
    spec: LagSpec,
    max_lag: int,
    method: CorrelationMethod | str = CorrelationMethod.SPEARMAN,
) -> LagAnalysis:
    """Scan lags ``-max_lag..+max_lag`` and pick the strongest.

    The best lag maximises ``|r|``; exact ties go to the larger lag.  Lags
    with ``r is None`` never win.
    """
    if max_lag < 0:
        raise ValueError(f"max_lag must be >= 0, got {max_lag}")
    method = CorrelationMethod(method)

    lags = [
        lag_correlation(rows, spec.x_key, spec.y_key, lag, method)
        for lag in range(-max_lag, max_lag + 1)
    ]
    valid = [entry for entry in lags if entry.r is not None]
    best = max(valid, key=lambda entry: (abs(entry.r), entry.lag), default=None)

    analysis = LagAnalysis(
        id=spec.id,
        title=spec.title,
        x_key=spec.x_key,
        y_key=spec.y_key,
        lags=lags,
        best_lag=best.lag if best else None,
        best_r=best.r if best else None,
    )
    log.debug("%r", analysis)
    return analysis


def compute_lag_analyses(
    rows: Sequence[DailyRow],
    max_lag: int,
    method: CorrelationMethod | str = CorrelationMethod.SPEARMAN,
    specs: Sequence[LagSpec] = LAG_SPECS,
) -> list[LagAnalysis]:
    """Run every lag spec with the same window and method."""
    return [compute_lag_analysis(rows, spec, max_lag, method) for spec in specs]
