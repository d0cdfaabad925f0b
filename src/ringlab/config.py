"""Analysis configuration shared by the dashboard engine and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class CorrelationMethod(str, Enum):
    """Correlation coefficient used for matrices and lag analyses."""

    SPEARMAN = "spearman"
    PEARSON = "pearson"


# Defaults used by the tool layer when the caller passes nothing.
DEFAULT_MAX_LAG_DAYS = 3
DEFAULT_DETREND_WINDOW = 7
DEFAULT_BEDTIME_BIN_MIN = 30


@dataclass(frozen=True)
class AnalysisConfig:
    """Per-request knobs for :func:`ringlab.analytics.dashboards.build_dashboards`."""

    method: CorrelationMethod = CorrelationMethod.SPEARMAN
    max_lag_days: int = DEFAULT_MAX_LAG_DAYS
    detrend_window: int = DEFAULT_DETREND_WINDOW
    bedtime_bin_min: int = DEFAULT_BEDTIME_BIN_MIN

    def __post_init__(self) -> None:
        # Accept plain strings ("pearson") as well as enum members.
        object.__setattr__(self, "method", CorrelationMethod(self.method))
        if self.max_lag_days < 0:
            raise ValueError(f"max_lag_days must be >= 0, got {self.max_lag_days}")
        if self.detrend_window < 1:
            raise ValueError(f"detrend_window must be >= 1, got {self.detrend_window}")
        if self.bedtime_bin_min <= 0:
            raise ValueError(f"bedtime_bin_min must be > 0, got {self.bedtime_bin_min}")

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> AnalysisConfig:
        """Build a config from tool-layer parameter names.

        Recognised keys: ``correlation_method``, ``max_lag_days``,
        ``detrend_window``, ``bedtime_bin_min``.  Missing or null keys fall
        back to the defaults.
        """

        def pick(key: str, default: Any) -> Any:
            value = params.get(key)
            return default if value is None else value

        return cls(
            method=params.get("correlation_method") or CorrelationMethod.SPEARMAN,
            max_lag_days=int(pick("max_lag_days", DEFAULT_MAX_LAG_DAYS)),
            detrend_window=int(pick("detrend_window", DEFAULT_DETREND_WINDOW)),
            bedtime_bin_min=int(pick("bedtime_bin_min", DEFAULT_BEDTIME_BIN_MIN)),
        )
