"""Tests for ringlab.config and ringlab.dates."""

import pytest

from ringlab.config import AnalysisConfig, CorrelationMethod
from ringlab.dates import (
    add_days,
    add_seconds,
    clock_minutes,
    format_timestamp,
    is_weekend,
    parse_timestamp,
)


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.method is CorrelationMethod.SPEARMAN
        assert config.max_lag_days == 3
        assert config.detrend_window == 7
        assert config.bedtime_bin_min == 30

    def test_method_string_coerced(self):
        assert AnalysisConfig(method="pearson").method is CorrelationMethod.PEARSON

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"method": "kendall"},
            {"max_lag_days": -1},
            {"detrend_window": 0},
            {"bedtime_bin_min": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)

    def test_zero_lag_allowed(self):
        assert AnalysisConfig(max_lag_days=0).max_lag_days == 0

    def test_from_mapping(self):
        config = AnalysisConfig.from_mapping({"correlation_method": "pearson", "max_lag_days": "5"})
        assert config.method is CorrelationMethod.PEARSON
        assert config.max_lag_days == 5
        assert config.detrend_window == 7

    def test_from_mapping_null_method(self):
        assert AnalysisConfig.from_mapping({"correlation_method": None}).method is CorrelationMethod.SPEARMAN

    def test_from_mapping_null_numbers(self):
        config = AnalysisConfig.from_mapping(
            {"max_lag_days": None, "detrend_window": None, "bedtime_bin_min": None}
        )
        assert config == AnalysisConfig()

    def test_from_mapping_zero_lag_kept(self):
        assert AnalysisConfig.from_mapping({"max_lag_days": 0}).max_lag_days == 0


class TestDates:
    def test_parse_z(self):
        dt = parse_timestamp("2024-01-01T12:30:00Z")
        assert (dt.hour, dt.minute) == (12, 30)
        assert dt.utcoffset().total_seconds() == 0

    def test_parse_naive_is_utc(self):
        assert parse_timestamp("2024-01-01T12:30:00") == parse_timestamp("2024-01-01T12:30:00Z")

    def test_parse_offset_converted(self):
        assert parse_timestamp("2024-01-01T23:30:00-02:00").day == 2

    def test_format_milliseconds(self):
        assert format_timestamp(parse_timestamp("2024-01-01T00:00:00.123456Z")) == "2024-01-01T00:00:00.123Z"

    def test_add_seconds(self):
        assert add_seconds("2024-02-28T23:59:30Z", 60) == "2024-02-29T00:00:30.000Z"

    def test_add_days_calendar(self):
        assert add_days("2024-01-31", 1) == "2024-02-01"
        assert add_days("2024-03-01", -1) == "2024-02-29"

    def test_clock_minutes(self):
        assert clock_minutes("2024-01-01T22:45:59Z") == 22 * 60 + 45
        assert clock_minutes("2024-01-01T23:30:00-01:00") == 30
        assert clock_minutes(None) is None
        assert clock_minutes("nonsense") is None

    def test_is_weekend(self):
        assert not is_weekend("2024-01-05")
        assert is_weekend("2024-01-06")
        assert is_weekend("2024-01-07")
        assert not is_weekend("2024-01-08")
