"""Tests for ringlab.analytics.rows -- daily row building and derived fields."""

import pytest

from ringlab.analytics.rows import (
    INTENSITY_WEIGHTS,
    DailyRow,
    build_daily_rows,
    build_raw_rows,
    derive_fields,
    social_jetlag,
)
from ringlab.records import (
    CategoryRecords,
    DailyActivity,
    DailySleep,
    DailyStress,
    SleepPeriod,
    Workout,
)


def _period(day, bedtime_start, hours=8.0, **kwargs) -> SleepPeriod:
    return SleepPeriod(
        day=day,
        bedtime_start=bedtime_start,
        total_sleep_duration=hours * 3600 if hours is not None else None,
        **kwargs,
    )


class TestDailyRow:
    def test_defaults_are_none(self):
        row = DailyRow(day="2024-01-01")
        assert row.sleep_score is None
        assert row.workout_count is None

    def test_value_lookup(self):
        assert DailyRow(day="2024-01-01", steps=123).value("steps") == 123

    def test_value_unknown_key(self):
        with pytest.raises(ValueError):
            DailyRow(day="2024-01-01").value("not_a_field")


class TestBuildRawRows:
    def test_sparse_days_get_rows(self):
        records = CategoryRecords(
            sleep=(DailySleep(day="2024-01-01", score=80),),
            activity=(DailyActivity(day="2024-01-03", score=70, steps=9000),),
        )
        rows = build_raw_rows(records)
        assert set(rows) == {"2024-01-01", "2024-01-03"}
        assert rows["2024-01-01"].sleep_score == 80
        assert rows["2024-01-01"].steps is None
        assert rows["2024-01-03"].sleep_score is None
        assert rows["2024-01-03"].steps == 9000

    def test_stress_converted_to_minutes(self):
        records = CategoryRecords(stress=(DailyStress(day="2024-01-01", stress_high=5400, recovery_high=1800),))
        row = build_raw_rows(records)["2024-01-01"]
        assert row.stress_high_min == 90.0
        assert row.recovery_high_min == 30.0

    def test_workout_weights(self):
        records = CategoryRecords(workouts=(
            Workout(day="2024-01-01", intensity="hard"),
            Workout(day="2024-01-01", intensity="moderate"),
            Workout(day="2024-01-01", intensity="easy"),
            Workout(day="2024-01-01", intensity="extreme"),
            Workout(day="2024-01-02", intensity=None),
        ))
        rows = build_raw_rows(records)
        assert rows["2024-01-01"].workout_count == 4
        assert rows["2024-01-01"].workout_intensity_score == 3 + 2 + 1 + 1
        assert rows["2024-01-02"].workout_intensity_score == 1

    def test_weight_table_read_only(self):
        with pytest.raises(TypeError):
            INTENSITY_WEIGHTS["extreme"] = 5
        assert INTENSITY_WEIGHTS["hard"] == 3

    def test_no_workouts_stays_none(self):
        records = CategoryRecords(sleep=(DailySleep(day="2024-01-01", score=80),))
        assert build_raw_rows(records)["2024-01-01"].workout_count is None

    def test_sleep_percentages(self):
        period = _period(
            "2024-01-01", "2024-01-01T23:00:00Z", hours=8,
            deep_sleep_duration=7200, rem_sleep_duration=5760, light_sleep_duration=14400,
        )
        row = build_raw_rows(CategoryRecords(sleep_detailed=(period,)))["2024-01-01"]
        assert row.sleep_duration_h == 8.0
        assert row.deep_pct == 25.0
        assert row.rem_pct == pytest.approx(20.0)
        assert row.light_pct == 50.0
        assert row.awake_pct == 0.0

    def test_zero_duration_skips_percentages(self):
        period = _period("2024-01-01", None, hours=0, deep_sleep_duration=100)
        row = build_raw_rows(CategoryRecords(sleep_detailed=(period,)))["2024-01-01"]
        assert row.sleep_duration_h is None
        assert row.deep_pct is None

    def test_later_period_overrides_only_present_values(self):
        main = _period("2024-01-01", "2024-01-01T23:00:00Z", hours=8, efficiency=90, average_hrv=50)
        nap = _period("2024-01-01", "2024-01-01T14:00:00Z", hours=None, average_hrv=42)
        row = build_raw_rows(CategoryRecords(sleep_detailed=(main, nap)))["2024-01-01"]
        assert row.sleep_duration_h == 8.0
        assert row.sleep_efficiency == 90
        assert row.avg_hrv == 42
        assert row.bedtime_start == "2024-01-01T14:00:00Z"


class TestDeriveFields:
    def test_sorted(self):
        rows = {
            "2024-01-03": DailyRow(day="2024-01-03"),
            "2024-01-01": DailyRow(day="2024-01-01"),
            "2024-01-02": DailyRow(day="2024-01-02"),
        }
        assert [r.day for r in derive_fields(rows)] == ["2024-01-01", "2024-01-02", "2024-01-03"]

    def test_clock_minutes_and_midsleep_wrap(self):
        records = CategoryRecords(sleep_detailed=(
            SleepPeriod(
                day="2024-01-02",
                bedtime_start="2024-01-01T23:00:00Z",
                bedtime_end="2024-01-02T07:00:00Z",
                total_sleep_duration=8 * 3600,
            ),
        ))
        row = build_daily_rows(records)[0]
        assert row.bedtime_clock_min == 23 * 60
        assert row.wake_clock_min == 7 * 60
        # 23:00 + 4h wraps to 03:00
        assert row.midsleep_clock_min == 180.0

    def test_bedtime_deviation_from_median(self):
        records = CategoryRecords(sleep_detailed=(
            _period("2024-01-01", "2024-01-01T22:00:00Z"),
            _period("2024-01-02", "2024-01-02T22:30:00Z"),
            _period("2024-01-03", "2024-01-03T23:30:00Z"),
        ))
        rows = build_daily_rows(records)
        assert [r.bedtime_deviation_min for r in rows] == [-30.0, 0.0, 60.0]

    def test_malformed_bedtime_reads_as_missing(self):
        rows = build_daily_rows(CategoryRecords(sleep_detailed=(_period("2024-01-01", "garbage"),)))
        assert rows[0].bedtime_clock_min is None
        assert rows[0].midsleep_clock_min is None

    def test_no_midsleep_without_duration(self):
        rows = build_daily_rows(CategoryRecords(sleep_detailed=(_period("2024-01-01", "2024-01-01T22:00:00Z", hours=None),)))
        assert rows[0].bedtime_clock_min == 22 * 60
        assert rows[0].midsleep_clock_min is None

    def test_empty(self):
        assert build_daily_rows(CategoryRecords()) == []


class TestSocialJetlag:
    def test_weekend_vs_weekday(self):
        # 2024-01-05 is a Friday, 06/07 are the weekend.
        rows = [
            DailyRow(day="2024-01-04", midsleep_clock_min=180.0),
            DailyRow(day="2024-01-05", midsleep_clock_min=200.0),
            DailyRow(day="2024-01-06", midsleep_clock_min=300.0),
            DailyRow(day="2024-01-07", midsleep_clock_min=260.0),
        ]
        assert social_jetlag(rows) == 90.0

    def test_needs_both_sides(self):
        rows = [DailyRow(day="2024-01-04", midsleep_clock_min=180.0)]
        assert social_jetlag(rows) is None

    def test_ignores_missing(self):
        rows = [
            DailyRow(day="2024-01-04", midsleep_clock_min=100.0),
            DailyRow(day="2024-01-06", midsleep_clock_min=None),
        ]
        assert social_jetlag(rows) is None
