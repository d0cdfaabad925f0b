"""Tests for ringlab.decoders.enrich -- per-record series decoding."""

from ringlab.decoders.enrich import (
    decode_activity,
    decode_sleep_period,
    decode_workout,
    stage_minutes,
)
from ringlab.records import DailyActivity, SampleSeries, SleepPeriod, Workout


def _period(**overrides) -> SleepPeriod:
    fields = {
        "day": "2024-01-02",
        "bedtime_start": "2024-01-01T23:00:00Z",
        "sleep_phase_5_min": "4221",
        "movement_30_sec": "0001",
        "heart_rate": SampleSeries(interval=300, items=(58, 55, None), timestamp="2024-01-01T23:00:00Z"),
    }
    fields.update(overrides)
    return SleepPeriod(**fields)


class TestDecodeSleepPeriod:
    def test_hypnogram(self):
        decoded = decode_sleep_period(_period())
        stages = decoded.sleep_phase_5_min
        assert [p.label for p in stages.points] == ["awake", "light", "light", "deep"]
        assert stages.points[-1].timestamp == "2024-01-01T23:15:00.000Z"

    def test_movement_uses_30s_steps(self):
        decoded = decode_sleep_period(_period())
        assert decoded.movement_30_sec.points[1].timestamp == "2024-01-01T23:00:30.000Z"
        assert decoded.movement_30_sec.points[3].label == "low"

    def test_heart_rate_expanded(self):
        decoded = decode_sleep_period(_period())
        assert [p.value for p in decoded.heart_rate.points] == [58, 55, None]
        assert decoded.hrv is None

    def test_no_bedtime_means_no_series(self):
        decoded = decode_sleep_period(_period(bedtime_start=None))
        assert decoded.sleep_phase_5_min is None
        assert decoded.movement_30_sec is None


class TestDecodeActivity:
    def test_class_and_met(self):
        activity = DailyActivity(
            day="2024-01-01",
            class_5_min="0123",
            met=SampleSeries(interval=60, items=(0.9, 1.2), timestamp="2024-01-01T04:00:00Z"),
            timestamp="2024-01-01T04:00:00Z",
        )
        decoded = decode_activity(activity)
        assert [p.label for p in decoded.class_5_min.points] == ["inactive", "rest", "low", "medium"]
        assert decoded.met.points[1].timestamp == "2024-01-01T04:01:00.000Z"

    def test_missing_blocks(self):
        decoded = decode_activity(DailyActivity(day="2024-01-01"))
        assert decoded.class_5_min is None
        assert decoded.met is None


class TestDecodeWorkout:
    def test_heart_rate(self):
        workout = Workout(
            day="2024-01-01",
            heart_rate=SampleSeries(interval=5, items=(120, 125), timestamp="2024-01-01T07:00:00Z"),
        )
        series = decode_workout(workout)
        assert series.points[1].timestamp == "2024-01-01T07:00:05.000Z"

    def test_none(self):
        assert decode_workout(Workout(day="2024-01-01")) is None


class TestStageMinutes:
    def test_minutes_per_label(self):
        decoded = decode_sleep_period(_period())
        assert stage_minutes(decoded.sleep_phase_5_min) == {"awake": 5.0, "light": 10.0, "deep": 5.0}

    def test_none(self):
        assert stage_minutes(None) == {}
