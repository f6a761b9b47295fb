"""
tests/test_models.py
─────────────────────
Tests for Pydantic v2 data models and input sanitation.
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from config.components import ComponentLocation, ComponentType, RideConditions
from ridewear.data.models import (
    BaselineMethod,
    ComponentBaseline,
    RideRecord,
    ServiceState,
    WearDriver,
    clean_number,
    to_utc,
)


class TestToUtc:
    def test_date_string(self):
        assert to_utc("2024-01-15") == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        result = to_utc(datetime(2024, 1, 15, 8, 30))
        assert result.tzinfo is not None
        assert result == datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)

    def test_offset_converted(self):
        assert to_utc("2024-01-15T10:00:00+02:00") == datetime(2024, 1, 15, 8, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "not a date", float("nan")])
    def test_unparsable_is_none(self, value):
        assert to_utc(value) is None


class TestCleanNumber:
    def test_numeric_string(self):
        assert clean_number("3.5") == 3.5

    @pytest.mark.parametrize("value", [None, True, "abc", float("nan"), float("inf"), -1.0])
    def test_rejected(self, value):
        assert clean_number(value) is None

    def test_negative_allowed(self):
        assert clean_number(-12.0, allow_negative=True) == -12.0


class TestRideRecord:
    def test_sanitizes_bad_numerics(self, now):
        ride = RideRecord(
            id="r1", bike_id="b1", start_time=now,
            duration_seconds=float("nan"),
            distance_miles=-4.0,
            elevation_gain_feet="1200",
            avg_speed_mph=float("inf"),
        )
        assert ride.duration_seconds is None
        assert ride.distance_miles is None
        assert ride.elevation_gain_feet == 1200.0
        assert ride.avg_speed_mph is None

    def test_unparsable_start_time_is_none(self):
        ride = RideRecord(id="r1", bike_id="b1", start_time="yesterday-ish", duration_seconds=3600)
        assert ride.start_time is None

    def test_temperature_may_be_negative(self, now):
        ride = RideRecord(id="r1", bike_id="b1", start_time=now, temperature_f=-5.0)
        assert ride.temperature_f == -5.0

    def test_conditions_case_insensitive(self, now):
        ride = RideRecord(id="r1", bike_id="b1", start_time=now, conditions="muddy")
        assert ride.conditions == RideConditions.MUDDY

    def test_unknown_conditions_dropped(self, now):
        ride = RideRecord(id="r1", bike_id="b1", start_time=now, conditions="lava")
        assert ride.conditions is None

    def test_frozen(self, now):
        ride = RideRecord(id="r1", bike_id="b1", start_time=now)
        with pytest.raises(ValidationError):
            ride.duration_seconds = 10.0


class TestComponentBaseline:
    def test_paired_interval_by_location(self, make_component):
        front = make_component(component_type=ComponentType.BRAKE_PAD, location=ComponentLocation.FRONT)
        rear = make_component(component_type=ComponentType.BRAKE_PAD, location=ComponentLocation.REAR)
        assert front.base_interval_hours == 40.0
        assert rear.base_interval_hours == 35.0

    def test_explicit_interval_wins(self, make_component):
        assert make_component(service_interval_hours=80.0).base_interval_hours == 80.0

    def test_nan_interval_falls_back_to_catalog(self, make_component):
        c = make_component(service_interval_hours=float("nan"))
        assert c.service_interval_hours is None
        assert c.base_interval_hours == 50.0

    def test_effective_interval_includes_snooze(self, make_component):
        c = make_component(snooze_hours=25.0)
        assert c.effective_interval_hours == 75.0
        assert c.service_state == ServiceState.SNOOZED

    def test_default_state_normal(self, make_component):
        c = make_component()
        assert c.service_state == ServiceState.NORMAL
        assert c.version == 0
        assert c.baseline_method == BaselineMethod.MANUAL

    @pytest.mark.parametrize(
        "field, value, expected",
        [
            ("baseline_wear_percent", 120.0, None),
            ("baseline_wear_percent", -1.0, None),
            ("baseline_wear_percent", "abc", None),
            ("baseline_wear_percent", 100.0, 100.0),
            ("service_interval_hours", 0.0, None),
            ("service_interval_hours", -5.0, None),
            ("service_interval_hours", float("inf"), None),
            ("service_interval_hours", 0.04, 0.04),
            ("snooze_hours", -5.0, 0.0),
            ("snooze_hours", None, 0.0),
        ],
    )
    def test_out_of_range_numbers_sanitized(self, make_component, field, value, expected):
        c = make_component(**{field: value})
        assert getattr(c, field) == expected

    def test_bad_interval_falls_back_to_catalog(self, make_component):
        c = make_component(service_interval_hours=-5.0)
        assert c.base_interval_hours == 50.0

    def test_bad_stored_row_loads(self):
        c = ComponentBaseline.model_validate(
            {
                "id": "fork-1",
                "bike_id": "bike-1",
                "component_type": "FORK",
                "service_interval_hours": -5.0,
                "baseline_wear_percent": 250.0,
                "snooze_hours": float("nan"),
            }
        )
        assert c.service_interval_hours is None
        assert c.baseline_wear_percent is None
        assert c.snooze_hours == 0.0

    def test_negative_version_rejected(self, make_component):
        with pytest.raises(ValidationError):
            make_component(version=-1)

    def test_string_timestamps_parsed(self, make_component):
        c = make_component(last_serviced_at="2024-01-15")
        assert c.last_serviced_at == datetime(2024, 1, 15, tzinfo=timezone.utc)


class TestWearDriver:
    def test_contribution_bounds(self):
        with pytest.raises(ValidationError):
            WearDriver(factor="hours", label="Time in saddle", contribution=101.0)

    def test_definition_defaults_empty(self):
        d = WearDriver(factor="hours", label="Time in saddle", contribution=40.0)
        assert d.definition == ""
