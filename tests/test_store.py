"""
tests/test_store.py
────────────────────
Tests for the SQLite reference store.
"""
from datetime import timedelta

import pandas as pd

from config.components import ComponentLocation, ComponentType
from ridewear.data.models import Bike
from ridewear.data.simulator import GARAGE


class TestSchema:
    def test_empty_after_init_without_seed(self, db):
        assert db.list_bikes() == []

    def test_seeded_garage(self, db):
        db.initialize_db(force_reseed=True)
        bikes = db.list_bikes()
        assert sorted(b.id for b in bikes) == sorted(bike_id for bike_id, _, _ in GARAGE)
        assert all(b.components for b in bikes)

    def test_initialize_is_idempotent(self, db):
        db.initialize_db(force_reseed=True)
        rides_before = len(db.get_rides("bike-trail"))
        db.initialize_db()
        assert len(db.list_bikes()) == len(GARAGE)
        assert len(db.get_rides("bike-trail")) == rides_before


class TestComponents:
    def test_round_trip(self, db, make_component, now):
        pad = make_component(
            id="pad-rear",
            component_type=ComponentType.BRAKE_PAD,
            location=ComponentLocation.REAR,
            brand="Shimano",
            model="N04C",
            is_stock=False,
            last_serviced_at=now - timedelta(days=12),
            baseline_wear_percent=35.0,
        )
        db.insert_bike(Bike(id="bike-1", display_name="Stumpjumper", components=[pad]))
        assert db.get_component("pad-rear") == pad
        assert db.get_bike("bike-1").components == [pad]

    def test_missing(self, db):
        assert db.get_component("nope") is None
        assert db.get_bike("nope") is None

    def test_compare_and_swap(self, db, make_component):
        fork = make_component()
        db.insert_bike(Bike(id="bike-1", display_name="Stumpjumper", components=[fork]))

        bumped = fork.model_copy(update={"snooze_hours": 10.0, "version": 1})
        assert db.compare_and_swap_component(bumped, expected_version=0) is True
        assert db.get_component(fork.id).snooze_hours == 10.0

        stale = fork.model_copy(update={"snooze_hours": 99.0, "version": 1})
        assert db.compare_and_swap_component(stale, expected_version=0) is False
        assert db.get_component(fork.id).snooze_hours == 10.0

    def test_bad_row_sanitized_on_read(self, db, make_component):
        db.insert_bike(Bike(id="bike-1", display_name="Stumpjumper", components=[make_component()]))
        with db._lock:
            db._get_conn().execute(
                "UPDATE components SET service_interval_hours = -5.0, baseline_wear_percent = 180.0 WHERE id = ?",
                ("fork-1",),
            )

        bike = db.get_bike("bike-1")
        fork = bike.components[0]
        assert fork.service_interval_hours is None
        assert fork.baseline_wear_percent is None
        assert fork.base_interval_hours == 50.0


class TestRides:
    def test_filtered_and_ordered(self, db, make_ride, make_component):
        db.insert_bike(Bike(id="bike-1", display_name="A", components=[make_component()]))
        db.insert_bike(Bike(id="bike-2", display_name="B"))
        db.insert_rides([
            make_ride(days_ago=1),
            make_ride(days_ago=9),
            make_ride(days_ago=5, bike_id="bike-2"),
            make_ride(days_ago=4, conditions="WET", temperature_f=41.0),
        ])
        rides = db.get_rides("bike-1")
        assert len(rides) == 3
        starts = [r.start_time for r in rides]
        assert starts == sorted(starts)
        wet = next(r for r in rides if r.conditions is not None)
        assert wet.temperature_f == 41.0

    def test_missing_values_survive(self, db, make_ride):
        db.insert_bike(Bike(id="bike-1", display_name="A"))
        db.insert_rides([make_ride(days_ago=1, miles=None, feet=None)])
        ride = db.get_rides("bike-1")[0]
        assert ride.distance_miles is None
        assert ride.elevation_gain_feet is None
        assert ride.duration_seconds == 7200.0

    def test_frame(self, db, make_ride):
        db.insert_bike(Bike(id="bike-1", display_name="A"))
        db.insert_rides([make_ride(days_ago=2), make_ride(days_ago=1)])
        df = db.get_rides_frame("bike-1")
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 2
        assert {"start_time", "duration_seconds", "conditions"} <= set(df.columns)
