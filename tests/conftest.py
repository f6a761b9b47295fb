"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the RideWear test suite.
"""
import itertools
import os
from datetime import datetime, timedelta, timezone

import pytest

# Use in-memory SQLite for tests
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("HISTORY_DAYS", "30")
os.environ.setdefault("SIMULATION_SEED", "42")
os.environ.setdefault("DEFAULT_LANG", "en")


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_ride(now):
    """Factory for rides placed `days_ago` before `now` (2 h, 15 mi, 1500 ft by default)."""
    from ridewear.data.models import RideRecord

    counter = itertools.count(1)

    def _make(days_ago=1.0, hours=2.0, miles=15.0, feet=1500.0, bike_id="bike-1", **kwargs):
        start = kwargs.pop("start_time", now - timedelta(days=days_ago))
        return RideRecord(
            id=kwargs.pop("id", f"{bike_id}-ride-{next(counter):03d}"),
            bike_id=bike_id,
            start_time=start,
            duration_seconds=hours * 3600.0,
            distance_miles=miles,
            elevation_gain_feet=feet,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_component():
    """Factory for component baselines (MANUAL fork on bike-1 by default)."""
    from config.components import ComponentType
    from ridewear.data.models import BaselineMethod, ComponentBaseline

    def _make(**kwargs):
        data = {
            "id": "fork-1",
            "bike_id": "bike-1",
            "component_type": ComponentType.FORK,
            "baseline_method": BaselineMethod.MANUAL,
        }
        data.update(kwargs)
        return ComponentBaseline(**data)

    return _make


@pytest.fixture
def sample_rides(make_ride):
    """Ten 2-hour rides, three days apart, the last one 3 days before `now`."""
    return [make_ride(days_ago=d) for d in range(30, 0, -3)]


@pytest.fixture
def fork(make_component, now):
    """Fork (50 h interval) serviced 40 days before `now`."""
    return make_component(last_serviced_at=now - timedelta(days=40))


@pytest.fixture
def db():
    """Empty in-memory store, recreated for each test."""
    from ridewear.data import store

    store.close_db()
    store.initialize_db(force_reseed=True, seed=False)
    yield store
    store.close_db()
