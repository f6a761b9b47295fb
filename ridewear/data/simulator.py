"""
ridewear/data/simulator.py
──────────────────────────
Synthetic garage generator for demos and tests.

Generates:
  - A small fleet of bikes, each with its serviceable components
  - `days` of ride history per bike (1–4 rides a week, weekend heavy)
  - Component baselines with a mix of MANUAL / INFERRED / DEFAULT methods,
    some serviced partway through the history, some never serviced

Design:
  - Reproducible with SIMULATION_SEED for consistent demos
  - Each bike has a riding profile (trail / enduro / gravel) that shapes
    distance, climbing and speed
  - Weather drifts with the season: conditions and temperature are sampled
    per ride
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import numpy as np
import pandas as pd

from config.components import ComponentLocation, ComponentType, RideConditions
from config.settings import settings
from config.status import ConfidenceLevel
from ridewear.data.models import BaselineMethod, Bike, ComponentBaseline, RideRecord


@dataclass(frozen=True)
class RidingProfile:
    name: str
    rides_per_week: float
    duration_hours: tuple[float, float]   # mean, σ
    speed_mph: tuple[float, float]        # mean, σ
    climb_ft_per_mile: tuple[float, float]  # mean, σ
    wet_share: float                      # probability of WET / MUDDY rides


PROFILES: dict[str, RidingProfile] = {
    "trail": RidingProfile("trail", 3.0, (1.8, 0.5), (8.5, 1.5), (120.0, 30.0), 0.20),
    "enduro": RidingProfile("enduro", 2.0, (3.0, 0.8), (7.0, 1.5), (180.0, 40.0), 0.30),
    "gravel": RidingProfile("gravel", 2.5, (2.5, 0.7), (14.0, 2.0), (45.0, 15.0), 0.10),
}

# (bike id, display name, profile)
GARAGE: list[tuple[str, str, str]] = [
    ("bike-trail", "Stumpjumper", "trail"),
    ("bike-enduro", "Megatower", "enduro"),
    ("bike-gravel", "Grizl", "gravel"),
]

# Components fitted to every bike: (type, location, brand, model)
FULL_SUSPENSION_PARTS: list[tuple[ComponentType, ComponentLocation, str, str]] = [
    (ComponentType.FORK, ComponentLocation.NONE, "Fox", "36"),
    (ComponentType.SHOCK, ComponentLocation.NONE, "Fox", "Float X"),
    (ComponentType.BRAKE_PAD, ComponentLocation.FRONT, "Shimano", "N04C"),
    (ComponentType.BRAKE_PAD, ComponentLocation.REAR, "Shimano", "N04C"),
    (ComponentType.CHAIN, ComponentLocation.NONE, "SRAM", "GX Eagle"),
    (ComponentType.DRIVETRAIN, ComponentLocation.NONE, "SRAM", "GX Eagle"),
    (ComponentType.TIRES, ComponentLocation.FRONT, "Maxxis", "Assegai"),
    (ComponentType.TIRES, ComponentLocation.REAR, "Maxxis", "Minion DHR II"),
    (ComponentType.DROPPER, ComponentLocation.NONE, "OneUp", "V2"),
    (ComponentType.PIVOT_BEARINGS, ComponentLocation.NONE, "Enduro", "Max"),
]

RIGID_PARTS: list[tuple[ComponentType, ComponentLocation, str, str]] = [
    (ComponentType.BRAKE_PAD, ComponentLocation.FRONT, "Shimano", "L05A"),
    (ComponentType.BRAKE_PAD, ComponentLocation.REAR, "Shimano", "L05A"),
    (ComponentType.CHAIN, ComponentLocation.NONE, "Shimano", "CN-M8100"),
    (ComponentType.CASSETTE, ComponentLocation.NONE, "Shimano", "GRX"),
    (ComponentType.DRIVETRAIN, ComponentLocation.NONE, "Shimano", "GRX"),
    (ComponentType.TIRES, ComponentLocation.FRONT, "WTB", "Riddler"),
    (ComponentType.TIRES, ComponentLocation.REAR, "WTB", "Riddler"),
    (ComponentType.BOTTOM_BRACKET, ComponentLocation.NONE, "Shimano", "BB-RS500"),
]


def _ride_conditions(profile: RidingProfile, day_of_year: int, rng: np.random.Generator) -> RideConditions:
    # Wetter in winter, dustier in summer
    season = np.cos(2 * np.pi * (day_of_year - 15) / 365.0)  # 1 = mid-January
    wet = float(np.clip(profile.wet_share * (1.0 + 0.8 * season), 0.0, 0.9))
    dusty = float(np.clip(0.25 * (1.0 - season), 0.0, 0.5))
    dry = max(0.0, 1.0 - wet - dusty)
    choice = rng.choice(
        ["DRY", "DUSTY", "WET", "MUDDY"],
        p=np.array([dry, dusty, wet * 0.6, wet * 0.4]) / (dry + dusty + wet),
    )
    return RideConditions(choice)


def _ride_temperature(day_of_year: int, rng: np.random.Generator) -> float:
    season = np.cos(2 * np.pi * (day_of_year - 200) / 365.0)  # 1 = mid-July
    return round(float(60.0 + 22.0 * season + rng.normal(0, 6.0)), 1)


def _generate_rides(
    bike_id: str,
    profile: RidingProfile,
    start_day: datetime,
    days: int,
    rng: np.random.Generator,
) -> list[RideRecord]:
    rides: list[RideRecord] = []
    daily_rate = profile.rides_per_week / 7.0

    for day in range(days):
        date = start_day + timedelta(days=day)
        weekend = date.weekday() >= 5
        rate = daily_rate * (1.8 if weekend else 0.7)
        if rng.random() > min(rate, 0.95):
            continue

        start = date.replace(hour=int(rng.integers(7, 18)), minute=int(rng.integers(0, 60)))
        hours = float(np.clip(rng.normal(*profile.duration_hours), 0.4, 7.0))
        speed = float(np.clip(rng.normal(*profile.speed_mph), 3.0, 25.0))
        miles = hours * speed
        climb = float(np.clip(rng.normal(*profile.climb_ft_per_mile), 5.0, 400.0)) * miles
        doy = start.timetuple().tm_yday

        rides.append(RideRecord(
            id=f"{bike_id}-ride-{len(rides) + 1:04d}",
            bike_id=bike_id,
            start_time=start,
            duration_seconds=round(hours * 3600.0),
            distance_miles=round(miles, 2),
            elevation_gain_feet=round(climb),
            avg_speed_mph=round(speed, 1),
            temperature_f=_ride_temperature(doy, rng),
            conditions=_ride_conditions(profile, doy, rng),
        ))

    return rides


def _generate_components(
    bike_id: str,
    parts: list[tuple[ComponentType, ComponentLocation, str, str]],
    rides: list[RideRecord],
    start_day: datetime,
    rng: np.random.Generator,
) -> list[ComponentBaseline]:
    components: list[ComponentBaseline] = []

    for idx, (ctype, location, brand, model) in enumerate(parts):
        method = BaselineMethod(rng.choice(["MANUAL", "INFERRED", "DEFAULT"], p=[0.4, 0.35, 0.25]))
        serviced = bool(rides) and rng.random() < 0.6

        last_serviced_at = None
        baseline_wear = None
        if serviced:
            # Serviced just before a random ride in the second half of the history
            ride = rides[int(rng.integers(len(rides) // 2, len(rides)))]
            last_serviced_at = ride.start_time - timedelta(hours=1)
        elif method != BaselineMethod.DEFAULT:
            baseline_wear = round(float(rng.uniform(5.0, 60.0)), 1)

        components.append(ComponentBaseline(
            id=f"{bike_id}-{idx:02d}-{ctype.value.lower()}",
            bike_id=bike_id,
            component_type=ctype,
            location=location,
            brand=brand,
            model=model,
            is_stock=bool(rng.random() < 0.7),
            last_serviced_at=last_serviced_at,
            installed_at=start_day,
            baseline_wear_percent=baseline_wear,
            baseline_method=method,
            baseline_confidence=(
                ConfidenceLevel.HIGH if method == BaselineMethod.MANUAL else None
            ),
        ))

    return components


# ── Public API ────────────────────────────────────────────────────────────────

def generate_garage(
    seed: int = settings.SIMULATION_SEED,
    days: int = settings.HISTORY_DAYS,
) -> tuple[list[Bike], dict[str, list[RideRecord]]]:
    """
    Generate the demo fleet and `days` of ride history ending today.
    Returns (bikes, rides keyed by bike_id).
    """
    rng = np.random.default_rng(seed)
    end_day = datetime.now(tz=UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    start_day = end_day - timedelta(days=days)

    bikes: list[Bike] = []
    rides_by_bike: dict[str, list[RideRecord]] = {}

    for bike_id, name, profile_name in GARAGE:
        profile = PROFILES[profile_name]
        rides = _generate_rides(bike_id, profile, start_day, days, rng)
        parts = RIGID_PARTS if profile_name == "gravel" else FULL_SUSPENSION_PARTS
        components = _generate_components(bike_id, parts, rides, start_day, rng)

        bikes.append(Bike(id=bike_id, display_name=name, components=components))
        rides_by_bike[bike_id] = rides

    return bikes, rides_by_bike


def to_dataframe(rides: list[RideRecord]) -> pd.DataFrame:
    """Convert a list of RideRecords to a pandas DataFrame."""
    return pd.DataFrame([r.model_dump() for r in rides])
