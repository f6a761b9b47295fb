"""
ridewear/analytics/wear.py
──────────────────────────
Wear accumulation: fold a bike's ride ledger into hours-since-service for one
component, keeping the per-ride wear magnitudes for driver attribution.

Window:
  rides with start_time >= last_serviced_at  (or installed_at if never serviced;
  every ride when both are unknown)

hours_since_service = Σ ride hours in window
                      + baseline_wear_percent/100 × base interval  (never serviced only)

Rides without a usable start_time or duration are skipped, never fatal.
Per-factor magnitudes follow the formulas documented in config/components.py.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

import numpy as np
import pandas as pd

from config.components import (
    CONDITION_SEVERITY,
    MAX_DISTANCE_MILES,
    MAX_DURATION_SECONDS,
    MAX_ELEVATION_FEET,
    MAX_SPEED_MPH,
    SPEED_REFERENCE_MPH,
    TEMPERATURE_NEUTRAL_F,
    TEMPERATURE_SPAN_F,
    WearWeights,
    get_weights,
)
from config.settings import settings
from ridewear.data.models import ComponentBaseline, RideRecord

logger = logging.getLogger(__name__)

FACTORS: tuple[str, ...] = (
    "hours",
    "distance",
    "climbing",
    "steepness",
    "speed",
    "temperature",
    "conditions",
)

RIDE_COLUMNS = [
    "id",
    "bike_id",
    "start_time",
    "duration_seconds",
    "distance_miles",
    "elevation_gain_feet",
    "avg_speed_mph",
    "temperature_f",
    "conditions",
]

_NUMERIC_COLUMNS = RIDE_COLUMNS[3:8]


@dataclass(frozen=True, eq=False)
class WearAccumulation:
    component_id: str
    window_start: datetime | None
    hours_since_service: float
    ride_hours: float
    carry_over_hours: float
    lifetime_hours: float
    ride_count: int
    excluded_rides: int
    data_span_days: float
    avg_recent_ride_hours: float
    magnitudes: pd.DataFrame  # one row per ride in window, one column per factor

    @property
    def total_wear(self) -> float:
        if self.magnitudes.empty:
            return 0.0
        return float(self.magnitudes[list(FACTORS)].to_numpy().sum())

    def factor_totals(self) -> dict[str, float]:
        if self.magnitudes.empty:
            return {factor: 0.0 for factor in FACTORS}
        sums = self.magnitudes[list(FACTORS)].sum()
        return {factor: float(sums[factor]) for factor in FACTORS}


# ── Ledger helpers ────────────────────────────────────────────────────────────

def _condition_severity(value) -> float:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return 0.0
    return CONDITION_SEVERITY.get(value, 0.0)


def rides_to_frame(rides: Iterable[RideRecord | dict] | pd.DataFrame) -> pd.DataFrame:
    """Convert rides (models, raw dicts or a ledger DataFrame) to a typed DataFrame sorted by start_time."""
    if isinstance(rides, pd.DataFrame):
        df = rides.reindex(columns=RIDE_COLUMNS).copy()
    else:
        records = [
            (r if isinstance(r, RideRecord) else RideRecord.model_validate(r)).model_dump()
            for r in rides
        ]
        df = pd.DataFrame(records, columns=RIDE_COLUMNS)
    df["start_time"] = pd.to_datetime(df["start_time"], utc=True, errors="coerce", format="ISO8601")
    for col in _NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df.sort_values("start_time", kind="stable", na_position="last").reset_index(drop=True)


def valid_rides(df: pd.DataFrame) -> pd.DataFrame:
    """Rides that can be placed in time and have a non-negative duration."""
    mask = df["start_time"].notna() & df["duration_seconds"].notna() & (df["duration_seconds"] >= 0)
    return df.loc[mask]


def ride_magnitudes(df: pd.DataFrame, weights: WearWeights) -> pd.DataFrame:
    """
    Compute per-ride wear magnitudes for each factor.

    Returns a DataFrame with columns: id, start_time, ride_hours, <FACTORS...>
    """
    hours = df["duration_seconds"].clip(0.0, MAX_DURATION_SECONDS).fillna(0.0) / 3600.0
    distance = df["distance_miles"].clip(0.0, MAX_DISTANCE_MILES).fillna(0.0)
    climbing = df["elevation_gain_feet"].clip(0.0, MAX_ELEVATION_FEET).fillna(0.0)

    derived_speed = pd.Series(
        np.where(hours > 0, distance / hours.where(hours > 0, 1.0), 0.0),
        index=df.index,
    )
    speed = df["avg_speed_mph"].fillna(derived_speed).clip(0.0, MAX_SPEED_MPH)
    excess_speed = (speed - SPEED_REFERENCE_MPH).clip(lower=0.0) / SPEED_REFERENCE_MPH

    temp_stress = ((df["temperature_f"] - TEMPERATURE_NEUTRAL_F).abs() / TEMPERATURE_SPAN_F).fillna(0.0)
    conditions = df["conditions"].map(_condition_severity).astype(float)

    steepness = climbing / distance.clip(lower=1.0)

    out = pd.DataFrame(
        {
            "id": df["id"],
            "start_time": df["start_time"],
            "ride_hours": hours,
            "hours": weights.hours * hours,
            "distance": weights.distance * (distance / 10.0),
            "climbing": weights.climbing * (climbing / 3000.0),
            "steepness": weights.steepness * (steepness / 300.0),
            "speed": weights.speed * hours * excess_speed,
            "temperature": weights.temperature * hours * temp_stress,
            "conditions": weights.conditions * hours * conditions,
        },
        index=df.index,
    )
    return out.reset_index(drop=True)


# ── Main API ──────────────────────────────────────────────────────────────────

def accumulate_wear(
    component: ComponentBaseline,
    rides: Iterable[RideRecord | dict] | pd.DataFrame,
    weights: WearWeights | None = None,
    recent_rides_target: int = settings.RECENT_RIDES_TARGET,
) -> WearAccumulation:
    """
    Fold the bike's ride ledger into cumulative wear for one component.

    Pure function: the same baseline and ride set always give the same result.
    """
    df = rides_to_frame(rides)
    weights = weights or get_weights(component.component_type)

    usable = valid_rides(df)
    excluded = len(df) - len(usable)
    if excluded:
        logger.debug("Component %s: skipped %d ride(s) without usable time/duration", component.id, excluded)

    window_start = component.last_serviced_at or component.installed_at
    in_window = usable if window_start is None else usable.loc[usable["start_time"] >= pd.Timestamp(window_start)]
    installed = (
        usable
        if component.installed_at is None
        else usable.loc[usable["start_time"] >= pd.Timestamp(component.installed_at)]
    )

    magnitudes = ride_magnitudes(in_window, weights)
    ride_hours = float(magnitudes["ride_hours"].sum()) if not magnitudes.empty else 0.0

    carry_over = 0.0
    if component.last_serviced_at is None and component.baseline_wear_percent is not None:
        carry_over = component.baseline_wear_percent / 100.0 * component.base_interval_hours

    if len(in_window) >= 2:
        span = in_window["start_time"].max() - in_window["start_time"].min()
        span_days = span.total_seconds() / 86_400.0
    else:
        span_days = 0.0

    lifetime_hours = float(installed["duration_seconds"].clip(0.0, MAX_DURATION_SECONDS).sum() / 3600.0)

    recent = usable.tail(max(recent_rides_target, 1))
    if recent.empty:
        avg_recent = 0.0
    else:
        avg_recent = float(recent["duration_seconds"].clip(0.0, MAX_DURATION_SECONDS).mean() / 3600.0)

    return WearAccumulation(
        component_id=component.id,
        window_start=window_start,
        hours_since_service=ride_hours + carry_over,
        ride_hours=ride_hours,
        carry_over_hours=carry_over,
        lifetime_hours=lifetime_hours + carry_over,
        ride_count=len(in_window),
        excluded_rides=excluded,
        data_span_days=span_days,
        avg_recent_ride_hours=avg_recent,
        magnitudes=magnitudes,
    )
