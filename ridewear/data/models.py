"""
ridewear/data/models.py
───────────────────────
Pydantic v2 data models for bikes, rides, component baselines and predictions.

Ride and baseline inputs are sanitized on the way in: NaN / infinite /
negative numerics and unparsable timestamps become ``None`` (absent) instead
of raising, and naive timestamps are read as UTC.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.components import (
    ComponentLocation,
    ComponentType,
    RideConditions,
    get_base_interval,
)
from config.settings import settings
from config.status import ConfidenceLevel, PredictionStatus


class BaselineMethod(str, Enum):
    MANUAL = "MANUAL"
    INFERRED = "INFERRED"
    DEFAULT = "DEFAULT"


class ServiceState(str, Enum):
    NORMAL = "NORMAL"
    SNOOZED = "SNOOZED"


# ── Input sanitation ──────────────────────────────────────────────────────────

def to_utc(value: Any) -> datetime | None:
    """Parse a datetime / date / ISO string into an aware UTC datetime, or None."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
    return ts.to_pydatetime()


def clean_number(value: Any, allow_negative: bool = False) -> float | None:
    """Return a finite float, or None for missing / NaN / negative input."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if number < 0 and not allow_negative:
        return None
    return number


def now_utc() -> datetime:
    return datetime.now(tz=UTC)


# ── Inputs ────────────────────────────────────────────────────────────────────

class RideRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    bike_id: str
    start_time: datetime | None = None
    duration_seconds: float | None = None
    distance_miles: float | None = None
    elevation_gain_feet: float | None = None
    avg_speed_mph: float | None = None
    temperature_f: float | None = None
    conditions: RideConditions | None = None

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start_time(cls, value: Any) -> datetime | None:
        return to_utc(value)

    @field_validator(
        "duration_seconds", "distance_miles", "elevation_gain_feet", "avg_speed_mph",
        mode="before",
    )
    @classmethod
    def _non_negative(cls, value: Any) -> float | None:
        return clean_number(value)

    @field_validator("temperature_f", mode="before")
    @classmethod
    def _finite(cls, value: Any) -> float | None:
        return clean_number(value, allow_negative=True)

    @field_validator("conditions", mode="before")
    @classmethod
    def _known_conditions(cls, value: Any) -> RideConditions | None:
        if value is None:
            return None
        try:
            return RideConditions(str(getattr(value, "value", value)).upper())
        except ValueError:
            return None


class ComponentBaseline(BaseModel):
    """
    Static facts about one serviceable part.

    Instances are immutable; mutations produce a new copy with a bumped
    ``version`` (see ridewear/data/service_events.py).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    bike_id: str
    component_type: ComponentType
    location: ComponentLocation = ComponentLocation.NONE
    brand: str = ""
    model: str = ""
    is_stock: bool = True
    service_interval_hours: float | None = Field(default=None, gt=0.0)
    last_serviced_at: datetime | None = None
    installed_at: datetime | None = None
    baseline_wear_percent: float | None = Field(default=None, ge=0.0, le=100.0)
    baseline_method: BaselineMethod = BaselineMethod.DEFAULT
    baseline_confidence: ConfidenceLevel | None = None
    snooze_hours: float = Field(default=0.0, ge=0.0)
    version: int = Field(default=0, ge=0)

    @field_validator("last_serviced_at", "installed_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime | None:
        return to_utc(value)

    @field_validator("service_interval_hours", mode="before")
    @classmethod
    def _positive_interval(cls, value: Any) -> float | None:
        hours = clean_number(value)
        return hours if hours else None

    @field_validator("baseline_wear_percent", mode="before")
    @classmethod
    def _percent(cls, value: Any) -> float | None:
        percent = clean_number(value)
        return percent if percent is not None and percent <= 100.0 else None

    @field_validator("snooze_hours", mode="before")
    @classmethod
    def _snooze(cls, value: Any) -> float:
        return clean_number(value) or 0.0

    @property
    def base_interval_hours(self) -> float:
        if self.service_interval_hours is not None:
            return self.service_interval_hours
        return get_base_interval(self.component_type, self.location)

    @property
    def effective_interval_hours(self) -> float:
        return self.base_interval_hours + self.snooze_hours

    @property
    def service_state(self) -> ServiceState:
        return ServiceState.SNOOZED if self.snooze_hours > 0 else ServiceState.NORMAL


class Bike(BaseModel):
    id: str
    display_name: str
    components: list[ComponentBaseline] = Field(default_factory=list)


# ── Outputs ───────────────────────────────────────────────────────────────────

class WearDriver(BaseModel):
    model_config = ConfigDict(frozen=True)

    factor: str
    label: str
    contribution: float = Field(ge=0.0, le=100.0)
    definition: str = ""


class ComponentPrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    component_id: str
    component_type: ComponentType
    location: ComponentLocation
    brand: str
    model: str
    label: str
    status: PredictionStatus
    hours_remaining: float | None
    rides_remaining_estimate: int = Field(ge=0)
    confidence: ConfidenceLevel
    current_hours: float = Field(ge=0.0)
    service_interval_hours: float = Field(ge=0.0)
    hours_since_service: float = Field(ge=0.0)
    why: str | None = None
    drivers: list[WearDriver] | None = None


class BikePredictionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    bike_id: str
    bike_name: str
    components: list[ComponentPrediction]
    priority_component: ComponentPrediction | None = None
    overall_status: PredictionStatus = PredictionStatus.ALL_GOOD
    due_now_count: int = 0
    due_soon_count: int = 0
    overdue_count: int = 0
    generated_at: datetime
    algo_version: str = settings.ALGO_VERSION


class FleetPrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    bikes: list[BikePredictionSummary]
    priority_bike: BikePredictionSummary | None = None
    failed_bike_ids: list[str] = Field(default_factory=list)
    generated_at: datetime
