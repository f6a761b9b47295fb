"""
config/components.py
────────────────────
Component catalog: types, locations, wear weights and base service intervals.

Per-ride wear magnitudes (one term per causal factor):
  hours        wH × H
  distance     wD × D / 10
  climbing     wC × C / 3000
  steepness    wV × (C / max(D, 1)) / 300
  speed        wS × H × max(speed − 10, 0) / 10
  temperature  wT × H × |T − 65| / 30
  conditions   wX × H × severity(conditions)

H = hours, D = miles, C = feet climbed, speed in mph, T in °F.
Weights are tuning parameters, not product constants.
"""
from dataclasses import dataclass
from enum import Enum


class ComponentType(str, Enum):
    FORK = "FORK"
    SHOCK = "SHOCK"
    BRAKES = "BRAKES"
    DRIVETRAIN = "DRIVETRAIN"
    TIRES = "TIRES"
    CHAIN = "CHAIN"
    CASSETTE = "CASSETTE"
    CHAINRING = "CHAINRING"
    WHEELS = "WHEELS"
    DROPPER = "DROPPER"
    PIVOT_BEARINGS = "PIVOT_BEARINGS"
    BRAKE_PAD = "BRAKE_PAD"
    BRAKE_ROTOR = "BRAKE_ROTOR"
    HEADSET = "HEADSET"
    BOTTOM_BRACKET = "BOTTOM_BRACKET"


class ComponentLocation(str, Enum):
    FRONT = "FRONT"
    REAR = "REAR"
    NONE = "NONE"


class RideConditions(str, Enum):
    DRY = "DRY"
    DUSTY = "DUSTY"
    WET = "WET"
    MUDDY = "MUDDY"
    SNOW = "SNOW"


@dataclass(frozen=True)
class WearWeights:
    hours: float
    distance: float
    climbing: float
    steepness: float
    speed: float = 0.1
    temperature: float = 0.05
    conditions: float = 0.3


@dataclass(frozen=True)
class PairedInterval:
    """Base interval that differs between the front and rear position."""
    front: float
    rear: float


# ── Wear weights per component type ───────────────────────────────────────────
COMPONENT_WEIGHTS: dict[ComponentType, WearWeights] = {
    # Brakes: climbing / steepness (descending) sensitive
    ComponentType.BRAKE_PAD: WearWeights(0.8, 0.2, 1.2, 1.2, speed=0.2, conditions=0.8),
    ComponentType.BRAKE_ROTOR: WearWeights(0.6, 0.2, 1.0, 1.4, speed=0.2, conditions=0.5),
    ComponentType.BRAKES: WearWeights(0.7, 0.3, 0.8, 0.9, temperature=0.15),
    # Drivetrain: distance / climbing sensitive, grit accelerates wear
    ComponentType.CHAIN: WearWeights(1.0, 1.2, 0.5, 0.1, conditions=0.9),
    ComponentType.CASSETTE: WearWeights(0.8, 1.0, 0.6, 0.1, conditions=0.6),
    ComponentType.CHAINRING: WearWeights(0.8, 1.0, 0.6, 0.1, conditions=0.6),
    ComponentType.DRIVETRAIN: WearWeights(1.1, 0.9, 0.2, 0.0, conditions=1.0),
    # Tires / wheels
    ComponentType.TIRES: WearWeights(0.7, 1.0, 0.4, 0.8, speed=0.3),
    ComponentType.WHEELS: WearWeights(0.8, 0.8, 0.3, 0.6, speed=0.2),
    # Suspension: hours dominant
    ComponentType.FORK: WearWeights(1.3, 0.3, 0.2, 0.1, speed=0.2, temperature=0.1),
    ComponentType.SHOCK: WearWeights(1.2, 0.3, 0.2, 0.1, speed=0.2, temperature=0.1),
    ComponentType.DROPPER: WearWeights(1.2, 0.2, 0.1, 0.0, temperature=0.1),
    # Bearings
    ComponentType.PIVOT_BEARINGS: WearWeights(1.0, 0.2, 0.8, 0.5, conditions=0.7),
    ComponentType.HEADSET: WearWeights(0.9, 0.2, 0.3, 0.7, conditions=0.5),
    ComponentType.BOTTOM_BRACKET: WearWeights(1.0, 0.8, 0.5, 0.1, conditions=0.7),
}

DEFAULT_WEIGHTS = WearWeights(hours=1.0, distance=0.5, climbing=0.3, steepness=0.2)

# ── Base service intervals (hours) ────────────────────────────────────────────
BASE_INTERVALS_HOURS: dict[ComponentType, float | PairedInterval] = {
    ComponentType.BRAKE_PAD: PairedInterval(front=40.0, rear=35.0),
    ComponentType.BRAKE_ROTOR: PairedInterval(front=200.0, rear=200.0),
    ComponentType.BRAKES: PairedInterval(front=100.0, rear=100.0),  # bleed
    ComponentType.CHAIN: 70.0,
    ComponentType.CASSETTE: 200.0,
    ComponentType.CHAINRING: 250.0,
    ComponentType.TIRES: PairedInterval(front=120.0, rear=100.0),
    ComponentType.WHEELS: 200.0,
    ComponentType.FORK: 50.0,  # lowers service
    ComponentType.SHOCK: 50.0,  # air can service
    ComponentType.DRIVETRAIN: 6.0,  # clean / lube
    ComponentType.DROPPER: 150.0,
    ComponentType.PIVOT_BEARINGS: 250.0,
    ComponentType.HEADSET: 250.0,
    ComponentType.BOTTOM_BRACKET: 250.0,
}

DEFAULT_INTERVAL_HOURS = 100.0

# ── Ride condition severities (0 = no extra wear) ─────────────────────────────
CONDITION_SEVERITY: dict[RideConditions, float] = {
    RideConditions.DRY: 0.0,
    RideConditions.DUSTY: 0.3,
    RideConditions.WET: 0.6,
    RideConditions.SNOW: 0.8,
    RideConditions.MUDDY: 1.0,
}

# Reference points for the speed / temperature terms
SPEED_REFERENCE_MPH = 10.0
TEMPERATURE_NEUTRAL_F = 65.0
TEMPERATURE_SPAN_F = 30.0

# ── Plausible maxima per ride (anything above is clamped) ─────────────────────
MAX_DURATION_SECONDS = 86_400.0  # 24 h
MAX_DISTANCE_MILES = 500.0
MAX_ELEVATION_FEET = 50_000.0
MAX_SPEED_MPH = 60.0


def get_weights(component_type: ComponentType) -> WearWeights:
    return COMPONENT_WEIGHTS.get(component_type, DEFAULT_WEIGHTS)


def get_base_interval(component_type: ComponentType, location: ComponentLocation) -> float:
    """
    Base service interval for a component type.
    Paired intervals pick the rear value for REAR and the front value otherwise.
    """
    interval = BASE_INTERVALS_HOURS.get(component_type)
    if interval is None:
        return DEFAULT_INTERVAL_HOURS
    if isinstance(interval, PairedInterval):
        return interval.rear if location == ComponentLocation.REAR else interval.front
    return interval
