"""
ridewear/analytics/priority.py
──────────────────────────────
Priority resolution: one urgency comparator, used for components within a
bike and for bikes within a fleet.

Sort key:
  1. status severity, most urgent first
  2. hours remaining, ascending (absent hours last)
  3. label, alphabetical (component label, or bike display name)
"""
from __future__ import annotations

import math
from collections.abc import Iterable

from config.components import ComponentLocation, ComponentType
from config.status import PredictionStatus
from ridewear.analytics.status import most_severe, severity
from ridewear.data.models import BikePredictionSummary, ComponentPrediction
from ridewear.i18n.translator import t

UrgencyKey = tuple[int, float, str]


def urgency_key(status: PredictionStatus, hours_remaining: float | None, label: str) -> UrgencyKey:
    hours = math.inf if hours_remaining is None or math.isnan(hours_remaining) else hours_remaining
    return (-severity(status), hours, (label or "").casefold())


def format_component_label(
    component_type: ComponentType | str,
    location: ComponentLocation | str | None = None,
    lang: str | None = None,
) -> str:
    """e.g. "Fork", "Brake Pads (Front)"."""
    type_key = str(getattr(component_type, "value", component_type))
    base = t(f"components.{type_key}", lang, default=type_key)
    loc_key = str(getattr(location, "value", location or ComponentLocation.NONE.value))
    loc_label = t(f"locations.{loc_key}", lang, default="")
    if loc_label and loc_key != ComponentLocation.NONE.value:
        return f"{base} ({loc_label})"
    return base


# ── Component scope ───────────────────────────────────────────────────────────

def component_key(prediction: ComponentPrediction) -> UrgencyKey:
    return urgency_key(prediction.status, prediction.hours_remaining, prediction.label)


def sort_components(predictions: Iterable[ComponentPrediction]) -> list[ComponentPrediction]:
    return sorted(predictions, key=component_key)


def find_priority_component(predictions: Iterable[ComponentPrediction]) -> ComponentPrediction | None:
    """Most urgent component, or None when everything is ALL_GOOD."""
    ordered = sort_components(predictions)
    if not ordered or ordered[0].status == PredictionStatus.ALL_GOOD:
        return None
    return ordered[0]


def overall_status(predictions: Iterable[ComponentPrediction]) -> PredictionStatus:
    return most_severe(p.status for p in predictions)


# ── Fleet scope ───────────────────────────────────────────────────────────────

def bike_key(summary: BikePredictionSummary) -> UrgencyKey:
    """
    Same comparator as components, driven by the bike's lead component.
    Falls back to the top ALL_GOOD component when there is no priority one.
    """
    lead = summary.priority_component or (summary.components[0] if summary.components else None)
    if lead is None:
        return urgency_key(PredictionStatus.ALL_GOOD, None, summary.bike_name)
    return urgency_key(lead.status, lead.hours_remaining, summary.bike_name)


def sort_bikes(summaries: Iterable[BikePredictionSummary]) -> list[BikePredictionSummary]:
    return sorted(summaries, key=bike_key)


def find_priority_bike(summaries: Iterable[BikePredictionSummary]) -> BikePredictionSummary | None:
    ordered = sort_bikes(summaries)
    return ordered[0] if ordered else None
