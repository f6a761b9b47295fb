"""
ridewear/analytics/prediction.py
─────────────────────────────────
Prediction engine: component predictions, bike summaries, fleet priority.

Per component:
  interval         = service interval (or catalog base) + snooze offset
  hours_remaining  = interval − hours_since_service      (signed, 0.1 h)
  status           = classify(unrounded hours_remaining)
  confidence       = estimate(baseline_method, rides in window, span)
  rides remaining  = hours_remaining / average recent ride length

A component with no ride in its window and no carried-over baseline wear has
nothing to go on: it is reported ALL_GOOD with LOW confidence and no drivers.

Everything here is a pure function of (baselines, rides); bikes can be
evaluated in parallel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pandas as pd

from config.settings import settings
from config.status import PredictionStatus
from ridewear.analytics.confidence import estimate
from ridewear.analytics.drivers import attribute_drivers
from ridewear.analytics.explain import explain
from ridewear.analytics.priority import (
    find_priority_bike,
    find_priority_component,
    format_component_label,
    overall_status,
    sort_bikes,
    sort_components,
)
from ridewear.analytics.status import DEFAULT_THRESHOLDS, StatusThresholds, classify
from ridewear.analytics.wear import accumulate_wear, rides_to_frame
from ridewear.data.models import (
    Bike,
    BikePredictionSummary,
    ComponentBaseline,
    ComponentPrediction,
    FleetPrediction,
    RideRecord,
    now_utc,
)

logger = logging.getLogger(__name__)


def _ride_frame(bike_id: str, rides: Iterable[RideRecord | dict] | pd.DataFrame) -> pd.DataFrame:
    df = rides_to_frame(rides)
    foreign = df["bike_id"] != bike_id
    if foreign.any():
        logger.debug("Bike %s: ignoring %d ride(s) logged on other bikes", bike_id, int(foreign.sum()))
        df = df.loc[~foreign].reset_index(drop=True)
    return df


def estimate_rides_remaining(hours_remaining: float | None, avg_ride_hours: float) -> int:
    if hours_remaining is None or hours_remaining <= 0 or avg_ride_hours <= 0:
        return 0
    return max(0, int(round(hours_remaining / avg_ride_hours)))


def predict_component(
    component: ComponentBaseline,
    rides: Iterable[RideRecord | dict] | pd.DataFrame,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    include_explanations: bool = True,
    lang: str | None = None,
) -> ComponentPrediction:
    """
    Build a fresh prediction snapshot for one component.

    Rides logged on other bikes than ``component.bike_id`` are ignored.
    Status is classified on unrounded hours; the stored hour fields are
    rounded to 0.1 h.
    """
    acc = accumulate_wear(component, _ride_frame(component.bike_id, rides))
    label = format_component_label(component.component_type, component.location, lang)

    raw_remaining = component.effective_interval_hours - acc.hours_since_service
    interval = round(component.effective_interval_hours, 1)
    hours_since_service = round(acc.hours_since_service, 1)
    hours_remaining = round(interval - hours_since_service, 1)

    no_data = acc.ride_count == 0 and acc.carry_over_hours == 0.0
    if no_data:
        logger.debug("Component %s: no rides since %s, nothing to predict from", component.id, acc.window_start)
        status = PredictionStatus.ALL_GOOD
    else:
        status = classify(raw_remaining, thresholds)

    confidence = estimate(component.baseline_method, acc.ride_count, acc.data_span_days)

    why = None
    drivers = None
    if include_explanations:
        drivers = [] if no_data else attribute_drivers(acc, lang=lang)
        why = explain(label, status, hours_remaining, drivers, lang=lang)

    return ComponentPrediction(
        component_id=component.id,
        component_type=component.component_type,
        location=component.location,
        brand=component.brand,
        model=component.model,
        label=label,
        status=status,
        hours_remaining=hours_remaining,
        rides_remaining_estimate=estimate_rides_remaining(raw_remaining, acc.avg_recent_ride_hours),
        confidence=confidence,
        current_hours=round(acc.lifetime_hours, 1),
        service_interval_hours=interval,
        hours_since_service=hours_since_service,
        why=why,
        drivers=drivers,
    )


def compute_predictions(
    bike: Bike,
    rides: Iterable[RideRecord | dict] | pd.DataFrame,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    include_explanations: bool = True,
    lang: str | None = None,
    generated_at: datetime | None = None,
) -> BikePredictionSummary:
    """
    Predict every component of a bike and summarize by urgency.

    Args:
        bike: Bike with its component baselines
        rides: The bike's ride ledger (rides on other bikes are ignored)
        thresholds: DUE_NOW / DUE_SOON cutoffs
        include_explanations: When False, `why` and `drivers` are None
        lang: Label language override
        generated_at: Snapshot timestamp (now if None)
    """
    df = _ride_frame(bike.id, rides)
    predictions = sort_components(
        predict_component(c, df, thresholds, include_explanations, lang) for c in bike.components
    )
    statuses = [p.status for p in predictions]

    return BikePredictionSummary(
        bike_id=bike.id,
        bike_name=bike.display_name,
        components=predictions,
        priority_component=find_priority_component(predictions),
        overall_status=overall_status(predictions),
        due_now_count=statuses.count(PredictionStatus.DUE_NOW),
        due_soon_count=statuses.count(PredictionStatus.DUE_SOON),
        overdue_count=statuses.count(PredictionStatus.OVERDUE),
        generated_at=generated_at or now_utc(),
    )


def compute_fleet_predictions(
    bikes: Iterable[Bike],
    rides_by_bike: Mapping[str, Iterable[RideRecord | dict]],
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    include_explanations: bool = True,
    lang: str | None = None,
    max_workers: int = settings.MAX_WORKERS,
) -> FleetPrediction:
    """
    Predict every bike of a rider and pick the fleet's priority bike.

    A bike whose computation fails is logged and reported in
    `failed_bike_ids`; the remaining bikes are still ranked.
    """
    bikes = list(bikes)
    generated_at = now_utc()
    summaries: list[BikePredictionSummary] = []
    failed: list[str] = []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        futures = [
            (
                bike,
                pool.submit(
                    compute_predictions,
                    bike,
                    rides_by_bike.get(bike.id, []),
                    thresholds,
                    include_explanations,
                    lang,
                    generated_at,
                ),
            )
            for bike in bikes
        ]
        for bike, future in futures:
            try:
                summaries.append(future.result())
            except Exception:
                logger.exception("Prediction failed for bike %s", bike.id)
                failed.append(bike.id)

    ordered = sort_bikes(summaries)
    return FleetPrediction(
        bikes=ordered,
        priority_bike=find_priority_bike(ordered),
        failed_bike_ids=failed,
        generated_at=generated_at,
    )
