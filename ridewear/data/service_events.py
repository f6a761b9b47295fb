"""
ridewear/data/service_events.py
───────────────────────────────
Service-log and snooze mutations on component baselines.

Per component state machine:
  NORMAL  ──snooze──▶ SNOOZED   (interval offset grows, last_serviced_at kept)
  SNOOZED ──snooze──▶ SNOOZED   (offsets add up)
  any     ──service─▶ NORMAL    (last_serviced_at = performed_at, offset cleared)

Writes are read-modify-write with a compare-and-swap on the row version; a
lost race is retried against the fresh row, then reported as
ConcurrentModificationError. Arguments are validated before anything is read,
so a rejected call never mutates state.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import datetime
from typing import Any

from config.settings import settings
from ridewear.analytics.prediction import compute_predictions
from ridewear.data import store as default_store
from ridewear.data.exceptions import (
    ComponentNotFoundError,
    ConcurrentModificationError,
    InvalidServiceEventError,
)
from ridewear.data.models import (
    BikePredictionSummary,
    ComponentBaseline,
    clean_number,
    now_utc,
    to_utc,
)

logger = logging.getLogger(__name__)

# Called with (bike_id, component_id) after every committed mutation
Listener = Callable[[str, str], None]


class ServiceEventApplier:
    """
    `store` is anything exposing get_component / compare_and_swap_component /
    get_bike / get_rides (the SQLite store module by default).
    """

    def __init__(
        self,
        store: Any = None,
        clock: Callable[[], datetime] = now_utc,
        max_retries: int = settings.MAX_WRITE_RETRIES,
        snooze_min_hours: float = settings.SNOOZE_MIN_HOURS,
        snooze_max_hours: float = settings.SNOOZE_MAX_HOURS,
    ):
        self._store = store if store is not None else default_store
        self._clock = clock
        self._max_retries = max(0, max_retries)
        self._snooze_min = snooze_min_hours
        self._snooze_max = snooze_max_hours
        self._listeners: list[Listener] = []

    # ── Listeners ─────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, component: ComponentBaseline) -> None:
        for listener in self._listeners:
            try:
                listener(component.bike_id, component.id)
            except Exception:
                logger.exception("Invalidation listener failed for bike %s", component.bike_id)

    # ── Mutations ─────────────────────────────────────────────────────────────

    def log_service(self, component_id: str, performed_at: Any = None) -> ComponentBaseline:
        """
        Record a service on `performed_at` (now if None). Only rides from that
        moment on count toward the next prediction.
        """
        now = self._clock()
        if performed_at is None:
            when = now
        else:
            when = to_utc(performed_at)
            if when is None:
                raise InvalidServiceEventError(f"Invalid service date: {performed_at!r}")
        if when > now:
            raise InvalidServiceEventError("Service date cannot be in the future")

        updated = self._apply(component_id, lambda c: {"last_serviced_at": when, "snooze_hours": 0.0})
        logger.info("Logged service for component %s at %s", component_id, when.isoformat())
        return updated

    def snooze_component(self, component_id: str, extra_hours: Any = None) -> ComponentBaseline:
        """
        Push the service point back by `extra_hours` without logging a service.
        None snoozes by the component's base interval (capped at the maximum).
        """
        if extra_hours is None:
            def change(c: ComponentBaseline) -> dict:
                return {"snooze_hours": c.snooze_hours + min(c.base_interval_hours, self._snooze_max)}
        else:
            hours = self._validate_snooze(extra_hours)

            def change(c: ComponentBaseline) -> dict:
                return {"snooze_hours": c.snooze_hours + hours}

        updated = self._apply(component_id, change)
        logger.info(
            "Snoozed component %s, interval offset now %.1f h", component_id, updated.snooze_hours
        )
        return updated

    def _validate_snooze(self, extra_hours: Any) -> float:
        hours = clean_number(extra_hours, allow_negative=True)
        if hours is None or not math.isfinite(hours):
            raise InvalidServiceEventError(f"Snooze hours must be a number, got {extra_hours!r}")
        if hours < self._snooze_min or hours > self._snooze_max:
            raise InvalidServiceEventError(
                f"Snooze hours must be between {self._snooze_min:g} and {self._snooze_max:g}, got {hours:g}"
            )
        return hours

    def _apply(
        self,
        component_id: str,
        change: Callable[[ComponentBaseline], dict],
    ) -> ComponentBaseline:
        for attempt in range(self._max_retries + 1):
            current = self._store.get_component(component_id)
            if current is None:
                raise ComponentNotFoundError(component_id)
            updated = current.model_copy(update={**change(current), "version": current.version + 1})
            if self._store.compare_and_swap_component(updated, expected_version=current.version):
                self._notify(updated)
                return updated
            logger.warning(
                "Version conflict on component %s (attempt %d/%d)",
                component_id, attempt + 1, self._max_retries + 1,
            )
        raise ConcurrentModificationError(
            f"Component {component_id} changed concurrently {self._max_retries + 1} times; giving up"
        )

    # ── Recompute ─────────────────────────────────────────────────────────────

    def recompute(self, bike_id: str, **kwargs) -> BikePredictionSummary | None:
        """Fresh summary for a bike from the stored baselines and rides."""
        bike = self._store.get_bike(bike_id)
        if bike is None:
            return None
        return compute_predictions(bike, self._store.get_rides(bike_id), **kwargs)


_default_applier = ServiceEventApplier()


def log_service(component_id: str, performed_at: Any = None) -> ComponentBaseline:
    return _default_applier.log_service(component_id, performed_at)


def snooze_component(component_id: str, extra_hours: Any = None) -> ComponentBaseline:
    return _default_applier.snooze_component(component_id, extra_hours)
