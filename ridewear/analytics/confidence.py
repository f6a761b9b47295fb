"""
ridewear/analytics/confidence.py
────────────────────────────────
Prediction confidence from baseline provenance and data sufficiency.

  DEFAULT baseline / unknown method           → LOW
  fewer than MEDIUM_MIN rides                 → LOW
  MANUAL   + ≥ HIGH_MIN rides                 → HIGH
  INFERRED + ≥ HIGH_MIN rides + ≥ MIN_SPAN d  → HIGH
  anything else                               → MEDIUM
"""
from __future__ import annotations

from typing import Any

from config.settings import settings
from config.status import ConfidenceLevel
from ridewear.data.models import BaselineMethod, clean_number


def _method(value: Any) -> BaselineMethod | None:
    try:
        return BaselineMethod(getattr(value, "value", value))
    except (ValueError, TypeError):
        return None


def estimate(
    baseline_method: BaselineMethod | str | None,
    ride_count: Any,
    data_span_days: Any,
    high_min_rides: int = settings.CONFIDENCE_HIGH_MIN_RIDES,
    medium_min_rides: int = settings.CONFIDENCE_MEDIUM_MIN_RIDES,
    high_min_span_days: float = settings.CONFIDENCE_HIGH_MIN_SPAN_DAYS,
) -> ConfidenceLevel:
    """Never raises: bad counts / spans are read as zero."""
    method = _method(baseline_method)
    rides = int(clean_number(ride_count) or 0)
    span = clean_number(data_span_days) or 0.0

    if method is None or method == BaselineMethod.DEFAULT:
        return ConfidenceLevel.LOW
    if rides < medium_min_rides:
        return ConfidenceLevel.LOW
    if rides >= high_min_rides:
        if method == BaselineMethod.MANUAL:
            return ConfidenceLevel.HIGH
        if span >= high_min_span_days:
            return ConfidenceLevel.HIGH
    return ConfidenceLevel.MEDIUM
