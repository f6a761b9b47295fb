"""
ridewear/analytics/status.py
────────────────────────────
Status classifier.

Maps hours remaining to an urgency class:
  hours ≤ 0              → OVERDUE   (−0.0 included)
  0 < hours ≤ due_now    → DUE_NOW
  due_now < h ≤ due_soon → DUE_SOON
  otherwise              → ALL_GOOD  (also for absent / NaN hours)

Thresholds default to settings and can be overridden per call.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from config.settings import settings
from config.status import STATUS_SEVERITY, PredictionStatus
from ridewear.i18n.translator import t

PLACEHOLDER = "—"


@dataclass(frozen=True)
class StatusThresholds:
    due_now: float = settings.DUE_NOW_THRESHOLD_HOURS
    due_soon: float = settings.DUE_SOON_THRESHOLD_HOURS

    def __post_init__(self) -> None:
        if not (math.isfinite(self.due_now) and math.isfinite(self.due_soon)):
            raise ValueError("Status thresholds must be finite")
        if self.due_now < 0 or self.due_soon < 0:
            raise ValueError("Status thresholds must be non-negative")
        if self.due_now > self.due_soon:
            raise ValueError(
                f"due_now ({self.due_now}) must not exceed due_soon ({self.due_soon})"
            )


DEFAULT_THRESHOLDS = StatusThresholds()


def _is_absent(hours: float | None) -> bool:
    return hours is None or math.isnan(hours)


def classify(
    hours_remaining: float | None,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
) -> PredictionStatus:
    if _is_absent(hours_remaining):
        return PredictionStatus.ALL_GOOD
    if hours_remaining <= 0:
        return PredictionStatus.OVERDUE
    if hours_remaining <= thresholds.due_now:
        return PredictionStatus.DUE_NOW
    if hours_remaining <= thresholds.due_soon:
        return PredictionStatus.DUE_SOON
    return PredictionStatus.ALL_GOOD


def severity(status: PredictionStatus) -> int:
    """Higher is more urgent: OVERDUE 4 > DUE_NOW 3 > DUE_SOON 2 > ALL_GOOD 1."""
    return STATUS_SEVERITY[PredictionStatus(status)]


def most_severe(statuses) -> PredictionStatus:
    """Maximum severity of an iterable of statuses; ALL_GOOD when empty."""
    return max(statuses, key=severity, default=PredictionStatus.ALL_GOOD)


# ── Display helpers ───────────────────────────────────────────────────────────

def display_hours_remaining(hours_remaining: float | None) -> float | None:
    """Hours for display: overdue values clamp to 0.0, absent stays None."""
    if _is_absent(hours_remaining):
        return None
    return max(0.0, round(hours_remaining, 1))


def format_hours_remaining(hours_remaining: float | None) -> str:
    value = display_hours_remaining(hours_remaining)
    return PLACEHOLDER if value is None else f"{value:.1f}"


def status_label(status: PredictionStatus, lang: str | None = None) -> str:
    status = PredictionStatus(status)
    return t(f"status.{status.value}", lang, default=status.value)
