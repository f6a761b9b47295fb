"""
config/status.py
────────────────
Prediction status and confidence levels, severity ordering.
"""

from enum import Enum


class PredictionStatus(str, Enum):
    OVERDUE = "OVERDUE"
    DUE_NOW = "DUE_NOW"
    DUE_SOON = "DUE_SOON"
    ALL_GOOD = "ALL_GOOD"


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Severity ordering for sorting (higher = more urgent)
STATUS_SEVERITY: dict[PredictionStatus, int] = {
    PredictionStatus.OVERDUE: 4,
    PredictionStatus.DUE_NOW: 3,
    PredictionStatus.DUE_SOON: 2,
    PredictionStatus.ALL_GOOD: 1,
}
