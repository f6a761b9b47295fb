"""
tests/test_status.py
─────────────────────
Tests for the status classifier and its display helpers.
"""
import numpy as np
import pytest

from config.status import PredictionStatus
from ridewear.analytics.status import (
    PLACEHOLDER,
    StatusThresholds,
    classify,
    display_hours_remaining,
    format_hours_remaining,
    most_severe,
    severity,
    status_label,
)


class TestClassify:
    @pytest.mark.parametrize(
        "hours, expected",
        [
            (-10.0, PredictionStatus.OVERDUE),
            (-0.0, PredictionStatus.OVERDUE),
            (0.0, PredictionStatus.OVERDUE),
            (0.1, PredictionStatus.DUE_NOW),
            (2.0, PredictionStatus.DUE_NOW),
            (2.1, PredictionStatus.DUE_SOON),
            (10.0, PredictionStatus.DUE_SOON),
            (10.1, PredictionStatus.ALL_GOOD),
            (500.0, PredictionStatus.ALL_GOOD),
        ],
    )
    def test_default_bands(self, hours, expected):
        assert classify(hours) == expected

    @pytest.mark.parametrize("hours", [None, float("nan")])
    def test_absent_hours_all_good(self, hours):
        assert classify(hours) == PredictionStatus.ALL_GOOD

    def test_monotonic(self):
        hours = np.linspace(-20.0, 30.0, 501)
        severities = [severity(classify(float(h))) for h in hours]
        assert all(a >= b for a, b in zip(severities, severities[1:]))

    def test_custom_thresholds(self):
        thresholds = StatusThresholds(due_now=1.0, due_soon=5.0)
        assert classify(1.5, thresholds) == PredictionStatus.DUE_SOON
        assert classify(6.0, thresholds) == PredictionStatus.ALL_GOOD


class TestStatusThresholds:
    @pytest.mark.parametrize(
        "due_now, due_soon",
        [(5.0, 2.0), (-1.0, 10.0), (float("nan"), 10.0), (2.0, float("inf"))],
    )
    def test_invalid(self, due_now, due_soon):
        with pytest.raises(ValueError):
            StatusThresholds(due_now=due_now, due_soon=due_soon)

    def test_equal_thresholds_allowed(self):
        thresholds = StatusThresholds(due_now=3.0, due_soon=3.0)
        assert classify(3.0, thresholds) == PredictionStatus.DUE_NOW


class TestSeverity:
    def test_ordering(self):
        order = [
            PredictionStatus.OVERDUE,
            PredictionStatus.DUE_NOW,
            PredictionStatus.DUE_SOON,
            PredictionStatus.ALL_GOOD,
        ]
        assert [severity(s) for s in order] == [4, 3, 2, 1]

    def test_most_severe(self):
        statuses = [PredictionStatus.ALL_GOOD, PredictionStatus.DUE_SOON, PredictionStatus.DUE_NOW]
        assert most_severe(statuses) == PredictionStatus.DUE_NOW

    def test_most_severe_empty(self):
        assert most_severe([]) == PredictionStatus.ALL_GOOD

    def test_accepts_raw_strings(self):
        assert severity("OVERDUE") == 4


class TestDisplay:
    def test_overdue_clamps_to_zero(self):
        assert classify(-10.0) == PredictionStatus.OVERDUE
        assert display_hours_remaining(-10.0) == 0.0
        assert format_hours_remaining(-10.0) == "0.0"

    def test_rounds_to_one_decimal(self):
        assert display_hours_remaining(12.345) == 12.3
        assert format_hours_remaining(12.345) == "12.3"

    def test_absent_placeholder(self):
        assert display_hours_remaining(None) is None
        assert format_hours_remaining(None) == PLACEHOLDER
        assert format_hours_remaining(float("nan")) == PLACEHOLDER

    def test_labels(self):
        assert status_label(PredictionStatus.DUE_SOON) == "Due soon"
        assert status_label(PredictionStatus.OVERDUE, lang="es") == "Vencido"
