"""
ridewear/analytics/drivers.py
─────────────────────────────
Wear driver attribution.

Aggregates per-ride factor magnitudes over the accumulation window and turns
them into integer percentage shares (largest-remainder rounding, so the full
list sums to exactly 100). Only the top contributors are returned.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

import pandas as pd

from config.settings import settings
from ridewear.analytics.wear import FACTORS, WearAccumulation
from ridewear.data.models import WearDriver
from ridewear.i18n.translator import t

# Tie-break order when two factors have the same share
CANONICAL_ORDER: tuple[str, ...] = (
    "steepness",
    "hours",
    "climbing",
    "distance",
    "speed",
    "temperature",
    "conditions",
)


def _rank(factor: str) -> int:
    try:
        return CANONICAL_ORDER.index(factor)
    except ValueError:
        return len(CANONICAL_ORDER)


def factor_label(factor: str, lang: str | None = None) -> str:
    return t(f"factors.{factor}.label", lang, default=t("factors.generic.label", lang))


def describe_factor(factor: str, lang: str | None = None) -> str:
    """Fixed human-readable definition; unknown factors get a generic one."""
    return t(f"factors.{factor}.definition", lang, default=t("factors.generic.definition", lang))


def factor_totals(source: WearAccumulation | pd.DataFrame | Mapping[str, float]) -> dict[str, float]:
    if isinstance(source, WearAccumulation):
        return source.factor_totals()
    if isinstance(source, pd.DataFrame):
        cols = [c for c in FACTORS if c in source.columns]
        return {c: float(source[c].sum()) for c in cols}
    return dict(source)


def normalize_contributions(raw: Mapping[str, float]) -> dict[str, int]:
    """
    Scale raw magnitudes to integer percentages summing to 100.
    Non-finite and non-positive magnitudes are ignored. Empty if nothing wore.
    """
    cleaned = {
        k: float(v) for k, v in raw.items()
        if v is not None and math.isfinite(float(v)) and float(v) > 0.0
    }
    total = sum(cleaned.values())
    if total <= 0.0:
        return {}

    exact = {k: v / total * 100.0 for k, v in cleaned.items()}
    shares = {k: math.floor(v) for k, v in exact.items()}
    leftover = 100 - sum(shares.values())
    by_remainder = sorted(exact, key=lambda k: (-(exact[k] - shares[k]), _rank(k), k))
    for k in by_remainder[:leftover]:
        shares[k] += 1
    return shares


def attribute_drivers(
    source: WearAccumulation | pd.DataFrame | Mapping[str, float],
    max_drivers: int | None = settings.MAX_DRIVERS,
    lang: str | None = None,
) -> list[WearDriver]:
    """
    Rank wear factors by their share of accumulated wear.

    Args:
        source: Accumulation result, per-ride magnitudes, or factor → raw magnitude
        max_drivers: Cap on returned drivers (None = all)
        lang: Label language override

    Returns:
        Drivers sorted by contribution (desc), ties in canonical factor order.
        Empty when total wear is zero.
    """
    shares = normalize_contributions(factor_totals(source))
    ordered = sorted(
        (k for k, v in shares.items() if v > 0),
        key=lambda k: (-shares[k], _rank(k), k),
    )
    if max_drivers is not None:
        ordered = ordered[:max(max_drivers, 0)]

    return [
        WearDriver(
            factor=k,
            label=factor_label(k, lang),
            contribution=float(shares[k]),
            definition=describe_factor(k, lang),
        )
        for k in ordered
    ]
