"""
ridewear/analytics/explain.py
─────────────────────────────
One-sentence explanation of a prediction, built from its top wear drivers.
"""
from __future__ import annotations

from config.status import PredictionStatus
from ridewear.data.models import WearDriver
from ridewear.i18n.translator import t

DOMINANT_SHARE = 50.0


def explain(
    component_label: str,
    status: PredictionStatus,
    hours_remaining: float | None,
    drivers: list[WearDriver],
    lang: str | None = None,
) -> str | None:
    """Return the `why` text, or None when there are no drivers to cite."""
    if not drivers:
        return None

    top = drivers[0]
    second = drivers[1] if len(drivers) > 1 else None
    fields = {
        "component": component_label.lower(),
        "top_label": top.label,
        "top_label_lower": top.label.lower(),
        "top_share": int(round(top.contribution)),
        "second_label_lower": second.label.lower() if second else "",
        "hours": int(round(max(hours_remaining or 0.0, 0.0))),
    }

    status = PredictionStatus(status)
    if status == PredictionStatus.DUE_NOW and second is None:
        key = "why.DUE_NOW_SINGLE"
    elif status == PredictionStatus.ALL_GOOD and top.contribution > DOMINANT_SHARE:
        key = "why.ALL_GOOD_DOMINANT"
    else:
        key = f"why.{status.value}"
    return t(key, lang).format(**fields)
