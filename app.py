"""
app.py
──────
RideWear: application entry point.

Startup sequence:
  1. Configure logging from LOG_LEVEL
  2. Initialize SQLite DB and seed it with a simulated garage
  3. Compute fleet predictions for every stored bike
  4. Log the priority report (fleet priority bike, then each bike's top components)
"""
import logging

from config.settings import settings
from ridewear.analytics.prediction import compute_fleet_predictions
from ridewear.analytics.status import format_hours_remaining, status_label
from ridewear.data import store
from ridewear.i18n.translator import set_lang

logger = logging.getLogger("ridewear")

TOP_COMPONENTS = 3


def main() -> None:
    # ── 1. Logging ────────────────────────────────────────────────────────────
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_lang(settings.DEFAULT_LANG)

    # ── 2. Seed database on startup ───────────────────────────────────────────
    logger.info("Initializing database and seeding simulation data...")
    store.initialize_db()
    logger.info("Database ready.")

    # ── 3. Predictions ────────────────────────────────────────────────────────
    bikes = store.list_bikes()
    fleet = compute_fleet_predictions(bikes, {b.id: store.get_rides(b.id) for b in bikes})

    # ── 4. Report ─────────────────────────────────────────────────────────────
    if fleet.priority_bike is not None:
        logger.info(
            "Fleet priority: %s (%s)",
            fleet.priority_bike.bike_name,
            status_label(fleet.priority_bike.overall_status),
        )
    for bike_id in fleet.failed_bike_ids:
        logger.warning("No prediction for bike %s", bike_id)

    for summary in fleet.bikes:
        logger.info(
            "%s: %s | overdue=%d due_now=%d due_soon=%d",
            summary.bike_name,
            status_label(summary.overall_status),
            summary.overdue_count,
            summary.due_now_count,
            summary.due_soon_count,
        )
        for pred in summary.components[:TOP_COMPONENTS]:
            logger.info(
                "  %-24s %-10s %8s h  [%s] %s",
                pred.label,
                status_label(pred.status),
                format_hours_remaining(pred.hours_remaining),
                pred.confidence.value,
                pred.why or "",
            )

    store.close_db()


if __name__ == "__main__":
    main()
