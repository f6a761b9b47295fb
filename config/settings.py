"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database (SQLite path; ":memory:" for tests)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "ridewear.db")

    # Simulation
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))
    HISTORY_DAYS: int = int(os.getenv("HISTORY_DAYS", "120"))

    # i18n
    DEFAULT_LANG: str = os.getenv("DEFAULT_LANG", "en")

    # Status thresholds (hours remaining)
    DUE_NOW_THRESHOLD_HOURS: float = float(os.getenv("DUE_NOW_THRESHOLD_HOURS", "2"))
    DUE_SOON_THRESHOLD_HOURS: float = float(os.getenv("DUE_SOON_THRESHOLD_HOURS", "10"))

    # Confidence
    CONFIDENCE_HIGH_MIN_RIDES: int = int(os.getenv("CONFIDENCE_HIGH_MIN_RIDES", "8"))
    CONFIDENCE_MEDIUM_MIN_RIDES: int = int(os.getenv("CONFIDENCE_MEDIUM_MIN_RIDES", "4"))
    CONFIDENCE_HIGH_MIN_SPAN_DAYS: float = float(os.getenv("CONFIDENCE_HIGH_MIN_SPAN_DAYS", "14"))

    # Explanations
    MAX_DRIVERS: int = int(os.getenv("MAX_DRIVERS", "3"))
    RECENT_RIDES_TARGET: int = int(os.getenv("RECENT_RIDES_TARGET", "10"))

    # Snooze bounds (hours)
    SNOOZE_MIN_HOURS: float = float(os.getenv("SNOOZE_MIN_HOURS", "1"))
    SNOOZE_MAX_HOURS: float = float(os.getenv("SNOOZE_MAX_HOURS", "400"))

    # Writes / fleet evaluation
    MAX_WRITE_RETRIES: int = int(os.getenv("MAX_WRITE_RETRIES", "3"))
    MAX_WORKERS: int = int(os.getenv("MAX_WORKERS", "4"))

    ALGO_VERSION: str = "v1"


settings = Settings()
