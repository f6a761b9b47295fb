"""
ridewear/data/store.py
──────────────────────
SQLite data store abstraction.

Provides:
  - initialize_db()               : Create tables + seed with a simulated garage on first run
  - insert_bike() / list_bikes()  : Bikes with their component baselines
  - insert_components()           : Bulk insert ComponentBaseline rows
  - get_component()               : Fetch one baseline (with its version stamp)
  - compare_and_swap_component()  : Versioned write used by service events
  - insert_rides() / get_rides()  : Ride ledger per bike

Thread safety: uses check_same_thread=False + a module-level lock. Every read
and every write of a component row happens under the lock, so readers see
either the old or the new baseline, never a partial update.
"""
from __future__ import annotations

import sqlite3
import threading

import pandas as pd

from config.settings import settings
from ridewear.data.models import Bike, ComponentBaseline, RideRecord
from ridewear.data.simulator import generate_garage

_lock = threading.RLock()
_DB: sqlite3.Connection | None = None


# ── Connection ────────────────────────────────────────────────────────────────

def _get_conn() -> sqlite3.Connection:
    global _DB
    with _lock:
        if _DB is None:
            _DB = sqlite3.connect(settings.DATABASE_URL, check_same_thread=False)
            _DB.row_factory = sqlite3.Row
        return _DB


def close_db() -> None:
    """Close the shared connection (an in-memory DB is discarded)."""
    global _DB
    with _lock:
        if _DB is not None:
            _DB.close()
            _DB = None


# ── Schema ────────────────────────────────────────────────────────────────────

_CREATE_BIKES = """
CREATE TABLE IF NOT EXISTS bikes (
    id            TEXT PRIMARY KEY,
    display_name  TEXT NOT NULL
);
"""

_CREATE_COMPONENTS = """
CREATE TABLE IF NOT EXISTS components (
    id                     TEXT PRIMARY KEY,
    bike_id                TEXT NOT NULL REFERENCES bikes(id),
    component_type         TEXT NOT NULL,
    location               TEXT NOT NULL DEFAULT 'NONE',
    brand                  TEXT NOT NULL DEFAULT '',
    model                  TEXT NOT NULL DEFAULT '',
    is_stock               INTEGER NOT NULL DEFAULT 1,
    service_interval_hours REAL,
    last_serviced_at       TEXT,
    installed_at           TEXT,
    baseline_wear_percent  REAL,
    baseline_method        TEXT NOT NULL DEFAULT 'DEFAULT',
    baseline_confidence    TEXT,
    snooze_hours           REAL NOT NULL DEFAULT 0.0,
    version                INTEGER NOT NULL DEFAULT 0
);
"""

_CREATE_RIDES = """
CREATE TABLE IF NOT EXISTS rides (
    id                   TEXT PRIMARY KEY,
    bike_id              TEXT NOT NULL REFERENCES bikes(id),
    start_time           TEXT,
    duration_seconds     REAL,
    distance_miles       REAL,
    elevation_gain_feet  REAL,
    avg_speed_mph        REAL,
    temperature_f        REAL,
    conditions           TEXT
);
"""

_CREATE_IDX = """
CREATE INDEX IF NOT EXISTS idx_components_bike ON components (bike_id);
CREATE INDEX IF NOT EXISTS idx_rides_bike_ts   ON rides      (bike_id, start_time);
"""

_COMPONENT_FIELDS = (
    "id", "bike_id", "component_type", "location", "brand", "model", "is_stock",
    "service_interval_hours", "last_serviced_at", "installed_at",
    "baseline_wear_percent", "baseline_method", "baseline_confidence",
    "snooze_hours", "version",
)

_RIDE_FIELDS = (
    "id", "bike_id", "start_time", "duration_seconds", "distance_miles",
    "elevation_gain_feet", "avg_speed_mph", "temperature_f", "conditions",
)


def _create_tables(conn: sqlite3.Connection) -> None:
    with conn:
        conn.executescript(_CREATE_BIKES + _CREATE_COMPONENTS + _CREATE_RIDES + _CREATE_IDX)


# ── Row mapping ───────────────────────────────────────────────────────────────

def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def _enum_value(value) -> str | None:
    return getattr(value, "value", value)


def _component_row(c: ComponentBaseline) -> tuple:
    return (
        c.id,
        c.bike_id,
        c.component_type.value,
        c.location.value,
        c.brand,
        c.model,
        int(c.is_stock),
        c.service_interval_hours,
        _iso(c.last_serviced_at),
        _iso(c.installed_at),
        c.baseline_wear_percent,
        c.baseline_method.value,
        _enum_value(c.baseline_confidence),
        c.snooze_hours,
        c.version,
    )


def _component_from_row(row: sqlite3.Row) -> ComponentBaseline:
    data = dict(row)
    data["is_stock"] = bool(data["is_stock"])
    return ComponentBaseline.model_validate(data)


# ── Public API ────────────────────────────────────────────────────────────────

def initialize_db(force_reseed: bool = False, seed: bool = True) -> None:
    """
    Create tables and populate with a simulated garage if the DB is empty.
    Safe to call multiple times (idempotent).
    """
    conn = _get_conn()
    _create_tables(conn)

    with _lock:
        count = conn.execute("SELECT COUNT(*) FROM bikes").fetchone()[0]
        if count > 0 and not force_reseed:
            return  # Already seeded

        with conn:
            conn.execute("DELETE FROM rides")
            conn.execute("DELETE FROM components")
            conn.execute("DELETE FROM bikes")

        if not seed:
            return

        bikes, rides_by_bike = generate_garage()
        for bike in bikes:
            insert_bike(bike)
            insert_rides(rides_by_bike.get(bike.id, []))


def insert_bike(bike: Bike) -> None:
    conn = _get_conn()
    with _lock, conn:
        conn.execute(
            "INSERT OR REPLACE INTO bikes (id, display_name) VALUES (?, ?)",
            (bike.id, bike.display_name),
        )
    insert_components(bike.components)


def insert_components(components: list[ComponentBaseline]) -> None:
    if not components:
        return
    conn = _get_conn()
    placeholders = ",".join("?" * len(_COMPONENT_FIELDS))
    with _lock, conn:
        conn.executemany(
            f"INSERT OR REPLACE INTO components ({', '.join(_COMPONENT_FIELDS)}) VALUES ({placeholders})",
            [_component_row(c) for c in components],
        )


def get_component(component_id: str) -> ComponentBaseline | None:
    conn = _get_conn()
    with _lock:
        row = conn.execute("SELECT * FROM components WHERE id = ?", (component_id,)).fetchone()
    return _component_from_row(row) if row is not None else None


def compare_and_swap_component(updated: ComponentBaseline, expected_version: int) -> bool:
    """
    Replace a component row only if its stored version still equals
    `expected_version`. `updated.version` must already be bumped.

    Returns False when another writer got there first.
    """
    assignments = ", ".join(f"{f} = ?" for f in _COMPONENT_FIELDS[1:])
    row = _component_row(updated)
    conn = _get_conn()
    with _lock, conn:
        cur = conn.execute(
            f"UPDATE components SET {assignments} WHERE id = ? AND version = ?",
            (*row[1:], updated.id, expected_version),
        )
        return cur.rowcount == 1


def get_bike(bike_id: str) -> Bike | None:
    conn = _get_conn()
    with _lock:
        bike_row = conn.execute("SELECT * FROM bikes WHERE id = ?", (bike_id,)).fetchone()
        if bike_row is None:
            return None
        rows = conn.execute(
            "SELECT * FROM components WHERE bike_id = ? ORDER BY id", (bike_id,)
        ).fetchall()
    return Bike(
        id=bike_row["id"],
        display_name=bike_row["display_name"],
        components=[_component_from_row(r) for r in rows],
    )


def list_bikes() -> list[Bike]:
    conn = _get_conn()
    with _lock:
        ids = [r["id"] for r in conn.execute("SELECT id FROM bikes ORDER BY id").fetchall()]
    return [b for b in (get_bike(i) for i in ids) if b is not None]


def insert_rides(rides: list[RideRecord]) -> None:
    if not rides:
        return
    rows = [
        (
            r.id,
            r.bike_id,
            _iso(r.start_time),
            r.duration_seconds,
            r.distance_miles,
            r.elevation_gain_feet,
            r.avg_speed_mph,
            r.temperature_f,
            _enum_value(r.conditions),
        )
        for r in rides
    ]
    placeholders = ",".join("?" * len(_RIDE_FIELDS))
    conn = _get_conn()
    with _lock, conn:
        conn.executemany(
            f"INSERT OR REPLACE INTO rides ({', '.join(_RIDE_FIELDS)}) VALUES ({placeholders})",
            rows,
        )


def get_rides_frame(bike_id: str) -> pd.DataFrame:
    """Ride ledger for a bike as a DataFrame, ordered by start_time."""
    conn = _get_conn()
    with _lock:
        df = pd.read_sql_query(
            "SELECT * FROM rides WHERE bike_id = ? ORDER BY start_time ASC",
            conn,
            params=(bike_id,),
        )
    return df


def get_rides(bike_id: str) -> list[RideRecord]:
    df = get_rides_frame(bike_id)
    df = df.astype(object).where(df.notna(), None)
    return [RideRecord.model_validate(rec) for rec in df.to_dict(orient="records")]
