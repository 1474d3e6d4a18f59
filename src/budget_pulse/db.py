# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Database layer for Budget Pulse.

The application state (both entry collections) is persisted as a single
JSON document stored under a named slot in a small SQLite key/value table.
The document has the backup shape ``{"income": [...], "expenses": [...]}``
(see backup.py); this module does not interpret it beyond JSON decoding.

------------------------------------------------------------------------------
Schema Overview
------------------------------------------------------------------------------

state_slots
   One row per named slot.

   Columns:
   - name        TEXT PRIMARY KEY  -- slot name, e.g. "budget_pulse_state"
   - payload     TEXT NOT NULL     -- JSON document
   - updated_at  TEXT NOT NULL     -- ISO datetime (UTC) of the last save

------------------------------------------------------------------------------
SQLite Notes
------------------------------------------------------------------------------

- All timestamps are stored as ISO-8601 text (UTC).
- Schema creation is idempotent; every public helper calls
  ``init_database`` first so a fresh file is usable immediately.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd

from .errors import MalformedImportDocumentError

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Database configuration for Budget Pulse.

    Attributes
    ----------
    engine:
        Database engine identifier. Only "sqlite" is supported.
    path:
        Path to the SQLite database file.
    """

    engine: str
    path: Path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ensure_sqlite(cfg: DatabaseConfig) -> None:
    """Raise if the configuration does not refer to a supported engine."""
    if cfg.engine.lower() != "sqlite":
        msg = (
            f"Unsupported database engine: {cfg.engine!r}. "
            "Only 'sqlite' is supported for now."
        )
        raise ValueError(msg)


def _connect(cfg: DatabaseConfig) -> sqlite3.Connection:
    """
    Open a SQLite connection.

    The caller is responsible for closing the connection.
    """
    _ensure_sqlite(cfg)
    return sqlite3.connect(cfg.path)


def _create_schema_if_needed(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS state_slots (
            name        TEXT PRIMARY KEY,
            payload     TEXT NOT NULL,
            updated_at  TEXT NOT NULL
        );
        """
    )
    conn.commit()


def _now_utc_iso() -> str:
    """Return the current UTC datetime as ISO string."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def init_database(cfg: DatabaseConfig) -> None:
    """
    Initialize the database schema if needed.

    - Creates the SQLite file (and its parent directory) if it does not exist.
    - Creates the ``state_slots`` table if it is missing.
    - This function is idempotent: calling it multiple times is safe.

    Raises
    ------
    ValueError
        If cfg.engine is not supported.
    sqlite3.Error
        If schema creation fails.
    """
    _ensure_sqlite(cfg)
    cfg.path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(cfg)
    try:
        _create_schema_if_needed(conn)
    finally:
        conn.close()


def save_slot(cfg: DatabaseConfig, name: str, payload: Mapping[str, Any]) -> None:
    """
    Store ``payload`` as JSON under slot ``name``, replacing any previous value.

    Raises
    ------
    TypeError
        If the payload is not JSON-serializable.
    """
    init_database(cfg)
    text = json.dumps(payload, ensure_ascii=False)

    conn = _connect(cfg)
    try:
        conn.execute(
            """
            INSERT INTO state_slots (name, payload, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                payload = excluded.payload,
                updated_at = excluded.updated_at;
            """,
            (name, text, _now_utc_iso()),
        )
        conn.commit()
    finally:
        conn.close()


def load_slot(cfg: DatabaseConfig, name: str) -> dict[str, Any] | None:
    """
    Return the decoded JSON document stored under slot ``name``.

    Returns
    -------
    dict or None
        The stored document, or None if the slot has never been saved.

    Raises
    ------
    MalformedImportDocumentError
        If the stored payload is not a valid JSON object.
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute(
            "SELECT payload FROM state_slots WHERE name = ?;",
            (name,),
        )
        row = cur.fetchone()
    finally:
        conn.close()

    if row is None:
        return None

    try:
        data = json.loads(row[0])
    except json.JSONDecodeError as exc:
        raise MalformedImportDocumentError(
            f"Stored state in slot {name!r} is not valid JSON."
        ) from exc
    if not isinstance(data, dict):
        raise MalformedImportDocumentError(
            f"Stored state in slot {name!r} is not a JSON object."
        )
    return data


def delete_slot(cfg: DatabaseConfig, name: str) -> bool:
    """Delete slot ``name``. Return True if a row was removed."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute("DELETE FROM state_slots WHERE name = ?;", (name,))
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()


def list_slots(cfg: DatabaseConfig) -> pd.DataFrame:
    """
    Return the slots stored in the database.

    Columns:
    - name
    - updated_at (datetime64)
    """
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute(
            """
            SELECT name, updated_at
              FROM state_slots
             ORDER BY name;
            """
        )
        rows = cur.fetchall()
    finally:
        conn.close()

    if not rows:
        return pd.DataFrame(columns=["name", "updated_at"])

    df = pd.DataFrame(rows, columns=["name", "updated_at"])
    df["updated_at"] = pd.to_datetime(df["updated_at"])
    return df


class SlotBackend:
    """
    Persistence backend binding a DatabaseConfig to the EntryStore protocol.

    The store only needs ``load_slot(name)`` and ``save_slot(name, payload)``.
    """

    def __init__(self, cfg: DatabaseConfig) -> None:
        self.cfg = cfg

    def load_slot(self, name: str) -> dict[str, Any] | None:
        return load_slot(self.cfg, name)

    def save_slot(self, name: str, payload: Mapping[str, Any]) -> None:
        save_slot(self.cfg, name, payload)
