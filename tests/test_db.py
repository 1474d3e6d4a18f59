import sqlite3

import pytest

from budget_pulse.db import (
    DatabaseConfig,
    delete_slot,
    init_database,
    list_slots,
    load_slot,
    save_slot,
)
from budget_pulse.errors import MalformedImportDocumentError


def make_tmp_db_cfg(tmp_path) -> DatabaseConfig:
    """Helper to build a DatabaseConfig pointing to a temporary SQLite file."""
    return DatabaseConfig(engine="sqlite", path=tmp_path / "db" / "test.sqlite")


def test_init_database_creates_file_and_schema(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)

    assert not cfg.path.exists()
    init_database(cfg)
    init_database(cfg)
    assert cfg.path.exists()
    assert list_slots(cfg).empty


def test_save_and_load_slot(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    payload = {"income": [{"id": "1", "description": "Prime été"}], "expenses": []}

    assert load_slot(cfg, "state") is None
    save_slot(cfg, "state", payload)
    assert load_slot(cfg, "state") == payload

    # Saving again overwrites the slot instead of adding a row.
    save_slot(cfg, "state", {"income": [], "expenses": []})
    assert load_slot(cfg, "state") == {"income": [], "expenses": []}

    slots = list_slots(cfg)
    assert list(slots["name"]) == ["state"]
    assert set(slots.columns) == {"name", "updated_at"}


def test_delete_slot(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    save_slot(cfg, "state", {"income": [], "expenses": []})

    assert delete_slot(cfg, "state") is True
    assert delete_slot(cfg, "state") is False
    assert load_slot(cfg, "state") is None


def test_corrupted_slot_is_reported(tmp_path):
    cfg = make_tmp_db_cfg(tmp_path)
    init_database(cfg)
    conn = sqlite3.connect(cfg.path)
    conn.execute(
        "INSERT INTO state_slots (name, payload, updated_at) VALUES (?, ?, ?)",
        ("state", "{broken", "2024-01-01T00:00:00+00:00"),
    )
    conn.commit()
    conn.close()

    with pytest.raises(MalformedImportDocumentError):
        load_slot(cfg, "state")


def test_unsupported_engine_is_rejected(tmp_path):
    cfg = DatabaseConfig(engine="postgres", path=tmp_path / "x.db")
    with pytest.raises(ValueError):
        init_database(cfg)
