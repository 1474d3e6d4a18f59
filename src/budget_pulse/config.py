# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Budget Pulse.

This module is responsible for:
- loading the application configuration from a TOML file,
- falling back to built-in defaults when no configuration file exists,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .db import DatabaseConfig
from .store import DEFAULT_SLOT

DEFAULT_CONFIG_FILE = "budget_pulse_config.toml"
DEFAULT_DB_PATH = "data/db/budget_pulse.sqlite"
DISPLAY_MODES = ("table", "csv", "both")


@dataclass(frozen=True)
class DisplayConfig:
    """Display options for the CLI (console tables and CSV exports)."""

    mode: str
    decimals: int
    currency: str


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for Budget Pulse.

    This aggregates:
    - the database configuration (where the state is persisted),
    - the name of the slot holding the persisted state,
    - display options.
    """

    database: DatabaseConfig
    slot: str
    display: DisplayConfig


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_display(raw: Mapping[str, Any]) -> DisplayConfig:
    display_section = _section(raw, "display")

    mode = str(display_section.get("mode", "table"))
    if mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid display.mode {mode!r} in the configuration. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )

    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError):
        decimals = 2

    currency = str(display_section.get("currency") or "EUR")
    return DisplayConfig(mode=mode, decimals=decimals, currency=currency)


def config_from_mapping(raw: Mapping[str, Any], base_dir: Path) -> AppConfig:
    """
    Build an AppConfig from parsed TOML data.

    Relative paths are resolved against ``base_dir`` (the directory of the
    TOML file, or the working directory for built-in defaults).
    """
    database_section = _section(raw, "database")
    db_engine = str(database_section.get("engine") or "sqlite")
    db_path_raw = database_section.get("path") or DEFAULT_DB_PATH
    db_path = (base_dir / str(db_path_raw)).resolve()

    storage_section = _section(raw, "storage")
    slot = str(storage_section.get("slot") or DEFAULT_SLOT)

    return AppConfig(
        database=DatabaseConfig(engine=db_engine, path=db_path),
        slot=slot,
        display=_parse_display(raw),
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the Budget Pulse application configuration.

    Expected sections in the TOML file (all optional)
    -------------------------------------------------
    [database]
        ``engine`` (only "sqlite") and ``path`` of the SQLite file.

    [storage]
        ``slot``: name of the slot holding the persisted entries.

    [display]
        ``mode`` (table | csv | both), ``decimals`` and a ``currency``
        label used when printing amounts.

    Parameters
    ----------
    config_path:
        Path to the TOML file. If omitted, ``budget_pulse_config.toml`` in
        the current directory is used when it exists, otherwise built-in
        defaults apply.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.

    Raises
    ------
    FileNotFoundError
        If an explicit ``config_path`` does not exist.
    ValueError
        If the TOML file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            return config_from_mapping({}, Path.cwd())
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    return config_from_mapping(raw, config_file.parent)
