# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Budget Pulse.

This module wires together the main building blocks of Budget Pulse:

- application configuration (database, storage slot, display options),
- the entry store and its SQLite persistence,
- the aggregation engine (monthly summary),
- bank statement import and JSON backups.

The CLI is intentionally thin: it does not implement financial logic
itself. It restores the persisted state, runs one command, and lets the
entry store persist any mutation.


Commands
--------

- ``summary``:
    Print the monthly summary (total income, taxes, net income, expenses,
    balance) and the per-entry breakdown. With ``--display-mode csv`` or
    ``both`` the tables are also written as CSV files.

- ``entries list [--type income|expense]``
- ``entries add --type T --description D --amount A [--frequency F]
  [--tax NAME=PCT ...] [--date YYYY-MM-DD]``
- ``entries update ID [--description D] [--amount A] [--frequency F]
  [--tax NAME=PCT ...] [--clear-taxes] [--date YYYY-MM-DD]``
- ``entries remove ID``

- ``import-statement PATH``:
    Parse a ``;``-delimited bank statement and append the resulting
    entries. Lines without an amount or with an invalid date are skipped;
    only the counts are reported.

- ``export PATH``:
    Write a JSON backup ``{"income": [...], "expenses": [...]}``.

- ``restore PATH``:
    Validate a JSON backup and replace all entries with its content. A
    malformed document is rejected and the current entries are kept.


Configuration
-------------

By default the CLI reads ``budget_pulse_config.toml`` from the current
directory (built-in defaults apply if it does not exist). Use
``--config PATH`` to point to another file.
"""

import argparse
import sqlite3
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from . import __version__
from .backup import read_backup, write_backup
from .config import AppConfig, load_app_config
from .db import SlotBackend, init_database
from .engine import entries_to_frame, summary_to_frame
from .errors import MalformedImportDocumentError
from .io import read_statement
from .models import EntryType, Frequency, TaxElement
from .store import EntryStore

FREQUENCY_CHOICES = [f.value for f in Frequency]
TYPE_CHOICES = [t.value for t in EntryType]


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m budget_pulse.cli",
        description=(
            "Budget Pulse - Recurring income & expense tracker. "
            "Normalizes entries to a monthly basis, applies income taxes and "
            "renders a monthly summary."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of budget_pulse and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'budget_pulse_config.toml' in the current directory is used "
            "when present."
        ),
    )

    subparsers = ap.add_subparsers(dest="command")

    # summary
    summary = subparsers.add_parser(
        "summary",
        help="Show the monthly summary and the per-entry breakdown.",
    )
    summary.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints to stdout, 'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    summary.add_argument(
        "--output",
        dest="output_dir",
        help="Output directory for CSV files (default: data/output).",
    )

    # entries ...
    entries = subparsers.add_parser("entries", help="Manage entries.")
    entries_subparsers = entries.add_subparsers(dest="entries_command")

    entries_list = entries_subparsers.add_parser("list", help="List entries.")
    entries_list.add_argument(
        "--type",
        dest="entry_type",
        choices=TYPE_CHOICES,
        help="Only list entries of this type.",
    )

    entries_add = entries_subparsers.add_parser("add", help="Add an entry.")
    entries_add.add_argument(
        "--type", dest="entry_type", choices=TYPE_CHOICES, required=True
    )
    entries_add.add_argument("--description", required=True)
    entries_add.add_argument("--amount", type=float, required=True)
    entries_add.add_argument(
        "--frequency", choices=FREQUENCY_CHOICES, default=Frequency.MONTHLY.value
    )
    entries_add.add_argument(
        "--tax",
        dest="taxes",
        action="append",
        metavar="NAME=PCT",
        help="Tax applied to an income entry, e.g. 'Income tax=20'. Repeatable.",
    )
    entries_add.add_argument(
        "--date",
        dest="entry_date",
        help="Entry date (YYYY-MM-DD). Defaults to today.",
    )

    entries_update = entries_subparsers.add_parser(
        "update", help="Update fields of an existing entry."
    )
    entries_update.add_argument("entry_id", help="Identifier of the entry.")
    entries_update.add_argument("--description")
    entries_update.add_argument("--amount", type=float)
    entries_update.add_argument("--frequency", choices=FREQUENCY_CHOICES)
    entries_update.add_argument(
        "--tax",
        dest="taxes",
        action="append",
        metavar="NAME=PCT",
        help="Replace the entry taxes with these ones. Repeatable.",
    )
    entries_update.add_argument(
        "--clear-taxes",
        action="store_true",
        help="Remove all taxes from the entry.",
    )
    entries_update.add_argument("--date", dest="entry_date")

    entries_remove = entries_subparsers.add_parser("remove", help="Remove an entry.")
    entries_remove.add_argument("entry_id", help="Identifier of the entry.")

    # import-statement
    import_statement = subparsers.add_parser(
        "import-statement",
        help="Import entries from a ';'-delimited bank statement export.",
    )
    import_statement.add_argument("path", help="Path to the statement file.")

    # export / restore
    export = subparsers.add_parser("export", help="Write a JSON backup.")
    export.add_argument("path", help="Destination JSON file.")

    restore = subparsers.add_parser(
        "restore", help="Replace all entries with a JSON backup."
    )
    restore.add_argument("path", help="Backup JSON file.")

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _parse_taxes(store: EntryStore, values: Sequence[str]) -> list[TaxElement]:
    """Convert 'NAME=PCT' arguments into validated tax elements."""
    taxes = []
    for value in values:
        name, sep, raw_pct = value.rpartition("=")
        if not sep or not name.strip():
            raise SystemExit(f"Invalid tax {value!r}. Expected NAME=PCT.")
        try:
            taxes.append(store.new_tax(name.strip(), float(raw_pct)))
        except ValueError as exc:
            raise SystemExit(f"Invalid tax {value!r}: {exc}") from exc
    return taxes


def _print_entry(entry, currency: str, decimals: int) -> None:
    print(f"  id:          {entry.id}")
    print(f"  type:        {entry.type.value}")
    print(f"  description: {entry.description}")
    print(f"  amount:      {entry.amount:.{decimals}f} {currency}")
    print(f"  frequency:   {entry.frequency.value}")
    entry_date = entry.date.isoformat() if entry.date is not None else "-"
    print(f"  date:        {entry_date}")
    if entry.taxes:
        taxes = ", ".join(f"{t.name} {t.percentage:g}%" for t in entry.taxes)
        print(f"  taxes:       {taxes}")


def _handle_summary(args: argparse.Namespace, config: AppConfig, store) -> None:
    decimals = config.display.decimals
    summary_df = summary_to_frame(store.summary(), decimals=decimals)

    entries_df = entries_to_frame(store.all_entries())
    if not entries_df.empty:
        for col in ("amount", "monthly_amount", "monthly_tax"):
            entries_df[col] = entries_df[col].round(decimals)

    display_mode = args.display_mode or config.display.mode

    if display_mode in {"table", "both"}:
        print(f"=== Monthly summary ({config.display.currency}) ===")
        print(summary_df.to_string(index=False))
        print()
        if entries_df.empty:
            print("No entries recorded yet.")
        else:
            print("=== Entries (monthly basis) ===")
            print(entries_df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")

        path = output_dir / f"summary_{timestamp}.csv"
        summary_df.to_csv(path, index=False)
        print(f"Wrote {path} ({len(summary_df)} rows)")

        path = output_dir / f"entries_{timestamp}.csv"
        entries_df.to_csv(path, index=False)
        print(f"Wrote {path} ({len(entries_df)} rows)")


def _handle_entries_list(args: argparse.Namespace, config: AppConfig, store) -> None:
    if args.entry_type:
        entries = store.list(args.entry_type)
    else:
        entries = store.all_entries()

    if not entries:
        print("No entries found.")
        return

    df = entries_to_frame(entries)
    print(df.to_string(index=False))
    print()
    print(f"Total entries: {len(df)}")


def _handle_entries_add(args: argparse.Namespace, config: AppConfig, store) -> None:
    taxes = _parse_taxes(store, args.taxes or [])
    try:
        entry = store.new_entry(
            entry_type=args.entry_type,
            description=args.description,
            amount=args.amount,
            frequency=args.frequency,
            taxes=taxes,
            entry_date=_parse_optional_date(args.entry_date),
        )
        store.add(entry)
    except ValueError as exc:
        raise SystemExit(f"Could not add entry: {exc}") from exc

    print("Entry added:")
    _print_entry(entry, config.display.currency, config.display.decimals)


def _handle_entries_update(args: argparse.Namespace, config: AppConfig, store) -> None:
    fields: dict = {}
    if args.description is not None:
        fields["description"] = args.description
    if args.amount is not None:
        fields["amount"] = args.amount
    if args.frequency is not None:
        fields["frequency"] = args.frequency
    if args.clear_taxes:
        fields["taxes"] = ()
    elif args.taxes:
        fields["taxes"] = _parse_taxes(store, args.taxes)
    if args.entry_date is not None:
        fields["date"] = _parse_optional_date(args.entry_date)

    if not fields:
        print("Nothing to update.")
        return

    try:
        entry = store.update(args.entry_id, **fields)
    except KeyError as exc:
        raise SystemExit(f"Entry {args.entry_id!r} not found.") from exc
    except ValueError as exc:
        raise SystemExit(f"Could not update entry: {exc}") from exc

    print("Entry updated:")
    _print_entry(entry, config.display.currency, config.display.decimals)


def _handle_entries_remove(args: argparse.Namespace, config: AppConfig, store) -> None:
    try:
        entry = store.remove(args.entry_id)
    except KeyError as exc:
        raise SystemExit(f"Entry {args.entry_id!r} not found.") from exc

    print("Entry removed:")
    _print_entry(entry, config.display.currency, config.display.decimals)


def _handle_entries_command(
    args: argparse.Namespace, config: AppConfig, store
) -> None:
    """Dispatch 'entries' subcommands."""
    subcmd = getattr(args, "entries_command", None)

    if subcmd == "list":
        _handle_entries_list(args, config, store)
    elif subcmd == "add":
        _handle_entries_add(args, config, store)
    elif subcmd == "update":
        _handle_entries_update(args, config, store)
    elif subcmd == "remove":
        _handle_entries_remove(args, config, store)
    else:
        print(
            "No entries subcommand specified. "
            "Available subcommands are: 'list', 'add', 'update', 'remove'."
        )


def _handle_import_statement(
    args: argparse.Namespace, config: AppConfig, store
) -> None:
    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Statement file not found: {path}")

    print(f"Importing entries from {path}...")
    try:
        result = read_statement(path, new_id=store.new_id)
        imported = store.add_many(result.entries)
    except (UnicodeDecodeError, ValueError) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(
        f"Imported {imported} entries "
        f"({len(result.rejected)} lines with an invalid date skipped, "
        f"{result.dropped} lines without amount ignored)."
    )


def _handle_export(args: argparse.Namespace, config: AppConfig, store) -> None:
    path = write_backup(
        args.path, store.list(EntryType.INCOME), store.list(EntryType.EXPENSE)
    )
    print(
        f"Wrote {path} ({len(store.list(EntryType.INCOME))} income, "
        f"{len(store.list(EntryType.EXPENSE))} expense entries)"
    )


def _handle_restore(args: argparse.Namespace, config: AppConfig, store) -> None:
    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Backup file not found: {path}")

    try:
        document = read_backup(path)
    except (UnicodeDecodeError, MalformedImportDocumentError) as exc:
        raise SystemExit(f"Restore failed: {exc}") from exc

    store.replace_all(document.income, document.expenses)
    print(
        f"Restored {len(document.income)} income and "
        f"{len(document.expenses)} expense entries from {path}."
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point for the Budget Pulse CLI.

    This function parses command-line arguments, loads the configuration,
    initializes the database, restores the persisted entries and runs the
    requested command. Mutating commands persist through the entry store.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"budget_pulse version {__version__}")
        return

    if args.command is None:
        parser.print_help()
        return

    # 1) Load application configuration
    config = load_app_config(args.config_path)

    # 2) Initialize the database and restore the persisted state
    store = EntryStore(SlotBackend(config.database), slot=config.slot)
    try:
        init_database(config.database)
        store.restore()
    except sqlite3.Error as exc:
        msg = f"Could not open the database {config.database.path}: {exc}"
        raise SystemExit(msg) from exc
    except MalformedImportDocumentError as exc:
        raise SystemExit(f"Could not restore saved entries: {exc}") from exc

    # 3) Run the requested command
    if args.command == "summary":
        _handle_summary(args, config, store)
    elif args.command == "entries":
        _handle_entries_command(args, config, store)
    elif args.command == "import-statement":
        _handle_import_statement(args, config, store)
    elif args.command == "export":
        _handle_export(args, config, store)
    elif args.command == "restore":
        _handle_restore(args, config, store)


if __name__ == "__main__":
    main()
