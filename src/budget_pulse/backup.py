# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Backup / restore documents.

A backup is a JSON document holding both entry collections:

    {
        "income":   [FinancialEntry, ...],
        "expenses": [FinancialEntry, ...]
    }

The same shape is used for the persisted application state (see db.py).

Importing a backup is a direct structural load, distinct from the bank
statement parser: the payload is arbitrary JSON coming from a file, so it
is validated at the boundary by ``validate_document()`` before any entry
reaches the store. Any problem rejects the whole document with
``MalformedImportDocumentError``; nothing is partially applied.
"""

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .errors import MalformedImportDocumentError
from .models import EntryType, FinancialEntry

INCOME_KEY = "income"
EXPENSES_KEY = "expenses"


@dataclass(frozen=True)
class BackupDocument:
    """Validated content of a backup document."""

    income: tuple[FinancialEntry, ...]
    expenses: tuple[FinancialEntry, ...]


def to_document(
    income: Iterable[FinancialEntry],
    expenses: Iterable[FinancialEntry],
) -> dict[str, list[dict[str, Any]]]:
    """Build the JSON-friendly backup document for both collections."""
    return {
        INCOME_KEY: [e.to_dict() for e in income],
        EXPENSES_KEY: [e.to_dict() for e in expenses],
    }


def _validate_entries(
    payload: Mapping[str, Any],
    key: str,
    entry_type: EntryType,
    seen_ids: set[str],
) -> tuple[FinancialEntry, ...]:
    raw = payload.get(key)
    if raw is None:
        raise MalformedImportDocumentError(f"Backup document is missing {key!r}.")
    if not isinstance(raw, list):
        raise MalformedImportDocumentError(
            f"Backup document field {key!r} must be a list, "
            f"got {type(raw).__name__}."
        )

    entries = []
    for position, item in enumerate(raw):
        if not isinstance(item, Mapping):
            raise MalformedImportDocumentError(
                f"{key}[{position}] must be an object, got {type(item).__name__}."
            )
        try:
            entry = FinancialEntry.from_dict(item, entry_type=entry_type)
        except ValueError as exc:
            raise MalformedImportDocumentError(f"{key}[{position}]: {exc}") from exc
        if entry.id in seen_ids:
            raise MalformedImportDocumentError(
                f"{key}[{position}]: duplicate entry id {entry.id!r}."
            )
        seen_ids.add(entry.id)
        entries.append(entry)
    return tuple(entries)


def validate_document(payload: Any) -> BackupDocument:
    """Validate a decoded JSON payload and return the typed document.

    Raises:
        MalformedImportDocumentError: if the payload is not an object with
            ``income`` and ``expenses`` lists of valid entries.
    """
    if not isinstance(payload, Mapping):
        raise MalformedImportDocumentError(
            "Backup document must be a JSON object with 'income' and "
            "'expenses' lists."
        )
    # Ids must be unique across both lists.
    seen_ids: set[str] = set()
    return BackupDocument(
        income=_validate_entries(payload, INCOME_KEY, EntryType.INCOME, seen_ids),
        expenses=_validate_entries(
            payload, EXPENSES_KEY, EntryType.EXPENSE, seen_ids
        ),
    )


def dumps(income: Iterable[FinancialEntry], expenses: Iterable[FinancialEntry]) -> str:
    """Serialize both collections as a pretty-printed JSON backup."""
    return json.dumps(to_document(income, expenses), indent=2, ensure_ascii=False)


def loads(text: str) -> BackupDocument:
    """Decode and validate a JSON backup document."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedImportDocumentError(f"Backup is not valid JSON: {exc}") from exc
    return validate_document(payload)


def write_backup(
    path: Union[str, "os.PathLike[str]"],
    income: Iterable[FinancialEntry],
    expenses: Iterable[FinancialEntry],
) -> Path:
    """Write a backup document to ``path`` (parent directories are created)."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dumps(income, expenses), encoding="utf-8")
    return target


def read_backup(path: Union[str, "os.PathLike[str]"]) -> BackupDocument:
    """Read and validate a backup document from ``path``."""
    return loads(Path(path).read_text(encoding="utf-8"))
