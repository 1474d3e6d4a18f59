# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Entry store: the authoritative collection of income and expense entries.

This module sits between the pure engine (normalization, taxes, summary,
statement parsing) and user-facing layers such as the CLI. It owns the two
entry lists and exposes:

1) CRUD operations
   - ``add`` / ``add_many`` append entries (manual or imported),
   - ``update`` applies a partial edit to an existing entry,
   - ``remove`` deletes an entry by id,
   - ``replace_all`` swaps both collections at once (backup restore).

2) Read access
   - ``list(entry_type)`` returns the entries of one type,
   - ``summary()`` recomputes the monthly Summary on every call.

3) Persistence
   - ``persist()`` writes the state document to the backend; it runs after
     every mutation,
   - ``restore()`` loads the state document at startup.

   The backend is any object exposing ``load_slot(name)`` and
   ``save_slot(name, payload)`` (see ``db.SlotBackend``). Without a backend
   the store is purely in-memory.

Validation
----------
The store is the entry-editing layer: it checks that ids are unique across
both collections and that tax percentages entered by the user lie in
[0, 100]. Entry-level invariants (non-negative amount, closed frequency
and type values, no taxes on expenses) are enforced by ``FinancialEntry``
itself. A failed operation, including a failed write to the backend, leaves
the store unchanged.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from typing import Any, Optional, Protocol, Union

from .backup import to_document, validate_document
from .engine import summarize
from .errors import MalformedImportDocumentError
from .models import (
    EntryType,
    FinancialEntry,
    Frequency,
    IdFactory,
    Summary,
    TaxElement,
    uuid_ids,
)

DEFAULT_SLOT = "budget_pulse_state"

UPDATABLE_FIELDS = frozenset({"description", "amount", "frequency", "taxes", "date"})


class StateBackend(Protocol):
    def load_slot(self, name: str) -> Optional[Mapping[str, Any]]: ...

    def save_slot(self, name: str, payload: Mapping[str, Any]) -> None: ...


def validate_taxes(taxes: Iterable[TaxElement]) -> tuple[TaxElement, ...]:
    """Check user-entered tax percentages lie in [0, 100]."""
    checked = tuple(taxes)
    for tax in checked:
        if not 0 <= tax.percentage <= 100:
            raise ValueError(
                f"Invalid percentage {tax.percentage!r} for tax {tax.name!r}: "
                "expected a value between 0 and 100."
            )
    return checked


class EntryStore:
    """In-memory owner of the income and expense entries."""

    def __init__(
        self,
        backend: Optional[StateBackend] = None,
        *,
        slot: str = DEFAULT_SLOT,
        new_id: Optional[IdFactory] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.backend = backend
        self.slot = slot
        self.new_id = new_id if new_id is not None else uuid_ids()
        self._today = today
        self._income: list[FinancialEntry] = []
        self._expenses: list[FinancialEntry] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def _collection(self, entry_type: Union[EntryType, str]) -> list[FinancialEntry]:
        if EntryType.parse(entry_type) is EntryType.INCOME:
            return self._income
        return self._expenses

    def _with_appended(
        self, entries: Iterable[FinancialEntry]
    ) -> tuple[list[FinancialEntry], list[FinancialEntry]]:
        income = list(self._income)
        expenses = list(self._expenses)
        for entry in entries:
            (income if entry.is_income else expenses).append(entry)
        return income, expenses

    def list(self, entry_type: Union[EntryType, str]) -> tuple[FinancialEntry, ...]:
        """Return the entries of the given type, in insertion order."""
        return tuple(self._collection(entry_type))

    def all_entries(self) -> tuple[FinancialEntry, ...]:
        return tuple(self._income) + tuple(self._expenses)

    def get(self, entry_id: str) -> FinancialEntry:
        for entry in self.all_entries():
            if entry.id == entry_id:
                return entry
        raise KeyError(f"No entry with id {entry_id!r}.")

    def __contains__(self, entry_id: object) -> bool:
        return any(e.id == entry_id for e in self.all_entries())

    def __len__(self) -> int:
        return len(self._income) + len(self._expenses)

    def summary(self) -> Summary:
        """Recompute the monthly summary from the current entries."""
        return summarize(self._income, self._expenses)

    def to_document(self) -> dict[str, Any]:
        """Return the state as a backup document."""
        return to_document(self._income, self._expenses)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def new_tax(self, name: str, percentage: float) -> TaxElement:
        """Build a validated tax element with a fresh id."""
        tax = TaxElement(id=self.new_id(), name=name, percentage=float(percentage))
        validate_taxes([tax])
        return tax

    def new_entry(
        self,
        entry_type: Union[EntryType, str],
        description: str,
        amount: float,
        frequency: Union[Frequency, str] = Frequency.MONTHLY,
        taxes: Iterable[TaxElement] = (),
        entry_date: Optional[date] = None,
    ) -> FinancialEntry:
        """Build (but do not add) an entry with a fresh id and today's date."""
        return FinancialEntry(
            id=self.new_id(),
            description=description,
            amount=amount,
            frequency=frequency,
            type=entry_type,
            taxes=tuple(taxes),
            date=entry_date if entry_date is not None else self._today(),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _check_new_ids(self, entries: Iterable[FinancialEntry]) -> None:
        seen = {e.id for e in self.all_entries()}
        for entry in entries:
            if entry.id in seen:
                raise ValueError(f"Duplicate entry id {entry.id!r}.")
            seen.add(entry.id)

    def add(self, entry: FinancialEntry) -> FinancialEntry:
        """Append a single entry and persist."""
        self._check_new_ids([entry])
        validate_taxes(entry.taxes)
        self._commit(*self._with_appended([entry]))
        return entry

    def add_many(self, entries: Iterable[FinancialEntry]) -> int:
        """Append a batch of entries (e.g. a statement import) and persist once.

        Returns:
            The number of entries added. Nothing is added if any entry is
            invalid.
        """
        batch = list(entries)
        self._check_new_ids(batch)
        for entry in batch:
            validate_taxes(entry.taxes)
        if batch:
            self._commit(*self._with_appended(batch))
        return len(batch)

    def remove(self, entry_id: str) -> FinancialEntry:
        """Remove an entry by id and persist.

        Raises:
            KeyError: if no entry has this id.
        """
        entry = self.get(entry_id)
        self._commit(
            [e for e in self._income if e.id != entry_id],
            [e for e in self._expenses if e.id != entry_id],
        )
        return entry

    def update(self, entry_id: str, **fields: Any) -> FinancialEntry:
        """Apply a partial update to an entry and persist.

        Supported fields: description, amount, frequency, taxes, date.
        The updated entry keeps its position in its collection.

        Raises:
            KeyError: if no entry has this id.
            ValueError: if a field is unknown or a value is invalid.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            names = ", ".join(sorted(unknown))
            raise ValueError(f"Cannot update field(s): {names}.")

        current = self.get(entry_id)
        if "taxes" in fields:
            fields["taxes"] = validate_taxes(fields["taxes"] or ())
        # replace() runs __post_init__, so entry invariants are re-checked.
        updated = dataclasses.replace(current, **fields)

        income, expenses = list(self._income), list(self._expenses)
        collection = income if current.is_income else expenses
        collection[collection.index(current)] = updated
        self._commit(income, expenses)
        return updated

    def replace_all(
        self,
        income: Iterable[FinancialEntry],
        expenses: Iterable[FinancialEntry],
    ) -> None:
        """Replace both collections (restore / backup import) and persist."""
        self._commit(*self._checked(income, expenses))

    def _checked(
        self,
        income: Iterable[FinancialEntry],
        expenses: Iterable[FinancialEntry],
    ) -> tuple[list[FinancialEntry], list[FinancialEntry]]:
        new_income = list(income)
        new_expenses = list(expenses)

        for entry in new_income:
            if not entry.is_income:
                raise ValueError(f"Entry {entry.id!r} is not an income entry.")
        for entry in new_expenses:
            if entry.is_income:
                raise ValueError(f"Entry {entry.id!r} is not an expense entry.")

        ids = [e.id for e in new_income + new_expenses]
        if len(ids) != len(set(ids)):
            raise ValueError("Entry ids must be unique across income and expenses.")

        return new_income, new_expenses

    def _commit(
        self,
        income: list[FinancialEntry],
        expenses: list[FinancialEntry],
    ) -> None:
        """Install new collections and persist them, rolling back on failure."""
        previous = (self._income, self._expenses)
        self._income, self._expenses = income, expenses
        try:
            self.persist()
        except Exception:
            self._income, self._expenses = previous
            raise

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self) -> None:
        """Write the current state to the backend (no-op without backend)."""
        if self.backend is None:
            return
        self.backend.save_slot(self.slot, self.to_document())

    def restore(self) -> bool:
        """Load the persisted state, replacing the in-memory entries.

        Returns:
            True if a state document was found and loaded, False otherwise.

        Raises:
            MalformedImportDocumentError: if the stored document is invalid.
                The in-memory entries are left untouched.
        """
        if self.backend is None:
            return False
        payload = self.backend.load_slot(self.slot)
        if payload is None:
            return False
        document = validate_document(payload)
        try:
            income, expenses = self._checked(document.income, document.expenses)
        except ValueError as exc:
            raise MalformedImportDocumentError(str(exc)) from exc
        self._income, self._expenses = income, expenses
        return True
