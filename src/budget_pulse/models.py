# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain model for Budget Pulse.

This module defines the value objects shared by every other module:

- ``Frequency``      : closed enumeration of entry cadences,
- ``EntryType``      : closed enumeration (income / expense),
- ``TaxElement``     : a named percentage deduction attached to an income entry,
- ``FinancialEntry`` : a recurring income or expense record,
- ``Summary``        : the derived monthly view computed by the engine.

It also provides the identifier factories used when new entries are
created (manually or from a bank statement import). Identifier generation
is always injected so that imports and tests can be made deterministic.

Serialization
-------------
``FinancialEntry.to_dict()`` / ``FinancialEntry.from_dict()`` convert to and
from the JSON representation used by backups and persisted state:

    {
        "id": "...",
        "description": "...",
        "amount": 12.5,
        "frequency": "monthly",
        "type": "income",
        "taxes": [{"id": "...", "name": "...", "percentage": 20}],
        "date": "2024-03-01"
    }

``date`` may be ``null`` for entries coming from older backups that did not
record one.
"""

import datetime as dt
import itertools
import math
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .errors import InvalidFrequencyError

IdFactory = Callable[[], str]
"""Zero-argument callable returning a new unique identifier."""


def uuid_ids() -> IdFactory:
    """Return the default (random) identifier factory."""

    def _new_id() -> str:
        return uuid.uuid4().hex

    return _new_id


def sequential_ids(prefix: str = "entry-", start: int = 1) -> IdFactory:
    """Return a deterministic identifier factory: prefix-1, prefix-2, ..."""
    counter = itertools.count(start)

    def _new_id() -> str:
        return f"{prefix}{next(counter)}"

    return _new_id


class Frequency(str, Enum):
    """Repetition period of an entry amount."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Union["Frequency", str]) -> "Frequency":
        """Convert an external value, raising InvalidFrequencyError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise InvalidFrequencyError(value) from exc


class EntryType(str, Enum):
    """Whether an entry adds to or subtracts from the monthly balance."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def parse(cls, value: Union["EntryType", str]) -> "EntryType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(
                f"Invalid entry type {value!r}. Expected 'income' or 'expense'."
            ) from exc


def _to_number(value: Any, what: str) -> float:
    # bool is an int subclass, but True/False are never meaningful amounts.
    if isinstance(value, bool):
        raise ValueError(f"Invalid {what}: {value!r} is not a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {what}: {value!r} is not a number.") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid {what}: {value!r} is not finite.")
    return number


def _to_date(value: Any) -> Optional[dt.date]:
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            # Full ISO timestamps are accepted, only the date part is kept.
            return dt.date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ValueError(f"Invalid date {value!r}: expected YYYY-MM-DD.") from exc
    raise ValueError(f"Invalid date {value!r}: expected a date or YYYY-MM-DD.")


@dataclass(frozen=True)
class TaxElement:
    """
    A percentage deduction applied to the monthly amount of an income entry.

    The percentage is deliberately not range-checked here: the tax
    calculator honors any value, and range validation belongs to the
    entry-editing layer (see ``EntryStore``).
    """

    id: str
    name: str
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "percentage": self.percentage}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaxElement":
        try:
            raw_id = data["id"]
            raw_percentage = data["percentage"]
        except KeyError as exc:
            raise ValueError(f"Tax element is missing field {exc.args[0]!r}.") from exc
        return cls(
            id=str(raw_id),
            name=str(data.get("name") or ""),
            percentage=_to_number(raw_percentage, "tax percentage"),
        )


@dataclass
class FinancialEntry:
    """
    A recurring income or expense record.

    Attributes
    ----------
    id:
        Identifier, unique within the owning collection.
    description:
        Free text label.
    amount:
        Non-negative amount at the entry's own cadence.
    frequency:
        One of the ``Frequency`` members (exact lowercase strings are
        converted).
    type:
        ``EntryType.INCOME`` or ``EntryType.EXPENSE`` ("income" / "expense"
        are converted).
    taxes:
        Ordered tax elements; always empty for expenses.
    date:
        Calendar date of the entry (``None`` only for legacy backups). ISO
        strings are converted, anything else is rejected.
    """

    id: str
    description: str
    amount: float
    frequency: Frequency
    type: EntryType
    taxes: tuple[TaxElement, ...] = field(default_factory=tuple)
    date: Optional[dt.date] = None

    def __post_init__(self) -> None:
        self.amount = _to_number(self.amount, "amount")
        if self.amount < 0:
            raise ValueError(f"Invalid amount {self.amount!r}: must be >= 0.")

        self.frequency = Frequency.parse(self.frequency)
        self.type = EntryType.parse(self.type)
        self.taxes = tuple(self.taxes or ())
        self.date = _to_date(self.date)

        if self.type is EntryType.EXPENSE and self.taxes:
            raise ValueError(
                f"Expense entry {self.id!r} cannot carry taxes; "
                "taxes only apply to income entries."
            )

    @property
    def is_income(self) -> bool:
        return self.type is EntryType.INCOME

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-friendly representation of the entry."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "frequency": self.frequency.value,
            "type": self.type.value,
            "taxes": [t.to_dict() for t in self.taxes],
            "date": self.date.isoformat() if self.date is not None else None,
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        entry_type: Optional[EntryType] = None,
    ) -> "FinancialEntry":
        """
        Build an entry from its JSON representation.

        If ``entry_type`` is given (backups store income and expenses in
        separate lists), it is used when the mapping has no ``type`` field,
        and a contradicting ``type`` field is rejected.

        Raises
        ------
        ValueError
            If a required field is missing or any value is invalid.
        """
        try:
            raw_id = data["id"]
            raw_amount = data["amount"]
            raw_frequency = data["frequency"]
        except KeyError as exc:
            raise ValueError(f"Entry is missing field {exc.args[0]!r}.") from exc

        raw_type = data.get("type")
        if raw_type is None:
            if entry_type is None:
                raise ValueError("Entry is missing field 'type'.")
            resolved_type = entry_type
        else:
            resolved_type = EntryType.parse(raw_type)
            if entry_type is not None and resolved_type is not entry_type:
                raise ValueError(
                    f"Entry {raw_id!r} has type {resolved_type.value!r} but is "
                    f"listed under {entry_type.value!r}."
                )

        raw_taxes = data.get("taxes") or []
        if not isinstance(raw_taxes, list):
            raise ValueError(f"Entry {raw_id!r}: 'taxes' must be a list.")
        taxes = []
        for raw_tax in raw_taxes:
            if not isinstance(raw_tax, Mapping):
                raise ValueError(f"Entry {raw_id!r}: tax elements must be objects.")
            taxes.append(TaxElement.from_dict(raw_tax))

        raw_date = data.get("date")
        entry_date = None if raw_date in (None, "") else raw_date

        return cls(
            id=str(raw_id),
            description=str(data.get("description") or ""),
            amount=raw_amount,
            frequency=raw_frequency,
            type=resolved_type,
            taxes=tuple(taxes),
            date=entry_date,
        )


def split_by_type(
    entries: Iterable[FinancialEntry],
) -> tuple[list[FinancialEntry], list[FinancialEntry]]:
    """Split entries into (income, expenses), preserving order."""
    income: list[FinancialEntry] = []
    expenses: list[FinancialEntry] = []
    for entry in entries:
        (income if entry.is_income else expenses).append(entry)
    return income, expenses


@dataclass(frozen=True)
class Summary:
    """Derived monthly snapshot; recomputed on demand, never stored."""

    total_income: float
    total_expenses: float
    total_taxes: float
    net_income: float
    balance: float
