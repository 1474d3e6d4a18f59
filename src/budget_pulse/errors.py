# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Error types raised by Budget Pulse.

All errors derive from ``ValueError`` so that callers which already handle
invalid input generically keep working, while the CLI (or a future UI) can
react to each kind specifically.

Non-numeric debit/credit cells in a bank statement are *not* errors: the
statement parser treats them as 0.
"""

from typing import Optional


class BudgetPulseError(ValueError):
    """Base class for all Budget Pulse errors."""


class InvalidFrequencyError(BudgetPulseError):
    """A frequency outside daily/weekly/monthly/yearly was supplied."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Invalid frequency {value!r}. "
            "Expected one of: daily, weekly, monthly, yearly."
        )
        self.value = value


class InvalidDateError(BudgetPulseError):
    """
    A bank statement row carries a date token that cannot be parsed.

    The error is scoped to a single row: ``line_number`` is 1-based and
    counts the header line, so it matches what a text editor shows.
    """

    def __init__(
        self,
        token: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ) -> None:
        where = f" on line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Invalid statement date {token!r}{where}, expected DD/MM/YYYY."
        )
        self.token = token
        self.line_number = line_number
        self.line = line


class MalformedImportDocumentError(BudgetPulseError):
    """A backup or persisted document does not have the expected shape."""
