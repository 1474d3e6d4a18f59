# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for Budget Pulse: bank statement import.

This module parses the ``;``-delimited statement export of a bank into
``FinancialEntry`` objects that can be appended to the entry store.

Expected input format
---------------------
UTF-8 text, one header row (ignored), then one record per
newline-terminated line (a trailing carriage return is stripped). Only
four columns are used, by position:

    column 0 : date, ``DD/MM/YYYY``
    column 2 : description
    column 8 : debit amount  (empty or numeric)
    column 9 : credit amount (empty or numeric)

Example::

    Date;Value date;Label;...;Debit;Credit
    01/03/2024;;Groceries;;;;;;45.50;;
    05/03/2024;;Salary;;;;;;;2500;

Column inference
----------------
- a non-zero debit makes the row an **expense** of ``abs(debit)``,
- otherwise the row is an **income** of ``abs(credit)``,
- rows whose resulting amount is 0 carry no financial signal and are dropped.

Every imported entry is ``monthly`` (the export has no cadence information)
and starts with no taxes.

Leniency
--------
The export is not consistent, so parsing is deliberately forgiving:

- blank lines are skipped,
- missing trailing columns are treated as empty strings,
- debit/credit cells are read up to the first character that cannot
  continue a number (``"45,50"`` reads as 45, ``"12 EUR"`` as 12); cells
  with no leading number count as 0.

Only a malformed date is an error, and it is scoped to its line:
``parse_statement_line`` raises ``InvalidDateError``, while
``parse_statement`` / ``parse_statement_report`` skip the line and continue
with the rest of the file.
"""

import math
import os
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union

from .errors import InvalidDateError
from .models import (
    EntryType,
    FinancialEntry,
    Frequency,
    IdFactory,
    uuid_ids,
)

DELIMITER = ";"
DATE_COLUMN = 0
DESCRIPTION_COLUMN = 2
DEBIT_COLUMN = 8
CREDIT_COLUMN = 9
MIN_COLUMNS = 10

# Longest numeric prefix: optional sign, digits, decimal part and exponent.
NUMBER_PREFIX = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII
)


@dataclass(frozen=True)
class StatementImport:
    """
    Result of parsing a bank statement.

    Attributes
    ----------
    entries:
        Parsed entries, in input line order.
    rejected:
        One ``InvalidDateError`` per line skipped because of its date.
    dropped:
        Number of lines dropped because both debit and credit were zero.
    """

    entries: list[FinancialEntry] = field(default_factory=list)
    rejected: list[InvalidDateError] = field(default_factory=list)
    dropped: int = 0


def _parse_amount(raw: str) -> float:
    """Parse the leading number of a debit/credit cell; 0 if there is none."""
    match = NUMBER_PREFIX.match(raw.strip())
    if match is None:
        return 0.0
    value = float(match.group())
    if not math.isfinite(value):
        return 0.0
    return value


def _parse_date(raw: str, line_number: Optional[int], line: str) -> date:
    """Turn ``DD/MM/YYYY`` into a date (day and month may be unpadded)."""
    token = raw.strip()
    parts = token.split("/")
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidDateError(token, line_number, line)
    day, month, year = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(token, line_number, line) from exc


def parse_statement_line(
    line: str,
    new_id: IdFactory,
    line_number: Optional[int] = None,
) -> Optional[FinancialEntry]:
    """Parse a single statement record.

    Args:
        line: Raw record (without the trailing newline).
        new_id: Identifier factory used for the created entry.
        line_number: Optional 1-based line number, for error reporting.

    Returns:
        The parsed entry, or None if the line is blank or carries no amount.

    Raises:
        InvalidDateError: if the row has an amount but its date is malformed.
    """
    if not line.strip():
        return None

    fields = line.split(DELIMITER)
    if len(fields) < MIN_COLUMNS:
        fields = fields + [""] * (MIN_COLUMNS - len(fields))

    debit = _parse_amount(fields[DEBIT_COLUMN])
    credit = _parse_amount(fields[CREDIT_COLUMN])

    if debit != 0:
        entry_type = EntryType.EXPENSE
        amount = abs(debit)
    else:
        entry_type = EntryType.INCOME
        amount = abs(credit)

    if amount == 0:
        return None

    entry_date = _parse_date(fields[DATE_COLUMN], line_number, line)
    return FinancialEntry(
        id=new_id(),
        description=fields[DESCRIPTION_COLUMN].strip(),
        amount=amount,
        frequency=Frequency.MONTHLY,
        type=entry_type,
        taxes=(),
        date=entry_date,
    )


def parse_statement_report(
    raw_text: str,
    *,
    new_id: Optional[IdFactory] = None,
) -> StatementImport:
    """Parse a full statement and report skipped lines.

    The first line is the header and is always discarded. Lines with a
    malformed date are collected in ``rejected`` instead of aborting the
    import.
    """
    make_id = new_id if new_id is not None else uuid_ids()

    entries: list[FinancialEntry] = []
    rejected: list[InvalidDateError] = []
    dropped = 0

    lines = [line.removesuffix("\r") for line in raw_text.split("\n")]
    for index, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            entry = parse_statement_line(line, make_id, line_number=index)
        except InvalidDateError as exc:
            rejected.append(exc)
            continue
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)

    return StatementImport(entries=entries, rejected=rejected, dropped=dropped)


def parse_statement(
    raw_text: str,
    *,
    new_id: Optional[IdFactory] = None,
) -> list[FinancialEntry]:
    """Parse a statement into entries, silently skipping unusable lines."""
    return parse_statement_report(raw_text, new_id=new_id).entries


def read_statement(
    path: Union[str, "os.PathLike[str]"],
    *,
    new_id: Optional[IdFactory] = None,
) -> StatementImport:
    """Read a statement file (UTF-8, optional BOM) and parse it.

    Raises:
        FileNotFoundError: if the file does not exist.
        UnicodeDecodeError: if the file is not valid UTF-8.
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_statement_report(text, new_id=new_id)
