# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Core aggregation engine for Budget Pulse.

This module folds the current income and expense entries into a single
monthly ``Summary``. It relies on two leaf helpers:

- ``normalization.monthly_amount`` converts each entry amount to a monthly
  equivalent,
- ``taxes.tax_amount`` computes the tax deduction of an income entry from
  its monthly amount.

Summary algorithm
-----------------
1. For each income entry:
       monthly = monthly_amount(amount, frequency)
       tax     = tax_amount(monthly, taxes)
   accumulate total_income += monthly and total_taxes += tax.
2. For each expense entry, accumulate total_expenses += monthly amount.
3. net_income = total_income - total_taxes
4. balance    = net_income - total_expenses

``summarize()`` is a pure function: it never mutates the entries, keeps no
state between calls and runs in O(n), so it can be recomputed on every read.

Presentation helpers
--------------------
``entries_to_frame()`` and ``summary_to_frame()`` turn entries and
summaries into pandas DataFrames for the CLI (console tables and CSV
exports). Rounding is applied only in these helpers.
"""

from collections.abc import Iterable

import pandas as pd

from .models import FinancialEntry, Summary
from .normalization import monthly_amount
from .taxes import tax_amount

ENTRY_COLUMNS = [
    "id",
    "date",
    "type",
    "description",
    "frequency",
    "amount",
    "monthly_amount",
    "monthly_tax",
]

SUMMARY_LABELS = [
    ("total_income", "Total income"),
    ("total_taxes", "Total taxes"),
    ("net_income", "Net income"),
    ("total_expenses", "Total expenses"),
    ("balance", "Balance"),
]


def summarize(
    income_entries: Iterable[FinancialEntry],
    expense_entries: Iterable[FinancialEntry],
) -> Summary:
    """Aggregate income and expense entries into a monthly Summary.

    Args:
        income_entries: Income entries (their taxes are applied).
        expense_entries: Expense entries (taxes are ignored).

    Returns:
        A new Summary. Entry order does not affect the totals.

    Raises:
        InvalidFrequencyError: if an entry carries an unknown frequency.
    """
    total_income = 0.0
    total_taxes = 0.0
    for entry in income_entries:
        monthly = monthly_amount(entry.amount, entry.frequency)
        total_income += monthly
        total_taxes += tax_amount(monthly, entry.taxes)

    total_expenses = 0.0
    for entry in expense_entries:
        total_expenses += monthly_amount(entry.amount, entry.frequency)

    net_income = total_income - total_taxes
    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_taxes=total_taxes,
        net_income=net_income,
        balance=net_income - total_expenses,
    )


def entries_to_frame(entries: Iterable[FinancialEntry]) -> pd.DataFrame:
    """Build a per-entry breakdown with monthly amount and monthly tax.

    Returns:
        A DataFrame with columns ``ENTRY_COLUMNS``, one row per entry in the
        input order. ``monthly_tax`` is 0.0 for expenses.
    """
    rows = []
    for entry in entries:
        monthly = monthly_amount(entry.amount, entry.frequency)
        rows.append(
            {
                "id": entry.id,
                "date": entry.date,
                "type": entry.type.value,
                "description": entry.description,
                "frequency": entry.frequency.value,
                "amount": entry.amount,
                "monthly_amount": monthly,
                "monthly_tax": tax_amount(monthly, entry.taxes)
                if entry.is_income
                else 0.0,
            }
        )
    return pd.DataFrame(rows, columns=ENTRY_COLUMNS)


def summary_to_frame(summary: Summary, decimals: int = 2) -> pd.DataFrame:
    """Render a Summary as a two-column (metric, amount) DataFrame."""
    out = []
    for key, label in SUMMARY_LABELS:
        amount = round(getattr(summary, key), decimals)
        out.append({"metric": label, "amount": amount})
    return pd.DataFrame(out, columns=["metric", "amount"])
