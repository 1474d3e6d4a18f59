# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Tax deductions on income entries.

Taxes are independent and additive: every percentage applies to the same
monthly base, never to the remainder left by a previous tax. Percentages
are not validated here, so negative or >100 values are honored as given.
"""

from collections.abc import Iterable
from typing import Optional

from .models import TaxElement


def tax_amount(
    monthly_amount: float,
    taxes: Optional[Iterable[TaxElement]],
) -> float:
    """Return the total monthly tax deduction for an income entry.

    Args:
        monthly_amount: Monthly-normalized amount of the income entry.
        taxes: Tax elements attached to the entry (may be empty or None).

    Returns:
        ``sum(monthly_amount * t.percentage / 100 for t in taxes)``,
        or 0.0 when there are no taxes.
    """
    if not taxes:
        return 0.0
    return sum(
        (monthly_amount * float(t.percentage) / 100.0 for t in taxes),
        0.0,
    )
