# Budget Pulse - Recurring income & expense tracker
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Monthly normalization of entry amounts.

Every entry carries an amount at its own cadence. To compare and sum
entries, amounts are converted to a monthly equivalent using fixed factors
(this is not calendar-aware: a month is always 30 days or 4 weeks):

    daily   -> amount * 30
    weekly  -> amount * 4
    monthly -> amount
    yearly  -> amount / 12

No rounding is applied here; rounding is a display concern.
"""

from typing import Union

from .models import Frequency

MONTHLY_FACTORS: dict[Frequency, float] = {
    Frequency.DAILY: 30.0,
    Frequency.WEEKLY: 4.0,
    Frequency.MONTHLY: 1.0,
    Frequency.YEARLY: 1.0 / 12.0,
}


def monthly_amount(amount: float, frequency: Union[Frequency, str]) -> float:
    """Convert ``amount`` at ``frequency`` into its monthly equivalent.

    Args:
        amount: Amount at the entry's own cadence.
        frequency: A Frequency member or its string value.

    Returns:
        The monthly equivalent, unrounded.

    Raises:
        InvalidFrequencyError: if ``frequency`` is not one of the four
            supported values.
    """
    freq = Frequency.parse(frequency)
    if freq is Frequency.YEARLY:
        # amount / 12, not amount * (1 / 12)
        return float(amount) / 12.0
    return float(amount) * MONTHLY_FACTORS[freq]
