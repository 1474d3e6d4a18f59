import pytest

from budget_pulse.errors import InvalidFrequencyError
from budget_pulse.models import Frequency
from budget_pulse.normalization import monthly_amount


@pytest.mark.parametrize(
    "frequency, expected",
    [
        ("daily", 300.0),
        ("weekly", 40.0),
        ("monthly", 10.0),
        ("yearly", 10.0 / 12),
    ],
)
def test_monthly_amount_fixed_factors(frequency, expected) -> None:
    """Each cadence uses its fixed, non calendar-aware factor."""
    assert monthly_amount(10.0, frequency) == pytest.approx(expected)


def test_monthly_amount_accepts_enum_members() -> None:
    assert monthly_amount(7.0, Frequency.WEEKLY) == pytest.approx(28.0)


def test_yearly_amount_is_not_rounded() -> None:
    """Normalization keeps full precision; rounding is a display concern."""
    assert monthly_amount(100.0, "yearly") == pytest.approx(8.333333333)
    assert monthly_amount(1200.0, "yearly") == 100.0


@pytest.mark.parametrize("frequency", list(Frequency))
@pytest.mark.parametrize("amount", [0.0, 1.0, 45.5, 1234.56])
def test_monthly_amount_is_linear(frequency, amount) -> None:
    assert monthly_amount(3 * amount, frequency) == pytest.approx(
        3 * monthly_amount(amount, frequency)
    )


@pytest.mark.parametrize("amount", [0.0, 12.0, 99.99, 5000.0])
def test_yearly_matches_twelfth_of_monthly(amount) -> None:
    assert monthly_amount(amount, "yearly") == pytest.approx(
        monthly_amount(amount * 12, "monthly") / 12
    )


@pytest.mark.parametrize("frequency", ["fortnightly", "", "Month", None])
def test_unknown_frequency_is_rejected(frequency) -> None:
    """Unknown cadences raise instead of silently defaulting to monthly."""
    with pytest.raises(InvalidFrequencyError):
        monthly_amount(10.0, frequency)
