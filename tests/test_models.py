from datetime import date

import pytest

from budget_pulse.errors import InvalidFrequencyError
from budget_pulse.models import (
    EntryType,
    FinancialEntry,
    Frequency,
    TaxElement,
    sequential_ids,
    split_by_type,
    uuid_ids,
)


def make_entry(**overrides) -> FinancialEntry:
    fields = {
        "id": "e1",
        "description": "Salary",
        "amount": 2000,
        "frequency": "monthly",
        "type": "income",
        "taxes": (),
        "date": date(2024, 5, 1),
    }
    fields.update(overrides)
    return FinancialEntry(**fields)


def test_strings_are_converted_to_enums() -> None:
    entry = make_entry(frequency="weekly", type="expense")
    assert entry.frequency is Frequency.WEEKLY
    assert entry.type is EntryType.EXPENSE
    assert entry.amount == 2000.0


@pytest.mark.parametrize("amount", [-0.01, float("nan"), float("inf"), "abc", True])
def test_invalid_amounts_are_rejected(amount) -> None:
    with pytest.raises(ValueError):
        make_entry(amount=amount)


def test_unknown_frequency_is_rejected() -> None:
    with pytest.raises(InvalidFrequencyError):
        make_entry(frequency="quarterly")


@pytest.mark.parametrize("frequency", [" monthly ", "MONTHLY", "Weekly"])
def test_frequency_values_must_match_exactly(frequency) -> None:
    with pytest.raises(InvalidFrequencyError):
        make_entry(frequency=frequency)


def test_iso_date_strings_are_converted() -> None:
    assert make_entry(date="2024-01-02").date == date(2024, 1, 2)
    assert make_entry(date="2024-01-02T10:30:00Z").date == date(2024, 1, 2)


@pytest.mark.parametrize("value", ["not-a-date", "02/01/2024", 20240102])
def test_invalid_dates_are_rejected(value) -> None:
    with pytest.raises(ValueError):
        make_entry(date=value)


def test_unknown_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        make_entry(type="transfer")


def test_expenses_cannot_carry_taxes() -> None:
    with pytest.raises(ValueError):
        make_entry(type="expense", taxes=(TaxElement("t1", "VAT", 20),))


def test_dict_round_trip() -> None:
    entry = make_entry(taxes=[TaxElement("t1", "Income tax", 20.0)])
    data = entry.to_dict()

    assert data == {
        "id": "e1",
        "description": "Salary",
        "amount": 2000.0,
        "frequency": "monthly",
        "type": "income",
        "taxes": [{"id": "t1", "name": "Income tax", "percentage": 20.0}],
        "date": "2024-05-01",
    }
    assert FinancialEntry.from_dict(data) == entry


def test_from_dict_uses_list_type_when_missing() -> None:
    """Older backups carry no 'type' and no 'date' field."""
    entry = FinancialEntry.from_dict(
        {"id": "x", "description": "Rent", "amount": 800, "frequency": "monthly"},
        entry_type=EntryType.EXPENSE,
    )
    assert entry.type is EntryType.EXPENSE
    assert entry.date is None
    assert entry.taxes == ()


def test_from_dict_rejects_contradicting_type() -> None:
    with pytest.raises(ValueError):
        FinancialEntry.from_dict(
            {"id": "x", "amount": 1, "frequency": "daily", "type": "income"},
            entry_type=EntryType.EXPENSE,
        )


def test_from_dict_requires_core_fields() -> None:
    with pytest.raises(ValueError):
        FinancialEntry.from_dict({"id": "x", "frequency": "daily", "type": "income"})


def test_sequential_ids_are_deterministic() -> None:
    new_id = sequential_ids("n-")
    assert [new_id(), new_id(), new_id()] == ["n-1", "n-2", "n-3"]


def test_uuid_ids_are_unique() -> None:
    new_id = uuid_ids()
    ids = {new_id() for _ in range(100)}
    assert len(ids) == 100


def test_split_by_type_preserves_order() -> None:
    a = make_entry(id="a")
    b = make_entry(id="b", type="expense")
    c = make_entry(id="c")
    income, expenses = split_by_type([a, b, c])
    assert income == [a, c]
    assert expenses == [b]
