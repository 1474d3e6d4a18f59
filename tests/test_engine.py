import itertools
from datetime import date

import pytest

from budget_pulse.engine import entries_to_frame, summarize, summary_to_frame
from budget_pulse.errors import InvalidFrequencyError
from budget_pulse.models import FinancialEntry, Summary, TaxElement


def income(entry_id, amount, frequency="monthly", taxes=()):
    return FinancialEntry(
        id=entry_id,
        description=f"Income {entry_id}",
        amount=amount,
        frequency=frequency,
        type="income",
        taxes=tuple(
            TaxElement(id=f"{entry_id}-t{i}", name=f"Tax {i}", percentage=p)
            for i, p in enumerate(taxes)
        ),
        date=date(2024, 1, 1),
    )


def expense(entry_id, amount, frequency="monthly"):
    return FinancialEntry(
        id=entry_id,
        description=f"Expense {entry_id}",
        amount=amount,
        frequency=frequency,
        type="expense",
        date=date(2024, 1, 1),
    )


def test_summary_of_one_income_and_one_weekly_expense() -> None:
    """1000/month taxed at 20% and 100/week of expenses leave 400."""
    summary = summarize(
        [income("i1", 1000, "monthly", taxes=[20])],
        [expense("e1", 100, "weekly")],
    )

    assert summary.total_income == pytest.approx(1000.0)
    assert summary.total_taxes == pytest.approx(200.0)
    assert summary.net_income == pytest.approx(800.0)
    assert summary.total_expenses == pytest.approx(400.0)
    assert summary.balance == pytest.approx(400.0)


def test_empty_collections_give_zero_summary() -> None:
    assert summarize([], []) == Summary(0.0, 0.0, 0.0, 0.0, 0.0)


def test_summary_is_invariant_under_permutation() -> None:
    incomes = [
        income("i1", 3000, "monthly", taxes=[10, 5]),
        income("i2", 12000, "yearly", taxes=[30]),
        income("i3", 15.5, "daily"),
    ]
    expenses = [
        expense("e1", 850, "monthly"),
        expense("e2", 42.1, "weekly"),
        expense("e3", 3.2, "daily"),
    ]

    reference = summarize(incomes, expenses)
    for inc_perm in itertools.permutations(incomes):
        for exp_perm in itertools.permutations(expenses):
            result = summarize(inc_perm, exp_perm)
            assert result.total_income == pytest.approx(reference.total_income)
            assert result.total_taxes == pytest.approx(reference.total_taxes)
            assert result.total_expenses == pytest.approx(reference.total_expenses)
            assert result.balance == pytest.approx(reference.balance)


def test_balance_identity_holds() -> None:
    summary = summarize(
        [income("i1", 2100, "monthly", taxes=[22]), income("i2", 600, "yearly")],
        [expense("e1", 12, "daily"), expense("e2", 75, "weekly")],
    )
    assert summary.balance == pytest.approx(
        summary.total_income - summary.total_taxes - summary.total_expenses
    )
    assert summary.net_income == pytest.approx(
        summary.total_income - summary.total_taxes
    )


def test_summarize_does_not_mutate_entries() -> None:
    entries = [income("i1", 1000, "weekly", taxes=[10])]
    before = [e.to_dict() for e in entries]
    summarize(entries, [])
    summarize(entries, [])
    assert [e.to_dict() for e in entries] == before


def test_summarize_rejects_corrupted_frequency() -> None:
    """An entry whose frequency was tampered with fails loudly."""
    entry = income("i1", 100)
    entry.frequency = "hourly"
    with pytest.raises(InvalidFrequencyError):
        summarize([entry], [])


def test_entries_to_frame_breakdown() -> None:
    df = entries_to_frame(
        [income("i1", 100, "weekly", taxes=[25]), expense("e1", 1200, "yearly")]
    )

    assert list(df["id"]) == ["i1", "e1"]
    assert list(df["type"]) == ["income", "expense"]
    assert df.loc[0, "monthly_amount"] == pytest.approx(400.0)
    assert df.loc[0, "monthly_tax"] == pytest.approx(100.0)
    assert df.loc[1, "monthly_amount"] == pytest.approx(100.0)
    assert df.loc[1, "monthly_tax"] == 0.0


def test_entries_to_frame_empty_keeps_columns() -> None:
    df = entries_to_frame([])
    assert df.empty
    assert "monthly_amount" in df.columns


def test_summary_to_frame_rounds_for_display() -> None:
    summary = summarize([income("i1", 100, "yearly")], [])
    df = summary_to_frame(summary, decimals=2)

    assert list(df["metric"]) == [
        "Total income",
        "Total taxes",
        "Net income",
        "Total expenses",
        "Balance",
    ]
    assert df.loc[0, "amount"] == pytest.approx(8.33)
