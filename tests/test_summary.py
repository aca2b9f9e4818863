from datetime import date

import pytest

from app.models.transaction import Transaction
from app.utils.summary import SummaryAnalyzer

sample_transactions = [
    Transaction(date=date(2025, 11, 1), amount=50000.0, category="Salary", payee="Acme Corp"),
    Transaction(date=date(2025, 11, 1), amount=-20000.0, category="Housing", payee="Landlord"),
    Transaction(date=date(2025, 11, 2), amount=-10000.0, category="Food", payee="Grocer"),
    Transaction(date=date(2025, 11, 4), amount=-2000.0, category="Food", payee="Cafe"),
    Transaction(date=date(2025, 11, 5), amount=-6000.0, category="Entertainment", payee="Cinema"),
    Transaction(date=date(2025, 11, 5), amount=-1500.0, category="Transportation", payee="Metro"),
    Transaction(date=date(2025, 11, 6), amount=-500.0, payee="ATM"),
]

previous_transactions = [
    Transaction(date=date(2025, 10, 1), amount=40000.0, category="Salary"),
    Transaction(date=date(2025, 10, 3), amount=-32000.0, category="Housing"),
]


def test_calculate_totals():
    analyzer = SummaryAnalyzer()
    assert analyzer.income_total(sample_transactions) == 50000.0
    assert analyzer.expenses_total(sample_transactions) == 40000.0
    assert analyzer.remaining(sample_transactions) == 10000.0


def test_category_totals_are_ranked():
    analyzer = SummaryAnalyzer()
    result = analyzer.category_totals(sample_transactions)
    assert list(result) == ["Housing", "Food", "Entertainment", "Transportation", "Uncategorized"]
    assert result["Food"] == 12000.0  # 10000 + 2000


def test_top_categories_fold_the_rest_into_other():
    analyzer = SummaryAnalyzer()
    result = analyzer.top_categories(sample_transactions)
    assert [(c.name, c.value) for c in result] == [
        ("Housing", 20000.0),
        ("Food", 12000.0),
        ("Entertainment", 6000.0),
        ("Other", 2000.0),
    ]


def test_no_other_entry_when_few_categories():
    analyzer = SummaryAnalyzer(top_categories=5)
    names = [c.name for c in analyzer.top_categories(sample_transactions)]
    assert "Other" not in names
    assert len(names) == 5


def test_daily_records_fill_gaps():
    analyzer = SummaryAnalyzer()
    days = analyzer.daily_records(sample_transactions)

    assert len(days) == 6
    assert days[0].income == 50000.0
    assert days[0].expenses == 20000.0
    assert days[2].date == date(2025, 11, 3)
    assert days[2].income == 0.0 and days[2].expenses == 0.0
    assert days[4].expenses == 7500.0


def test_daily_records_without_transactions():
    analyzer = SummaryAnalyzer()
    assert analyzer.daily_records([]) == []
    assert len(analyzer.daily_records([], date(2025, 11, 1), date(2025, 11, 3))) == 3


def test_percentage_change():
    assert SummaryAnalyzer.percentage_change(40000, 32000) == 25.0
    assert SummaryAnalyzer.percentage_change(30000, 40000) == -25.0
    assert SummaryAnalyzer.percentage_change(0, 0) == 0.0
    assert SummaryAnalyzer.percentage_change(5, 0) == 100.0


def test_summarize_with_previous_period():
    summary = SummaryAnalyzer().summarize(sample_transactions, previous=previous_transactions)

    assert summary.income_amount == 50000.0
    assert summary.remaining_amount == 10000.0
    assert summary.income_change == 25.0
    assert summary.expenses_change == 25.0
    assert summary.remaining_change == 25.0


def test_summarize_filters_by_date():
    summary = SummaryAnalyzer().summarize(
        sample_transactions, start=date(2025, 11, 2), end=date(2025, 11, 4)
    )

    assert summary.income_amount == 0.0
    assert summary.expenses_amount == 12000.0
    assert summary.remaining_amount == -12000.0
    assert [c.name for c in summary.categories] == ["Food"]
    assert len(summary.days) == 3
    assert summary.income_change is None


def test_daily_records_reject_oversized_period():
    analyzer = SummaryAnalyzer(max_days=366)
    assert len(analyzer.daily_records([], date(2024, 1, 1), date(2024, 12, 31))) == 366

    with pytest.raises(ValueError):
        analyzer.daily_records([], date(1, 1, 1), date(9999, 12, 31))
