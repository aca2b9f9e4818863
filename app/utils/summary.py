from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.snapshot import CategorySpend, DailyRecord
from app.models.transaction import SummaryResponse, Transaction

UNCATEGORIZED = "Uncategorized"


class SummaryAnalyzer:
    """
    Builds the dashboard summary (the snapshot the advisory engine consumes)
    from a list of signed transactions. Positive amounts are income, negative
    amounts are expenses.
    """

    def __init__(self, top_categories: int = 3, other_label: str = "Other", max_days: int = 366) -> None:
        self._top_categories = top_categories
        self._other_label = other_label
        self._max_days = max_days

    def income_total(self, transactions: Iterable[Transaction]) -> float:
        return round(sum(t.amount for t in transactions if t.amount > 0), 2)

    def expenses_total(self, transactions: Iterable[Transaction]) -> float:
        return round(abs(sum(t.amount for t in transactions if t.amount < 0)), 2)

    def remaining(self, transactions: Sequence[Transaction]) -> float:
        return round(self.income_total(transactions) - self.expenses_total(transactions), 2)

    def category_totals(self, transactions: Iterable[Transaction]) -> Dict[str, float]:
        """Expense totals per category, largest first."""
        totals: Dict[str, float] = defaultdict(float)
        for t in transactions:
            if t.amount < 0:
                totals[t.category or UNCATEGORIZED] += abs(t.amount)
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return {category: round(total, 2) for category, total in ranked}

    def top_categories(self, transactions: Iterable[Transaction]) -> List[CategorySpend]:
        """
        The largest expense categories, with everything past the cut-off folded
        into a single "Other" entry.
        """
        ranked = list(self.category_totals(transactions).items())
        top = [CategorySpend(name=name, value=value) for name, value in ranked[:self._top_categories]]

        rest = ranked[self._top_categories:]
        if rest:
            top.append(CategorySpend(name=self._other_label, value=round(sum(v for _, v in rest), 2)))
        return top

    def daily_records(
        self,
        transactions: Sequence[Transaction],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DailyRecord]:
        if not transactions and (start is None or end is None):
            return []

        start = start or min(t.date for t in transactions)
        end = end or max(t.date for t in transactions)
        span = (end - start).days + 1
        if span > self._max_days:
            raise ValueError(f"Summary period spans {span} days, the limit is {self._max_days}")

        income: Dict[date, float] = defaultdict(float)
        expenses: Dict[date, float] = defaultdict(float)
        for t in transactions:
            if t.amount >= 0:
                income[t.date] += t.amount
            else:
                expenses[t.date] += abs(t.amount)

        records = []
        day = start
        while day <= end:
            records.append(DailyRecord(
                date=day,
                income=round(income.get(day, 0.0), 2),
                expenses=round(expenses.get(day, 0.0), 2),
            ))
            day += timedelta(days=1)
        return records

    @staticmethod
    def percentage_change(current: float, previous: float) -> float:
        if previous == 0:
            return 0.0 if current == previous else 100.0
        return round((current - previous) / previous * 100, 2)

    def summarize(
        self,
        transactions: Sequence[Transaction],
        previous: Optional[Sequence[Transaction]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> SummaryResponse:
        if start or end:
            transactions = [
                t for t in transactions
                if (start is None or t.date >= start) and (end is None or t.date <= end)
            ]

        income = self.income_total(transactions)
        expenses = self.expenses_total(transactions)
        remaining = round(income - expenses, 2)

        summary = SummaryResponse(
            income_amount=income,
            expenses_amount=expenses,
            remaining_amount=remaining,
            categories=self.top_categories(transactions),
            days=self.daily_records(transactions, start, end),
        )

        if previous is not None:
            summary = summary.model_copy(update={
                "income_change": self.percentage_change(income, self.income_total(previous)),
                "expenses_change": self.percentage_change(expenses, self.expenses_total(previous)),
                "remaining_change": self.percentage_change(remaining, self.remaining(previous)),
            })
        return summary
