from datetime import date
from typing import List, Optional

from pydantic import Field

from app.models.snapshot import CamelModel, CategorySpend, DailyRecord


class Transaction(CamelModel):
    date: date
    amount: float  # positive for income, negative for an expense
    category: Optional[str] = None
    payee: Optional[str] = ""


class SummaryRequest(CamelModel):
    transactions: List[Transaction] = Field(default_factory=list)
    previous_transactions: Optional[List[Transaction]] = None
    start: Optional[date] = Field(default=None, alias="from")
    end: Optional[date] = Field(default=None, alias="to")


class SummaryResponse(CamelModel):
    """Snapshot-shaped summary; income may be zero here, unlike FinancialSnapshot."""

    income_amount: float
    expenses_amount: float
    remaining_amount: float
    categories: List[CategorySpend] = Field(default_factory=list)
    days: List[DailyRecord] = Field(default_factory=list)
    income_change: Optional[float] = None
    expenses_change: Optional[float] = None
    remaining_change: Optional[float] = None
