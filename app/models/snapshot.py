from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both the dashboard's camelCase keys and snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategorySpend(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: float = Field(..., ge=0)


class DailyRecord(CamelModel):
    model_config = ConfigDict(frozen=True)

    date: date
    income: float = 0.0
    expenses: float = 0.0


class FinancialSnapshot(CamelModel):
    model_config = ConfigDict(frozen=True)

    income_amount: float = Field(..., gt=0)
    expenses_amount: float
    remaining_amount: float
    categories: List[CategorySpend] = Field(default_factory=list)
    days: List[DailyRecord] = Field(default_factory=list)

    @property
    def spending_ratio(self) -> float:
        return self.expenses_amount / self.income_amount


class QueryRequest(CamelModel):
    query: Optional[str] = None
    snapshot: Optional[FinancialSnapshot] = None


class AdviceResponse(CamelModel):
    kind: str
    advice: str
    generated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
