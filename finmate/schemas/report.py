from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date

from finmate.schemas.transaction import TransactionResponse


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PeriodSummary(CamelModel):
    total_income: float
    total_expense: float
    balance: float

    model_config = ConfigDict(json_schema_extra={
        "example": {"totalIncome": 2000000, "totalExpense": 80000, "balance": 1920000}
    })


class CategoryBreakdown(CamelModel):
    category_id: int
    category_name: str
    category_icon: Optional[str] = None
    total_amount: float
    transaction_count: int
    budget_limit: Optional[float] = None


class StatisticsResponse(CamelModel):
    summary: PeriodSummary
    expense_by_category: List[CategoryBreakdown]
    income_by_category: List[CategoryBreakdown]


class DailySummary(CamelModel):
    date: date
    total_income: float
    total_expense: float
    net_amount: float


class CalendarViewResponse(CamelModel):
    summary: PeriodSummary
    daily_summaries: List[DailySummary]
    transactions: List[TransactionResponse]


class PieChartItem(CamelModel):
    category_id: int
    category_name: str
    category_icon: Optional[str] = None
    total_amount: float


class MonthWithData(CamelModel):
    year: int
    month: int
