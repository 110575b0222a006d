import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, func, case, and_, extract

from finmate.models.category import Category
from finmate.models.transaction import Transaction
from finmate.schemas.report import (
    PeriodSummary, CategoryBreakdown, StatisticsResponse, DailySummary,
    CalendarViewResponse, PieChartItem, MonthWithData,
)
from finmate.services.common import Period, to_decimal
from finmate.services.transactions import TransactionService


def _in_period(user_id: int, period: Period):
    return and_(
        Transaction.user_id == user_id,
        Transaction.transaction_date >= period.start,
        Transaction.transaction_date < period.end,
    )


class ReportService:
    @staticmethod
    async def period_summary(db: AsyncSession, user_id: int, period: Period) -> PeriodSummary:
        query = select(
            func.sum(case((Transaction.type == 'income', Transaction.amount), else_=0)).label('income'),
            func.sum(case((Transaction.type == 'expense', Transaction.amount), else_=0)).label('expense')
        ).where(_in_period(user_id, period))
        row = (await db.execute(query)).one()

        income = to_decimal(row.income)
        expense = to_decimal(row.expense)

        return PeriodSummary(
            total_income=float(income),
            total_expense=float(expense),
            balance=float(income - expense)
        )

    @staticmethod
    async def category_breakdown(db: AsyncSession, user_id: int, period: Period,
                                 entry_type: str) -> list[CategoryBreakdown]:
        query = select(
            Category.id,
            Category.name,
            Category.icon,
            Category.budget_limit,
            func.sum(Transaction.amount).label('total'),
            func.count(Transaction.id).label('tx_count')
        ).join(
            Category, Transaction.category_id == Category.id
        ).where(
            and_(_in_period(user_id, period), Transaction.type == entry_type)
        ).group_by(
            Category.id, Category.name, Category.icon, Category.budget_limit
        ).order_by(desc('total'))

        rows = (await db.execute(query)).all()

        result = []
        for r in rows:
            limit = None
            if entry_type == 'expense' and r.budget_limit:
                limit = float(r.budget_limit)
            result.append(CategoryBreakdown(
                category_id=r.id,
                category_name=r.name,
                category_icon=r.icon,
                total_amount=float(to_decimal(r.total)),
                transaction_count=r.tx_count,
                budget_limit=limit
            ))
        return result

    @staticmethod
    async def statistics(db: AsyncSession, user_id: int, period: Period) -> StatisticsResponse:
        return StatisticsResponse(
            summary=await ReportService.period_summary(db, user_id, period),
            expense_by_category=await ReportService.category_breakdown(db, user_id, period, 'expense'),
            income_by_category=await ReportService.category_breakdown(db, user_id, period, 'income')
        )

    @staticmethod
    async def top_expense_categories(db: AsyncSession, user_id: int, period: Period,
                                     limit: int = 5) -> list[PieChartItem]:
        breakdown = await ReportService.category_breakdown(db, user_id, period, 'expense')
        return [
            PieChartItem(
                category_id=b.category_id,
                category_name=b.category_name,
                category_icon=b.category_icon,
                total_amount=b.total_amount
            )
            for b in breakdown[:limit]
        ]

    @staticmethod
    def daily_net(transactions) -> list[DailySummary]:
        if not transactions:
            return []

        df = pd.DataFrame([
            {"day": t.transaction_date.date(), "type": t.type, "amount": float(t.amount)}
            for t in transactions
        ])
        df["income"] = df["amount"].where(df["type"] == "income", 0.0)
        df["expense"] = df["amount"].where(df["type"] == "expense", 0.0)
        daily = df.groupby("day")[["income", "expense"]].sum().sort_index()

        return [
            DailySummary(
                date=day,
                total_income=round(float(r["income"]), 2),
                total_expense=round(float(r["expense"]), 2),
                net_amount=round(float(r["income"] - r["expense"]), 2)
            )
            for day, r in daily.iterrows()
        ]

    @staticmethod
    async def calendar_view(db: AsyncSession, user_id: int, year: int, month: int) -> CalendarViewResponse:
        period = Period.for_month(year, month)
        transactions = await TransactionService.list_in_period(db, user_id, period)

        return CalendarViewResponse(
            summary=await ReportService.period_summary(db, user_id, period),
            daily_summaries=ReportService.daily_net(transactions),
            transactions=transactions
        )

    @staticmethod
    async def months_with_data(db: AsyncSession, user_id: int) -> list[MonthWithData]:
        year_col = extract('year', Transaction.transaction_date).label('year')
        month_col = extract('month', Transaction.transaction_date).label('month')

        query = select(year_col, month_col).where(
            Transaction.user_id == user_id
        ).distinct().order_by(desc('year'), desc('month'))

        rows = (await db.execute(query)).all()
        return [MonthWithData(year=int(r.year), month=int(r.month)) for r in rows]
