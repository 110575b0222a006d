from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.core.errors import BadRequestError
from finmate.schemas.report import (
    PeriodSummary, StatisticsResponse, CalendarViewResponse, PieChartItem, MonthWithData,
)
from finmate.schemas.transaction import TransactionCreate, TransactionUpdate, TransactionResponse
from finmate.services.common import Period, resolve_period
from finmate.services.reports import ReportService
from finmate.services.transactions import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def parse_category_ids(raw: Optional[str]) -> Optional[list[int]]:
    if not raw:
        return None
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as exc:
        raise BadRequestError("category_ids must be a comma-separated list of integers") from exc


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(data: TransactionCreate, user_id: int = Depends(get_current_user_id),
                             db: AsyncSession = Depends(get_db)):
    return await TransactionService.create_transaction(db, user_id, data)


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
        type: Optional[Literal["income", "expense"]] = Query(None),
        limit: Optional[int] = Query(None, gt=0),
        category_ids: Optional[str] = Query(None),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    return await TransactionService.list_transactions(db, user_id, type, limit, parse_category_ids(category_ids))


@router.get("/recent", response_model=List[TransactionResponse])
async def recent_transactions(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await TransactionService.list_transactions(db, user_id, limit=3)


@router.get("/export")
async def export_transactions(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    csv_text = await TransactionService.export_csv(db, user_id)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'}
    )


@router.get("/summary", response_model=PeriodSummary, tags=["Reports"])
async def get_summary(
        month: int = Query(..., ge=1, le=12),
        year: int = Query(..., ge=1, le=9998),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    return await ReportService.period_summary(db, user_id, Period.for_month(year, month))


@router.get("/statistics", response_model=StatisticsResponse, tags=["Reports"])
async def get_statistics(
        period_type: Optional[str] = Query(None, alias="periodType"),
        year: Optional[int] = Query(None),
        month: Optional[int] = Query(None),
        start_date: Optional[date] = Query(None, alias="startDate"),
        end_date: Optional[date] = Query(None, alias="endDate"),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    period = resolve_period(period_type, year, month, start_date, end_date)
    return await ReportService.statistics(db, user_id, period)


@router.get("/report/pie-chart", response_model=List[PieChartItem], tags=["Reports"])
async def get_pie_chart(
        month: int = Query(..., ge=1, le=12),
        year: int = Query(..., ge=1, le=9998),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    return await ReportService.top_expense_categories(db, user_id, Period.for_month(year, month))


@router.get("/calendar-view", response_model=CalendarViewResponse, tags=["Reports"])
async def get_calendar_view(
        month: int = Query(..., ge=1, le=12),
        year: int = Query(..., ge=1, le=9998),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    return await ReportService.calendar_view(db, user_id, year, month)


@router.get("/months-with-data", response_model=List[MonthWithData], tags=["Reports"])
async def get_months_with_data(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await ReportService.months_with_data(db, user_id)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(transaction_id: int, data: TransactionUpdate,
                             user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await TransactionService.update_transaction(db, user_id, transaction_id, data)


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: int, user_id: int = Depends(get_current_user_id),
                             db: AsyncSession = Depends(get_db)):
    await TransactionService.delete_transaction(db, user_id, transaction_id)
    return {"message": "Transaction deleted successfully"}
