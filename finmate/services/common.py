from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from finmate.core.errors import BadRequestError, ForbiddenError, NotFoundError
from finmate.models.category import Category

PERIOD_TYPES = ("week", "month", "year")


@dataclass(frozen=True)
class Period:
    """Half-open [start, end) window over transaction timestamps."""
    start: datetime
    end: datetime

    @classmethod
    def for_month(cls, year: int, month: int) -> "Period":
        start = datetime(year, month, 1)
        if month == 12:
            end = datetime(year + 1, 1, 1)
        else:
            end = datetime(year, month + 1, 1)
        return cls(start, end)

    @classmethod
    def for_year(cls, year: int) -> "Period":
        return cls(datetime(year, 1, 1), datetime(year + 1, 1, 1))

    @classmethod
    def for_dates(cls, start_date: date, end_date: date) -> "Period":
        # end_date is inclusive
        return cls(
            datetime.combine(start_date, datetime.min.time()),
            datetime.combine(end_date + timedelta(days=1), datetime.min.time()),
        )


def resolve_period(
        period_type: Optional[str],
        year: Optional[int] = None,
        month: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
) -> Period:
    if period_type not in PERIOD_TYPES:
        raise BadRequestError('periodType must be one of "week", "month", "year"')

    if period_type == "week":
        if start_date is None or end_date is None:
            raise BadRequestError("startDate and endDate are required for a weekly period")
        if end_date >= date.max:
            raise BadRequestError("endDate is out of range")
        if end_date < start_date:
            raise BadRequestError("endDate must not be before startDate")
        return Period.for_dates(start_date, end_date)

    if year is None or not 1 <= year <= 9998:
        raise BadRequestError("A valid year is required")

    if period_type == "month":
        if month is None or not 1 <= month <= 12:
            raise BadRequestError("A valid month (1-12) is required")
        return Period.for_month(year, month)

    return Period.for_year(year)


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


async def get_owned(db: AsyncSession, model, obj_id: int, user_id: int, label: str):
    obj = await db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(f"{label} not found")
    if obj.user_id != user_id:
        raise ForbiddenError(f"User not authorized to access this {label.lower()}")
    return obj


async def get_owned_category(db: AsyncSession, category_id: int, user_id: int) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if category.user_id != user_id:
        raise ForbiddenError("User not authorized to use this category")
    return category
