import logging
from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_

from finmate.core import clock
from finmate.core.errors import BadRequestError
from finmate.models.category import Category
from finmate.models.transaction import RecurringTransaction, Transaction
from finmate.schemas.recurring import RecurringCreate, RecurringUpdate, RecurringResponse
from finmate.services.common import get_owned, get_owned_category

logger = logging.getLogger(__name__)

RECURRING_NOTE_PREFIX = "[Recurring]"


def next_month(run_date: date) -> date:
    # relativedelta clamps to the last valid day of a shorter month
    return run_date + relativedelta(months=1)


def recurring_note(note: Optional[str]) -> str:
    if note:
        return f"{RECURRING_NOTE_PREFIX} {note}"
    return RECURRING_NOTE_PREFIX


def _serialize(template: RecurringTransaction, category: Optional[Category]) -> RecurringResponse:
    response = RecurringResponse.model_validate(template)
    if category is not None:
        response.category_name = category.name
        response.category_icon = category.icon
    return response


class RecurringService:
    @staticmethod
    async def list_templates(db: AsyncSession, user_id: int) -> list[RecurringResponse]:
        query = (
            select(RecurringTransaction, Category)
            .join(Category, RecurringTransaction.category_id == Category.id)
            .where(RecurringTransaction.user_id == user_id)
            .order_by(RecurringTransaction.next_run_date, RecurringTransaction.id)
        )
        result = await db.execute(query)
        return [_serialize(template, category) for template, category in result.all()]

    @staticmethod
    async def create_template(db: AsyncSession, user_id: int, data: RecurringCreate,
                              today: Optional[date] = None) -> RecurringResponse:
        today = today or clock.today()
        if data.start_date < today:
            raise BadRequestError("start_date must not be in the past")

        category = await get_owned_category(db, data.category_id, user_id)

        template = RecurringTransaction(
            user_id=user_id,
            category_id=category.id,
            amount=data.amount,
            type=data.type,
            note=data.note,
            frequency="monthly",
            start_date=data.start_date,
            next_run_date=data.start_date,
            is_active=True
        )
        db.add(template)
        await db.commit()
        await db.refresh(template)
        return _serialize(template, category)

    @staticmethod
    async def update_template(db: AsyncSession, user_id: int, template_id: int,
                              data: RecurringUpdate) -> RecurringResponse:
        template = await get_owned(db, RecurringTransaction, template_id, user_id, "Recurring transaction")
        category = await get_owned_category(db, data.category_id, user_id)

        template.amount = data.amount
        template.type = data.type
        template.category_id = category.id
        template.note = data.note

        await db.commit()
        await db.refresh(template)
        return _serialize(template, category)

    @staticmethod
    async def toggle_template(db: AsyncSession, user_id: int, template_id: int) -> RecurringResponse:
        template = await get_owned(db, RecurringTransaction, template_id, user_id, "Recurring transaction")
        template.is_active = not template.is_active

        await db.commit()
        await db.refresh(template)
        category = await db.get(Category, template.category_id)
        return _serialize(template, category)

    @staticmethod
    async def delete_template(db: AsyncSession, user_id: int, template_id: int) -> None:
        template = await get_owned(db, RecurringTransaction, template_id, user_id, "Recurring transaction")
        await db.delete(template)
        await db.commit()


async def materialize_due(db: AsyncSession, run_at: Optional[datetime] = None) -> int:
    """Post one transaction for every active template due on or before today.

    Each template advances by exactly one month per run, so a long-overdue
    template catches up one period per daily run. The advance is a
    conditional update on the previously read next_run_date and commits
    together with the inserted transaction; a row another run already
    advanced is skipped. Per-row failures are logged and left due for the
    next run.
    """
    run_at = run_at or clock.now()
    today = run_at.date()

    due_query = select(
        RecurringTransaction.id,
        RecurringTransaction.user_id,
        RecurringTransaction.category_id,
        RecurringTransaction.amount,
        RecurringTransaction.type,
        RecurringTransaction.note,
        RecurringTransaction.next_run_date
    ).where(
        and_(
            RecurringTransaction.is_active.is_(True),
            RecurringTransaction.next_run_date <= today
        )
    )
    due = (await db.execute(due_query)).all()
    logger.info("Recurring run for %s: %d template(s) due", today, len(due))

    created = 0
    for row in due:
        try:
            advance = (
                update(RecurringTransaction)
                .where(
                    and_(
                        RecurringTransaction.id == row.id,
                        RecurringTransaction.next_run_date == row.next_run_date
                    )
                )
                .values(next_run_date=next_month(row.next_run_date))
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(advance)
            if result.rowcount != 1:
                await db.rollback()
                logger.info("Recurring template %s already advanced, skipping", row.id)
                continue

            db.add(Transaction(
                user_id=row.user_id,
                category_id=row.category_id,
                amount=row.amount,
                type=row.type,
                transaction_date=run_at,
                note=recurring_note(row.note)
            ))
            await db.commit()
            created += 1
        except Exception:
            await db.rollback()
            logger.exception("Failed to materialize recurring template %s", row.id)

    logger.info("Recurring run for %s: %d transaction(s) created", today, created)
    return created
