import logging
from typing import Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, and_

from finmate.models.category import Category
from finmate.models.transaction import Transaction
from finmate.schemas.transaction import TransactionCreate, TransactionUpdate, TransactionResponse
from finmate.services.common import Period, get_owned, get_owned_category

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["date", "type", "category", "amount", "note"]


def _serialize(trx: Transaction, category_name: Optional[str], category_icon: Optional[str]) -> TransactionResponse:
    return TransactionResponse(
        id=trx.id,
        user_id=trx.user_id,
        category_id=trx.category_id,
        amount=trx.amount,
        type=trx.type,
        transaction_date=trx.transaction_date,
        note=trx.note,
        category_name=category_name,
        category_icon=category_icon
    )


def _joined_query(user_id: int):
    return (
        select(Transaction, Category.name, Category.icon)
        .join(Category, Transaction.category_id == Category.id)
        .where(Transaction.user_id == user_id)
    )


class TransactionService:
    @staticmethod
    async def create_transaction(db: AsyncSession, user_id: int, data: TransactionCreate) -> TransactionResponse:
        category = await get_owned_category(db, data.category_id, user_id)

        db_obj = Transaction(
            user_id=user_id,
            category_id=category.id,
            amount=data.amount,
            type=data.type,
            transaction_date=data.transaction_date,
            note=data.note
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)

        return _serialize(db_obj, category.name, category.icon)

    @staticmethod
    async def list_transactions(
            db: AsyncSession,
            user_id: int,
            entry_type: Optional[str] = None,
            limit: Optional[int] = None,
            category_ids: Optional[list[int]] = None,
    ) -> list[TransactionResponse]:
        query = _joined_query(user_id)
        if entry_type:
            query = query.where(Transaction.type == entry_type)
        if category_ids:
            query = query.where(Transaction.category_id.in_(category_ids))

        query = query.order_by(desc(Transaction.transaction_date), desc(Transaction.id))
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return [_serialize(trx, name, icon) for trx, name, icon in result.all()]

    @staticmethod
    async def list_in_period(db: AsyncSession, user_id: int, period: Period) -> list[TransactionResponse]:
        query = _joined_query(user_id).where(
            and_(
                Transaction.transaction_date >= period.start,
                Transaction.transaction_date < period.end
            )
        ).order_by(desc(Transaction.transaction_date), desc(Transaction.id))

        result = await db.execute(query)
        return [_serialize(trx, name, icon) for trx, name, icon in result.all()]

    @staticmethod
    async def update_transaction(db: AsyncSession, user_id: int, transaction_id: int,
                                 data: TransactionUpdate) -> TransactionResponse:
        transaction = await get_owned(db, Transaction, transaction_id, user_id, "Transaction")
        category = await get_owned_category(db, data.category_id, user_id)

        transaction.amount = data.amount
        transaction.type = data.type
        transaction.transaction_date = data.transaction_date
        transaction.note = data.note
        transaction.category_id = category.id

        await db.commit()
        await db.refresh(transaction)
        return _serialize(transaction, category.name, category.icon)

    @staticmethod
    async def delete_transaction(db: AsyncSession, user_id: int, transaction_id: int) -> None:
        transaction = await get_owned(db, Transaction, transaction_id, user_id, "Transaction")
        await db.delete(transaction)
        await db.commit()

    @staticmethod
    async def export_csv(db: AsyncSession, user_id: int) -> str:
        transactions = await TransactionService.list_transactions(db, user_id)
        df = pd.DataFrame(
            [
                {
                    "date": t.transaction_date.strftime("%Y-%m-%d %H:%M:%S"),
                    "type": t.type,
                    "category": t.category_name,
                    "amount": t.amount,
                    "note": t.note or "",
                }
                for t in transactions
            ],
            columns=EXPORT_COLUMNS,
        )
        logger.info("Exporting %d transactions for user %s", len(df), user_id)
        return df.to_csv(index=False)
