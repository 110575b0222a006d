import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from finmate.core.errors import ConflictError
from finmate.models.category import Category
from finmate.models.transaction import Transaction, RecurringTransaction
from finmate.schemas.category import CategoryCreate, CategoryUpdate
from finmate.services.common import get_owned

logger = logging.getLogger(__name__)


class CategoryService:
    @staticmethod
    async def list_categories(db: AsyncSession, user_id: int, entry_type: Optional[str] = None) -> list[Category]:
        query = select(Category).where(Category.user_id == user_id)
        if entry_type:
            query = query.where(Category.type == entry_type)
        result = await db.execute(query.order_by(Category.id))
        return result.scalars().all()

    @staticmethod
    async def create_category(db: AsyncSession, user_id: int, data: CategoryCreate) -> Category:
        category = Category(user_id=user_id, **data.model_dump())
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def update_category(db: AsyncSession, user_id: int, category_id: int, data: CategoryUpdate) -> Category:
        category = await get_owned(db, Category, category_id, user_id, "Category")

        category.name = data.name
        category.type = data.type
        category.icon = data.icon
        category.budget_limit = data.budget_limit

        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, user_id: int, category_id: int) -> None:
        category = await get_owned(db, Category, category_id, user_id, "Category")

        in_use = 0
        for model in (Transaction, RecurringTransaction):
            count_query = select(func.count(model.id)).where(model.category_id == category_id)
            in_use += (await db.execute(count_query)).scalar() or 0
        if in_use:
            raise ConflictError("Category is in use")

        try:
            await db.delete(category)
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            logger.warning("Category %s still referenced: %s", category_id, exc)
            raise ConflictError("Category is in use") from exc
