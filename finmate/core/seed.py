import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.models.category import Category

logger = logging.getLogger(__name__)

# (name, type, icon)
DEFAULT_CATEGORIES = [
    ("Salary", "income", "salary"),
    ("Bonus", "income", "bonus"),
    ("Investment", "income", "investment"),
    ("Other income", "income", "other"),
    ("Food", "expense", "food"),
    ("Transport", "expense", "transport"),
    ("Shopping", "expense", "shopping"),
    ("Bills", "expense", "bills"),
    ("Rent", "expense", "rent"),
    ("Health", "expense", "health"),
    ("Entertainment", "expense", "entertainment"),
    ("Other", "expense", "other"),
]


async def seed_default_categories(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count(Category.id)).where(Category.user_id == user_id))
    count = result.scalar()
    if count > 0:
        logger.info("User %s already has %d categories. Skipping seed.", user_id, count)
        return 0

    db.add_all([
        Category(user_id=user_id, name=name, type=entry_type, icon=icon)
        for name, entry_type, icon in DEFAULT_CATEGORIES
    ])
    await db.commit()
    logger.info("Seeded %d default categories for user %s.", len(DEFAULT_CATEGORIES), user_id)
    return len(DEFAULT_CATEGORIES)
