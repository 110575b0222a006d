from datetime import date, datetime
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from finmate.core.database import Base, get_db
from finmate.core.security import create_access_token
from finmate.main import app
from finmate.models.category import Category
from finmate.models.goal import SavingsGoal
from finmate.models.transaction import Transaction, RecurringTransaction
from finmate.models.user import User


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def make_user(db):
    async def _make(username="alice", email=None):
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash="not-a-real-hash"
        )
        db.add(user)
        await db.commit()
        return user
    return _make


@pytest.fixture
def make_category(db):
    async def _make(user, name="Food", entry_type="expense", icon="food", budget_limit=None):
        category = Category(user_id=user.id, name=name, type=entry_type, icon=icon, budget_limit=budget_limit)
        db.add(category)
        await db.commit()
        return category
    return _make


@pytest.fixture
def make_transaction(db):
    async def _make(user, category, amount, when, entry_type=None, note=None):
        trx = Transaction(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(str(amount)),
            type=entry_type or category.type,
            transaction_date=when if isinstance(when, datetime) else datetime.combine(when, datetime.min.time()),
            note=note
        )
        db.add(trx)
        await db.commit()
        return trx
    return _make


@pytest.fixture
def make_template(db):
    async def _make(user, category, amount, next_run_date, start_date=None, is_active=True, note=None):
        template = RecurringTransaction(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(str(amount)),
            type=category.type,
            note=note,
            frequency="monthly",
            start_date=start_date or next_run_date,
            next_run_date=next_run_date,
            is_active=is_active
        )
        db.add(template)
        await db.commit()
        return template
    return _make


@pytest.fixture
def make_goal(db):
    async def _make(user, target, current=0, name="Laptop"):
        goal = SavingsGoal(
            user_id=user.id,
            name=name,
            target_amount=Decimal(str(target)),
            current_amount=Decimal(str(current)),
            deadline=date(2030, 1, 1)
        )
        db.add(goal)
        await db.commit()
        return goal
    return _make
