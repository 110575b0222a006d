from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import select, func

from finmate.core.errors import BadRequestError, ForbiddenError, NotFoundError
from finmate.models.transaction import Transaction, RecurringTransaction
from finmate.schemas.recurring import RecurringCreate, RecurringUpdate
from finmate.services.recurring import RecurringService, materialize_due, next_month, recurring_note


async def _transactions(db):
    result = await db.execute(select(Transaction).order_by(Transaction.id))
    return result.scalars().all()


async def _template(db, template_id):
    db.expire_all()
    return await db.get(RecurringTransaction, template_id)


async def test_due_template_posts_one_transaction_and_advances(db, make_user, make_category, make_template):
    user = await make_user()
    rent = await make_category(user, name="Rent")
    template = await make_template(user, rent, 100000, date(2025, 1, 15), note="Apartment")
    template_id = template.id

    created = await materialize_due(db, run_at=datetime(2025, 1, 20, 0, 0))

    assert created == 1
    rows = await _transactions(db)
    assert len(rows) == 1
    trx = rows[0]
    assert trx.amount == Decimal("100000")
    assert trx.type == "expense"
    assert trx.user_id == user.id
    assert trx.category_id == rent.id
    assert trx.transaction_date.date() == date(2025, 1, 20)
    assert trx.note == "[Recurring] Apartment"

    assert (await _template(db, template_id)).next_run_date == date(2025, 2, 15)


async def test_template_due_exactly_today_is_posted(db, make_user, make_category, make_template):
    user = await make_user()
    salary = await make_category(user, name="Salary", entry_type="income")
    await make_template(user, salary, 2000000, date(2025, 3, 1))

    assert await materialize_due(db, run_at=datetime(2025, 3, 1, 0, 0)) == 1
    assert (await _transactions(db))[0].type == "income"


async def test_future_and_inactive_templates_are_untouched(db, make_user, make_category, make_template):
    user = await make_user()
    food = await make_category(user)
    future = await make_template(user, food, 50, date(2025, 1, 21))
    paused = await make_template(user, food, 70, date(2025, 1, 10), is_active=False)
    future_id, paused_id = future.id, paused.id

    assert await materialize_due(db, run_at=datetime(2025, 1, 20)) == 0

    assert await _transactions(db) == []
    assert (await _template(db, future_id)).next_run_date == date(2025, 1, 21)
    assert (await _template(db, paused_id)).next_run_date == date(2025, 1, 10)


async def test_second_run_same_day_does_not_double_post(db, make_user, make_category, make_template):
    user = await make_user()
    food = await make_category(user)
    await make_template(user, food, 100, date(2025, 1, 15))

    assert await materialize_due(db, run_at=datetime(2025, 1, 20, 0, 0)) == 1
    assert await materialize_due(db, run_at=datetime(2025, 1, 20, 9, 30)) == 0

    count = (await db.execute(select(func.count(Transaction.id)))).scalar()
    assert count == 1


async def test_overdue_template_catches_up_one_month_per_run(db, make_user, make_category, make_template):
    user = await make_user()
    food = await make_category(user)
    template = await make_template(user, food, 100, date(2024, 11, 5))
    template_id = template.id

    assert await materialize_due(db, run_at=datetime(2025, 1, 20)) == 1
    assert (await _template(db, template_id)).next_run_date == date(2024, 12, 5)

    assert await materialize_due(db, run_at=datetime(2025, 1, 21)) == 1
    assert (await _template(db, template_id)).next_run_date == date(2025, 1, 5)

    assert await materialize_due(db, run_at=datetime(2025, 1, 22)) == 1
    assert (await _template(db, template_id)).next_run_date == date(2025, 2, 5)

    assert await materialize_due(db, run_at=datetime(2025, 1, 23)) == 0
    assert len(await _transactions(db)) == 3


async def test_templates_of_different_users_are_independent(db, make_user, make_category, make_template):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await make_template(alice, await make_category(alice), 10, date(2025, 1, 1))
    await make_template(bob, await make_category(bob), 20, date(2025, 1, 2))

    assert await materialize_due(db, run_at=datetime(2025, 1, 20)) == 2
    owners = sorted((t.user_id, t.amount) for t in await _transactions(db))
    assert owners == [(alice.id, Decimal("10")), (bob.id, Decimal("20"))]


@pytest.mark.parametrize("start, expected", [
    (date(2025, 1, 15), date(2025, 2, 15)),
    (date(2025, 1, 31), date(2025, 2, 28)),
    (date(2024, 1, 31), date(2024, 2, 29)),
    (date(2025, 12, 10), date(2026, 1, 10)),
])
def test_next_month_clamps_to_month_end(start, expected):
    assert next_month(start) == expected


def test_recurring_note_keeps_original_text():
    assert recurring_note("Netflix") == "[Recurring] Netflix"
    assert recurring_note(None) == "[Recurring]"


async def test_create_template_starts_on_start_date(db, make_user, make_category):
    user = await make_user()
    food = await make_category(user)
    data = RecurringCreate(amount=Decimal("120000"), type="expense", category_id=food.id,
                           note="Gym", start_date=date(2025, 2, 1))

    created = await RecurringService.create_template(db, user.id, data, today=date(2025, 1, 20))

    assert created.next_run_date == date(2025, 2, 1)
    assert created.frequency == "monthly"
    assert created.is_active is True
    assert created.category_name == "Food"


async def test_create_template_rejects_past_start_date(db, make_user, make_category):
    user = await make_user()
    food = await make_category(user)
    data = RecurringCreate(amount=Decimal("1"), type="expense", category_id=food.id, start_date=date(2025, 1, 1))

    with pytest.raises(BadRequestError):
        await RecurringService.create_template(db, user.id, data, today=date(2025, 1, 20))


async def test_template_category_must_belong_to_user(db, make_user, make_category):
    alice = await make_user("alice")
    bob = await make_user("bob")
    bobs_food = await make_category(bob)
    data = RecurringCreate(amount=Decimal("1"), type="expense", category_id=bobs_food.id,
                           start_date=date(2025, 2, 1))

    with pytest.raises(ForbiddenError):
        await RecurringService.create_template(db, alice.id, data, today=date(2025, 1, 20))
    data.category_id = 999
    with pytest.raises(NotFoundError):
        await RecurringService.create_template(db, alice.id, data, today=date(2025, 1, 20))


async def test_toggle_update_and_delete_are_owner_only(db, make_user, make_category, make_template):
    alice = await make_user("alice")
    bob = await make_user("bob")
    food = await make_category(alice)
    template = await make_template(alice, food, 100, date(2025, 1, 15))

    with pytest.raises(ForbiddenError):
        await RecurringService.toggle_template(db, bob.id, template.id)
    with pytest.raises(ForbiddenError):
        await RecurringService.delete_template(db, bob.id, template.id)

    toggled = await RecurringService.toggle_template(db, alice.id, template.id)
    assert toggled.is_active is False

    updated = await RecurringService.update_template(
        db, alice.id, template.id,
        RecurringUpdate(amount=Decimal("250"), type="expense", category_id=food.id, note="Bigger")
    )
    assert updated.amount == 250
    assert updated.next_run_date == date(2025, 1, 15)

    await RecurringService.delete_template(db, alice.id, template.id)
    assert await RecurringService.list_templates(db, alice.id) == []
