from datetime import date, datetime

import pytest

from finmate.core.errors import BadRequestError
from finmate.services.common import Period, resolve_period
from finmate.services.reports import ReportService


@pytest.fixture
async def march(make_user, make_category, make_transaction):
    """Two Food expenses and one salary in March 2025, plus noise outside it."""
    user = await make_user()
    food = await make_category(user, name="Food", budget_limit=500000)
    transport = await make_category(user, name="Transport", icon="bus")
    salary = await make_category(user, name="Salary", entry_type="income", icon="salary")

    await make_transaction(user, food, 50000, datetime(2025, 3, 3, 12, 0))
    await make_transaction(user, food, 30000, datetime(2025, 3, 3, 19, 30))
    await make_transaction(user, salary, 2000000, datetime(2025, 3, 1, 9, 0))
    await make_transaction(user, transport, 15000, datetime(2025, 3, 31, 23, 59))
    await make_transaction(user, food, 99999, datetime(2025, 4, 1, 0, 0))
    await make_transaction(user, food, 11111, datetime(2025, 2, 28, 23, 59))
    return user, food, transport, salary


async def test_month_summary_matches_scenario(db, make_user, make_category, make_transaction):
    user = await make_user()
    food = await make_category(user)
    salary = await make_category(user, name="Salary", entry_type="income")
    await make_transaction(user, food, 50000, date(2025, 3, 5))
    await make_transaction(user, food, 30000, date(2025, 3, 18))
    await make_transaction(user, salary, 2000000, date(2025, 3, 1))

    summary = await ReportService.period_summary(db, user.id, Period.for_month(2025, 3))

    assert summary.total_income == 2000000
    assert summary.total_expense == 80000
    assert summary.balance == 1920000


async def test_empty_period_summary_is_zero(db, make_user):
    user = await make_user()

    summary = await ReportService.period_summary(db, user.id, Period.for_year(2020))

    assert (summary.total_income, summary.total_expense, summary.balance) == (0, 0, 0)


async def test_summary_ignores_other_users(db, march, make_user, make_category, make_transaction):
    other = await make_user("bob")
    await make_transaction(other, await make_category(other), 777, datetime(2025, 3, 10))
    user = march[0]

    summary = await ReportService.period_summary(db, user.id, Period.for_month(2025, 3))

    assert summary.total_expense == 95000
    assert summary.balance == summary.total_income - summary.total_expense


async def test_category_breakdown_sorted_with_budget(db, march):
    user, food, transport, salary = march

    expense = await ReportService.category_breakdown(db, user.id, Period.for_month(2025, 3), "expense")
    income = await ReportService.category_breakdown(db, user.id, Period.for_month(2025, 3), "income")

    assert [(b.category_name, b.total_amount, b.transaction_count) for b in expense] == [
        ("Food", 80000, 2),
        ("Transport", 15000, 1),
    ]
    assert expense[0].budget_limit == 500000
    assert expense[1].budget_limit is None
    assert [(b.category_id, b.total_amount) for b in income] == [(salary.id, 2000000)]
    assert income[0].budget_limit is None


async def test_statistics_serializes_camel_case(db, march):
    user = march[0]

    stats = await ReportService.statistics(db, user.id, Period.for_month(2025, 3))
    payload = stats.model_dump(by_alias=True)

    assert payload["summary"] == {"totalIncome": 2000000, "totalExpense": 95000, "balance": 1905000}
    assert payload["expenseByCategory"][0]["categoryName"] == "Food"
    assert payload["incomeByCategory"][0]["transactionCount"] == 1


async def test_week_period_includes_end_date(db, march):
    user = march[0]
    period = resolve_period("week", start_date=date(2025, 3, 1), end_date=date(2025, 3, 3))

    summary = await ReportService.period_summary(db, user.id, period)

    assert summary.total_income == 2000000
    assert summary.total_expense == 80000


async def test_year_period(db, march):
    user = march[0]

    summary = await ReportService.period_summary(db, user.id, resolve_period("year", year=2025))

    assert summary.total_expense == 50000 + 30000 + 15000 + 99999 + 11111


async def test_calendar_view_daily_net(db, march):
    user = march[0]

    view = await ReportService.calendar_view(db, user.id, 2025, 3)

    assert view.summary.total_expense == 95000
    assert [(d.date, d.net_amount) for d in view.daily_summaries] == [
        (date(2025, 3, 1), 2000000),
        (date(2025, 3, 3), -80000),
        (date(2025, 3, 31), -15000),
    ]
    assert view.daily_summaries[1].total_expense == 80000
    dates = [t.transaction_date for t in view.transactions]
    assert len(dates) == 4
    assert dates == sorted(dates, reverse=True)
    assert view.transactions[0].category_name == "Transport"


async def test_calendar_view_for_empty_month(db, make_user):
    user = await make_user()

    view = await ReportService.calendar_view(db, user.id, 2025, 7)

    assert view.daily_summaries == []
    assert view.transactions == []
    assert view.summary.balance == 0


async def test_top_expense_categories_limited_to_five(db, make_user, make_category, make_transaction):
    user = await make_user()
    for i in range(7):
        category = await make_category(user, name=f"Cat {i}")
        await make_transaction(user, category, 1000 * (i + 1), date(2025, 5, 10))

    top = await ReportService.top_expense_categories(db, user.id, Period.for_month(2025, 5))

    assert [t.category_name for t in top] == ["Cat 6", "Cat 5", "Cat 4", "Cat 3", "Cat 2"]


async def test_months_with_data_newest_first(db, march):
    user = march[0]

    months = await ReportService.months_with_data(db, user.id)

    assert [(m.year, m.month) for m in months] == [(2025, 4), (2025, 3), (2025, 2)]


def test_december_month_period_rolls_over():
    period = Period.for_month(2024, 12)
    assert period.start == datetime(2024, 12, 1)
    assert period.end == datetime(2025, 1, 1)


@pytest.mark.parametrize("kwargs", [
    {"period_type": None, "year": 2025},
    {"period_type": "day", "year": 2025},
    {"period_type": "month", "year": 2025},
    {"period_type": "month", "year": 2025, "month": 13},
    {"period_type": "year"},
    {"period_type": "week", "start_date": date(2025, 3, 1)},
    {"period_type": "week", "start_date": date(2025, 3, 8), "end_date": date(2025, 3, 1)},
    {"period_type": "week", "start_date": date(2025, 1, 1), "end_date": date(9999, 12, 31)},
])
def test_resolve_period_rejects_incomplete_input(kwargs):
    with pytest.raises(BadRequestError):
        resolve_period(**kwargs)


async def test_zero_budget_limit_means_no_limit(db, make_user, make_category, make_transaction):
    user = await make_user()
    food = await make_category(user, name="Food", budget_limit=0)
    await make_transaction(user, food, 50000, date(2025, 3, 5))

    expense = await ReportService.category_breakdown(db, user.id, Period.for_month(2025, 3), "expense")

    assert expense[0].budget_limit is None
