from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from finmate.models.goal import SavingsGoal
from finmate.schemas.goal import GoalCreate, GoalUpdate, GoalDepositResponse
from finmate.services.common import get_owned, to_decimal


class GoalService:
    @staticmethod
    async def list_goals(db: AsyncSession, user_id: int) -> list[SavingsGoal]:
        query = (
            select(SavingsGoal)
            .where(SavingsGoal.user_id == user_id)
            .order_by(desc(SavingsGoal.created_at), desc(SavingsGoal.id))
        )
        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def create_goal(db: AsyncSession, user_id: int, data: GoalCreate) -> SavingsGoal:
        goal = SavingsGoal(user_id=user_id, current_amount=0, **data.model_dump())
        db.add(goal)
        await db.commit()
        await db.refresh(goal)
        return goal

    @staticmethod
    async def update_goal(db: AsyncSession, user_id: int, goal_id: int, data: GoalUpdate) -> SavingsGoal:
        goal = await get_owned(db, SavingsGoal, goal_id, user_id, "Goal")

        goal.name = data.name
        goal.target_amount = data.target_amount
        goal.deadline = data.deadline
        if data.color:
            goal.color = data.color

        await db.commit()
        await db.refresh(goal)
        return goal

    @staticmethod
    async def add_money(db: AsyncSession, user_id: int, goal_id: int, amount) -> GoalDepositResponse:
        goal = await get_owned(db, SavingsGoal, goal_id, user_id, "Goal")

        # Over-saving past target_amount is allowed
        new_amount = to_decimal(goal.current_amount) + to_decimal(amount)
        goal.current_amount = new_amount

        await db.commit()
        return GoalDepositResponse(message="Updated successfully", newAmount=float(new_amount))

    @staticmethod
    async def delete_goal(db: AsyncSession, user_id: int, goal_id: int) -> None:
        goal = await get_owned(db, SavingsGoal, goal_id, user_id, "Goal")
        await db.delete(goal)
        await db.commit()
