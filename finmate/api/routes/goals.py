from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.schemas.goal import GoalCreate, GoalUpdate, GoalDeposit, GoalResponse, GoalDepositResponse
from finmate.services.goals import GoalService

router = APIRouter(prefix="/goals", tags=["Savings Goals"])


@router.get("", response_model=List[GoalResponse])
async def list_goals(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await GoalService.list_goals(db, user_id)


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(data: GoalCreate, user_id: int = Depends(get_current_user_id),
                      db: AsyncSession = Depends(get_db)):
    return await GoalService.create_goal(db, user_id, data)


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: int, data: GoalUpdate, user_id: int = Depends(get_current_user_id),
                      db: AsyncSession = Depends(get_db)):
    return await GoalService.update_goal(db, user_id, goal_id, data)


@router.put("/{goal_id}/add-money", response_model=GoalDepositResponse)
async def add_money(goal_id: int, data: GoalDeposit, user_id: int = Depends(get_current_user_id),
                    db: AsyncSession = Depends(get_db)):
    return await GoalService.add_money(db, user_id, goal_id, data.amount)


@router.delete("/{goal_id}")
async def delete_goal(goal_id: int, user_id: int = Depends(get_current_user_id),
                      db: AsyncSession = Depends(get_db)):
    await GoalService.delete_goal(db, user_id, goal_id)
    return {"message": "Deleted successfully"}
