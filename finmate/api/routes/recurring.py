from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.schemas.recurring import RecurringCreate, RecurringUpdate, RecurringResponse
from finmate.services.recurring import RecurringService

router = APIRouter(prefix="/transactions/recurring", tags=["Recurring"])


@router.get("", response_model=List[RecurringResponse])
async def list_recurring(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    return await RecurringService.list_templates(db, user_id)


@router.post("", response_model=RecurringResponse, status_code=201)
async def create_recurring(data: RecurringCreate, user_id: int = Depends(get_current_user_id),
                           db: AsyncSession = Depends(get_db)):
    return await RecurringService.create_template(db, user_id, data)


@router.put("/{template_id}", response_model=RecurringResponse)
async def update_recurring(template_id: int, data: RecurringUpdate, user_id: int = Depends(get_current_user_id),
                           db: AsyncSession = Depends(get_db)):
    return await RecurringService.update_template(db, user_id, template_id, data)


@router.patch("/{template_id}/toggle", response_model=RecurringResponse)
async def toggle_recurring(template_id: int, user_id: int = Depends(get_current_user_id),
                           db: AsyncSession = Depends(get_db)):
    return await RecurringService.toggle_template(db, user_id, template_id)


@router.delete("/{template_id}")
async def delete_recurring(template_id: int, user_id: int = Depends(get_current_user_id),
                           db: AsyncSession = Depends(get_db)):
    await RecurringService.delete_template(db, user_id, template_id)
    return {"message": "Recurring transaction deleted successfully"}
