from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from finmate.services.categories import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
        type: Optional[Literal["income", "expense"]] = Query(None),
        user_id: int = Depends(get_current_user_id),
        db: AsyncSession = Depends(get_db)
):
    return await CategoryService.list_categories(db, user_id, type)


@router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(data: CategoryCreate, user_id: int = Depends(get_current_user_id),
                          db: AsyncSession = Depends(get_db)):
    return await CategoryService.create_category(db, user_id, data)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(category_id: int, data: CategoryUpdate, user_id: int = Depends(get_current_user_id),
                          db: AsyncSession = Depends(get_db)):
    return await CategoryService.update_category(db, user_id, category_id, data)


@router.delete("/{category_id}")
async def delete_category(category_id: int, user_id: int = Depends(get_current_user_id),
                          db: AsyncSession = Depends(get_db)):
    await CategoryService.delete_category(db, user_id, category_id)
    return {"message": "Category deleted successfully"}
