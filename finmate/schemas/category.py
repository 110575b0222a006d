from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

from finmate.schemas.common import EntryType


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: EntryType
    icon: Optional[str] = Field(None, max_length=100)
    budget_limit: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryResponse(BaseModel):
    id: int
    name: str
    type: str
    icon: Optional[str] = None
    budget_limit: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)
