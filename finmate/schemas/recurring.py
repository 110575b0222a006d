from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date

from finmate.schemas.common import EntryType, Money


class RecurringBase(BaseModel):
    amount: Money
    type: EntryType
    category_id: int
    note: Optional[str] = Field(None, max_length=1000)


class RecurringCreate(RecurringBase):
    start_date: date


class RecurringUpdate(RecurringBase):
    pass


class RecurringResponse(BaseModel):
    id: int
    category_id: int
    amount: float
    type: str
    note: Optional[str] = None
    frequency: str
    start_date: date
    next_run_date: date
    is_active: bool
    category_name: Optional[str] = None
    category_icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
