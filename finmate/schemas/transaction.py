from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from finmate.schemas.common import EntryType, LocalDateTime, Money


class TransactionBase(BaseModel):
    amount: Money
    type: EntryType
    transaction_date: LocalDateTime
    note: Optional[str] = Field(None, max_length=1000)
    category_id: int


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(TransactionBase):
    pass


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    category_id: int
    amount: float
    type: str
    transaction_date: datetime
    note: Optional[str] = None
    category_name: Optional[str] = None
    category_icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
