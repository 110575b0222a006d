from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date, datetime

from finmate.schemas.common import Money


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    target_amount: Money
    deadline: date
    color: str = Field("#04D1C1", max_length=20)
    icon: str = Field("piggy-bank", max_length=50)


class GoalUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    target_amount: Money
    deadline: date
    color: Optional[str] = Field(None, max_length=20)


class GoalDeposit(BaseModel):
    amount: Money


class GoalResponse(BaseModel):
    id: int
    name: str
    target_amount: float
    current_amount: float
    deadline: date
    color: str
    icon: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GoalDepositResponse(BaseModel):
    message: str
    newAmount: float
