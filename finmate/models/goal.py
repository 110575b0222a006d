from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, func
from finmate.core.database import Base


class SavingsGoal(Base):
    __tablename__ = "savings_goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(150), nullable=False)
    target_amount = Column(Numeric(14, 2), nullable=False)
    # Only grows through deposits; may exceed target_amount
    current_amount = Column(Numeric(14, 2), nullable=False, default=0)
    deadline = Column(Date, nullable=False)

    color = Column(String(20), nullable=False, default="#04D1C1")
    icon = Column(String(50), nullable=False, default="piggy-bank")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
