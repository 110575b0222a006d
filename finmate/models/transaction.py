from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Boolean, Text, ForeignKey, func
from finmate.core.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)

    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String(10), nullable=False)
    transaction_date = Column(DateTime, index=True, nullable=False)
    note = Column(Text, nullable=True)


class RecurringTransaction(Base):
    __tablename__ = "recurring_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)

    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(String(10), nullable=False)
    note = Column(Text, nullable=True)

    frequency = Column(String(20), nullable=False, default="monthly")
    start_date = Column(Date, nullable=False)
    next_run_date = Column(Date, index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
