from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from finmate.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(100), nullable=False)
    type = Column(String(10), nullable=False)
    icon = Column(String(100), nullable=True)

    # 0 or NULL means no monthly limit
    budget_limit = Column(Numeric(14, 2), nullable=True)
