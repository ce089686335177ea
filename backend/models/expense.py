# backend/models/expense.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from database import Base

# Running cost of the business (rent, wages...). Independent of stock.
class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Float, CheckConstraint("amount >= 0"), nullable=False)
    expense_date = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    notes = Column(String, nullable=True)
