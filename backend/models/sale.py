# backend/models/sale.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from database import Base

# One till line. Immutable; removed only through the ledger.
class Sale(Base):
    __tablename__ = "sales"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    unit_price = Column(Float, CheckConstraint("unit_price >= 0"), nullable=False)
    total_price = Column(Float, nullable=False)

    sale_date = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    customer_name = Column(String, nullable=True)
    notes = Column(String, nullable=True)
