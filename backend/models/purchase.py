# backend/models/purchase.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from database import Base

# Goods received from a supplier. Immutable; removed only through the ledger.
class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, nullable=True, index=True)
    product_id = Column(Integer, nullable=False, index=True)

    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    unit_cost = Column(Float, CheckConstraint("unit_cost >= 0"), nullable=False)
    total_cost = Column(Float, nullable=False)

    purchase_date = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    notes = Column(String, nullable=True)
