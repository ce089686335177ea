# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, func
from database import Base

# Model Product
# Catalogue entry sold at the till. stock_quantity is set once at creation
# (opening balance) and afterwards only moved by services.ledger.
# category_id is a weak reference: no FK constraint, the category may be gone.
class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    sku = Column(String, unique=True, nullable=True, index=True)

    category_id = Column(Integer, nullable=True, index=True)
    description = Column(String)

    unit_price = Column(Float, CheckConstraint("unit_price >= 0"), nullable=False, default=0)

    # No CHECK on stock_quantity: deleting a purchase may legitimately push it below zero.
    stock_quantity = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, CheckConstraint("reorder_level >= 0"), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
