# backend/models/category.py
from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base

# Product grouping. Deleting a category leaves products pointing at a missing id.
class Category(Base):
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
