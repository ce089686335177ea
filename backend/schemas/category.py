# backend/schemas/category.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from schemas.common import ORMBase


class CategoryBase(ORMBase):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryOut(CategoryBase):
    id: int
    created_at: Optional[datetime] = None
