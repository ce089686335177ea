# backend/schemas/expense.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, blank_to_none


class ExpenseCreate(BaseModel):
    category: str = Field(min_length=1)
    description: Optional[str] = None
    amount: float = Field(ge=0)
    expense_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("expense_date", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        return blank_to_none(v)


class ExpenseOut(ORMBase):
    id: int
    category: str
    description: Optional[str] = None
    amount: float
    expense_date: datetime
    notes: Optional[str] = None
