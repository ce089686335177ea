# backend/schemas/purchase.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, blank_to_none


class PurchaseCreate(BaseModel):
    supplier_id: Optional[int] = None
    product_id: int
    quantity: int = Field(gt=0)
    unit_cost: float = Field(ge=0)
    purchase_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("supplier_id", "purchase_date", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        return blank_to_none(v)


class PurchaseOut(ORMBase):
    id: int
    supplier_id: Optional[int] = None
    product_id: int
    quantity: int
    unit_cost: float
    total_cost: float
    purchase_date: datetime
    notes: Optional[str] = None
    # Resolved at read time, None once the referenced row is deleted
    product_name: Optional[str] = None
    supplier_name: Optional[str] = None
