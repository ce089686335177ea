# backend/schemas/sale.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, blank_to_none


class SaleCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)
    sale_date: Optional[datetime] = None
    customer_name: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("sale_date", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        return blank_to_none(v)


class SaleOut(ORMBase):
    id: int
    product_id: int
    quantity: int
    unit_price: float
    total_price: float
    sale_date: datetime
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    product_name: Optional[str] = None
