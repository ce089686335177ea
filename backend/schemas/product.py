# backend/schemas/product.py
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from schemas.common import ORMBase, blank_to_none


# Shared catalogue attributes
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    description: Optional[str] = None
    unit_price: float = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)

    @field_validator("sku", mode="before")
    @classmethod
    def normalize_sku(cls, v):
        v = blank_to_none(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("category_id", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return blank_to_none(v)


# Creation carries the opening balance
class ProductCreate(ProductBase):
    stock_quantity: int = Field(default=0, ge=0)


# Updates never touch stock: a stock_quantity key in the body is ignored
class ProductUpdate(ProductBase):
    pass


class ProductOut(ProductBase):
    id: int
    stock_quantity: int
    created_at: Optional[datetime] = None
    category_name: Optional[str] = None
