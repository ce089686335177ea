# backend/schemas/supplier.py
from datetime import datetime
from typing import Optional
from pydantic import Field

from schemas.common import ORMBase


class SupplierBase(ORMBase):
    name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierOut(SupplierBase):
    id: int
    created_at: Optional[datetime] = None
