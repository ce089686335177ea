# schemas/reports.py
from datetime import date
from typing import List, Literal, Union
from pydantic import BaseModel

from schemas.product import ProductOut


class Period(BaseModel):
    startDate: date
    endDate: date

# Profit & loss over a period (or all time)
class ProfitReport(BaseModel):
    revenue: float
    cost: float
    expenses: float
    grossProfit: float
    netProfit: float
    period: Union[Literal["all"], Period]

# Dashboard counters
class SummaryReport(BaseModel):
    products: int
    totalStock: int
    categories: int
    suppliers: int
    salesCount: int
    salesRevenue: float
    purchasesCount: int
    purchasesCost: float
    expensesCount: int
    expensesAmount: float

# Product at or under its reorder level
class LowStockItem(ProductOut):
    deficit: int

class SalesByProductItem(BaseModel):
    product_name: str
    total_quantity: int
    total_revenue: float

LowStockList = List[LowStockItem]
SalesByProductList = List[SalesByProductItem]
