# routes/reports.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services import reporting
from services.reporting import DateRange
from routes.products import product_out
from schemas.reports import (
    ProfitReport, SummaryReport, LowStockList, SalesByProductList,
)

router = APIRouter(prefix="/api", tags=["Reports"])


def _money(value: float) -> float:
    # Totals accumulate unrounded; two places only on the way out
    return round(value, 2)

def _date_range(
    startDate: Optional[date] = Query(None, description="Inclusive start (YYYY-MM-DD)"),
    endDate: Optional[date] = Query(None, description="Inclusive end (YYYY-MM-DD)"),
) -> Optional[DateRange]:
    return DateRange.from_params(startDate, endDate)


# -----------------------------
# 1) Profit & loss
# -----------------------------
@router.get("/profit", response_model=ProfitReport)
def report_profit(
    date_range: Optional[DateRange] = Depends(_date_range),
    db: Session = Depends(get_db),
):
    totals = reporting.profit_and_loss(db, date_range)
    report = {key: _money(value) for key, value in totals.items()}
    report["period"] = date_range.as_period() if date_range else "all"
    return report


# -----------------------------
# 2) Dashboard summary
# -----------------------------
@router.get("/reports/summary", response_model=SummaryReport)
def report_summary(db: Session = Depends(get_db)):
    summary = reporting.summary_counts(db)
    for key in ("salesRevenue", "purchasesCost", "expensesAmount"):
        summary[key] = _money(summary[key])
    return summary


# -----------------------------
# 3) Low stock
# -----------------------------
@router.get("/reports/low-stock", response_model=LowStockList)
def report_low_stock(db: Session = Depends(get_db)):
    items = []
    for product, category_name in reporting.low_stock_report(db):
        item = product_out(product, category_name)
        item["deficit"] = product.stock_quantity - product.reorder_level
        items.append(item)
    return items


# -----------------------------
# 4) Sales by product
# -----------------------------
@router.get("/reports/sales-by-product", response_model=SalesByProductList)
def report_sales_by_product(
    date_range: Optional[DateRange] = Depends(_date_range),
    db: Session = Depends(get_db),
):
    rows = reporting.sales_by_product(db, date_range)
    for row in rows:
        row["total_revenue"] = _money(row["total_revenue"])
    return rows
