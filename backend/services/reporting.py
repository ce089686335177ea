# backend/services/reporting.py
"""Read-only aggregates over purchases, sales and expenses."""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import ValidationError
from models.category import Category
from models.expense import Expense
from models.product import Product
from models.purchase import Purchase
from models.sale import Sale
from models.supplier import Supplier


@dataclass(frozen=True)
class DateRange:
    """Inclusive pair of calendar dates."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError("startDate must not be after endDate")

    @classmethod
    def from_params(cls, start: Optional[date], end: Optional[date]) -> Optional["DateRange"]:
        if start is None and end is None:
            return None
        if start is None or end is None:
            raise ValidationError("startDate and endDate must be given together")
        return cls(start, end)

    def apply(self, query, column):
        # Half-open on the datetime axis so the whole end day is included
        lower = datetime.combine(self.start, time.min)
        upper = datetime.combine(self.end + timedelta(days=1), time.min)
        return query.filter(column >= lower, column < upper)

    def as_period(self) -> dict:
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


def _total(db: Session, column, date_column, date_range: Optional[DateRange]) -> float:
    query = db.query(func.coalesce(func.sum(column), 0))
    if date_range:
        query = date_range.apply(query, date_column)
    return float(query.scalar() or 0)


def profit_and_loss(db: Session, date_range: Optional[DateRange] = None) -> dict:
    # Each total is filtered on its own date column, there is no join between them
    revenue = _total(db, Sale.total_price, Sale.sale_date, date_range)
    cost = _total(db, Purchase.total_cost, Purchase.purchase_date, date_range)
    expenses = _total(db, Expense.amount, Expense.expense_date, date_range)
    gross_profit = revenue - cost
    return {
        "revenue": revenue,
        "cost": cost,
        "expenses": expenses,
        "grossProfit": gross_profit,
        "netProfit": gross_profit - expenses,
    }


def low_stock_report(db: Session) -> List[Tuple[Product, Optional[str]]]:
    """Products at or under their reorder level, most deficient first.

    Rows are ``(product, category_name)``; the name is None when the category
    was deleted.
    """
    deficit = Product.stock_quantity - Product.reorder_level
    return (
        db.query(Product, Category.name)
        .outerjoin(Category, Category.id == Product.category_id)
        .filter(Product.stock_quantity <= Product.reorder_level)
        .order_by(deficit.asc(), Product.name.asc())
        .all()
    )


def sales_by_product(db: Session, date_range: Optional[DateRange] = None) -> List[dict]:
    total_revenue = func.sum(Sale.total_price)
    query = (
        db.query(
            Product.name.label("product_name"),
            func.sum(Sale.quantity).label("total_quantity"),
            total_revenue.label("total_revenue"),
        )
        .select_from(Sale)
        .join(Product, Product.id == Sale.product_id)
    )
    if date_range:
        query = date_range.apply(query, Sale.sale_date)

    rows = query.group_by(Product.id, Product.name).order_by(total_revenue.desc()).all()
    return [
        {
            "product_name": r.product_name,
            "total_quantity": int(r.total_quantity),
            "total_revenue": float(r.total_revenue),
        }
        for r in rows
    ]


def summary_counts(db: Session) -> dict:
    products, total_stock = db.query(
        func.count(Product.id), func.coalesce(func.sum(Product.stock_quantity), 0)
    ).one()
    sales_count, sales_revenue = db.query(
        func.count(Sale.id), func.coalesce(func.sum(Sale.total_price), 0)
    ).one()
    purchases_count, purchases_cost = db.query(
        func.count(Purchase.id), func.coalesce(func.sum(Purchase.total_cost), 0)
    ).one()
    expenses_count, expenses_amount = db.query(
        func.count(Expense.id), func.coalesce(func.sum(Expense.amount), 0)
    ).one()

    return {
        "products": products or 0,
        "totalStock": int(total_stock or 0),
        "categories": db.query(Category).count(),
        "suppliers": db.query(Supplier).count(),
        "salesCount": sales_count or 0,
        "salesRevenue": float(sales_revenue or 0),
        "purchasesCount": purchases_count or 0,
        "purchasesCost": float(purchases_cost or 0),
        "expensesCount": expenses_count or 0,
        "expensesAmount": float(expenses_amount or 0),
    }
