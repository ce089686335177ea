# backend/services/ledger.py
"""
Stock ledger: the only writer of Product.stock_quantity after a product exists.

Every public function here is one compound operation. The history row
(purchase or sale) and the stock adjustment it implies are written in a single
transaction on the session passed in; the function commits on success and
rolls back on any failure, so callers never observe one half without the
other. Nothing is retried.

Stock is always moved with a relative UPDATE (stock_quantity = stock_quantity
+ delta) rather than read-modify-write in Python. The sale path adds the
guard ``stock_quantity >= quantity`` to the same statement, which makes the
availability check and the decrement a single atomic step in the database.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import PosError, NotFoundError, InsufficientStockError, ValidationError, StorageError
from models.product import Product
from models.purchase import Purchase
from models.sale import Sale
from utils.audit import write_log
from utils.dates import as_local

logger = logging.getLogger(__name__)


# ---- HELPERS ----
def _check_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer")

def _check_amount(name: str, value) -> None:
    if value is None or value < 0:
        raise ValidationError(f"{name} must not be negative")


def _apply_delta(db: Session, product_id: int, delta: int) -> int:
    """Shift a product's stock by delta. Returns the number of rows touched."""
    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=Product.stock_quantity + delta)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def _take_stock(db: Session, product_id: int, quantity: int) -> int:
    """Decrement only if the result stays non-negative. 0 rows means refused."""
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def _persist(db: Session, record):
    db.add(record)
    db.flush()
    return record


@contextmanager
def _compound(db: Session, operation: str):
    try:
        yield
        db.commit()
    except PosError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed, transaction rolled back", operation)
        raise StorageError() from exc


# =========================
# PURCHASES
# =========================
def record_purchase(
    db: Session,
    *,
    product_id: int,
    quantity: int,
    unit_cost: float,
    supplier_id: Optional[int] = None,
    purchase_date: Optional[datetime] = None,
    notes: Optional[str] = None,
    ip: Optional[str] = None,
) -> Purchase:
    """Book goods in: insert the purchase and add its quantity to stock."""
    _check_quantity(quantity)
    _check_amount("Unit cost", unit_cost)

    with _compound(db, "record_purchase"):
        purchase = _persist(db, Purchase(
            supplier_id=supplier_id,
            product_id=product_id,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=quantity * unit_cost,
            purchase_date=as_local(purchase_date),
            notes=notes,
        ))
        if not _apply_delta(db, product_id, quantity):
            raise NotFoundError("Product", product_id)
        purchase_id = purchase.id
        write_log(
            db, action="PURCHASE_CREATE", resource="purchases", ip=ip, commit=False,
            meta={"id": purchase_id, "product_id": product_id, "quantity": quantity},
        )

    logger.info("Purchase %s: product %s +%s", purchase_id, product_id, quantity)
    db.refresh(purchase)
    return purchase


def delete_purchase(db: Session, purchase_id: int, *, ip: Optional[str] = None) -> None:
    """Remove a purchase and take its quantity back out of stock.

    Stock may end up negative when the goods were already sold; that is a
    correction of history and is not guarded.
    """
    with _compound(db, "delete_purchase"):
        purchase = (
            db.query(Purchase)
            .filter(Purchase.id == purchase_id)
            .with_for_update()
            .first()
        )
        if not purchase:
            raise NotFoundError("Purchase", purchase_id)

        product_id, quantity = purchase.product_id, purchase.quantity
        if not _apply_delta(db, product_id, -quantity):
            logger.warning("Purchase %s points at missing product %s, no stock to reverse", purchase_id, product_id)
        db.delete(purchase)
        db.flush()
        write_log(
            db, action="PURCHASE_DELETE", resource="purchases", ip=ip, commit=False,
            meta={"id": purchase_id, "product_id": product_id, "quantity": quantity},
        )

    logger.info("Purchase %s deleted: product %s -%s", purchase_id, product_id, quantity)


# =========================
# SALES
# =========================
def record_sale(
    db: Session,
    *,
    product_id: int,
    quantity: int,
    unit_price: float,
    sale_date: Optional[datetime] = None,
    customer_name: Optional[str] = None,
    notes: Optional[str] = None,
    ip: Optional[str] = None,
) -> Sale:
    """Ring up a sale. Refused with InsufficientStockError when stock would go negative."""
    _check_quantity(quantity)
    _check_amount("Unit price", unit_price)

    with _compound(db, "record_sale"):
        if not _take_stock(db, product_id, quantity):
            available = db.execute(
                select(Product.stock_quantity).where(Product.id == product_id)
            ).scalar()
            # A missing product is an empty shelf
            available = max(available or 0, 0)
            logger.warning(
                "Sale refused for product %s: requested %s, available %s",
                product_id, quantity, available,
            )
            raise InsufficientStockError(product_id, quantity, available)

        sale = _persist(db, Sale(
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            total_price=quantity * unit_price,
            sale_date=as_local(sale_date),
            customer_name=customer_name,
            notes=notes,
        ))
        sale_id = sale.id
        write_log(
            db, action="SALE_CREATE", resource="sales", ip=ip, commit=False,
            meta={"id": sale_id, "product_id": product_id, "quantity": quantity},
        )

    logger.info("Sale %s: product %s -%s", sale_id, product_id, quantity)
    db.refresh(sale)
    return sale


def delete_sale(db: Session, sale_id: int, *, ip: Optional[str] = None) -> None:
    """Remove a sale and put its quantity back on the shelf."""
    with _compound(db, "delete_sale"):
        sale = (
            db.query(Sale)
            .filter(Sale.id == sale_id)
            .with_for_update()
            .first()
        )
        if not sale:
            raise NotFoundError("Sale", sale_id)

        product_id, quantity = sale.product_id, sale.quantity
        if not _apply_delta(db, product_id, quantity):
            logger.warning("Sale %s points at missing product %s, no stock to restore", sale_id, product_id)
        db.delete(sale)
        db.flush()
        write_log(
            db, action="SALE_DELETE", resource="sales", ip=ip, commit=False,
            meta={"id": sale_id, "product_id": product_id, "quantity": quantity},
        )

    logger.info("Sale %s deleted: product %s +%s", sale_id, product_id, quantity)
