from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from errors import InsufficientStockError, NotFoundError, StorageError, ValidationError
from models.log import Log
from models.product import Product
from models.purchase import Purchase
from models.sale import Sale
from services import ledger


def _boom(*args, **kwargs):
    raise OperationalError("UPDATE products", {}, Exception("disk I/O error"))


# Purchases
def test_record_purchase_computes_total_and_adds_stock(db, make_product, stock):
    product_id = make_product(stock=1)

    purchase = ledger.record_purchase(db, product_id=product_id, quantity=10, unit_cost=2.50)

    assert purchase.id is not None
    assert purchase.total_cost == 25.00
    assert stock(product_id) == 11


def test_record_purchase_unknown_product_persists_nothing(db):
    with pytest.raises(NotFoundError) as exc:
        ledger.record_purchase(db, product_id=999, quantity=1, unit_cost=1.0)

    assert exc.value.entity_id == 999
    assert exc.value.status_code == 404
    assert db.query(Purchase).count() == 0
    assert db.query(Log).count() == 0


def test_record_purchase_keeps_weak_supplier_reference(db, make_product):
    product_id = make_product()
    purchase = ledger.record_purchase(db, product_id=product_id, quantity=2, unit_cost=1.0, supplier_id=42)
    assert purchase.supplier_id == 42


def test_delete_purchase_restores_stock(db, make_product, stock):
    product_id = make_product(stock=1)
    purchase = ledger.record_purchase(db, product_id=product_id, quantity=10, unit_cost=2.50)

    ledger.delete_purchase(db, purchase.id)

    assert stock(product_id) == 1
    assert db.query(Purchase).count() == 0


def test_delete_purchase_may_drive_stock_negative(db, make_product, stock):
    product_id = make_product(stock=0)
    purchase = ledger.record_purchase(db, product_id=product_id, quantity=5, unit_cost=1.0)
    ledger.record_sale(db, product_id=product_id, quantity=4, unit_price=2.0)

    ledger.delete_purchase(db, purchase.id)

    assert stock(product_id) == -4


def test_delete_missing_purchase(db):
    with pytest.raises(NotFoundError):
        ledger.delete_purchase(db, 12345)


# Sales
def test_record_sale_takes_stock(db, make_product, stock):
    product_id = make_product(stock=5)

    sale = ledger.record_sale(
        db, product_id=product_id, quantity=4, unit_price=3.0, customer_name="Walk-in Customer",
    )

    assert sale.total_price == 12.0
    assert sale.customer_name == "Walk-in Customer"
    assert stock(product_id) == 1


def test_record_sale_refused_when_stock_short(db, make_product, stock):
    product_id = make_product(stock=5, reorder_level=2)
    ledger.record_sale(db, product_id=product_id, quantity=4, unit_price=1.0)

    with pytest.raises(InsufficientStockError) as exc:
        ledger.record_sale(db, product_id=product_id, quantity=4, unit_price=1.0)

    assert exc.value.requested == 4
    assert exc.value.available == 1
    assert "requested 4, available 1" in exc.value.message
    assert stock(product_id) == 1
    assert db.query(Sale).count() == 1


def test_record_sale_of_entire_stock_is_allowed(db, make_product, stock):
    product_id = make_product(stock=3)
    ledger.record_sale(db, product_id=product_id, quantity=3, unit_price=1.0)
    assert stock(product_id) == 0


def test_record_sale_for_missing_product_is_zero_stock(db):
    with pytest.raises(InsufficientStockError) as exc:
        ledger.record_sale(db, product_id=777, quantity=1, unit_price=1.0)
    assert exc.value.available == 0
    assert db.query(Sale).count() == 0


def test_delete_sale_restores_stock(db, make_product, stock):
    product_id = make_product(stock=5)
    sale = ledger.record_sale(db, product_id=product_id, quantity=2, unit_price=1.0)

    ledger.delete_sale(db, sale.id)

    assert stock(product_id) == 5
    assert db.query(Sale).count() == 0


def test_delete_missing_sale(db):
    with pytest.raises(NotFoundError) as exc:
        ledger.delete_sale(db, 4321)
    assert exc.value.message == "Sale not found"


def test_delete_sale_of_deleted_product(db, make_product):
    product_id = make_product(stock=5)
    sale = ledger.record_sale(db, product_id=product_id, quantity=2, unit_price=1.0)
    db.query(Product).filter(Product.id == product_id).delete()
    db.commit()

    ledger.delete_sale(db, sale.id)

    assert db.query(Sale).count() == 0


@pytest.mark.parametrize("quantity", [0, -3])
def test_non_positive_quantity_rejected(db, make_product, quantity):
    product_id = make_product(stock=5)
    with pytest.raises(ValidationError):
        ledger.record_sale(db, product_id=product_id, quantity=quantity, unit_price=1.0)
    with pytest.raises(ValidationError):
        ledger.record_purchase(db, product_id=product_id, quantity=quantity, unit_cost=1.0)


def test_negative_prices_rejected(db, make_product, stock):
    product_id = make_product(stock=5)
    with pytest.raises(ValidationError):
        ledger.record_sale(db, product_id=product_id, quantity=1, unit_price=-1.0)
    with pytest.raises(ValidationError):
        ledger.record_purchase(db, product_id=product_id, quantity=1, unit_cost=-0.01)
    assert stock(product_id) == 5


def test_aware_dates_are_stored_naive(db, make_product):
    product_id = make_product(stock=5)
    when = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    sale = ledger.record_sale(db, product_id=product_id, quantity=1, unit_price=1.0, sale_date=when)
    assert sale.sale_date.tzinfo is None


def test_mutations_write_audit_rows(db, make_product):
    product_id = make_product(stock=5)
    purchase = ledger.record_purchase(db, product_id=product_id, quantity=1, unit_cost=1.0, ip="10.0.0.7")
    sale = ledger.record_sale(db, product_id=product_id, quantity=1, unit_price=1.0)
    ledger.delete_sale(db, sale.id)
    ledger.delete_purchase(db, purchase.id)

    actions = [log.action for log in db.query(Log).order_by(Log.id).all()]
    assert actions == ["PURCHASE_CREATE", "SALE_CREATE", "SALE_DELETE", "PURCHASE_DELETE"]
    assert db.query(Log).order_by(Log.id).first().ip == "10.0.0.7"


# Invariant: stock == opening + purchases alive - sales alive
def test_stock_matches_history_after_mixed_operations(db, make_product, stock):
    opening = 7
    product_id = make_product(stock=opening)

    p1 = ledger.record_purchase(db, product_id=product_id, quantity=10, unit_cost=1.0)
    p2 = ledger.record_purchase(db, product_id=product_id, quantity=3, unit_cost=1.5)
    s1 = ledger.record_sale(db, product_id=product_id, quantity=6, unit_price=2.0)
    ledger.record_sale(db, product_id=product_id, quantity=9, unit_price=2.0)
    with pytest.raises(InsufficientStockError):
        ledger.record_sale(db, product_id=product_id, quantity=50, unit_price=2.0)
    ledger.delete_purchase(db, p2.id)
    ledger.delete_sale(db, s1.id)
    ledger.record_purchase(db, product_id=product_id, quantity=4, unit_cost=1.0)
    ledger.delete_purchase(db, p1.id)

    purchased = sum(p.quantity for p in db.query(Purchase).filter(Purchase.product_id == product_id))
    sold = sum(s.quantity for s in db.query(Sale).filter(Sale.product_id == product_id))
    assert stock(product_id) == opening + purchased - sold


# Atomicity: a failure between the two writes leaves the store as it was
def test_purchase_rolled_back_when_stock_update_fails(db, make_product, stock, monkeypatch):
    product_id = make_product(stock=3)
    monkeypatch.setattr(ledger, "_apply_delta", _boom)

    with pytest.raises(StorageError) as exc:
        ledger.record_purchase(db, product_id=product_id, quantity=10, unit_cost=1.0)

    assert exc.value.status_code == 500
    assert "disk" not in exc.value.message
    assert db.query(Purchase).count() == 0
    assert db.query(Log).count() == 0
    assert stock(product_id) == 3


def test_sale_rolled_back_when_row_insert_fails(db, make_product, stock, monkeypatch):
    product_id = make_product(stock=3)
    monkeypatch.setattr(ledger, "_persist", _boom)

    with pytest.raises(StorageError):
        ledger.record_sale(db, product_id=product_id, quantity=2, unit_price=1.0)

    assert db.query(Sale).count() == 0
    assert stock(product_id) == 3


def test_delete_sale_rolled_back_when_stock_update_fails(db, make_product, stock, monkeypatch):
    product_id = make_product(stock=3)
    sale = ledger.record_sale(db, product_id=product_id, quantity=2, unit_price=1.0)
    monkeypatch.setattr(ledger, "_apply_delta", _boom)

    with pytest.raises(StorageError):
        ledger.delete_sale(db, sale.id)

    assert db.query(Sale).count() == 1
    assert stock(product_id) == 1


def test_delete_purchase_rolled_back_when_stock_update_fails(db, make_product, stock, monkeypatch):
    product_id = make_product(stock=0)
    purchase = ledger.record_purchase(db, product_id=product_id, quantity=4, unit_cost=1.0)
    monkeypatch.setattr(ledger, "_apply_delta", _boom)

    with pytest.raises(StorageError):
        ledger.delete_purchase(db, purchase.id)

    assert db.query(Purchase).count() == 1
    assert stock(product_id) == 4
