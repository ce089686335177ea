from models.product import Product
from models.purchase import Purchase
from models.sale import Sale
from populate_db import PRODUCTS, populate


def test_demo_data_goes_through_ledger(db):
    created = populate(db)

    assert created == {"products": len(PRODUCTS), "purchases": len(PRODUCTS), "sales": len(PRODUCTS), "expenses": 2}
    opening = {sku: stock for _, sku, _, _, stock, _ in PRODUCTS}
    for product in db.query(Product).all():
        purchased = sum(p.quantity for p in db.query(Purchase).filter(Purchase.product_id == product.id))
        sold = sum(s.quantity for s in db.query(Sale).filter(Sale.product_id == product.id))
        assert product.stock_quantity == opening[product.sku] + purchased - sold


def test_populate_skips_non_empty_database(db, make_product):
    make_product()
    assert populate(db)["products"] == 0
