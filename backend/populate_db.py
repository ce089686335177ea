import logging
import os
import sys
from datetime import datetime, timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.category import Category
from models.expense import Expense
from models.product import Product
from models.supplier import Supplier
from services import ledger

logger = logging.getLogger(__name__)

# Configuration
CATEGORIES = [
    ("Beverages", "Soft drinks, juice and water"),
    ("Snacks", "Crisps, biscuits and sweets"),
    ("Household", "Cleaning and paper goods"),
]
SUPPLIERS = [
    {"name": "Metro Wholesale", "contact_person": "Dana Reyes", "email": "orders@metro.example", "phone": "555-0100"},
    {"name": "Fresh Farms", "contact_person": "Sam Okoro", "email": "sales@freshfarms.example", "phone": "555-0199"},
]
# name, sku, category, unit_price, opening stock, reorder level
PRODUCTS = [
    ("Sparkling Water 500ml", "BEV-001", "Beverages", 1.20, 48, 12),
    ("Orange Juice 1L", "BEV-002", "Beverages", 2.80, 20, 6),
    ("Salted Crisps", "SNK-001", "Snacks", 1.50, 30, 10),
    ("Chocolate Bar", "SNK-002", "Snacks", 0.95, 5, 10),
    ("Paper Towels x4", "HOU-001", "Household", 3.40, 15, 5),
]
# End Configuration


def populate(db: Session) -> dict:
    """Seed an empty database with a small demo shop. Returns how much was created."""
    if db.query(Product).count():
        logger.info("Products already present, skipping demo data")
        return {"products": 0, "purchases": 0, "sales": 0, "expenses": 0}

    categories = {}
    for name, description in CATEGORIES:
        category = Category(name=name, description=description)
        db.add(category)
        categories[name] = category
    suppliers = [Supplier(**data) for data in SUPPLIERS]
    db.add_all(suppliers)
    db.flush()

    products = []
    for name, sku, category, price, stock, reorder in PRODUCTS:
        product = Product(
            name=name, sku=sku, category_id=categories[category].id,
            unit_price=price, stock_quantity=stock, reorder_level=reorder,
        )
        db.add(product)
        products.append(product)
    db.commit()

    # Movements go through the ledger so stock matches history
    start = datetime.now() - timedelta(days=7)
    purchases = sales = 0
    for i, product in enumerate(products):
        ledger.record_purchase(
            db, product_id=product.id, quantity=24, unit_cost=round(product.unit_price * 0.6, 2),
            supplier_id=suppliers[i % len(suppliers)].id, purchase_date=start + timedelta(days=i),
            notes="Weekly restock",
        )
        purchases += 1
        ledger.record_sale(
            db, product_id=product.id, quantity=3, unit_price=product.unit_price,
            sale_date=start + timedelta(days=i, hours=4), customer_name="Walk-in Customer",
            notes="POS Sale - Payment: cash",
        )
        sales += 1

    db.add_all([
        Expense(category="Rent", description="Shop rent", amount=850.0, expense_date=start),
        Expense(category="Utilities", description="Electricity", amount=96.4, expense_date=start + timedelta(days=3)),
    ])
    db.commit()

    return {"products": len(products), "purchases": purchases, "sales": sales, "expenses": 2}


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        created = populate(session)
        logger.info("Demo data: %s", created)
    finally:
        session.close()
