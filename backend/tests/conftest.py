import os

# Keep the application engine off any real database configured in .env
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, create_db_engine, get_db
from main import app
from models.category import Category
from models.product import Product

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    # Same engine factory the app uses, so SQLite runs with BEGIN IMMEDIATE
    engine = create_db_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_product(db):
    def _make(name="Widget", stock=0, reorder_level=0, unit_price=10.0, sku=None, category_id=None):
        product = Product(
            name=name, sku=sku, category_id=category_id, unit_price=unit_price,
            stock_quantity=stock, reorder_level=reorder_level,
        )
        db.add(product)
        db.commit()
        return product.id
    return _make


@pytest.fixture
def make_category(db):
    def _make(name="General"):
        category = Category(name=name)
        db.add(category)
        db.commit()
        return category.id
    return _make


@pytest.fixture
def stock(db):
    def _stock(product_id):
        db.expire_all()
        return db.query(Product).filter(Product.id == product_id).one().stock_quantity
    return _stock


@pytest.fixture
def client():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        try:
            db = TestingSessionLocal()
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
