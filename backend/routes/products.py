# backend/routes/products.py
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from utils.audit import write_log, client_ip
from models.product import Product
from models.category import Category
from schemas.common import DeleteResponse
import schemas.product as product_schemas

router = APIRouter(prefix="/api/products", tags=["Products"])


# ---- HELPERS ----
def product_out(product: Product, category_name: Optional[str]) -> dict:
    fields = product_schemas.ProductOut.model_fields.keys()
    data = {f: getattr(product, f) for f in fields if hasattr(product, f)}
    data["category_name"] = category_name
    return data

def _with_category(db: Session):
    return db.query(Product, Category.name).outerjoin(Category, Category.id == Product.category_id)

def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

def _commit_unique(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="SKU already exists")

def _read_one(db: Session, product_id: int) -> dict:
    product, category_name = _with_category(db).filter(Product.id == product_id).one()
    return product_out(product, category_name)


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    search: Optional[str] = Query(None, description="Substring of name or SKU"),
    db: Session = Depends(get_db),
):
    query = _with_category(db)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Product.name.ilike(like), Product.sku.ilike(like)))
    rows = query.order_by(Product.name.asc()).all()
    return [product_out(p, category_name) for p, category_name in rows]


@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    _get_or_404(db, product_id)
    return _read_one(db, product_id)


# =========================
# CREATE / EDIT
# =========================
@router.post("", response_model=product_schemas.ProductOut)
def create_product(payload: product_schemas.ProductCreate, request: Request, db: Session = Depends(get_db)):
    # The only place stock is set directly: the opening balance
    product = Product(**payload.model_dump())
    db.add(product)
    _commit_unique(db)
    write_log(
        db, action="PRODUCT_CREATE", resource="products", ip=client_ip(request),
        meta={"id": product.id, "opening_stock": payload.stock_quantity},
    )
    return _read_one(db, product.id)


@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(product_id: int, payload: product_schemas.ProductUpdate, request: Request, db: Session = Depends(get_db)):
    product = _get_or_404(db, product_id)
    for key, value in payload.model_dump().items():
        setattr(product, key, value)
    _commit_unique(db)
    write_log(db, action="PRODUCT_UPDATE", resource="products", ip=client_ip(request), meta={"id": product_id})
    return _read_one(db, product_id)


# Purchases and sales of a deleted product stay on record
@router.delete("/{product_id}", response_model=DeleteResponse)
def delete_product(product_id: int, request: Request, db: Session = Depends(get_db)):
    product = _get_or_404(db, product_id)
    db.delete(product)
    db.commit()
    write_log(db, action="PRODUCT_DELETE", resource="products", ip=client_ip(request), meta={"id": product_id})
    return {"message": "Product deleted", "id": product_id}
