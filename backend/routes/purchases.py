# backend/routes/purchases.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.purchase import Purchase
from models.supplier import Supplier
from services import ledger
from services.reporting import DateRange
from utils.audit import client_ip
from schemas.common import DeleteResponse
import schemas.purchase as purchase_schemas

router = APIRouter(prefix="/api/purchases", tags=["Purchases"])


def _purchase_out(purchase: Purchase, product_name: Optional[str], supplier_name: Optional[str]) -> dict:
    fields = purchase_schemas.PurchaseOut.model_fields.keys()
    data = {f: getattr(purchase, f) for f in fields if hasattr(purchase, f)}
    data.update(product_name=product_name, supplier_name=supplier_name)
    return data

def _with_names(db: Session):
    return (
        db.query(Purchase, Product.name, Supplier.name)
        .outerjoin(Product, Product.id == Purchase.product_id)
        .outerjoin(Supplier, Supplier.id == Purchase.supplier_id)
    )


@router.get("", response_model=List[purchase_schemas.PurchaseOut])
def list_purchases(
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    query = _with_names(db)
    date_range = DateRange.from_params(startDate, endDate)
    if date_range:
        query = date_range.apply(query, Purchase.purchase_date)
    rows = query.order_by(Purchase.purchase_date.desc(), Purchase.id.desc()).all()
    return [_purchase_out(*row) for row in rows]


@router.post("", response_model=purchase_schemas.PurchaseOut)
def create_purchase(payload: purchase_schemas.PurchaseCreate, request: Request, db: Session = Depends(get_db)):
    purchase = ledger.record_purchase(db, ip=client_ip(request), **payload.model_dump())
    row = _with_names(db).filter(Purchase.id == purchase.id).one()
    return _purchase_out(*row)


@router.delete("/{purchase_id}", response_model=DeleteResponse)
def delete_purchase(purchase_id: int, request: Request, db: Session = Depends(get_db)):
    ledger.delete_purchase(db, purchase_id, ip=client_ip(request))
    return {"message": "Purchase deleted", "id": purchase_id}
