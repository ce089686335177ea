# backend/routes/sales.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.sale import Sale
from services import ledger
from services.reporting import DateRange
from errors import InsufficientStockError
from utils.audit import write_log, client_ip
from schemas.common import DeleteResponse
import schemas.sale as sale_schemas

router = APIRouter(prefix="/api/sales", tags=["Sales"])


def _sale_out(sale: Sale, product_name: Optional[str]) -> dict:
    fields = sale_schemas.SaleOut.model_fields.keys()
    data = {f: getattr(sale, f) for f in fields if hasattr(sale, f)}
    data["product_name"] = product_name
    return data

def _with_product(db: Session):
    return db.query(Sale, Product.name).outerjoin(Product, Product.id == Sale.product_id)


@router.get("", response_model=List[sale_schemas.SaleOut])
def list_sales(
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    query = _with_product(db)
    date_range = DateRange.from_params(startDate, endDate)
    if date_range:
        query = date_range.apply(query, Sale.sale_date)
    rows = query.order_by(Sale.sale_date.desc(), Sale.id.desc()).all()
    return [_sale_out(*row) for row in rows]


# Insufficient stock surfaces as 400 through the PosError handler in main.py
@router.post("", response_model=sale_schemas.SaleOut)
def create_sale(payload: sale_schemas.SaleCreate, request: Request, db: Session = Depends(get_db)):
    ip = client_ip(request)
    try:
        sale = ledger.record_sale(db, ip=ip, **payload.model_dump())
    except InsufficientStockError as exc:
        write_log(
            db, action="SALE_CREATE", resource="sales", status="FAIL", ip=ip,
            meta={"product_id": exc.product_id, "requested": exc.requested, "available": exc.available},
        )
        raise
    row = _with_product(db).filter(Sale.id == sale.id).one()
    return _sale_out(*row)


@router.delete("/{sale_id}", response_model=DeleteResponse)
def delete_sale(sale_id: int, request: Request, db: Session = Depends(get_db)):
    ledger.delete_sale(db, sale_id, ip=client_ip(request))
    return {"message": "Sale deleted", "id": sale_id}
