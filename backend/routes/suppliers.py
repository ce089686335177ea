# backend/routes/suppliers.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.supplier import Supplier
from utils.audit import write_log, client_ip
from schemas.common import DeleteResponse
import schemas.supplier as supplier_schemas

router = APIRouter(prefix="/api/suppliers", tags=["Suppliers"])


def _get_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return supplier


@router.get("", response_model=List[supplier_schemas.SupplierOut])
def list_suppliers(db: Session = Depends(get_db)):
    return db.query(Supplier).order_by(Supplier.name.asc()).all()


@router.post("", response_model=supplier_schemas.SupplierOut)
def create_supplier(payload: supplier_schemas.SupplierCreate, request: Request, db: Session = Depends(get_db)):
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    write_log(db, action="SUPPLIER_CREATE", resource="suppliers", ip=client_ip(request), meta={"id": supplier.id})
    return supplier


@router.put("/{supplier_id}", response_model=supplier_schemas.SupplierOut)
def update_supplier(supplier_id: int, payload: supplier_schemas.SupplierCreate, request: Request, db: Session = Depends(get_db)):
    supplier = _get_or_404(db, supplier_id)
    for key, value in payload.model_dump().items():
        setattr(supplier, key, value)
    db.commit()
    db.refresh(supplier)
    write_log(db, action="SUPPLIER_UPDATE", resource="suppliers", ip=client_ip(request), meta={"id": supplier_id})
    return supplier


# Purchases keep their supplier_id and show a null supplier name afterwards
@router.delete("/{supplier_id}", response_model=DeleteResponse)
def delete_supplier(supplier_id: int, request: Request, db: Session = Depends(get_db)):
    supplier = _get_or_404(db, supplier_id)
    db.delete(supplier)
    db.commit()
    write_log(db, action="SUPPLIER_DELETE", resource="suppliers", ip=client_ip(request), meta={"id": supplier_id})
    return {"message": "Supplier deleted", "id": supplier_id}
