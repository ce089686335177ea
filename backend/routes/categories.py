# backend/routes/categories.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from utils.audit import write_log, client_ip
from schemas.common import DeleteResponse
import schemas.category as category_schemas

router = APIRouter(prefix="/api/categories", tags=["Categories"])


def _get_or_404(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category

def _commit_unique(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Category name already exists")


@router.get("", response_model=List[category_schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name.asc()).all()


@router.post("", response_model=category_schemas.CategoryOut)
def create_category(payload: category_schemas.CategoryCreate, request: Request, db: Session = Depends(get_db)):
    category = Category(**payload.model_dump())
    db.add(category)
    _commit_unique(db)
    db.refresh(category)
    write_log(db, action="CATEGORY_CREATE", resource="categories", ip=client_ip(request), meta={"id": category.id})
    return category


@router.put("/{category_id}", response_model=category_schemas.CategoryOut)
def update_category(category_id: int, payload: category_schemas.CategoryCreate, request: Request, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    for key, value in payload.model_dump().items():
        setattr(category, key, value)
    _commit_unique(db)
    db.refresh(category)
    write_log(db, action="CATEGORY_UPDATE", resource="categories", ip=client_ip(request), meta={"id": category_id})
    return category


# Products keep their category_id; they show a null category name afterwards
@router.delete("/{category_id}", response_model=DeleteResponse)
def delete_category(category_id: int, request: Request, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    db.delete(category)
    db.commit()
    write_log(db, action="CATEGORY_DELETE", resource="categories", ip=client_ip(request), meta={"id": category_id})
    return {"message": "Category deleted", "id": category_id}
