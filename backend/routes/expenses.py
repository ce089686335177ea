# backend/routes/expenses.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from database import get_db
from models.expense import Expense
from services.reporting import DateRange
from utils.audit import write_log, client_ip
from utils.dates import as_local
from schemas.common import DeleteResponse
import schemas.expense as expense_schemas

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])


def _get_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense

def _values(payload: expense_schemas.ExpenseCreate) -> dict:
    data = payload.model_dump()
    data["expense_date"] = as_local(data["expense_date"])
    return data


@router.get("", response_model=List[expense_schemas.ExpenseOut])
def list_expenses(
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Expense)
    date_range = DateRange.from_params(startDate, endDate)
    if date_range:
        query = date_range.apply(query, Expense.expense_date)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


@router.post("", response_model=expense_schemas.ExpenseOut)
def create_expense(payload: expense_schemas.ExpenseCreate, request: Request, db: Session = Depends(get_db)):
    expense = Expense(**_values(payload))
    db.add(expense)
    db.commit()
    db.refresh(expense)
    write_log(db, action="EXPENSE_CREATE", resource="expenses", ip=client_ip(request), meta={"id": expense.id})
    return expense


@router.put("/{expense_id}", response_model=expense_schemas.ExpenseOut)
def update_expense(expense_id: int, payload: expense_schemas.ExpenseCreate, request: Request, db: Session = Depends(get_db)):
    expense = _get_or_404(db, expense_id)
    for key, value in _values(payload).items():
        setattr(expense, key, value)
    db.commit()
    db.refresh(expense)
    write_log(db, action="EXPENSE_UPDATE", resource="expenses", ip=client_ip(request), meta={"id": expense_id})
    return expense


@router.delete("/{expense_id}", response_model=DeleteResponse)
def delete_expense(expense_id: int, request: Request, db: Session = Depends(get_db)):
    expense = _get_or_404(db, expense_id)
    db.delete(expense)
    db.commit()
    write_log(db, action="EXPENSE_DELETE", resource="expenses", ip=client_ip(request), meta={"id": expense_id})
    return {"message": "Expense deleted", "id": expense_id}
