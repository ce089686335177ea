# backend/errors.py
"""
Domain errors raised by the stock ledger and reports.

Each error carries the HTTP status the API answers with, so the handlers
registered in main.py only translate, they never decide.

    PosError
    +-- NotFoundError            404
    +-- InsufficientStockError   400
    +-- ValidationError          400
    +-- StorageError             500
"""
from typing import Optional


class PosError(Exception):
    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(PosError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(PosError):
    status_code = 400

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(f"Insufficient stock: requested {requested}, available {available}")
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ValidationError(PosError):
    status_code = 400


class StorageError(PosError):
    """Underlying database failure. The message never carries driver details."""

    status_code = 500

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)
