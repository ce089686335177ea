# backend/schemas/common.py
from typing import Any
from pydantic import BaseModel, ConfigDict


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def blank_to_none(value: Any) -> Any:
    """HTML forms post "" for an unselected option."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class DeleteResponse(BaseModel):
    message: str
    id: int
