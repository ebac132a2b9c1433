# app/schemas/common.py
"""Response envelopes shared by every router."""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Wraps lists so a JSON response never has an array at its root."""
    results: List[T]


class ErrorOut(BaseModel):
    status: str
    code: int
    timestamp: datetime
    message: str
    errors: Optional[List[dict[str, Any]]] = None
