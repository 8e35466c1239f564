"""Shared response schemas."""

from datetime import datetime
from typing import Any, Dict, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorBody(BaseModel):
    """Error payload inside the standard envelope."""
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error envelope returned by every failing endpoint."""
    success: bool = False
    error: ErrorBody


class Page(BaseModel, Generic[T]):
    """Paginated list."""
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
