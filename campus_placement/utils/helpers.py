"""Helper utilities."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def changed_fields(current: Any, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Return the subset of ``patch`` whose values differ from ``current``."""
    return {
        field: value
        for field, value in patch.items()
        if getattr(current, field, None) != value
    }


def page_count(total: int, size: int) -> int:
    return (total + size - 1) // size if size else 0
