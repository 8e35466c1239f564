"""Workflow errors raised by the placement services.

Every error carries an HTTP status and a stable ``code`` so the API layer can
translate it into the standard error envelope without inspecting messages.
"""

from typing import Any, Dict, Optional


class PlacementError(Exception):
    """Base class for all workflow errors."""

    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ForbiddenError(PlacementError):
    """Wrong role, not the owner, or outside the actor's college."""

    status_code = 403
    code = "FORBIDDEN"

    # kinds
    ROLE = "role"
    OWNERSHIP = "ownership"
    COLLEGE = "college"
    ELIGIBILITY = "eligibility"

    def __init__(self, message: str, kind: str = ROLE, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"kind": kind, **(details or {})})
        self.kind = kind


class InvalidTransitionError(PlacementError):
    """The entity is not in a state that allows the requested transition."""

    status_code = 409
    code = "INVALID_TRANSITION"

    def __init__(self, entity: str, current: str, attempted: str, message: Optional[str] = None):
        super().__init__(
            message or f"{entity} cannot move from '{current}' to '{attempted}'",
            {"entity": entity, "current": current, "attempted": attempted},
        )
        self.current = current
        self.attempted = attempted


class ValidationFailedError(PlacementError):
    """Malformed input, e.g. an empty rejection reason or CTC min >= max."""

    status_code = 422
    code = "VALIDATION_ERROR"


class ConflictError(PlacementError):
    """A competing write already holds the slot (duplicate application)."""

    status_code = 409
    code = "CONFLICT"

    def __init__(self, message: str, existing: Any = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.existing = existing


class NotFoundError(PlacementError):
    """Referenced job, student or application does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found", {"entity": entity, "id": str(entity_id)})
