"""Per-transition authorization predicates.

Each workflow transition checks ``(role, ownership)`` through these helpers
before it touches any state.
"""

from typing import Any
from uuid import UUID

from campus_placement.core.exceptions import ForbiddenError
from campus_placement.models.user import UserRole


def ensure_role(actor: Any, *roles: UserRole, action: str) -> None:
    """Raise ForbiddenError(kind=role) unless the actor holds one of ``roles``."""
    if actor is None or actor.role not in roles:
        allowed = " or ".join(r.value for r in roles)
        raise ForbiddenError(
            f"Only {allowed} users can {action}",
            kind=ForbiddenError.ROLE,
            details={"required": [r.value for r in roles]},
        )
    if not actor.is_active:
        raise ForbiddenError("Inactive user", kind=ForbiddenError.ROLE)


def ensure_owner(actor_id: UUID, owner_id: UUID, action: str) -> None:
    """Raise ForbiddenError(kind=ownership) unless the actor owns the entity."""
    if actor_id != owner_id:
        raise ForbiddenError(f"You can only {action} your own records", kind=ForbiddenError.OWNERSHIP)
