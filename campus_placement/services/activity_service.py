"""Audit trail helper.

Activity rows are added to the caller's session so they commit (or roll
back) together with the transition they describe.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.models.activity_log import ActivityLog


def record_activity(
    db: AsyncSession,
    user_id: UUID,
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ActivityLog:
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
    )
    db.add(entry)
    return entry
