"""
Verification Gate
Owns ``Student.is_verified``.

Only a TnP officer of the student's college may grant or revoke verification.
Any change to a trust-sensitive profile field revokes it automatically, so a
verified profile always reflects what the officer actually reviewed.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.core.exceptions import ForbiddenError, NotFoundError, ValidationFailedError
from campus_placement.core.permissions import ensure_role
from campus_placement.models.college import College
from campus_placement.models.recruiter import TnpOfficer
from campus_placement.models.student import Student
from campus_placement.models.user import User, UserRole
from campus_placement.services.activity_service import record_activity
from campus_placement.services.notification_service import NotificationService
from campus_placement.utils.constants import (
    REQUIRED_PROFILE_FIELDS,
    STUDENT_EDITABLE_FIELDS,
    TRUST_SENSITIVE_FIELDS,
)
from campus_placement.utils.helpers import changed_fields, utcnow

logger = structlog.get_logger(__name__)

# Profile fields stored on the User row rather than the Student row
USER_FIELDS = frozenset({"full_name", "mobile_number", "profile_avatar"})


@dataclass
class ProfileUpdate:
    """Outcome of a profile edit."""
    student: Student
    changed: List[str] = field(default_factory=list)
    verification_revoked: bool = False


def on_profile_mutated(student: Any, changed: Iterable[str], reason: Optional[str] = None) -> bool:
    """
    Revoke verification when a trust-sensitive field changed.

    Mutates ``student`` in place and does not commit.

    Returns:
        True if verification was revoked by this call
    """
    sensitive = sorted(set(changed) & TRUST_SENSITIVE_FIELDS)
    if not sensitive or not student.is_verified:
        return False

    student.is_verified = False
    student.verified_by = None
    student.verified_at = None
    student.verification_note = reason or f"Verification revoked after changes to: {', '.join(sensitive)}"
    logger.info("verification_revoked", student_id=str(student.user_id), fields=sensitive)
    return True


class VerificationService:
    """TnP verification decisions and student self-service profile edits."""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService.for_session(db)

    async def get_student(self, student_user_id: UUID) -> Student:
        result = await self.db.execute(
            select(Student)
            .where(Student.user_id == student_user_id)
            .execution_options(populate_existing=True)
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFoundError("Student", student_user_id)
        return student

    async def _officer_college(self, tnp: User) -> Optional[UUID]:
        return await self.db.scalar(select(TnpOfficer.college_id).where(TnpOfficer.user_id == tnp.id))

    async def set_verified(
        self,
        tnp: User,
        student_user_id: UUID,
        verified: bool,
        note: Optional[str] = None,
    ) -> Student:
        """Grant or revoke verification for a student of the officer's college."""
        ensure_role(tnp, UserRole.TNP, action="verify students")
        student = await self.get_student(student_user_id)

        officer_college = await self._officer_college(tnp)
        if officer_college is None or officer_college != student.college_id:
            raise ForbiddenError(
                "You can only verify students from your own college",
                kind=ForbiddenError.COLLEGE,
            )

        if verified:
            student.is_verified = True
            student.verified_by = tnp.id
            student.verified_at = utcnow()
            student.verification_note = note
        else:
            student.is_verified = False
            student.verified_by = None
            student.verified_at = None
            student.verification_note = note

        record_activity(
            self.db,
            tnp.id,
            "STUDENT_VERIFY" if verified else "STUDENT_UNVERIFY",
            "Student",
            student.user_id,
            {"note": note} if note else None,
        )
        await self.db.commit()

        logger.info("student_verification_set", student_id=str(student_user_id), verified=verified)
        if verified:
            await self.notifier.student_verified(student.user_id)
        return student

    async def update_profile(self, actor: User, patch: Dict[str, Any]) -> ProfileUpdate:
        """
        Apply a student's edit to their own profile.

        Only fields whose value actually changes count as mutations; saving
        an unchanged form never revokes verification.
        """
        ensure_role(actor, UserRole.STUDENT, action="edit a student profile")
        unknown = set(patch) - STUDENT_EDITABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        cleared = sorted(name for name in REQUIRED_PROFILE_FIELDS if name in patch and patch[name] is None)
        if cleared:
            raise ValidationFailedError(f"Fields cannot be cleared: {', '.join(cleared)}", {"fields": cleared})

        student = await self.get_student(actor.id)
        user = await self.db.get(User, actor.id)
        user_changes = changed_fields(user, {k: v for k, v in patch.items() if k in USER_FIELDS})
        student_changes = changed_fields(student, {k: v for k, v in patch.items() if k not in USER_FIELDS})

        if "college_id" in student_changes:
            if await self.db.get(College, student_changes["college_id"]) is None:
                raise NotFoundError("College", student_changes["college_id"])

        changed = sorted(set(user_changes) | set(student_changes))
        if not changed:
            return ProfileUpdate(student=student)

        for name, value in user_changes.items():
            setattr(user, name, value)
        for name, value in student_changes.items():
            setattr(student, name, value)
        revoked = on_profile_mutated(student, changed)
        record_activity(
            self.db, actor.id, "PROFILE_UPDATE", "Student", actor.id,
            {"fields": changed, "verification_revoked": revoked},
        )
        await self.db.commit()

        logger.info("student_profile_updated", student_id=str(actor.id), fields=changed, revoked=revoked)
        return ProfileUpdate(student=student, changed=changed, verification_revoked=revoked)
