"""
Notification Service
Creates in-app notifications after workflow transitions commit.

Notifications are best effort: a failure here is logged and never undoes
or fails the transition that triggered it.
"""

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_placement.config import settings
from campus_placement.models.notification import Notification

logger = structlog.get_logger(__name__)


class NotificationService:
    """Writes notification rows in their own session."""

    def __init__(self, session_factory: async_sessionmaker, enabled: Optional[bool] = None):
        self.session_factory = session_factory
        self.enabled = settings.NOTIFICATIONS_ENABLED if enabled is None else enabled

    @classmethod
    def for_session(cls, db: AsyncSession) -> "NotificationService":
        """Build a notifier that talks to the same database as ``db``."""
        return cls(async_sessionmaker(db.bind, class_=AsyncSession, expire_on_commit=False))

    async def notify(
        self,
        recipient_id: UUID,
        title: str,
        message: str,
        type: str,
        priority: str = "Medium",
        link: Optional[str] = None,
        extra_data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        if not self.enabled:
            return None
        try:
            async with self.session_factory() as session:
                notification = Notification(
                    recipient_id=recipient_id,
                    title=title,
                    message=message,
                    type=type,
                    priority=priority,
                    link=link,
                    extra_data=extra_data or {},
                )
                session.add(notification)
                await session.commit()
                logger.info("notification_created", recipient_id=str(recipient_id), title=title)
                return notification
        except Exception:
            logger.warning("notification_failed", recipient_id=str(recipient_id), title=title, exc_info=True)
            return None

    async def job_approved(self, recruiter_id: UUID, job_title: str, job_id: UUID):
        await self.notify(
            recruiter_id,
            "Job Approved",
            f'Your job posting "{job_title}" has been approved and is now visible to students.',
            type="Job",
            priority="High",
            link=f"/jobs/{job_id}",
            extra_data={"job_id": str(job_id)},
        )

    async def job_rejected(self, recruiter_id: UUID, job_title: str, reason: str, job_id: UUID):
        await self.notify(
            recruiter_id,
            "Job Rejected",
            f'Your job posting "{job_title}" was rejected. Reason: {reason}',
            type="Job",
            priority="High",
            link=f"/jobs/{job_id}",
            extra_data={"job_id": str(job_id)},
        )

    async def new_application(self, recruiter_id: UUID, student_name: str, job_title: str, application_id: UUID):
        await self.notify(
            recruiter_id,
            "New Application",
            f'{student_name} applied for "{job_title}".',
            type="Application",
            link=f"/applications/{application_id}",
            extra_data={"application_id": str(application_id)},
        )

    async def application_status_changed(self, student_id: UUID, job_title: str, status: str, application_id: UUID):
        await self.notify(
            student_id,
            "Application Update",
            f'Your application for "{job_title}" is now {status}.',
            type="Application",
            priority="High" if status in ("Accepted", "Interview Scheduled") else "Medium",
            link=f"/applications/{application_id}",
            extra_data={"application_id": str(application_id), "status": status},
        )

    async def student_verified(self, student_id: UUID):
        await self.notify(
            student_id,
            "Profile Verified",
            "Your profile has been verified by your TnP officer. You can now apply to jobs.",
            type="System",
            priority="High",
        )
