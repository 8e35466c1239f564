"""
Job Lifecycle Service
Posting review workflow: Recruiters create and edit postings, TnP officers
approve or reject them.

States: Pending -> Approved, Pending -> Rejected, Rejected -> Pending (edit).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.core.exceptions import InvalidTransitionError, NotFoundError, ValidationFailedError
from campus_placement.core.permissions import ensure_owner, ensure_role
from campus_placement.models.job import Job, JobStatus
from campus_placement.models.user import User, UserRole
from campus_placement.services.activity_service import record_activity
from campus_placement.services.coordinator import ConsistencyCoordinator
from campus_placement.services.notification_service import NotificationService
from campus_placement.utils.constants import DEFAULT_CURRENCY, JOB_EDITABLE_FIELDS
from campus_placement.utils.helpers import to_naive_utc, utcnow

logger = structlog.get_logger(__name__)

EDITABLE_STATUSES = (JobStatus.PENDING, JobStatus.REJECTED)


def validate_job_terms(ctc_min: Any, ctc_max: Any, deadline: Optional[datetime], now: Optional[datetime] = None) -> None:
    """CTC range must be increasing and the deadline strictly in the future."""
    errors = []
    if ctc_min is None or ctc_max is None:
        errors.append("CTC minimum and maximum are required")
    elif ctc_min < 0:
        errors.append("CTC cannot be negative")
    elif ctc_min >= ctc_max:
        errors.append("CTC minimum must be less than CTC maximum")

    deadline = to_naive_utc(deadline)
    if deadline is None:
        errors.append("Application deadline is required")
    elif deadline <= (to_naive_utc(now) or utcnow()):
        errors.append("Application deadline must be in the future")

    if errors:
        raise ValidationFailedError("; ".join(errors), {"errors": errors})


class JobLifecycleService:
    """Role-gated transitions over job postings."""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService.for_session(db)
        self.coordinator = ConsistencyCoordinator(db)

    async def get(self, job_id: UUID) -> Job:
        job = await self.db.get(Job, job_id, populate_existing=True)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def get_visible(self, actor: User, job_id: UUID) -> Job:
        """
        Load a job the actor may read.

        Pending and Rejected postings are only visible to TnP officers and the
        posting recruiter; everyone else gets NotFound, as in the listings.
        """
        job = await self.get(job_id)
        if job.status == JobStatus.APPROVED or actor.role == UserRole.TNP or job.posted_by == actor.id:
            return job
        raise NotFoundError("Job", job_id)

    async def create(self, recruiter: User, data: Dict[str, Any]) -> Job:
        """Create a posting in Pending with a zero application count."""
        ensure_role(recruiter, UserRole.RECRUITER, action="create jobs")
        unknown = set(data) - JOB_EDITABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Unknown job fields: {', '.join(sorted(unknown))}")

        data = dict(data)
        data["application_deadline"] = to_naive_utc(data.get("application_deadline"))
        validate_job_terms(data.get("ctc_min"), data.get("ctc_max"), data["application_deadline"])
        data.setdefault("ctc_currency", DEFAULT_CURRENCY)

        job = Job(
            **data,
            posted_by=recruiter.id,
            status=JobStatus.PENDING,
            is_active=True,
            application_count=0,
        )
        self.db.add(job)
        await self.db.flush()
        record_activity(self.db, recruiter.id, "JOB_CREATE", "Job", job.id)
        await self.db.commit()
        await self.db.refresh(job)

        logger.info("job_created", job_id=str(job.id), recruiter_id=str(recruiter.id))
        return job

    async def approve(self, tnp: User, job_id: UUID, notes: Optional[str] = None) -> Job:
        """Approve a pending job. Re-approving an approved job is a no-op."""
        ensure_role(tnp, UserRole.TNP, action="approve jobs")
        job = await self.coordinator.lock_job(job_id)

        if job.status == JobStatus.APPROVED:
            await self.db.rollback()
            logger.info("job_approve_noop", job_id=str(job_id))
            return await self.get(job_id)
        if job.status != JobStatus.PENDING:
            current = job.status.value
            await self.db.rollback()
            raise InvalidTransitionError("Job", current=current, attempted=JobStatus.APPROVED.value)

        job.status = JobStatus.APPROVED
        job.approved_by = tnp.id
        job.approved_at = utcnow()
        job.approval_notes = notes
        record_activity(self.db, tnp.id, "JOB_APPROVE", "Job", job.id, {"approval_notes": notes})
        await self.db.commit()

        logger.info("job_approved", job_id=str(job.id), tnp_id=str(tnp.id))
        await self.notifier.job_approved(job.posted_by, job.title, job.id)
        return job

    async def reject(self, tnp: User, job_id: UUID, reason: Optional[str]) -> Job:
        """Reject a pending job with a mandatory reason."""
        ensure_role(tnp, UserRole.TNP, action="reject jobs")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationFailedError("Rejection reason is required")

        job = await self.coordinator.lock_job(job_id)
        if job.status != JobStatus.PENDING:
            current = job.status.value
            await self.db.rollback()
            raise InvalidTransitionError("Job", current=current, attempted=JobStatus.REJECTED.value)

        job.status = JobStatus.REJECTED
        job.rejection_reason = reason
        record_activity(self.db, tnp.id, "JOB_REJECT", "Job", job.id, {"rejection_reason": reason})
        await self.db.commit()

        logger.info("job_rejected", job_id=str(job.id), tnp_id=str(tnp.id))
        await self.notifier.job_rejected(job.posted_by, job.title, reason, job.id)
        return job

    async def edit(self, recruiter: User, job_id: UUID, patch: Dict[str, Any]) -> Job:
        """
        Edit a Pending or Rejected posting.

        Editing a Rejected job re-queues it for review: status goes back to
        Pending and the previous rejection reason is cleared.
        """
        ensure_role(recruiter, UserRole.RECRUITER, action="edit jobs")
        unknown = set(patch) - JOB_EDITABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        job = await self.coordinator.lock_job(job_id)
        try:
            ensure_owner(recruiter.id, job.posted_by, action="edit")
            if job.status not in EDITABLE_STATUSES:
                raise InvalidTransitionError(
                    "Job",
                    current=job.status.value,
                    attempted=JobStatus.PENDING.value,
                    message="Approved jobs cannot be edited, deactivate the posting instead",
                )

            patch = dict(patch)
            if "application_deadline" in patch:
                patch["application_deadline"] = to_naive_utc(patch["application_deadline"])
            validate_job_terms(
                patch.get("ctc_min", job.ctc_min),
                patch.get("ctc_max", job.ctc_max),
                patch.get("application_deadline", job.application_deadline),
            )
        except Exception:
            await self.db.rollback()
            raise

        previous_status = job.status
        for field, value in patch.items():
            setattr(job, field, value)
        if previous_status == JobStatus.REJECTED:
            job.status = JobStatus.PENDING
            job.rejection_reason = None

        record_activity(
            self.db, recruiter.id, "JOB_UPDATE", "Job", job.id,
            {"fields": sorted(patch), "resubmitted": previous_status == JobStatus.REJECTED},
        )
        await self.db.commit()
        await self.db.refresh(job)

        logger.info("job_updated", job_id=str(job.id), status=job.status.value)
        return job

    async def deactivate(self, recruiter: User, job_id: UUID) -> Job:
        """Close a posting to new applications; allowed in any status."""
        ensure_role(recruiter, UserRole.RECRUITER, action="deactivate jobs")
        job = await self.coordinator.lock_job(job_id)
        try:
            ensure_owner(recruiter.id, job.posted_by, action="deactivate")
        except Exception:
            await self.db.rollback()
            raise

        if job.is_active:
            job.is_active = False
            record_activity(self.db, recruiter.id, "JOB_DEACTIVATE", "Job", job.id)
        await self.db.commit()

        logger.info("job_deactivated", job_id=str(job.id))
        return job

    async def delete(self, recruiter: User, job_id: UUID) -> bool:
        """Delete a posting with no counted applications.

        Returns:
            True if physically removed, False if only deactivated to keep history.
        """
        ensure_role(recruiter, UserRole.RECRUITER, action="delete jobs")
        job = await self.get(job_id)
        ensure_owner(recruiter.id, job.posted_by, action="delete")

        record_activity(self.db, recruiter.id, "JOB_DELETE", "Job", job.id)
        return await self.coordinator.delete_job(job)

    async def list_jobs(
        self,
        actor: User,
        page: int = 1,
        size: int = 20,
        status: Optional[JobStatus] = None,
    ) -> Tuple[List[Job], int]:
        """
        Role-scoped listing.

        Students see approved, active jobs whose deadline has not passed;
        recruiters see their own postings; TnP officers see everything.
        """
        filters = []
        if actor.role == UserRole.STUDENT:
            filters += [
                Job.status == JobStatus.APPROVED,
                Job.is_active.is_(True),
                Job.application_deadline > utcnow(),
            ]
        elif actor.role == UserRole.RECRUITER:
            filters.append(Job.posted_by == actor.id)
            if status is not None:
                filters.append(Job.status == status)
        elif status is not None:
            filters.append(Job.status == status)

        total = await self.db.scalar(select(func.count()).select_from(Job).where(*filters))
        result = await self.db.execute(
            select(Job)
            .where(*filters)
            .order_by(Job.created_at.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        return list(result.scalars().all()), total or 0
