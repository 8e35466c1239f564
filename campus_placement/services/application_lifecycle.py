"""
Application Lifecycle Service
Student applications and the recruiter review pipeline.

Status order: Applied < Under Review < Shortlisted < Interview Scheduled < Accepted.
Rejected is reachable from any non-terminal status; Withdrawn only from
Applied or Under Review. Accepted, Rejected and Withdrawn are terminal.
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)
from campus_placement.core.permissions import ensure_owner, ensure_role
from campus_placement.models.application import Application, ApplicationStatus
from campus_placement.models.job import Job
from campus_placement.models.student import Student
from campus_placement.models.user import User, UserRole
from campus_placement.services.activity_service import record_activity
from campus_placement.services.coordinator import ConsistencyCoordinator
from campus_placement.services.eligibility import EligibilityResult, ReasonCode, can_apply
from campus_placement.services.notification_service import NotificationService
from campus_placement.utils.constants import MAX_RECRUITER_NOTES_LENGTH
from campus_placement.utils.helpers import utcnow

logger = structlog.get_logger(__name__)

PIPELINE = [
    ApplicationStatus.APPLIED,
    ApplicationStatus.UNDER_REVIEW,
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.INTERVIEW_SCHEDULED,
    ApplicationStatus.ACCEPTED,
]
RANK = {status: index for index, status in enumerate(PIPELINE)}

TERMINAL_STATUSES = frozenset(
    {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN}
)
WITHDRAWABLE_STATUSES = (ApplicationStatus.APPLIED, ApplicationStatus.UNDER_REVIEW)

RESUME_FIELDS = ("resume_filename", "resume_original_name", "resume_mimetype", "resume_size", "resume_path")


def is_forward(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    """True if ``new`` is a strictly later pipeline stage than ``current``."""
    if current not in RANK or new not in RANK:
        return False
    return RANK[new] > RANK[current]


class ApplicationLifecycleService:
    """Apply, advance, reject and withdraw transitions."""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService.for_session(db)
        self.coordinator = ConsistencyCoordinator(db)

    async def get(self, application_id: UUID) -> Application:
        application = await self.db.get(Application, application_id, populate_existing=True)
        if application is None:
            raise NotFoundError("Application", application_id)
        return application

    async def _student_profile(self, user_id: UUID) -> Student:
        result = await self.db.execute(
            select(Student).where(Student.user_id == user_id).execution_options(populate_existing=True)
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFoundError("Student", user_id)
        return student

    async def _job(self, job_id: UUID) -> Job:
        job = await self.db.get(Job, job_id, populate_existing=True)
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def _owned_application(self, recruiter: User, application_id: UUID) -> Tuple[Application, Job]:
        application = await self.get(application_id)
        job = await self._job(application.job_id)
        ensure_owner(recruiter.id, job.posted_by, action="manage applications for")
        return application, job

    async def eligibility_for(self, student_user: User, job_id: UUID) -> EligibilityResult:
        """Evaluate eligibility against fresh rows."""
        ensure_role(student_user, UserRole.STUDENT, action="check eligibility")
        student = await self._student_profile(student_user.id)
        job = await self._job(job_id)
        existing = await self.coordinator.find_active_application(student_user.id, job_id)
        return can_apply(student, job, existing)

    async def annotate(self, student_user: User, jobs: List[Job]) -> Dict[UUID, EligibilityResult]:
        """Eligibility for many jobs at once, used by job listings."""
        if not jobs:
            return {}
        student = await self._student_profile(student_user.id)
        result = await self.db.execute(
            select(Application).where(
                Application.student_id == student_user.id,
                Application.job_id.in_([job.id for job in jobs]),
                Application.status != ApplicationStatus.WITHDRAWN,
            )
        )
        existing = {application.job_id: application for application in result.scalars().all()}
        now = utcnow()
        return {job.id: can_apply(student, job, existing.get(job.id), now=now) for job in jobs}

    async def apply(self, student_user: User, job_id: UUID, resume: Dict[str, Any]) -> Application:
        """
        Submit an application.

        Raises:
            ConflictError: the student already holds a non-withdrawn application;
                ``existing`` carries it
            ForbiddenError: any other eligibility rule failed
            ValidationFailedError: resume reference missing
        """
        ensure_role(student_user, UserRole.STUDENT, action="apply for jobs")
        resume = {key: value for key, value in (resume or {}).items() if key in RESUME_FIELDS}
        if not (resume.get("resume_filename") or "").strip():
            raise ValidationFailedError("Resume is required to apply")

        student = await self._student_profile(student_user.id)
        job = await self._job(job_id)
        existing = await self.coordinator.find_active_application(student_user.id, job_id)
        result = can_apply(student, job, existing)

        if result.has(ReasonCode.ALREADY_APPLIED):
            raise ConflictError(
                "You have already applied to this job",
                existing=existing,
                details={"application_id": str(existing.id)},
            )
        self._ensure_eligible(result, job_id, student_user.id)

        def recheck(locked_student: Student, locked_job: Job) -> None:
            self._ensure_eligible(can_apply(locked_student, locked_job), job_id, student_user.id)

        record_activity(
            self.db, student_user.id, "APPLICATION_SUBMIT", "Job", job_id,
            {"resume_filename": resume["resume_filename"]},
        )
        job_title, recruiter_id = job.title, job.posted_by
        application = await self.coordinator.create_application(job_id, student_user.id, resume, gate=recheck)

        await self.notifier.new_application(recruiter_id, student_user.full_name, job_title, application.id)
        return application

    async def advance(
        self,
        recruiter: User,
        application_id: UUID,
        new_status: ApplicationStatus,
        notes: Optional[str] = None,
        interview_details: Optional[Dict[str, Any]] = None,
    ) -> Application:
        """Move an application forward in the review pipeline."""
        ensure_role(recruiter, UserRole.RECRUITER, action="update applications")
        new_status = ApplicationStatus(new_status)
        if new_status == ApplicationStatus.REJECTED:
            return await self.reject(recruiter, application_id, notes)

        self._check_notes(notes)
        application, job = await self._owned_application(recruiter, application_id)
        current = application.status

        next_round = (
            current == new_status == ApplicationStatus.INTERVIEW_SCHEDULED and bool(interview_details)
        )
        if current in TERMINAL_STATUSES or not (is_forward(current, new_status) or next_round):
            raise InvalidTransitionError("Application", current=current.value, attempted=new_status.value)
        if new_status == ApplicationStatus.INTERVIEW_SCHEDULED and not interview_details:
            raise ValidationFailedError("Interview details are required to schedule an interview")

        now = utcnow()
        values: Dict[str, Any] = {
            "reviewed_at": now,
            "reviewed_by": recruiter.id,
            "viewed_by_recruiter": True,
            "viewed_at": application.viewed_at or now,
        }
        if notes is not None:
            values["recruiter_notes"] = notes
        if interview_details:
            values["interview_details"] = dict(interview_details)

        record_activity(
            self.db, recruiter.id, "APPLICATION_UPDATE", "Application", application.id,
            {"from": current.value, "to": new_status.value},
        )
        if new_status == ApplicationStatus.ACCEPTED:
            application = await self.coordinator.accept_application(application, current, values)
        else:
            application = await self.coordinator.transition_application(application, current, new_status, values)

        logger.info(
            "application_advanced",
            application_id=str(application.id),
            from_status=current.value,
            to_status=new_status.value,
        )
        await self.notifier.application_status_changed(
            application.student_id, job.title, new_status.value, application.id
        )
        return application

    async def reject(self, recruiter: User, application_id: UUID, reason: Optional[str]) -> Application:
        """Reject an application from any non-terminal status; the job count is unchanged."""
        ensure_role(recruiter, UserRole.RECRUITER, action="reject applications")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationFailedError("Rejection reason is required")
        self._check_notes(reason)

        application, job = await self._owned_application(recruiter, application_id)
        current = application.status
        if current in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                "Application", current=current.value, attempted=ApplicationStatus.REJECTED.value
            )

        now = utcnow()
        values = {
            "rejection_reason": reason,
            "reviewed_at": now,
            "reviewed_by": recruiter.id,
            "viewed_by_recruiter": True,
            "viewed_at": application.viewed_at or now,
        }
        record_activity(
            self.db, recruiter.id, "APPLICATION_UPDATE", "Application", application.id,
            {"from": current.value, "to": ApplicationStatus.REJECTED.value, "reason": reason},
        )
        application = await self.coordinator.transition_application(
            application, current, ApplicationStatus.REJECTED, values
        )

        logger.info("application_rejected", application_id=str(application.id), from_status=current.value)
        await self.notifier.application_status_changed(
            application.student_id, job.title, ApplicationStatus.REJECTED.value, application.id
        )
        return application

    async def withdraw(self, student_user: User, application_id: UUID) -> Application:
        """Withdraw an own application that has not progressed past review."""
        ensure_role(student_user, UserRole.STUDENT, action="withdraw applications")
        application = await self.get(application_id)
        ensure_owner(student_user.id, application.student_id, action="withdraw")

        if application.status not in WITHDRAWABLE_STATUSES:
            raise InvalidTransitionError(
                "Application",
                current=application.status.value,
                attempted=ApplicationStatus.WITHDRAWN.value,
                message="Applications can only be withdrawn before shortlisting",
            )

        record_activity(self.db, student_user.id, "APPLICATION_WITHDRAW", "Application", application.id)
        return await self.coordinator.withdraw_application(application, WITHDRAWABLE_STATUSES)

    async def list_for_student(
        self,
        student_user: User,
        page: int = 1,
        size: int = 20,
        status: Optional[ApplicationStatus] = None,
    ) -> Tuple[List[Application], int]:
        ensure_role(student_user, UserRole.STUDENT, action="list own applications")
        filters = [Application.student_id == student_user.id]
        if status is not None:
            filters.append(Application.status == status)
        return await self._page(filters, page, size)

    async def list_for_job(
        self,
        actor: User,
        job_id: UUID,
        page: int = 1,
        size: int = 20,
        status: Optional[ApplicationStatus] = None,
    ) -> Tuple[List[Application], int]:
        """Applications for one job; visible to the owning recruiter and TnP officers."""
        ensure_role(actor, UserRole.RECRUITER, UserRole.TNP, action="view job applications")
        job = await self._job(job_id)
        if actor.role == UserRole.RECRUITER:
            ensure_owner(actor.id, job.posted_by, action="view applications for")

        filters = [Application.job_id == job_id]
        if status is not None:
            filters.append(Application.status == status)
        return await self._page(filters, page, size)

    async def _page(self, filters: list, page: int, size: int) -> Tuple[List[Application], int]:
        total = await self.db.scalar(select(func.count()).select_from(Application).where(*filters))
        result = await self.db.execute(
            select(Application)
            .where(*filters)
            .order_by(Application.applied_at.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    def _check_notes(notes: Optional[str]) -> None:
        if notes is not None and len(notes) > MAX_RECRUITER_NOTES_LENGTH:
            raise ValidationFailedError(
                f"Notes cannot exceed {MAX_RECRUITER_NOTES_LENGTH} characters",
                {"max_length": MAX_RECRUITER_NOTES_LENGTH},
            )

    @staticmethod
    def _ensure_eligible(result: EligibilityResult, job_id: UUID, student_id: UUID) -> None:
        if result.eligible:
            return
        logger.info(
            "application_blocked",
            job_id=str(job_id),
            student_id=str(student_id),
            reasons=[code.value for code in result.codes],
        )
        raise ForbiddenError(
            "You are not eligible for this job",
            kind=ForbiddenError.ELIGIBILITY,
            details={"reasons": [reason.to_dict() for reason in result.reasons]},
        )
