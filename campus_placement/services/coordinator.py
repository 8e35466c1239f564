"""
Consistency Coordinator
The single writer for application membership and job application counts.

Every write here is one transaction that pairs the application change with
the job counter change. Counters move through SQL expressions evaluated by
the database, and status changes are compare-and-set updates, so two
request handlers racing on the same rows cannot both win.

Invariants kept:
- at most one non-withdrawn application per (student, job), backed by the
  partial unique index ``uq_applications_student_job_active``
- ``jobs.application_count`` equals the number of non-withdrawn applications
"""

from typing import Any, Callable, Dict, Iterable, Optional
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError, PlacementError
from campus_placement.models.application import Application, ApplicationStatus
from campus_placement.models.job import Job
from campus_placement.models.student import PlacementStatus, Student
from campus_placement.utils.helpers import utcnow

logger = structlog.get_logger(__name__)

COUNTED_EXCLUDED = ApplicationStatus.WITHDRAWN


class ConsistencyCoordinator:
    """Atomic paired writes over applications and jobs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lock_job(self, job_id: UUID) -> Job:
        """Load a job row, locking it for the rest of the transaction where supported."""
        result = await self.db.execute(
            select(Job).where(Job.id == job_id).with_for_update().execution_options(populate_existing=True)
        )
        job = result.scalar_one_or_none()
        if job is None:
            raise NotFoundError("Job", job_id)
        return job

    async def lock_student(self, student_id: UUID) -> Student:
        """Load a student profile by user id, locked like ``lock_job``."""
        result = await self.db.execute(
            select(Student)
            .where(Student.user_id == student_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    async def find_active_application(self, student_id: UUID, job_id: UUID) -> Optional[Application]:
        result = await self.db.execute(
            select(Application)
            .where(
                Application.student_id == student_id,
                Application.job_id == job_id,
                Application.status != COUNTED_EXCLUDED,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_application(
        self,
        job_id: UUID,
        student_id: UUID,
        resume: Dict[str, Any],
        gate: Optional[Callable[[Student, Job], None]] = None,
    ) -> Application:
        """Insert an application and bump the job counter in one transaction.

        The job and student rows are locked first and ``gate`` runs against
        them, so a deactivation or verification change committed after the
        caller's own checks is still seen before the insert.

        Raises:
            ConflictError: another non-withdrawn application already exists;
                ``existing`` holds the winning row.
            PlacementError: whatever ``gate`` raises; nothing is written.
        """
        job = await self.lock_job(job_id)
        student = await self.lock_student(student_id)
        if await self.find_active_application(student_id, job_id) is not None:
            await self._conflict_if_exists(job_id, student_id)
        if gate is not None:
            try:
                gate(student, job)
            except PlacementError:
                await self.db.rollback()
                raise

        application = Application(
            job_id=job_id,
            student_id=student_id,
            status=ApplicationStatus.APPLIED,
            applied_at=utcnow(),
            **resume,
        )
        self.db.add(application)
        try:
            await self.db.flush()
            await self._adjust_count(job_id, +1)
            await self.db.commit()
        except IntegrityError:
            await self._conflict_if_exists(job_id, student_id)
            raise

        await self.db.refresh(application)
        logger.info(
            "application_created",
            application_id=str(application.id),
            job_id=str(job_id),
            student_id=str(student_id),
        )
        return application

    async def withdraw_application(
        self,
        application: Application,
        allowed_from: Iterable[ApplicationStatus],
    ) -> Application:
        """Mark an application withdrawn and decrement the job counter together."""
        allowed_from = list(allowed_from)
        result = await self.db.execute(
            update(Application)
            .where(Application.id == application.id, Application.status.in_(allowed_from))
            .values(status=ApplicationStatus.WITHDRAWN, withdrawn_at=utcnow(), updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self._fail_transition(application, ApplicationStatus.WITHDRAWN)

        await self._adjust_count(application.job_id, -1)
        await self.db.commit()
        await self.db.refresh(application)
        logger.info("application_withdrawn", application_id=str(application.id), job_id=str(application.job_id))
        return application

    async def transition_application(
        self,
        application: Application,
        expected_status: ApplicationStatus,
        new_status: ApplicationStatus,
        values: Optional[Dict[str, Any]] = None,
    ) -> Application:
        """Compare-and-set status change that leaves the counter alone.

        Used for moves between counted statuses (including Rejected).
        """
        await self._compare_and_set(application, expected_status, new_status, values)
        await self.db.commit()
        await self.db.refresh(application)
        return application

    async def accept_application(
        self,
        application: Application,
        expected_status: ApplicationStatus,
        values: Optional[Dict[str, Any]] = None,
    ) -> Application:
        """Accept an application and mark its student placed in one transaction."""
        await self._compare_and_set(application, expected_status, ApplicationStatus.ACCEPTED, values)
        await self.db.execute(
            update(Student)
            .where(Student.user_id == application.student_id)
            .values(placement_status=PlacementStatus.PLACED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        await self.db.refresh(application)
        logger.info("student_placed", student_id=str(application.student_id), job_id=str(application.job_id))
        return application

    async def delete_job(self, job: Job) -> bool:
        """Remove a job that has no counted applications.

        Jobs that still have application history (withdrawn rows) are
        deactivated instead of deleted. The zero-count guard is part of the
        same statement, so an application committed in between wins.

        Returns:
            True when the row was physically deleted, False when deactivated.
        """
        job_id, status = job.id, job.status
        has_history = await self.db.scalar(
            select(func.count()).select_from(Application).where(Application.job_id == job_id)
        )
        if has_history:
            stmt = (
                update(Job)
                .where(Job.id == job_id, Job.application_count == 0)
                .values(is_active=False, updated_at=utcnow())
            )
        else:
            stmt = delete(Job).where(Job.id == job_id, Job.application_count == 0)

        result = await self.db.execute(stmt.execution_options(synchronize_session=False))
        if result.rowcount != 1:
            await self.db.rollback()
            current = await self.db.scalar(select(Job.application_count).where(Job.id == job_id))
            raise InvalidTransitionError(
                "Job",
                current=status.value,
                attempted="Deleted",
                message=f"Cannot delete job with existing applications ({current})",
            )

        await self.db.commit()
        logger.info("job_deleted", job_id=str(job_id), soft=bool(has_history))
        return not has_history

    async def recount(self, job_id: UUID) -> int:
        """Recompute a job's counter from its application rows."""
        counted = (
            select(func.count())
            .select_from(Application)
            .where(Application.job_id == job_id, Application.status != COUNTED_EXCLUDED)
            .scalar_subquery()
        )
        result = await self.db.execute(
            update(Job)
            .where(Job.id == job_id)
            .values(application_count=counted)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.rollback()
            raise NotFoundError("Job", job_id)
        await self.db.commit()
        count = await self.db.scalar(select(Job.application_count).where(Job.id == job_id))
        logger.info("job_application_count_recomputed", job_id=str(job_id), count=count)
        return count

    async def _adjust_count(self, job_id: UUID, delta: int) -> None:
        await self.db.execute(
            update(Job)
            .where(Job.id == job_id)
            .values(application_count=Job.application_count + delta)
            .execution_options(synchronize_session=False)
        )

    async def _compare_and_set(
        self,
        application: Application,
        expected_status: ApplicationStatus,
        new_status: ApplicationStatus,
        values: Optional[Dict[str, Any]],
    ) -> None:
        result = await self.db.execute(
            update(Application)
            .where(Application.id == application.id, Application.status == expected_status)
            .values(status=new_status, updated_at=utcnow(), **(values or {}))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self._fail_transition(application, new_status)

    async def _fail_transition(self, application: Application, attempted: ApplicationStatus) -> None:
        application_id = application.id
        await self.db.rollback()
        current = await self.db.scalar(select(Application.status).where(Application.id == application_id))
        raise InvalidTransitionError(
            "Application",
            current=current.value if current is not None else "missing",
            attempted=attempted.value,
        )

    async def _conflict_if_exists(self, job_id: UUID, student_id: UUID) -> None:
        """Roll back and raise ConflictError carrying the live application, if any."""
        await self.db.rollback()
        existing = await self.find_active_application(student_id, job_id)
        if existing is None:
            return
        logger.info("duplicate_application_rejected", job_id=str(job_id), student_id=str(student_id))
        raise ConflictError(
            "You have already applied to this job",
            existing=existing,
            details={"application_id": str(existing.id)},
        )
