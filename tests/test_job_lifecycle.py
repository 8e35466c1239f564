# tests/test_job_lifecycle.py
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from campus_placement.core.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)
from campus_placement.models import ActivityLog, Application, ApplicationStatus, Job, JobStatus, Notification
from campus_placement.services.job_lifecycle import JobLifecycleService
from campus_placement.utils.helpers import utcnow
from tests.conftest import job_payload


async def test_recruiter_creates_pending_job(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await JobLifecycleService(db, quiet_notifier).create(recruiter, job_payload())

    assert job.status == JobStatus.PENDING
    assert job.application_count == 0
    assert job.is_active is True
    assert job.posted_by == recruiter.id
    assert job.ctc_currency == "INR"


@pytest.mark.parametrize(
    "overrides",
    [
        {"ctc_min": 900000, "ctc_max": 900000},
        {"ctc_min": 900000, "ctc_max": 500000},
        {"application_deadline": utcnow() - timedelta(minutes=1)},
    ],
)
async def test_create_rejects_invalid_terms(db, seed, quiet_notifier, overrides):
    recruiter = await seed.recruiter()
    with pytest.raises(ValidationFailedError):
        await JobLifecycleService(db, quiet_notifier).create(recruiter, job_payload(**overrides))


async def test_students_and_tnp_cannot_create_jobs(db, seed, quiet_notifier):
    college = await seed.college()
    student = await seed.student(college)
    tnp = await seed.tnp(college)
    service = JobLifecycleService(db, quiet_notifier)

    for actor in (student, tnp):
        with pytest.raises(ForbiddenError):
            await service.create(actor, job_payload())


async def test_tnp_approves_pending_job_and_recruiter_is_notified(db, seed):
    college = await seed.college()
    recruiter = await seed.recruiter()
    tnp = await seed.tnp(college)
    pending = await seed.job(recruiter, status=JobStatus.PENDING)

    job = await JobLifecycleService(db).approve(tnp, pending.id, notes="Looks good")

    assert job.status == JobStatus.APPROVED
    assert job.approved_by == tnp.id
    assert job.approval_notes == "Looks good"
    titles = (await db.execute(select(Notification.title))).scalars().all()
    assert titles == ["Job Approved"]


async def test_approving_twice_is_a_no_op(db, seed, quiet_notifier):
    college = await seed.college()
    recruiter = await seed.recruiter()
    tnp = await seed.tnp(college)
    pending = await seed.job(recruiter, status=JobStatus.PENDING)
    service = JobLifecycleService(db, quiet_notifier)

    first = await service.approve(tnp, pending.id)
    approved_at = first.approved_at
    second = await service.approve(tnp, pending.id)

    assert second.status == JobStatus.APPROVED
    assert second.approved_at == approved_at
    count = await db.scalar(select(func.count()).select_from(ActivityLog).where(ActivityLog.action == "JOB_APPROVE"))
    assert count == 1


async def test_recruiter_cannot_approve(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    pending = await seed.job(recruiter, status=JobStatus.PENDING)

    with pytest.raises(ForbiddenError):
        await JobLifecycleService(db, quiet_notifier).approve(recruiter, pending.id)


async def test_reject_requires_reason(db, seed, quiet_notifier):
    college = await seed.college()
    recruiter = await seed.recruiter()
    tnp = await seed.tnp(college)
    pending = await seed.job(recruiter, status=JobStatus.PENDING)
    service = JobLifecycleService(db, quiet_notifier)

    with pytest.raises(ValidationFailedError):
        await service.reject(tnp, pending.id, "   ")

    job = await service.reject(tnp, pending.id, "Stipend missing")
    assert job.status == JobStatus.REJECTED
    assert job.rejection_reason == "Stipend missing"


async def test_rejected_job_cannot_be_approved_until_edited(db, seed, quiet_notifier):
    college = await seed.college()
    recruiter = await seed.recruiter()
    tnp = await seed.tnp(college)
    rejected = await seed.job(recruiter, status=JobStatus.REJECTED, rejection_reason="Vague description")
    service = JobLifecycleService(db, quiet_notifier)

    with pytest.raises(InvalidTransitionError):
        await service.approve(tnp, rejected.id)

    edited = await service.edit(recruiter, rejected.id, {"description": "Build payment APIs in Python"})
    assert edited.status == JobStatus.PENDING
    assert edited.rejection_reason is None

    approved = await service.approve(tnp, rejected.id)
    assert approved.status == JobStatus.APPROVED


async def test_approved_job_cannot_be_edited(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.APPROVED)

    with pytest.raises(InvalidTransitionError):
        await JobLifecycleService(db, quiet_notifier).edit(recruiter, job.id, {"title": "Senior Backend Engineer"})


async def test_only_owner_can_edit(db, seed, quiet_notifier):
    owner = await seed.recruiter()
    other = await seed.recruiter(company="Globex")
    job = await seed.job(owner, status=JobStatus.PENDING)

    with pytest.raises(ForbiddenError) as exc:
        await JobLifecycleService(db, quiet_notifier).edit(other, job.id, {"title": "Hijacked"})
    assert exc.value.kind == ForbiddenError.OWNERSHIP


async def test_edit_cannot_touch_workflow_fields(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.PENDING)

    with pytest.raises(ValidationFailedError):
        await JobLifecycleService(db, quiet_notifier).edit(recruiter, job.id, {"status": "Approved"})


async def test_edit_revalidates_ctc_range(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.PENDING, ctc_min=500000, ctc_max=700000)

    with pytest.raises(ValidationFailedError):
        await JobLifecycleService(db, quiet_notifier).edit(recruiter, job.id, {"ctc_min": 800000})


async def test_deactivate_works_in_any_status(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.APPROVED)

    result = await JobLifecycleService(db, quiet_notifier).deactivate(recruiter, job.id)
    assert result.is_active is False
    assert result.status == JobStatus.APPROVED


async def test_delete_without_applications_removes_row(db, seed, quiet_notifier):
    recruiter = await seed.recruiter()
    job = await seed.job(recruiter, status=JobStatus.PENDING)

    removed = await JobLifecycleService(db, quiet_notifier).delete(recruiter, job.id)

    assert removed is True
    assert await db.scalar(select(func.count()).select_from(Job).where(Job.id == job.id)) == 0


async def test_delete_with_active_applications_is_refused(db, seed, quiet_notifier):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college)
    job = await seed.job(recruiter, application_count=1)
    db.add(Application(job_id=job.id, student_id=student.id, status=ApplicationStatus.APPLIED, resume_filename="cv.pdf"))
    await db.commit()

    with pytest.raises(InvalidTransitionError):
        await JobLifecycleService(db, quiet_notifier).delete(recruiter, job.id)
    assert await db.scalar(select(func.count()).select_from(Job).where(Job.id == job.id)) == 1


async def test_delete_with_only_withdrawn_history_deactivates(db, seed, quiet_notifier):
    college = await seed.college()
    recruiter = await seed.recruiter()
    student = await seed.student(college)
    job = await seed.job(recruiter)
    db.add(Application(job_id=job.id, student_id=student.id, status=ApplicationStatus.WITHDRAWN, resume_filename="cv.pdf"))
    await db.commit()

    removed = await JobLifecycleService(db, quiet_notifier).delete(recruiter, job.id)

    assert removed is False
    is_active = await db.scalar(select(Job.is_active).where(Job.id == job.id))
    assert is_active is False


async def test_unknown_job_is_not_found(db, seed, quiet_notifier):
    college = await seed.college()
    tnp = await seed.tnp(college)
    with pytest.raises(NotFoundError):
        await JobLifecycleService(db, quiet_notifier).approve(tnp, uuid.uuid4())


async def test_listing_is_scoped_by_role(db, seed, quiet_notifier):
    college = await seed.college()
    mine, theirs = await seed.recruiter(), await seed.recruiter(company="Globex")
    student = await seed.student(college)
    tnp = await seed.tnp(college)

    open_job = await seed.job(mine, title="Open")
    await seed.job(mine, status=JobStatus.PENDING, title="Pending")
    await seed.job(theirs, is_active=False, title="Closed")
    await seed.job(theirs, application_deadline=utcnow() - timedelta(days=1), title="Expired")

    service = JobLifecycleService(db, quiet_notifier)

    student_jobs, total = await service.list_jobs(student)
    assert [j.id for j in student_jobs] == [open_job.id]
    assert total == 1

    recruiter_jobs, total = await service.list_jobs(mine)
    assert {j.title for j in recruiter_jobs} == {"Open", "Pending"}

    _, total = await service.list_jobs(tnp)
    assert total == 4
    queue, _ = await service.list_jobs(tnp, status=JobStatus.PENDING)
    assert [j.title for j in queue] == ["Pending"]
