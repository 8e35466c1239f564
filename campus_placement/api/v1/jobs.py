"""Job endpoints - posting lifecycle, review, eligibility and applying."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from campus_placement.api.deps import (
    Pagination,
    get_application_service,
    get_current_user,
    get_job_service,
)
from campus_placement.core.exceptions import ConflictError
from campus_placement.models.application import ApplicationStatus
from campus_placement.models.job import JobStatus
from campus_placement.models.user import User, UserRole
from campus_placement.schemas.application import ApplicationResponse, ApplyRequest
from campus_placement.schemas.common import Page
from campus_placement.schemas.eligibility import EligibilityResponse
from campus_placement.schemas.job import JobCreate, JobResponse, JobReviewRequest, JobUpdate
from campus_placement.services.application_lifecycle import ApplicationLifecycleService
from campus_placement.services.job_lifecycle import JobLifecycleService
from campus_placement.utils.helpers import page_count

router = APIRouter()


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    """Create a posting. It starts Pending and is invisible to students until approved."""
    job = await jobs.create(current_user, payload.model_dump(exclude_none=True))
    return JobResponse.model_validate(job)


@router.get("", response_model=Page[JobResponse])
async def list_jobs(
    pagination: Pagination = Depends(),
    job_status: Optional[JobStatus] = Query(None, alias="status", description="Filter by review status"),
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    """
    Role-scoped job listing.

    - **Student**: approved, active jobs still open, each annotated with eligibility
    - **Recruiter**: own postings
    - **TnP**: every posting (filter by `status` to get the review queue)
    """
    rows, total = await jobs.list_jobs(current_user, pagination.page, pagination.size, job_status)
    items = [JobResponse.model_validate(job) for job in rows]

    if current_user.role == UserRole.STUDENT:
        annotations = await applications.annotate(current_user, rows)
        for item in items:
            item.eligibility = EligibilityResponse(**annotations[item.id].to_dict())

    return Page[JobResponse](
        items=items,
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    job = await jobs.get_visible(current_user, job_id)
    item = JobResponse.model_validate(job)
    if current_user.role == UserRole.STUDENT:
        result = await applications.eligibility_for(current_user, job_id)
        item.eligibility = EligibilityResponse(**result.to_dict())
    return item


@router.patch("/{job_id}", response_model=JobResponse)
async def edit_job(
    job_id: UUID,
    payload: JobUpdate,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    """Edit a Pending or Rejected posting. Editing a Rejected posting resubmits it."""
    job = await jobs.edit(current_user, job_id, payload.model_dump(exclude_unset=True))
    return JobResponse.model_validate(job)


@router.post("/{job_id}/deactivate", response_model=JobResponse)
async def deactivate_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    job = await jobs.deactivate(current_user, job_id)
    return JobResponse.model_validate(job)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    """Delete a posting with no active applications."""
    await jobs.delete(current_user, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{job_id}/approve", response_model=JobResponse)
async def approve_job(
    job_id: UUID,
    payload: Optional[JobReviewRequest] = None,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    job = await jobs.approve(current_user, job_id, notes=payload.notes if payload else None)
    return JobResponse.model_validate(job)


@router.post("/{job_id}/reject", response_model=JobResponse)
async def reject_job(
    job_id: UUID,
    payload: JobReviewRequest,
    current_user: User = Depends(get_current_user),
    jobs: JobLifecycleService = Depends(get_job_service),
):
    job = await jobs.reject(current_user, job_id, payload.reason)
    return JobResponse.model_validate(job)


@router.get("/{job_id}/eligibility", response_model=EligibilityResponse)
async def job_eligibility(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    """Every rule the current student fails for this job (empty when eligible)."""
    result = await applications.eligibility_for(current_user, job_id)
    return EligibilityResponse(**result.to_dict())


@router.post("/{job_id}/apply", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_to_job(
    job_id: UUID,
    payload: ApplyRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    """
    Apply to a job.

    Returns 201 with the new application, or 200 with the existing one when
    the student has already applied.
    """
    try:
        application = await applications.apply(current_user, job_id, payload.model_dump(exclude_none=True))
    except ConflictError as e:
        if e.existing is None:
            raise
        response.status_code = status.HTTP_200_OK
        return ApplicationResponse.model_validate(e.existing)
    return ApplicationResponse.model_validate(application)


@router.get("/{job_id}/applications", response_model=Page[ApplicationResponse])
async def list_job_applications(
    job_id: UUID,
    pagination: Pagination = Depends(),
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    rows, total = await applications.list_for_job(
        current_user, job_id, pagination.page, pagination.size, application_status
    )
    return Page[ApplicationResponse](
        items=[ApplicationResponse.model_validate(a) for a in rows],
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )
