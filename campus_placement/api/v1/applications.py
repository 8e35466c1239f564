"""Application endpoints - review pipeline and withdrawal."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from campus_placement.api.deps import Pagination, get_application_service, get_current_user
from campus_placement.models.application import ApplicationStatus
from campus_placement.models.user import User
from campus_placement.schemas.application import AdvanceRequest, ApplicationResponse, RejectRequest
from campus_placement.schemas.common import Page
from campus_placement.services.application_lifecycle import ApplicationLifecycleService
from campus_placement.utils.helpers import page_count

router = APIRouter()


@router.get("/me", response_model=Page[ApplicationResponse])
async def my_applications(
    pagination: Pagination = Depends(),
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    rows, total = await applications.list_for_student(
        current_user, pagination.page, pagination.size, application_status
    )
    return Page[ApplicationResponse](
        items=[ApplicationResponse.model_validate(a) for a in rows],
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )


@router.post("/{application_id}/advance", response_model=ApplicationResponse)
async def advance_application(
    application_id: UUID,
    payload: AdvanceRequest,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    """Move an application forward: Under Review, Shortlisted, Interview Scheduled or Accepted."""
    interview = payload.interview_details.model_dump(mode="json", exclude_none=True) if payload.interview_details else None
    application = await applications.advance(
        current_user,
        application_id,
        payload.status,
        notes=payload.notes,
        interview_details=interview,
    )
    return ApplicationResponse.model_validate(application)


@router.post("/{application_id}/reject", response_model=ApplicationResponse)
async def reject_application(
    application_id: UUID,
    payload: RejectRequest,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    application = await applications.reject(current_user, application_id, payload.reason)
    return ApplicationResponse.model_validate(application)


@router.post("/{application_id}/withdraw", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    applications: ApplicationLifecycleService = Depends(get_application_service),
):
    await applications.withdraw(current_user, application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
