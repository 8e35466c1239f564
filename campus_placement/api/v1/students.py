"""Student endpoints - profile edits and TnP verification."""

from uuid import UUID

from fastapi import APIRouter, Depends

from campus_placement.api.deps import get_current_user, get_verification_service
from campus_placement.models.user import User
from campus_placement.schemas.student import (
    ProfileUpdateResponse,
    StudentProfileUpdate,
    StudentResponse,
    VerificationRequest,
)
from campus_placement.services.verification import VerificationService

router = APIRouter()


@router.patch("/me", response_model=ProfileUpdateResponse)
async def update_my_profile(
    payload: StudentProfileUpdate,
    current_user: User = Depends(get_current_user),
    verification: VerificationService = Depends(get_verification_service),
):
    """
    Update the current student's profile.

    Changing course, college, CGPA, year of completion, registration number,
    marks or avatar revokes TnP verification until it is granted again.
    """
    result = await verification.update_profile(current_user, payload.model_dump(exclude_unset=True))
    return ProfileUpdateResponse.model_validate(result)


@router.post("/{student_id}/verification", response_model=StudentResponse)
async def set_student_verification(
    student_id: UUID,
    payload: VerificationRequest,
    current_user: User = Depends(get_current_user),
    verification: VerificationService = Depends(get_verification_service),
):
    """Grant or revoke verification (TnP officer of the student's college)."""
    student = await verification.set_verified(current_user, student_id, payload.verified, payload.note)
    return StudentResponse.model_validate(student)
