"""Application schemas."""

from datetime import date, datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from campus_placement.models.application import ApplicationStatus
from campus_placement.utils.constants import INTERVIEW_MODES, MAX_RECRUITER_NOTES_LENGTH


class ApplyRequest(BaseModel):
    """Resume reference produced by the upload service."""
    resume_filename: str = Field(..., min_length=1, max_length=255)
    resume_original_name: Optional[str] = Field(None, max_length=255)
    resume_mimetype: Optional[str] = Field(None, max_length=100)
    resume_size: Optional[int] = Field(None, ge=0)
    resume_path: Optional[str] = Field(None, max_length=500)


class InterviewDetails(BaseModel):
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = None
    interview_mode: Optional[str] = Field(None, description="Online, Offline, Phone")
    meeting_link: Optional[str] = None
    venue: Optional[str] = None
    instructions: Optional[str] = None
    round: Optional[int] = Field(None, ge=1)

    @field_validator("interview_mode")
    @classmethod
    def validate_interview_mode(cls, v):
        if v is not None and v not in INTERVIEW_MODES:
            raise ValueError(f"interview_mode must be one of: {', '.join(INTERVIEW_MODES)}")
        return v


class AdvanceRequest(BaseModel):
    """Recruiter status update."""
    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=MAX_RECRUITER_NOTES_LENGTH)
    interview_details: Optional[InterviewDetails] = None


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=MAX_RECRUITER_NOTES_LENGTH)


class ApplicationResponse(BaseModel):
    """Application as returned by the API."""
    id: UUID
    job_id: UUID
    student_id: UUID
    status: ApplicationStatus
    resume_filename: str
    resume_original_name: Optional[str] = None
    resume_mimetype: Optional[str] = None
    resume_size: Optional[int] = None
    resume_path: Optional[str] = None
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UUID] = None
    withdrawn_at: Optional[datetime] = None
    interview_details: Optional[Dict[str, Any]] = None
    recruiter_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    viewed_by_recruiter: bool = False

    class Config:
        from_attributes = True
