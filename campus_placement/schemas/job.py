"""Job schemas for API requests and responses."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_placement.models.job import JobStatus
from campus_placement.schemas.eligibility import EligibilityResponse
from campus_placement.utils.constants import JOB_TYPES, WORK_MODES


class JobFields(BaseModel):
    """Posting fields shared by create and edit requests."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    job_type: Optional[str] = Field(None, description="Full-time, Internship, Part-time")
    work_mode: Optional[str] = Field(None, description="Work from Office, Work from Home, Hybrid")
    designation: Optional[str] = Field(None, max_length=100)
    skills_required: Optional[List[str]] = None

    ctc_min: Optional[float] = Field(None, ge=0, description="Minimum CTC")
    ctc_max: Optional[float] = Field(None, ge=0, description="Maximum CTC")
    ctc_currency: Optional[str] = Field(None, max_length=10)

    min_cgpa: Optional[float] = Field(None, ge=0, le=10)
    allowed_courses: Optional[List[str]] = None
    max_backlogs: Optional[int] = Field(None, ge=0)
    allowed_years: Optional[List[int]] = None

    application_deadline: Optional[datetime] = None

    @field_validator("job_type")
    @classmethod
    def validate_job_type(cls, v):
        if v is not None and v not in JOB_TYPES:
            raise ValueError(f"job_type must be one of: {', '.join(JOB_TYPES)}")
        return v

    @field_validator("work_mode")
    @classmethod
    def validate_work_mode(cls, v):
        if v is not None and v not in WORK_MODES:
            raise ValueError(f"work_mode must be one of: {', '.join(WORK_MODES)}")
        return v


class JobCreate(JobFields):
    """Create a job posting (Recruiter)."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    ctc_min: float = Field(..., ge=0)
    ctc_max: float = Field(..., ge=0)
    application_deadline: datetime


class JobUpdate(JobFields):
    """Partial edit; only fields present in the request are applied."""


class JobReviewRequest(BaseModel):
    """TnP approve / reject body."""
    notes: Optional[str] = None
    reason: Optional[str] = None


class JobResponse(BaseModel):
    """Job posting as returned by the API."""
    id: UUID
    posted_by: UUID
    title: str
    description: str
    company_name: str
    location: str
    job_type: Optional[str] = None
    work_mode: Optional[str] = None
    designation: Optional[str] = None
    skills_required: List[str] = Field(default_factory=list)
    ctc_min: float
    ctc_max: float
    ctc_currency: str
    min_cgpa: Optional[float] = None
    allowed_courses: List[str] = Field(default_factory=list)
    max_backlogs: Optional[int] = None
    allowed_years: List[int] = Field(default_factory=list)
    application_deadline: datetime
    status: JobStatus
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    is_active: bool
    application_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Present only on student listings
    eligibility: Optional[EligibilityResponse] = None

    @model_validator(mode="before")
    @classmethod
    def empty_lists(cls, data: Any) -> Any:
        """JSON list columns may come back as NULL on older rows."""
        if hasattr(data, "__table__"):
            data = {column.name: getattr(data, column.name) for column in data.__table__.columns}
        if isinstance(data, dict):
            data = dict(data)
            for name in ("skills_required", "allowed_courses", "allowed_years"):
                if data.get(name) is None:
                    data[name] = []
        return data

    class Config:
        from_attributes = True
