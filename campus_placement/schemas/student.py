"""
Pydantic schemas for Student APIs
Profile edits and TnP verification
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_placement.models.student import PlacementStatus
from campus_placement.utils.constants import REQUIRED_PROFILE_FIELDS


class StudentProfileUpdate(BaseModel):
    """Student self-service edit. Omitted fields are left untouched."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    mobile_number: Optional[str] = Field(None, max_length=20)
    profile_avatar: Optional[str] = Field(None, max_length=500)

    course: Optional[str] = Field(None, min_length=1, max_length=100)
    college_id: Optional[UUID] = None
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    backlogs: Optional[int] = Field(None, ge=0)
    year_of_completion: Optional[int] = None
    registration_number: Optional[str] = Field(None, max_length=50)
    tenth_marks: Optional[Dict[str, Any]] = None
    twelfth_marks: Optional[Dict[str, Any]] = None
    last_semester_marksheet: Optional[str] = Field(None, max_length=500)
    area_of_interest: Optional[List[str]] = None

    @field_validator("year_of_completion")
    @classmethod
    def validate_year(cls, v):
        """Validate year of completion is reasonable"""
        if v is not None and (v < 1950 or v > 2100):
            raise ValueError("Year of completion must be between 1950 and 2100")
        return v

    @model_validator(mode="after")
    def required_fields_not_null(self):
        nulls = sorted(name for name in self.model_fields_set & REQUIRED_PROFILE_FIELDS if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be cleared: {', '.join(nulls)}")
        return self


class VerificationRequest(BaseModel):
    """TnP grant or revoke."""
    verified: bool
    note: Optional[str] = Field(None, max_length=1000)


class StudentResponse(BaseModel):
    user_id: UUID
    college_id: UUID
    course: str
    cgpa: Optional[float] = None
    backlogs: int = 0
    year_of_completion: Optional[int] = None
    registration_number: Optional[str] = None
    tenth_marks: Optional[Dict[str, Any]] = None
    twelfth_marks: Optional[Dict[str, Any]] = None
    last_semester_marksheet: Optional[str] = None
    area_of_interest: Optional[List[str]] = None
    is_verified: bool
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None
    verification_note: Optional[str] = None
    placement_status: PlacementStatus

    class Config:
        from_attributes = True


class ProfileUpdateResponse(BaseModel):
    student: StudentResponse
    changed: List[str] = Field(default_factory=list)
    verification_revoked: bool = False

    class Config:
        from_attributes = True
