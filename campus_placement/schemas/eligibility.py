"""Eligibility schemas."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ReasonResponse(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class EligibilityResponse(BaseModel):
    """Whether the student can apply, with every failed rule."""
    eligible: bool
    reasons: List[ReasonResponse] = Field(default_factory=list)
