"""
Eligibility Evaluator
Decides whether a student may apply to a job right now.

The same function gates the apply transition and annotates job listings,
so what a student is shown always matches what the backend enforces.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from campus_placement.models.application import ApplicationStatus
from campus_placement.models.job import JobStatus
from campus_placement.models.student import PlacementStatus
from campus_placement.utils.helpers import to_naive_utc, utcnow


class ReasonCode(str, enum.Enum):
    UNVERIFIED = "Unverified"
    JOB_NOT_APPROVED = "JobNotApproved"
    JOB_INACTIVE = "JobInactive"
    DEADLINE_PASSED = "DeadlinePassed"
    ALREADY_APPLIED = "AlreadyApplied"
    ALREADY_PLACED = "AlreadyPlaced"
    CGPA_TOO_LOW = "CgpaTooLow"
    COURSE_NOT_ELIGIBLE = "CourseNotEligible"
    TOO_MANY_BACKLOGS = "TooManyBacklogs"
    YEAR_NOT_ELIGIBLE = "YearNotEligible"


# Reasons that concern the student's standing rather than the job criteria
STANDING_REASONS = frozenset({ReasonCode.UNVERIFIED, ReasonCode.ALREADY_PLACED})


@dataclass(frozen=True)
class Reason:
    """One failed eligibility rule."""
    code: ReasonCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


@dataclass(frozen=True)
class EligibilityResult:
    """Result of an eligibility check; eligible iff no reasons."""
    reasons: List[Reason] = field(default_factory=list)

    @property
    def eligible(self) -> bool:
        return not self.reasons

    @property
    def codes(self) -> List[ReasonCode]:
        return [r.code for r in self.reasons]

    def has(self, code: ReasonCode) -> bool:
        return code in self.codes

    def to_dict(self) -> Dict[str, Any]:
        return {"eligible": self.eligible, "reasons": [r.to_dict() for r in self.reasons]}


def can_apply(
    student: Any,
    job: Any,
    existing_application: Any = None,
    now: Optional[datetime] = None,
) -> EligibilityResult:
    """
    Evaluate every rule independently and collect all failures.

    Args:
        student: Student profile (ORM row or any object with the same attributes)
        job: Job posting
        existing_application: The student's current application to this job, if any
        now: Evaluation instant (naive UTC); defaults to the current time

    Returns:
        EligibilityResult listing every failed rule
    """
    now = to_naive_utc(now) or utcnow()
    reasons: List[Reason] = []

    if not student.is_verified:
        reasons.append(Reason(
            ReasonCode.UNVERIFIED,
            "Your profile must be verified by your TnP officer before applying",
        ))

    if student.placement_status == PlacementStatus.PLACED:
        reasons.append(Reason(ReasonCode.ALREADY_PLACED, "Placed students cannot apply for new jobs"))

    if job.status != JobStatus.APPROVED:
        reasons.append(Reason(
            ReasonCode.JOB_NOT_APPROVED,
            "Job is not approved yet",
            {"status": _value(job.status)},
        ))

    if not job.is_active:
        reasons.append(Reason(ReasonCode.JOB_INACTIVE, "Job is no longer active"))

    deadline = to_naive_utc(job.application_deadline)
    if deadline is None or now >= deadline:
        reasons.append(Reason(
            ReasonCode.DEADLINE_PASSED,
            "Application deadline has passed",
            {"deadline": deadline.isoformat() if deadline else None},
        ))

    if existing_application is not None and existing_application.status != ApplicationStatus.WITHDRAWN:
        reasons.append(Reason(
            ReasonCode.ALREADY_APPLIED,
            "You have already applied to this job",
            {"application_id": str(existing_application.id), "status": _value(existing_application.status)},
        ))

    if job.min_cgpa is not None:
        if student.cgpa is None or student.cgpa < job.min_cgpa:
            reasons.append(Reason(
                ReasonCode.CGPA_TOO_LOW,
                f"Minimum CGPA required is {job.min_cgpa}",
                {"required": job.min_cgpa, "actual": student.cgpa},
            ))

    if job.allowed_courses:
        if student.course not in job.allowed_courses:
            reasons.append(Reason(
                ReasonCode.COURSE_NOT_ELIGIBLE,
                "Your course is not eligible for this job",
                {"allowed": list(job.allowed_courses), "actual": student.course},
            ))

    if job.max_backlogs is not None:
        backlogs = student.backlogs or 0
        if backlogs > job.max_backlogs:
            reasons.append(Reason(
                ReasonCode.TOO_MANY_BACKLOGS,
                f"At most {job.max_backlogs} backlogs are allowed",
                {"allowed": job.max_backlogs, "actual": backlogs},
            ))

    if job.allowed_years:
        if student.year_of_completion not in job.allowed_years:
            reasons.append(Reason(
                ReasonCode.YEAR_NOT_ELIGIBLE,
                "Your year of completion is not eligible for this job",
                {"allowed": list(job.allowed_years), "actual": student.year_of_completion},
            ))

    return EligibilityResult(reasons=reasons)


def _value(status: Any) -> Any:
    return status.value if isinstance(status, enum.Enum) else status
