"""Application model."""

import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import relationship

from campus_placement.db.base import Base
from campus_placement.utils.helpers import utcnow


class ApplicationStatus(str, enum.Enum):
    """Application status, in pipeline order."""

    APPLIED = "Applied"
    UNDER_REVIEW = "Under Review"
    SHORTLISTED = "Shortlisted"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


# At most one application per (student, job) may be outside this status
_ACTIVE_ONLY = text("status <> 'Withdrawn'")


class Application(Base):
    """Job application model. Rows are never deleted."""

    __tablename__ = "applications"
    __table_args__ = (
        Index(
            "uq_applications_student_job_active",
            "student_id",
            "job_id",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        Index("idx_applications_student_status", "student_id", "status"),
        Index("idx_applications_job_status", "job_id", "status"),
    )

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    status = Column(
        Enum(ApplicationStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        default=ApplicationStatus.APPLIED,
        nullable=False,
    )

    # Resume reference, opaque to the workflow
    resume_filename = Column(String(255), nullable=False)
    resume_original_name = Column(String(255), nullable=True)
    resume_mimetype = Column(String(100), nullable=True)
    resume_size = Column(Integer, nullable=True)
    resume_path = Column(String(500), nullable=True)

    applied_at = Column(DateTime, default=utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    withdrawn_at = Column(DateTime, nullable=True)

    # {"scheduled_date", "scheduled_time", "interview_mode", "meeting_link", "venue", "instructions", "round"}
    interview_details = Column(JSON, nullable=True)
    recruiter_notes = Column(String(1000), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    viewed_by_recruiter = Column(Boolean, default=False, nullable=False)
    viewed_at = Column(DateTime, nullable=True)

    # Relationships
    job = relationship("Job")
    student = relationship("User", foreign_keys=[student_id])

    def __repr__(self):
        return f"<Application {self.student_id} -> {self.job_id} ({self.status})>"
