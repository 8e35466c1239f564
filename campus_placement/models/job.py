"""Job posting model."""

import enum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from campus_placement.db.base import Base


class JobStatus(str, enum.Enum):
    """Posting review status."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Job(Base):
    """Job posting model.

    ``application_count`` is written only by the consistency coordinator,
    always as an SQL expression.
    """

    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("application_count >= 0", name="ck_jobs_application_count_non_negative"),
        CheckConstraint("ctc_min < ctc_max", name="ck_jobs_ctc_range"),
        Index("idx_jobs_status_active", "status", "is_active"),
        Index("idx_jobs_deadline", "application_deadline"),
    )

    posted_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Posting metadata
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    company_name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    job_type = Column(String(50), default="Full-time")  # Full-time, Internship, Part-time
    work_mode = Column(String(50), default="Work from Office")
    designation = Column(String(100), nullable=True)
    skills_required = Column(JSON, default=list)

    # CTC range
    ctc_min = Column(Float, nullable=False)
    ctc_max = Column(Float, nullable=False)
    ctc_currency = Column(String(10), default="INR", nullable=False)

    # Eligibility criteria (all optional)
    min_cgpa = Column(Float, nullable=True)
    allowed_courses = Column(JSON, default=list)
    max_backlogs = Column(Integer, nullable=True)
    allowed_years = Column(JSON, default=list)

    application_deadline = Column(DateTime, nullable=False)

    # Review
    status = Column(
        Enum(JobStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        default=JobStatus.PENDING,
        nullable=False,
    )
    approved_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)

    # Stats
    application_count = Column(Integer, default=0, nullable=False)

    # Relationships
    recruiter = relationship("User", foreign_keys=[posted_by])

    def __repr__(self):
        return f"<Job {self.title} ({self.status})>"
