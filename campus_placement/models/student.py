"""Student profile model."""

import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from campus_placement.db.base import Base


class PlacementStatus(str, enum.Enum):
    PLACED = "Placed"
    NOT_PLACED = "Not Placed"


class Student(Base):
    """Student profile model.

    ``is_verified`` is owned by the verification service: TnP grants it,
    edits to trust-sensitive fields revoke it.
    """

    __tablename__ = "students"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False)
    college_id = Column(Uuid(as_uuid=True), ForeignKey("colleges.id"), nullable=False, index=True)

    # Academic record
    course = Column(String(100), nullable=False)
    cgpa = Column(Float, nullable=True)
    backlogs = Column(Integer, default=0, nullable=False)
    year_of_completion = Column(Integer, nullable=True)
    registration_number = Column(String(50), unique=True, nullable=True)

    # Documents, opaque references
    tenth_marks = Column(JSON, default=dict)  # {"percentage": 91.2, "marksheet": "path"}
    twelfth_marks = Column(JSON, default=dict)
    last_semester_marksheet = Column(String(500), nullable=True)

    area_of_interest = Column(JSON, default=list)

    # Verification
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    verification_note = Column(Text, nullable=True)

    placement_status = Column(
        Enum(PlacementStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        default=PlacementStatus.NOT_PLACED,
        nullable=False,
    )

    # Relationships
    user = relationship("User", back_populates="student_profile", foreign_keys=[user_id])
    college = relationship("College")

    def __repr__(self):
        return f"<Student {self.user_id} verified={self.is_verified}>"
