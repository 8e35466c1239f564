"""User model."""

import enum

from sqlalchemy import Boolean, Column, Enum, String
from sqlalchemy.orm import relationship

from campus_placement.db.base import Base


class UserRole(str, enum.Enum):
    """User roles."""

    STUDENT = "Student"
    RECRUITER = "Recruiter"
    TNP = "TnP"


class User(Base):
    """Identity shared by students, recruiters and TnP officers."""

    __tablename__ = "users"

    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    mobile_number = Column(String(20), nullable=True)
    role = Column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    profile_avatar = Column(String(500), nullable=True)

    # Relationships (one of the three is populated, depending on role)
    student_profile = relationship(
        "Student", back_populates="user", uselist=False, foreign_keys="Student.user_id"
    )
    recruiter_profile = relationship("Recruiter", back_populates="user", uselist=False)
    tnp_profile = relationship("TnpOfficer", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
