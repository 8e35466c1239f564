"""Recruiter and TnP officer profile models."""

from sqlalchemy import Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from campus_placement.db.base import Base


class Recruiter(Base):
    """Recruiter profile. Recruiters need no verification to post jobs."""

    __tablename__ = "recruiters"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False)
    company_name = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=True)
    designation = Column(String(100), nullable=True)

    user = relationship("User", back_populates="recruiter_profile")


class TnpOfficer(Base):
    """Training & Placement officer attached to one college."""

    __tablename__ = "tnp_officers"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False)
    college_id = Column(Uuid(as_uuid=True), ForeignKey("colleges.id"), nullable=False, index=True)
    designation = Column(String(100), nullable=True)
    employee_id = Column(String(50), nullable=True)

    user = relationship("User", back_populates="tnp_profile")
    college = relationship("College")
