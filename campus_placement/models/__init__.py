"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from campus_placement.models.college import College
from campus_placement.models.user import User, UserRole

# Profiles
from campus_placement.models.student import PlacementStatus, Student
from campus_placement.models.recruiter import Recruiter, TnpOfficer

# Workflow
from campus_placement.models.job import Job, JobStatus
from campus_placement.models.application import Application, ApplicationStatus
from campus_placement.models.activity_log import ActivityLog
from campus_placement.models.notification import Notification

# Export all models
__all__ = [
    "College",
    "User",
    "UserRole",
    "Student",
    "PlacementStatus",
    "Recruiter",
    "TnpOfficer",
    "Job",
    "JobStatus",
    "Application",
    "ApplicationStatus",
    "ActivityLog",
    "Notification",
]
