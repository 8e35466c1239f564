"""
API Dependencies
Database session, current user and service wiring for API endpoints.
"""

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus_placement.config import settings
from campus_placement.core.security import get_current_user
from campus_placement.db.session import get_db
from campus_placement.services.application_lifecycle import ApplicationLifecycleService
from campus_placement.services.job_lifecycle import JobLifecycleService
from campus_placement.services.verification import VerificationService

__all__ = [
    "get_db",
    "get_current_user",
    "Pagination",
    "get_job_service",
    "get_application_service",
    "get_verification_service",
]


class Pagination:
    """Common ``page``/``size`` query parameters."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        size: int = Query(
            settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"
        ),
    ):
        self.page = page
        self.size = size


def get_job_service(db: AsyncSession = Depends(get_db)) -> JobLifecycleService:
    return JobLifecycleService(db)


def get_application_service(db: AsyncSession = Depends(get_db)) -> ApplicationLifecycleService:
    return ApplicationLifecycleService(db)


def get_verification_service(db: AsyncSession = Depends(get_db)) -> VerificationService:
    return VerificationService(db)
