"""API v1 routes."""

from fastapi import APIRouter

from campus_placement.api.v1 import applications, jobs, students

api_router = APIRouter()

# Include all route modules
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
api_router.include_router(applications.router, prefix="/applications", tags=["Applications"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])
