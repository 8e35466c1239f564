# tests/conftest.py
import os
import uuid
from datetime import timedelta

# Point settings at SQLite before anything imports campus_placement.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("SENTRY_DSN", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_placement.core.security import create_access_token
from campus_placement.db.base import Base
from campus_placement.db.session import build_engine, get_db
from campus_placement.models import (
    College,
    Job,
    JobStatus,
    Recruiter,
    Student,
    TnpOfficer,
    User,
    UserRole,
)
from campus_placement.services.notification_service import NotificationService
from campus_placement.utils.helpers import utcnow


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'placement.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def quiet_notifier(session_factory):
    """Notifier that writes nothing."""
    return NotificationService(session_factory, enabled=False)


class Seeder:
    """Creates users, profiles and jobs directly in the store."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _save(self, *rows):
        self.db.add_all(rows)
        await self.db.commit()
        for row in rows:
            await self.db.refresh(row)

    async def college(self, name=None) -> College:
        college = College(name=name or f"College {uuid.uuid4().hex[:6]}")
        await self._save(college)
        return college

    def _user(self, role: UserRole, name: str) -> User:
        return User(
            full_name=name,
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            role=role,
            is_active=True,
        )

    async def student(
        self,
        college: College,
        verified=True,
        cgpa=8.0,
        course="B.Tech",
        backlogs=0,
        year_of_completion=2026,
        name="Asha Student",
    ) -> User:
        user = self._user(UserRole.STUDENT, name)
        await self._save(user)
        profile = Student(
            user_id=user.id,
            college_id=college.id,
            course=course,
            cgpa=cgpa,
            backlogs=backlogs,
            year_of_completion=year_of_completion,
            registration_number=uuid.uuid4().hex[:12],
            is_verified=verified,
            verified_at=utcnow() if verified else None,
        )
        await self._save(profile)
        return user

    async def recruiter(self, company="Acme Corp", name="Ravi Recruiter") -> User:
        user = self._user(UserRole.RECRUITER, name)
        await self._save(user)
        await self._save(Recruiter(user_id=user.id, company_name=company))
        return user

    async def tnp(self, college: College, name="Meera TnP") -> User:
        user = self._user(UserRole.TNP, name)
        await self._save(user)
        await self._save(TnpOfficer(user_id=user.id, college_id=college.id))
        return user

    async def job(self, recruiter: User, status=JobStatus.APPROVED, **overrides) -> Job:
        values = dict(
            posted_by=recruiter.id,
            title="Backend Engineer",
            description="Build APIs",
            company_name="Acme Corp",
            location="Pune",
            ctc_min=600000,
            ctc_max=900000,
            application_deadline=utcnow() + timedelta(days=14),
            status=status,
            is_active=True,
            application_count=0,
        )
        values.update(overrides)
        job = Job(**values)
        await self._save(job)
        return job


@pytest.fixture
async def seed(session_factory):
    async with session_factory() as session:
        yield Seeder(session)


def job_payload(**overrides):
    payload = {
        "title": "Data Analyst",
        "description": "Dashboards and SQL",
        "company_name": "Acme Corp",
        "location": "Bengaluru",
        "ctc_min": 500000,
        "ctc_max": 800000,
        "application_deadline": utcnow() + timedelta(days=10),
    }
    payload.update(overrides)
    return payload


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
async def client(session_factory):
    from campus_placement.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()
