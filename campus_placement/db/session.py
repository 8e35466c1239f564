"""Database session and engine configuration."""

from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from campus_placement.config import settings
from campus_placement.db.base import Base

logger = structlog.get_logger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


# Create async engine
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session.

    Services commit their own transactions; anything left open when the
    request fails is rolled back here.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = None):
    """Initialize database tables."""
    # Import all models to register them
    from campus_placement import models  # noqa: F401

    bind = bind or engine
    async with bind.begin() as conn:
        # Create tables (in production, use Alembic migrations)
        if settings.DEBUG or bind.url.get_backend_name() == "sqlite":
            await conn.run_sync(Base.metadata.create_all)
            logger.info("database_tables_created", backend=bind.url.get_backend_name())
