"""Database engine and per-request sessions."""
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.core.config import settings
from app.db.models import Base

logger = logging.getLogger(__name__)

ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def to_async_url(url: str) -> str:
    """Rewrite a plain database URL to its async driver (asyncpg, aiosqlite)."""
    for prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix):]
    return url


engine = create_async_engine(to_async_url(settings.database_url), echo=False)

# Orders are turned into snapshots after commit, so loaded rows must not expire
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Create missing tables. Alembic owns schema changes beyond that."""
    logger.info("[DB] Creating database tables if missing")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    """One session per request or websocket connection."""
    async with AsyncSessionLocal() as session:
        yield session
