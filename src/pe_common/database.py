"""Async engine and session factory.

Services own their transactions: every mutating operation commits or rolls
back the session it is handed. The request-scoped session below only
guarantees the connection is returned to the pool.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

logger = logging.getLogger(__name__)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

# expire_on_commit=False: domain objects are built from rows before commit
# and read again afterwards when the response is assembled.
session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request."""
    async with session_factory() as session:
        yield session


async def check_database() -> None:
    """Fail fast at startup when PostgreSQL is unreachable or unmigrated."""
    async with engine.connect() as conn:
        count = (await conn.execute(text("SELECT COUNT(*) FROM platform_state"))).scalar_one()
    if count != 1:
        logger.error("platform_state has %d rows, expected exactly 1", count)
