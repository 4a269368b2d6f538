# =============================================================================
# Database Engine & Session Management
# =============================================================================
#
# Async SQLAlchemy over asyncpg. All database access goes through sessions
# from async_session_factory:
#
# 1. Dependency-injected (get_async_session via Depends):
#    commits when the request handler returns, rolls back on exception.
#
# 2. Self-managed (async_session_factory() directly):
#    used by the generation pipeline and template ingestion, which run
#    outside a request's dependency lifecycle (SSE streams, scripts).
#    These MUST commit explicitly.
# =============================================================================

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Async Engine
# ---------------------------------------------------------------------------
# echo follows debug so SQL is visible during development.
# ---------------------------------------------------------------------------
async_engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=5,
    max_overflow=10,
)

# expire_on_commit=False: attributes stay readable after commit, outside
# the session, which async code needs.
async_session_factory = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The session commits when the handler returns and rolls back if it
    raises.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create the pgvector extension and all tables if missing.

    Called once at application startup. Schema changes beyond adding
    tables need a migration.
    """
    from app.db.models import Base

    async with async_engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")
