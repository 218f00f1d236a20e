"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy + asyncpg.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from talent_pipeline.core.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pool and connect timeouts for the configured driver."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"timeout": settings.DB_CONNECT_TIMEOUT_SECONDS}}
    return {
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
        "pool_pre_ping": True,
        "connect_args": {"timeout": settings.DB_CONNECT_TIMEOUT_SECONDS},
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # prints SQL when DEBUG=True
    future=True,
    **engine_options(settings.DATABASE_URL),
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,  # keeps data accessible after commit
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for one request.

    Services commit their own units of work; anything left pending when the
    request fails is rolled back here.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
