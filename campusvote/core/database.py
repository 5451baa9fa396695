"""
Async PostgreSQL connection pool using asyncpg.

Only used when `DATABASE_URL` is configured; the election store then keeps its
key/value records in a single table shared by every process.
"""

import asyncpg
from contextlib import asynccontextmanager
from typing import AsyncIterator

from campusvote.core.config import Settings
from campusvote.core.logging_config import get_logger

logger = get_logger(__name__)

# Global connection pool
_pool: asyncpg.Pool | None = None


async def init_db_pool(settings: Settings) -> asyncpg.Pool:
    """
    Initialize database connection pool on startup.

    Call this from the application lifespan.
    """
    global _pool
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not configured")

    _pool = await asyncpg.create_pool(
        dsn=settings.DATABASE_URL,
        min_size=1,
        max_size=10,
        max_inactive_connection_lifetime=300,  # Close idle connections after 5 minutes
        timeout=30,  # Connection timeout in seconds
        command_timeout=60,  # Query timeout in seconds
    )
    logger.info(f"Database pool initialized: {_pool.get_size()} / {_pool.get_max_size()} connections")
    return _pool


async def close_db_pool() -> None:
    """
    Close database connection pool on shutdown.

    Call this from the application lifespan.
    """
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


@asynccontextmanager
async def get_db_connection() -> AsyncIterator[asyncpg.Connection]:
    """
    Get a database connection from the pool.

    Usage:
        async with get_db_connection() as conn:
            value = await conn.fetchval("SELECT value FROM election_store WHERE key = $1", key)
    """
    if not _pool:
        raise RuntimeError("Database pool not initialized. Call init_db_pool() first.")

    async with _pool.acquire() as connection:
        yield connection
