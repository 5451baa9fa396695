"""
PostgreSQL-backed election store.

Records live in one key/value table. Every transaction runs inside a database
transaction that first takes a transaction-scoped advisory lock, so writers in
different processes are serialized and a ballot's writes commit together.
"""

import re
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import asyncpg

from campusvote.core.config import settings
from campusvote.core.database import get_db_connection
from campusvote.core.errors import TransientIOError
from campusvote.core.logging_config import get_logger
from campusvote.store.base import ElectionStore, StoreTransaction

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

ConnectionFactory = Callable[[], AbstractAsyncContextManager[asyncpg.Connection]]


class _PostgresTransaction(StoreTransaction):
    def __init__(self, conn: asyncpg.Connection, table: str) -> None:
        super().__init__()
        self._conn = conn
        self._table = table

    async def _read(self, key: str) -> str | None:
        return await self._conn.fetchval(
            f"SELECT value FROM {self._table} WHERE key = $1",
            key,
        )


class PostgresElectionStore(ElectionStore):
    """Store shared by every process connected to the same database."""

    def __init__(
        self,
        connect: ConnectionFactory = get_db_connection,
        table: str | None = None,
    ) -> None:
        table = table or settings.STORE_TABLE
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid store table name: {table!r}")
        self._connect = connect
        self._table = table

    async def open(self) -> None:
        """Create the key/value table if it does not exist."""
        try:
            async with self._connect() as conn:
                await conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {self._table} (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    )
                    """
                )
        except _STORE_ERRORS as e:
            raise TransientIOError("Could not prepare the election store") from e
        logger.info(f"Election store table ready: {self._table}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        try:
            async with self._connect() as conn:
                async with conn.transaction():
                    await conn.execute(
                        "SELECT pg_advisory_xact_lock(hashtext($1))", self._table
                    )
                    tx = _PostgresTransaction(conn, self._table)
                    yield tx
                    for key, value in tx.pending.items():
                        await conn.execute(
                            f"""
                            INSERT INTO {self._table} (key, value)
                            VALUES ($1, $2)
                            ON CONFLICT (key) DO UPDATE
                            SET value = EXCLUDED.value, updated_at = NOW()
                            """,
                            key,
                            value,
                        )
        except _STORE_ERRORS as e:
            logger.error(f"Election store transaction failed: {e}")
            raise TransientIOError("Could not reach the election store") from e
