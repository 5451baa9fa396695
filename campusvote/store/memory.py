"""
In-process election store.

Transactions are serialized with an ``asyncio.Lock``, which only protects
callers sharing this process and event loop. Deployments with several
processes must use the PostgreSQL store instead.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from campusvote.store.base import ElectionStore, StoreTransaction


class _MemoryTransaction(StoreTransaction):
    def __init__(self, data: dict[str, str]) -> None:
        super().__init__()
        self._data = data

    async def _read(self, key: str) -> str | None:
        return self._data.get(key)


class MemoryElectionStore(ElectionStore):
    """Dictionary-backed store for a single process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        async with self._lock:
            tx = _MemoryTransaction(self._data)
            yield tx
            # Single update so readers never see half of a transaction
            self._data.update(tx.pending)

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw key/value records."""
        return dict(self._data)
