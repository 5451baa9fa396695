"""Unit tests for store initialization."""

import pytest

from campusvote.models import Candidate
from campusvote.services.bootstrap import SEED_CANDIDATES, initialize_store
from campusvote.store.memory import MemoryElectionStore

from conftest import HOUR_MS, NOW


@pytest.mark.asyncio
async def test_initialize_empty_store():
    store = MemoryElectionStore()

    seeded = await initialize_store(store, NOW)

    assert seeded == {"candidates": True, "admin": True, "voting_end_time": True}
    assert [c.id for c in await store.get_candidates()] == [1, 2, 3, 4, 5, 6]
    admin = await store.get_user("ADMIN001")
    assert admin.is_admin is True
    assert admin.department == "Administration"
    assert await store.get_voting_end_time() == NOW + 3 * HOUR_MS


@pytest.mark.asyncio
async def test_initialize_is_idempotent(store):
    async with store.transaction() as tx:
        candidates = await tx.get_candidates()
        candidates[0] = candidates[0].model_copy(update={"vote_count": 7})
        tx.put_candidates(candidates)
        tx.put_voting_end_time(NOW + 42)
    before = store.snapshot()

    seeded = await initialize_store(store, NOW + HOUR_MS)

    assert seeded == {"candidates": False, "admin": False, "voting_end_time": False}
    assert store.snapshot() == before


@pytest.mark.asyncio
async def test_initialize_restores_missing_admin_only():
    store = MemoryElectionStore({"users": "[]", "votingEndTime": str(NOW)})

    seeded = await initialize_store(store, NOW)

    assert seeded == {"candidates": True, "admin": True, "voting_end_time": False}
    assert await store.get_voting_end_time() == NOW


@pytest.mark.asyncio
async def test_initialize_with_custom_candidates():
    store = MemoryElectionStore()
    custom = [Candidate(id=9, name="Solo", department="Law", position="President")]

    await initialize_store(store, NOW, candidates=custom)

    assert await store.get_candidates() == custom


def test_seed_candidates_start_without_votes():
    assert all(c.vote_count == 0 for c in SEED_CANDIDATES)
    assert len({c.id for c in SEED_CANDIDATES}) == len(SEED_CANDIDATES)
