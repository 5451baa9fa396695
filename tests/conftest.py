"""
Pytest configuration and fixtures for the campus election tests.

This module provides:
- Test environment settings
- A seeded in-memory election store
- A controllable clock
- Factories for student accounts
"""

import os
from collections.abc import Awaitable, Callable

import pytest

from campusvote.api.workflow import ElectionWorkflow
from campusvote.models import User
from campusvote.services.bootstrap import initialize_store
from campusvote.store.memory import MemoryElectionStore

# 2023-11-14T22:13:20Z
NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


class FixedClock:
    """Clock whose time only moves when a test says so."""

    def __init__(self, now_ms: int = NOW) -> None:
        self.value = now_ms

    def now_ms(self) -> int:
        return self.value

    def advance(self, milliseconds: int) -> None:
        self.value += milliseconds


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    test_env = {
        "ENVIRONMENT": "test",
        "VOTING_DURATION_HOURS": "3",
        "UNIVERSITY_EMAIL_DOMAIN": "mallareddyuniversity.ac.in",
    }

    old_values = {}
    for key, value in test_env.items():
        old_values[key] = os.environ.get(key)
        os.environ[key] = value

    from campusvote.core.config import settings

    settings.ENVIRONMENT = "test"
    settings.VOTING_DURATION_HOURS = 3
    settings.UNIVERSITY_EMAIL_DOMAIN = "mallareddyuniversity.ac.in"
    settings.DATABASE_URL = None

    yield

    for key, old_value in old_values.items():
        if old_value is not None:
            os.environ[key] = old_value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
async def store() -> MemoryElectionStore:
    """Memory store with seed candidates, default admin and a 3h window from NOW."""
    election_store = MemoryElectionStore()
    await initialize_store(election_store, NOW)
    return election_store


@pytest.fixture
def make_student(store) -> Callable[..., Awaitable[User]]:
    """Insert a student record directly, skipping password hashing."""

    async def _make_student(
        student_id: str,
        department: str = "Engineering",
        name: str | None = None,
    ) -> User:
        user = User(
            student_id=student_id,
            name=name or f"Student {student_id}",
            email=f"{student_id.lower()}@mallareddyuniversity.ac.in",
            password_hash="unused-in-this-test",
            department=department,
            terms_accepted=True,
        )
        async with store.transaction() as tx:
            tx.put_users([*await tx.get_users(), user])
        return user

    return _make_student


@pytest.fixture
def workflow(store, clock) -> ElectionWorkflow:
    return ElectionWorkflow(store, clock)
