"""
Election store interface.

The store holds three key/value records, each a JSON text blob:

- ``users``: array of user records keyed by ``studentId``
- ``candidates``: array of candidate records keyed by ``id``
- ``votingEndTime``: stringified integer epoch-millisecond timestamp

All access goes through a transaction. Writes are staged on the transaction
and applied together when the ``async with`` block exits without error, so a
ballot submission either updates both the candidate tallies and the voter
record or neither.
"""

import json
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from pydantic import ValidationError as PydanticValidationError

from campusvote.core.errors import TransientIOError
from campusvote.core.logging_config import get_logger
from campusvote.models import Candidate, User

logger = get_logger(__name__)

USERS_KEY = "users"
CANDIDATES_KEY = "candidates"
VOTING_END_TIME_KEY = "votingEndTime"


class StoreTransaction(ABC):
    """Read/write view of the store inside one critical section."""

    def __init__(self) -> None:
        self._pending: dict[str, str] = {}

    @abstractmethod
    async def _read(self, key: str) -> str | None:
        """Read the committed value for a key."""

    @property
    def pending(self) -> dict[str, str]:
        return dict(self._pending)

    async def read(self, key: str) -> str | None:
        if key in self._pending:
            return self._pending[key]
        return await self._read(key)

    def write(self, key: str, value: str) -> None:
        self._pending[key] = value

    # ============================================
    # TYPED RECORDS
    # ============================================

    async def get_users(self) -> list[User]:
        raw = await self.read(USERS_KEY)
        if raw is None:
            return []
        try:
            return [User.model_validate(item) for item in json.loads(raw)]
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise TransientIOError("Stored users record is unreadable") from e

    async def get_user(self, student_id: str) -> User | None:
        for user in await self.get_users():
            if user.student_id == student_id:
                return user
        return None

    def put_users(self, users: list[User]) -> None:
        self.write(USERS_KEY, json.dumps([user.to_store() for user in users]))

    async def get_candidates(self) -> list[Candidate]:
        raw = await self.read(CANDIDATES_KEY)
        if raw is None:
            return []
        try:
            return [Candidate.model_validate(item) for item in json.loads(raw)]
        except (ValueError, TypeError, PydanticValidationError) as e:
            raise TransientIOError("Stored candidates record is unreadable") from e

    def put_candidates(self, candidates: list[Candidate]) -> None:
        self.write(
            CANDIDATES_KEY, json.dumps([candidate.to_store() for candidate in candidates])
        )

    async def has_candidates(self) -> bool:
        return await self.read(CANDIDATES_KEY) is not None

    async def get_voting_end_time(self) -> int | None:
        raw = await self.read(VOTING_END_TIME_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed {VOTING_END_TIME_KEY} value: {raw!r}")
            return None

    def put_voting_end_time(self, end_timestamp: int) -> None:
        self.write(VOTING_END_TIME_KEY, str(int(end_timestamp)))


class ElectionStore(ABC):
    """Repository for users, candidates and the voting end time."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[StoreTransaction]:
        """Open a single-writer critical section over the whole store."""

    async def open(self) -> None:
        """Prepare the backing storage."""

    async def close(self) -> None:
        """Release the backing storage."""

    async def get_users(self) -> list[User]:
        async with self.transaction() as tx:
            return await tx.get_users()

    async def get_user(self, student_id: str) -> User | None:
        async with self.transaction() as tx:
            return await tx.get_user(student_id)

    async def get_candidates(self) -> list[Candidate]:
        async with self.transaction() as tx:
            return await tx.get_candidates()

    async def get_voting_end_time(self) -> int | None:
        async with self.transaction() as tx:
            return await tx.get_voting_end_time()
