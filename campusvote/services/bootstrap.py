"""
Idempotent store initialization.

Run once when the application starts: seeds the candidate list, the default
administrator and the first voting window, leaving any existing record alone.
"""

from typing import Any

from campusvote.core.config import settings
from campusvote.core.logging_config import get_logger
from campusvote.core.security import hash_password
from campusvote.models import Candidate, User
from campusvote.store.base import ElectionStore

logger = get_logger(__name__)

SEED_CANDIDATES = [
    Candidate(
        id=1,
        name="Aswith",
        department="Computer Science",
        position="President",
        photo_url="https://i.postimg.cc/85Q4K6Mh/1.jpg",
    ),
    Candidate(id=2, name="Bob Smith", department="Computer Science", position="Vice President"),
    Candidate(id=3, name="Carol Brown", department="Engineering", position="President"),
    Candidate(id=4, name="David Wilson", department="Engineering", position="Vice President"),
    Candidate(id=5, name="Eva Davis", department="Business", position="President"),
    Candidate(id=6, name="Frank Miller", department="Business", position="Vice President"),
]


def default_admin() -> User:
    return User(
        student_id=settings.ADMIN_STUDENT_ID,
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        department=settings.ADMIN_DEPARTMENT,
        is_admin=True,
        terms_accepted=True,
    )


async def initialize_store(
    store: ElectionStore,
    now_ms: int,
    candidates: list[Candidate] | None = None,
) -> dict[str, Any]:
    """Write whichever of the candidates, admin and end time are missing."""
    seeded = {"candidates": False, "admin": False, "voting_end_time": False}

    async with store.transaction() as tx:
        if not await tx.has_candidates():
            tx.put_candidates(list(candidates if candidates is not None else SEED_CANDIDATES))
            seeded["candidates"] = True

        users = await tx.get_users()
        if not any(user.student_id == settings.ADMIN_STUDENT_ID for user in users):
            tx.put_users([*users, default_admin()])
            seeded["admin"] = True

        if await tx.get_voting_end_time() is None:
            tx.put_voting_end_time(now_ms + settings.voting_duration_ms)
            seeded["voting_end_time"] = True

    created = [name for name, done in seeded.items() if done]
    if created:
        logger.info(f"Initialized election store: {', '.join(created)}")
    else:
        logger.debug("Election store already initialized")
    return seeded
