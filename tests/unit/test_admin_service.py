"""Unit tests for administrator controls."""

import pytest

from campusvote.core.errors import AccessDeniedError, IneligibleError
from campusvote.models import Eligibility
from campusvote.services import admin as admin_service
from campusvote.services import voting as voting_service

from conftest import HOUR_MS, NOW

BALLOT = {"President": 3, "Vice President": 4}


@pytest.mark.asyncio
async def test_end_voting_now_closes_window(store, make_student):
    """Test End Voting Now rejects every later ballot with window_closed."""
    await make_student("ENG001")
    await make_student("ENG002")

    end = await admin_service.end_voting_now(store, "ADMIN001", NOW + 1000)

    assert end == NOW + 1000
    assert await store.get_voting_end_time() <= NOW + 1000
    for student_id in ("ENG001", "ENG002"):
        with pytest.raises(IneligibleError) as exc_info:
            await voting_service.submit_ballot(store, student_id, BALLOT, NOW + 1000)
        assert exc_info.value.reason is Eligibility.WINDOW_CLOSED


@pytest.mark.asyncio
async def test_end_voting_twice_stays_ended(store):
    await admin_service.end_voting_now(store, "ADMIN001", NOW)
    await admin_service.end_voting_now(store, "ADMIN001", NOW + 5000)

    stats = await admin_service.get_participation_stats(store, "ADMIN001", NOW + 5000)
    assert stats["status"] == "CLOSED"


@pytest.mark.asyncio
async def test_restart_and_end_keep_tallies(store, make_student):
    await make_student("ENG001")
    await voting_service.submit_ballot(store, "ENG001", BALLOT, NOW)

    await admin_service.end_voting_now(store, "ADMIN001", NOW + 1)
    end = await admin_service.restart_voting(store, "ADMIN001", NOW + 2)

    assert end == NOW + 2 + 3 * HOUR_MS
    counts = {c.id: c.vote_count for c in await store.get_candidates()}
    assert counts[3] == 1 and counts[4] == 1
    assert (await store.get_user("ENG001")).voted_candidate_ids == {3, 4}


@pytest.mark.asyncio
async def test_toggle_voting(store):
    status = await admin_service.toggle_voting(store, "ADMIN001", NOW)
    assert status.is_expired is True

    status = await admin_service.toggle_voting(store, "ADMIN001", NOW + 10)
    assert status.is_expired is False
    assert status.milliseconds_remaining == 3 * HOUR_MS


@pytest.mark.asyncio
async def test_window_control_requires_admin(store, make_student):
    await make_student("ENG001")
    before = await store.get_voting_end_time()

    with pytest.raises(AccessDeniedError):
        await admin_service.end_voting_now(store, "ENG001", NOW)
    with pytest.raises(AccessDeniedError):
        await admin_service.restart_voting(store, "ENG001", NOW)

    assert await store.get_voting_end_time() == before


@pytest.mark.asyncio
async def test_participation_stats(store, make_student):
    for student_id in ("ENG001", "ENG002", "ENG003"):
        await make_student(student_id)
    await voting_service.submit_ballot(store, "ENG001", BALLOT, NOW)

    stats = await admin_service.get_participation_stats(store, "ADMIN001", NOW)

    assert stats["total_users"] == 3
    assert stats["voted_users"] == 1
    assert stats["participation"] == 33.3
    assert stats["status"] == "ACTIVE"
    assert stats["time_remaining"] == "03:00:00"


@pytest.mark.asyncio
async def test_participation_without_students(store):
    stats = await admin_service.get_participation_stats(store, "ADMIN001", NOW)
    assert stats["total_users"] == 0
    assert stats["participation"] == 0


@pytest.mark.asyncio
async def test_list_students_hides_admin_and_hashes(store, make_student):
    await make_student("ENG001")

    students = await admin_service.list_students(store, "ADMIN001")

    assert [s["studentId"] for s in students] == ["ENG001"]
    assert "passwordHash" not in students[0]


@pytest.mark.asyncio
async def test_list_students_requires_admin(store, make_student):
    await make_student("ENG001")

    with pytest.raises(AccessDeniedError):
        await admin_service.list_students(store, "ENG001")
