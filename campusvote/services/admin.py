"""Administrator controls: voting window and participation."""

from typing import Any

from campusvote.core.config import settings
from campusvote.core.logging_config import audit_logger
from campusvote.services.countdown import WindowStatus, evaluate_window
from campusvote.services.results import require_admin
from campusvote.store.base import ElectionStore


# ============================================
# VOTING WINDOW
# ============================================


async def _set_end_time(
    store: ElectionStore, admin_id: str, end_timestamp: int, action: str
) -> int:
    await require_admin(store, admin_id, "voting window")
    async with store.transaction() as tx:
        tx.put_voting_end_time(end_timestamp)
    audit_logger.log_window_change(admin_id, action, end_timestamp)
    return end_timestamp


async def end_voting_now(store: ElectionStore, admin_id: str, now_ms: int) -> int:
    """Close voting immediately. Tallies and cast votes are untouched."""
    return await _set_end_time(store, admin_id, now_ms, "ended")


async def restart_voting(store: ElectionStore, admin_id: str, now_ms: int) -> int:
    """Open a fresh voting window of the configured duration."""
    return await _set_end_time(
        store, admin_id, now_ms + settings.voting_duration_ms, "restarted"
    )


async def toggle_voting(store: ElectionStore, admin_id: str, now_ms: int) -> WindowStatus:
    """Restart an expired window, otherwise end the running one."""
    window = evaluate_window(now_ms, await store.get_voting_end_time())
    if window.is_expired:
        end_timestamp = await restart_voting(store, admin_id, now_ms)
    else:
        end_timestamp = await end_voting_now(store, admin_id, now_ms)
    return evaluate_window(now_ms, end_timestamp)


# ============================================
# PARTICIPATION
# ============================================


async def get_participation_stats(
    store: ElectionStore, admin_id: str, now_ms: int
) -> dict[str, Any]:
    """Registered students, how many voted, and the election status."""
    await require_admin(store, admin_id, "participation statistics")

    students = [user for user in await store.get_users() if not user.is_admin]
    total_users = len(students)
    voted_users = sum(1 for user in students if user.has_voted)
    participation = (voted_users / total_users * 100) if total_users > 0 else 0
    window = evaluate_window(now_ms, await store.get_voting_end_time())

    return {
        "total_users": total_users,
        "voted_users": voted_users,
        "participation": round(participation, 1),
        "status": "CLOSED" if window.is_expired else "ACTIVE",
        "time_remaining": window.formatted,
    }


async def list_students(store: ElectionStore, admin_id: str) -> list[dict[str, Any]]:
    """All registered students, without password hashes."""
    await require_admin(store, admin_id, "student list")
    return [user.public_dict() for user in await store.get_users() if not user.is_admin]
