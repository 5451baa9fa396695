"""
Entry points used by the presentation layer.

Every method returns a result envelope from ``core.responses``; service
exceptions become rejections carrying a reason code instead of propagating.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec

from campusvote.api.router import SessionRouter, View
from campusvote.core.errors import ElectionError
from campusvote.core.logging_config import get_logger
from campusvote.core.responses import rejection_from_error, success_response
from campusvote.models import Ballot
from campusvote.services import accounts, admin, results, voting
from campusvote.services.clock import TimeSource
from campusvote.services.countdown import get_window_status
from campusvote.store.base import ElectionStore

logger = get_logger(__name__)

P = ParamSpec("P")


def _as_result(
    func: Callable[P, Awaitable[dict[str, Any]]],
) -> Callable[P, Awaitable[dict[str, Any]]]:
    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> dict[str, Any]:
        try:
            return await func(*args, **kwargs)
        except ElectionError as e:
            logger.info(f"{func.__name__} rejected: {e.message}")
            return rejection_from_error(e)

    return wrapper


class ElectionWorkflow:
    """Election operations bound to one store and one clock."""

    def __init__(self, store: ElectionStore, clock: TimeSource) -> None:
        self.store = store
        self.clock = clock

    # ============================================
    # ACCOUNTS & SESSION
    # ============================================

    @_as_result
    async def register(self, request: accounts.RegistrationRequest) -> dict[str, Any]:
        user = await accounts.register_user(self.store, request)
        return success_response(
            user.public_dict(), "Registration successful! Please login with your credentials."
        )

    @_as_result
    async def login(
        self, session: SessionRouter, student_id: str, password: str
    ) -> dict[str, Any]:
        user = await accounts.authenticate(self.store, student_id, password)
        session.login(user)
        return success_response({"user": user.public_dict(), "view": session.view.value})

    @_as_result
    async def logout(self, session: SessionRouter) -> dict[str, Any]:
        return success_response({"view": session.logout().value})

    @_as_result
    async def navigate(self, session: SessionRouter, target: View) -> dict[str, Any]:
        return success_response({"view": session.navigate(target).value})

    # ============================================
    # VOTING
    # ============================================

    @_as_result
    async def window(self) -> dict[str, Any]:
        status = await get_window_status(self.store, self.clock.now_ms())
        return success_response(status.model_dump())

    @_as_result
    async def check_eligibility(self, student_id: str) -> dict[str, Any]:
        user = await accounts.get_user(self.store, student_id)
        status = await get_window_status(self.store, self.clock.now_ms())
        eligibility = voting.check_eligibility(user, status)
        return success_response(
            {"eligibility": eligibility.value, "window": status.model_dump()}
        )

    @_as_result
    async def get_slate(self, student_id: str) -> dict[str, Any]:
        user = await accounts.get_user(self.store, student_id)
        slate = await voting.get_slate(self.store, user.department)
        return success_response(
            {
                "department": user.department,
                "positions": [
                    {
                        "position": entry.position,
                        "candidates": [c.to_store() for c in entry.candidates],
                    }
                    for entry in slate
                ],
            }
        )

    @_as_result
    async def submit_ballot(
        self,
        student_id: str,
        ballot: Ballot,
        session: SessionRouter | None = None,
    ) -> dict[str, Any]:
        receipt = await voting.submit_ballot(
            self.store, student_id, ballot, self.clock.now_ms()
        )
        if session is not None and session.user is not None and session.user.student_id == student_id:
            # The ballot is committed; update the session copy without another store read
            if receipt["candidate_ids"]:
                session.update_user(
                    session.user.model_copy(
                        update={
                            "has_voted": True,
                            "voted_candidate_ids": set(receipt["candidate_ids"]),
                        }
                    )
                )
            if session.view is View.VOTING:
                session.navigate(View.DASHBOARD)
        return success_response(receipt, "Your vote has been successfully recorded!")

    # ============================================
    # RESULTS & ADMIN
    # ============================================

    @_as_result
    async def get_results(self, requester_id: str) -> dict[str, Any]:
        election_results = await results.get_results(self.store, requester_id)
        return success_response(election_results.model_dump(mode="json"))

    @_as_result
    async def end_voting(self, admin_id: str) -> dict[str, Any]:
        end_timestamp = await admin.end_voting_now(self.store, admin_id, self.clock.now_ms())
        return success_response({"voting_end_time": end_timestamp}, "Voting has ended")

    @_as_result
    async def restart_voting(self, admin_id: str) -> dict[str, Any]:
        end_timestamp = await admin.restart_voting(self.store, admin_id, self.clock.now_ms())
        return success_response({"voting_end_time": end_timestamp}, "Voting restarted")

    @_as_result
    async def toggle_voting(self, admin_id: str) -> dict[str, Any]:
        status = await admin.toggle_voting(self.store, admin_id, self.clock.now_ms())
        return success_response(status.model_dump())

    @_as_result
    async def participation(self, admin_id: str) -> dict[str, Any]:
        stats = await admin.get_participation_stats(self.store, admin_id, self.clock.now_ms())
        return success_response(stats)

    @_as_result
    async def students(self, admin_id: str) -> dict[str, Any]:
        return success_response(await admin.list_students(self.store, admin_id))
