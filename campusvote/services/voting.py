"""Voting service functions: eligibility, department slates and ballots."""

import hashlib
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from campusvote.core.errors import IneligibleError, NotFoundError, ValidationError
from campusvote.core.logging_config import audit_logger, get_logger
from campusvote.models import Ballot, Candidate, Eligibility, User
from campusvote.services.countdown import WindowStatus, evaluate_window
from campusvote.store.base import ElectionStore

logger = get_logger(__name__)


class SlatePosition(BaseModel):
    """Candidates standing for one position in a department."""

    position: str
    candidates: list[Candidate]


# ============================================
# ELIGIBILITY
# ============================================


def check_eligibility(user: User, window: WindowStatus) -> Eligibility:
    """Decide whether a user may vote now. Admins never may."""
    if user.is_admin:
        return Eligibility.NOT_ELIGIBLE
    if user.has_voted:
        return Eligibility.ALREADY_VOTED
    if window.is_expired:
        return Eligibility.WINDOW_CLOSED
    return Eligibility.ELIGIBLE


# ============================================
# SLATES
# ============================================


def resolve_slate(candidates: list[Candidate], department: str) -> list[SlatePosition]:
    """
    Group a department's candidates by position.

    Positions appear in first-seen order and candidates keep their seed order
    within a position. The department match is case-insensitive.
    """
    wanted = department.strip().lower()
    slate: dict[str, list[Candidate]] = {}
    for candidate in candidates:
        if candidate.department.strip().lower() != wanted:
            continue
        slate.setdefault(candidate.position, []).append(candidate)

    return [
        SlatePosition(position=position, candidates=members)
        for position, members in slate.items()
    ]


async def get_slate(store: ElectionStore, department: str) -> list[SlatePosition]:
    """Resolve the slate for a department from the stored candidates."""
    return resolve_slate(await store.get_candidates(), department)


# ============================================
# BALLOTS
# ============================================


def _coerce_candidate_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def validate_ballot(slate: list[SlatePosition], ballot: Ballot) -> dict[str, int]:
    """
    Check a ballot against a department slate.

    Returns the normalized position -> candidate id mapping. Raises
    ValidationError when a position is missing or unknown, and then when a
    selection does not stand for that position in the department.
    """
    if not isinstance(ballot, Mapping):
        raise ValidationError("Ballot must map each position to a candidate")

    positions = {entry.position: entry for entry in slate}

    errors: dict[str, str] = {}
    for position in positions:
        if position not in ballot:
            errors[position] = "No candidate selected"
    for position in ballot:
        if position not in positions:
            errors[str(position)] = "Unknown position for this department"
    if errors:
        raise ValidationError("Please select a candidate for each position", errors)

    selections: dict[str, int] = {}
    for position, entry in positions.items():
        candidate_id = _coerce_candidate_id(ballot[position])
        allowed = {candidate.id for candidate in entry.candidates}
        if candidate_id is None or candidate_id not in allowed:
            errors[position] = "Selected candidate does not stand for this position"
            continue
        selections[position] = candidate_id
    if errors:
        raise ValidationError("Ballot contains invalid selections", errors)

    return selections


def confirmation_code(student_id: str, candidate_ids: list[int]) -> str:
    """Short receipt code derived from the voter and their choices."""
    digest = hashlib.sha256(f"{student_id}:{candidate_ids}".encode()).hexdigest()
    return digest[:12].upper()


async def submit_ballot(
    store: ElectionStore,
    student_id: str,
    ballot: Ballot,
    now_ms: int,
) -> dict[str, Any]:
    """
    Record a ballot for a student.

    Runs in one store transaction: the voter is reloaded, checked for
    eligibility, the ballot is validated against the voter's department slate,
    then the candidate tallies and the voter record are staged and committed
    together.

    Raises:
        NotFoundError: Unknown student id
        IneligibleError: Admin account, already voted or window closed
        ValidationError: Incomplete ballot or foreign candidate ids
        TransientIOError: The store could not be read or written
    """
    try:
        async with store.transaction() as tx:
            user = await tx.get_user(student_id)
            if user is None:
                raise NotFoundError(f"Student {student_id} not found")

            window = evaluate_window(now_ms, await tx.get_voting_end_time())
            eligibility = check_eligibility(user, window)
            if eligibility is not Eligibility.ELIGIBLE:
                raise IneligibleError(eligibility)

            candidates = await tx.get_candidates()
            slate = resolve_slate(candidates, user.department)
            selections = validate_ballot(slate, ballot)
            selected_ids = set(selections.values())

            if selected_ids:
                tx.put_candidates([
                    candidate.model_copy(update={"vote_count": candidate.vote_count + 1})
                    if candidate.id in selected_ids
                    else candidate
                    for candidate in candidates
                ])
                voter = user.model_copy(
                    update={"has_voted": True, "voted_candidate_ids": selected_ids}
                )
                tx.put_users([
                    voter if existing.student_id == student_id else existing
                    for existing in await tx.get_users()
                ])
    except (NotFoundError, IneligibleError, ValidationError) as e:
        audit_logger.log_ballot_rejected(student_id, e.message)
        raise

    candidate_ids = sorted(selected_ids)
    if candidate_ids:
        audit_logger.log_ballot_accepted(student_id, user.department, candidate_ids)
    else:
        logger.info(f"No positions to vote for in department {user.department!r}")

    return {
        "student_id": student_id,
        "department": user.department,
        "selections": selections,
        "candidate_ids": candidate_ids,
        "votes_cast": len(candidate_ids),
        "confirmation_code": confirmation_code(student_id, candidate_ids),
    }
