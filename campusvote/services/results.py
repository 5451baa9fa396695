"""Election results aggregation."""

from pydantic import BaseModel

from campusvote.core.errors import AccessDeniedError, NotFoundError
from campusvote.core.logging_config import audit_logger
from campusvote.models import Candidate, User
from campusvote.store.base import ElectionStore


class CandidateStanding(BaseModel):
    candidate: Candidate
    votes: int
    percentage: float
    is_winner: bool
    rank: int


class ResultGroup(BaseModel):
    department: str
    position: str
    max_votes: int
    candidates: list[CandidateStanding]

    @property
    def winners(self) -> list[Candidate]:
        return [standing.candidate for standing in self.candidates if standing.is_winner]


class ElectionResults(BaseModel):
    total_votes: int
    groups: list[ResultGroup]


# ============================================
# RESULTS CALCULATION
# ============================================


def percentage_of(votes: int, total_votes: int) -> float:
    """Share of all votes cast, 0 when nothing has been cast."""
    return (votes / total_votes * 100) if total_votes > 0 else 0.0


def aggregate_results(candidates: list[Candidate]) -> ElectionResults:
    """
    Compute standings per (department, position).

    Percentages use the total across every candidate as the denominator.
    Ties share the win; a group where nobody has votes has no winner.
    """
    total_votes = sum(candidate.vote_count for candidate in candidates)

    grouped: dict[tuple[str, str], list[Candidate]] = {}
    for candidate in candidates:
        grouped.setdefault((candidate.department, candidate.position), []).append(candidate)

    groups = []
    for (department, position), members in grouped.items():
        # sorted() is stable, so ties keep seed order
        ranked = sorted(members, key=lambda c: c.vote_count, reverse=True)
        max_votes = ranked[0].vote_count
        groups.append(
            ResultGroup(
                department=department,
                position=position,
                max_votes=max_votes,
                candidates=[
                    CandidateStanding(
                        candidate=candidate,
                        votes=candidate.vote_count,
                        percentage=percentage_of(candidate.vote_count, total_votes),
                        is_winner=max_votes > 0 and candidate.vote_count == max_votes,
                        rank=i + 1,
                    )
                    for i, candidate in enumerate(ranked)
                ],
            )
        )

    return ElectionResults(total_votes=total_votes, groups=groups)


async def require_admin(store: ElectionStore, student_id: str, resource: str) -> User:
    """Reload a requester and reject anyone who is not an administrator."""
    user = await store.get_user(student_id)
    if user is None:
        raise NotFoundError(f"Student {student_id} not found")
    if not user.is_admin:
        audit_logger.log_unauthorized_access(resource, student_id, "not an administrator")
        raise AccessDeniedError(f"Only administrators can access {resource}")
    return user


async def get_results(store: ElectionStore, requester_id: str) -> ElectionResults:
    """Live results, visible to administrators only."""
    await require_admin(store, requester_id, "results")
    return aggregate_results(await store.get_candidates())
