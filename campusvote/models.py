"""Persistent record types shared by the store and the election services."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator
from pydantic.alias_generators import to_camel

# position -> candidate id
Ballot = Mapping[str, int]


class Eligibility(str, Enum):
    """Outcome of an eligibility check."""

    ELIGIBLE = "eligible"
    ALREADY_VOTED = "already_voted"
    WINDOW_CLOSED = "window_closed"
    NOT_ELIGIBLE = "not_eligible"


class StoreRecord(BaseModel):
    """Base for records stored as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class User(StoreRecord):
    """A registered student or administrator."""

    student_id: str
    name: str
    email: str
    password_hash: str
    department: str
    is_admin: bool = False
    has_voted: bool = False
    voted_candidate_ids: set[int] = Field(default_factory=set)
    terms_accepted: bool = False

    @model_validator(mode="after")
    def _check_vote_record(self) -> "User":
        if self.has_voted != bool(self.voted_candidate_ids):
            raise ValueError("hasVoted must be set exactly when votedCandidateIds is non-empty")
        return self

    @field_serializer("voted_candidate_ids")
    def _serialize_ids(self, ids: set[int]) -> list[int]:
        return sorted(ids)

    def public_dict(self) -> dict[str, Any]:
        """Store representation without the password hash."""
        data = self.to_store()
        data.pop("passwordHash", None)
        return data


class Candidate(StoreRecord):
    """A candidate standing for one position in one department."""

    id: int
    name: str
    department: str
    position: str
    vote_count: int = Field(default=0, ge=0)
    photo_url: str | None = None
