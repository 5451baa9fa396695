"""Named views of a client session and the transitions allowed per role."""

from enum import Enum

from campusvote.core.errors import InvalidTransitionError
from campusvote.core.logging_config import get_logger
from campusvote.models import User

logger = get_logger(__name__)


class View(str, Enum):
    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"
    VOTING = "voting"
    RESULTS = "results"


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    STUDENT = "student"
    ADMIN = "admin"


_AUTHENTICATED = frozenset({Role.STUDENT, Role.ADMIN})

# (from, to) -> roles allowed to make the move
TRANSITIONS: dict[tuple[View, View], frozenset[Role]] = {
    (View.LOGIN, View.REGISTER): frozenset({Role.ANONYMOUS}),
    (View.REGISTER, View.LOGIN): frozenset({Role.ANONYMOUS}),
    (View.LOGIN, View.DASHBOARD): _AUTHENTICATED,
    (View.DASHBOARD, View.VOTING): frozenset({Role.STUDENT}),
    (View.DASHBOARD, View.RESULTS): frozenset({Role.ADMIN}),
    (View.VOTING, View.DASHBOARD): _AUTHENTICATED,
    (View.RESULTS, View.DASHBOARD): _AUTHENTICATED,
    (View.DASHBOARD, View.LOGIN): _AUTHENTICATED,
    (View.VOTING, View.LOGIN): _AUTHENTICATED,
    (View.RESULTS, View.LOGIN): _AUTHENTICATED,
}


class SessionRouter:
    """Tracks the current view and signed-in user of one session."""

    def __init__(self) -> None:
        self.view = View.LOGIN
        self.user: User | None = None

    @property
    def role(self) -> Role:
        if self.user is None:
            return Role.ANONYMOUS
        return Role.ADMIN if self.user.is_admin else Role.STUDENT

    def can_navigate(self, target: View) -> bool:
        return self.role in TRANSITIONS.get((self.view, target), frozenset())

    def navigate(self, target: View) -> View:
        if not self.can_navigate(target):
            raise InvalidTransitionError(
                f"Cannot move from {self.view.value} to {target.value} as {self.role.value}"
            )
        logger.debug(f"Session view {self.view.value} -> {target.value}")
        self.view = target
        return self.view

    def login(self, user: User) -> View:
        if self.view is not View.LOGIN:
            raise InvalidTransitionError("Login is only possible from the login view")
        self.user = user
        try:
            return self.navigate(View.DASHBOARD)
        except InvalidTransitionError:
            self.user = None
            raise

    def logout(self) -> View:
        self.navigate(View.LOGIN)
        self.user = None
        return self.view

    def update_user(self, user: User) -> None:
        """Replace the session's copy of the signed-in user (e.g. after voting)."""
        if self.user is None or self.user.student_id != user.student_id:
            raise InvalidTransitionError("A different user is signed in")
        self.user = user
