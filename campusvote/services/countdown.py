"""Voting window evaluation and the live countdown."""

import inspect
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from campusvote.core.config import settings
from campusvote.core.logging_config import get_logger
from campusvote.services.clock import ClockSource
from campusvote.store.base import ElectionStore
from campusvote.utils.scheduling import PeriodicTask

logger = get_logger(__name__)


class WindowStatus(BaseModel):
    """Remaining voting time at one instant."""

    milliseconds_remaining: int
    is_expired: bool
    formatted: str


def format_remaining(milliseconds: int) -> str:
    """Format a duration as HH:MM:SS."""
    total_seconds = max(0, milliseconds) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def evaluate_window(now_ms: int, end_timestamp: int | None) -> WindowStatus:
    """Derive remaining time and expiry. A missing end time counts as closed."""
    if end_timestamp is None:
        return WindowStatus(milliseconds_remaining=0, is_expired=True, formatted=format_remaining(0))

    remaining = max(0, end_timestamp - now_ms)
    return WindowStatus(
        milliseconds_remaining=remaining,
        is_expired=now_ms >= end_timestamp,
        formatted=format_remaining(remaining),
    )


async def get_window_status(store: ElectionStore, now_ms: int) -> WindowStatus:
    """Evaluate the stored voting window at ``now_ms``."""
    return evaluate_window(now_ms, await store.get_voting_end_time())


StatusListener = Callable[[WindowStatus], Awaitable[None] | None]


class Countdown:
    """
    Publishes the window status every tick and after every clock refresh.

    The end time is re-read from the store on each tick so an administrator
    ending or restarting the vote is picked up by every open countdown.
    """

    def __init__(
        self,
        store: ElectionStore,
        clock: ClockSource,
        tick_seconds: float | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._tick_seconds = tick_seconds or settings.COUNTDOWN_TICK_SECONDS
        self._listeners: list[StatusListener] = []
        self._task: PeriodicTask | None = None
        self.status: WindowStatus | None = None
        clock.subscribe(self._on_clock_refresh)

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    async def tick(self) -> WindowStatus:
        status = await get_window_status(self._store, self._clock.now_ms())
        if self.status is not None and status.is_expired and not self.status.is_expired:
            logger.info("Voting window has expired")
        self.status = status
        for listener in list(self._listeners):
            result = listener(status)
            if inspect.isawaitable(result):
                await result
        return status

    async def _on_clock_refresh(self, now_ms: int) -> None:
        if self._task is not None and self._task.is_running:
            await self.tick()

    def start(self) -> None:
        if self._task is None:
            self._task = PeriodicTask(self.tick, self._tick_seconds, name="countdown-tick")
        self._task.start()

    async def stop(self) -> None:
        if self._task is not None:
            await self._task.stop()
