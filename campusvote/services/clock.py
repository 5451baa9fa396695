"""
Best-effort clock backed by a remote time service.

The remote reading is kept as an offset from the local clock, so ``now_ms()``
keeps advancing between refreshes. Any failure to reach or parse the time
service is logged and the clock falls back to local device time; callers never
see the error.
"""

import inspect
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Protocol

import httpx

from campusvote.core.config import settings
from campusvote.core.errors import TransientIOError
from campusvote.core.logging_config import get_logger
from campusvote.utils.scheduling import PeriodicTask

logger = get_logger(__name__)

ClockListener = Callable[[int], Awaitable[None] | None]


class TimeSource(Protocol):
    def now_ms(self) -> int: ...


def parse_service_datetime(payload: object) -> int:
    """Extract epoch milliseconds from a ``{"datetime": ISO8601}`` body."""
    if not isinstance(payload, dict) or not isinstance(payload.get("datetime"), str):
        raise ValueError("Time service response has no datetime string")

    moment = datetime.fromisoformat(payload["datetime"])
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp() * 1000)


class ClockSource:
    """Current time preferring the remote time service."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        refresh_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
        local_clock: Callable[[], float] = time.time,
    ) -> None:
        self.url = url or settings.TIME_SERVICE_URL
        self.timeout = timeout if timeout is not None else settings.CLOCK_TIMEOUT_SECONDS
        self.refresh_seconds = refresh_seconds or settings.CLOCK_REFRESH_SECONDS
        self._client = client
        self._owns_client = client is None
        self._local_clock = local_clock
        self._offset_ms = 0
        self._listeners: list[ClockListener] = []
        self._task: PeriodicTask | None = None
        self.source = "local"

    def local_ms(self) -> int:
        return int(self._local_clock() * 1000)

    def now_ms(self) -> int:
        return self.local_ms() + self._offset_ms

    def subscribe(self, listener: ClockListener) -> None:
        """Call ``listener(now_ms)`` after every refresh."""
        self._listeners.append(listener)

    async def fetch_remote_ms(self) -> int:
        """Fetch the authoritative time; raises TransientIOError on any failure."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        try:
            response = await self._client.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            return parse_service_datetime(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise TransientIOError(f"Time service unavailable: {e}") from e

    async def refresh(self) -> int:
        """Re-sync with the time service, falling back to local time."""
        try:
            remote_ms = await self.fetch_remote_ms()
            self._offset_ms = remote_ms - self.local_ms()
            self.source = "remote"
        except TransientIOError as e:
            logger.warning(f"Failed to fetch time, using local time: {e.message}")
            self._offset_ms = 0
            self.source = "local"

        now = self.now_ms()
        for listener in list(self._listeners):
            try:
                result = listener(now)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Clock listener failed after refresh")
        return now

    def start(self, run_immediately: bool = True) -> None:
        if self._task is None:
            self._task = PeriodicTask(
                self.refresh,
                self.refresh_seconds,
                name="clock-refresh",
                run_immediately=run_immediately,
            )
        self._task.start()

    async def stop(self) -> None:
        if self._task is not None:
            await self._task.stop()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
