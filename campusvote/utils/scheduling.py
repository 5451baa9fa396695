"""Cancellable periodic background tasks."""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

from campusvote.core.logging_config import get_logger

logger = get_logger(__name__)


class PeriodicTask:
    """
    Run an async callback every ``interval`` seconds until stopped.

    A failing run is logged and the schedule continues. ``stop()`` cancels the
    pending run and waits for the task to finish.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval: float,
        name: str = "periodic-task",
        run_immediately: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._callback = callback
        self._interval = interval
        self._name = name
        self._run_immediately = run_immediately
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self._name)
        logger.debug(f"Started {self._name} (every {self._interval}s)")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug(f"Stopped {self._name}")

    async def _run(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self._interval)
        while True:
            try:
                await self._callback()
            except Exception:
                logger.exception(f"{self._name} run failed")
            await asyncio.sleep(self._interval)

    async def __aenter__(self) -> "PeriodicTask":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
