"""Application assembly and lifespan for the campus election core."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from campusvote.api.workflow import ElectionWorkflow
from campusvote.core.config import Settings, get_settings
from campusvote.core.database import close_db_pool, init_db_pool
from campusvote.core.logging_config import get_logger, setup_logging
from campusvote.services.bootstrap import initialize_store
from campusvote.services.clock import ClockSource
from campusvote.services.countdown import Countdown
from campusvote.store.base import ElectionStore
from campusvote.store.memory import MemoryElectionStore
from campusvote.store.postgres import PostgresElectionStore

logger = get_logger(__name__)


@dataclass
class ElectionApp:
    settings: Settings
    store: ElectionStore
    clock: ClockSource
    countdown: Countdown
    workflow: ElectionWorkflow


def build_store(settings: Settings) -> ElectionStore:
    """PostgreSQL store when a database is configured, memory store otherwise."""
    if settings.DATABASE_URL:
        return PostgresElectionStore(table=settings.STORE_TABLE)
    logger.warning(
        "DATABASE_URL not set: using the in-process store, which is not safe "
        "across multiple processes"
    )
    return MemoryElectionStore()


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
    store: ElectionStore | None = None,
    clock: ClockSource | None = None,
) -> AsyncIterator[ElectionApp]:
    """Start the store, bootstrap data and the periodic tasks; stop them on exit."""
    settings = settings or get_settings()
    setup_logging()
    logger.info("Starting campus election core...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    uses_database = store is None and bool(settings.DATABASE_URL)
    if uses_database:
        await init_db_pool(settings)

    store = store or build_store(settings)
    clock = clock or ClockSource(
        url=settings.TIME_SERVICE_URL,
        timeout=settings.CLOCK_TIMEOUT_SECONDS,
        refresh_seconds=settings.CLOCK_REFRESH_SECONDS,
    )
    countdown = Countdown(store, clock, tick_seconds=settings.COUNTDOWN_TICK_SECONDS)

    try:
        await store.open()
        await clock.refresh()
        await initialize_store(store, clock.now_ms())

        # Already refreshed above; next fetch after one interval
        clock.start(run_immediately=False)
        countdown.start()

        yield ElectionApp(
            settings=settings,
            store=store,
            clock=clock,
            countdown=countdown,
            workflow=ElectionWorkflow(store, clock),
        )
    finally:
        await countdown.stop()
        await clock.stop()
        await store.close()
        if uses_database:
            await close_db_pool()
        logger.info("Shutting down campus election core...")
