"""
APScheduler-based async scheduler for housekeeping tasks.

This module provides:
- Async scheduler initialization and configuration
- One cron job per configured housekeeping task
- Error handling and logging
- Graceful shutdown support
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from apscheduler.events import (
    EVENT_JOB_ERROR,
    EVENT_JOB_EXECUTED,
    EVENT_JOB_MISSED,
    JobExecutionEvent,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..config import Settings, get_settings
from ..housekeeping import get_routine
from ..logger import setup_logging
from .housekeeping import run_housekeeping_task
from .types import TaskResult

LOGGER = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Job Listener
# -----------------------------------------------------------------------------


def create_job_listener() -> Callable[[JobExecutionEvent], None]:
    """
    Create a job event listener for logging task outcomes.

    Returns:
        Event listener function
    """

    def job_listener(event: JobExecutionEvent) -> None:
        """Handle job execution events."""
        job_id = event.job_id
        scheduled_time = event.scheduled_run_time

        if getattr(event, "exception", None):
            LOGGER.error(
                "Job %s failed at %s: %s",
                job_id,
                scheduled_time,
                event.exception,
                exc_info=event.exception,
            )
        elif event.code == EVENT_JOB_MISSED:
            LOGGER.warning("Job %s missed at %s", job_id, scheduled_time)
        else:
            result = getattr(event, "retval", None)
            if isinstance(result, TaskResult):
                LOGGER.info(
                    "Job %s completed [%s] in %.2fs: %s",
                    job_id,
                    result.status.name,
                    result.duration_seconds,
                    result.message,
                )
            else:
                LOGGER.info("Job %s completed at %s", job_id, scheduled_time)

    return job_listener


# -----------------------------------------------------------------------------
# Scheduler Factory
# -----------------------------------------------------------------------------


def create_scheduler(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> AsyncIOScheduler:
    """
    Create and configure the async scheduler with all enabled housekeeping tasks.

    Args:
        session_factory: SQLAlchemy async session factory
        settings: Application settings

    Returns:
        Configured AsyncIOScheduler instance

    Raises:
        UnknownRoutineError: if a configured task names an unregistered routine
    """
    timezone = settings.housekeeping.timezone
    scheduler = AsyncIOScheduler(
        timezone=timezone,
        job_defaults={
            "coalesce": True,  # Combine missed runs into one
            "max_instances": 1,  # Only one instance per job
            "misfire_grace_time": 300,  # 5 minutes grace period
        },
    )

    scheduler.add_listener(
        create_job_listener(), EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED
    )

    for task in settings.housekeeping.tasks:
        if not task.enabled:
            LOGGER.info("Skipping disabled task: %s", task.id)
            continue

        routine = get_routine(task.routine)
        scheduler.add_job(
            run_housekeeping_task,
            trigger=CronTrigger.from_crontab(task.cron, timezone=timezone),
            id=task.id,
            name=routine.title,
            kwargs={
                "session_factory": session_factory,
                "settings": settings,
                "task_id": task.id,
                "routine": routine.id,
                "params": task.params,
            },
            replace_existing=True,
        )
        LOGGER.info("Registered job: %s -> %s (cron '%s')", task.id, routine.id, task.cron)

    return scheduler


# -----------------------------------------------------------------------------
# Application Context
# -----------------------------------------------------------------------------


@asynccontextmanager
async def create_scheduler_context(
    settings: Settings,
) -> AsyncIterator[tuple[AsyncIOScheduler, async_sessionmaker[AsyncSession]]]:
    """
    Create scheduler context with its database dependencies.

    Yields:
        Tuple of (scheduler, session_factory)
    """
    engine = create_async_engine(
        str(settings.database.url),
        pool_size=settings.database.pool_size,
        echo=settings.database.echo,
    )
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    scheduler = create_scheduler(session_factory, settings)
    LOGGER.info("Scheduler context initialized")

    try:
        yield scheduler, session_factory
    finally:
        LOGGER.info("Cleaning up scheduler context...")

        if scheduler.running:
            scheduler.shutdown(wait=True)

        await engine.dispose()

        LOGGER.info("Scheduler context cleaned up")


# -----------------------------------------------------------------------------
# Runner
# -----------------------------------------------------------------------------


async def run_scheduler(settings: Settings) -> None:
    """
    Run the scheduler in the foreground until cancelled.

    Args:
        settings: Application settings
    """
    async with create_scheduler_context(settings) as (scheduler, _):
        LOGGER.info("Starting scheduler...")
        scheduler.start()

        jobs = scheduler.get_jobs()
        if not jobs:
            LOGGER.warning("No housekeeping tasks configured (set HOUSEKEEPING__TASKS)")
        LOGGER.info("Scheduler running with %d jobs:", len(jobs))
        for job in jobs:
            LOGGER.info("  - %s: %s", job.id, job.next_run_time)

        try:
            while True:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            LOGGER.info("Scheduler cancelled, shutting down...")


def main() -> int:
    """
    Main entry point for running the scheduler.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings = get_settings()
    setup_logging(settings)

    LOGGER.info(
        "Starting Article Housekeeping Scheduler v%s (%s)",
        settings.app.version,
        settings.app.environment.value,
    )

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler(sig: int, _: Any) -> None:
        LOGGER.info("Received signal %d, initiating shutdown...", sig)
        for task in asyncio.all_tasks(loop):
            task.cancel()

    if sys.platform != "win32":
        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    try:
        loop.run_until_complete(run_scheduler(settings))
        return 0
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
        return 0
    except Exception as exc:
        LOGGER.exception("Fatal error: %s", exc)
        return 1
    finally:
        loop.close()


if __name__ == "__main__":
    sys.exit(main())
