"""
Housekeeping task for background workers.

This module provides the job the scheduler runs for each configured task:
- run_housekeeping_task: Run one routine in its own session and commit
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import Settings
from ..housekeeping import get_routine, run_routine
from ..logger import CapturingTaskLog, logger_sink
from .types import TaskResult

LOGGER = logging.getLogger(__name__)


async def run_housekeeping_task(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    *,
    task_id: str,
    routine: str,
    params: Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> TaskResult:
    """
    Run a housekeeping routine and commit its update.

    Database errors propagate so the scheduler records the run as failed;
    the session context manager rolls back the open transaction.

    Args:
        session_factory: SQLAlchemy async session factory
        settings: Application settings
        task_id: Job identifier used in logs and the result
        routine: Registered routine id
        params: Task parameter bag
        now: Reference time for the age cutoff (defaults to now)

    Returns:
        TaskResult with the routine status and captured log lines
    """
    started_at = datetime.now(UTC)
    resolved = get_routine(routine)
    LOGGER.info("Starting housekeeping task %s (%s)", task_id, resolved.id)

    task_log = CapturingTaskLog(
        forward=logger_sink(logging.getLogger(f"{__name__}.{task_id}"))
    )

    async with session_factory() as session:
        status = await run_routine(
            session,
            resolved,
            params,
            log=task_log,
            now=now,
            zero_date=settings.housekeeping.zero_date,
        )
        await session.commit()

    finished_at = datetime.now(UTC)
    message = task_log.lines[0] if task_log.lines else resolved.title
    LOGGER.info("Housekeeping task %s finished with status %s", task_id, status.name)

    return TaskResult(
        task_name=task_id,
        status=status,
        message=message,
        details={
            "routine": resolved.id,
            "params": dict(params or {}),
            "log": list(task_log.lines),
        },
        started_at=started_at,
        finished_at=finished_at,
    )


__all__ = [
    "run_housekeeping_task",
]
