"""
Unit tests for scheduler job registration and the job listener.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.config import HousekeepingSettings, ScheduledTaskSettings, Settings
from src.housekeeping import TaskStatus, UnknownRoutineError
from src.workers.housekeeping import run_housekeeping_task
from src.workers.scheduler import create_job_listener, create_scheduler
from src.workers.types import TaskResult


def _settings(*tasks: ScheduledTaskSettings) -> Settings:
    return Settings(housekeeping=HousekeepingSettings(tasks=list(tasks)))


class TestCreateScheduler:
    def test_registers_enabled_tasks(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        settings = _settings(
            ScheduledTaskSettings(
                id="archive-old-news",
                routine="article.archive",
                cron="30 2 * * *",
                params={"source_category": 8, "age_days": 365, "dry_run": False},
            ),
            ScheduledTaskSettings(
                id="restrict-old",
                routine="article.access",
                params={"target_access": 3},
                enabled=False,
            ),
        )

        scheduler = create_scheduler(session_factory, settings)

        jobs = scheduler.get_jobs()
        assert [job.id for job in jobs] == ["archive-old-news"]
        job = jobs[0]
        assert job.func is run_housekeeping_task
        assert job.name == "Archive articles"
        assert isinstance(job.trigger, CronTrigger)
        assert job.kwargs["routine"] == "article.archive"
        assert job.kwargs["task_id"] == "archive-old-news"
        assert job.kwargs["params"] == {"source_category": 8, "age_days": 365, "dry_run": False}
        assert job.kwargs["settings"] is settings

    def test_no_tasks_means_no_jobs(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        scheduler = create_scheduler(session_factory, _settings())

        assert scheduler.get_jobs() == []

    def test_unknown_routine_fails_fast(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        settings = _settings(ScheduledTaskSettings(id="oops", routine="article.purge"))

        with pytest.raises(UnknownRoutineError):
            create_scheduler(session_factory, settings)


class TestJobListener:
    def test_logs_task_result(self, caplog: pytest.LogCaptureFixture) -> None:
        now = datetime.now(UTC)
        result = TaskResult(
            task_name="archive-old-news",
            status=TaskStatus.KNOCKOUT,
            message="Error: No target category specified",
            started_at=now,
            finished_at=now + timedelta(seconds=1),
        )
        event = JobExecutionEvent(
            EVENT_JOB_EXECUTED, "archive-old-news", "default", now, retval=result
        )

        with caplog.at_level(logging.INFO, logger="src.workers.scheduler"):
            create_job_listener()(event)

        assert "Job archive-old-news completed [KNOCKOUT]" in caplog.text
        assert "No target category specified" in caplog.text

    def test_logs_failures(self, caplog: pytest.LogCaptureFixture) -> None:
        error = RuntimeError("connection lost")
        event = JobExecutionEvent(
            EVENT_JOB_ERROR, "archive-old-news", "default", datetime.now(UTC), exception=error
        )

        with caplog.at_level(logging.ERROR, logger="src.workers.scheduler"):
            create_job_listener()(event)

        assert "Job archive-old-news failed" in caplog.text
        assert "connection lost" in caplog.text
