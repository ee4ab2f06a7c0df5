"""
Task result types for background workers.

This module defines dataclasses for task execution results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..housekeeping.routines import TaskStatus


@dataclass
class TaskResult:
    """Outcome of one scheduled housekeeping run."""

    task_name: str
    status: TaskStatus
    message: str
    started_at: datetime
    finished_at: datetime
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status is TaskStatus.OK

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


__all__ = [
    "TaskResult",
]
