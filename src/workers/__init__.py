"""
Background worker system for article housekeeping.

This package provides:
- The async housekeeping task run for each scheduled job
- APScheduler-based cron scheduling of configured tasks
- Integration with the command-line entry point

Modules:
- types: Task result dataclass (TaskResult)
- housekeeping: Scheduled housekeeping task
- scheduler: APScheduler-based job scheduling
"""

from .housekeeping import run_housekeeping_task
from .scheduler import create_scheduler, run_scheduler
from .scheduler import main as run_scheduler_main
from .types import TaskResult

__all__ = [
    # Scheduler
    "create_scheduler",
    "run_scheduler",
    "run_scheduler_main",
    # Types
    "TaskResult",
    # Tasks
    "run_housekeeping_task",
]
