"""
Article housekeeping package: parameters, selection, and bulk routines.
"""

from .exceptions import (
    HousekeepingError,
    InvalidParametersError,
    MissingTargetError,
    UnknownRoutineError,
)
from .params import DateField, TaskParameters
from .routines import ROUTINES, Routine, TaskStatus, get_routine, run_routine
from .selector import compute_cutoff, select_articles

__all__ = [
    "DateField",
    "HousekeepingError",
    "InvalidParametersError",
    "MissingTargetError",
    "ROUTINES",
    "Routine",
    "TaskParameters",
    "TaskStatus",
    "UnknownRoutineError",
    "compute_cutoff",
    "get_routine",
    "run_routine",
    "select_articles",
]
