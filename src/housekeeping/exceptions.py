"""
Custom exception hierarchy for housekeeping routines.
"""

from __future__ import annotations

from typing import Any


class HousekeepingError(Exception):
    """Base exception for all housekeeping errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class UnknownRoutineError(HousekeepingError):
    """Raised when a routine id is not registered."""


class InvalidParametersError(HousekeepingError):
    """Raised when a task parameter bag cannot be coerced."""


class MissingTargetError(InvalidParametersError):
    """Raised when a routine's required target parameter is absent or not positive."""


__all__ = [
    "HousekeepingError",
    "InvalidParametersError",
    "MissingTargetError",
    "UnknownRoutineError",
]
