"""
Task parameter bag handed to a routine by the scheduler.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .exceptions import InvalidParametersError

STATE_WILDCARD = "*"


class DateField(str, Enum):
    """Article date column compared against the cutoff."""

    CREATED = "created"
    MODIFIED = "modified"
    PUBLISH_UP = "publish_up"


class TaskParameters(BaseModel):
    """Options recognized by the housekeeping routines.

    Values arrive from form fields, so blank strings and ``None`` mean
    "use the default", and numeric strings are accepted.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    source_category: int = Field(default=0, description="Restrict to this category (0 = any).")
    include_subcategories: bool = Field(
        default=False, description="Also match descendants of source_category."
    )
    age_days: int = Field(default=30, description="Minimum article age in days.")
    date_field: DateField = Field(
        default=DateField.PUBLISH_UP, description="Date column the age applies to."
    )
    state_filter: str = Field(
        default="1", description="Exact state to match, or '*' for any state."
    )
    dry_run: bool = Field(default=True, description="Report matches without writing.")
    target_category: int = Field(default=0, description="Destination category (move).")
    target_access: int = Field(default=0, description="Destination access level (access).")

    @field_validator(
        "source_category",
        "include_subcategories",
        "age_days",
        "dry_run",
        "target_category",
        "target_access",
        mode="before",
    )
    @classmethod
    def blank_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("date_field", mode="before")
    @classmethod
    def unknown_date_field_as_publish_up(cls, v: Any) -> DateField:
        if isinstance(v, DateField):
            return v
        try:
            return DateField(str(v).strip())
        except ValueError:
            return DateField.PUBLISH_UP

    @field_validator("state_filter", mode="before")
    @classmethod
    def normalize_state_filter(cls, v: Any) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "1"
        text = str(v).strip()
        if text == STATE_WILDCARD:
            return text
        try:
            return str(int(text))
        except ValueError:
            raise ValueError(f"state_filter must be an integer state or '*', got {v!r}") from None

    @property
    def state(self) -> int | None:
        """State to filter on, or None when every state matches."""
        if self.state_filter == STATE_WILDCARD:
            return None
        return int(self.state_filter)

    @classmethod
    def from_bag(cls, bag: TaskParameters | Mapping[str, Any] | object | None) -> TaskParameters:
        """
        Build parameters from a mapping or an attribute bag.

        Raises:
            InvalidParametersError: if a value cannot be coerced
        """
        if isinstance(bag, TaskParameters):
            return bag
        if bag is None:
            data: dict[str, Any] = {}
        elif isinstance(bag, Mapping):
            data = dict(bag)
        else:
            data = dict(vars(bag))

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
            raise InvalidParametersError(
                f"Invalid task parameters: {', '.join(fields)}",
                context={"errors": exc.errors(include_url=False)},
            ) from exc


__all__ = ["DateField", "STATE_WILDCARD", "TaskParameters"]
