"""
Housekeeping routines and their shared execution flow.

Every routine follows the same steps:
1. Resolve the routine-specific target (knock out if missing)
2. Select matching articles (nothing to do is still OK)
3. Dry run: log a preview plus one line per article
4. Otherwise: one bulk UPDATE over exactly the matched ids
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import ArticleState
from ..db.repositories import ArticleRepository, ArticleSummary
from ..db.repositories.article import UpdatableColumn
from ..logger import TaskLog, logger_sink
from .exceptions import InvalidParametersError, MissingTargetError, UnknownRoutineError
from .params import TaskParameters
from .selector import DEFAULT_ZERO_DATE, select_articles

LOGGER = logging.getLogger(__name__)

NO_MATCHES_MESSAGE = "No articles match the specified criteria"


class TaskStatus(IntEnum):
    """Exit codes understood by the host scheduler."""

    OK = 0
    KNOCKOUT = 5


@dataclass(frozen=True, slots=True)
class Routine:
    """
    One bulk mutation of the articles table.

    Either ``fixed_value`` or ``target_param`` supplies the value written to
    ``column``. Message templates receive ``count`` and ``target``.
    """

    id: str
    title: str
    description: str
    column: UpdatableColumn
    preview_template: str
    summary_template: str
    fixed_value: int | None = None
    target_param: str | None = None
    missing_target_message: str = ""
    current_label: str | None = None

    def resolve_target(self, params: TaskParameters) -> int:
        """Return the value to write, raising MissingTargetError when unset."""
        if self.target_param is None:
            assert self.fixed_value is not None
            return self.fixed_value

        value = int(getattr(params, self.target_param))
        if value <= 0:
            raise MissingTargetError(
                self.missing_target_message,
                context={"routine": self.id, "parameter": self.target_param, "value": value},
            )
        return value

    def preview_line(self, count: int, target: int) -> str:
        return "DRY RUN: " + self.preview_template.format(count=count, target=target)

    def detail_line(self, article: ArticleSummary) -> str:
        line = f"  - [{article.id}] {article.title}"
        if self.current_label:
            line += f" ({self.current_label}: {getattr(article, self.column)})"
        return line

    def summary_line(self, count: int, target: int) -> str:
        return self.summary_template.format(count=count, target=target)


MOVE = Routine(
    id="article.move",
    title="Move articles to category",
    description="Move articles older than the age threshold to another category.",
    column="catid",
    target_param="target_category",
    missing_target_message="No target category specified",
    current_label="current category",
    preview_template="Would move {count} articles to category {target}",
    summary_template="Moved {count} articles to category {target}",
)

ARCHIVE = Routine(
    id="article.archive",
    title="Archive articles",
    description="Archive articles older than the age threshold.",
    column="state",
    fixed_value=int(ArticleState.ARCHIVED),
    preview_template="Would archive {count} articles",
    summary_template="Archived {count} articles",
)

UNPUBLISH = Routine(
    id="article.unpublish",
    title="Unpublish articles",
    description="Unpublish articles older than the age threshold.",
    column="state",
    fixed_value=int(ArticleState.UNPUBLISHED),
    preview_template="Would unpublish {count} articles",
    summary_template="Unpublished {count} articles",
)

CHANGE_ACCESS = Routine(
    id="article.access",
    title="Change article access level",
    description="Change the access level of articles older than the age threshold.",
    column="access",
    target_param="target_access",
    missing_target_message="No target access level specified",
    current_label="current access",
    preview_template="Would change access to {target} for {count} articles",
    summary_template="Changed access level to {target} for {count} articles",
)

ROUTINES: dict[str, Routine] = {
    routine.id: routine for routine in (MOVE, ARCHIVE, UNPUBLISH, CHANGE_ACCESS)
}


def get_routine(routine_id: str) -> Routine:
    """Look up a registered routine by id."""
    try:
        return ROUTINES[routine_id]
    except KeyError:
        raise UnknownRoutineError(
            f"Unknown routine: {routine_id}",
            context={"available": sorted(ROUTINES)},
        ) from None


async def run_routine(
    session: AsyncSession,
    routine: Routine | str,
    params: TaskParameters | Mapping[str, Any] | object | None,
    *,
    log: TaskLog | None = None,
    now: datetime | None = None,
    zero_date: str | None = DEFAULT_ZERO_DATE,
) -> TaskStatus:
    """
    Execute one housekeeping routine.

    The caller owns the transaction: nothing is committed here. Database
    errors are not caught and reach the caller unchanged.

    Args:
        session: Async session bound to the CMS database
        routine: Routine instance or registered id
        params: Task parameter bag (mapping, attribute bag or TaskParameters)
        log: Sink for task log lines (defaults to this module's logger)
        now: Reference time for the age cutoff
        zero_date: Zero-date sentinel excluded from selection

    Returns:
        TaskStatus.OK, or TaskStatus.KNOCKOUT for unusable parameters
    """
    if isinstance(routine, str):
        routine = get_routine(routine)
    emit = log or logger_sink(LOGGER)

    try:
        task_params = TaskParameters.from_bag(params)
        target = routine.resolve_target(task_params)
    except InvalidParametersError as exc:
        LOGGER.warning("Routine %s knocked out: %s", routine.id, exc)
        emit(f"Error: {exc}")
        return TaskStatus.KNOCKOUT

    articles = await select_articles(session, task_params, now=now, zero_date=zero_date)

    if not articles:
        emit(NO_MATCHES_MESSAGE)
        return TaskStatus.OK

    if task_params.dry_run:
        emit(routine.preview_line(len(articles), target))
        for article in articles:
            emit(routine.detail_line(article))
        return TaskStatus.OK

    updated = await ArticleRepository(session).bulk_update(
        [article.id for article in articles], routine.column, target
    )
    LOGGER.debug("Routine %s updated %d rows", routine.id, updated)

    emit(routine.summary_line(len(articles), target))
    return TaskStatus.OK


__all__ = [
    "ARCHIVE",
    "CHANGE_ACCESS",
    "MOVE",
    "NO_MATCHES_MESSAGE",
    "ROUTINES",
    "Routine",
    "TaskStatus",
    "UNPUBLISH",
    "get_routine",
    "run_routine",
]
