"""
Article repository for housekeeping selection and bulk updates.

Query Notes:
- Selection reads five narrow columns; full rows are never loaded
- Updates are a single ``UPDATE ... WHERE id IN (...)`` statement
- The zero-date predicate is skipped on PostgreSQL, which cannot store it
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from sqlalchemy import Select, String, literal, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import InstrumentedAttribute

from ..models import Article
from .base import BaseRepository

DateColumn = Literal["created", "modified", "publish_up"]
UpdatableColumn = Literal["catid", "state", "access"]

_DATE_COLUMNS: dict[str, InstrumentedAttribute[datetime | None]] = {
    "created": Article.created,
    "modified": Article.modified,
    "publish_up": Article.publish_up,
}

_UPDATABLE_COLUMNS: dict[str, InstrumentedAttribute[int]] = {
    "catid": Article.catid,
    "state": Article.state,
    "access": Article.access,
}


@dataclass(slots=True, frozen=True)
class ArticleSummary:
    """The article columns a housekeeping run reports on."""

    id: int
    title: str
    catid: int
    state: int
    access: int


class ArticleRepository(BaseRepository):
    """Data access helpers for Article rows."""

    async def find_older_than(
        self,
        date_field: DateColumn,
        cutoff: datetime,
        *,
        category_ids: Sequence[int] | None = None,
        state: int | None = None,
        zero_date: str | None = None,
    ) -> list[ArticleSummary]:
        """
        Return articles whose ``date_field`` is set and earlier than ``cutoff``.

        Args:
            date_field: One of created, modified, publish_up
            cutoff: Naive UTC timestamp; the comparison is strict
            category_ids: Optional catid whitelist
            state: Optional exact state match
            zero_date: Sentinel value treated like NULL
        """
        try:
            column = _DATE_COLUMNS[date_field]
        except KeyError:
            raise ValueError(f"Unsupported date field: {date_field!r}") from None

        stmt: Select[tuple[int, str, int, int, int]] = select(
            Article.id, Article.title, Article.catid, Article.state, Article.access
        ).where(column < cutoff, column.is_not(None))

        if zero_date is not None and self.dialect_name != "postgresql":
            stmt = stmt.where(column != literal(zero_date, String))

        if category_ids is not None:
            stmt = stmt.where(Article.catid.in_(list(category_ids)))

        if state is not None:
            stmt = stmt.where(Article.state == state)

        result = await self._session.execute(stmt)
        return [ArticleSummary(*row) for row in result.all()]

    async def bulk_update(
        self,
        article_ids: Sequence[int],
        column: UpdatableColumn,
        value: int,
    ) -> int:
        """
        Set ``column`` to ``value`` for exactly ``article_ids`` in one statement.

        Returns:
            Number of rows reported by the driver
        """
        if not article_ids:
            return 0

        try:
            target = _UPDATABLE_COLUMNS[column]
        except KeyError:
            raise ValueError(f"Column {column!r} cannot be updated") from None

        stmt = (
            update(Article)
            .where(Article.id.in_(list(article_ids)))
            .values({target: value})
            .execution_options(synchronize_session=False)
        )
        result: CursorResult[tuple[()]] = await self._session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount or 0


__all__ = ["ArticleRepository", "ArticleSummary", "DateColumn", "UpdatableColumn"]
