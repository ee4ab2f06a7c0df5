"""
Article selection for housekeeping routines.

Translates a ``TaskParameters`` bag into repository criteria:
- cutoff = now - age_days (naive UTC, strict comparison)
- optional category filter, expanded through the nested-set tree
- optional exact state filter
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..db.repositories import ArticleRepository, ArticleSummary, CategoryRepository
from .params import TaskParameters

LOGGER = logging.getLogger(__name__)

DEFAULT_ZERO_DATE = "0000-00-00 00:00:00"


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as the CMS stores it."""
    return datetime.now(UTC).replace(tzinfo=None)


def compute_cutoff(age_days: int, *, now: datetime | None = None) -> datetime:
    """Return the timestamp an article's date must precede to be selected."""
    reference = now or utcnow()
    return reference - timedelta(days=age_days)


async def select_articles(
    session: AsyncSession,
    params: TaskParameters,
    *,
    now: datetime | None = None,
    zero_date: str | None = DEFAULT_ZERO_DATE,
) -> list[ArticleSummary]:
    """
    Return the articles a routine would act on.

    Args:
        session: Async session bound to the CMS database
        params: Validated task parameters
        now: Reference time (defaults to the current UTC time)
        zero_date: Sentinel treated like NULL; None disables the check

    Returns:
        Matching articles in no particular order; empty when nothing matches
    """
    cutoff = compute_cutoff(params.age_days, now=now)

    category_ids: list[int] | None = None
    if params.source_category > 0:
        category_ids = await CategoryRepository(session).resolve_subtree_ids(
            params.source_category,
            include_subcategories=params.include_subcategories,
        )

    LOGGER.debug(
        "Selecting articles with %s < %s (categories=%s, state=%s)",
        params.date_field.value,
        cutoff.isoformat(sep=" "),
        category_ids,
        params.state_filter,
    )

    return await ArticleRepository(session).find_older_than(
        params.date_field.value,
        cutoff,
        category_ids=category_ids,
        state=params.state,
        zero_date=zero_date,
    )


__all__ = ["DEFAULT_ZERO_DATE", "compute_cutoff", "select_articles", "utcnow"]
