"""
Category repository: nested-set subtree lookups.
"""

from __future__ import annotations

from sqlalchemy import select

from ..models import Category
from .base import BaseRepository


class CategoryRepository(BaseRepository):
    """Read-only access to the categories tree."""

    async def resolve_subtree_ids(
        self,
        category_id: int,
        *,
        include_subcategories: bool = False,
    ) -> list[int]:
        """
        Return ``category_id`` followed by the ids of its descendants.

        Descendants are only looked up when ``include_subcategories`` is set.
        They are the categories whose bounds lie strictly inside the parent's
        and which belong to the same extension. An unknown parent degrades to
        ``[category_id]``.
        """
        category_ids = [category_id]

        if not include_subcategories:
            return category_ids

        parent = (
            await self._session.execute(
                select(Category.lft, Category.rgt, Category.extension).where(
                    Category.id == category_id
                )
            )
        ).first()

        if parent is None:
            return category_ids

        stmt = select(Category.id).where(
            Category.extension == parent.extension,
            Category.lft > parent.lft,
            Category.rgt < parent.rgt,
        )
        descendants = await self._session.scalars(stmt)
        category_ids.extend(cid for cid in descendants if cid != category_id)
        return category_ids


__all__ = ["CategoryRepository"]
