"""
SQLAlchemy ORM models for the CMS articles and categories tables.

Both tables belong to the host CMS. This project reads categories and
updates a few article columns in place; it never creates the schema in
production (tests do, via ``Base.metadata.create_all``).
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum

from sqlalchemy import DateTime, Index, Integer, SmallInteger, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    """Declarative base that enables async-friendly ORM operations."""

    pass


class ArticleState(IntEnum):
    """Publication states stored in ``content.state``."""

    TRASHED = -2
    UNPUBLISHED = 0
    PUBLISHED = 1
    ARCHIVED = 2


class Article(Base):
    """CMS article row.

    Dates are naive DATETIME values holding UTC, matching the host schema.
    """

    __tablename__ = "content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    catid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    state: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=int(ArticleState.UNPUBLISHED)
    )
    access: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    modified: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    publish_up: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_content_catid", "catid"),
        Index("idx_content_state", "state"),
        Index("idx_content_access", "access"),
    )

    def __repr__(self) -> str:
        return f"Article(id={self.id!r}, title={self.title!r}, catid={self.catid!r})"


class Category(Base):
    """Nested-set category node.

    A node's descendants are exactly the nodes whose ``lft``/``rgt`` bounds
    lie strictly inside its own.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    lft: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rgt: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    extension: Mapped[str] = mapped_column(String(50), nullable=False, default="com_content")

    __table_args__ = (
        Index("idx_categories_left_right", "lft", "rgt"),
        Index("idx_categories_extension", "extension"),
    )


__all__ = ["Article", "ArticleState", "Base", "Category"]
