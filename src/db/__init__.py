"""
Database toolkit exposing ORM models and repositories.
"""

from .models import Article, ArticleState, Base, Category
from .repositories import ArticleRepository, ArticleSummary, BaseRepository, CategoryRepository

__all__ = [
    "Article",
    "ArticleRepository",
    "ArticleState",
    "ArticleSummary",
    "Base",
    "BaseRepository",
    "Category",
    "CategoryRepository",
]
