"""
Repository classes for database access.

This module provides specialized repositories for the CMS tables:
- ArticleRepository: housekeeping selection and bulk updates on articles
- CategoryRepository: nested-set subtree lookups on categories
"""

from .article import ArticleRepository, ArticleSummary
from .base import BaseRepository
from .category import CategoryRepository

__all__ = ["ArticleRepository", "ArticleSummary", "BaseRepository", "CategoryRepository"]
