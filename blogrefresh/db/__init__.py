"""Database management for blogrefresh."""

from .articles import ArticleStore
from .connection import Database
from .init import init_database, validate_connection

__all__ = ["ArticleStore", "Database", "init_database", "validate_connection"]
