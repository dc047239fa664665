"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.search_history import SearchHistory, UserSearchHistory

__all__ = ["Base", "SearchHistory", "UserSearchHistory"]
