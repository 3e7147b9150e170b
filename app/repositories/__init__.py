"""Repository layer for database operations."""

from app.repositories.blog import BlogFilters, BlogRepository
from app.repositories.user import UserRepository

__all__ = ["BlogFilters", "BlogRepository", "UserRepository"]
