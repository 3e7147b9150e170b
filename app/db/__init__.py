"""Database access layer."""

from app.db.database import Database, get_database, get_session

__all__ = [
    "Database",
    "get_database",
    "get_session",
]
