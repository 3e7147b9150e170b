"""Utility helper functions."""

from app.utils.helpers import get_summary, host, today_str, utc_now
from app.utils.slug import generate_slug

__all__ = [
    "generate_slug",
    "get_summary",
    "host",
    "today_str",
    "utc_now",
]
