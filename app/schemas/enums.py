"""Enumerations shared by models, schemas and the authorization gate."""

from enum import StrEnum


class Role(StrEnum):
    """Account roles, lowest to highest privilege."""

    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Subcategory(StrEnum):
    ARTICLE = "Article"
    TUTORIAL = "Tutorial"
    INTERVIEW_QUESTIONS = "Interview Questions"


class BlogStatus(StrEnum):
    """Editorial badge shown next to a post."""

    NONE = "None"
    TRENDING = "Trending"
    FEATURED = "Featured"
    EDITORS_PICK = "Editor's Pick"
    RECOMMENDED = "Recommended"
