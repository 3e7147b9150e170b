"""
Blog schemas.

Request models are filled from multipart form fields (the admin panel
posts the cover image alongside the text fields). Response models use
the camelCase names the frontend reads.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.configs.settings import MAX_SLUG_LENGTH, MAX_TITLE_LENGTH
from app.schemas.enums import BlogStatus, Subcategory


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BlogCreate(BaseModel):
    """Blog creation form (the cover image is sent as a separate file part)."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TITLE_LENGTH,
        description="Blog title",
        examples=["Getting Started with FastAPI"],
    )
    content: str = Field(..., min_length=1, description="Blog content (HTML)")
    category: str = Field(..., min_length=1, max_length=100, examples=["Development"])
    subcategory: Subcategory = Field(..., examples=["Tutorial"])
    author: str = Field(..., min_length=1, max_length=100, examples=["jane_doe"])
    status: BlogStatus = Field(default=BlogStatus.NONE, examples=["Featured"])
    slug: str | None = Field(
        default=None,
        max_length=MAX_SLUG_LENGTH,
        description="Custom slug (generated from the title when omitted)",
    )

    @field_validator("title", "content", "category", "author")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            mssg = "Field cannot be blank"
            raise ValueError(mssg)
        return value

    @field_validator("slug", mode="before")
    @classmethod
    def blank_slug(cls, value: Any) -> Any:
        return _blank_to_none(value)


class BlogUpdate(BaseModel):
    """Partial blog update form; omitted or blank fields are left untouched."""

    title: str | None = Field(default=None, max_length=MAX_TITLE_LENGTH)
    content: str | None = None
    category: str | None = Field(default=None, max_length=100)
    subcategory: Subcategory | None = None
    author: str | None = Field(default=None, max_length=100)
    status: BlogStatus | None = None
    slug: str | None = Field(default=None, max_length=MAX_SLUG_LENGTH)

    @field_validator("*", mode="before")
    @classmethod
    def blank_fields(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("title", "content", "category", "author")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    def changes(self) -> dict[str, Any]:
        """Return only the fields that carry a value."""
        return {k: v for k, v in self.model_dump(exclude={"slug"}).items() if v is not None}


class BlogResponse(BaseModel):
    """Blog post as returned to clients."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    category: str
    subcategory: str
    author: str
    status: str
    image: str | None = None
    image_public_id: str | None = Field(default=None, alias="imagePublicId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class BlogListResponse(BaseModel):
    """One page of blogs plus whether another page exists."""

    model_config = ConfigDict(populate_by_name=True)

    blogs: list[BlogResponse]
    has_more: bool = Field(alias="hasMore")


class MyBlogsResponse(BaseModel):
    """Blogs written under the caller's username."""

    blogs: list[BlogResponse]
    total: int
    author: str


class BlogMessageResponse(BaseModel):
    message: str
    blog: BlogResponse
