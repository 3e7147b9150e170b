"""Blog database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime, Index, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from app.utils.helpers import utc_now


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    ``slug`` carries a unique index: it is the final arbiter when two
    writers race for the same slug. ``author`` is display text chosen by
    the writer, not a reference to a user row.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_category_created", "category", "created_at"),
        Index("ix_blogs_author_created", "author", "created_at"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Blog title",
    )
    slug: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content (HTML)",
    )
    category: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Free-form category",
    )
    subcategory: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Article, Tutorial or Interview Questions",
    )
    author: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Author display name",
    )
    status: str = Field(
        default="None",
        sa_column=Column(String(30), nullable=False, server_default="None"),
        description="Editorial status badge",
    )

    image: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Hosted image URL",
    )
    image_public_id: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Image host key used for deletion",
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "Getting Started with FastAPI",
                "slug": "getting-started-with-fastapi",
                "content": "<p>FastAPI is a modern web framework...</p>",
                "category": "Development",
                "subcategory": "Tutorial",
                "author": "jane_doe",
                "status": "Featured",
                "image": "https://res.cloudinary.com/demo/image/upload/v1/blog-images/1700000000000-cover.png",
                "image_public_id": "blog-images/1700000000000-cover",
            },
        },
    )
