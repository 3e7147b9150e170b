"""User database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import Boolean, DateTime, true
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from app.utils.helpers import utc_now


class UserDB(SQLModel, table=True):
    """
    User database model.

    ``email`` is optional; the unique index still allows many NULLs.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    username: str = Field(
        sa_column=Column(String(30), unique=True, nullable=False, index=True),
        description="Username (unique)",
    )
    email: str | None = Field(
        default=None,
        sa_column=Column(String(255), unique=True, nullable=True, index=True),
        description="Email address (unique when present)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Hashed password",
    )

    role: str = Field(
        default="user",
        sa_column=Column(String(20), nullable=False, server_default="user", index=True),
        description="User role (superadmin, admin, user)",
    )
    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, server_default=true()),
        description="Whether the account may log in",
    )
    last_login: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last successful login",
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
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
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "jane_doe",
                "email": "jane@example.com",
                "role": "admin",
                "is_active": True,
            },
        },
    )
