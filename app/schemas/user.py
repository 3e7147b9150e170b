"""
User schemas for registration, profiles and account administration.

Passwords only ever travel inbound; no response model carries a hash.
"""

from datetime import datetime
from re import compile as re_compile
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

from app.configs.settings import MAX_USERNAME_LENGTH, MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from app.schemas.enums import Role

USERNAME_PATTERN = re_compile(r"^[a-zA-Z0-9_]+$")


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


def _check_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        mssg = "Username can only contain letters, numbers, and underscores"
        raise ValueError(mssg)
    return value


class UserRegister(BaseModel):
    """Registration payload."""

    username: str = Field(
        ...,
        min_length=MIN_USERNAME_LENGTH,
        max_length=MAX_USERNAME_LENGTH,
        examples=["jane_doe"],
    )
    email: EmailStr | None = Field(default=None, examples=["jane@example.com"])
    password: SecretStr = Field(..., min_length=MIN_PASSWORD_LENGTH, examples=["s3cret!"])
    role: Role = Role.USER

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class ProfileUpdate(BaseModel):
    """Self-service profile update; only the email may change."""

    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)


class AdminUserUpdate(BaseModel):
    """Administrative account update; omitted fields are left untouched."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(
        default=None,
        min_length=MIN_USERNAME_LENGTH,
        max_length=MAX_USERNAME_LENGTH,
    )
    email: EmailStr | None = None
    role: Role | None = None
    is_active: bool | None = Field(default=None, alias="isActive")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str | None) -> str | None:
        return _check_username(value) if value is not None else None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class UserProfile(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    username: str
    email: str | None = None
    role: str
    is_active: bool = Field(alias="isActive")
    last_login: datetime | None = Field(default=None, alias="lastLogin")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class UserEnvelope(BaseModel):
    user: UserProfile


class UserMessageResponse(BaseModel):
    message: str
    user: UserProfile


class DeletedUser(BaseModel):
    id: UUID
    username: str
    role: str


class UserDeletedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_user: DeletedUser = Field(alias="deletedUser")
