from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from app.schemas.user import UserProfile


class LoginRequest(BaseModel):
    """Login payload; the identifier may be a username or an email."""

    model_config = ConfigDict(populate_by_name=True)

    login_identifier: str = Field(
        ...,
        min_length=1,
        alias="loginIdentifier",
        examples=["jane_doe", "jane@example.com"],
    )
    password: SecretStr = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserProfile


class TokenClaims(BaseModel):
    """Claims carried by a verified access token."""

    user_id: UUID
    username: str
    email: str | None = None
    role: str
    jti: str


class MessageResponse(BaseModel):
    message: str
