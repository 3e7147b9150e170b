"""Token manager for signing and verifying JWT access tokens."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from app.configs import settings
from app.errors.auth import InvalidTokenError
from app.models import UserDB
from app.schemas.auth import TokenClaims

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user: UserDB,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token carrying the user's identity and role.

    Args:
        user: Authenticated user
        expires_delta: Optional expiration time delta (defaults to
            ``ACCESS_TOKEN_EXPIRE_MINUTES``)

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": user.username,
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": ACCESS_TOKEN_TYPE,
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Decode and validate an access token.

    Signature, expiry, issuer and audience are all checked.

    Args:
        token: JWT token string

    Returns:
        TokenClaims: Verified claims

    Raises:
        InvalidTokenError: If the token is malformed, tampered with,
            expired, or missing required claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        raise InvalidTokenError from e

    username: str | None = payload.get("sub")
    user_id: str | None = payload.get("user_id")
    role: str | None = payload.get("role")
    jti: str | None = payload.get("jti")

    if not username or not user_id or not role or not jti:
        raise InvalidTokenError
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError

    try:
        parsed_id = UUID(user_id)
    except ValueError as e:
        raise InvalidTokenError from e

    return TokenClaims(
        user_id=parsed_id,
        username=username,
        email=payload.get("email"),
        role=role,
        jti=jti,
    )
