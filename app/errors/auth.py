"""Authentication and authorization errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class MissingTokenError(UserAuthenticationError):
    """Raised when a protected endpoint is called without a bearer token."""

    def __init__(self) -> None:
        super().__init__("Access Denied: No token provided", HTTP_401_UNAUTHORIZED)


class InvalidTokenError(UserAuthenticationError):
    """Raised when the bearer token is malformed, tampered with or expired."""

    def __init__(self) -> None:
        super().__init__("Access Denied: Invalid token", HTTP_403_FORBIDDEN)


class InvalidCredentialsError(UserAuthenticationError):
    """Raised when the login identifier or password does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", HTTP_401_UNAUTHORIZED)


class AccountInactiveError(UserAuthenticationError):
    """Raised when a deactivated account tries to log in or use its session."""

    def __init__(self) -> None:
        super().__init__("Account is inactive", HTTP_403_FORBIDDEN)


class ForbiddenError(BaseAppError):
    """
    Raised when the authorization gate denies an operation.

    When the denial comes from a role check, the required roles and the
    caller's role are echoed back as ``requiredRole`` and ``currentRole``.
    """

    def __init__(
        self,
        detail: str = "Forbidden",
        required_roles: list[str] | None = None,
        current_role: str | None = None,
    ) -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)
        if required_roles is not None:
            self.requiredRole = required_roles
            self.currentRole = current_role


auth_exception_handler = create_exception_handler(logger)
