"""
Authentication routes.

Registration, login, token validation, logout and self-service profile
endpoints under ``/api/auth``.
"""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.auth import ProfileEditorDep, ProfileReaderDep
from app.configs import settings
from app.dependencies import AuthServiceDep, OptionalPrincipalDep, PrincipalDep
from app.managers import limiter
from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from app.schemas.user import (
    ProfileUpdate,
    UserEnvelope,
    UserMessageResponse,
    UserProfile,
    UserRegister,
)

router = APIRouter(prefix="/api/auth", tags=["🔐 Auth"])

USER_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "username": "jane_doe",
    "email": "jane@example.com",
    "role": "user",
    "isActive": True,
    "lastLogin": "2025-01-01T08:00:00Z",
    "createdAt": "2025-01-01T08:00:00Z",
    "updatedAt": "2025-01-01T08:00:00Z",
}

RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Too Many Requests"}}},
}

NO_TOKEN_RESPONSE = {
    "description": "Unauthorized",
    "content": {"application/json": {"example": {"detail": "Access Denied: No token provided"}}},
}

INVALID_TOKEN_RESPONSE = {
    "description": "Forbidden",
    "content": {"application/json": {"example": {"detail": "Access Denied: Invalid token"}}},
}


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=UserMessageResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description=(
        "Create an account. Anyone may register a `user`; creating an `admin` "
        "requires an admin bearer token and creating a `superadmin` requires a "
        "superadmin bearer token."
    ),
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "User registered successfully!", "user": USER_EXAMPLE},
                },
            },
        },
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Access denied. Admin privileges required.",
                        "requiredRole": ["admin", "superadmin"],
                        "currentRole": None,
                    },
                },
            },
        },
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"detail": "User with that username or email already exists"},
                },
            },
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="auth_register",
)
@limiter.limit(settings.RATE_LIMIT_REGISTER)
async def register_user(
    request: Request,
    response: Response,
    payload: UserRegister,
    actor: OptionalPrincipalDep,
    auth_service: AuthServiceDep,
) -> UserMessageResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    payload : UserRegister
        Registration data.
    actor : Principal | None
        Caller, when a bearer token is sent.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    UserMessageResponse
        Created user information.

    Raises
    ------
    ForbiddenError
        If the caller may not grant the requested role.
    DuplicateEntryError
        If the username or email is taken.
    """
    user = await auth_service.register(payload, actor)
    return UserMessageResponse(
        message="User registered successfully!",
        user=UserProfile.model_validate(user),
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=LoginResponse,
    summary="Login for access token",
    description="Authenticate with a username or email and password to obtain a bearer token.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Logged in successfully",
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "user": USER_EXAMPLE,
                    },
                },
            },
        },
        401: {
            "description": "Unauthorized",
            "content": {"application/json": {"example": {"detail": "Invalid credentials"}}},
        },
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"detail": "Account is inactive"}}},
        },
        429: RATE_LIMIT_RESPONSE,
    },
    operation_id="auth_login",
)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """
    Login with username (or email) and password.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    credentials : LoginRequest
        Login identifier and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    LoginResponse
        Bearer token and the user's profile.

    Raises
    ------
    InvalidCredentialsError
        If the identifier or password does not match.
    AccountInactiveError
        If the account is deactivated.
    """
    user, token = await auth_service.authenticate(
        credentials.login_identifier,
        credentials.password.get_secret_value(),
    )
    return LoginResponse(
        message="Logged in successfully",
        token=token,
        user=UserProfile.model_validate(user),
    )


@router.get(
    "/validate-token",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Validate the bearer token",
    description="Verify the token and return the caller's current profile from the database.",
    responses={
        200: {"content": {"application/json": {"example": {"user": USER_EXAMPLE}}}},
        401: NO_TOKEN_RESPONSE,
        403: INVALID_TOKEN_RESPONSE,
        404: {
            "description": "Not Found",
            "content": {"application/json": {"example": {"detail": "User not found"}}},
        },
    },
    operation_id="auth_validate_token",
)
async def validate_token(principal: PrincipalDep, auth_service: AuthServiceDep) -> UserEnvelope:
    """
    Validate the bearer token.

    Parameters
    ----------
    principal : Principal
        Caller from the token claims.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    UserEnvelope
        The caller's fresh profile.
    """
    user = await auth_service.get_active_user(principal)
    return UserEnvelope(user=UserProfile.model_validate(user))


@router.post(
    "/logout",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Logout",
    description="Acknowledge logout; the client discards its token.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Logged out successfully"}}}},
        401: NO_TOKEN_RESPONSE,
        403: INVALID_TOKEN_RESPONSE,
    },
    operation_id="auth_logout",
)
async def logout(principal: PrincipalDep, auth_service: AuthServiceDep) -> MessageResponse:
    """
    Logout the caller.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await auth_service.logout(principal)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/profile",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Get own profile",
    responses={
        200: {"content": {"application/json": {"example": {"user": USER_EXAMPLE}}}},
        401: NO_TOKEN_RESPONSE,
        403: INVALID_TOKEN_RESPONSE,
    },
    operation_id="auth_get_profile",
)
async def get_profile(principal: ProfileReaderDep, auth_service: AuthServiceDep) -> UserEnvelope:
    """
    Get the caller's profile.

    Returns
    -------
    UserEnvelope
        The caller's profile.
    """
    user = await auth_service.get_profile(principal)
    return UserEnvelope(user=UserProfile.model_validate(user))


@router.put(
    "/profile",
    response_class=ORJSONResponse,
    response_model=UserMessageResponse,
    summary="Update own profile",
    description="Only the email address can be changed here.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Profile updated successfully", "user": USER_EXAMPLE},
                },
            },
        },
        401: NO_TOKEN_RESPONSE,
        403: INVALID_TOKEN_RESPONSE,
        409: {
            "description": "Conflict",
            "content": {
                "application/json": {
                    "example": {"detail": "User with that username or email already exists"},
                },
            },
        },
    },
    operation_id="auth_update_profile",
)
async def update_profile(
    payload: ProfileUpdate,
    principal: ProfileEditorDep,
    auth_service: AuthServiceDep,
) -> UserMessageResponse:
    """
    Update the caller's email.

    Parameters
    ----------
    payload : ProfileUpdate
        New email.
    principal : Principal
        Caller from the token claims.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    UserMessageResponse
        Updated profile.
    """
    user = await auth_service.update_profile(principal, payload)
    return UserMessageResponse(
        message="Profile updated successfully",
        user=UserProfile.model_validate(user),
    )
