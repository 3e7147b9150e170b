from app.schemas.auth import LoginRequest, LoginResponse, MessageResponse, TokenClaims
from app.schemas.blog import (
    BlogCreate,
    BlogListResponse,
    BlogMessageResponse,
    BlogResponse,
    BlogUpdate,
    MyBlogsResponse,
)
from app.schemas.enums import BlogStatus, Role, Subcategory
from app.schemas.health import HealthCheckResponse, PingResponse
from app.schemas.user import (
    AdminUserUpdate,
    DeletedUser,
    ProfileUpdate,
    UserDeletedResponse,
    UserEnvelope,
    UserMessageResponse,
    UserProfile,
    UserRegister,
)

__all__ = [
    "AdminUserUpdate",
    "BlogCreate",
    "BlogListResponse",
    "BlogMessageResponse",
    "BlogResponse",
    "BlogStatus",
    "BlogUpdate",
    "DeletedUser",
    "HealthCheckResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "MyBlogsResponse",
    "PingResponse",
    "ProfileUpdate",
    "Role",
    "Subcategory",
    "TokenClaims",
    "UserDeletedResponse",
    "UserEnvelope",
    "UserMessageResponse",
    "UserProfile",
    "UserRegister",
]
