from app.routes.auth import router as auth_router
from app.routes.blog import router as blog_router
from app.routes.health import router as health_router
from app.routes.user import router as user_router

__all__ = [
    "auth_router",
    "blog_router",
    "health_router",
    "user_router",
]
