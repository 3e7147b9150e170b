# app/main.py

"""Blog CMS Backend - blog publishing with slug allocation and role-gated administration."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.responses import Response
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.errors import (
    BaseAppError,
    DatabaseError,
    ForbiddenError,
    PasswordHashingError,
    UploadError,
    UserAuthenticationError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    password_hashing_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import configure_logging, get_logger
from app.routes import auth_router, blog_router, health_router, user_router

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog CMS Backend API",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Middleware to trust X-Forwarded-* headers from the hosting proxy
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    health_router,
    auth_router,
    user_router,
    blog_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (UserAuthenticationError, auth_exception_handler),
    (ForbiddenError, auth_exception_handler),
    (DatabaseError, database_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (UploadError, upload_exception_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter

if settings.STORAGE_PROVIDER == "local":
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Welcome to Blog CMS Backend"},
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Too Many Requests"}}},
        },
    },
    operation_id="root_access",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def root(request: Request, response: Response) -> ORJSONResponse:
    """
    Root endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.

    Returns
    -------
    ORJSONResponse
        Welcome message payload.
    """
    return ORJSONResponse(content={"message": f"Welcome to {settings.APP_NAME}"})


if __name__ == "__main__":
    from uvicorn import run

    run("app.main:app", host="127.0.0.1", port=8000, log_level="info", reload=True)
