"""Liveness and health endpoints."""

from platform import node

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

from app.db import get_database
from app.managers import limiter
from app.schemas import HealthCheckResponse, PingResponse
from app.utils.helpers import today_str

router = APIRouter(tags=["🩺 Health"])


@router.get(
    "/api/ping",
    response_class=ORJSONResponse,
    response_model=PingResponse,
    summary="Ping",
    description="Lightweight liveness probe used to wake the server.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "pong",
                        "timestamp": "2025-01-01 08:00:00",
                        "status": "healthy",
                        "server": "blog-backend",
                    },
                },
            },
        },
    },
    operation_id="ping",
)
@limiter.exempt
async def ping(request: Request) -> PingResponse:
    return PingResponse(message="pong", timestamp=today_str(), status="healthy", server=node())


@router.get(
    "/health",
    response_class=ORJSONResponse,
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 08:00:00",
                        "database": "connected",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthCheckResponse
        Application version and database reachability.
    """
    reachable = await get_database(request).ping()
    return HealthCheckResponse(
        version=request.app.version,
        status="ok" if reachable else "degraded",
        timestamp=today_str(),
        database="connected" if reachable else "unreachable",
    )
