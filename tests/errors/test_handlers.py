# tests/errors/test_handlers.py
"""Tests for app/errors exception classes and handlers."""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from app.configs import DEFAULT_ERROR_MESSAGE, settings
from app.errors import (
    BaseAppError,
    DuplicateEntryError,
    ForbiddenError,
    ImageTooLargeError,
    RecordNotFoundError,
    ValidationError,
    create_exception_handler,
    create_unhandled_exception_handler,
)
from app.main import app

BOOM_PATH = "/__test__/boom"

boom_router = APIRouter()


@boom_router.get(BOOM_PATH)
async def boom() -> None:
    msg = "kaboom"
    raise RuntimeError(msg)


def _request() -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = "/api/test"
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_representation(self) -> None:
        assert str(BaseAppError("Test error")) == "Test error"

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (RecordNotFoundError(), 404),
            (DuplicateEntryError(), 409),
            (ValidationError(), 422),
            (ForbiddenError(), 403),
            (ImageTooLargeError(), 413),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int) -> None:
        assert error.status_code == status_code


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    async def test_handler_with_base_app_error(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(_request(), BaseAppError("Test error", 400))

        assert response.status_code == 400
        assert response.body == b'{"detail":"Test error"}'
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    async def test_extra_attributes_are_echoed(self) -> None:
        """Role denials carry requiredRole and currentRole in the body."""
        handler = create_exception_handler(MagicMock())

        response = await handler(
            _request(),
            ForbiddenError("Nope", required_roles=["admin", "superadmin"], current_role="user"),
        )

        assert response.status_code == 403
        assert orjson.loads(response.body) == {
            "detail": "Nope",
            "requiredRole": ["admin", "superadmin"],
            "currentRole": "user",
        }

    async def test_validation_errors_are_echoed(self) -> None:
        handler = create_exception_handler(MagicMock())
        errors = [{"field": "slug", "message": "empty", "type": "value_error"}]

        response = await handler(_request(), ValidationError("Bad slug", errors=errors))

        assert orjson.loads(response.body) == {"detail": "Bad slug", "errors": errors}


class TestUnhandledExceptionHandler:
    """Tests for the catch-all 500 handler."""

    async def test_error_exposed_outside_production(self) -> None:
        handler = create_unhandled_exception_handler(MagicMock())

        response = await handler(_request(), RuntimeError("kaboom"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {"detail": DEFAULT_ERROR_MESSAGE, "error": "kaboom"}

    async def test_error_hidden_in_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        handler = create_unhandled_exception_handler(MagicMock())

        response = await handler(_request(), RuntimeError("secret internals"))

        assert orjson.loads(response.body) == {"detail": DEFAULT_ERROR_MESSAGE}

    async def test_unhandled_error_through_app(self) -> None:
        """A route raising an unexpected error answers 500 with the generic body."""
        app.include_router(boom_router)
        try:
            async with AsyncClient(
                base_url="http://test",
                transport=ASGITransport(app=app, raise_app_exceptions=False),
            ) as client:
                response = await client.get(BOOM_PATH)
        finally:
            app.router.routes[:] = [
                route for route in app.router.routes if getattr(route, "path", None) != BOOM_PATH
            ]

        assert response.status_code == 500
        assert response.json()["detail"] == DEFAULT_ERROR_MESSAGE
        assert response.json()["error"] == "kaboom"
