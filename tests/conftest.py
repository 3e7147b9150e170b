# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read once at import time, so this must happen before the
# app is imported anywhere
_TEST_ROOT = mkdtemp(prefix="blogdesk-tests-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/app.db"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["UPLOADS_DIR"] = f"{_TEST_ROOT}/uploads"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-suite"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from io import BytesIO  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402

from app.db import Database  # noqa: E402
from app.dependencies import get_image_host  # noqa: E402
from app.main import app  # noqa: E402
from app.managers import create_access_token, hash_password, limiter  # noqa: E402
from app.models import UserDB  # noqa: E402
from app.repositories import UserRepository  # noqa: E402
from app.services.storage import UploadedImage  # noqa: E402

TEST_PASSWORD = "secret123"

type UserFactory = Callable[..., Awaitable[UserDB]]


class FakeImageHost:
    """In-memory image host recording what was stored and deleted."""

    def __init__(self) -> None:
        self.uploads: list[UploadedImage] = []
        self.destroyed: list[str] = []
        self.fail_destroy = False

    async def upload(self, file_data: bytes, filename: str, content_type: str) -> UploadedImage:
        public_id = f"blog-images/{len(self.uploads) + 1}-{filename}"
        uploaded = UploadedImage(
            url=f"https://res.cloudinary.com/demo/image/upload/v1/{public_id}.png",
            public_id=public_id,
        )
        self.uploads.append(uploaded)
        return uploaded

    async def destroy(self, public_id: str | None) -> bool:
        if self.fail_destroy:
            msg = "image host unreachable"
            raise ConnectionError(msg)
        if not public_id:
            return False
        self.destroyed.append(public_id)
        return True


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """Create a fresh SQLite database and attach it to the app."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.init_models()
    app.state.database = db
    yield db
    await db.close()


@pytest.fixture
def image_host() -> Generator[FakeImageHost]:
    """Route image uploads to an in-memory host."""
    host = FakeImageHost()
    app.dependency_overrides[get_image_host] = lambda: host
    yield host
    app.dependency_overrides.pop(get_image_host, None)


@pytest.fixture
async def client(database: Database, image_host: FakeImageHost) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def make_user(database: Database) -> UserFactory:
    """Return a coroutine that stores a user with a known password."""

    async def _make_user(
        username: str,
        role: str = "user",
        email: str | None = None,
        password: str = TEST_PASSWORD,
        *,
        is_active: bool = True,
    ) -> UserDB:
        async with database.transaction() as session:
            repo = UserRepository(session)
            user = await repo.create_user(
                username=username,
                password_hash=await hash_password(password),
                email=email,
                role=role,
            )
            if not is_active:
                user = await repo.update(user, is_active=False)
        return user

    return _make_user


def bearer(user: UserDB) -> dict[str, str]:
    """Build an Authorization header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
async def writer(make_user: UserFactory) -> UserDB:
    return await make_user("jane_doe", email="jane@example.com")


@pytest.fixture
async def editor(make_user: UserFactory) -> UserDB:
    return await make_user("site_editor", role="admin", email="editor@example.com")


@pytest.fixture
async def owner(make_user: UserFactory) -> UserDB:
    return await make_user("site_owner", role="superadmin", email="owner@example.com")


@pytest.fixture
async def main_admin(make_user: UserFactory) -> UserDB:
    """The protected account every install starts with."""
    return await make_user("admin", role="superadmin", email="admin@example.com")


@pytest.fixture
def writer_headers(writer: UserDB) -> dict[str, str]:
    return bearer(writer)


@pytest.fixture
def editor_headers(editor: UserDB) -> dict[str, str]:
    return bearer(editor)


@pytest.fixture
def owner_headers(owner: UserDB) -> dict[str, str]:
    return bearer(owner)


def image_bytes(fmt: str = "JPEG", mode: str = "RGB", color: str = "red") -> bytes:
    img = Image.new(mode, (200, 200), color=color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    return image_bytes()


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    return image_bytes("PNG", "RGBA", "blue")

