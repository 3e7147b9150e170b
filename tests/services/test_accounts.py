"""Tests for account services that need a database."""

from app.db import Database
from app.managers import verify_password
from app.repositories import UserRepository
from app.services.user import ensure_main_admin


class TestEnsureMainAdmin:
    """Tests for bootstrapping the protected account."""

    async def test_creates_superadmin_once(self, database: Database) -> None:
        async with database.transaction() as session:
            user, created = await ensure_main_admin(
                UserRepository(session),
                "bootstrap-pass",
                email="Admin@Example.com",
            )

        assert created
        assert user.username == "admin"
        assert user.role == "superadmin"
        assert user.email == "admin@example.com"
        assert await verify_password("bootstrap-pass", user.password_hash)

    async def test_existing_account_left_alone(self, database: Database) -> None:
        async with database.transaction() as session:
            first, _ = await ensure_main_admin(UserRepository(session), "bootstrap-pass")

        async with database.transaction() as session:
            again, created = await ensure_main_admin(UserRepository(session), "other-pass")

        assert not created
        assert again.id == first.id
        assert await verify_password("bootstrap-pass", again.password_hash)
