"""End-to-end tests for account administration."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

from conftest import bearer
from httpx import AsyncClient

from app.models import UserDB
from app.rabc.permissions import (
    DELETE_MAIN_ADMIN_MESSAGE,
    DELETE_SELF_MESSAGE,
    DELETE_SUPERADMIN_MESSAGE,
    PROMOTE_SUPERADMIN_MESSAGE,
    RENAME_MAIN_ADMIN_MESSAGE,
)
from app.services.user import USER_UPDATE_CONFLICT_MESSAGE

USERS = "/api/auth/users"


class TestListAndRead:
    """Tests for GET /api/auth/users and /api/auth/users/{id}."""

    async def test_user_is_forbidden(
        self,
        client: AsyncClient,
        writer_headers: dict[str, str],
    ) -> None:
        response = await client.get(USERS, headers=writer_headers)

        assert response.status_code == 403
        assert response.json() == {
            "detail": "Access denied. Admin privileges required.",
            "requiredRole": ["admin", "superadmin"],
            "currentRole": "user",
        }

    async def test_requires_token(self, client: AsyncClient) -> None:
        assert (await client.get(USERS)).status_code == 401

    async def test_admin_lists_users(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.get(USERS, headers=editor_headers)

        assert response.status_code == 200
        usernames = {user["username"] for user in response.json()}
        assert usernames == {"jane_doe", "site_editor"}
        assert all("password_hash" not in user for user in response.json())

    async def test_admin_reads_user(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.get(f"{USERS}/{writer.id}", headers=editor_headers)

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "jane_doe"

    async def test_unknown_user(self, client: AsyncClient, editor_headers: dict[str, str]) -> None:
        response = await client.get(f"{USERS}/{uuid4()}", headers=editor_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"


class TestUpdateUser:
    """Tests for PUT /api/auth/users/{id}."""

    async def test_admin_updates_user(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{writer.id}",
            json={"email": "Jane.Doe@Example.com", "role": "admin", "isActive": False},
            headers=editor_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User updated successfully"
        assert body["user"]["email"] == "jane.doe@example.com"
        assert body["user"]["role"] == "admin"
        assert body["user"]["isActive"] is False

    async def test_user_cannot_update(
        self,
        client: AsyncClient,
        editor: UserDB,
        writer_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{editor.id}",
            json={"role": "user"},
            headers=writer_headers,
        )

        assert response.status_code == 403
        assert response.json()["currentRole"] == "user"

    async def test_admin_cannot_promote_to_superadmin(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{writer.id}",
            json={"role": "superadmin"},
            headers=editor_headers,
        )

        assert response.status_code == 403
        assert response.json() == {"detail": PROMOTE_SUPERADMIN_MESSAGE}

    async def test_superadmin_promotes(
        self,
        client: AsyncClient,
        writer: UserDB,
        owner_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{writer.id}",
            json={"role": "SuperAdmin"},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "superadmin"

    async def test_main_admin_cannot_be_renamed(
        self,
        client: AsyncClient,
        main_admin: UserDB,
        owner_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{main_admin.id}",
            json={"username": "root"},
            headers=owner_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == RENAME_MAIN_ADMIN_MESSAGE

    async def test_main_admin_other_fields_editable(
        self,
        client: AsyncClient,
        main_admin: UserDB,
        owner_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{main_admin.id}",
            json={"username": "admin", "email": "root@example.com"},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "root@example.com"

    async def test_username_taken(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor: UserDB,
        owner_headers: dict[str, str],
    ) -> None:
        response = await client.put(
            f"{USERS}/{writer.id}",
            json={"username": editor.username},
            headers=owner_headers,
        )

        assert response.status_code == 409
        assert response.json()["detail"] == USER_UPDATE_CONFLICT_MESSAGE

    async def test_role_change_applies_to_new_tokens(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        """Permissions follow the role in the token, so promotion needs a fresh login."""
        old_headers = bearer(writer)
        promoted = await client.put(
            f"{USERS}/{writer.id}",
            json={"role": "admin"},
            headers=editor_headers,
        )
        writer.role = promoted.json()["user"]["role"]

        assert (await client.get(USERS, headers=old_headers)).status_code == 403
        assert (await client.get(USERS, headers=bearer(writer))).status_code == 200


class TestDeleteUser:
    """Tests for DELETE /api/auth/users/{id}."""

    async def test_admin_deletes_user(
        self,
        client: AsyncClient,
        writer: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"{USERS}/{writer.id}", headers=editor_headers)

        assert response.status_code == 200
        assert response.json() == {
            "message": 'User "jane_doe" deleted successfully',
            "deletedUser": {"id": str(writer.id), "username": "jane_doe", "role": "user"},
        }
        assert (await client.get(f"{USERS}/{writer.id}", headers=editor_headers)).status_code == 404

    async def test_main_admin_protected(
        self,
        client: AsyncClient,
        main_admin: UserDB,
        owner_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"{USERS}/{main_admin.id}", headers=owner_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == DELETE_MAIN_ADMIN_MESSAGE

    async def test_cannot_delete_self(
        self,
        client: AsyncClient,
        editor: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"{USERS}/{editor.id}", headers=editor_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == DELETE_SELF_MESSAGE

    async def test_admin_cannot_delete_superadmin(
        self,
        client: AsyncClient,
        owner: UserDB,
        editor_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"{USERS}/{owner.id}", headers=editor_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == DELETE_SUPERADMIN_MESSAGE

    async def test_superadmin_deletes_superadmin(
        self,
        client: AsyncClient,
        owner_headers: dict[str, str],
        make_user: Callable[..., Awaitable[UserDB]],
    ) -> None:
        other = await make_user("other_owner", role="superadmin")

        response = await client.delete(f"{USERS}/{other.id}", headers=owner_headers)

        assert response.status_code == 200
        assert response.json()["deletedUser"]["role"] == "superadmin"

    async def test_user_cannot_delete(
        self,
        client: AsyncClient,
        editor: UserDB,
        writer_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"{USERS}/{editor.id}", headers=writer_headers)

        assert response.status_code == 403
        assert response.json()["requiredRole"] == ["admin", "superadmin"]

    async def test_unknown_user(self, client: AsyncClient, editor_headers: dict[str, str]) -> None:
        response = await client.delete(f"{USERS}/{uuid4()}", headers=editor_headers)
        assert response.status_code == 404
