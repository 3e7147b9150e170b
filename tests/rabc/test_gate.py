"""Tests for the role-based access control gate."""

from dataclasses import dataclass
from uuid import UUID, uuid4

import pytest

from app.errors import ForbiddenError
from app.rabc import (
    Decision,
    Operation,
    Principal,
    authorize,
    check_registration_role,
    check_user_delete,
    check_user_update,
    enforce,
    has_role_or_higher,
    normalize_role,
)
from app.rabc.permissions import (
    ADMIN_PRIVILEGES_MESSAGE,
    DELETE_MAIN_ADMIN_MESSAGE,
    DELETE_SELF_MESSAGE,
    DELETE_SUPERADMIN_MESSAGE,
    PROMOTE_SUPERADMIN_MESSAGE,
    RENAME_MAIN_ADMIN_MESSAGE,
    SUPERADMIN_PRIVILEGES_MESSAGE,
)
from app.schemas.auth import TokenClaims

USER_ADMIN_OPERATIONS = [
    Operation.USERS_LIST,
    Operation.USERS_READ,
    Operation.USERS_UPDATE,
    Operation.USERS_DELETE,
]
AUTHENTICATED_OPERATIONS = [
    Operation.BLOGS_CREATE,
    Operation.BLOGS_UPDATE,
    Operation.BLOGS_DELETE,
    Operation.BLOGS_LIST_OWN,
    Operation.PROFILE_READ,
    Operation.PROFILE_UPDATE,
]


@dataclass
class Target:
    id: UUID
    username: str
    role: str


def principal(role: str, username: str = "actor") -> Principal:
    return Principal(user_id=uuid4(), username=username, role=role)


def target(role: str = "user", username: str = "someone") -> Target:
    return Target(id=uuid4(), username=username, role=role)


class TestRoleHierarchy:
    """Tests for role ordering."""

    def test_superadmin_outranks_everyone(self) -> None:
        """Superadmin has every lower role."""
        assert has_role_or_higher("superadmin", "admin")
        assert has_role_or_higher("superadmin", "user")

    def test_admin_sits_between(self) -> None:
        """Admin has user but not superadmin."""
        assert has_role_or_higher("admin", "user")
        assert not has_role_or_higher("admin", "superadmin")

    def test_user_is_lowest(self) -> None:
        """User does not reach admin."""
        assert has_role_or_higher("user", "user")
        assert not has_role_or_higher("user", "admin")

    def test_unknown_role_ranks_below_user(self) -> None:
        """Roles outside the hierarchy never pass."""
        assert not has_role_or_higher("editor", "user")

    def test_comparison_is_case_insensitive(self) -> None:
        """Role strings are compared after lowercasing."""
        assert has_role_or_higher("SuperAdmin", "ADMIN")
        assert normalize_role("  Admin ") == "admin"
        assert normalize_role(None) == ""


class TestAuthorize:
    """Tests for the operation matrix."""

    @pytest.mark.parametrize("operation", USER_ADMIN_OPERATIONS)
    @pytest.mark.parametrize("role", ["admin", "superadmin", "ADMIN", "SuperAdmin"])
    def test_admins_manage_users(self, role: str, operation: Operation) -> None:
        """Both admin roles pass the account administration gate."""
        assert authorize(role, operation).allowed

    @pytest.mark.parametrize("operation", USER_ADMIN_OPERATIONS)
    def test_user_denied_account_administration(self, operation: Operation) -> None:
        """Plain users are denied with the required roles echoed."""
        decision = authorize("user", operation)

        assert not decision.allowed
        assert decision.message == ADMIN_PRIVILEGES_MESSAGE
        assert decision.required_roles == ("admin", "superadmin")
        assert decision.current_role == "user"

    @pytest.mark.parametrize("operation", AUTHENTICATED_OPERATIONS)
    @pytest.mark.parametrize("role", ["user", "admin", "superadmin"])
    def test_any_role_writes_blogs_and_profile(self, role: str, operation: Operation) -> None:
        """Blog writes and profile access need authentication only."""
        assert authorize(role, operation).allowed

    @pytest.mark.parametrize("operation", list(Operation))
    def test_unknown_role_denied_everywhere(self, operation: Operation) -> None:
        """A role outside the hierarchy is never allowed."""
        assert not authorize("guest", operation).allowed


class TestCheckUserUpdate:
    """Tests for administrative update rules."""

    def test_user_actor_denied_by_role(self) -> None:
        """The role check runs before any target rule."""
        decision = check_user_update(principal("user"), target())

        assert not decision.allowed
        assert decision.required_roles == ("admin", "superadmin")

    def test_main_admin_cannot_be_renamed(self) -> None:
        """The protected account keeps its username, even for superadmins."""
        decision = check_user_update(
            principal("superadmin"),
            target("superadmin", "admin"),
            new_username="root",
        )

        assert not decision.allowed
        assert decision.message == RENAME_MAIN_ADMIN_MESSAGE
        assert decision.required_roles is None

    def test_main_admin_same_username_allowed(self) -> None:
        """Resubmitting the current username is not a rename."""
        decision = check_user_update(
            principal("superadmin"),
            target("superadmin", "admin"),
            new_username="admin",
        )
        assert decision.allowed

    def test_admin_cannot_promote_to_superadmin(self) -> None:
        """Only a superadmin grants superadmin."""
        decision = check_user_update(principal("admin"), target(), new_role="SUPERADMIN")

        assert not decision.allowed
        assert decision.message == PROMOTE_SUPERADMIN_MESSAGE

    def test_superadmin_can_promote(self) -> None:
        """Superadmins may grant any role."""
        assert check_user_update(principal("superadmin"), target(), new_role="superadmin").allowed

    def test_admin_can_grant_admin(self) -> None:
        """Granting admin only needs the admin gate."""
        assert check_user_update(principal("admin"), target(), new_role="admin").allowed


class TestCheckUserDelete:
    """Tests for deletion rules."""

    def test_main_admin_never_deleted(self) -> None:
        """Not even a superadmin may delete the protected account."""
        decision = check_user_delete(principal("superadmin"), target("superadmin", "admin"))

        assert not decision.allowed
        assert decision.message == DELETE_MAIN_ADMIN_MESSAGE

    def test_cannot_delete_self(self) -> None:
        """Actors may not delete their own account."""
        actor = principal("admin", "site_editor")
        own_account = Target(id=actor.user_id, username=actor.username, role="admin")

        decision = check_user_delete(actor, own_account)

        assert not decision.allowed
        assert decision.message == DELETE_SELF_MESSAGE

    def test_admin_cannot_delete_superadmin(self) -> None:
        """Deleting a superadmin takes a superadmin."""
        decision = check_user_delete(principal("admin"), target("superadmin"))

        assert not decision.allowed
        assert decision.message == DELETE_SUPERADMIN_MESSAGE

    def test_superadmin_deletes_other_superadmin(self) -> None:
        """Superadmins may delete each other, except the main admin."""
        assert check_user_delete(principal("superadmin"), target("superadmin")).allowed

    def test_admin_deletes_user(self) -> None:
        """The common case passes."""
        assert check_user_delete(principal("admin"), target("user")).allowed


class TestCheckRegistrationRole:
    """Tests for registration role elevation."""

    @pytest.mark.parametrize("actor", [None, principal("user"), principal("admin")])
    def test_anyone_registers_a_user(self, actor: Principal | None) -> None:
        """Plain accounts need no caller at all."""
        assert check_registration_role(actor, "user").allowed

    def test_anonymous_cannot_create_admin(self) -> None:
        """Elevated roles need a caller."""
        decision = check_registration_role(None, "admin")

        assert not decision.allowed
        assert decision.message == ADMIN_PRIVILEGES_MESSAGE
        assert decision.required_roles == ("admin", "superadmin")
        assert decision.current_role is None

    def test_user_cannot_create_admin(self) -> None:
        decision = check_registration_role(principal("user"), "admin")

        assert not decision.allowed
        assert decision.current_role == "user"

    @pytest.mark.parametrize("role", ["admin", "superadmin"])
    def test_admins_create_admin(self, role: str) -> None:
        assert check_registration_role(principal(role), "admin").allowed

    def test_admin_cannot_create_superadmin(self) -> None:
        """Creating a superadmin takes a superadmin."""
        decision = check_registration_role(principal("admin"), "superadmin")

        assert not decision.allowed
        assert decision.message == SUPERADMIN_PRIVILEGES_MESSAGE
        assert decision.required_roles == ("superadmin",)

    def test_superadmin_creates_superadmin(self) -> None:
        assert check_registration_role(principal("superadmin"), "superadmin").allowed


class TestEnforce:
    """Tests for turning decisions into errors."""

    def test_allow_passes(self) -> None:
        enforce(Decision.allow())

    def test_role_denial_echoes_roles(self) -> None:
        """Role denials carry requiredRole and currentRole."""
        with pytest.raises(ForbiddenError) as exc_info:
            enforce(authorize("user", Operation.USERS_LIST))

        error = exc_info.value
        assert error.status_code == 403
        assert error.detail == ADMIN_PRIVILEGES_MESSAGE
        assert error.requiredRole == ["admin", "superadmin"]
        assert error.currentRole == "user"

    def test_rule_denial_has_no_role_echo(self) -> None:
        """Target rule denials only carry the message."""
        with pytest.raises(ForbiddenError) as exc_info:
            enforce(Decision.deny(DELETE_SELF_MESSAGE))

        assert exc_info.value.detail == DELETE_SELF_MESSAGE
        assert not hasattr(exc_info.value, "requiredRole")


class TestPrincipal:
    """Tests for building the caller from token claims."""

    def test_role_kept_as_claimed(self) -> None:
        claims = TokenClaims(
            user_id=uuid4(),
            username="jane_doe",
            email="jane@example.com",
            role=" Admin ",
            jti="abc",
        )

        caller = Principal.from_claims(claims)

        assert caller.role == " Admin "
        assert caller.username == "jane_doe"
        assert caller.user_id == claims.user_id

    def test_claimed_role_is_compared_normalised(self) -> None:
        caller = Principal.from_claims(
            TokenClaims(user_id=uuid4(), username="site_editor", role="ADMIN", jti="abc"),
        )

        assert authorize(caller.role, Operation.USERS_LIST).allowed

    def test_denial_echoes_claimed_role(self) -> None:
        """``currentRole`` shows the role exactly as the token carries it."""
        caller = Principal.from_claims(
            TokenClaims(user_id=uuid4(), username="jane_doe", role="User", jti="abc"),
        )

        with pytest.raises(ForbiddenError) as exc_info:
            enforce(authorize(caller.role, Operation.USERS_DELETE))

        assert exc_info.value.currentRole == "User"
