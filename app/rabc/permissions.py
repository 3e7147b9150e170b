"""
Role-based access control (RBAC) decisions.

Everything here is a pure function of the caller's claims, the operation
and (for account administration) the target account, so every rule can be
tested without a request, a database or a token. FastAPI wiring lives in
``app.auth.permissions``.

Roles form a strict hierarchy ``superadmin > admin > user`` and are always
compared case-insensitively.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, Self
from uuid import UUID

from app.configs import settings
from app.errors.auth import ForbiddenError
from app.schemas.auth import TokenClaims
from app.schemas.enums import Role

ADMIN_PRIVILEGES_MESSAGE = "Access denied. Admin privileges required."
SUPERADMIN_PRIVILEGES_MESSAGE = "Access denied. Superadmin privileges required."
RENAME_MAIN_ADMIN_MESSAGE = "Cannot change main admin username"
PROMOTE_SUPERADMIN_MESSAGE = "Only superadmin can promote users to superadmin role"
DELETE_MAIN_ADMIN_MESSAGE = "Cannot delete the main admin user"
DELETE_SELF_MESSAGE = "Cannot delete yourself"
DELETE_SUPERADMIN_MESSAGE = "Only superadmin can delete other superadmins"


class Operation(StrEnum):
    """Operations guarded by the gate."""

    USERS_LIST = "users:list"
    USERS_READ = "users:read"
    USERS_UPDATE = "users:update"
    USERS_DELETE = "users:delete"
    BLOGS_CREATE = "blogs:create"
    BLOGS_UPDATE = "blogs:update"
    BLOGS_DELETE = "blogs:delete"
    BLOGS_LIST_OWN = "blogs:list_own"
    PROFILE_READ = "profile:read"
    PROFILE_UPDATE = "profile:update"


ROLE_HIERARCHY: dict[str, int] = {
    Role.USER: 0,
    Role.ADMIN: 1,
    Role.SUPERADMIN: 2,
}

ADMIN_ROLES: tuple[str, ...] = (Role.ADMIN, Role.SUPERADMIN)
ANY_ROLE: tuple[str, ...] = (Role.USER, Role.ADMIN, Role.SUPERADMIN)

OPERATION_ROLES: dict[Operation, tuple[str, ...]] = {
    Operation.USERS_LIST: ADMIN_ROLES,
    Operation.USERS_READ: ADMIN_ROLES,
    Operation.USERS_UPDATE: ADMIN_ROLES,
    Operation.USERS_DELETE: ADMIN_ROLES,
    # Blog writes need authentication only; there is no ownership check
    Operation.BLOGS_CREATE: ANY_ROLE,
    Operation.BLOGS_UPDATE: ANY_ROLE,
    Operation.BLOGS_DELETE: ANY_ROLE,
    Operation.BLOGS_LIST_OWN: ANY_ROLE,
    Operation.PROFILE_READ: ANY_ROLE,
    Operation.PROFILE_UPDATE: ANY_ROLE,
}


class Account(Protocol):
    """Anything carrying the identity fields the gate inspects."""

    id: UUID
    username: str
    role: str


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller, as described by verified token claims.

    ``role`` is kept exactly as the token carries it so denials can echo it;
    every gate check normalizes it before comparing.
    """

    user_id: UUID
    username: str
    role: str
    email: str | None = None

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> Self:
        return cls(
            user_id=claims.user_id,
            username=claims.username,
            role=claims.role,
            email=claims.email,
        )


@dataclass(frozen=True)
class Decision:
    """
    Outcome of a gate check.

    ``required_roles`` and ``current_role`` are only set when the denial
    comes from the role check itself.
    """

    allowed: bool
    message: str = ""
    required_roles: tuple[str, ...] | None = None
    current_role: str | None = None

    @classmethod
    def allow(cls) -> Self:
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str) -> Self:
        return cls(allowed=False, message=message)


def normalize_role(role: str | None) -> str:
    """Lowercase and trim a role string; None becomes an empty role."""
    return (role or "").strip().lower()


def has_role_or_higher(user_role: str, required_role: str) -> bool:
    """
    Check if a role sits at or above another in the hierarchy.

    Unknown roles rank below every known role.

    Args:
        user_role: Caller's role
        required_role: Minimum role

    Returns:
        bool: True if ``user_role`` is at least ``required_role``
    """
    user_level = ROLE_HIERARCHY.get(normalize_role(user_role), -1)
    required_level = ROLE_HIERARCHY.get(normalize_role(required_role), 0)
    return user_level >= required_level


def is_superadmin(role: str) -> bool:
    return normalize_role(role) == Role.SUPERADMIN


def is_protected(account: Account) -> bool:
    """True for the distinguished main admin account."""
    return account.username == settings.PROTECTED_USERNAME


def authorize(role: str, operation: Operation) -> Decision:
    """
    Decide whether a role may perform an operation at all.

    Args:
        role: Caller's role (any case)
        operation: Operation being attempted

    Returns:
        Decision: Allowed, or denied with the required roles echoed
    """
    current = normalize_role(role)
    required = OPERATION_ROLES[operation]
    if current in required:
        return Decision.allow()
    return Decision(
        allowed=False,
        message=ADMIN_PRIVILEGES_MESSAGE,
        required_roles=required,
        current_role=role,
    )


def check_user_update(
    actor: Principal,
    target: Account,
    new_username: str | None = None,
    new_role: str | None = None,
) -> Decision:
    """
    Decide whether ``actor`` may apply an administrative update to ``target``.

    Args:
        actor: Authenticated caller
        target: Account being updated
        new_username: Requested username, if changing
        new_role: Requested role, if changing

    Returns:
        Decision: The first rule that denies, or allow
    """
    decision = authorize(actor.role, Operation.USERS_UPDATE)
    if not decision.allowed:
        return decision

    if is_protected(target) and new_username is not None and new_username != target.username:
        return Decision.deny(RENAME_MAIN_ADMIN_MESSAGE)

    if normalize_role(new_role) == Role.SUPERADMIN and not is_superadmin(actor.role):
        return Decision.deny(PROMOTE_SUPERADMIN_MESSAGE)

    return Decision.allow()


def check_user_delete(actor: Principal, target: Account) -> Decision:
    """
    Decide whether ``actor`` may delete ``target``.

    Args:
        actor: Authenticated caller
        target: Account being deleted

    Returns:
        Decision: The first rule that denies, or allow
    """
    decision = authorize(actor.role, Operation.USERS_DELETE)
    if not decision.allowed:
        return decision

    if is_protected(target):
        return Decision.deny(DELETE_MAIN_ADMIN_MESSAGE)

    if target.id == actor.user_id:
        return Decision.deny(DELETE_SELF_MESSAGE)

    if is_superadmin(target.role) and not is_superadmin(actor.role):
        return Decision.deny(DELETE_SUPERADMIN_MESSAGE)

    return Decision.allow()


def check_registration_role(actor: Principal | None, requested_role: str) -> Decision:
    """
    Decide whether a registration may create an account with ``requested_role``.

    Anyone may register a ``user``. Creating an ``admin`` needs an admin
    caller and creating a ``superadmin`` needs a superadmin caller.

    Args:
        actor: Authenticated caller, or None for anonymous registration
        requested_role: Role requested for the new account

    Returns:
        Decision: Allowed, or denied with the required roles echoed
    """
    requested = normalize_role(requested_role)
    if requested == Role.USER:
        return Decision.allow()

    current = actor.role if actor else None
    if requested == Role.SUPERADMIN:
        if actor and is_superadmin(actor.role):
            return Decision.allow()
        return Decision(
            allowed=False,
            message=SUPERADMIN_PRIVILEGES_MESSAGE,
            required_roles=(Role.SUPERADMIN,),
            current_role=current,
        )

    if actor and has_role_or_higher(actor.role, Role.ADMIN):
        return Decision.allow()
    return Decision(
        allowed=False,
        message=ADMIN_PRIVILEGES_MESSAGE,
        required_roles=ADMIN_ROLES,
        current_role=current,
    )


def enforce(decision: Decision) -> None:
    """
    Raise ``ForbiddenError`` for a denied decision.

    Raises:
        ForbiddenError: If the decision denies
    """
    if decision.allowed:
        return
    required = list(decision.required_roles) if decision.required_roles is not None else None
    raise ForbiddenError(
        detail=decision.message,
        required_roles=required,
        current_role=decision.current_role,
    )
