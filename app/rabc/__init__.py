"""Role-based access control decisions."""

from app.rabc.permissions import (
    ADMIN_ROLES,
    OPERATION_ROLES,
    ROLE_HIERARCHY,
    Account,
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

__all__ = [
    "ADMIN_ROLES",
    "OPERATION_ROLES",
    "ROLE_HIERARCHY",
    "Account",
    "Decision",
    "Operation",
    "Principal",
    "authorize",
    "check_registration_role",
    "check_user_delete",
    "check_user_update",
    "enforce",
    "has_role_or_higher",
    "normalize_role",
]
