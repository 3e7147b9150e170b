# app/routes/user.py

"""
User Administration Routes.

Account administration endpoints for admins and superadmins under
``/api/auth/users``.

Summary
-------
Endpoints include:
  - List users
  - Get user by id
  - Update user
  - Delete user

Dependencies
------------
  - `UserUpdateOps` / `UserDeleteOps`: Bundle the admin service with the
    gate-checked caller for write operations.

Authorization
-------------
Every endpoint requires an `admin` or `superadmin` bearer token. Updates and
deletions are further subject to the main-admin, self-delete and superadmin
target rules.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from app.auth import UsersDeleteDep, UsersListDep, UsersReadDep, UsersUpdateDep
from app.dependencies import UserAdminServiceDep
from app.schemas.user import (
    AdminUserUpdate,
    DeletedUser,
    UserDeletedResponse,
    UserEnvelope,
    UserMessageResponse,
    UserProfile,
)

router = APIRouter(prefix="/api/auth/users", tags=["👤 Users"])

USER_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "username": "jane_doe",
    "email": "jane@example.com",
    "role": "admin",
    "isActive": True,
    "lastLogin": None,
    "createdAt": "2025-01-01T08:00:00Z",
    "updatedAt": "2025-01-01T08:00:00Z",
}

ADMIN_REQUIRED_RESPONSE = {
    "description": "Forbidden",
    "content": {
        "application/json": {
            "example": {
                "detail": "Access denied. Admin privileges required.",
                "requiredRole": ["admin", "superadmin"],
                "currentRole": "user",
            },
        },
    },
}

NOT_FOUND_RESPONSE = {
    "description": "Not Found",
    "content": {"application/json": {"example": {"detail": "User not found"}}},
}


@dataclass(frozen=True)
class UserUpdateOps:
    """Dependencies for account updates."""

    service: UserAdminServiceDep
    actor: UsersUpdateDep


@dataclass(frozen=True)
class UserDeleteOps:
    """Dependencies for account deletions."""

    service: UserAdminServiceDep
    actor: UsersDeleteDep


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[UserProfile],
    summary="List users",
    description="All accounts, newest first. Password hashes are never returned.",
    responses={
        200: {"content": {"application/json": {"example": [USER_EXAMPLE]}}},
        403: ADMIN_REQUIRED_RESPONSE,
    },
    operation_id="users_list",
)
async def list_users(service: UserAdminServiceDep, actor: UsersListDep) -> list[UserProfile]:
    """
    List all users.

    Parameters
    ----------
    service : UserAdminService
        Account administration service.
    actor : Principal
        Admin caller.

    Returns
    -------
    list[UserProfile]
        Every account, newest first.
    """
    return [UserProfile.model_validate(user) for user in await service.list_users()]


@router.get(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Get user by id",
    responses={
        200: {"content": {"application/json": {"example": {"user": USER_EXAMPLE}}}},
        403: ADMIN_REQUIRED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="users_get",
)
async def get_user(
    user_id: UUID,
    service: UserAdminServiceDep,
    actor: UsersReadDep,
) -> UserEnvelope:
    """
    Get a single account.

    Parameters
    ----------
    user_id : UUID
        Account id.
    service : UserAdminService
        Account administration service.
    actor : Principal
        Admin caller.

    Returns
    -------
    UserEnvelope
        The account.
    """
    user = await service.get_user(user_id)
    return UserEnvelope(user=UserProfile.model_validate(user))


@router.put(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserMessageResponse,
    summary="Update user",
    description=(
        "Change username, email, role or active flag. The main `admin` account "
        "cannot be renamed and only a superadmin may grant the `superadmin` role."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "User updated successfully", "user": USER_EXAMPLE},
                },
            },
        },
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"detail": "Only superadmin can promote users to superadmin role"},
                },
            },
        },
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Conflict",
            "content": {"application/json": {"example": {"detail": "Username or email already exists"}}},
        },
    },
    operation_id="users_update",
)
async def update_user(
    user_id: UUID,
    payload: AdminUserUpdate,
    ops: Annotated[UserUpdateOps, Depends()],
) -> UserMessageResponse:
    """
    Update an account.

    Parameters
    ----------
    user_id : UUID
        Account id.
    payload : AdminUserUpdate
        Fields to change.
    ops : UserUpdateOps
        Service and gate-checked caller.

    Returns
    -------
    UserMessageResponse
        The updated account.
    """
    user = await ops.service.update_user(ops.actor, user_id, payload)
    return UserMessageResponse(
        message="User updated successfully",
        user=UserProfile.model_validate(user),
    )


@router.delete(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserDeletedResponse,
    summary="Delete user",
    description=(
        "Delete an account. The main `admin` account, the caller's own account and "
        "(for non-superadmins) superadmin accounts cannot be deleted."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": 'User "jane_doe" deleted successfully',
                        "deletedUser": {
                            "id": "123e4567-e89b-12d3-a456-426614174000",
                            "username": "jane_doe",
                            "role": "user",
                        },
                    },
                },
            },
        },
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"detail": "Cannot delete yourself"}}},
        },
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="users_delete",
)
async def delete_user(
    user_id: UUID,
    ops: Annotated[UserDeleteOps, Depends()],
) -> UserDeletedResponse:
    """
    Delete an account.

    Parameters
    ----------
    user_id : UUID
        Account id.
    ops : UserDeleteOps
        Service and gate-checked caller.

    Returns
    -------
    UserDeletedResponse
        Confirmation with the deleted account's identity.
    """
    user = await ops.service.delete_user(ops.actor, user_id)
    return UserDeletedResponse(
        message=f'User "{user.username}" deleted successfully',
        deleted_user=DeletedUser(id=user.id, username=user.username, role=user.role),
    )
