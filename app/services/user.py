"""User administration service applying the authorization gate's target rules."""

from uuid import UUID

from app.configs import settings
from app.errors.database import DuplicateEntryError
from app.managers.password_manager import hash_password
from app.models import UserDB
from app.monitoring import get_logger
from app.rabc import Principal, check_user_delete, check_user_update, enforce
from app.repositories.user import UserRepository
from app.schemas.enums import Role
from app.schemas.user import AdminUserUpdate
from app.services.auth import USER_NOT_FOUND_MESSAGE

logger = get_logger(__name__)

USER_UPDATE_CONFLICT_MESSAGE = "Username or email already exists"


class UserAdminService:
    """Account administration for admins and superadmins."""

    def __init__(self, user_repo: UserRepository) -> None:
        self.user_repo = user_repo

    async def list_users(self) -> list[UserDB]:
        return await self.user_repo.list_users()

    async def get_user(self, user_id: UUID) -> UserDB:
        """
        Get an account by id.

        Raises:
            RecordNotFoundError: If no account has this id
        """
        return await self.user_repo.get_or_raise(user_id, USER_NOT_FOUND_MESSAGE)

    async def update_user(
        self,
        actor: Principal,
        user_id: UUID,
        payload: AdminUserUpdate,
    ) -> UserDB:
        """
        Apply an administrative update to an account.

        Args:
            actor: Authenticated caller
            user_id: Account to update
            payload: Fields to change

        Returns:
            UserDB: Updated account

        Raises:
            RecordNotFoundError: If no account has this id
            ForbiddenError: If a target rule denies the change
            DuplicateEntryError: If the new username or email is taken
        """
        target = await self.get_user(user_id)
        enforce(
            check_user_update(
                actor,
                target,
                new_username=payload.username,
                new_role=payload.role,
            ),
        )

        changes = payload.model_dump(exclude_none=True)
        if "role" in changes:
            changes["role"] = str(changes["role"])

        if await self.user_repo.username_or_email_taken(
            changes.get("username"),
            changes.get("email"),
            exclude_id=target.id,
        ):
            raise DuplicateEntryError(detail=USER_UPDATE_CONFLICT_MESSAGE)

        user = await self.user_repo.update(target, **changes)
        logger.info(f"{actor.username} updated user {user.username}: {sorted(changes)}")
        return user

    async def delete_user(self, actor: Principal, user_id: UUID) -> UserDB:
        """
        Delete an account.

        Args:
            actor: Authenticated caller
            user_id: Account to delete

        Returns:
            UserDB: The deleted account, for echoing back

        Raises:
            RecordNotFoundError: If no account has this id
            ForbiddenError: If a target rule denies the deletion
        """
        target = await self.get_user(user_id)
        enforce(check_user_delete(actor, target))
        await self.user_repo.delete(target)
        logger.info(f"{actor.username} deleted user {target.username}")
        return target


async def ensure_main_admin(
    user_repo: UserRepository,
    password: str,
    email: str | None = None,
) -> tuple[UserDB, bool]:
    """
    Create the protected main admin account if it does not exist yet.

    Args:
        user_repo: User repository for database operations
        password: Plaintext password for a newly created account
        email: Optional email for a newly created account

    Returns:
        tuple[UserDB, bool]: The account and whether it was created now
    """
    existing = await user_repo.get_by_username(settings.PROTECTED_USERNAME)
    if existing:
        return existing, False

    user = await user_repo.create_user(
        username=settings.PROTECTED_USERNAME,
        password_hash=await hash_password(password),
        email=email.strip().lower() if email else None,
        role=str(Role.SUPERADMIN),
    )
    logger.info(f"Created main admin account {user.username}")
    return user, True
