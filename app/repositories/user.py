"""User repository for database operations."""

from typing import ClassVar
from uuid import UUID

from sqlalchemy import desc, or_, select

from app.models.user import UserDB
from app.repositories.base import BaseRepository

DUPLICATE_USER_MESSAGE = "User with that username or email already exists"


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Usernames are matched exactly; emails are stored lowercased, so
    lookups lowercase the probe first.
    """

    model = UserDB
    conflict_messages: ClassVar[dict[str, str]] = {
        "username": DUPLICATE_USER_MESSAGE,
        "email": DUPLICATE_USER_MESSAGE,
    }

    async def create_user(
        self,
        username: str,
        password_hash: str,
        email: str | None = None,
        role: str = "user",
    ) -> UserDB:
        """
        Create a new user in the database.

        Args:
            username: Unique username
            password_hash: Already-hashed password
            email: Optional unique email
            role: Account role

        Returns:
            UserDB: Created user

        Raises:
            DuplicateEntryError: If username or email already exists
        """
        db_user = UserDB(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        return await self._add_and_refresh(db_user)

    async def get_by_username(self, username: str) -> UserDB | None:
        """
        Get user by username.

        Args:
            username: Username to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("username", username)

    async def get_by_email(self, email: str) -> UserDB | None:
        """
        Get user by email.

        Args:
            email: Email to search for

        Returns:
            UserDB | None: User if found, None otherwise
        """
        return await self.get_by_field("email", email.strip().lower())

    async def get_by_identifier(self, identifier: str) -> UserDB | None:
        """
        Get user whose username or email matches the identifier.

        Args:
            identifier: Username or email

        Returns:
            UserDB | None: User if found, None otherwise
        """
        identifier = identifier.strip()
        statement = select(UserDB).where(
            or_(UserDB.username == identifier, UserDB.email == identifier.lower()),
        )
        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none()

    async def username_or_email_taken(
        self,
        username: str | None = None,
        email: str | None = None,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Check whether another account already uses the username or email.

        Args:
            username: Username to check (skipped when None)
            email: Email to check (skipped when None)
            exclude_id: Account allowed to keep its own values

        Returns:
            bool: True if any of the given values is taken
        """
        if username is not None and await self._check_exists_by_field(
            "username",
            username,
            exclude_id,
        ):
            return True
        return email is not None and await self._check_exists_by_field("email", email, exclude_id)

    async def list_users(self) -> list[UserDB]:
        """
        Get all users, newest first.

        Returns:
            list[UserDB]: All users
        """
        statement = select(UserDB).order_by(desc(UserDB.created_at))
        result = await self.session.execute(statement)
        return list(result.scalars().all())
