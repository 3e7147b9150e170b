"""Authentication service handling registration, login and self-service profiles."""

from app.errors.auth import AccountInactiveError, InvalidCredentialsError
from app.errors.database import DuplicateEntryError, RecordNotFoundError
from app.managers.password_manager import hash_password, verify_and_update_password
from app.managers.token_manager import create_access_token
from app.models import UserDB
from app.monitoring import get_logger
from app.rabc import Principal, check_registration_role, enforce
from app.repositories.user import DUPLICATE_USER_MESSAGE, UserRepository
from app.schemas.user import ProfileUpdate, UserRegister
from app.utils.helpers import utc_now

logger = get_logger(__name__)

USER_NOT_FOUND_MESSAGE = "User not found"


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register(self, payload: UserRegister, actor: Principal | None = None) -> UserDB:
        """
        Create a new account.

        Anyone may create a ``user``; elevated roles need a caller whose
        role is at least the one requested.

        Args:
            payload: Validated registration payload
            actor: Authenticated caller, if a bearer token was sent

        Returns:
            UserDB: Created user

        Raises:
            ForbiddenError: If the caller may not grant the requested role
            DuplicateEntryError: If the username or email is already taken
        """
        enforce(check_registration_role(actor, payload.role))

        if await self.user_repo.username_or_email_taken(payload.username, payload.email):
            raise DuplicateEntryError(detail=DUPLICATE_USER_MESSAGE)

        password_hash = await hash_password(payload.password.get_secret_value())
        user = await self.user_repo.create_user(
            username=payload.username,
            password_hash=password_hash,
            email=payload.email,
            role=str(payload.role),
        )
        logger.info(f"Registered user {user.username} with role {user.role}")
        return user

    async def authenticate(self, identifier: str, password: str) -> tuple[UserDB, str]:
        """
        Authenticate by username or email and issue an access token.

        Unknown identifiers and wrong passwords fail identically. An inactive
        account is only reported once the password has been verified.

        Args:
            identifier: Username or email
            password: Plaintext password

        Returns:
            tuple[UserDB, str]: The user and a signed access token

        Raises:
            InvalidCredentialsError: If the identifier or password does not match
            AccountInactiveError: If the account is deactivated
        """
        user = await self.user_repo.get_by_identifier(identifier)
        is_valid, new_hash = await verify_and_update_password(
            password,
            user.password_hash if user else None,
        )
        if not user or not is_valid:
            raise InvalidCredentialsError

        if not user.is_active:
            raise AccountInactiveError

        values: dict[str, object] = {"last_login": utc_now()}
        if new_hash:
            values["password_hash"] = new_hash
        user = await self.user_repo.update(user, **values)

        logger.info(f"User {user.username} logged in")
        return user, create_access_token(user)

    async def get_active_user(self, principal: Principal) -> UserDB:
        """
        Load the caller's account fresh from the database.

        Args:
            principal: Authenticated caller

        Returns:
            UserDB: The caller's account

        Raises:
            RecordNotFoundError: If the account no longer exists
            AccountInactiveError: If the account has been deactivated
        """
        user = await self.user_repo.get_by_id(principal.user_id)
        if not user:
            raise RecordNotFoundError(detail=USER_NOT_FOUND_MESSAGE)
        if not user.is_active:
            raise AccountInactiveError
        return user

    async def get_profile(self, principal: Principal) -> UserDB:
        """
        Get the caller's profile.

        Raises:
            RecordNotFoundError: If the account no longer exists
        """
        return await self.user_repo.get_or_raise(principal.user_id, USER_NOT_FOUND_MESSAGE)

    async def update_profile(self, principal: Principal, payload: ProfileUpdate) -> UserDB:
        """
        Update the caller's own email.

        Args:
            principal: Authenticated caller
            payload: New email (None leaves it unchanged)

        Returns:
            UserDB: Updated account

        Raises:
            RecordNotFoundError: If the account no longer exists
            DuplicateEntryError: If another account uses the email
        """
        user = await self.get_profile(principal)
        if payload.email is None or payload.email == user.email:
            return user

        if await self.user_repo.username_or_email_taken(email=payload.email, exclude_id=user.id):
            raise DuplicateEntryError(detail=DUPLICATE_USER_MESSAGE)
        return await self.user_repo.update(user, email=payload.email)

    async def logout(self, principal: Principal) -> None:
        """
        Log the caller out.

        Tokens are stateless; the client discards its copy.
        """
        logger.info(f"User {principal.username} logged out")
