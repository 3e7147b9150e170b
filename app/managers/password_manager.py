"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashing runs in a worker thread so the event loop is not blocked by the
deliberately expensive key derivation.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from app.configs import CONFIG_MAP, settings
from app.decorators.with_retry import with_retry
from app.errors import PasswordHashingError, PasswordRehashError
from app.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """
    A password hashing and verification manager using Argon2id.

    This class wraps passlib's CryptContext to provide:
    - Secure password hashing with Argon2id
    - Password verification
    - Transparent upgrade of hashes made with deprecated schemes or costs
    """

    def __init__(self, level: str | None = None) -> None:
        """
        Initialize the hasher for a security level from ``CONFIG_MAP``.

        Args:
            level: ``low``, ``medium`` or ``high`` (defaults to
                ``settings.PASSWORD_SECURITY_LEVEL``)
        """
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=CONFIG_MAP[self.level].memory_cost,
            argon2__time_cost=CONFIG_MAP[self.level].time_cost,
            argon2__parallelism=CONFIG_MAP[self.level].parallelism,
        )
        logger.info(f"PasswordHasher initialized with Argon2id on level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password using Argon2id.

        Args:
            password: The plaintext password to hash

        Returns:
            str: The hashed password in Argon2id format

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If hashing fails
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)

        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Invalid password format")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a plaintext password against a hashed password.

        Args:
            password: The plaintext password to verify
            hashed_password: The hashed password to verify against

        Returns:
            bool: True if password matches, False otherwise
        """
        if not isinstance(hashed_password, str) or not hashed_password.strip():
            logger.warning("Invalid hash format provided")
            return False

        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.exception("Stored hash is corrupted or invalid format")
            return False

    def verify_and_update(
        self,
        password: str,
        hashed_password: str | None,
    ) -> tuple[bool, str | None]:
        """
        Verify a password and return a new hash if the current one needs updating.

        Args:
            password: The plaintext password to verify
            hashed_password: The stored hash (None when no account matched)

        Returns:
            tuple[bool, str | None]: Whether the password matched, and a
            replacement hash when the stored one is outdated

        Raises:
            PasswordRehashError: If a needed rehash fails
        """
        if hashed_password is None:
            # Keeps timing similar whether or not the account exists
            self.pwd_context.dummy_verify()
            return False, None

        if not self.verify(password, hashed_password):
            return False, None

        if not self.pwd_context.needs_update(hashed_password):
            return True, None

        try:
            new_hash = self.hash(password)
        except PasswordHashingError as e:
            mssg = "Failed to rehash password"
            raise PasswordRehashError(mssg) from e
        logger.info(f"Password rehashed on level {self.level}")
        return True, new_hash


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """
    Get or create the default password hasher instance.

    Returns:
        PasswordHasher: The shared password hasher instance
    """
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


@with_retry(base_delay=1, max_delay=10, exec_retry=PasswordHashingError)
async def hash_password(password: str) -> str:
    """
    Hash a password using the default hasher.

    Args:
        password: The plaintext password to hash

    Returns:
        str: The hashed password
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password using the default hasher.

    Args:
        password: The plaintext password to verify
        hashed_password: The hashed password to verify against

    Returns:
        bool: True if password matches, False otherwise
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )


@with_retry(base_delay=1, max_delay=10, exec_retry=PasswordRehashError)
async def verify_and_update_password(
    password: str,
    hashed_password: str | None,
) -> tuple[bool, str | None]:
    """
    Verify a password and get a new hash if needed.

    Args:
        password: The plaintext password to verify
        hashed_password: The stored hash (can be None)

    Returns:
        tuple[bool, str | None]: Verification result and new hash if needed
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify_and_update,
        password,
        hashed_password,
    )
