from app.errors.auth import (
    AccountInactiveError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UserAuthenticationError,
    auth_exception_handler,
)
from app.errors.base import (
    BASE_EXCEPTION,
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    RecordNotFoundError,
    database_exception_handler,
)
from app.errors.password_hasher import (
    PasswordHashingError,
    PasswordRehashError,
    password_hashing_exception_handler,
)
from app.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BASE_EXCEPTION",
    "AccountInactiveError",
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageProcessingError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "InvalidTokenError",
    "MissingTokenError",
    "PasswordHashingError",
    "PasswordRehashError",
    "RecordNotFoundError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "password_hashing_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
