"""
Media upload service.

This module provides the service that validates blog cover images and
hands them to the configured image host.
"""

from io import BytesIO
from pathlib import PurePosixPath

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from app.configs.settings import settings
from app.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedImageTypeError,
)
from app.monitoring import get_logger
from app.services.storage import ImageHost, UploadedImage, get_storage_service

logger = get_logger(__name__)


class MediaService:
    """
    Service for managing blog cover images.

    Handles image validation, conversion to PNG, and storage operations.
    """

    def __init__(self, storage: ImageHost | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional image host instance. If not provided,
                    the configured image host will be used.
        """
        self.storage = storage or get_storage_service()
        self.image_max_size_bytes = settings.MEDIA_IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.image_allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.image_allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        """Validate image file size."""
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> Image.Image:
        """Validate that the bytes decode as an image."""
        try:
            Image.open(BytesIO(file_data)).verify()
            return Image.open(BytesIO(file_data))
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidImageError from e

    def _to_png(self, img: Image.Image) -> bytes:
        """Re-encode the image as PNG."""
        try:
            if img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
                img = img.convert("RGBA")
            buffer = BytesIO()
            img.save(buffer, format="PNG", optimize=True)
            return buffer.getvalue()
        except (OSError, ValueError) as e:
            raise ImageProcessingError from e

    async def upload_blog_image(self, file: UploadFile) -> UploadedImage:
        """
        Validate and upload a blog cover image.

        Args:
            file: Uploaded file

        Returns:
            UploadedImage: Delivery URL and host key of the stored image

        Raises:
            UnsupportedImageTypeError: If the MIME type is not allowed
            ImageTooLargeError: If the file exceeds the size limit
            InvalidImageError: If the bytes are not an image
            StorageError: If the host fails the upload
        """
        self._validate_image_type(file.content_type)
        file_data = await file.read()
        self._validate_image_size(file_data)
        img = self._validate_image_content(file_data)
        processed = self._to_png(img)

        filename = PurePosixPath(file.filename or "image").stem or "image"
        uploaded = await self.storage.upload(processed, filename, "image/png")
        logger.info(f"Uploaded blog image {uploaded.public_id}")
        return uploaded

    async def release(self, public_id: str | None) -> None:
        """
        Delete a hosted image without letting failures escape.

        A failed deletion only leaves an orphaned file behind, so it is
        logged and the caller carries on.

        Args:
            public_id: Host key; None is a no-op
        """
        if not public_id:
            return
        try:
            await self.storage.destroy(public_id)
        except Exception:
            logger.exception(f"Failed to delete image {public_id}")
