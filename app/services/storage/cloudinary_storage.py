"""
Cloudinary storage implementation.

This module provides a Cloudinary-based image host for production use.
Blog covers are stored under ``CLOUDINARY_FOLDER`` as PNG with a public id
of ``<epoch-ms>-<original file stem>``.
"""

import asyncio
from functools import partial
from pathlib import PurePosixPath
from time import time
from urllib.parse import urlparse

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from app.configs.settings import settings
from app.decorators.with_retry import with_retry
from app.errors.upload import StorageError
from app.monitoring import get_logger
from app.services.storage.base import UploadedImage

logger = get_logger(__name__)


def public_id_from_url(url: str | None) -> str | None:
    """
    Recover a Cloudinary public id from a delivery URL.

    Args:
        url: Delivery URL such as
            ``https://res.cloudinary.com/demo/image/upload/v17/blog-images/cover.png``

    Returns:
        str | None: ``blog-images/cover``, or None when the URL has no
        recognisable upload path

    Examples:
    --------
    >>> public_id_from_url("https://res.cloudinary.com/d/image/upload/v1/blog-images/a.png")
    'blog-images/a'
    """
    if not url:
        return None

    parts = [part for part in urlparse(url).path.split("/") if part]
    version_index = next(
        (i for i, part in enumerate(parts) if part.startswith("v") and part[1:].isdigit()),
        None,
    )
    if version_index is not None:
        remainder = parts[version_index + 1 :]
    elif "upload" in parts:
        remainder = parts[parts.index("upload") + 1 :]
    else:
        return None

    if not remainder:
        return None
    path = PurePosixPath(*remainder)
    return str(path.with_suffix("")) if path.suffix else str(path)


class CloudinaryStorage:
    """
    Cloudinary image host.

    The SDK is blocking, so every call runs in the default thread pool.
    """

    def __init__(self, folder: str | None = None) -> None:
        """Initialize Cloudinary with configured credentials."""
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        self.folder = folder or settings.CLOUDINARY_FOLDER

    @staticmethod
    def _public_id(filename: str) -> str:
        stem = PurePosixPath(filename or "image").stem or "image"
        return f"{int(time() * 1000)}-{stem}"

    @with_retry(max_retries=3, base_delay=0.5, max_delay=4.0)
    async def _upload(self, file_data: bytes, public_id: str) -> dict:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            partial(
                cloudinary.uploader.upload,
                file_data,
                folder=self.folder,
                public_id=public_id,
                format="png",
                resource_type="image",
                overwrite=False,
            ),
        )

    async def upload(self, file_data: bytes, filename: str, content_type: str) -> UploadedImage:
        """
        Upload an image to Cloudinary.

        Args:
            file_data: Raw image bytes
            filename: Original filename
            content_type: MIME type of the bytes

        Returns:
            UploadedImage: Secure URL and public id

        Raises:
            StorageError: If Cloudinary fails the upload
        """
        try:
            result = await self._upload(file_data, self._public_id(filename))
        except (cloudinary.exceptions.Error, ConnectionError, TimeoutError) as e:
            logger.exception("Cloudinary upload failed")
            raise StorageError from e

        return UploadedImage(url=result["secure_url"], public_id=result["public_id"])

    @with_retry(max_retries=3, base_delay=0.5, max_delay=4.0)
    async def _destroy(self, public_id: str) -> dict:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            partial(cloudinary.uploader.destroy, public_id, resource_type="image"),
        )

    async def destroy(self, public_id: str | None) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            public_id: Cloudinary public id; None is a no-op

        Returns:
            bool: True if Cloudinary reports the image deleted
        """
        if not public_id:
            return False
        result = await self._destroy(public_id)
        logger.info(f"Cloudinary deletion of {public_id}: {result.get('result')}")
        return result.get("result") == "ok"
