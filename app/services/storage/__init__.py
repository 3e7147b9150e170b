"""
Storage services package.

This package provides image hosts for blog covers,
with support for local filesystem and Cloudinary.
"""

from app.configs.settings import settings
from app.services.storage.base import ImageHost, UploadedImage
from app.services.storage.cloudinary_storage import CloudinaryStorage, public_id_from_url
from app.services.storage.local import LocalStorage


def get_storage_service() -> ImageHost:
    """
    Get the configured image host.

    Returns the appropriate storage implementation based on
    the STORAGE_PROVIDER setting.

    Returns:
        ImageHost: Configured image host instance
    """
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryStorage()
    return LocalStorage()


__all__ = [
    "CloudinaryStorage",
    "ImageHost",
    "LocalStorage",
    "UploadedImage",
    "get_storage_service",
    "public_id_from_url",
]
