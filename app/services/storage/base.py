"""
Base storage protocol for blog image hosting.

This module defines the interface image hosts implement, allowing for
different backends (Cloudinary in production, the local filesystem in
development).
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class UploadedImage:
    """Where an uploaded image lives and how to delete it later."""

    url: str
    public_id: str


class ImageHost(Protocol):
    """
    Protocol defining the interface for image hosts.

    All storage implementations must implement these methods
    to ensure consistent behavior across different backends.
    """

    @abstractmethod
    async def upload(self, file_data: bytes, filename: str, content_type: str) -> UploadedImage:
        """
        Upload an image.

        Args:
            file_data: Raw image bytes
            filename: Original filename, used to build a readable key
            content_type: MIME type of the bytes

        Returns:
            UploadedImage: Delivery URL and host key

        Raises:
            StorageError: If the host rejects or fails the upload
        """
        ...

    @abstractmethod
    async def destroy(self, public_id: str | None) -> bool:
        """
        Delete an image by its host key.

        Args:
            public_id: Host key returned by ``upload``; None is a no-op

        Returns:
            bool: True if the host reports the image deleted
        """
        ...
