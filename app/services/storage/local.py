"""
Local filesystem storage implementation.

This module provides a local image host for development and testing.
Files are written under ``UPLOADS_DIR`` and served from ``/uploads``.
"""

from pathlib import Path, PurePosixPath
from time import time

import aiofiles

from app.configs.settings import settings
from app.services.storage.base import UploadedImage

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class LocalStorage:
    """
    Local filesystem image host.

    The public id is the path relative to ``UPLOADS_DIR`` without extension,
    mirroring how Cloudinary keys look.
    """

    def __init__(self, uploads_dir: Path | None = None, folder: str | None = None) -> None:
        """Initialize local storage with configured paths."""
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.folder = folder or settings.CLOUDINARY_FOLDER
        self.base_path = self.uploads_dir / self.folder
        self.base_path.mkdir(parents=True, exist_ok=True)

    async def upload(self, file_data: bytes, filename: str, content_type: str) -> UploadedImage:
        """
        Write an image to the uploads directory.

        Args:
            file_data: Raw image bytes
            filename: Original filename
            content_type: MIME type of the bytes

        Returns:
            UploadedImage: URL path and public id
        """
        stem = PurePosixPath(filename or "image").stem or "image"
        name = f"{int(time() * 1000)}-{stem}"
        extension = EXTENSIONS.get(content_type, "png")
        file_path = self.base_path / f"{name}.{extension}"

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_data)

        return UploadedImage(
            url=f"/uploads/{self.folder}/{name}.{extension}",
            public_id=f"{self.folder}/{name}",
        )

    async def destroy(self, public_id: str | None) -> bool:
        """
        Delete an image written by ``upload``.

        Args:
            public_id: Relative key without extension; None is a no-op

        Returns:
            bool: True if a file was removed
        """
        if not public_id:
            return False
        for extension in EXTENSIONS.values():
            file_path = self.uploads_dir / f"{public_id}.{extension}"
            if file_path.exists():
                file_path.unlink()
                return True
        return False
