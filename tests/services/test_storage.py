"""Tests for the image hosts."""

from pathlib import Path
from unittest.mock import patch

import cloudinary.exceptions
import pytest

from app.errors.upload import StorageError
from app.services.storage import CloudinaryStorage, LocalStorage, public_id_from_url


class TestPublicIdFromUrl:
    """Tests for recovering host keys from delivery URLs."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            (
                "https://res.cloudinary.com/demo/image/upload/v1700000000/blog-images/cover.png",
                "blog-images/cover",
            ),
            (
                "https://res.cloudinary.com/demo/image/upload/blog-images/cover.jpg",
                "blog-images/cover",
            ),
            ("https://res.cloudinary.com/demo/image/upload/v1/cover", "cover"),
            (
                "https://res.cloudinary.com/demo/image/upload/v12/blog-images/1700-my-post.png",
                "blog-images/1700-my-post",
            ),
        ],
    )
    def test_keeps_folder_and_drops_extension(self, url: str, expected: str) -> None:
        assert public_id_from_url(url) == expected

    @pytest.mark.parametrize(
        "url",
        [None, "", "https://example.com/images/cover.png", "https://res.cloudinary.com/demo/image/upload/"],
    )
    def test_unrecognised_urls(self, url: str | None) -> None:
        assert public_id_from_url(url) is None


class TestLocalStorage:
    """Tests for the filesystem image host."""

    async def test_upload_writes_file(self, tmp_path: Path) -> None:
        storage = LocalStorage(uploads_dir=tmp_path, folder="blog-images")

        uploaded = await storage.upload(b"png-bytes", "cover.jpg", "image/png")

        assert uploaded.public_id.startswith("blog-images/")
        assert uploaded.public_id.endswith("-cover")
        assert uploaded.url == f"/uploads/{uploaded.public_id}.png"
        assert (tmp_path / f"{uploaded.public_id}.png").read_bytes() == b"png-bytes"

    async def test_destroy_removes_file(self, tmp_path: Path) -> None:
        storage = LocalStorage(uploads_dir=tmp_path, folder="blog-images")
        uploaded = await storage.upload(b"png-bytes", "cover", "image/png")

        assert await storage.destroy(uploaded.public_id)
        assert not (tmp_path / f"{uploaded.public_id}.png").exists()
        assert not await storage.destroy(uploaded.public_id)

    async def test_destroy_without_id(self, tmp_path: Path) -> None:
        assert not await LocalStorage(uploads_dir=tmp_path).destroy(None)


class TestCloudinaryStorage:
    """Tests for the Cloudinary image host with the SDK patched out."""

    async def test_upload_returns_secure_url(self) -> None:
        storage = CloudinaryStorage(folder="blog-images")
        result = {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/blog-images/1-cover.png",
            "public_id": "blog-images/1-cover",
        }

        with patch("cloudinary.uploader.upload", return_value=result) as upload:
            uploaded = await storage.upload(b"png-bytes", "cover.jpg", "image/png")

        assert uploaded.url == result["secure_url"]
        assert uploaded.public_id == "blog-images/1-cover"
        _, kwargs = upload.call_args
        assert kwargs["folder"] == "blog-images"
        assert kwargs["format"] == "png"
        assert kwargs["public_id"].endswith("-cover")

    async def test_upload_failure_becomes_storage_error(self) -> None:
        storage = CloudinaryStorage(folder="blog-images")

        with (
            patch("cloudinary.uploader.upload", side_effect=cloudinary.exceptions.Error("bad")),
            pytest.raises(StorageError),
        ):
            await storage.upload(b"png-bytes", "cover.jpg", "image/png")

    @pytest.mark.parametrize(("answer", "expected"), [("ok", True), ("not found", False)])
    async def test_destroy_reports_result(self, answer: str, expected: bool) -> None:
        storage = CloudinaryStorage(folder="blog-images")

        with patch("cloudinary.uploader.destroy", return_value={"result": answer}) as destroy:
            assert await storage.destroy("blog-images/1-cover") is expected

        destroy.assert_called_once_with("blog-images/1-cover", resource_type="image")

    async def test_destroy_without_id(self) -> None:
        assert not await CloudinaryStorage().destroy(None)
