"""Tests for slug normalisation."""

import pytest

from app.utils.slug import generate_slug


class TestGenerateSlug:
    """Test cases for generate_slug."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello World", "hello-world"),
            ("Café Déjà Vu!!", "cafe-deja-vu"),
            ("   Hello   World  ", "hello-world"),
            ("FastAPI & SQLModel: A Guide", "fastapi-sqlmodel-a-guide"),
            ("snake_case stays", "snake_case-stays"),
            ("already-a-slug", "already-a-slug"),
            ("a -- b", "a-b"),
        ],
    )
    def test_normalises_text(self, text: str, expected: str) -> None:
        """Titles are lowercased, accents dropped and separators collapsed."""
        assert generate_slug(text) == expected

    @pytest.mark.parametrize("text", ["!!!", "   ", "", "日本語"])
    def test_nothing_url_safe_gives_empty_slug(self, text: str) -> None:
        """Text with no ASCII word characters normalises to an empty slug."""
        assert generate_slug(text) == ""

    @pytest.mark.parametrize(
        "text",
        ["Café Déjà Vu!!", "  Mixed CASE  title ", "a -- b", "Interview Questions: Python"],
    )
    def test_idempotent(self, text: str) -> None:
        """Normalising a slug again changes nothing."""
        once = generate_slug(text)
        assert generate_slug(once) == once
