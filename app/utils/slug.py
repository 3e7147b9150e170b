"""
URL slug normalisation.

``generate_slug`` turns a free-text title into a lowercase, URL-safe slug.
It is pure and idempotent: ``generate_slug(generate_slug(x)) == generate_slug(x)``.

Examples
--------
>>> generate_slug("Café Déjà Vu!!")
'cafe-deja-vu'
>>> generate_slug("   Hello   World  ")
'hello-world'
"""

from re import ASCII
from re import compile as re_compile
from unicodedata import normalize

_COMBINING_MARKS = re_compile(r"[\u0300-\u036f]")
_WHITESPACE = re_compile(r"\s+")
_DISALLOWED = re_compile(r"[^\w-]+", ASCII)
_REPEATED_HYPHENS = re_compile(r"--+")


def generate_slug(text: str) -> str:
    """
    Normalise text into a slug.

    Args:
        text: Source text, usually a blog title or a user-supplied slug

    Returns:
        str: Slug made of ASCII word characters and single hyphens
    """
    slug = _COMBINING_MARKS.sub("", normalize("NFD", text))
    slug = slug.lower().strip()
    slug = _WHITESPACE.sub("-", slug)
    slug = _DISALLOWED.sub("", slug)
    return _REPEATED_HYPHENS.sub("-", slug)
