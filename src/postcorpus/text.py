"""Text helpers shared by the ingestion stages."""

from __future__ import annotations

import math
import re
from unicodedata import normalize

DEFAULT_SLUG = "untitled"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug.

    Args:
        text: Input text, typically a post title or file stem.

    Returns:
        Lower-case ASCII slug. Runs of non-alphanumeric characters collapse
        into a single hyphen and edge hyphens are trimmed. Falls back to
        ``"untitled"`` when nothing alphanumeric remains.

    Examples:
        >>> slugify("Hello World")
        'hello-world'
        >>> slugify("Café au lait")
        'cafe-au-lait'
        >>> slugify("  --C++ & Rust!--  ")
        'c-rust'

    """
    normalized = normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", normalized.lower()).strip("-")
    return slug or DEFAULT_SLUG


def normalize_tag(tag: str) -> str:
    """Return the index key for a tag: trimmed, inner whitespace collapsed, lower-cased."""
    return _WHITESPACE.sub(" ", tag.strip()).lower()


def tag_slug(tag: str) -> str:
    """Return the URL segment used for a tag page (``"Open Source"`` -> ``"open-source"``)."""
    return _WHITESPACE.sub("-", normalize_tag(tag))


def count_words(body: str) -> int:
    return len(body.split())


def reading_minutes(word_count: int, words_per_minute: int = 200) -> int:
    """Estimate reading time in whole minutes, never less than one."""
    return max(1, math.ceil(word_count / words_per_minute))
