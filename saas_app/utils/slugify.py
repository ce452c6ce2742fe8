"""
SaaS App: Slug Generation

Turns a display name, public address or email into a lowercase,
hyphen-separated, URL-safe slug, then disambiguates it against the
persistence layer through an injected async `exists` callback.

    "Jane Doe"          -> "jane-doe"
    "jane@example.com"  -> "jane-example-com"
    "Zoë  O'Brien"      -> "zoe-o-brien"

Collision handling: if "jane-doe" is taken, "jane-doe-2", "jane-doe-3", ...
are tried in order until a free one is found. The result is deterministic for
a given base and a given set of taken slugs.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)

SlugExists = Callable[[str], Awaitable[bool]]

# Used when the base has no transliterable characters at all
FALLBACK_SLUG = "user"

# First disambiguation suffix ("jane-doe-2")
_FIRST_SUFFIX = 2

# users.slug is String(255); the base slug leaves room for a "-NNNNNNN" suffix
MAX_SLUG_LENGTH = 255
_SUFFIX_ROOM = 8

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """
    Lowercase ASCII transliteration with hyphen separators.

    Accents are folded (NFKD), every run of non-alphanumeric characters
    becomes a single hyphen, and leading/trailing hyphens are stripped.
    Returns FALLBACK_SLUG when nothing survives.
    """
    folded = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM.sub("-", folded.lower()).strip("-")
    return slug or FALLBACK_SLUG


def slug_base(*parts: str | None) -> str:
    """Join the non-empty parts into one slug candidate, e.g. (name, address)."""
    return " ".join(p.strip() for p in parts if p and p.strip())


async def generate_slug(base: str | None, exists: SlugExists) -> str:
    """
    Return a slug for `base` that `exists` reports as free.

    Args:
        base: Text to derive the slug from (display name, address, email).
        exists: Async predicate, True when the slug is already taken.

    Returns:
        The plain slug, or the plain slug with the lowest free numeric suffix.
        Long bases are cut so the result fits in MAX_SLUG_LENGTH.
    """
    original = slugify(base)[: MAX_SLUG_LENGTH - _SUFFIX_ROOM].rstrip("-")
    if not await exists(original):
        return original

    count = _FIRST_SUFFIX
    while await exists(f"{original}-{count}"):
        count += 1

    candidate = f"{original}-{count}"
    logger.debug(
        "slug_disambiguated",
        base_slug=original,
        slug=candidate,
        attempts=count,
    )
    return candidate
