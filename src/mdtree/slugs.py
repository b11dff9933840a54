"""Heading text to filesystem/anchor slug conversion."""

from __future__ import annotations

import re
from typing import Iterable

_UNSAFE_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")

FALLBACK_STEM = "section"


def sanitize_filename(text: str) -> str:
    """Slug used for both section filenames and in-file anchors.

    >>> sanitize_filename("API Reference / Overview")
    'api-reference-overview'
    """
    slug = _UNSAFE_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def section_filename(heading_text: str) -> str:
    """Filename (with ``.md``) for a section heading."""
    return f"{sanitize_filename(heading_text) or FALLBACK_STEM}.md"


def disambiguate(filename: str, taken: Iterable[str]) -> str:
    """Return ``filename`` or the first ``<stem>-<n>.md`` not in ``taken``."""
    taken = set(taken)
    if filename not in taken:
        return filename
    stem = filename[: -len(".md")] if filename.endswith(".md") else filename
    counter = 2
    while f"{stem}-{counter}.md" in taken:
        counter += 1
    return f"{stem}-{counter}.md"
