"""Parse Markdown into a tree and enumerate its headings and links."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from markdown_it import MarkdownIt

from mdtree.schemas import HeadingRef

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for Markdown inspection (pip install beautifulsoup4)."
    ) from exc


_HEADING_RE = re.compile(r"^h[1-6]$")
_WHITESPACE_RE = re.compile(r"\s+")
# Characters that would otherwise start inline markup, an entity or a closing sequence.
_INLINE_SPECIAL_RE = re.compile(r"([\\`*_\[\]<>&#!])")


@dataclass
class MarkdownTree:
    """Parsed Markdown document.

    The rendered HTML is only used to enumerate headings and links; body
    content is always taken from ``source``.
    """

    source: str
    soup: BeautifulSoup
    references: dict[str, str] = field(default_factory=dict)


def parse_markdown(text: str, references: Mapping[str, str] | None = None) -> MarkdownTree:
    """Parse Markdown text into a MarkdownTree.

    Args:
        text: Markdown source.
        references: Reference definitions (normalized label to URL) from an
            enclosing document, so a fragment such as a single heading line
            resolves ``[text][label]`` the way the whole document does.
    """
    md = MarkdownIt("commonmark")
    # Report link destinations as written instead of percent-encoded.
    md.normalizeLink = _keep_destination
    env: dict = {}
    if references:
        env["references"] = {
            label: {"href": href, "title": ""} for label, href in references.items()
        }
    tokens = md.parse(text, env)
    html = md.renderer.render(tokens, md.options, env)
    found = {
        label: definition["href"]
        for label, definition in env.get("references", {}).items()
        if definition.get("href")
    }
    if references:
        found = {label: href for label, href in found.items() if label not in references}
    return MarkdownTree(
        source=text,
        soup=BeautifulSoup(html, "lxml"),
        references=found,
    )


def stringify(tree: MarkdownTree) -> str:
    """Serialize a tree back to Markdown text."""
    return tree.source


def list_headings(tree: MarkdownTree) -> list[HeadingRef]:
    """Return every heading with its level and plain text, in document order."""
    headings: list[HeadingRef] = []
    for tag in tree.soup.find_all(_HEADING_RE):
        headings.append(
            HeadingRef(
                level=int(tag.name[1]),
                text=_normalize_text(tag.get_text()),
                ordinal_index=len(headings),
            )
        )
    return headings


def heading_plain_text(line: str, references: Mapping[str, str] | None = None) -> str | None:
    """Plain text of a single heading line, as ``list_headings`` reports it.

    Returns None when ``line`` does not parse as a heading.
    """
    headings = list_headings(parse_markdown(line, references=references))
    return headings[0].text if headings else None


def list_links(tree: MarkdownTree) -> list[str]:
    """Return link URLs in document order, then reference definition URLs.

    Reference-style links are already resolved against their definitions;
    a reference to an undefined label renders as plain text and is absent.
    URLs keep the author's spelling; backslash escapes and entities are
    decoded.
    """
    urls = [anchor["href"] for anchor in tree.soup.find_all("a", href=True)]
    urls.extend(tree.references.values())
    return urls


def escape_markdown(text: str) -> str:
    """Backslash-escape ``text`` so it parses back as the same plain text."""
    return _INLINE_SPECIAL_RE.sub(r"\\\1", text)


def _keep_destination(url: str) -> str:
    return url


def _normalize_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
