"""Build the navigable index document for an exploded Markdown file."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Sequence

from mdtree.parser import escape_markdown
from mdtree.schemas import HeadingRef, IndexEntry, SectionFile
from mdtree.slugs import sanitize_filename

TOC_HEADING = "Table of Contents"
TOC_ANCHOR = "#table-of-contents"
FALLBACK_TITLE = "Untitled Document"
NO_HEADINGS_INDEX = f"# {TOC_HEADING}\n\nNo headings found.\n"


def build_index(headings: Sequence[HeadingRef], section_files: Sequence[SectionFile]) -> str:
    """Render ``index.md``: main title, TOC heading and one bullet per heading."""
    if not headings:
        return NO_HEADINGS_INDEX

    main_title = next((h.text for h in headings if h.level == 1), FALLBACK_TITLE)
    lines = [f"# {escape_markdown(main_title)}", "", f"## {TOC_HEADING}", ""]
    lines.extend(entry.render() for entry in build_index_entries(headings, section_files))
    return "\n".join(lines) + "\n"


def build_index_entries(
    headings: Sequence[HeadingRef], section_files: Sequence[SectionFile]
) -> list[IndexEntry]:
    """Derive the link target of every heading.

    Level 2 headings are paired with section files by slug in document
    order, so repeated headings map to their own disambiguated files.
    Section files must carry the same plain heading text the parser
    reports, which ``explode.build_section_files`` guarantees.
    """
    files_by_slug: dict[str, deque[str]] = defaultdict(deque)
    for section_file in section_files:
        files_by_slug[sanitize_filename(section_file.heading_text)].append(section_file.filename)

    entries: list[IndexEntry] = []
    parent_file: str | None = None
    for heading in headings:
        anchor = sanitize_filename(heading.text)

        if heading.level == 1:
            parent_file = None
            target = TOC_ANCHOR
        elif heading.level == 2:
            candidates = files_by_slug.get(anchor)
            parent_file = candidates.popleft() if candidates else None
            target = f"./{parent_file}" if parent_file else f"#{anchor}"
        elif parent_file:
            target = f"./{parent_file}#{anchor}"
        else:
            target = f"#{anchor}"

        entries.append(
            IndexEntry(
                heading=heading,
                label=escape_markdown(heading.text),
                indent="  " * (heading.level - 1),
                link_target=target,
            )
        )
    return entries
