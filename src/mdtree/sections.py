"""Split raw Markdown lines into level 2 sections and shift heading levels."""

from __future__ import annotations

import re
from typing import Sequence

from mdtree.schemas import Section, SplitResult

_ATX_HEADING_RE = re.compile(r"^( {0,3})(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_SEQUENCE_RE = re.compile(r"(?:^|[ \t]+)#+$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def parse_heading_line(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` if ``line`` is an ATX heading, else None."""
    match = _ATX_HEADING_RE.match(line)
    if not match:
        return None
    text = _CLOSING_SEQUENCE_RE.sub("", match.group(3) or "").strip()
    return len(match.group(2)), text


def demote_heading_line(line: str) -> str:
    """Move a heading line one level up the hierarchy (``## A`` -> ``# A``)."""
    match = _ATX_HEADING_RE.match(line)
    if not match or len(match.group(2)) == 1:
        return line
    hashes_at = len(match.group(1))
    return line[:hashes_at] + line[hashes_at + 1 :]


def promote_heading_line(line: str) -> str:
    """Move a heading line one level down the hierarchy (``# A`` -> ``## A``)."""
    match = _ATX_HEADING_RE.match(line)
    if not match or len(match.group(2)) == 6:
        return line
    hashes_at = len(match.group(1))
    return line[:hashes_at] + "#" + line[hashes_at:]


class _FenceTracker:
    """Tracks whether the current line sits inside a fenced code block."""

    def __init__(self) -> None:
        self._marker: str | None = None

    @property
    def inside(self) -> bool:
        return self._marker is not None

    def feed(self, line: str) -> None:
        match = _FENCE_RE.match(line)
        if not match:
            return
        fence = match.group(1)
        if self._marker is None:
            self._marker = fence
        elif fence[0] == self._marker[0] and len(fence) >= len(self._marker):
            if not line.strip().strip(fence[0]):
                self._marker = None


def split_sections(lines: Sequence[str]) -> SplitResult:
    """Partition raw lines into a preamble and ordered level 2 sections.

    A level 1 heading closes the open section; a level 2 heading closes it
    and opens the next one. Headings inside fenced code blocks are content.
    An empty ``sections`` list means no sections were found.
    """
    preamble: list[str] = []
    sections: list[Section] = []
    fences = _FenceTracker()

    heading_text: str | None = None
    current: list[str] = []
    start = 0

    def close(end: int) -> None:
        if heading_text is not None:
            sections.append(
                Section(
                    heading_text=heading_text,
                    lines=tuple(current),
                    start_line=start,
                    end_line=end,
                )
            )

    for number, line in enumerate(lines):
        heading = None if fences.inside else parse_heading_line(line)
        fences.feed(line)

        if heading and heading[0] == 1:
            close(number - 1)
            heading_text, current = None, []
            preamble.append(line)
        elif heading and heading[0] == 2:
            close(number - 1)
            heading_text, current, start = heading[1], [line], number
        elif heading_text is not None:
            current.append(line)
        else:
            preamble.append(line)

    close(len(lines) - 1)
    return SplitResult(preamble_lines=preamble, sections=sections)


def first_heading_index(lines: Sequence[str]) -> int | None:
    """Index of the first ATX heading line outside fenced code, if any."""
    fences = _FenceTracker()
    for number, line in enumerate(lines):
        if not fences.inside and parse_heading_line(line):
            return number
        fences.feed(line)
    return None
