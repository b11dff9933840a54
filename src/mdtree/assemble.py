"""Reassemble an exploded directory back into a single Markdown document."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from urllib.parse import unquote

from mdtree.config import INDEX_FILENAME
from mdtree.exceptions import IndexNotFoundError, MissingMainTitleError, OutputWriteError
from mdtree.file_utils import mkdir_async, read_text_async, write_text_async
from mdtree.parser import escape_markdown, list_headings, parse_markdown
from mdtree.schemas import AssembleResult
from mdtree.sections import first_heading_index, parse_heading_line, promote_heading_line

logger = logging.getLogger(__name__)

# Level 2 TOC rows are indented by exactly two spaces.
_SECTION_ENTRY_RE = re.compile(r"^ {2}[-*+][ \t]+\[(?P<text>.*)\]\((?P<target>[^()\s]+)\)[ \t]*$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def extract_section_entries(index_text: str) -> list[tuple[str, str]]:
    """Return ``(filename, displayed text)`` for each section file the TOC links.

    Only level 2 rows linking to a relative file count; bare anchors and
    absolute URLs are ignored. A file linked more than once is listed once.
    """
    entries: list[tuple[str, str]] = []
    seen: set[str] = set()
    for line in index_text.splitlines():
        match = _SECTION_ENTRY_RE.match(line)
        if not match:
            continue
        target = match.group("target")
        if target.startswith("#") or _SCHEME_RE.match(target):
            continue
        filename = unquote(target.split("#", 1)[0])
        if filename.startswith("./"):
            filename = filename[2:]
        if not filename or filename in seen:
            continue
        seen.add(filename)
        entries.append((filename, match.group("text")))
    return entries


def restore_section(content: str) -> str:
    """Move the section's level 1 heading back to level 2; nothing else changes."""
    lines = content.splitlines()
    first = first_heading_index(lines)
    if first is None:
        logger.warning("Section file has no heading; including it unchanged")
    else:
        heading = parse_heading_line(lines[first])
        if heading and heading[0] == 1:
            lines[first] = promote_heading_line(lines[first])
        else:
            logger.warning("First heading %r is not level 1; including it unchanged", lines[first])
    return "\n".join(lines) + "\n"


async def assemble_document(
    input_dir: Path | str, output_path: Path | str | None = None
) -> AssembleResult:
    """Rebuild the original document from ``index.md`` and its section files.

    Args:
        input_dir: Directory produced by ``explode_document``.
        output_path: Where to write the result. Nothing is written if None.

    Returns:
        The assembled content with the included and skipped section files.

    Raises:
        IndexNotFoundError: If ``input_dir`` has no ``index.md``.
        MissingMainTitleError: If the index has no level 1 heading.
        OutputWriteError: If ``output_path`` cannot be written.
    """
    input_dir = Path(input_dir)
    index_path = input_dir / INDEX_FILENAME
    if not index_path.is_file():
        raise IndexNotFoundError(index_path)

    index_text = await read_text_async(index_path)
    title = next(
        (h.text for h in list_headings(parse_markdown(index_text)) if h.level == 1), None
    )
    if title is None:
        raise MissingMainTitleError(index_path)

    root = input_dir.resolve()
    filenames: list[str] = []
    for filename, _text in extract_section_entries(index_text):
        if not (root / filename).resolve().is_relative_to(root):
            logger.warning("Ignoring section link outside %s: %s", input_dir, filename)
            continue
        filenames.append(filename)

    contents = await asyncio.gather(
        *(read_text_async(input_dir / filename) for filename in filenames),
        return_exceptions=True,
    )

    result = AssembleResult(title=title, content="")
    parts = [f"# {escape_markdown(title)}\n"]
    for filename, content in zip(filenames, contents):
        if isinstance(content, FileNotFoundError):
            logger.warning("Section file not found, skipping: %s", input_dir / filename)
            result.skipped.append(filename)
        elif isinstance(content, OSError):
            logger.warning("Error reading file %s, skipping: %s", input_dir / filename, content)
            result.skipped.append(filename)
        elif isinstance(content, BaseException):
            raise content
        else:
            parts.append("\n" + restore_section(content))
            result.included.append(filename)
    result.content = "".join(parts)

    if output_path is not None:
        output_path = Path(output_path)
        try:
            await mkdir_async(output_path.parent, parents=True, exist_ok=True)
            await write_text_async(output_path, result.content)
        except OSError as exc:
            raise OutputWriteError(output_path, str(exc)) from exc
        result.output_path = output_path

    logger.info(
        "Assembled %d sections from %s (%d skipped)",
        len(result.included),
        input_dir,
        len(result.skipped),
    )
    return result
