"""Explode a Markdown document into one file per level 2 section plus an index."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Mapping, Sequence

from mdtree.config import INDEX_FILENAME
from mdtree.exceptions import InputNotFoundError, OutputWriteError
from mdtree.file_utils import mkdir_async, read_text_async, write_text_async
from mdtree.index_builder import build_index
from mdtree.parser import heading_plain_text, list_headings, parse_markdown
from mdtree.schemas import ExplodeResult, Section, SectionFile
from mdtree.sections import demote_heading_line, split_sections
from mdtree.slugs import disambiguate, section_filename

logger = logging.getLogger(__name__)


async def explode_document(path: Path | str, output_dir: Path | str) -> ExplodeResult:
    """Write each level 2 section of ``path`` to its own file in ``output_dir``.

    Sections are cut from the raw text so their formatting is preserved
    exactly; only the section's own heading is moved up to level 1.
    ``index.md`` links every heading of the original document to its file.

    Args:
        path: Markdown document to explode.
        output_dir: Directory to write into; created if missing.

    Returns:
        What was written. ``section_count`` is 0 (and nothing is written)
        when the document has no level 2 headings.

    Raises:
        InputNotFoundError: If ``path`` does not exist.
        OutputWriteError: If the output directory or the index cannot be written.
    """
    source = Path(path)
    output_dir = Path(output_dir)
    if not source.is_file():
        raise InputNotFoundError(source)

    text = await read_text_async(source)
    split = split_sections(text.splitlines())
    result = ExplodeResult(output_dir=output_dir, section_count=len(split.sections))

    if not split.sections:
        logger.warning("No sections found at level 2 in %s", source.name)
        return result

    logger.info(
        "Exploding %d sections from %s to %s", len(split.sections), source.name, output_dir
    )
    tree = parse_markdown(text)
    section_files = build_section_files(split.sections, tree.references)

    try:
        await mkdir_async(output_dir, parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(output_dir, str(exc)) from exc

    outcomes = await asyncio.gather(
        *(write_text_async(output_dir / f.filename, f.content) for f in section_files),
        return_exceptions=True,
    )
    for section_file, outcome in zip(section_files, outcomes):
        if isinstance(outcome, OSError):
            logger.error("Error writing file %s: %s", output_dir / section_file.filename, outcome)
            result.failed[section_file.filename] = str(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            logger.info("%s -> %s", section_file.heading_text, section_file.filename)
            result.written.append(section_file.filename)

    headings = list_headings(tree)
    index_path = output_dir / INDEX_FILENAME
    try:
        await write_text_async(index_path, build_index(headings, section_files))
    except OSError as exc:
        raise OutputWriteError(index_path, str(exc)) from exc
    result.index_path = index_path

    logger.info("Document exploded to %s (%d files)", output_dir, len(result.written) + 1)
    return result


def build_section_files(
    sections: Sequence[Section], references: Mapping[str, str] | None = None
) -> list[SectionFile]:
    """Name and render every section; colliding slugs get numeric suffixes.

    Files are named from the heading's plain text as the parser reports it
    (links, entities and inline HTML resolved), the same text the index
    slugs when linking to them. ``references`` are the document's reference
    definitions.
    """
    taken = {INDEX_FILENAME}
    files: list[SectionFile] = []
    for section in sections:
        title = heading_plain_text(section.lines[0], references)
        if title is None:
            title = section.heading_text
        wanted = section_filename(title)
        filename = disambiguate(wanted, taken)
        if filename != wanted:
            logger.warning(
                "Section %r would overwrite %s; writing it to %s instead",
                title,
                wanted,
                filename,
            )
        taken.add(filename)
        files.append(
            SectionFile(
                filename=filename,
                heading_text=title,
                content=render_section(section),
            )
        )
    return files


def render_section(section: Section) -> str:
    """Section text with its heading demoted to level 1 and trailing blanks dropped."""
    lines = list(section.lines)
    lines[0] = demote_heading_line(lines[0])
    while len(lines) > 1 and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines) + "\n"
