"""Section, index and partition result models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from mdtree.schemas.headings import HeadingRef


class Section(BaseModel):
    """A level 2 heading line and every raw line up to the next level 1/2 heading.

    ``start_line`` and ``end_line`` are zero-based, inclusive line numbers in
    the source document.
    """

    model_config = ConfigDict(frozen=True)

    heading_text: str
    lines: tuple[str, ...]
    start_line: int
    end_line: int


class SplitResult(BaseModel):
    """Output of the section splitter."""

    preamble_lines: list[str] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)


class SectionFile(BaseModel):
    """One generated section file."""

    filename: str
    heading_text: str
    content: str


class IndexEntry(BaseModel):
    """One table-of-contents row of the generated index.

    ``label`` is the heading text escaped for use as Markdown link text.
    """

    heading: HeadingRef
    label: str
    indent: str
    link_target: str

    def render(self) -> str:
        return f"{self.indent}- [{self.label}]({self.link_target})"


class ExplodeResult(BaseModel):
    """Summary of an explode run."""

    output_dir: Path
    section_count: int = 0
    written: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)
    index_path: Path | None = None


class AssembleResult(BaseModel):
    """Summary of an assemble run."""

    title: str
    content: str
    included: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    output_path: Path | None = None
