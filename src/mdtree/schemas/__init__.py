"""Shared schemas for mdtree."""

from mdtree.schemas.headings import HeadingRef
from mdtree.schemas.links import DocumentLinkReport, LinkCheckReport, LinkResult
from mdtree.schemas.sections import (
    AssembleResult,
    ExplodeResult,
    IndexEntry,
    Section,
    SectionFile,
    SplitResult,
)

__all__ = [
    "AssembleResult",
    "DocumentLinkReport",
    "ExplodeResult",
    "HeadingRef",
    "IndexEntry",
    "LinkCheckReport",
    "LinkResult",
    "Section",
    "SectionFile",
    "SplitResult",
]
