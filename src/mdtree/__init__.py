"""mdtree: explode Markdown documents into sections, reassemble them, check their links."""

from mdtree.assemble import assemble_document
from mdtree.exceptions import (
    FetchError,
    IndexNotFoundError,
    InputNotFoundError,
    MdTreeError,
    MissingMainTitleError,
    OutputWriteError,
)
from mdtree.explode import explode_document
from mdtree.index_builder import build_index
from mdtree.link_checker import check_links
from mdtree.links import classify_link
from mdtree.schemas import (
    AssembleResult,
    ExplodeResult,
    HeadingRef,
    LinkCheckReport,
    LinkResult,
)
from mdtree.sections import split_sections
from mdtree.slugs import sanitize_filename

__version__ = "0.1.0"

__all__ = [
    "AssembleResult",
    "ExplodeResult",
    "FetchError",
    "HeadingRef",
    "IndexNotFoundError",
    "InputNotFoundError",
    "LinkCheckReport",
    "LinkResult",
    "MdTreeError",
    "MissingMainTitleError",
    "OutputWriteError",
    "assemble_document",
    "build_index",
    "check_links",
    "classify_link",
    "explode_document",
    "sanitize_filename",
    "split_sections",
]
