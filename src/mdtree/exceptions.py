"""Custom exceptions for mdtree."""

from __future__ import annotations

from pathlib import Path


class MdTreeError(Exception):
    """Base exception for mdtree operations."""


class InputNotFoundError(MdTreeError):
    """Source document does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Input file not found: {path}")
        self.path = path


class IndexNotFoundError(MdTreeError):
    """Exploded directory has no index.md."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Index file not found: {path}")
        self.path = path


class MissingMainTitleError(MdTreeError):
    """Index document has no level 1 heading."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No main title (level 1 heading) found in {path}")
        self.path = path


class OutputWriteError(MdTreeError):
    """Writing an output file failed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Error writing file {path}: {reason}")
        self.path = path
        self.reason = reason


class FetchError(MdTreeError):
    """Remote link target could not be reached."""
