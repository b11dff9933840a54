"""Link check result models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

LinkCategory = Literal["email", "http", "local"]
LinkStatus = Literal["ok", "broken", "skipped"]


class LinkResult(BaseModel):
    """Verdict for one unique URL found in one document.

    Attributes:
        url: The URL exactly as it appeared (after reference resolution).
        source: Document the URL was found in.
        category: How the URL was classified.
        status: ``ok``, ``broken`` or ``skipped``.
        reason: Why the link was broken or skipped, if it was.
        resolved_path: Filesystem target for local links.
    """

    url: str
    source: Path
    category: LinkCategory
    status: LinkStatus
    reason: str | None = None
    resolved_path: Path | None = None

    @property
    def is_markdown_target(self) -> bool:
        return (
            self.status == "ok"
            and self.resolved_path is not None
            and self.resolved_path.suffix.lower() == ".md"
            and self.resolved_path.is_file()
        )


class DocumentLinkReport(BaseModel):
    """All verdicts for a single scanned document."""

    source: Path
    results: list[LinkResult] = Field(default_factory=list)


class LinkCheckReport(BaseModel):
    """Verdicts for every document scanned in one invocation."""

    documents: list[DocumentLinkReport] = Field(default_factory=list)
    visited: list[Path] = Field(default_factory=list)

    def _count(self, status: LinkStatus) -> int:
        return sum(1 for doc in self.documents for result in doc.results if result.status == status)

    @property
    def ok_count(self) -> int:
        return self._count("ok")

    @property
    def broken_count(self) -> int:
        return self._count("broken")

    @property
    def skipped_count(self) -> int:
        return self._count("skipped")

    @property
    def has_broken(self) -> bool:
        return self.broken_count > 0
