"""Heading reference model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HeadingRef(BaseModel):
    """A heading as it appears in a parsed document, in document order."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, le=6)
    text: str
    ordinal_index: int = Field(..., ge=0)
