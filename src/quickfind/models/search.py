"""Search models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResults(BaseModel):
    """Paths matching one query."""

    query: str = ""
    paths: list[str] = Field(default_factory=list)
