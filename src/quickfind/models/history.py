"""Search history models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HistoryEntry(BaseModel):
    """A previously used search term."""

    term: str
    last_used: datetime
