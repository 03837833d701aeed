"""Search term history service."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from quickfind.data.store import HISTORY_LIMIT

if TYPE_CHECKING:
    from quickfind.data.protocols import IndexStoreProtocol
    from quickfind.models.history import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryService:
    """Service for recording and browsing previously used search terms."""

    def __init__(self, store: IndexStoreProtocol) -> None:
        self._store = store

    async def list_history(self, limit: int = HISTORY_LIMIT) -> Result[list[HistoryEntry], str]:
        try:
            return Ok(await self._store.get_history(limit))
        except sqlite3.Error as exc:
            logger.warning("Loading history failed: %s", exc)
            return Err(f"Could not load history: {exc}")

    async def record(self, term: str) -> Result[None, str]:
        """Record a term. Blank terms are ignored."""
        term = term.strip()
        if not term:
            return Ok(None)
        try:
            await self._store.add_history(term)
        except sqlite3.Error as exc:
            logger.warning("Recording history for %r failed: %s", term, exc)
            return Err(f"Could not save history: {exc}")
        return Ok(None)

    async def delete(self, term: str) -> Result[bool, str]:
        try:
            return Ok(await self._store.delete_history(term))
        except sqlite3.Error as exc:
            logger.warning("Deleting history entry %r failed: %s", term, exc)
            return Err(f"Could not delete history entry: {exc}")

    async def clear(self) -> Result[int, str]:
        try:
            removed = await self._store.clear_history()
        except sqlite3.Error as exc:
            logger.warning("Clearing history failed: %s", exc)
            return Err(f"Could not clear history: {exc}")
        logger.info("Cleared %d history entries", removed)
        return Ok(removed)
