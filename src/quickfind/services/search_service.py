"""Search service wrapping path queries."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from quickfind.models.search import SearchResults

if TYPE_CHECKING:
    from quickfind.data.protocols import IndexStoreProtocol

logger = logging.getLogger(__name__)


class SearchService:
    """Service for path search."""

    def __init__(self, store: IndexStoreProtocol) -> None:
        self._store = store

    async def search(self, query: str) -> Result[SearchResults, str]:
        """Search indexed paths. An empty query is not an error."""
        try:
            paths = await self._store.query(query)
        except sqlite3.Error as exc:
            logger.warning("Search for %r failed: %s", query, exc)
            return Err(f"Search failed: {exc}")
        return Ok(SearchResults(query=query, paths=paths))
