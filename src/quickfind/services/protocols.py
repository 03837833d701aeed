"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from quickfind.models.history import HistoryEntry
from quickfind.models.search import SearchResults


class SearchServiceProtocol(Protocol):
    """Interface for path search."""

    async def search(self, query: str) -> Result[SearchResults, str]: ...


class HistoryServiceProtocol(Protocol):
    """Interface for search history."""

    async def list_history(self, limit: int = ...) -> Result[list[HistoryEntry], str]: ...

    async def record(self, term: str) -> Result[None, str]: ...

    async def delete(self, term: str) -> Result[bool, str]: ...

    async def clear(self) -> Result[int, str]: ...
