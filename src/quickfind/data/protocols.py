"""Protocol definitions for data access."""

from __future__ import annotations

from typing import Any, Protocol

from quickfind.models.history import HistoryEntry


class DatabaseProtocol(Protocol):
    """Async database interface."""

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> Any: ...

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[Any]: ...

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> Any | None: ...

    async def commit(self) -> None: ...


class PathSink(Protocol):
    """Where the crawler records discovered files."""

    async def insert(self, path: str) -> bool: ...

    async def commit(self) -> None: ...


class IndexStoreProtocol(PathSink, Protocol):
    """Full path index and history interface."""

    async def query(self, term: str) -> list[str]: ...

    async def count(self) -> int: ...

    async def add_history(self, term: str) -> None: ...

    async def get_history(self, limit: int = ...) -> list[HistoryEntry]: ...

    async def delete_history(self, term: str) -> bool: ...

    async def clear_history(self) -> int: ...
