"""Persistent path index and search history."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from quickfind.data.search import build_path_query
from quickfind.models.history import HistoryEntry

if TYPE_CHECKING:
    from quickfind.data.protocols import DatabaseProtocol

HISTORY_LIMIT = 20


class IndexStore:
    """Path and history tables on top of a connected Database.

    Store errors are not caught here; callers decide whether a failure is
    fatal (crawling) or degrades to an empty result (interactive search).
    """

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def insert(self, path: str) -> bool:
        """Insert a path. Returns False when it was already indexed."""
        cursor = await self._db.execute("INSERT OR IGNORE INTO files (path) VALUES (?)", (path,))
        return cursor.rowcount > 0

    async def query(self, term: str) -> list[str]:
        """Return indexed paths matching the search term, in insertion order."""
        path_query = build_path_query(term)
        if path_query is None:
            return []
        rows = await self._db.fetch_all(
            f"SELECT path FROM files WHERE {path_query.where} ORDER BY id",
            path_query.params,
        )
        return [str(row["path"]) for row in rows]

    async def count(self) -> int:
        row = await self._db.fetch_one("SELECT COUNT(*) AS cnt FROM files")
        return int(row["cnt"]) if row else 0

    async def commit(self) -> None:
        await self._db.commit()

    async def add_history(self, term: str) -> None:
        """Record a search term, refreshing its timestamp if already present."""
        now = datetime.now(UTC).isoformat()
        await self._db.execute(
            """INSERT INTO search_history (term, timestamp) VALUES (?, ?)
               ON CONFLICT(term) DO UPDATE SET timestamp = excluded.timestamp""",
            (term, now),
        )
        await self._db.commit()

    async def get_history(self, limit: int = HISTORY_LIMIT) -> list[HistoryEntry]:
        """Most recently used terms first."""
        rows = await self._db.fetch_all(
            "SELECT term, timestamp FROM search_history ORDER BY timestamp DESC, id DESC LIMIT ?",
            (limit,),
        )
        return [
            HistoryEntry(term=str(row["term"]), last_used=_parse_timestamp(row["timestamp"]))
            for row in rows
        ]

    async def delete_history(self, term: str) -> bool:
        cursor = await self._db.execute("DELETE FROM search_history WHERE term = ?", (term,))
        await self._db.commit()
        return cursor.rowcount > 0

    async def clear_history(self) -> int:
        """Delete every history entry. Returns the number of rows removed."""
        cursor = await self._db.execute("DELETE FROM search_history")
        await self._db.commit()
        return cursor.rowcount


def _parse_timestamp(value: object) -> datetime:
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return datetime.fromtimestamp(0, tz=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
