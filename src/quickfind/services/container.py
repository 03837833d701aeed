"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from quickfind.data.db import Database
from quickfind.data.store import IndexStore
from quickfind.services.history_service import HistoryService
from quickfind.services.index_service import IndexService
from quickfind.services.search_service import SearchService

if TYPE_CHECKING:
    from pathlib import Path

    from quickfind.config import Config


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    db: Database
    store: IndexStore
    index_service: IndexService
    search_service: SearchService
    history_service: HistoryService

    @classmethod
    async def create(cls, config: Config, db_path: Path) -> ServiceContainer:
        """Async factory that opens the index and wires all dependencies."""
        db = Database(db_path)
        await db.connect()
        store = IndexStore(db)
        return cls(
            db=db,
            store=store,
            index_service=IndexService(store, config),
            search_service=SearchService(store),
            history_service=HistoryService(store),
        )

    async def close(self) -> None:
        """Shut down all services."""
        await self.db.close()
