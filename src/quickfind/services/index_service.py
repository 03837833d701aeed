"""Index service that crawls every configured root into the path index."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from quickfind.data.crawler import Crawler
from quickfind.data.patterns import PatternError, compile_rules

if TYPE_CHECKING:
    from quickfind.config import Config
    from quickfind.data.crawler import ProgressCallback
    from quickfind.data.protocols import PathSink
    from quickfind.models.indexing import CrawlStats

logger = logging.getLogger(__name__)


class IndexService:
    """Runs the crawler over configured roots."""

    def __init__(self, store: PathSink, config: Config) -> None:
        self._store = store
        self._config = config

    async def index_roots(
        self,
        roots: list[str] | None = None,
        *,
        verbose: bool = False,
        progress_callback: ProgressCallback | None = None,
        root_callback: ProgressCallback | None = None,
    ) -> Result[list[CrawlStats], str]:
        """Index each root in turn.

        Args:
            roots: Roots to crawl. Defaults to the configured include list.
            verbose: Log every discovered and ignored path.
            progress_callback: Called periodically with a stats snapshot.
            root_callback: Called with the final stats of each finished root.

        Returns:
            Per-root stats, or an error for a malformed ignore rule or a
            store failure. Either error stops the whole run.
        """
        try:
            rules = compile_rules(self._config.ignore)
        except PatternError as exc:
            return Err(str(exc))

        crawler = Crawler(
            self._store,
            rules,
            depth=self._config.depth,
            verbose=verbose,
            progress_callback=progress_callback,
        )
        completed: list[CrawlStats] = []
        for root in roots if roots is not None else self._config.include:
            if not Path(root).is_dir():
                logger.warning("Skipping missing root %s", root)
                continue
            logger.info("Indexing %s", root)
            try:
                stats = await crawler.crawl(root)
            except sqlite3.Error as exc:
                logger.error("Index store failed while crawling %s: %s", root, exc)
                return Err(f"Index store failed while crawling {root}: {exc}")
            completed.append(stats)
            if root_callback is not None:
                root_callback(stats)
        return Ok(completed)
