"""Depth-limited filesystem crawler feeding the path index."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import replace
from typing import TYPE_CHECKING, TypeAlias

from quickfind.data.patterns import CompiledRules, is_ignored
from quickfind.models.indexing import CrawlStats

if TYPE_CHECKING:
    from collections.abc import Callable

    from quickfind.data.protocols import PathSink

logger = logging.getLogger(__name__)

ProgressCallback: TypeAlias = "Callable[[CrawlStats], None]"

PROGRESS_INTERVAL = 1000
PROGRESS_SECONDS = 5.0
_COMMIT_EVERY = 1000


class Crawler:
    """Walks one root at a time and records every file that survives the ignore rules."""

    def __init__(
        self,
        store: PathSink,
        rules: CompiledRules,
        *,
        depth: int,
        verbose: bool = False,
        progress_callback: ProgressCallback | None = None,
        progress_interval: int = PROGRESS_INTERVAL,
        progress_seconds: float = PROGRESS_SECONDS,
    ) -> None:
        self._store = store
        self._rules = rules
        self._depth = depth
        self._verbose = verbose
        self._progress_callback = progress_callback
        self._progress_interval = max(progress_interval, 1)
        self._progress_seconds = progress_seconds

    async def crawl(self, root: str) -> CrawlStats:
        """Index every non-ignored file below root.

        Store failures propagate and abort the crawl. Unreadable directories
        are logged and skipped.
        """
        stats = CrawlStats(root=root)
        started = time.monotonic()
        last_report = started
        reported_at = 0
        pending_commit = 0

        stats.dirs_traversed += 1
        stack: list[tuple[str, int]] = [(root, 0)]
        while stack:
            directory, level = stack.pop()
            if level >= self._depth:
                continue
            try:
                with os.scandir(directory) as entries:
                    children = list(entries)
            except OSError as exc:
                logger.warning("Cannot read directory %s: %s", directory, exc)
                continue

            for entry in children:
                is_dir = _is_dir(entry)
                if is_ignored(self._rules, entry.path, root, is_dir=is_dir):
                    stats.items_ignored += 1
                    if self._verbose:
                        logger.info("Skipping ignored path: %s", entry.path)
                elif is_dir:
                    stats.dirs_traversed += 1
                    stack.append((entry.path, level + 1))
                elif _is_file(entry):
                    await self._store.insert(entry.path)
                    stats.files_found += 1
                    pending_commit += 1
                    if self._verbose:
                        logger.info("[%d] Discovered: %s", stats.files_found, entry.path)
                    if pending_commit >= _COMMIT_EVERY:
                        await self._store.commit()
                        pending_commit = 0

                now = time.monotonic()
                processed = stats.items_processed
                if (
                    processed - reported_at >= self._progress_interval
                    or now - last_report > self._progress_seconds
                ):
                    stats.elapsed = now - started
                    self._report(stats)
                    reported_at = processed
                    last_report = now

        await self._store.commit()
        stats.elapsed = time.monotonic() - started
        return stats

    def _report(self, stats: CrawlStats) -> None:
        if self._progress_callback is not None:
            self._progress_callback(replace(stats))


def _is_dir(entry: os.DirEntry[str]) -> bool:
    # Links to directories are never descended.
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _is_file(entry: os.DirEntry[str]) -> bool:
    # Follows links, so a link to a file is indexed like the file itself.
    try:
        return entry.is_file()
    except OSError:
        return False
