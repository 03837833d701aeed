"""Indexing result models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CrawlStats:
    """Counters for one traversal of a root."""

    root: str = ""
    files_found: int = 0
    dirs_traversed: int = 0
    items_ignored: int = 0
    elapsed: float = 0.0

    @property
    def items_processed(self) -> int:
        return self.files_found + self.dirs_traversed + self.items_ignored

    def progress_line(self) -> str:
        return (
            f"Files: {self.files_found}, Dirs: {self.dirs_traversed}, "
            f"Ignored: {self.items_ignored}, Elapsed: {self.elapsed:.2f}s"
        )

    def summary(self) -> str:
        return (
            f"Indexing complete: Found {self.files_found} files, "
            f"traversed {self.dirs_traversed} directories, "
            f"ignored {self.items_ignored} items in {self.elapsed:.2f}s"
        )
