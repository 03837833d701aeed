"""Models for quickfind."""

from quickfind.models.history import HistoryEntry
from quickfind.models.indexing import CrawlStats
from quickfind.models.search import SearchResults

__all__ = [
    "CrawlStats",
    "HistoryEntry",
    "SearchResults",
]
