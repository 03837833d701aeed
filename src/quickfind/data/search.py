"""SQL building for path queries."""

from __future__ import annotations

from dataclasses import dataclass

_LIKE_ESCAPE = "\\"


@dataclass(frozen=True, slots=True)
class PathQuery:
    """A WHERE clause and its bind params for the ``files`` table."""

    where: str
    params: tuple[str, ...]


def split_words(term: str) -> list[str]:
    """Split a search term into case-folded words."""
    return [word.casefold() for word in term.split()]


def build_path_query(term: str) -> PathQuery | None:
    """Translate a user search term into a ``files`` filter.

    A term starting with ``.`` is a literal suffix (``.mp3``). Anything else is
    split on whitespace and every word must appear somewhere in the path.
    Both sides are compared with ``str.casefold`` through the ``casefold`` SQL
    function the Database registers. Returns None when there is nothing to
    search for.
    """
    if term.startswith("."):
        return PathQuery(
            where=f"casefold(path) LIKE ? ESCAPE '{_LIKE_ESCAPE}'",
            params=(f"%{_escape_like(term.casefold())}",),
        )

    words = split_words(term)
    if not words:
        return None
    conditions = [f"casefold(path) LIKE ? ESCAPE '{_LIKE_ESCAPE}'" for _ in words]
    return PathQuery(
        where=" AND ".join(conditions),
        params=tuple(f"%{_escape_like(word)}%" for word in words),
    )


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
