"""Tests for key translation and the interactive control loop."""

from __future__ import annotations

import contextlib
import curses
from collections.abc import Iterator

import pytest
from result import Ok, Result

from quickfind.models.history import HistoryEntry
from quickfind.models.search import SearchResults
from quickfind.ui.app import run_loop
from quickfind.ui.keys import Key, KeyCode
from quickfind.ui.render import Frame
from quickfind.ui.session import Session
from quickfind.ui.terminal import translate_key
from quickfind.ui.theme import Theme


class TestTranslateKey:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("a", Key.of("a")),
            ("é", Key.of("é")),
            ("\n", Key(KeyCode.ENTER)),
            ("\r", Key(KeyCode.ENTER)),
            ("\t", Key(KeyCode.TAB)),
            ("\x1b", Key(KeyCode.ESC)),
            ("\x7f", Key(KeyCode.BACKSPACE)),
            ("\x03", Key.control("c")),
            ("\x12", Key.control("r")),
            ("\x08", Key.control("h")),
            (curses.KEY_UP, Key(KeyCode.UP)),
            (curses.KEY_DC, Key(KeyCode.DELETE)),
            (curses.KEY_BACKSPACE, Key(KeyCode.BACKSPACE)),
            (curses.KEY_RESIZE, Key(KeyCode.RESIZE)),
        ],
    )
    def test_mapping(self, raw: int | str, expected: Key) -> None:
        assert translate_key(raw) == expected

    def test_unknown_special_key_is_ignored(self) -> None:
        assert translate_key(curses.KEY_F5) is None


class StaticSearch:
    async def search(self, query: str) -> Result[SearchResults, str]:
        paths = ["/srv/readme.txt"] if "read" in query else []
        return Ok(SearchResults(query=query, paths=paths))


class EmptyHistory:
    async def list_history(self, limit: int = 20) -> Result[list[HistoryEntry], str]:
        return Ok([])

    async def record(self, term: str) -> Result[None, str]:
        return Ok(None)

    async def delete(self, term: str) -> Result[bool, str]:
        return Ok(False)

    async def clear(self) -> Result[int, str]:
        return Ok(0)


class NullLauncher:
    def open(self, path: str) -> None:
        pass

    def edit(self, path: str) -> None:
        pass


class ScriptedScreen:
    """Feeds a fixed key sequence and records every drawn frame."""

    def __init__(self, keys: list[Key | None]) -> None:
        self._keys = iter(keys)
        self.frames: list[Frame] = []

    def size(self) -> tuple[int, int]:
        return 50, 12

    def read_key(self) -> Key | None:
        return next(self._keys)

    def draw(self, frame: Frame) -> None:
        self.frames.append(frame)

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        yield


class TestRunLoop:
    @pytest.mark.asyncio
    async def test_draws_until_quit(self) -> None:
        screen = ScriptedScreen(
            [
                Key.of("r"),
                None,
                Key(KeyCode.RESIZE),
                Key.of("e"),
                Key.of("a"),
                Key.of("d"),
                Key(KeyCode.ESC),
            ]
        )
        session = Session(StaticSearch(), EmptyHistory(), NullLauncher(), screen)

        await run_loop(session, screen, Theme())

        assert session.state.input == "read"
        assert session.state.results == ["/srv/readme.txt"]
        assert len(screen.frames) == 7
        assert any("/srv/readme.txt" in line for line in screen.frames[-1].lines())

    @pytest.mark.asyncio
    async def test_initial_term_is_drawn_first(self) -> None:
        screen = ScriptedScreen([Key.control("c")])
        session = Session(
            StaticSearch(), EmptyHistory(), NullLauncher(), screen, initial_term="readme"
        )

        await run_loop(session, screen, Theme())

        assert any("/srv/readme.txt" in line for line in screen.frames[0].lines())
