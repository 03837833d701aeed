"""Tests for the interactive session state machine."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from result import Err, Ok, Result

from quickfind.models.history import HistoryEntry
from quickfind.models.search import SearchResults
from quickfind.ui.keys import Key, KeyCode
from quickfind.ui.launcher import LaunchError
from quickfind.ui.session import Focus, Session

PATHS = [
    "/home/u/notes/todo.md",
    "/home/u/notes/ideas.md",
    "/home/u/code/app/main.py",
]


class FakeSearch:
    def __init__(self, paths: list[str], fail: bool = False) -> None:
        self.paths = paths
        self.fail = fail
        self.queries: list[str] = []

    async def search(self, query: str) -> Result[SearchResults, str]:
        self.queries.append(query)
        if self.fail:
            return Err("Search failed: database is locked")
        words = query.lower().split()
        if not words:
            return Ok(SearchResults(query=query))
        matches = [p for p in self.paths if all(w in p.lower() for w in words)]
        return Ok(SearchResults(query=query, paths=matches))


class FakeHistory:
    def __init__(self, terms: list[str] | None = None) -> None:
        self.terms = list(terms or [])

    async def list_history(self, limit: int = 20) -> Result[list[HistoryEntry], str]:
        now = datetime.now(UTC)
        return Ok([HistoryEntry(term=t, last_used=now) for t in self.terms[:limit]])

    async def record(self, term: str) -> Result[None, str]:
        if term in self.terms:
            self.terms.remove(term)
        self.terms.insert(0, term)
        return Ok(None)

    async def delete(self, term: str) -> Result[bool, str]:
        if term in self.terms:
            self.terms.remove(term)
            return Ok(True)
        return Ok(False)

    async def clear(self) -> Result[int, str]:
        removed = len(self.terms)
        self.terms.clear()
        return Ok(removed)


class FakeLauncher:
    def __init__(self, fail_open: bool = False, fail_edit: bool = False) -> None:
        self.fail_open = fail_open
        self.fail_edit = fail_edit
        self.opened: list[str] = []
        self.edited: list[str] = []

    def open(self, path: str) -> None:
        if self.fail_open:
            raise LaunchError(f"No such file or directory: {path}")
        self.opened.append(path)

    def edit(self, path: str) -> None:
        if self.fail_edit:
            raise LaunchError(f"No editor could open {path}")
        self.edited.append(path)


class FakeTerminal:
    def __init__(self) -> None:
        self.events: list[str] = []

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        self.events.append("suspend")
        try:
            yield
        finally:
            self.events.append("resume")


def make_session(
    *,
    search: FakeSearch | None = None,
    history: FakeHistory | None = None,
    launcher: FakeLauncher | None = None,
    terminal: FakeTerminal | None = None,
    initial_term: str | None = None,
) -> Session:
    return Session(
        search or FakeSearch(PATHS),
        history or FakeHistory(),
        launcher or FakeLauncher(),
        terminal or FakeTerminal(),
        initial_term=initial_term,
    )


async def type_text(session: Session, text: str) -> None:
    for char in text:
        assert await session.handle_key(Key.of(char))


class TestSearchInput:
    @pytest.mark.asyncio
    async def test_typing_requeries_on_every_keystroke(self) -> None:
        search = FakeSearch(PATHS)
        session = make_session(search=search)
        await type_text(session, "md")

        assert search.queries == ["m", "md"]
        assert session.state.results == PATHS[:2]
        assert session.state.cursor == 2
        assert session.state.selected == 0

    @pytest.mark.asyncio
    async def test_insert_and_delete_at_cursor(self) -> None:
        session = make_session()
        await type_text(session, "tdo")
        await session.handle_key(Key(KeyCode.LEFT))
        await session.handle_key(Key(KeyCode.LEFT))
        await session.handle_key(Key.of("o"))
        assert session.state.input == "todo"
        assert session.state.cursor == 2

        await session.handle_key(Key(KeyCode.BACKSPACE))
        assert session.state.input == "tdo"
        assert session.state.cursor == 1

        await session.handle_key(Key(KeyCode.DELETE))
        assert session.state.input == "to"
        assert session.state.results == PATHS[:1]

    @pytest.mark.asyncio
    async def test_cursor_movement_does_not_requery(self) -> None:
        search = FakeSearch(PATHS)
        session = make_session(search=search)
        await type_text(session, "ab")
        for code in (KeyCode.HOME, KeyCode.RIGHT, KeyCode.END, KeyCode.LEFT):
            await session.handle_key(Key(code))

        assert search.queries == ["a", "ab"]
        assert session.state.cursor == 1

    @pytest.mark.asyncio
    async def test_backspace_at_start_is_noop(self) -> None:
        search = FakeSearch(PATHS)
        session = make_session(search=search, initial_term="md")
        await session.handle_key(Key(KeyCode.HOME))
        await session.handle_key(Key(KeyCode.BACKSPACE))

        assert session.state.input == "md"
        assert search.queries == []

    @pytest.mark.asyncio
    async def test_initial_term_is_queried_on_start(self) -> None:
        session = make_session(initial_term="main")
        await session.start()

        assert session.state.results == [PATHS[2]]
        assert session.state.cursor == 4

    @pytest.mark.asyncio
    async def test_enter_focuses_results_and_opens_first(self) -> None:
        launcher = FakeLauncher()
        history = FakeHistory()
        session = make_session(launcher=launcher, history=history)
        await type_text(session, "notes")
        await session.handle_key(Key(KeyCode.ENTER))

        assert session.state.focus is Focus.RESULTS
        assert session.state.selected == 0
        assert launcher.opened == [PATHS[0]]
        assert history.terms == ["notes"]

    @pytest.mark.asyncio
    async def test_enter_on_empty_input_does_nothing(self) -> None:
        launcher = FakeLauncher()
        session = make_session(launcher=launcher)
        await session.handle_key(Key(KeyCode.ENTER))

        assert session.state.focus is Focus.SEARCH
        assert launcher.opened == []

    @pytest.mark.asyncio
    async def test_open_failure_sets_error_cleared_by_next_edit(self) -> None:
        history = FakeHistory()
        session = make_session(launcher=FakeLauncher(fail_open=True), history=history)
        await type_text(session, "todo")
        await session.handle_key(Key(KeyCode.ENTER))

        assert session.state.error == f"Error opening file: {PATHS[0]}"
        assert history.terms == []

        await session.handle_key(Key(KeyCode.TAB))
        await session.handle_key(Key(KeyCode.BACKSPACE))
        assert session.state.error is None

    @pytest.mark.asyncio
    async def test_down_moves_to_results_only_with_results(self) -> None:
        session = make_session()
        await session.handle_key(Key(KeyCode.DOWN))
        assert session.state.focus is Focus.SEARCH

        await type_text(session, "md")
        await session.handle_key(Key(KeyCode.DOWN))
        assert session.state.focus is Focus.RESULTS

    @pytest.mark.asyncio
    async def test_store_error_degrades_to_empty_results(self) -> None:
        session = make_session(search=FakeSearch(PATHS, fail=True))
        await type_text(session, "md")

        assert session.state.results == []
        assert session.state.input == "md"

    @pytest.mark.asyncio
    async def test_quit_keys(self) -> None:
        session = make_session()
        assert await session.handle_key(Key(KeyCode.ESC)) is False
        assert await session.handle_key(Key.control("c")) is False


class TestResultsNavigation:
    @pytest.fixture
    async def session(self) -> Session:
        session = make_session()
        await type_text(session, "/home")
        await session.handle_key(Key(KeyCode.DOWN))
        return session

    @pytest.mark.asyncio
    async def test_down_wraps_to_first(self, session: Session) -> None:
        for _ in range(len(PATHS)):
            await session.handle_key(Key(KeyCode.DOWN))
        assert session.state.selected == 0
        assert session.state.focus is Focus.RESULTS

    @pytest.mark.asyncio
    async def test_up_from_first_returns_to_search(self, session: Session) -> None:
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key(KeyCode.UP))
        assert session.state.selected == 0
        assert session.state.focus is Focus.RESULTS

        await session.handle_key(Key(KeyCode.UP))
        assert session.state.focus is Focus.SEARCH

    @pytest.mark.asyncio
    async def test_tab_returns_to_search(self, session: Session) -> None:
        await session.handle_key(Key(KeyCode.TAB))
        assert session.state.focus is Focus.SEARCH

    @pytest.mark.asyncio
    async def test_open_key_opens_selected(self) -> None:
        launcher = FakeLauncher()
        session = make_session(launcher=launcher)
        await type_text(session, "md")
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key.of("o"))

        assert launcher.opened == [PATHS[1]]

    @pytest.mark.asyncio
    async def test_reveal_opens_parent_directory(self) -> None:
        launcher = FakeLauncher()
        session = make_session(launcher=launcher)
        await type_text(session, "main")
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key.of("d"))

        assert launcher.opened == ["/home/u/code/app"]

    @pytest.mark.asyncio
    async def test_edit_suspends_and_resumes_terminal(self) -> None:
        launcher = FakeLauncher()
        terminal = FakeTerminal()
        history = FakeHistory()
        session = make_session(launcher=launcher, terminal=terminal, history=history)
        await type_text(session, "main")
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key.of("e"))

        assert launcher.edited == [PATHS[2]]
        assert terminal.events == ["suspend", "resume"]
        assert history.terms == ["main"]

    @pytest.mark.asyncio
    async def test_edit_failure_resumes_terminal_and_sets_error(self) -> None:
        terminal = FakeTerminal()
        session = make_session(launcher=FakeLauncher(fail_edit=True), terminal=terminal)
        await type_text(session, "main")
        await session.handle_key(Key(KeyCode.DOWN))
        assert await session.handle_key(Key.of("v")) is True

        assert terminal.events == ["suspend", "resume"]
        assert session.state.error == f"No editor could open {PATHS[2]}"


class TestHistoryModal:
    @pytest.mark.asyncio
    async def test_select_entry_fills_search_and_requeries(self) -> None:
        session = make_session(history=FakeHistory(["todo", "main"]))
        await session.handle_key(Key.control("r"))
        assert session.state.focus is Focus.HISTORY
        assert session.state.history == ["todo", "main"]

        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key(KeyCode.ENTER))

        assert session.state.focus is Focus.SEARCH
        assert session.state.input == "main"
        assert session.state.cursor == 4
        assert session.state.results == [PATHS[2]]

    @pytest.mark.asyncio
    async def test_navigation_wraps(self) -> None:
        session = make_session(history=FakeHistory(["a", "b", "c"]))
        await session.handle_key(Key.control("h"))
        await session.handle_key(Key(KeyCode.UP))
        assert session.state.history_selected == 2
        await session.handle_key(Key(KeyCode.DOWN))
        assert session.state.history_selected == 0

    @pytest.mark.asyncio
    async def test_delete_single_entry(self) -> None:
        history = FakeHistory(["a", "b", "c"])
        session = make_session(history=history)
        await session.handle_key(Key.control("r"))
        await session.handle_key(Key(KeyCode.DOWN))
        await session.handle_key(Key.of("d"))

        assert history.terms == ["a", "c"]
        assert session.state.history == ["a", "c"]
        assert session.state.focus is Focus.HISTORY

    @pytest.mark.asyncio
    async def test_clear_requires_confirmation(self) -> None:
        history = FakeHistory(["a", "b"])
        session = make_session(history=history)
        await session.handle_key(Key.control("r"))
        await session.handle_key(Key(KeyCode.DELETE))
        assert session.state.focus is Focus.CONFIRM_CLEAR

        await session.handle_key(Key.of("n"))
        assert session.state.focus is Focus.HISTORY
        assert history.terms == ["a", "b"]

        await session.handle_key(Key(KeyCode.DELETE))
        await session.handle_key(Key.of("y"))
        assert session.state.focus is Focus.SEARCH
        assert history.terms == []
        assert session.state.history == []

    @pytest.mark.asyncio
    async def test_escape_closes_modal_without_quitting(self) -> None:
        session = make_session(history=FakeHistory(["a"]))
        await session.handle_key(Key.control("r"))
        assert await session.handle_key(Key(KeyCode.ESC)) is True
        assert session.state.focus is Focus.SEARCH
