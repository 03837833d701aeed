"""Keyboard-driven session state machine for the interactive search UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from result import Ok

from quickfind.ui.keys import Key, KeyCode
from quickfind.ui.launcher import LaunchError

if TYPE_CHECKING:
    from quickfind.services.protocols import HistoryServiceProtocol, SearchServiceProtocol
    from quickfind.ui.protocols import LauncherProtocol, TerminalProtocol

logger = logging.getLogger(__name__)


class Focus(StrEnum):
    """Which region receives key input."""

    SEARCH = "search"
    RESULTS = "results"
    HISTORY = "history"
    CONFIRM_CLEAR = "confirm_clear"


@dataclass
class SessionState:
    """Transient UI state for one interactive session."""

    input: str = ""
    cursor: int = 0
    results: list[str] = field(default_factory=list)
    selected: int = 0
    focus: Focus = Focus.SEARCH
    error: str | None = None
    history: list[str] = field(default_factory=list)
    history_selected: int = 0

    @property
    def selected_path(self) -> str | None:
        if 0 <= self.selected < len(self.results):
            return self.results[self.selected]
        return None

    @property
    def selected_history(self) -> str | None:
        if 0 <= self.history_selected < len(self.history):
            return self.history[self.history_selected]
        return None


def _wrap(index: int, step: int, size: int) -> int:
    return (index + step) % size if size else 0


class Session:
    """Translates key events into state transitions and index queries."""

    def __init__(
        self,
        search_service: SearchServiceProtocol,
        history_service: HistoryServiceProtocol,
        launcher: LauncherProtocol,
        terminal: TerminalProtocol,
        *,
        initial_term: str | None = None,
    ) -> None:
        self._search = search_service
        self._history = history_service
        self._launcher = launcher
        self._terminal = terminal
        term = initial_term or ""
        self.state = SessionState(input=term, cursor=len(term))

    async def start(self) -> None:
        """Run the seeded query, if any, and load history."""
        if self.state.input:
            await self._run_query()
        await self._load_history()

    async def handle_key(self, key: Key) -> bool:
        """Apply one key press. Returns False when the session should end."""
        match self.state.focus:
            case Focus.SEARCH:
                return await self._on_search_key(key)
            case Focus.RESULTS:
                return await self._on_results_key(key)
            case Focus.HISTORY:
                await self._on_history_key(key)
            case Focus.CONFIRM_CLEAR:
                await self._on_confirm_key(key)
        return True

    # ── Search input ──

    async def _on_search_key(self, key: Key) -> bool:
        state = self.state
        if key.code is KeyCode.ESC or key.is_ctrl("c"):
            return False
        if key.is_ctrl("r", "h"):
            await self._open_history()
        elif key.is_ctrl("a") or key.code is KeyCode.HOME:
            state.cursor = 0
        elif key.is_ctrl("e") or key.code is KeyCode.END:
            state.cursor = len(state.input)
        elif key.code is KeyCode.LEFT:
            state.cursor = max(state.cursor - 1, 0)
        elif key.code is KeyCode.RIGHT:
            state.cursor = min(state.cursor + 1, len(state.input))
        elif key.code is KeyCode.BACKSPACE:
            if state.cursor > 0:
                text = state.input[: state.cursor - 1] + state.input[state.cursor :]
                await self._set_input(text, state.cursor - 1)
        elif key.code is KeyCode.DELETE:
            if state.cursor < len(state.input):
                text = state.input[: state.cursor] + state.input[state.cursor + 1 :]
                await self._set_input(text, state.cursor)
        elif key.code is KeyCode.ENTER:
            if state.input:
                await self._run_query()
                state.focus = Focus.RESULTS
                state.selected = 0
                await self._open_selected()
        elif key.code is KeyCode.DOWN:
            if state.results:
                state.focus = Focus.RESULTS
                state.selected = 0
        elif key.code is KeyCode.TAB:
            state.focus = Focus.RESULTS
        elif key.code is KeyCode.CHAR and not key.ctrl and key.char.isprintable():
            text = state.input[: state.cursor] + key.char + state.input[state.cursor :]
            await self._set_input(text, state.cursor + len(key.char))
        return True

    async def _set_input(self, text: str, cursor: int) -> None:
        self.state.input = text
        self.state.cursor = cursor
        self.state.error = None
        await self._run_query()

    async def _run_query(self) -> None:
        result = await self._search.search(self.state.input)
        if isinstance(result, Ok):
            self.state.results = result.ok_value.paths
        else:
            logger.warning("Query %r returned no results: %s", self.state.input, result.err_value)
            self.state.results = []
        self.state.selected = 0

    # ── Result list ──

    async def _on_results_key(self, key: Key) -> bool:
        state = self.state
        if key.code is KeyCode.ESC or key.is_ctrl("c"):
            return False
        if key.code is KeyCode.DOWN:
            state.selected = _wrap(state.selected, 1, len(state.results))
        elif key.code is KeyCode.UP:
            if state.selected == 0 or not state.results:
                state.focus = Focus.SEARCH
            else:
                state.selected -= 1
        elif key.code is KeyCode.ENTER or key.is_char("o"):
            await self._open_selected()
        elif key.is_char("e", "v"):
            await self._edit_selected()
        elif key.is_char("d"):
            self._reveal_selected()
        elif key.code is KeyCode.TAB:
            state.focus = Focus.SEARCH
        return True

    async def _open_selected(self) -> None:
        path = self.state.selected_path
        if path is None:
            return
        try:
            self._launcher.open(path)
        except LaunchError as exc:
            logger.warning("Failed to open %s: %s", path, exc)
            self.state.error = f"Error opening file: {path}"
            return
        await self._remember_term()

    async def _edit_selected(self) -> None:
        path = self.state.selected_path
        if path is None:
            return
        try:
            with self._terminal.suspended():
                self._launcher.edit(path)
        except LaunchError as exc:
            logger.warning("Failed to edit %s: %s", path, exc)
            self.state.error = str(exc)
            return
        await self._remember_term()

    def _reveal_selected(self) -> None:
        path = self.state.selected_path
        if path is None:
            return
        directory = str(Path(path).parent)
        try:
            self._launcher.open(directory)
        except LaunchError as exc:
            logger.warning("Failed to open directory %s: %s", directory, exc)
            self.state.error = f"Error opening directory: {directory}"

    async def _remember_term(self) -> None:
        if not self.state.input.strip():
            return
        result = await self._history.record(self.state.input)
        if not isinstance(result, Ok):
            logger.warning("History not updated: %s", result.err_value)

    # ── History modal ──

    async def _load_history(self) -> None:
        result = await self._history.list_history()
        if isinstance(result, Ok):
            self.state.history = [entry.term for entry in result.ok_value]
        else:
            self.state.history = []
        self.state.history_selected = min(
            self.state.history_selected, max(len(self.state.history) - 1, 0)
        )

    async def _open_history(self) -> None:
        self.state.history_selected = 0
        await self._load_history()
        self.state.focus = Focus.HISTORY

    async def _on_history_key(self, key: Key) -> None:
        state = self.state
        if key.code is KeyCode.ESC:
            state.focus = Focus.SEARCH
        elif key.code is KeyCode.UP:
            state.history_selected = _wrap(state.history_selected, -1, len(state.history))
        elif key.code is KeyCode.DOWN:
            state.history_selected = _wrap(state.history_selected, 1, len(state.history))
        elif key.code is KeyCode.ENTER:
            term = state.selected_history
            if term is not None:
                await self._set_input(term, len(term))
            state.focus = Focus.SEARCH
        elif key.is_char("d"):
            term = state.selected_history
            if term is not None:
                result = await self._history.delete(term)
                if not isinstance(result, Ok):
                    state.error = result.err_value
                await self._load_history()
        elif key.code is KeyCode.DELETE:
            state.focus = Focus.CONFIRM_CLEAR

    async def _on_confirm_key(self, key: Key) -> None:
        state = self.state
        if key.is_char("y", "Y"):
            result = await self._history.clear()
            if isinstance(result, Ok):
                state.history = []
                state.history_selected = 0
            else:
                state.error = result.err_value
            state.focus = Focus.SEARCH
        elif key.is_char("n", "N") or key.code is KeyCode.ESC:
            state.focus = Focus.HISTORY
