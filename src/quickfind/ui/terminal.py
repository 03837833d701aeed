"""curses backend: key translation, frame painting and suspension."""

from __future__ import annotations

import contextlib
import curses
import locale
import os
from collections.abc import Iterator
from types import TracebackType

from quickfind.ui.keys import Key, KeyCode
from quickfind.ui.render import Frame
from quickfind.ui.theme import Color, Style

TICK_MS = 250

_SPECIAL_KEYS: dict[int, KeyCode] = {
    curses.KEY_ENTER: KeyCode.ENTER,
    curses.KEY_BACKSPACE: KeyCode.BACKSPACE,
    curses.KEY_DC: KeyCode.DELETE,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
    curses.KEY_HOME: KeyCode.HOME,
    curses.KEY_END: KeyCode.END,
    curses.KEY_RESIZE: KeyCode.RESIZE,
}

_CONTROL_CHARS: dict[str, KeyCode] = {
    "\n": KeyCode.ENTER,
    "\r": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x1b": KeyCode.ESC,
    "\x7f": KeyCode.BACKSPACE,
}

_CURSES_COLORS: dict[Color, tuple[int, bool]] = {
    Color.BLACK: (curses.COLOR_BLACK, False),
    Color.RED: (curses.COLOR_RED, False),
    Color.GREEN: (curses.COLOR_GREEN, False),
    Color.YELLOW: (curses.COLOR_YELLOW, False),
    Color.BLUE: (curses.COLOR_BLUE, False),
    Color.MAGENTA: (curses.COLOR_MAGENTA, False),
    Color.CYAN: (curses.COLOR_CYAN, False),
    Color.WHITE: (curses.COLOR_WHITE, True),
    Color.GRAY: (curses.COLOR_WHITE, False),
    Color.DARK_GRAY: (curses.COLOR_BLACK, True),
    Color.LIGHT_RED: (curses.COLOR_RED, True),
    Color.LIGHT_GREEN: (curses.COLOR_GREEN, True),
    Color.LIGHT_YELLOW: (curses.COLOR_YELLOW, True),
    Color.LIGHT_BLUE: (curses.COLOR_BLUE, True),
    Color.LIGHT_MAGENTA: (curses.COLOR_MAGENTA, True),
    Color.LIGHT_CYAN: (curses.COLOR_CYAN, True),
}


def translate_key(raw: int | str) -> Key | None:
    """Map a ``get_wch`` value to a Key, or None for keys the UI ignores."""
    if isinstance(raw, int):
        code = _SPECIAL_KEYS.get(raw)
        return Key(code) if code is not None else None
    if raw in _CONTROL_CHARS:
        return Key(_CONTROL_CHARS[raw])
    if len(raw) == 1 and ord(raw) < 0x20:
        return Key.control(chr(ord(raw) + 0x60))
    return Key.of(raw)


class CursesTerminal:
    """Owns the curses screen for the lifetime of an interactive session."""

    def __init__(self, tick_ms: int = TICK_MS) -> None:
        self._tick_ms = tick_ms
        self._screen: curses.window | None = None
        self._pairs: dict[tuple[int, int], int] = {}
        self._extended_colors = 8

    def __enter__(self) -> CursesTerminal:
        locale.setlocale(locale.LC_ALL, "")
        os.environ.setdefault("ESCDELAY", "25")
        self._screen = curses.initscr()
        try:
            self._configure()
        except curses.error:
            self._restore()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._restore()

    @property
    def screen(self) -> curses.window:
        if self._screen is None:
            msg = "Terminal not started. Use 'with CursesTerminal() as terminal:'"
            raise RuntimeError(msg)
        return self._screen

    def _configure(self) -> None:
        curses.noecho()
        curses.raw()
        self.screen.keypad(True)
        self.screen.timeout(self._tick_ms)
        if curses.has_colors():
            curses.start_color()
            with contextlib.suppress(curses.error):
                curses.use_default_colors()
            self._extended_colors = curses.COLORS

    def _restore(self) -> None:
        if self._screen is None:
            return
        self._screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()
        self._screen = None

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Hand the terminal to a child process and take it back afterwards."""
        curses.def_prog_mode()
        curses.endwin()
        try:
            yield
        finally:
            curses.reset_prog_mode()
            self.screen.clear()
            self.screen.refresh()

    def size(self) -> tuple[int, int]:
        height, width = self.screen.getmaxyx()
        return width, height

    def read_key(self) -> Key | None:
        """Wait up to one tick for a key press."""
        try:
            raw = self.screen.get_wch()
        except curses.error:
            return None
        return translate_key(raw)

    def draw(self, frame: Frame) -> None:
        screen = self.screen
        screen.erase()
        height, width = screen.getmaxyx()
        for y, row in enumerate(frame.rows[:height]):
            x = 0
            for segment in row:
                text = segment.text[: max(width - x, 0)]
                if not text:
                    break
                # The bottom-right cell cannot be written without scrolling.
                if y == height - 1 and x + len(text) >= width:
                    text = text[:-1]
                with contextlib.suppress(curses.error):
                    screen.addstr(y, x, text, self._attr(segment.style))
                x += len(segment.text)
        if frame.cursor is not None:
            with contextlib.suppress(curses.error):
                curses.curs_set(1)
                screen.move(*frame.cursor)
        else:
            with contextlib.suppress(curses.error):
                curses.curs_set(0)
        screen.refresh()

    def _attr(self, style: Style) -> int:
        attr = curses.A_NORMAL
        if style.bold:
            attr |= curses.A_BOLD
        if style.reverse:
            attr |= curses.A_REVERSE
        if curses.has_colors() and (style.fg is not Color.DEFAULT or style.bg is not Color.DEFAULT):
            attr |= curses.color_pair(self._pair(self._color(style.fg), self._color(style.bg)))
        return attr

    def _color(self, color: Color) -> int:
        if color is Color.DEFAULT:
            return -1
        base, bright = _CURSES_COLORS[color]
        if bright and self._extended_colors >= 16:
            return base + 8
        return base

    def _pair(self, fg: int, bg: int) -> int:
        key = (fg, bg)
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            if pair >= curses.COLOR_PAIRS:
                return 0
            curses.init_pair(pair, fg, bg)
            self._pairs[key] = pair
        return pair
