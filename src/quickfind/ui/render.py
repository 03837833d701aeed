"""Pure projection of session state into a styled character grid."""

from __future__ import annotations

import re
from dataclasses import dataclass

from quickfind.ui.session import Focus, SessionState
from quickfind.ui.theme import PLAIN, Style, Theme

MARGIN = 1
SEARCH_BOX_HEIGHT = 3

_HINTS = {
    Focus.SEARCH: "enter: open  down: results  ctrl+r: history  esc: quit",
    Focus.RESULTS: "enter/o: open  e: edit  d: directory  tab: search  esc: quit",
    Focus.HISTORY: "enter: use  d: delete  del: clear all  esc: back",
    Focus.CONFIRM_CLEAR: "y: clear history  n: cancel",
}


@dataclass(frozen=True, slots=True)
class Segment:
    text: str
    style: Style = PLAIN


@dataclass(frozen=True)
class Frame:
    """Rendered screen: one list of segments per row, plus the cursor cell."""

    rows: list[list[Segment]]
    cursor: tuple[int, int] | None = None

    def lines(self) -> list[str]:
        return ["".join(segment.text for segment in row) for row in self.rows]


class Canvas:
    """Fixed-size grid of styled cells. Writes outside the grid are clipped."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._styles = [[PLAIN] * self.width for _ in range(self.height)]

    def put(self, y: int, x: int, text: str, style: Style = PLAIN, limit: int | None = None) -> int:
        """Write text at (y, x) and return the number of cells written."""
        if not 0 <= y < self.height:
            return 0
        right = self.width if limit is None else min(self.width, x + limit)
        written = 0
        for offset, char in enumerate(text):
            col = x + offset
            if col >= right:
                break
            if col < 0:
                continue
            self._chars[y][col] = char if char.isprintable() else "?"
            self._styles[y][col] = style
            written += 1
        return written

    def fill(self, y: int, x: int, width: int, height: int, style: Style = PLAIN) -> None:
        for row in range(y, y + height):
            self.put(row, x, " " * width, style)

    def box(
        self,
        y: int,
        x: int,
        width: int,
        height: int,
        title: str = "",
        style: Style = PLAIN,
    ) -> None:
        """Draw a single-line border with an optional title on the top edge."""
        if width < 2 or height < 2:
            return
        inner = width - 2
        self.put(y, x, "┌" + "─" * inner + "┐", style)
        for row in range(y + 1, y + height - 1):
            self.put(row, x, "│", style)
            self.put(row, x + width - 1, "│", style)
        self.put(y + height - 1, x, "└" + "─" * inner + "┘", style)
        if title:
            self.put(y, x + 1, title, style, limit=inner)

    def frame(self, cursor: tuple[int, int] | None = None) -> Frame:
        rows: list[list[Segment]] = []
        for chars, styles in zip(self._chars, self._styles, strict=True):
            row: list[Segment] = []
            start = 0
            for col in range(1, self.width + 1):
                if col == self.width or styles[col] != styles[start]:
                    row.append(Segment("".join(chars[start:col]), styles[start]))
                    start = col
            rows.append(row)
        return Frame(rows=rows, cursor=cursor)


def highlight_spans(text: str, term: str) -> list[tuple[int, int]]:
    """Half-open spans of ``text`` matching any word of ``term``, ignoring case.

    Overlaps are resolved greedily: earliest start wins, then the longest span.
    """
    candidates: list[tuple[int, int]] = []
    for word in set(term.split()):
        lookahead = re.compile(f"(?=({re.escape(word)}))", re.IGNORECASE)
        candidates.extend(match.span(1) for match in lookahead.finditer(text))
    candidates.sort(key=lambda span: (span[0], span[0] - span[1]))

    spans: list[tuple[int, int]] = []
    last_end = 0
    for start, end in candidates:
        if start < last_end:
            continue
        spans.append((start, end))
        last_end = end
    return spans


def highlight_segments(text: str, term: str, base: Style, match: Style) -> list[Segment]:
    """Split text into plain and highlighted segments for a search term."""
    segments: list[Segment] = []
    last_end = 0
    for start, end in highlight_spans(text, term):
        if start > last_end:
            segments.append(Segment(text[last_end:start], base))
        segments.append(Segment(text[start:end], match))
        last_end = end
    if last_end < len(text):
        segments.append(Segment(text[last_end:], base))
    return segments


def status_text(state: SessionState) -> str:
    if not state.results:
        counter = "0 items"
    else:
        counter = f"{state.selected + 1}/{len(state.results)} items"
    return f"{counter}  {_HINTS[state.focus]}"


def _list_offset(selected: int, visible: int) -> int:
    if visible <= 0:
        return 0
    return max(selected - visible + 1, 0)


def build_frame(state: SessionState, width: int, height: int, theme: Theme | None = None) -> Frame:
    """Render the session into a frame of the given terminal size."""
    theme = theme or Theme()
    canvas = Canvas(width, height)
    x = MARGIN
    y = MARGIN
    inner_width = max(width - 2 * MARGIN, 0)
    inner_height = max(height - 2 * MARGIN, 0)
    results_height = max(inner_height - SEARCH_BOX_HEIGHT - 2, 0)

    cursor = _draw_search_box(canvas, state, theme, y, x, inner_width)
    _draw_results(canvas, state, theme, y + SEARCH_BOX_HEIGHT, x, inner_width, results_height)

    status_row = y + SEARCH_BOX_HEIGHT + results_height
    canvas.put(status_row, x, status_text(state), theme.status, limit=inner_width)
    if state.error:
        canvas.put(status_row + 1, x, state.error, theme.error, limit=inner_width)

    if state.focus is Focus.HISTORY:
        _draw_history(canvas, state, theme)
    elif state.focus is Focus.CONFIRM_CLEAR:
        _draw_confirm(canvas, theme)

    return canvas.frame(cursor if state.focus is Focus.SEARCH else None)


def _draw_search_box(
    canvas: Canvas,
    state: SessionState,
    theme: Theme,
    y: int,
    x: int,
    width: int,
) -> tuple[int, int]:
    focused = state.focus is Focus.SEARCH
    border = theme.focused_border if focused else theme.border
    canvas.box(y, x, width, SEARCH_BOX_HEIGHT, "Search", border)
    field_width = max(width - 2, 1)
    scroll = max(state.cursor - field_width + 1, 0)
    canvas.put(y + 1, x + 1, state.input[scroll:], PLAIN, limit=field_width)
    return (y + 1, x + 1 + state.cursor - scroll)


def _draw_results(
    canvas: Canvas,
    state: SessionState,
    theme: Theme,
    y: int,
    x: int,
    width: int,
    height: int,
) -> None:
    focused = state.focus is Focus.RESULTS
    border = theme.focused_border if focused else theme.border
    canvas.box(y, x, width, height, "Results", border)
    visible = height - 2
    if visible <= 0:
        return
    item_width = max(width - 2, 0)
    offset = _list_offset(state.selected, visible)
    for row, path in enumerate(state.results[offset : offset + visible]):
        index = offset + row
        is_selected = index == state.selected
        base = theme.selected if is_selected else PLAIN
        match = Style(bg=theme.highlight, bold=True) if is_selected else theme.match
        if is_selected:
            canvas.fill(y + 1 + row, x + 1, item_width, 1, base)
        col = x + 1
        for segment in highlight_segments(path, state.input, base, match):
            remaining = item_width - (col - x - 1)
            if remaining <= 0:
                break
            col += canvas.put(y + 1 + row, col, segment.text, segment.style, limit=remaining)


def _centered(total: int, percent: int, minimum: int) -> tuple[int, int]:
    size = min(max(total * percent // 100, minimum), total)
    return (total - size) // 2, size


def _draw_history(canvas: Canvas, state: SessionState, theme: Theme) -> None:
    top, height = _centered(canvas.height, 40, 5)
    left, width = _centered(canvas.width, 60, 20)
    panel = theme.history_panel
    canvas.fill(top, left, width, height, panel)
    canvas.box(top, left, width, height, "Search History", panel)
    visible = height - 2
    item_width = max(width - 2, 0)
    if not state.history:
        canvas.put(top + 1, left + 1, "No search history", panel, limit=item_width)
        return
    offset = _list_offset(state.history_selected, visible)
    for row, term in enumerate(state.history[offset : offset + visible]):
        selected = offset + row == state.history_selected
        style = theme.history_selected if selected else panel
        if selected:
            canvas.fill(top + 1 + row, left + 1, item_width, 1, style)
        canvas.put(top + 1 + row, left + 1, term, style, limit=item_width)


def _draw_confirm(canvas: Canvas, theme: Theme) -> None:
    top, height = _centered(canvas.height, 20, 3)
    left, width = _centered(canvas.width, 60, 30)
    canvas.fill(top, left, width, height, PLAIN)
    canvas.box(top, left, width, height, "Confirm Clear History", theme.border)
    canvas.put(
        top + 1,
        left + 1,
        "Are you sure you want to clear all search history? (y/N)",
        PLAIN,
        limit=max(width - 2, 0),
    )
