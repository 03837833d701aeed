"""Named colors and cell styles for the terminal UI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Color(StrEnum):
    DEFAULT = "default"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"
    GRAY = "gray"
    DARK_GRAY = "darkgray"
    LIGHT_RED = "lightred"
    LIGHT_GREEN = "lightgreen"
    LIGHT_YELLOW = "lightyellow"
    LIGHT_BLUE = "lightblue"
    LIGHT_MAGENTA = "lightmagenta"
    LIGHT_CYAN = "lightcyan"


DEFAULT_HIGHLIGHT = Color.DARK_GRAY


@dataclass(frozen=True, slots=True)
class Style:
    fg: Color = Color.DEFAULT
    bg: Color = Color.DEFAULT
    bold: bool = False
    reverse: bool = False


PLAIN = Style()


def parse_color(name: str | None) -> Color | None:
    """Map a config color name to a Color, or None when unknown."""
    if not name:
        return None
    try:
        return Color(name.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class Theme:
    """Styles used by the renderer."""

    highlight: Color = DEFAULT_HIGHLIGHT

    @classmethod
    def from_config(cls, highlight_color: str | None) -> Theme:
        return cls(highlight=parse_color(highlight_color) or DEFAULT_HIGHLIGHT)

    @property
    def match(self) -> Style:
        return Style(bg=self.highlight)

    @property
    def selected(self) -> Style:
        return Style(bold=True, reverse=True)

    @property
    def focused_border(self) -> Style:
        return Style(fg=Color.GREEN)

    @property
    def border(self) -> Style:
        return PLAIN

    @property
    def status(self) -> Style:
        return Style(fg=Color.GRAY)

    @property
    def error(self) -> Style:
        return Style(fg=Color.RED)

    @property
    def history_panel(self) -> Style:
        return Style(bg=Color.DARK_GRAY)

    @property
    def history_selected(self) -> Style:
        return Style(bg=Color.LIGHT_BLUE)
