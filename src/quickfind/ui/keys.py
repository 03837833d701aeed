"""Backend-neutral key events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class KeyCode(StrEnum):
    CHAR = "char"
    ENTER = "enter"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    TAB = "tab"
    ESC = "esc"
    RESIZE = "resize"


@dataclass(frozen=True, slots=True)
class Key:
    """A single key press."""

    code: KeyCode
    char: str = ""
    ctrl: bool = False

    @classmethod
    def of(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char)

    @classmethod
    def control(cls, char: str) -> Key:
        return cls(KeyCode.CHAR, char.lower(), ctrl=True)

    def is_char(self, *chars: str) -> bool:
        return self.code is KeyCode.CHAR and not self.ctrl and self.char in chars

    def is_ctrl(self, *chars: str) -> bool:
        return self.code is KeyCode.CHAR and self.ctrl and self.char in chars
