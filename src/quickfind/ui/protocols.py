"""Protocol definitions for session collaborators."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol


class LauncherProtocol(Protocol):
    """Opens paths with external programs."""

    def open(self, path: str) -> None: ...

    def edit(self, path: str) -> None: ...


class TerminalProtocol(Protocol):
    """A terminal that can hand the screen to a child process."""

    def suspended(self) -> AbstractContextManager[None]: ...
