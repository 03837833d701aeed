"""Helpers for opening paths with the OS default handler or an editor."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

FALLBACK_EDITORS = ("nvim", "vim", "vi", "nano")


class LaunchError(Exception):
    """Raised when an external program could not handle a path."""


def open_path(path: str) -> None:
    """Open a file or directory with the platform's default handler.

    Raises:
        LaunchError: The path does not exist or no handler could be started.
    """
    target = Path(path).expanduser()
    if not target.exists():
        raise LaunchError(f"No such file or directory: {target}")

    try:
        if sys.platform == "win32":
            os.startfile(str(target))  # type: ignore[attr-defined]
            return
        command = "open" if sys.platform == "darwin" else "xdg-open"
        subprocess.Popen(
            [command, str(target)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        raise LaunchError(f"Could not open {target}: {exc}") from exc


def editor_candidates(preferred: str | None = None) -> list[list[str]]:
    """Editor commands to try, in order, as argv prefixes."""
    raw: list[str] = []
    for value in (preferred, os.environ.get("VISUAL"), os.environ.get("EDITOR")):
        if value and value.strip():
            raw.append(value.strip())
    raw.extend(FALLBACK_EDITORS)

    candidates: list[list[str]] = []
    for command in raw:
        try:
            argv = shlex.split(command)
        except ValueError:
            logger.warning("Ignoring unparsable editor command %r", command)
            continue
        if argv and argv not in candidates:
            candidates.append(argv)
    return candidates


def edit_path(path: str, preferred: str | None = None) -> list[str]:
    """Run the first editor that exits cleanly on path; blocks until it exits.

    Returns:
        The argv prefix of the editor that succeeded.

    Raises:
        LaunchError: Every candidate failed to start or exited non-zero.
    """
    for argv in editor_candidates(preferred):
        try:
            completed = subprocess.run([*argv, path], check=False)
        except OSError as exc:
            logger.info("Editor %s unavailable: %s", argv[0], exc)
            continue
        if completed.returncode == 0:
            return argv
        logger.info("Editor %s exited with status %d", argv[0], completed.returncode)
    raise LaunchError(f"No editor could open {path}")


class SystemLauncher:
    """Launcher backed by the OS opener and the editor fallback chain."""

    def __init__(self, editor: str | None = None) -> None:
        self._editor = editor

    def open(self, path: str) -> None:
        open_path(path)

    def edit(self, path: str) -> None:
        edit_path(path, self._editor)
