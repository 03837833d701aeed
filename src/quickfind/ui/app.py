"""Interactive search application: service init, control loop, run_app()."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from quickfind.services.container import ServiceContainer
from quickfind.ui.keys import KeyCode
from quickfind.ui.launcher import SystemLauncher
from quickfind.ui.render import Frame, build_frame
from quickfind.ui.session import Session
from quickfind.ui.terminal import CursesTerminal
from quickfind.ui.theme import Theme

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from pathlib import Path

    from quickfind.config import Config
    from quickfind.ui.keys import Key

logger = logging.getLogger(__name__)


class ScreenProtocol(Protocol):
    """What the control loop needs from a terminal backend."""

    def size(self) -> tuple[int, int]: ...

    def read_key(self) -> Key | None: ...

    def draw(self, frame: Frame) -> None: ...

    def suspended(self) -> AbstractContextManager[None]: ...


async def run_loop(session: Session, screen: ScreenProtocol, theme: Theme) -> None:
    """Alternate between drawing the state and handling the next key.

    ``read_key`` blocks for at most one tick, so the screen is redrawn
    periodically even without input.
    """
    await session.start()
    while True:
        width, height = screen.size()
        screen.draw(build_frame(session.state, width, height, theme))
        key = screen.read_key()
        if key is None or key.code is KeyCode.RESIZE:
            continue
        if not await session.handle_key(key):
            return


async def _run(config: Config, db_path: Path, initial_term: str | None) -> None:
    services = await ServiceContainer.create(config, db_path)
    logger.info("Starting interactive session on %s", db_path)
    try:
        with CursesTerminal() as terminal:
            session = Session(
                services.search_service,
                services.history_service,
                SystemLauncher(editor=config.editor),
                terminal,
                initial_term=initial_term,
            )
            await run_loop(session, terminal, Theme.from_config(config.highlight_color))
    finally:
        await services.close()


def run_app(config: Config, db_path: Path, initial_term: str | None = None) -> None:
    """Entry point: open the index and run the interactive session until quit."""
    asyncio.run(_run(config, db_path, initial_term))
