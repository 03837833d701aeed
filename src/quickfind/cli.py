"""Typer CLI for quickfind: index the configured roots or search interactively."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from result import Err

from quickfind.config import AppPaths, Config, ConfigError, load_config

if TYPE_CHECKING:
    from quickfind.models.indexing import CrawlStats

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="quickfind",
    help="Index local files and find them from an interactive terminal search.",
    add_completion=False,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@app.command()
def main(
    search_term: Annotated[
        str | None,
        typer.Argument(help="Initial search term for the interactive session"),
    ] = None,
    index: Annotated[
        bool,
        typer.Option("--index", "-i", help="Index files from the configured roots and exit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every discovered and ignored path"),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Path to the config file"),
    ] = None,
    db_path: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the index database"),
    ] = None,
) -> None:
    """Search the file index, or rebuild it with --index."""
    paths = AppPaths()
    try:
        config = load_config(config_path or paths.config_path)
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    database = db_path or paths.db_path

    if index:
        _configure_logging(verbose=verbose)
        if verbose:
            logger.info("Configuration: %s", config.model_dump())
        typer.echo("Indexing files...")
        try:
            ok = asyncio.run(_do_index(config, database, verbose))
        except (sqlite3.Error, OSError) as exc:
            typer.echo(f"Error: could not open index at {database}: {exc}", err=True)
            raise typer.Exit(1) from exc
        if not ok:
            raise typer.Exit(1)
        return

    _configure_logging(verbose=verbose, log_path=paths.log_path)
    from quickfind.ui.app import run_app

    try:
        run_app(config, database, search_term)
    except (sqlite3.Error, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    except KeyboardInterrupt:
        raise typer.Exit(130) from None


class _ProgressPrinter:
    """Single overwritten status line in quiet mode, log lines in verbose mode."""

    def __init__(self, verbose: bool) -> None:
        self._verbose = verbose
        self._width = 0

    def progress(self, stats: CrawlStats) -> None:
        if self._verbose:
            logger.info("Progress: %s", stats.progress_line())
            return
        line = f"Indexing... {stats.progress_line()}"
        typer.echo(f"\r{line.ljust(self._width)}", nl=False)
        self._width = max(self._width, len(line))

    def finished(self, stats: CrawlStats) -> None:
        if self._width:
            typer.echo("\r" + " " * self._width + "\r", nl=False)
            self._width = 0
        typer.echo(stats.summary())


async def _do_index(config: Config, db_path: Path, verbose: bool) -> bool:
    """Crawl every configured root. Returns False on a fatal indexing error."""
    from quickfind.data.db import Database
    from quickfind.data.store import IndexStore
    from quickfind.services.index_service import IndexService

    printer = _ProgressPrinter(verbose)
    async with Database(db_path) as db:
        store = IndexStore(db)
        service = IndexService(store, config)
        result = await service.index_roots(
            verbose=verbose,
            progress_callback=printer.progress,
            root_callback=printer.finished,
        )
        if isinstance(result, Err):
            typer.echo(f"\nError: {result.err_value}", err=True)
            return False
        total = await store.count()

    typer.echo(
        f"Indexing complete. {len(result.ok_value)} root(s) indexed, {total} files in the index."
    )
    return True


def _configure_logging(*, verbose: bool, log_path: Path | None = None) -> None:
    """Log to stderr when indexing, to a file while the curses UI owns the screen."""
    level = logging.INFO if verbose else logging.WARNING
    if log_path is None:
        logging.basicConfig(level=level, format=_LOG_FORMAT)
        return
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s " + _LOG_FORMAT,
        filename=str(log_path),
    )
