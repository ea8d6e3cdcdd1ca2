from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError

from multigit.engine.runner import BatchAborted, BatchRunner
from multigit.events.dispatcher import EventDispatcher
from multigit.events.observer import StdoutObserver
from multigit.models.outcome import BatchResult
from multigit.workspace.repo_list import RepositoryListError, read_repo_list


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def build_dispatcher() -> EventDispatcher:
    dispatcher = EventDispatcher()
    dispatcher.add_observer(StdoutObserver())
    return dispatcher


def fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def validation_message(e: ValidationError) -> str:
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())


def open_repo_list(list_file: Path) -> Iterator[str]:
    """Check the list file now; its entries are read lazily by the batch."""
    try:
        return read_repo_list(list_file)
    except RepositoryListError as e:
        fail(str(e))


def run_batch(runner: BatchRunner, entries: Iterator[str]) -> BatchResult:
    """Drive the batch; a stop-on-error abort becomes exit status 1."""
    try:
        return runner.run(entries)
    except BatchAborted:
        raise typer.Exit(code=1)
