from __future__ import annotations

from datetime import datetime
from typing import Protocol

import typer

from multigit.events.types import (
    BatchAborted,
    BatchCompleted,
    BatchStarted,
    Event,
    RepoFailed,
    RepoProcessed,
    RepoSkipped,
    RepoStarted,
    RepoStepCompleted,
)

_WARN_STATUSES = {"warning"}
# A checkout that finds nothing is worth a warning; a delete that finds nothing is not.
_WARN_STEPS = {("checkout", "not-found")}


def _stamp(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S")


def _is_warning(event: RepoStepCompleted) -> bool:
    return event.status in _WARN_STATUSES or (event.step, event.status) in _WARN_STEPS


def _first_line(s: str) -> str:
    return s.strip().splitlines()[0] if s.strip() else ""


class EventObserver(Protocol):
    def on_event(self, event: Event) -> None: ...


class StdoutObserver:
    """Render batch events as log lines; skips and failures go to stderr."""

    def on_event(self, event: Event) -> None:
        if isinstance(event, BatchStarted):
            source = f" from {event.list_file}" if event.list_file else ""
            typer.echo(f"[{_stamp(event.timestamp)}] {event.operation} '{event.branch}'{source}")
        elif isinstance(event, RepoStarted):
            typer.echo(f"\n[{_stamp(event.timestamp)}] Repo: {event.path}")
        elif isinstance(event, RepoStepCompleted):
            if _is_warning(event):
                typer.echo(f"[WARN]   {event.message}", err=True)
            else:
                typer.echo(f"  {event.message}")
        elif isinstance(event, RepoSkipped):
            typer.echo(f"[WARN] SKIP ({event.reason}): {event.path}", err=True)
        elif isinstance(event, RepoProcessed):
            typer.echo(f"[{_stamp(event.timestamp)}] Processed: {event.path}")
        elif isinstance(event, RepoFailed):
            typer.echo(f"[ERR ] FAILED: {event.path} ({_first_line(event.error)})", err=True)
        elif isinstance(event, BatchCompleted):
            typer.echo(
                f"\n[{_stamp(event.timestamp)}] Done. "
                f"{event.processed} processed, {event.skipped} skipped, {event.failed} failed"
            )
        elif isinstance(event, BatchAborted):
            typer.echo(
                f"[ERR ] Stopped at first failure: {event.path} "
                f"({event.processed} processed, {event.skipped} skipped before it)",
                err=True,
            )
