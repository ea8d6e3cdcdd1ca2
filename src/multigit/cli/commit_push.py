from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from multigit.cli.batch_setup import (
    build_dispatcher,
    configure_logging,
    fail,
    open_repo_list,
    run_batch,
    validation_message,
)
from multigit.config.settings import load_config
from multigit.engine.commit_publish import CommitPublishWorkflow
from multigit.engine.error_policies import ErrorPolicy
from multigit.engine.runner import BatchRunner
from multigit.models.operation import CommitPublishConfig
from multigit.workspace.guard import RepositoryGuard

SEPARATOR = "--"


def split_selectors(rest: list[str]) -> list[str]:
    """Return what follows the mandatory ``--``; raise ``typer.Exit`` otherwise."""
    if not rest or rest[0] != SEPARATOR:
        fail("Missing -- separator before git add arguments")
    selectors = rest[1:]
    if not selectors:
        fail("You must pass arguments for git add after --")
    return selectors


def commit_push(
    list_file: Path = typer.Argument(..., help="File with one absolute repository path per line"),
    branch_name: str = typer.Argument(..., help="Branch to commit on (created from the default branch if missing)"),
    commit_message: str = typer.Argument(..., help="Commit message"),
    rest: Optional[list[str]] = typer.Argument(None, help="'--' followed by the arguments for git add"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote name (default: origin)"),
    keep_going: Optional[bool] = typer.Option(
        None, "--keep-going/--stop-on-error", help="Continue past failing repositories (default) or stop at the first"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git command"),
) -> None:
    """Stage, commit and push a branch in every listed repository.

    Options go before the list file; everything after ``--`` is handed to
    ``git add`` unchanged, so ``-- -A`` and ``-- src/ README.md`` both work.
    """
    configure_logging(verbose)
    selectors = split_selectors(rest or [])
    entries = open_repo_list(list_file)

    defaults = load_config()
    if keep_going is None:
        policy = defaults.error_policy
    else:
        policy = ErrorPolicy.KEEP_GOING if keep_going else ErrorPolicy.STOP_ON_ERROR

    try:
        config = CommitPublishConfig(
            branch=branch_name,
            message=commit_message,
            selectors=tuple(selectors),
            remote=remote if remote is not None else defaults.remote,
            error_policy=policy,
        )
    except ValidationError as e:
        fail(validation_message(e))

    dispatcher = build_dispatcher()
    runner = BatchRunner(
        processor=CommitPublishWorkflow(config).execute,
        guard=RepositoryGuard(require_clean=False),
        event_emitter=dispatcher,
        policy=config.error_policy,
    )

    dispatcher.emit("BatchStarted", operation="commit-push", branch=config.branch, list_file=str(list_file))
    run_batch(runner, entries)
