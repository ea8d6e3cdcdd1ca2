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
from multigit.engine.branch_actions import BranchActionExecutor
from multigit.engine.error_policies import ErrorPolicy
from multigit.engine.runner import BatchRunner
from multigit.models.operation import ActionKind, OperationConfig
from multigit.workspace.guard import RepositoryGuard

ACTIONS = ", ".join(a.value for a in ActionKind)


def _pick(flag: bool | None, default: bool) -> bool:
    return default if flag is None else flag


def branch(
    list_file: Path = typer.Argument(..., help="File with one absolute repository path per line"),
    branch_name: str = typer.Argument(..., help="Branch to operate on"),
    action: str = typer.Argument(..., help=f"One of: {ACTIONS}"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote name (default: origin)"),
    fetch: Optional[bool] = typer.Option(
        None,
        "--fetch/--no-fetch",
        help="Fetch the remote before operating; if that fails, fetch all remotes (fetch --all --prune)",
    ),
    pull: Optional[bool] = typer.Option(None, "--pull/--no-pull", help="Fast-forward the base branch after switching to it"),
    clean_reset: bool = typer.Option(
        False, "--clean-reset", help="DESTRUCTIVE: reset --hard and clean -fd each repository first"
    ),
    push: Optional[bool] = typer.Option(None, "--push/--no-push", help="(create) push the new branch and set upstream"),
    keep_going: Optional[bool] = typer.Option(
        None, "--keep-going/--stop-on-error", help="Continue past failing repositories (default) or stop at the first"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git command"),
) -> None:
    """Delete, create or check out a branch in every listed repository."""
    configure_logging(verbose)
    entries = open_repo_list(list_file)

    try:
        action_kind = ActionKind(action)
    except ValueError:
        fail(f"Unknown action: {action} (expected one of: {ACTIONS})")

    defaults = load_config()
    if keep_going is None:
        policy = defaults.error_policy
    else:
        policy = ErrorPolicy.KEEP_GOING if keep_going else ErrorPolicy.STOP_ON_ERROR

    try:
        config = OperationConfig(
            branch=branch_name,
            action=action_kind,
            remote=remote if remote is not None else defaults.remote,
            fetch=_pick(fetch, defaults.fetch),
            pull=_pick(pull, defaults.pull),
            force_clean=clean_reset,
            push=_pick(push, defaults.push),
            error_policy=policy,
        )
    except ValidationError as e:
        fail(validation_message(e))

    dispatcher = build_dispatcher()
    runner = BatchRunner(
        processor=BranchActionExecutor(config).execute,
        guard=RepositoryGuard(force_clean=config.force_clean),
        event_emitter=dispatcher,
        policy=config.error_policy,
    )

    dispatcher.emit("BatchStarted", operation=config.action.value, branch=config.branch, list_file=str(list_file))
    run_batch(runner, entries)
