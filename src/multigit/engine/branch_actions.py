from __future__ import annotations

import logging
from collections.abc import Callable

from multigit.engine.resolver import (
    BranchLocation,
    locate_branch,
    position_on_branch,
    resolve_default_branch,
)
from multigit.models.operation import ActionKind, OperationConfig
from multigit.models.outcome import StepRecorder, StepResult, StepStatus
from multigit.workspace.backend import VersionControlBackend
from multigit.workspace.git_ops import GitError

logger = logging.getLogger(__name__)

_Action = Callable[[VersionControlBackend, StepRecorder, str], None]


class BranchActionExecutor:
    """Apply one branch-lifecycle action to a single repository.

    The executor holds no per-repository state: everything it learns about a
    repository (its base branch, its current branch) is recomputed on each
    call to :meth:`execute`.
    """

    def __init__(self, config: OperationConfig) -> None:
        self._config = config
        self._actions: dict[ActionKind, _Action] = {
            ActionKind.DELETE_LOCAL: self._delete_local,
            ActionKind.DELETE_REMOTE: self._delete_remote,
            ActionKind.DELETE_BOTH: self._delete_both,
            ActionKind.CREATE: self._create,
            ActionKind.CHECKOUT: self._checkout,
        }

    def execute(self, backend: VersionControlBackend, record: StepRecorder) -> None:
        config = self._config
        if config.fetch:
            self._fetch(backend, record)

        base = ""
        if config.action.needs_base:
            base = self._position_on_base(backend, record)

        self._actions[config.action](backend, record, base)

    def _fetch(self, backend: VersionControlBackend, record: StepRecorder) -> None:
        remote = self._config.remote
        try:
            backend.fetch(remote, prune=True)
        except GitError as e:
            logger.debug("Fetch of '%s' failed in %s, fetching all remotes: %s", remote, backend.root, e.stderr)
            backend.fetch_all(prune=True)
            record(StepResult(step="fetch", status=StepStatus.WARNING, message=f"Fetched all remotes ('{remote}' failed)"))
            return
        record(StepResult(step="fetch", message=f"Fetched {remote}"))

    def _position_on_base(self, backend: VersionControlBackend, record: StepRecorder) -> str:
        remote = self._config.remote
        resolved = resolve_default_branch(backend, remote)
        location = position_on_branch(backend, remote, resolved.name)
        how = {
            BranchLocation.LOCAL: "switched",
            BranchLocation.REMOTE: f"tracking {remote}/{resolved.name}",
            BranchLocation.NOT_FOUND: "created from current position",
        }[location]
        record(StepResult(step="base", message=f"On base {resolved.describe()}: {how}"))

        if self._config.pull:
            if backend.pull_fast_forward_only(remote, resolved.name):
                record(StepResult(step="pull", message=f"Fast-forwarded {resolved.name}"))
            else:
                record(
                    StepResult(
                        step="pull",
                        status=StepStatus.WARNING,
                        message=f"Fast-forward of {resolved.name} not possible, continuing",
                    )
                )
        return resolved.name

    def _delete_local(self, backend: VersionControlBackend, record: StepRecorder, base: str) -> None:
        branch = self._config.branch
        if not backend.local_branch_exists(branch):
            record(StepResult(step="delete-local", status=StepStatus.NOT_FOUND, message=f"Local branch not found: {branch}"))
            return
        backend.delete_local(branch, force=True)
        record(StepResult(step="delete-local", message=f"Deleted local: {branch}"))

    def _delete_remote(self, backend: VersionControlBackend, record: StepRecorder, base: str) -> None:
        branch = self._config.branch
        remote = self._config.remote
        if not backend.remote_head_exists(remote, branch):
            record(
                StepResult(
                    step="delete-remote",
                    status=StepStatus.NOT_FOUND,
                    message=f"Remote branch not found: {remote}/{branch}",
                )
            )
            return
        backend.delete_remote(remote, branch)
        record(StepResult(step="delete-remote", message=f"Deleted remote: {remote}/{branch}"))

    def _delete_both(self, backend: VersionControlBackend, record: StepRecorder, base: str) -> None:
        # Remote first: a failed local delete can simply be re-run.
        self._delete_remote(backend, record, base)
        self._delete_local(backend, record, base)

    def _create(self, backend: VersionControlBackend, record: StepRecorder, base: str) -> None:
        branch = self._config.branch
        remote = self._config.remote
        if backend.local_branch_exists(branch):
            record(
                StepResult(
                    step="create",
                    status=StepStatus.ALREADY_EXISTS,
                    message=f"Branch already exists locally: {branch}",
                )
            )
            return

        backend.create_and_switch(branch)
        record(StepResult(step="create", message=f"Created branch: {branch} (from {base})"))

        if self._config.push:
            backend.push_set_upstream(remote, branch)
            record(StepResult(step="push", message=f"Pushed and set upstream: {remote}/{branch}"))

    def _checkout(self, backend: VersionControlBackend, record: StepRecorder, base: str) -> None:
        branch = self._config.branch
        remote = self._config.remote
        if backend.current_branch() == branch:
            record(StepResult(step="checkout", status=StepStatus.UNCHANGED, message=f"Already on branch: {branch}"))
            return

        location = locate_branch(backend, remote, branch)
        if location is BranchLocation.LOCAL:
            backend.switch_to(branch)
            record(StepResult(step="checkout", message=f"Checked out local: {branch}"))
        elif location is BranchLocation.REMOTE:
            backend.create_and_switch(branch, tracking=f"{remote}/{branch}")
            record(StepResult(step="checkout", message=f"Checked out and tracking: {remote}/{branch}"))
        else:
            record(
                StepResult(
                    step="checkout",
                    status=StepStatus.NOT_FOUND,
                    message=f"Branch not found locally or on {remote}: {branch}",
                )
            )
