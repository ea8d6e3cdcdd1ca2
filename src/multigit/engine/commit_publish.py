from __future__ import annotations

import logging

from multigit.engine.resolver import (
    BranchLocation,
    locate_branch,
    position_on_branch,
    resolve_default_branch,
)
from multigit.models.operation import CommitPublishConfig
from multigit.models.outcome import StepRecorder, StepResult, StepStatus
from multigit.workspace.backend import VersionControlBackend
from multigit.workspace.git_ops import GitError
from multigit.workspace.guard import RepositorySkipped

logger = logging.getLogger(__name__)


def ensure_branch(backend: VersionControlBackend, remote: str, branch: str) -> StepResult:
    """Get onto ``branch``, creating it from the resolved base if it exists nowhere."""
    if backend.current_branch() == branch:
        return StepResult(step="branch", status=StepStatus.UNCHANGED, message=f"Already on branch: {branch}")

    location = locate_branch(backend, remote, branch)
    if location is BranchLocation.LOCAL:
        backend.switch_to(branch)
        return StepResult(step="branch", message=f"Switched to local: {branch}")
    if location is BranchLocation.REMOTE:
        backend.create_and_switch(branch, tracking=f"{remote}/{branch}")
        return StepResult(step="branch", message=f"Tracking {remote}/{branch}")

    base = resolve_default_branch(backend, remote)
    position_on_branch(backend, remote, base.name)
    backend.create_and_switch(branch)
    return StepResult(step="branch", message=f"Created branch: {branch} (from {base.describe()})")


class CommitPublishWorkflow:
    """Stage, commit and push one branch in a single repository.

    Staging only happens once the branch is settled, so nothing is ever
    staged on the wrong branch. The push runs even when there was nothing to
    commit, which publishes freshly created branches.
    """

    def __init__(self, config: CommitPublishConfig) -> None:
        self._config = config

    def execute(self, backend: VersionControlBackend, record: StepRecorder) -> None:
        config = self._config
        remote = config.remote

        if not backend.has_remote(remote):
            raise RepositorySkipped(f"no remote '{remote}'")

        try:
            backend.fetch(remote, prune=True)
            record(StepResult(step="fetch", message=f"Fetched {remote}"))
        except GitError as e:
            logger.debug("Fetch of '%s' failed in %s: %s", remote, backend.root, e.stderr)
            record(StepResult(step="fetch", status=StepStatus.WARNING, message=f"Fetch of {remote} failed, using local refs"))

        record(ensure_branch(backend, remote, config.branch))

        backend.stage(list(config.selectors))
        if backend.has_staged_changes():
            sha = backend.commit(config.message)
            record(StepResult(step="commit", message=f"Committed {sha[:8]}"))
        else:
            record(StepResult(step="commit", status=StepStatus.NOTHING_TO_COMMIT, message="Nothing staged, skip commit"))

        backend.push_set_upstream(remote, config.branch)
        record(StepResult(step="push", message=f"Pushed: {remote}/{config.branch}"))
