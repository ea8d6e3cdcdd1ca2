from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from multigit.models.outcome import ExecutionOutcome
from multigit.workspace.backend import GitBackend, VersionControlBackend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[Path], VersionControlBackend]

NOT_ABSOLUTE = "not an absolute path"
NO_SUCH_DIRECTORY = "no such directory"
NOT_A_REPOSITORY = "not a repository"
DIRTY_WORKTREE = "dirty working tree"


class RepositorySkipped(Exception):
    """A repository precondition failed; the repository is skipped, not failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


@dataclass(frozen=True)
class RepositoryEntry:
    path: Path
    backend: VersionControlBackend


class RepositoryGuard:
    """Decide whether a list entry is usable before anything touches it.

    Checks run in order and stop at the first failure: absolute path,
    existing directory, repository metadata, then working-tree cleanliness.
    With ``force_clean`` the cleanliness check is replaced by
    ``reset --hard`` plus ``clean -fd``, which destroys local work and cannot
    be undone. With ``require_clean=False`` the tree is left alone entirely.
    """

    def __init__(
        self,
        *,
        force_clean: bool = False,
        require_clean: bool = True,
        backend_factory: BackendFactory = GitBackend,
    ) -> None:
        self._force_clean = force_clean
        self._require_clean = require_clean
        self._backend_factory = backend_factory

    def check(self, raw_path: str) -> RepositoryEntry | ExecutionOutcome:
        path = Path(raw_path)
        if not path.is_absolute():
            return ExecutionOutcome.skipped(raw_path, NOT_ABSOLUTE)
        if not path.is_dir():
            return ExecutionOutcome.skipped(raw_path, NO_SUCH_DIRECTORY)
        if not (path / ".git").exists():
            return ExecutionOutcome.skipped(raw_path, NOT_A_REPOSITORY)

        backend = self._backend_factory(path)
        if self._force_clean:
            logger.info("Discarding local changes in %s", path)
            backend.reset_hard_and_clean_untracked()
        elif self._require_clean and backend.working_tree_status().is_dirty:
            return ExecutionOutcome.skipped(raw_path, DIRTY_WORKTREE)

        return RepositoryEntry(path=path, backend=backend)
