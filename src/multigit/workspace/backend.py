from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from multigit.workspace import git_ops
from multigit.workspace.git_ops import GitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkingTreeStatus:
    has_unstaged: bool = False
    has_staged: bool = False
    has_untracked: bool = False

    @property
    def is_dirty(self) -> bool:
        return self.has_unstaged or self.has_staged or self.has_untracked

    @classmethod
    def from_porcelain(cls, lines: list[str]) -> WorkingTreeStatus:
        """Classify ``git status --porcelain`` lines (``XY path``)."""
        staged = unstaged = untracked = False
        for line in lines:
            code = line[:2]
            if code == "??":
                untracked = True
                continue
            if code[0] not in (" ", "?"):
                staged = True
            if len(code) > 1 and code[1] not in (" ", "?"):
                unstaged = True
        return cls(has_unstaged=unstaged, has_staged=staged, has_untracked=untracked)


@runtime_checkable
class VersionControlBackend(Protocol):
    """Primitive operations the batch executors compose, bound to one repository."""

    root: Path

    def fetch(self, remote: str, prune: bool = True) -> None: ...

    def fetch_all(self, prune: bool = True) -> None: ...

    def current_branch(self) -> str: ...

    def local_branch_exists(self, name: str) -> bool: ...

    def remote_branch_exists(self, remote: str, name: str) -> bool: ...

    def remote_head_exists(self, remote: str, name: str) -> bool: ...

    def has_remote(self, remote: str) -> bool: ...

    def symbolic_default_head(self, remote: str) -> str | None: ...

    def switch_to(self, name: str) -> None: ...

    def create_and_switch(self, name: str, tracking: str | None = None) -> None: ...

    def delete_local(self, name: str, force: bool = True) -> None: ...

    def delete_remote(self, remote: str, name: str) -> None: ...

    def push_set_upstream(self, remote: str, name: str) -> None: ...

    def pull_fast_forward_only(self, remote: str, name: str) -> bool: ...

    def working_tree_status(self) -> WorkingTreeStatus: ...

    def reset_hard_and_clean_untracked(self) -> None: ...

    def stage(self, selectors: list[str]) -> None: ...

    def has_staged_changes(self) -> bool: ...

    def commit(self, message: str) -> str: ...


class GitBackend:
    """Scoped handle on a single checkout; every git call runs with ``cwd=root``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"GitBackend({str(self.root)!r})"

    def fetch(self, remote: str, prune: bool = True) -> None:
        git_ops.fetch(remote, prune=prune, cwd=self.root)

    def fetch_all(self, prune: bool = True) -> None:
        git_ops.fetch_all(prune=prune, cwd=self.root)

    def current_branch(self) -> str:
        try:
            return git_ops.current_branch(cwd=self.root)
        except GitError:
            # unborn HEAD (no commits yet)
            return ""

    def local_branch_exists(self, name: str) -> bool:
        return git_ops.ref_exists(f"refs/heads/{name}", cwd=self.root)

    def remote_branch_exists(self, remote: str, name: str) -> bool:
        return git_ops.ref_exists(f"refs/remotes/{remote}/{name}", cwd=self.root)

    def remote_head_exists(self, remote: str, name: str) -> bool:
        refs = git_ops.ls_remote_heads(remote, name, cwd=self.root)
        return f"refs/heads/{name}" in refs

    def has_remote(self, remote: str) -> bool:
        return git_ops.remote_url(remote, cwd=self.root) is not None

    def symbolic_default_head(self, remote: str) -> str | None:
        prefix = f"refs/remotes/{remote}/"
        target = git_ops.symbolic_ref(f"{prefix}HEAD", cwd=self.root)
        if target is None or not target.startswith(prefix):
            return None
        return target[len(prefix):] or None

    def switch_to(self, name: str) -> None:
        git_ops.switch(name, cwd=self.root)

    def create_and_switch(self, name: str, tracking: str | None = None) -> None:
        git_ops.create_branch(name, track=tracking, cwd=self.root)

    def delete_local(self, name: str, force: bool = True) -> None:
        git_ops.branch_delete(name, force=force, cwd=self.root)

    def delete_remote(self, remote: str, name: str) -> None:
        git_ops.push_delete(remote, name, cwd=self.root)

    def push_set_upstream(self, remote: str, name: str) -> None:
        git_ops.push(remote, name, set_upstream=True, cwd=self.root)

    def pull_fast_forward_only(self, remote: str, name: str) -> bool:
        try:
            git_ops.pull_ff_only(remote, name, cwd=self.root)
        except GitError as e:
            logger.debug("Fast-forward pull of %s/%s failed in %s: %s", remote, name, self.root, e.stderr)
            return False
        return True

    def working_tree_status(self) -> WorkingTreeStatus:
        return WorkingTreeStatus.from_porcelain(git_ops.status(cwd=self.root))

    def reset_hard_and_clean_untracked(self) -> None:
        """Discard every local modification and untracked file. Irreversible."""
        git_ops.reset_hard(cwd=self.root)
        git_ops.clean_untracked(cwd=self.root)

    def stage(self, selectors: list[str]) -> None:
        git_ops.add(selectors, cwd=self.root)

    def has_staged_changes(self) -> bool:
        return git_ops.has_staged_changes(cwd=self.root)

    def commit(self, message: str) -> str:
        return git_ops.commit(message, cwd=self.root)
