from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from multigit.workspace.backend import VersionControlBackend

DEFAULT_BRANCH_CANDIDATES = ("master", "main")
FALLBACK_BRANCH = "master"


class BranchLocation(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    NOT_FOUND = "not-found"


class BaseSource(str, Enum):
    REMOTE_HEAD = "remote-head"
    LOCAL = "local"
    REMOTE = "remote"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolvedBase:
    name: str
    source: BaseSource

    def describe(self) -> str:
        return f"{self.name} ({self.source.value})"


def locate_branch(backend: VersionControlBackend, remote: str, name: str) -> BranchLocation:
    """Find ``name`` locally first, then as a remote-tracking branch."""
    if backend.local_branch_exists(name):
        return BranchLocation.LOCAL
    if backend.remote_branch_exists(remote, name):
        return BranchLocation.REMOTE
    return BranchLocation.NOT_FOUND


def resolve_default_branch(backend: VersionControlBackend, remote: str) -> ResolvedBase:
    """Pick the base branch of a repository, first match wins.

    Order: the remote's symbolic HEAD, local ``master``, local ``main``,
    ``<remote>/master``, ``<remote>/main``, then the literal ``master``
    (which may not exist at all).
    """
    head = backend.symbolic_default_head(remote)
    if head:
        return ResolvedBase(head, BaseSource.REMOTE_HEAD)

    for candidate in DEFAULT_BRANCH_CANDIDATES:
        if backend.local_branch_exists(candidate):
            return ResolvedBase(candidate, BaseSource.LOCAL)

    for candidate in DEFAULT_BRANCH_CANDIDATES:
        if backend.remote_branch_exists(remote, candidate):
            return ResolvedBase(candidate, BaseSource.REMOTE)

    return ResolvedBase(FALLBACK_BRANCH, BaseSource.FALLBACK)


def position_on_branch(backend: VersionControlBackend, remote: str, name: str) -> BranchLocation:
    """Move onto ``name``: switch, track the remote branch, or create it here."""
    location = locate_branch(backend, remote, name)
    if location is BranchLocation.LOCAL:
        backend.switch_to(name)
    elif location is BranchLocation.REMOTE:
        backend.create_and_switch(name, tracking=f"{remote}/{name}")
    else:
        backend.create_and_switch(name)
    return location
