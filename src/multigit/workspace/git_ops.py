from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git command failed ({returncode}): {' '.join(command)}\n{stderr}")


def _run(cmd: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    logger.debug("%s (in %s)", " ".join(cmd), cwd)
    return subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
    )


def run_git(*args: str, cwd: Path) -> str:
    cmd = ["git", *args]
    result = _run(cmd, cwd)
    if result.returncode != 0:
        raise GitError(cmd, result.returncode, result.stderr.strip())
    return result.stdout.strip()


def git_succeeds(*args: str, cwd: Path) -> bool:
    """Run a query-style git command and report whether it exited 0."""
    return _run(["git", *args], cwd).returncode == 0


def rev_parse(ref: str, *, cwd: Path) -> str:
    return run_git("rev-parse", ref, cwd=cwd)


def current_branch(*, cwd: Path) -> str:
    return run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)


def ref_exists(ref: str, *, cwd: Path) -> bool:
    return git_succeeds("show-ref", "--verify", "--quiet", ref, cwd=cwd)


def symbolic_ref(ref: str, *, cwd: Path) -> str | None:
    result = _run(["git", "symbolic-ref", "-q", ref], cwd)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def switch(name: str, *, cwd: Path) -> None:
    run_git("switch", name, cwd=cwd)


def create_branch(name: str, *, track: str | None = None, cwd: Path) -> None:
    args = ["switch", "-c", name]
    if track:
        args.extend(["--track", track])
    run_git(*args, cwd=cwd)


def branch_delete(name: str, *, force: bool = True, cwd: Path) -> None:
    run_git("branch", "-D" if force else "-d", name, cwd=cwd)


def remote_url(remote: str, *, cwd: Path) -> str | None:
    result = _run(["git", "remote", "get-url", remote], cwd)
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def fetch(remote: str, *, prune: bool = True, cwd: Path) -> None:
    args = ["fetch", remote]
    if prune:
        args.append("--prune")
    run_git(*args, cwd=cwd)


def fetch_all(*, prune: bool = True, cwd: Path) -> None:
    args = ["fetch", "--all"]
    if prune:
        args.append("--prune")
    run_git(*args, cwd=cwd)


def ls_remote_heads(remote: str, name: str, *, cwd: Path) -> list[str]:
    output = run_git("ls-remote", "--heads", remote, name, cwd=cwd)
    refs = []
    for line in output.splitlines():
        _, _, ref = line.partition("\t")
        if ref:
            refs.append(ref.strip())
    return refs


def push(remote: str, branch: str, *, set_upstream: bool = False, cwd: Path) -> None:
    args = ["push"]
    if set_upstream:
        args.append("-u")
    args.extend([remote, branch])
    run_git(*args, cwd=cwd)


def push_delete(remote: str, branch: str, *, cwd: Path) -> None:
    run_git("push", remote, "--delete", branch, cwd=cwd)


def pull_ff_only(remote: str, branch: str, *, cwd: Path) -> None:
    run_git("pull", "--ff-only", remote, branch, cwd=cwd)


def add(selectors: list[str], *, cwd: Path) -> None:
    if not selectors:
        return
    run_git("add", *selectors, cwd=cwd)


def has_staged_changes(*, cwd: Path) -> bool:
    # diff --quiet exits 1 when the index differs from HEAD
    return not git_succeeds("diff", "--cached", "--quiet", cwd=cwd)


def commit(message: str, *, cwd: Path) -> str:
    run_git("commit", "-m", message, cwd=cwd)
    return rev_parse("HEAD", cwd=cwd)


def status(*, cwd: Path) -> list[str]:
    cmd = ["git", "status", "--porcelain"]
    result = _run(cmd, cwd)
    if result.returncode != 0:
        raise GitError(cmd, result.returncode, result.stderr.strip())
    # The two status columns are significant, so leading spaces must survive.
    return [line for line in result.stdout.splitlines() if line.strip()]


def reset_hard(*, cwd: Path) -> None:
    run_git("reset", "--hard", cwd=cwd)


def clean_untracked(*, cwd: Path) -> None:
    run_git("clean", "-fd", cwd=cwd)
