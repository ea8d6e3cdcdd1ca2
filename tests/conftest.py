from collections.abc import Callable
from pathlib import Path

import pytest

from multigit.workspace.git_ops import run_git


def _configure_identity(repo: Path) -> None:
    run_git("config", "user.email", "test@test.com", cwd=repo)
    run_git("config", "user.name", "Test", cwd=repo)
    run_git("config", "commit.gpgsign", "false", cwd=repo)


@pytest.fixture()
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repo on ``main`` with an initial commit."""
    repo = tmp_path / "source"
    repo.mkdir()
    run_git("init", cwd=repo)
    run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=repo)
    _configure_identity(repo)
    (repo / "README.md").write_text("# Hello\n")
    run_git("add", "README.md", cwd=repo)
    run_git("commit", "-m", "Initial commit", cwd=repo)
    return repo


@pytest.fixture()
def bare_remote(tmp_path: Path, git_repo: Path) -> Path:
    """Create a bare remote whose default head is ``main``."""
    bare = tmp_path / "remote.git"
    run_git("clone", "--bare", str(git_repo), str(bare), cwd=tmp_path)
    return bare


@pytest.fixture()
def make_clone(tmp_path: Path, bare_remote: Path) -> Callable[[str], Path]:
    """Return a factory producing working clones of ``bare_remote``."""

    def _make(name: str) -> Path:
        target = tmp_path / name
        run_git("clone", str(bare_remote), str(target), cwd=tmp_path)
        _configure_identity(target)
        return target

    return _make


@pytest.fixture()
def clone(make_clone: Callable[[str], Path]) -> Path:
    return make_clone("work")


@pytest.fixture()
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory with no multigit config or env overrides."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.delenv("MULTIGIT_REMOTE", raising=False)
    return cwd
