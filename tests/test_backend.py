from collections.abc import Callable
from pathlib import Path

import pytest

from multigit.workspace.backend import GitBackend, VersionControlBackend, WorkingTreeStatus
from multigit.workspace.git_ops import GitError, rev_parse, run_git


class TestWorkingTreeStatus:
    @pytest.mark.parametrize(
        "lines, expected",
        [
            ([], WorkingTreeStatus()),
            ([" M a.py"], WorkingTreeStatus(has_unstaged=True)),
            (["M  a.py"], WorkingTreeStatus(has_staged=True)),
            (["MM a.py"], WorkingTreeStatus(has_unstaged=True, has_staged=True)),
            (["A  new.py"], WorkingTreeStatus(has_staged=True)),
            (["?? junk.txt"], WorkingTreeStatus(has_untracked=True)),
            ([" D gone.py", "?? junk.txt"], WorkingTreeStatus(has_unstaged=True, has_untracked=True)),
        ],
    )
    def test_from_porcelain(self, lines: list[str], expected: WorkingTreeStatus) -> None:
        assert WorkingTreeStatus.from_porcelain(lines) == expected

    def test_is_dirty(self) -> None:
        assert not WorkingTreeStatus().is_dirty
        assert WorkingTreeStatus(has_untracked=True).is_dirty


class TestGitBackend:
    def test_satisfies_protocol(self, git_repo: Path) -> None:
        assert isinstance(GitBackend(git_repo), VersionControlBackend)

    def test_current_branch(self, git_repo: Path) -> None:
        assert GitBackend(git_repo).current_branch() == "main"

    def test_local_and_remote_branch_exists(self, clone: Path) -> None:
        backend = GitBackend(clone)
        assert backend.local_branch_exists("main")
        assert not backend.local_branch_exists("master")
        assert backend.remote_branch_exists("origin", "main")
        assert not backend.remote_branch_exists("origin", "master")

    def test_remote_head_exists_matches_exactly(self, clone: Path) -> None:
        backend = GitBackend(clone)
        run_git("push", "origin", "main:team/feature", cwd=clone)
        assert backend.remote_head_exists("origin", "team/feature")
        # ls-remote pattern "feature" also matches ".../feature"; only exact heads count.
        assert not backend.remote_head_exists("origin", "feature")

    def test_has_remote(self, clone: Path, git_repo: Path) -> None:
        assert GitBackend(clone).has_remote("origin")
        assert not GitBackend(git_repo).has_remote("origin")

    def test_symbolic_default_head(self, clone: Path) -> None:
        assert GitBackend(clone).symbolic_default_head("origin") == "main"

    def test_symbolic_default_head_keeps_slashes(self, clone: Path) -> None:
        run_git("push", "origin", "main:release/v1", cwd=clone)
        run_git("fetch", "origin", cwd=clone)
        run_git("symbolic-ref", "refs/remotes/origin/HEAD", "refs/remotes/origin/release/v1", cwd=clone)
        assert GitBackend(clone).symbolic_default_head("origin") == "release/v1"

    def test_symbolic_default_head_missing(self, git_repo: Path) -> None:
        assert GitBackend(git_repo).symbolic_default_head("origin") is None

    def test_create_switch_and_delete(self, clone: Path) -> None:
        backend = GitBackend(clone)
        backend.create_and_switch("topic")
        assert backend.current_branch() == "topic"
        backend.switch_to("main")
        backend.delete_local("topic")
        assert not backend.local_branch_exists("topic")

    def test_push_set_upstream_and_delete_remote(self, clone: Path) -> None:
        backend = GitBackend(clone)
        backend.create_and_switch("topic")
        backend.push_set_upstream("origin", "topic")
        assert backend.remote_head_exists("origin", "topic")
        assert run_git("config", "branch.topic.merge", cwd=clone) == "refs/heads/topic"

        backend.delete_remote("origin", "topic")
        assert not backend.remote_head_exists("origin", "topic")

    def test_pull_fast_forward_only_reports_failure(self, make_clone: Callable[[str], Path]) -> None:
        first = make_clone("first")
        second = make_clone("second")
        for repo, name in ((first, "a.txt"), (second, "b.txt")):
            (repo / name).write_text("x\n")
            run_git("add", name, cwd=repo)
            run_git("commit", "-m", f"add {name}", cwd=repo)
        run_git("push", "origin", "main", cwd=first)

        before = rev_parse("HEAD", cwd=second)
        assert GitBackend(second).pull_fast_forward_only("origin", "main") is False
        assert rev_parse("HEAD", cwd=second) == before

    def test_pull_fast_forward_only_succeeds(self, clone: Path) -> None:
        assert GitBackend(clone).pull_fast_forward_only("origin", "main") is True

    def test_working_tree_status(self, git_repo: Path) -> None:
        backend = GitBackend(git_repo)
        assert not backend.working_tree_status().is_dirty

        (git_repo / "README.md").write_text("# Changed\n")
        assert backend.working_tree_status() == WorkingTreeStatus(has_unstaged=True)

    def test_reset_hard_and_clean_untracked(self, git_repo: Path) -> None:
        backend = GitBackend(git_repo)
        (git_repo / "README.md").write_text("# Changed\n")
        (git_repo / "junk.txt").write_text("junk\n")

        backend.reset_hard_and_clean_untracked()

        assert not backend.working_tree_status().is_dirty
        assert not (git_repo / "junk.txt").exists()

    def test_stage_and_commit(self, git_repo: Path) -> None:
        backend = GitBackend(git_repo)
        (git_repo / "notes.txt").write_text("notes\n")
        backend.stage(["notes.txt"])
        assert backend.has_staged_changes()
        sha = backend.commit("Add notes")
        assert sha == rev_parse("HEAD", cwd=git_repo)
        assert not backend.has_staged_changes()

    def test_errors_surface_as_git_error(self, git_repo: Path) -> None:
        with pytest.raises(GitError):
            GitBackend(git_repo).switch_to("does-not-exist")
