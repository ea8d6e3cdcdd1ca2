from pathlib import Path

import pytest

from multigit.workspace.git_ops import (
    GitError,
    add,
    branch_delete,
    clean_untracked,
    commit,
    create_branch,
    current_branch,
    git_succeeds,
    has_staged_changes,
    ref_exists,
    reset_hard,
    rev_parse,
    run_git,
    status,
    switch,
    symbolic_ref,
)


class TestRunGit:
    def test_returns_stdout(self, git_repo: Path) -> None:
        output = run_git("rev-parse", "--is-inside-work-tree", cwd=git_repo)
        assert output == "true"

    def test_raises_git_error_on_failure(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(GitError) as exc_info:
            run_git("log", cwd=empty)
        assert exc_info.value.returncode != 0
        assert exc_info.value.command[0] == "git"

    def test_git_succeeds_reports_exit_status(self, git_repo: Path) -> None:
        assert git_succeeds("rev-parse", "HEAD", cwd=git_repo)
        assert not git_succeeds("rev-parse", "no-such-ref-xyz", cwd=git_repo)


class TestRevParse:
    def test_resolves_head(self, git_repo: Path) -> None:
        sha = rev_parse("HEAD", cwd=git_repo)
        assert len(sha) == 40
        assert all(c in "0123456789abcdef" for c in sha)

    def test_bad_ref_raises(self, git_repo: Path) -> None:
        with pytest.raises(GitError):
            rev_parse("nonexistent-ref-abc123", cwd=git_repo)


class TestCurrentBranch:
    def test_returns_branch_name(self, git_repo: Path) -> None:
        assert current_branch(cwd=git_repo) == "main"


class TestCreateBranchAndSwitch:
    def test_create_branch(self, git_repo: Path) -> None:
        create_branch("feature/test", cwd=git_repo)
        assert current_branch(cwd=git_repo) == "feature/test"

    def test_switch_existing_branch(self, git_repo: Path) -> None:
        create_branch("new-branch", cwd=git_repo)
        assert current_branch(cwd=git_repo) == "new-branch"
        switch("main", cwd=git_repo)
        assert current_branch(cwd=git_repo) == "main"

    def test_create_existing_branch_raises(self, git_repo: Path) -> None:
        with pytest.raises(GitError):
            create_branch("main", cwd=git_repo)

    def test_create_tracking_branch(self, clone: Path, bare_remote: Path) -> None:
        run_git("push", "origin", "main:feature/remote-only", cwd=clone)
        run_git("fetch", "origin", cwd=clone)
        create_branch("feature/remote-only", track="origin/feature/remote-only", cwd=clone)
        assert current_branch(cwd=clone) == "feature/remote-only"
        upstream = run_git("rev-parse", "--abbrev-ref", "@{upstream}", cwd=clone)
        assert upstream == "origin/feature/remote-only"


class TestRefs:
    def test_ref_exists(self, git_repo: Path) -> None:
        assert ref_exists("refs/heads/main", cwd=git_repo)
        assert not ref_exists("refs/heads/master", cwd=git_repo)

    def test_symbolic_ref_of_head(self, git_repo: Path) -> None:
        assert symbolic_ref("HEAD", cwd=git_repo) == "refs/heads/main"

    def test_symbolic_ref_missing_returns_none(self, git_repo: Path) -> None:
        assert symbolic_ref("refs/remotes/origin/HEAD", cwd=git_repo) is None


class TestBranchDelete:
    def test_force_delete_unmerged_branch(self, git_repo: Path) -> None:
        create_branch("doomed", cwd=git_repo)
        (git_repo / "doomed.txt").write_text("x\n")
        add(["doomed.txt"], cwd=git_repo)
        commit("unmerged work", cwd=git_repo)
        switch("main", cwd=git_repo)

        branch_delete("doomed", cwd=git_repo)
        assert not ref_exists("refs/heads/doomed", cwd=git_repo)

    def test_safe_delete_refuses_unmerged_branch(self, git_repo: Path) -> None:
        create_branch("keep", cwd=git_repo)
        (git_repo / "keep.txt").write_text("x\n")
        add(["keep.txt"], cwd=git_repo)
        commit("unmerged work", cwd=git_repo)
        switch("main", cwd=git_repo)

        with pytest.raises(GitError):
            branch_delete("keep", force=False, cwd=git_repo)


class TestAddAndCommit:
    def test_add_and_commit(self, git_repo: Path) -> None:
        (git_repo / "new_file.py").write_text("print('hello')\n")
        add(["new_file.py"], cwd=git_repo)
        sha = commit("Add new file", cwd=git_repo)
        assert len(sha) == 40
        assert run_git("log", "-n1", "--format=%s", cwd=git_repo) == "Add new file"

    def test_add_passes_options_through(self, git_repo: Path) -> None:
        (git_repo / "a.txt").write_text("a\n")
        (git_repo / "b.txt").write_text("b\n")
        add(["-A"], cwd=git_repo)
        staged = run_git("diff", "--cached", "--name-only", cwd=git_repo).splitlines()
        assert sorted(staged) == ["a.txt", "b.txt"]

    def test_add_empty_list_is_noop(self, git_repo: Path) -> None:
        add([], cwd=git_repo)
        assert not has_staged_changes(cwd=git_repo)

    def test_has_staged_changes(self, git_repo: Path) -> None:
        assert not has_staged_changes(cwd=git_repo)
        (git_repo / "README.md").write_text("# Changed\n")
        assert not has_staged_changes(cwd=git_repo)
        add(["README.md"], cwd=git_repo)
        assert has_staged_changes(cwd=git_repo)


class TestStatus:
    def test_clean_repo(self, git_repo: Path) -> None:
        assert status(cwd=git_repo) == []

    def test_untracked_file(self, git_repo: Path) -> None:
        (git_repo / "untracked.txt").write_text("x\n")
        assert status(cwd=git_repo) == ["?? untracked.txt"]

    def test_unstaged_modification_keeps_leading_space(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# Changed\n")
        assert status(cwd=git_repo) == [" M README.md"]


class TestResetAndClean:
    def test_discards_modifications_and_untracked(self, git_repo: Path) -> None:
        (git_repo / "README.md").write_text("# Changed\n")
        (git_repo / "scratch").mkdir()
        (git_repo / "scratch" / "junk.txt").write_text("junk\n")

        reset_hard(cwd=git_repo)
        clean_untracked(cwd=git_repo)

        assert status(cwd=git_repo) == []
        assert (git_repo / "README.md").read_text() == "# Hello\n"
        assert not (git_repo / "scratch").exists()
