"""Tests for GitClient against real repositories"""
import shutil
from unittest.mock import Mock

import git
import pytest

from tree_manager.exceptions import BranchExistsError, GitOperationError, ListFailedError
from tree_manager.services.git.client import GitClient, clean_stderr


@pytest.fixture
def client():
    return GitClient()


@pytest.fixture
def bare_store(client, origin_repo, temp_dir):
    """Bare clone of origin_repo at <temp>/repo/.bare."""
    bare_path = temp_dir / "repo" / ".bare"
    client.clone_bare(origin_repo.working_dir, bare_path)
    return bare_path


class TestCleanStderr:
    """Test extraction of git's message."""

    def test_strips_gitpython_decoration(self):
        error = git.exc.GitCommandError(["git", "branch", "main"], 128, b"fatal: a branch named 'main' already exists")
        assert clean_stderr(error) == "fatal: a branch named 'main' already exists"

    def test_empty_stderr_reports_status(self):
        error = Mock(stderr="", status=1)
        assert clean_stderr(error) == "git exited with code 1"


class TestCloneBare:
    """Test creating the bare store."""

    def test_creates_remote_tracking_branches(self, client, bare_store):
        assert git.Repo(str(bare_store)).bare
        assert client.remote_branches(bare_store) == ["feature-x", "main"]

    def test_local_branches(self, client, bare_store):
        assert sorted(client.local_branches(bare_store)) == ["feature-x", "main"]

    def test_records_remote_head(self, client, bare_store):
        assert client.default_remote_branch(bare_store) == "main"

    def test_bad_source(self, client, temp_dir):
        with pytest.raises(GitOperationError, match="clone"):
            client.clone_bare(str(temp_dir / "missing.git"), temp_dir / "x" / ".bare")

    def test_missing_git_executable(self, client, temp_dir, monkeypatch):
        def not_found(*args, **kwargs):
            raise git.exc.GitCommandNotFound("git", OSError(2, "No such file or directory"))

        monkeypatch.setattr(git.Repo, "clone_from", not_found)

        with pytest.raises(GitOperationError, match="git could not be run"):
            client.clone_bare("https://example.com/repo.git", temp_dir / "x" / ".bare")


class TestWorktreeCommands:
    """Test worktree listing, creation and removal."""

    def test_list_contains_bare_entry(self, client, bare_store):
        output = client.list_worktrees_raw(bare_store)
        assert f"worktree {bare_store}" in output
        assert "\nbare" in output

    def test_list_failure(self, client, temp_dir):
        with pytest.raises(ListFailedError):
            client.list_worktrees_raw(temp_dir)

    def test_add_and_remove(self, client, bare_store):
        path = bare_store.parent / "main"
        client.add_worktree(bare_store, path, "main")
        assert (path / "README.md").exists()
        assert f"worktree {path}" in client.list_worktrees_raw(bare_store)

        client.remove_worktree(bare_store, path)
        assert not path.exists()
        assert f"worktree {path}" not in client.list_worktrees_raw(bare_store)

    def test_remove_deleted_directory(self, client, bare_store):
        path = bare_store.parent / "feature-x"
        client.add_worktree(bare_store, path, "feature-x")
        shutil.rmtree(str(path))

        client.remove_worktree(bare_store, path)

        assert f"worktree {path}" not in client.list_worktrees_raw(bare_store)

    def test_add_unknown_branch(self, client, bare_store):
        with pytest.raises(GitOperationError):
            client.add_worktree(bare_store, bare_store.parent / "nope", "nope")


class TestBranchCommands:
    """Test branch creation and deletion."""

    def test_create_existing_branch(self, client, bare_store):
        with pytest.raises(BranchExistsError, match="already exists"):
            client.create_branch(bare_store, "main")

    def test_create_and_delete(self, client, bare_store):
        client.create_branch(bare_store, "topic")
        assert "topic" in client.local_branches(bare_store)

        client.delete_branch(bare_store, "topic")
        assert "topic" not in client.local_branches(bare_store)

    def test_delete_checked_out_branch_fails(self, client, bare_store):
        client.add_worktree(bare_store, bare_store.parent / "main", "main")
        with pytest.raises(GitOperationError):
            client.delete_branch(bare_store, "main")

    def test_tracking_branch(self, client, bare_store):
        client.delete_branch(bare_store, "feature-x")
        client.create_tracking_branch(bare_store, "feature-x", "origin/feature-x")
        path = bare_store.parent / "feature-x"
        client.add_worktree(bare_store, path, "feature-x")

        assert client.upstream(path) == "origin/feature-x"


class TestWorktreeStatus:
    """Test per-worktree status queries."""

    @pytest.fixture
    def main_worktree(self, client, bare_store):
        path = bare_store.parent / "main"
        client.add_worktree(bare_store, path, "main")
        return path

    def test_clean(self, client, main_worktree):
        assert client.status(main_worktree) == 0

    def test_dirty(self, client, main_worktree):
        (main_worktree / "README.md").write_text("changed\n")
        (main_worktree / "new.txt").write_text("new\n")
        assert client.status(main_worktree) == 2

    def test_missing_directory(self, client, temp_dir):
        with pytest.raises(GitOperationError):
            client.status(temp_dir / "gone")

    def test_no_upstream(self, client, main_worktree):
        assert client.upstream(main_worktree) is None

    def test_ahead_behind(self, client, bare_store, main_worktree, origin_repo):
        client.set_upstream(bare_store, "main", "origin/main")
        assert client.ahead_behind(main_worktree) == (0, 0)

        origin_repo.git.commit("--allow-empty", "-m", "Upstream change")
        client.fetch(bare_store)
        assert client.ahead_behind(main_worktree) == (0, 1)

        client.pull_ff(main_worktree)
        assert client.ahead_behind(main_worktree) == (0, 0)
