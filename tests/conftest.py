"""Pytest fixtures for git-tree-manager tests"""
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from tree_manager.exceptions import BranchExistsError, GitOperationError, ListFailedError
from tree_manager.services.git.client import VcsClient
from tree_manager.services.hook_service import HookService


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'remote_name': 'origin',
        'bare_dir': '.bare',
        'hook_file': 'post-hook.json',
        'default_branch_candidates': ['main', 'master', 'develop', 'dev'],
        'github_token': None,
        'verbose': False,
        'debug': False,
    }


def _configure_user(repo):
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def commit_file(repo, name, content, message):
    """Write a file in a non-bare repo and commit it."""
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def origin_repo(temp_dir):
    """A regular repository acting as the remote, with main and feature-x branches.

    The directory ends in .git so it can be passed to `tm clone` like a URL.
    """
    repo_path = temp_dir / "remotes" / "project.git"
    repo_path.mkdir(parents=True)

    repo = git.Repo.init(repo_path)
    _configure_user(repo)
    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    repo.git.checkout('-b', 'feature-x')
    commit_file(repo, "feature.txt", "Feature content\n", "Add feature")
    repo.git.checkout('main')

    yield repo

    repo.close()


@pytest.fixture
def workspace(temp_dir):
    """Empty directory that clones are created in."""
    path = temp_dir / "work"
    path.mkdir()
    return path


@pytest.fixture
def quiet_hooks():
    """HookService whose executor records commands instead of running them."""
    executed = []

    def executor(command, cwd):
        executed.append((command, cwd))
        return 0

    service = HookService(executor=executor)
    service.executed = executed
    return service


@pytest.fixture
def managed_repo(origin_repo, workspace, mock_config, quiet_hooks):
    """A repository cloned into the worktree layout by TreeManager."""
    from tree_manager.core import TreeManager

    manager = TreeManager(mock_config, workspace, hooks=quiet_hooks)
    manager.clone(origin_repo.working_dir)
    return workspace / "project"


class FakeVcsClient(VcsClient):
    """In-memory VcsClient.

    Worktrees are real directories so existence checks behave as with git.
    `fail` maps a method name to the exception it raises; `fail_for` maps
    (method name, path) to an exception for a single worktree.
    """

    def __init__(self):
        self.worktrees = []  # (path, branch) in registration order
        self.local = []
        self.remote = []
        self.remote_head = None
        self.dirty = {}
        self.upstreams = {}  # path -> (ahead, behind)
        self.fail = {}
        self.fail_for = {}
        self.calls = []

    def _call(self, name, *args):
        self.calls.append((name,) + tuple(str(a) for a in args))
        if name in self.fail:
            raise self.fail[name]
        if args and (name, str(args[-1])) in self.fail_for:
            raise self.fail_for[(name, str(args[-1]))]

    def called(self, name):
        return [call for call in self.calls if call[0] == name]

    def register(self, path, branch, create=True):
        """Register a worktree as if created earlier."""
        if create:
            Path(path).mkdir(parents=True, exist_ok=True)
        self.worktrees.append((str(path), branch))
        if branch not in self.local:
            self.local.append(branch)

    def clone_bare(self, url, bare_path, remote="origin"):
        self._call("clone_bare", url, bare_path)
        Path(bare_path).mkdir(parents=True, exist_ok=True)

    def list_worktrees_raw(self, bare_path):
        if "list_worktrees_raw" in self.fail:
            raise self.fail["list_worktrees_raw"]
        lines = [f"worktree {bare_path}", "bare", ""]
        for path, branch in self.worktrees:
            lines.append(f"worktree {path}")
            lines.append("HEAD 0123456789abcdef0123456789abcdef01234567")
            if branch is None:
                lines.append("detached")
            else:
                lines.append(f"branch refs/heads/{branch}")
            lines.append("")
        return "\n".join(lines)

    def add_worktree(self, bare_path, worktree_path, branch):
        self._call("add_worktree", bare_path, branch, worktree_path)
        Path(worktree_path).mkdir(parents=True)
        self.worktrees.append((str(worktree_path), branch))

    def remove_worktree(self, bare_path, worktree_path):
        self._call("remove_worktree", bare_path, worktree_path)
        self.worktrees = [wt for wt in self.worktrees if wt[0] != str(worktree_path)]
        shutil.rmtree(str(worktree_path), ignore_errors=True)

    def create_branch(self, bare_path, branch):
        self._call("create_branch", bare_path, branch)
        if branch in self.local:
            raise BranchExistsError(branch, f"a branch named '{branch}' already exists")
        self.local.append(branch)

    def create_tracking_branch(self, bare_path, branch, upstream):
        self._call("create_tracking_branch", bare_path, upstream, branch)
        self.local.append(branch)

    def set_upstream(self, bare_path, branch, upstream):
        self._call("set_upstream", bare_path, upstream, branch)

    def delete_branch(self, bare_path, branch):
        self._call("delete_branch", bare_path, branch)
        self.local.remove(branch)

    def local_branches(self, bare_path):
        self._call("local_branches", bare_path)
        return list(self.local)

    def remote_branches(self, bare_path, remote="origin"):
        self._call("remote_branches", bare_path)
        return list(self.remote)

    def default_remote_branch(self, bare_path, remote="origin"):
        self._call("default_remote_branch", bare_path)
        return self.remote_head

    def fetch(self, bare_path, remote="origin"):
        self._call("fetch", bare_path)

    def status(self, worktree_path):
        self._call("status", worktree_path)
        if not Path(worktree_path).is_dir():
            raise GitOperationError("status", message=f"cannot change to '{worktree_path}'")
        return self.dirty.get(str(worktree_path), 0)

    def upstream(self, worktree_path):
        self._call("upstream", worktree_path)
        return "origin/x" if str(worktree_path) in self.upstreams else None

    def ahead_behind(self, worktree_path):
        self._call("ahead_behind", worktree_path)
        return self.upstreams[str(worktree_path)]

    def pull_ff(self, worktree_path):
        self._call("pull_ff", worktree_path)
        return "Already up to date."


@pytest.fixture
def fake_client():
    """Create an in-memory VcsClient."""
    return FakeVcsClient()


@pytest.fixture
def fake_layout(temp_dir):
    """A managed repository root with an empty bare store directory."""
    root = temp_dir / "repo"
    (root / ".bare").mkdir(parents=True)
    return root


@pytest.fixture
def mock_display():
    """Create a mock DisplayService."""
    from tree_manager.services.display_service import DisplayService

    return Mock(spec=DisplayService)


@pytest.fixture
def fake_manager(mock_config, fake_client, fake_layout, quiet_hooks, mock_display):
    """TreeManager over the fake client, invoked from the repository root."""
    from tree_manager.core import TreeManager

    return TreeManager(
        mock_config,
        fake_layout,
        client=fake_client,
        github=Mock(),
        hooks=quiet_hooks,
        display=mock_display,
    )


@pytest.fixture
def list_failed():
    return ListFailedError("fatal: not a git repository")
