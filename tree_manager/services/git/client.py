"""Typed access to the git commands git-tree-manager needs.

VcsClient is the narrow interface the orchestration code talks to;
GitClient implements it with GitPython. Every failing git call surfaces as
a GitOperationError carrying git's own message.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

import git

from tree_manager.exceptions import BranchExistsError, GitOperationError, ListFailedError
from tree_manager.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def clean_stderr(error: git.exc.CommandError) -> str:
    """Extract git's message from a GitCommandError.

    GitPython decorates stderr as "\\n  stderr: '...'"; strip that so the
    message can be shown verbatim.
    """
    if isinstance(error, git.exc.GitCommandNotFound):
        return f"git could not be run: {error.status}"
    stderr = (error.stderr if hasattr(error, "stderr") else str(error)) or ""
    stderr = stderr.strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip()
    if len(stderr) >= 2 and stderr[0] == stderr[-1] == "'":
        stderr = stderr[1:-1].strip()
    if not stderr:
        status = error.status if hasattr(error, "status") else "unknown"
        return f"git exited with code {status}"
    return stderr


class VcsClient(ABC):
    """Interface to the version-control tool.

    Methods taking `bare_path` run against the shared bare store; methods
    taking `worktree_path` run inside one checked-out worktree.
    """

    @abstractmethod
    def clone_bare(self, url: str, bare_path: PathLike, remote: str = "origin") -> None:
        """Create a bare store at bare_path with remote-tracking branches fetched."""

    @abstractmethod
    def list_worktrees_raw(self, bare_path: PathLike) -> str:
        """Return the output of `git worktree list --porcelain`."""

    @abstractmethod
    def add_worktree(self, bare_path: PathLike, worktree_path: PathLike, branch: str) -> None:
        """Check out an existing local branch into a new worktree."""

    @abstractmethod
    def remove_worktree(self, bare_path: PathLike, worktree_path: PathLike) -> None:
        """Remove a worktree registration (and its directory if present)."""

    @abstractmethod
    def create_branch(self, bare_path: PathLike, branch: str) -> None:
        """Create a new local branch from the bare store's HEAD."""

    @abstractmethod
    def create_tracking_branch(self, bare_path: PathLike, branch: str, upstream: str) -> None:
        """Create a local branch tracking a remote-tracking branch."""

    @abstractmethod
    def set_upstream(self, bare_path: PathLike, branch: str, upstream: str) -> None:
        """Configure the upstream of an existing local branch."""

    @abstractmethod
    def delete_branch(self, bare_path: PathLike, branch: str) -> None:
        """Force-delete a local branch."""

    @abstractmethod
    def local_branches(self, bare_path: PathLike) -> List[str]:
        """Names of local branches."""

    @abstractmethod
    def remote_branches(self, bare_path: PathLike, remote: str = "origin") -> List[str]:
        """Names of remote-tracking branches of `remote`, without the remote prefix."""

    @abstractmethod
    def default_remote_branch(self, bare_path: PathLike, remote: str = "origin") -> Optional[str]:
        """Branch that refs/remotes/<remote>/HEAD points to, or None."""

    @abstractmethod
    def fetch(self, bare_path: PathLike, remote: str = "origin") -> None:
        """Fetch updates from the remote."""

    @abstractmethod
    def status(self, worktree_path: PathLike) -> int:
        """Number of modified, staged or untracked paths in a worktree."""

    @abstractmethod
    def upstream(self, worktree_path: PathLike) -> Optional[str]:
        """Upstream of the worktree's branch, or None when none is configured."""

    @abstractmethod
    def ahead_behind(self, worktree_path: PathLike) -> Tuple[int, int]:
        """Commits (ahead, behind) relative to the configured upstream."""

    @abstractmethod
    def pull_ff(self, worktree_path: PathLike) -> str:
        """Fast-forward the worktree's branch from its upstream."""


class GitClient(VcsClient):
    """VcsClient backed by GitPython."""

    def _get_repo(self, bare_path: PathLike) -> git.Repo:
        """Open the bare store.

        A fresh repo instance is created per call; GitPython repos are
        lightweight and only read the git directory.
        """
        try:
            return git.Repo(str(bare_path))
        except (git.exc.NoSuchPathError, git.exc.InvalidGitRepositoryError) as e:
            raise GitOperationError("open_repository", message=f"{bare_path} is not a git repository ({e})")

    def _in_worktree(self, worktree_path: PathLike, *args: str) -> str:
        """Run a git command scoped to a worktree with `git -C <path>`."""
        return git.Git().execute(["git", "-C", str(worktree_path), *args])

    def clone_bare(self, url: str, bare_path: PathLike, remote: str = "origin") -> None:
        logger.debug(f"Cloning {url} into bare store {bare_path}")
        try:
            repo = git.Repo.clone_from(url, str(bare_path), bare=True, origin=remote)
            # A bare clone has no remote-tracking refs; add them so upstreams and
            # sync work like in a regular clone
            repo.git.config(f"remote.{remote}.fetch", f"+refs/heads/*:refs/remotes/{remote}/*")
            repo.git.fetch(remote)
        except git.exc.CommandError as e:
            raise GitOperationError("clone", message=clean_stderr(e))

        try:
            repo.git.remote("set-head", remote, "--auto")
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not record {remote}/HEAD: {clean_stderr(e)}")

    def list_worktrees_raw(self, bare_path: PathLike) -> str:
        try:
            repo = self._get_repo(bare_path)
            return repo.git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            raise ListFailedError(clean_stderr(e))
        except GitOperationError as e:
            raise ListFailedError(e.message)

    def add_worktree(self, bare_path: PathLike, worktree_path: PathLike, branch: str) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.worktree("add", str(worktree_path), branch)
            logger.info(f"Added worktree for {branch} at {worktree_path}")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree_add", branch, clean_stderr(e))

    def remove_worktree(self, bare_path: PathLike, worktree_path: PathLike) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.worktree("remove", str(worktree_path))
            logger.info(f"Removed worktree at {worktree_path}")
        except git.exc.GitCommandError as e:
            raise GitOperationError("worktree_remove", message=clean_stderr(e))

    def create_branch(self, bare_path: PathLike, branch: str) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.branch(branch)
        except git.exc.GitCommandError as e:
            message = clean_stderr(e)
            if "already exists" in message:
                raise BranchExistsError(branch, message)
            raise GitOperationError("create_branch", branch, message)

    def create_tracking_branch(self, bare_path: PathLike, branch: str, upstream: str) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.branch("--track", branch, upstream)
        except git.exc.GitCommandError as e:
            raise GitOperationError("create_tracking_branch", branch, clean_stderr(e))

    def set_upstream(self, bare_path: PathLike, branch: str, upstream: str) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.branch(f"--set-upstream-to={upstream}", branch)
        except git.exc.GitCommandError as e:
            raise GitOperationError("set_upstream", branch, clean_stderr(e))

    def delete_branch(self, bare_path: PathLike, branch: str) -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.branch("-D", branch)
            logger.info(f"Deleted branch {branch}")
        except git.exc.GitCommandError as e:
            raise GitOperationError("delete_branch", branch, clean_stderr(e))

    def local_branches(self, bare_path: PathLike) -> List[str]:
        return self._refs(bare_path, "refs/heads/")

    def remote_branches(self, bare_path: PathLike, remote: str = "origin") -> List[str]:
        return [name for name in self._refs(bare_path, f"refs/remotes/{remote}/") if name != "HEAD"]

    def _refs(self, bare_path: PathLike, prefix: str) -> List[str]:
        """Ref names under prefix, with the prefix stripped, in git's order."""
        repo = self._get_repo(bare_path)
        try:
            output = repo.git.for_each_ref("--format=%(refname)", prefix)
        except git.exc.GitCommandError as e:
            raise GitOperationError("list_branches", message=clean_stderr(e))
        return [line[len(prefix):] for line in output.splitlines() if line.startswith(prefix)]

    def default_remote_branch(self, bare_path: PathLike, remote: str = "origin") -> Optional[str]:
        repo = self._get_repo(bare_path)
        prefix = f"refs/remotes/{remote}/"
        try:
            ref = repo.git.symbolic_ref(f"{prefix}HEAD").strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"No symbolic {remote}/HEAD: {clean_stderr(e)}")
            return None
        if ref.startswith(prefix):
            ref = ref[len(prefix):]
        return ref or None

    def fetch(self, bare_path: PathLike, remote: str = "origin") -> None:
        repo = self._get_repo(bare_path)
        try:
            repo.git.fetch(remote)
        except git.exc.GitCommandError as e:
            raise GitOperationError("fetch", message=clean_stderr(e))

    def status(self, worktree_path: PathLike) -> int:
        try:
            output = self._in_worktree(worktree_path, "status", "--porcelain")
        except git.exc.GitCommandError as e:
            raise GitOperationError("status", message=clean_stderr(e))
        return sum(1 for line in output.splitlines() if line.strip())

    def upstream(self, worktree_path: PathLike) -> Optional[str]:
        try:
            output = self._in_worktree(worktree_path, "rev-parse", "--abbrev-ref", "@{upstream}")
        except git.exc.GitCommandError as e:
            logger.debug(f"No upstream for {worktree_path}: {clean_stderr(e)}")
            return None
        return output.strip() or None

    def ahead_behind(self, worktree_path: PathLike) -> Tuple[int, int]:
        try:
            output = self._in_worktree(
                worktree_path, "rev-list", "--left-right", "--count", "HEAD...@{upstream}"
            )
        except git.exc.GitCommandError as e:
            raise GitOperationError("ahead_behind", message=clean_stderr(e))
        parts = output.split()
        if len(parts) != 2:
            raise GitOperationError("ahead_behind", message=f"unexpected rev-list output: {output!r}")
        return int(parts[0]), int(parts[1])

    def pull_ff(self, worktree_path: PathLike) -> str:
        try:
            return self._in_worktree(worktree_path, "pull", "--ff-only")
        except git.exc.GitCommandError as e:
            raise GitOperationError("pull", message=clean_stderr(e))
