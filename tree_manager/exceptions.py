"""Custom exceptions for git-tree-manager"""

from typing import List, Optional


class TreeManagerError(Exception):
    """Base exception for all git-tree-manager errors."""

    guidance: List[str] = []


class UserInputError(TreeManagerError):
    """Exception raised for malformed command input."""
    pass


class InvalidRepoFormatError(UserInputError):
    """Exception raised when a clone source is neither a URL nor owner/repo."""

    def __init__(self, repo_input: str):
        self.repo_input = repo_input
        super().__init__(
            f"Invalid repository format '{repo_input}'. Use \"user/repo\" or full URL"
        )


class PreconditionError(TreeManagerError):
    """Exception raised when a check made before any mutation fails."""

    def __init__(self, message: str, guidance: Optional[List[str]] = None):
        self.guidance = guidance or []
        super().__init__(message)


class NotManagedRepositoryError(PreconditionError):
    """Exception raised when no bare store is found in cwd or its parent."""

    def __init__(self, cwd: str, bare_dir: str = ".bare"):
        self.cwd = cwd
        super().__init__(
            f"Not in a tm-managed repository (no {bare_dir} directory found)",
            [f"Looking for {bare_dir} in current and parent directories"],
        )


class WorktreeExistsError(PreconditionError):
    """Exception raised when the target worktree directory is already present."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(f"Worktree {name} already exists at {path}")


class WorktreeNotFoundError(PreconditionError):
    """Exception raised when the named worktree directory does not exist."""

    def __init__(self, name: str, guidance: Optional[List[str]] = None):
        self.name = name
        super().__init__(f"Worktree '{name}' does not exist", guidance)


class TargetExistsError(PreconditionError):
    """Exception raised when the clone destination already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory {path} already exists")


class BranchNotFoundError(PreconditionError):
    """Exception raised when a branch exists neither locally nor remotely."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' does not exist locally or remotely",
            [f"Use 'tm branch {branch}' to create a new branch"],
        )


class GitOperationError(TreeManagerError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class BranchExistsError(GitOperationError):
    """Exception raised when git refuses to create an existing branch."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("create_branch", branch, message or "Branch already exists")


class ListFailedError(GitOperationError):
    """Exception raised when the worktree list itself cannot be obtained."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("list_worktrees", message=message)


class GitHubAPIError(TreeManagerError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ParseError(TreeManagerError):
    """Exception raised when worktree porcelain output cannot be parsed."""
    pass


class NoBranchFoundError(TreeManagerError):
    """Exception raised when a fresh bare store has no remote branches."""

    def __init__(self, remote: str = "origin"):
        self.remote = remote
        super().__init__(f"Could not determine main branch: no branches found on '{remote}'")


class HookError(TreeManagerError):
    """Exception raised when a post-hook exits non-zero or cannot be read."""

    def __init__(self, message: str, hook: Optional[str] = None, exit_code: Optional[int] = None):
        self.hook = hook
        self.exit_code = exit_code
        super().__init__(message)


class FileSystemError(TreeManagerError):
    """Exception raised when a file or directory of the layout cannot be written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Could not write {path}: {message}")
