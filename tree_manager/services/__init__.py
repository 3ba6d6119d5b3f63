"""Services for git-tree-manager."""

from .locator import RepoLocator
from .github_service import GitHubService
from .hook_service import HookService
from .display_service import DisplayService

__all__ = [
    "RepoLocator",
    "GitHubService",
    "HookService",
    "DisplayService",
]
