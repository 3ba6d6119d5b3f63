"""Git-related services for git-tree-manager."""

from .client import VcsClient, GitClient
from .porcelain import PorcelainParser
from .branches import BranchResolver
from .worktrees import WorktreeRegistry

__all__ = [
    "VcsClient",
    "GitClient",
    "PorcelainParser",
    "BranchResolver",
    "WorktreeRegistry",
]
