"""Repository layout and clone source models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RepositoryLayout:
    """Root directory of a managed repository and its bare store."""

    root: Path
    bare_path: Path

    def worktree_path(self, name: str) -> Path:
        """Conventional location of the worktree for a branch."""
        return self.root / name


@dataclass
class RemoteRepository:
    """Metadata returned by the remote repository lookup."""

    owner: str
    name: str
    clone_url: str
    default_branch: Optional[str] = None


@dataclass
class CloneSource:
    """Resolved input of a clone command."""

    url: str
    name: str  # Directory name created under the current directory
    default_branch: Optional[str] = None
    shorthand: bool = False
