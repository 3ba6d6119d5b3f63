"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional

from tree_manager.constants import BARE_BRANCH, DETACHED_BRANCH


@dataclass(frozen=True)
class SyncDelta:
    """Commits ahead of and behind the configured upstream."""

    ahead: int
    behind: int

    @property
    def in_sync(self) -> bool:
        return self.ahead == 0 and self.behind == 0

    def __str__(self) -> str:
        parts = []
        if self.ahead:
            parts.append(f"ahead {self.ahead}")
        if self.behind:
            parts.append(f"behind {self.behind}")
        return ", ".join(parts)


@dataclass
class WorktreeRecord:
    """One entry of `git worktree list --porcelain`, optionally enriched."""

    path: str
    branch: str = DETACHED_BRANCH
    head: Optional[str] = None
    is_bare: bool = False
    locked: bool = False
    prunable: bool = False

    # Enrichment, filled in by the registry
    exists: Optional[bool] = None  # None = not checked yet
    dirty_count: int = 0
    status_known: bool = False
    sync: Optional[SyncDelta] = None  # None = no upstream configured
    is_current: bool = False

    @property
    def is_detached(self) -> bool:
        return self.branch == DETACHED_BRANCH

    @property
    def is_orphaned(self) -> bool:
        """Registered with git but the directory is gone."""
        return self.exists is False

    @property
    def is_dirty(self) -> bool:
        return self.dirty_count > 0

    def __str__(self) -> str:
        if self.is_bare:
            return f"{BARE_BRANCH} @ {self.path}"
        status = "orphaned" if self.is_orphaned else "active"
        return f"{self.branch} @ {self.path} [{status}]"


@dataclass
class RemoveOptions:
    """Options for removing a worktree."""

    delete_branch: bool = False
