"""Data models for git-tree-manager."""

from .repository import RepositoryLayout, RemoteRepository, CloneSource
from .worktree import WorktreeRecord, SyncDelta, RemoveOptions
from .hooks import PostHookConfig
from .outcomes import (
    FailureKind,
    Failure,
    CommandResult,
    SyncState,
    SyncOutcome,
    SyncReport,
    PruneOutcome,
    PruneReport,
)

__all__ = [
    "RepositoryLayout",
    "RemoteRepository",
    "CloneSource",
    "WorktreeRecord",
    "SyncDelta",
    "RemoveOptions",
    "PostHookConfig",
    "FailureKind",
    "Failure",
    "CommandResult",
    "SyncState",
    "SyncOutcome",
    "SyncReport",
    "PruneOutcome",
    "PruneReport",
]
