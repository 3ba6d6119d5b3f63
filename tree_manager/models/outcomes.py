"""Command outcome models.

Failures are tagged FATAL or ADVISORY; the command layer turns the set of
failures into an exit code instead of each call site deciding on its own.
Batch commands (prune, sync) report per-worktree outcomes that never abort
the batch.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tree_manager.models.worktree import WorktreeRecord


class FailureKind(Enum):
    """How a failure affects the exit code of the command."""
    FATAL = "fatal"
    ADVISORY = "advisory"


@dataclass
class Failure:
    """A failure recorded while a command kept running."""

    kind: FailureKind
    error: Exception
    context: str = ""

    @classmethod
    def fatal(cls, error: Exception, context: str = "") -> "Failure":
        return cls(FailureKind.FATAL, error, context)

    @classmethod
    def advisory(cls, error: Exception, context: str = "") -> "Failure":
        return cls(FailureKind.ADVISORY, error, context)

    @property
    def is_fatal(self) -> bool:
        return self.kind == FailureKind.FATAL

    def __str__(self) -> str:
        if self.context:
            return f"{self.context}: {self.error}"
        return str(self.error)


@dataclass
class CommandResult:
    """Result of a single-target command."""

    command: str
    path: Optional[str] = None
    branch: Optional[str] = None
    failures: List[Failure] = field(default_factory=list)

    def add(self, failure: Optional[Failure]) -> None:
        if failure is not None:
            self.failures.append(failure)

    @property
    def fatal_failures(self) -> List[Failure]:
        return [f for f in self.failures if f.is_fatal]

    @property
    def advisories(self) -> List[Failure]:
        return [f for f in self.failures if not f.is_fatal]

    @property
    def exit_code(self) -> int:
        return 1 if self.fatal_failures else 0


class SyncState(Enum):
    """Per-worktree result of sync."""
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SyncOutcome:
    record: WorktreeRecord
    state: SyncState
    message: str = ""


@dataclass
class SyncReport:
    """Outcomes of a sync run, in worktree listing order."""

    outcomes: List[SyncOutcome] = field(default_factory=list)

    def count(self, state: SyncState) -> int:
        return sum(1 for o in self.outcomes if o.state == state)

    @property
    def exit_code(self) -> int:
        # Per-worktree failures are reported, not fatal
        return 0


@dataclass
class PruneOutcome:
    record: WorktreeRecord
    removed: bool
    error: Optional[str] = None


@dataclass
class PruneReport:
    """Outcomes of a prune run, one per orphaned worktree."""

    outcomes: List[PruneOutcome] = field(default_factory=list)

    @property
    def orphan_count(self) -> int:
        return len(self.outcomes)

    @property
    def removed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.removed)

    @property
    def failed_count(self) -> int:
        return self.orphan_count - self.removed_count

    @property
    def exit_code(self) -> int:
        return 0

    def summary(self) -> str:
        if not self.outcomes:
            return "No orphaned worktrees found"
        if not self.failed_count:
            return f"Pruned {self.removed_count} orphaned worktree(s)"
        return (
            f"Pruned {self.removed_count} of {self.orphan_count} orphaned worktree(s); "
            f"{self.failed_count} failed"
        )
