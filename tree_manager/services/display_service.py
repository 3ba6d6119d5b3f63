"""Display and formatting service for worktree information"""
import sys
from typing import List

from rich.console import Console
from rich.markup import escape

from tree_manager.constants import (
    CLI_COLORS,
    MARKER_LOCKED,
    MARKER_ORPHANED,
    MARKER_STATUS_UNKNOWN,
    SYMBOL_CURRENT_WORKTREE,
    SYMBOL_FAILED,
    SYMBOL_SKIPPED,
    SYMBOL_UPDATED,
)
from tree_manager.exceptions import TreeManagerError
from tree_manager.logging_config import get_logger
from tree_manager.models.outcomes import Failure, PruneReport, SyncOutcome, SyncReport, SyncState
from tree_manager.models.worktree import WorktreeRecord

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)
logger = get_logger(__name__)


def format_worktree_line(record: WorktreeRecord) -> str:
    """Plain-text summary line for a worktree: marker, branch and status flags."""
    marker = f"{SYMBOL_CURRENT_WORKTREE} " if record.is_current else "  "
    line = f"{marker}{record.branch}"
    if record.dirty_count:
        line += f" [{record.dirty_count} modified]"
    elif record.exists and not record.status_known:
        line += f" {MARKER_STATUS_UNKNOWN}"
    if record.sync is not None and not record.sync.in_sync:
        line += f" [{record.sync}]"
    if record.locked:
        line += f" {MARKER_LOCKED}"
    if record.is_orphaned:
        line += f" {MARKER_ORPHANED}"
    return line


class DisplayService:
    def info(self, message: str) -> None:
        console.print(escape(message))

    def success(self, message: str) -> None:
        console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        err_console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        err_console.print(f"[red]{escape(message)}[/red]")

    def show_error(self, error: Exception) -> None:
        """Print an error and any guidance it carries to stderr."""
        self.error(f"Error: {error}")
        if isinstance(error, TreeManagerError):
            for line in error.guidance:
                err_console.print(escape(line))

    def show_failures(self, failures: List[Failure]) -> None:
        for failure in failures:
            if failure.is_fatal:
                self.error(str(failure))
            else:
                self.warning(str(failure))

    def print_path(self, path: str) -> None:
        """Write a bare path for shell wrappers such as `cd $(tm switch name)`."""
        sys.stdout.write(f"{path}\n")
        sys.stdout.flush()

    def display_worktrees(self, records: List[WorktreeRecord]) -> None:
        console.print("Worktrees:")
        console.print()
        if not records:
            console.print("  (none)")
            return

        for record in records:
            line = escape(format_worktree_line(record))
            if record.is_orphaned:
                line = f"[{CLI_COLORS['orphaned']}]{line}[/{CLI_COLORS['orphaned']}]"
            elif record.is_current:
                line = f"[{CLI_COLORS['current']}]{line}[/{CLI_COLORS['current']}]"
            elif record.is_dirty:
                line = f"[{CLI_COLORS['dirty']}]{line}[/{CLI_COLORS['dirty']}]"
            console.print(line)
            console.print(f"    [{CLI_COLORS['path']}]{escape(record.path)}[/{CLI_COLORS['path']}]")
            console.print()

    def display_orphans(self, records: List[WorktreeRecord]) -> None:
        console.print(f"Found {len(records)} orphaned worktree(s):")
        for record in records:
            console.print(f"  - {escape(record.branch)} ({escape(record.path)})")

    def display_prune_report(self, report: PruneReport) -> None:
        for outcome in report.outcomes:
            if outcome.removed:
                console.print(f"Pruned orphaned worktree: {escape(outcome.record.branch)}")
            else:
                self.error(f"Failed to prune {outcome.record.branch}: {outcome.error}")
        if report.failed_count:
            self.warning(report.summary())
        else:
            console.print(escape(report.summary()))

    def display_sync_outcome(self, outcome: SyncOutcome) -> None:
        branch = escape(outcome.record.branch)
        if outcome.state == SyncState.UPDATED:
            console.print(f"[green]{SYMBOL_UPDATED}[/green] {branch}: Synced")
        elif outcome.state == SyncState.SKIPPED:
            console.print(f"[yellow]{SYMBOL_SKIPPED}[/yellow]  {branch}: Skipped ({escape(outcome.message)})")
        else:
            console.print(f"[red]{SYMBOL_FAILED}[/red] {branch}: Failed - {escape(outcome.message)}")

    def display_sync_summary(self, report: SyncReport) -> None:
        console.print()
        console.print(
            f"Sync complete: {report.count(SyncState.UPDATED)} synced, "
            f"{report.count(SyncState.SKIPPED)} skipped, "
            f"{report.count(SyncState.FAILED)} failed"
        )
