"""Shared constants for git-tree-manager."""

# Branch sentinels reported for worktrees without a branch
DETACHED_BRANCH = "(detached)"
BARE_BRANCH = "(bare)"

HEADS_PREFIX = "refs/heads/"

# Symbol constants
SYMBOL_CURRENT_WORKTREE = "*"
SYMBOL_UPDATED = "✓"
SYMBOL_SKIPPED = "⚠"
SYMBOL_FAILED = "✗"

MARKER_ORPHANED = "[ORPHANED]"
MARKER_LOCKED = "[locked]"
MARKER_STATUS_UNKNOWN = "[status unknown]"

# CLI colors (Rich color names)
CLI_COLORS = {
    "current": "green",
    "orphaned": "red",
    "dirty": "yellow",
    "path": "dim",
}

USAGE_TEXT = """\
Usage: tm <command>

Commands:
  clone <repo>       Clone repository with worktree structure
                      Accepts URLs or "user/repo" format
  branch <name>      Create new branch and worktree
  add <name>         Create worktree from existing branch
  rm <name> [-D]     Remove worktree (and optionally branch)
  list               List all worktrees with status
  prune              Remove orphaned worktrees
  sync               Pull latest changes to all worktrees
  switch <name>      Output worktree path (for cd wrapper)
"""
