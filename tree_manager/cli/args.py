"""Command-line argument parsing for git-tree-manager."""

import argparse
import sys
from typing import List, Optional

from tree_manager.__version__ import __version__
from tree_manager.constants import USAGE_TEXT


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = UsageErrorParser(
        prog="tm",
        description="Manage git worktrees that share a single bare repository",
        epilog=USAGE_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-tree-manager {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    clone = subparsers.add_parser(
        "clone",
        help="Clone repository with worktree structure",
        epilog="Examples:\n  tm clone https://github.com/user/reponame.git\n  tm clone user/reponame",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    clone.add_argument("repo", help='Repository URL or "user/repo"')

    branch = subparsers.add_parser("branch", help="Create new branch and worktree")
    branch.add_argument("name", help="Branch name")

    add = subparsers.add_parser("add", help="Create worktree from existing branch")
    add.add_argument("name", help="Branch name")

    rm = subparsers.add_parser("rm", help="Remove worktree (and optionally branch)")
    rm.add_argument("name", help="Branch name")
    rm.add_argument(
        "-D", dest="delete_branch", action="store_true", help="Also force-delete the branch"
    )

    subparsers.add_parser("list", help="List all worktrees with status")
    subparsers.add_parser("prune", help="Remove orphaned worktrees")
    subparsers.add_parser("sync", help="Pull latest changes to all worktrees")

    switch = subparsers.add_parser(
        "switch",
        help="Output worktree path (for cd wrapper)",
        epilog="Outputs path to worktree (use with cd):\n  cd $(tm switch <branch-name>)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    switch.add_argument("name", help="Branch name")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments. Exits with status 1 on usage errors."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_usage(sys.stderr)
        sys.stderr.write(USAGE_TEXT)
        parser.exit(1)
    return args
