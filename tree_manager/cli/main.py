"""Command-line entry point for git-tree-manager"""

import os
import sys
from typing import List, Optional

from tree_manager.cli.args import parse_args
from tree_manager.config import Config
from tree_manager.core import TreeManager
from tree_manager.exceptions import TreeManagerError
from tree_manager.logging_config import get_logger, setup_logging
from tree_manager.models.worktree import RemoveOptions
from tree_manager.services.display_service import DisplayService, err_console

logger = get_logger(__name__)


def run_command(manager: TreeManager, args) -> int:
    """Dispatch a parsed command and turn its outcome into an exit code."""
    command = args.command
    if command == "clone":
        result = manager.clone(args.repo)
    elif command == "branch":
        result = manager.branch(args.name)
    elif command == "add":
        result = manager.add(args.name)
    elif command == "rm":
        result = manager.remove(args.name, RemoveOptions(delete_branch=args.delete_branch))
    elif command == "list":
        manager.list()
        return 0
    elif command == "prune":
        return manager.prune().exit_code
    elif command == "sync":
        return manager.sync().exit_code
    elif command == "switch":
        manager.switch(args.name)
        return 0
    else:
        raise ValueError(f"Unknown command: {command}")

    manager.display.show_failures(result.failures)
    return result.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    display = DisplayService()
    try:
        config = Config(verbose=parsed_args.verbose, debug=parsed_args.debug)
        if parsed_args.debug:
            shown = {k: v for k, v in config.to_dict().items() if k != "github_token"}
            logger.debug(f"Configuration: {shown}")
        manager = TreeManager(config, os.getcwd(), display=display)
        return run_command(manager, parsed_args)
    except KeyboardInterrupt:
        display.warning("\nOperation cancelled by user")
        return 1
    except TreeManagerError as e:
        logger.debug(f"{parsed_args.command} failed", exc_info=True)
        display.show_error(e)
        return 1
    except Exception as e:
        display.show_error(e)
        if parsed_args.debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
