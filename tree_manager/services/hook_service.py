"""Post-hook file handling and execution."""
import json
import subprocess
from pathlib import Path
from typing import Callable, Optional, Union

from rich.console import Console
from rich.markup import escape

from tree_manager.exceptions import HookError
from tree_manager.logging_config import get_logger
from tree_manager.models.hooks import PostHookConfig
from tree_manager.models.outcomes import Failure

console = Console(highlight=False, soft_wrap=True)
logger = get_logger(__name__)

PathLike = Union[str, Path]
Executor = Callable[[str, Path], int]


def run_shell(command: str, cwd: Path) -> int:
    """Run a shell command with inherited stdio and return its exit code."""
    return subprocess.run(command, shell=True, cwd=str(cwd)).returncode


class HookService:
    """Reads `post-hook.json` and runs its commands in order."""

    def __init__(self, hook_file: str = "post-hook.json", executor: Optional[Executor] = None):
        self.hook_file = hook_file
        self.executor = executor or run_shell

    def hook_path(self, root: PathLike) -> Path:
        return Path(root) / self.hook_file

    def write_empty(self, root: PathLike) -> Path:
        """Write a hook file with no hooks at the repository root."""
        path = self.hook_path(root)
        path.write_text(json.dumps(PostHookConfig().to_dict(), indent=2) + "\n")
        logger.debug(f"Wrote empty hook file {path}")
        return path

    def load(self, root: PathLike) -> Optional[PostHookConfig]:
        """Read the hook file, or None if the repository has none.

        Raises:
            HookError: if the file exists but is not valid hook JSON
        """
        path = self.hook_path(root)
        if not path.is_file():
            return None
        try:
            return PostHookConfig.from_dict(json.loads(path.read_text()))
        except (OSError, ValueError) as e:
            raise HookError(f"Could not read {path}: {e}")

    def run(self, root: PathLike, cwd: PathLike) -> Optional[Failure]:
        """Run the hooks of the repository at root inside cwd.

        Stops at the first hook that exits non-zero. Failures are returned as
        advisory, never raised: a broken hook does not fail the command.
        """
        try:
            config = self.load(root)
        except HookError as e:
            logger.warning(str(e))
            return Failure.advisory(e, "Error running post-hooks")

        if config is None or not config.hooks:
            return None

        for hook in config.hooks:
            console.print(f"Running post-hook: {escape(hook)}")
            try:
                exit_code = self.executor(hook, Path(cwd))
            except OSError as e:
                error = HookError(f"Post-hook could not be started: {e}", hook=hook)
                logger.warning(str(error))
                return Failure.advisory(error, "Error running post-hooks")
            if exit_code != 0:
                error = HookError(f"Post-hook failed with exit code {exit_code}", hook=hook, exit_code=exit_code)
                logger.warning(f"{error} ({hook})")
                return Failure.advisory(error, "Error running post-hooks")
        return None
