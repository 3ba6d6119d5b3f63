"""Locate the bare store of a managed repository."""

import os
from pathlib import Path
from typing import Union

from tree_manager.exceptions import NotManagedRepositoryError
from tree_manager.logging_config import get_logger
from tree_manager.models.repository import RepositoryLayout

logger = get_logger(__name__)


class RepoLocator:
    """Find `<root>/.bare` from a working directory.

    Only the directory itself and its immediate parent are checked, so
    commands work from the repository root and from the top level of a
    worktree. Deeper directories are not searched.
    """

    def __init__(self, bare_dir: str = ".bare"):
        self.bare_dir = bare_dir

    def locate(self, cwd: Union[str, Path]) -> RepositoryLayout:
        """Resolve the repository layout for cwd.

        Raises:
            NotManagedRepositoryError: if neither cwd nor its parent holds the bare store
        """
        current = Path(os.path.abspath(cwd))
        for candidate_root in (current, current.parent):
            bare_path = candidate_root / self.bare_dir
            if bare_path.is_dir():
                logger.debug(f"Found bare store at {bare_path}")
                return RepositoryLayout(root=candidate_root, bare_path=bare_path)

        raise NotManagedRepositoryError(str(current), self.bare_dir)
