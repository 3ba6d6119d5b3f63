"""Default branch resolution for a freshly cloned bare store."""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from tree_manager.config import DEFAULT_BRANCH_CANDIDATES
from tree_manager.exceptions import NoBranchFoundError
from tree_manager.logging_config import get_logger
from tree_manager.services.git.client import VcsClient

logger = get_logger(__name__)


class BranchResolver:
    """Decide which branch gets the first worktree after a clone."""

    def __init__(
        self,
        client: VcsClient,
        remote: str = "origin",
        candidates: Optional[Sequence[str]] = None,
    ):
        self.client = client
        self.remote = remote
        self.candidates: List[str] = list(candidates) if candidates is not None else list(DEFAULT_BRANCH_CANDIDATES)

    def resolve(self, bare_path: Union[str, Path], supplied: Optional[str] = None) -> str:
        """Return the main branch name.

        Precedence:
            1. supplied (e.g. the default branch reported by GitHub)
            2. refs/remotes/<remote>/HEAD
            3. first of the candidate names present on the remote
            4. first remote branch in git's order

        Raises:
            NoBranchFoundError: if the remote has no branches at all
        """
        if supplied and supplied.strip():
            logger.debug(f"Using supplied default branch {supplied.strip()}")
            return supplied.strip()

        remote_head = self.client.default_remote_branch(bare_path, self.remote)
        if remote_head:
            logger.debug(f"Using {self.remote}/HEAD -> {remote_head}")
            return remote_head

        branches = self.client.remote_branches(bare_path, self.remote)
        if not branches:
            raise NoBranchFoundError(self.remote)

        for candidate in self.candidates:
            if candidate in branches:
                logger.debug(f"Using common default branch name {candidate}")
                return candidate

        logger.debug(f"Falling back to first remote branch {branches[0]}")
        return branches[0]
