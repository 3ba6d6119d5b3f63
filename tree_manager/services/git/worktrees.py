"""Worktree registry for git-tree-manager."""

import os
from pathlib import Path
from typing import List, Optional, Union

from tree_manager.exceptions import GitOperationError
from tree_manager.logging_config import get_logger
from tree_manager.models.worktree import SyncDelta, WorktreeRecord
from tree_manager.services.git.client import VcsClient
from tree_manager.services.git.porcelain import PorcelainParser

logger = get_logger(__name__)


class WorktreeRegistry:
    """Live view of the worktrees registered in a bare store.

    Nothing is cached: every call reads `git worktree list` again.
    """

    def __init__(self, client: VcsClient, parser: Optional[PorcelainParser] = None):
        """Initialize the registry.

        Args:
            client: Git access used for listing and per-worktree status
            parser: Porcelain parser (a default one is created when omitted)
        """
        self.client = client
        self.parser = parser or PorcelainParser()

    def list(self, bare_path: Union[str, Path], enrich: bool = True) -> List[WorktreeRecord]:
        """Get all non-bare worktrees in git's order.

        Args:
            bare_path: Path to the bare store
            enrich: Also query dirty state and ahead/behind counts

        Returns:
            List of WorktreeRecord objects; existence is always filled in

        Raises:
            ListFailedError: if git cannot list the worktrees
            ParseError: if the listing output is unusable
        """
        output = self.client.list_worktrees_raw(bare_path)
        records = self.parser.parse_worktrees(output)

        for record in records:
            record.exists = os.path.isdir(record.path)
            if enrich and record.exists:
                self._enrich(record)

        logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def orphans(self, bare_path: Union[str, Path]) -> List[WorktreeRecord]:
        """Worktrees whose directory no longer exists."""
        return [record for record in self.list(bare_path, enrich=False) if record.is_orphaned]

    def _enrich(self, record: WorktreeRecord) -> None:
        """Fill in dirty and sync state. Best effort: failures leave the record clean."""
        try:
            record.dirty_count = self.client.status(record.path)
            record.status_known = True
        except GitOperationError as e:
            logger.debug(f"Could not check worktree status for {record.path}: {e}")
            record.dirty_count = 0
            record.status_known = False

        if record.is_detached:
            return

        try:
            if self.client.upstream(record.path) is None:
                return
            ahead, behind = self.client.ahead_behind(record.path)
            record.sync = SyncDelta(ahead=ahead, behind=behind)
        except GitOperationError as e:
            logger.debug(f"Could not compute ahead/behind for {record.path}: {e}")
            record.sync = None
