"""Parser for `git worktree list --porcelain` output."""

from typing import Dict, List, Optional

from tree_manager.constants import BARE_BRANCH, DETACHED_BRANCH, HEADS_PREFIX
from tree_manager.exceptions import ParseError
from tree_manager.logging_config import get_logger
from tree_manager.models.worktree import WorktreeRecord

logger = get_logger(__name__)


class PorcelainParser:
    """Turn porcelain worktree output into WorktreeRecords.

    Format (blank line between worktrees):

        worktree /path/to/repo/.bare
        bare

        worktree /path/to/repo/main
        HEAD 1a2b3c...
        branch refs/heads/main

        worktree /path/to/repo/old
        HEAD 4d5e6f...
        detached
        prunable gitdir file points to non-existent location
    """

    def parse(self, output: str) -> List[WorktreeRecord]:
        """Parse every entry, bare store included, in the order git reports them."""
        if not output or not output.strip():
            raise ParseError("Empty worktree list output")

        records: List[WorktreeRecord] = []
        seen_paths = set()
        blocks = self._split_blocks(output)
        saw_worktree_line = False

        for block in blocks:
            fields = self._parse_block(block)
            path = fields.get("worktree")
            if not path:
                logger.debug(f"Skipping worktree entry without a path: {block}")
                continue
            saw_worktree_line = True
            if path in seen_paths:
                logger.debug(f"Ignoring duplicate worktree entry for {path}")
                continue
            seen_paths.add(path)
            records.append(self._to_record(path, fields))

        if not saw_worktree_line:
            raise ParseError("No worktree entries found in worktree list output")

        logger.debug(f"Parsed {len(records)} worktree entries")
        return records

    def parse_worktrees(self, output: str) -> List[WorktreeRecord]:
        """Parse and drop the bare store entry."""
        return [record for record in self.parse(output) if not record.is_bare]

    @staticmethod
    def _split_blocks(output: str) -> List[List[str]]:
        blocks: List[List[str]] = []
        current: List[str] = []
        for line in output.splitlines():
            line = line.rstrip("\r")
            if not line.strip():
                if current:
                    blocks.append(current)
                    current = []
                continue
            current.append(line)
        if current:
            blocks.append(current)
        return blocks

    @staticmethod
    def _parse_block(lines: List[str]) -> Dict[str, Optional[str]]:
        """Map each `key value` line to key -> value; marker lines map to None."""
        fields: Dict[str, Optional[str]] = {}
        for line in lines:
            key, _, value = line.partition(" ")
            if key not in fields:
                fields[key] = value if value else None
        return fields

    @staticmethod
    def _to_record(path: str, fields: Dict[str, Optional[str]]) -> WorktreeRecord:
        is_bare = "bare" in fields
        branch_ref = fields.get("branch")
        if is_bare:
            branch = BARE_BRANCH
        elif branch_ref:
            branch = branch_ref[len(HEADS_PREFIX):] if branch_ref.startswith(HEADS_PREFIX) else branch_ref
        else:
            branch = DETACHED_BRANCH

        return WorktreeRecord(
            path=path,
            branch=branch,
            head=fields.get("HEAD"),
            is_bare=is_bare,
            locked="locked" in fields,
            prunable="prunable" in fields,
        )
