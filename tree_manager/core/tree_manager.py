"""Core functionality for git-tree-manager"""

import os
from pathlib import Path
from typing import List, Optional, Union

from tree_manager.config import Config
from tree_manager.exceptions import (
    BranchNotFoundError,
    FileSystemError,
    GitOperationError,
    TargetExistsError,
    TreeManagerError,
    WorktreeExistsError,
    WorktreeNotFoundError,
)
from tree_manager.logging_config import get_logger
from tree_manager.models.outcomes import (
    CommandResult,
    Failure,
    PruneOutcome,
    PruneReport,
    SyncOutcome,
    SyncReport,
    SyncState,
)
from tree_manager.models.repository import RepositoryLayout
from tree_manager.models.worktree import RemoveOptions, WorktreeRecord
from tree_manager.services.display_service import DisplayService
from tree_manager.services.git import BranchResolver, GitClient, VcsClient, WorktreeRegistry
from tree_manager.services.github_service import GitHubService
from tree_manager.services.hook_service import HookService
from tree_manager.services.locator import RepoLocator

logger = get_logger(__name__)


class TreeManager:
    """Commands for a repository laid out as `<root>/.bare` plus one worktree per branch."""

    def __init__(
        self,
        config: Union[Config, dict],
        cwd: Union[str, Path],
        client: Optional[VcsClient] = None,
        github: Optional[GitHubService] = None,
        hooks: Optional[HookService] = None,
        display: Optional[DisplayService] = None,
    ):
        """Initialize TreeManager.

        Args:
            config: Configuration dict or Config object
            cwd: Directory the command was invoked from
            client: Git access (GitPython-backed by default)
            github: Lookup for owner/repo shorthand
            hooks: Post-hook runner
            display: Console output
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.cwd = Path(os.path.abspath(cwd))
        self.remote = self.config.remote_name

        self.client = client or GitClient()
        self.github = github or GitHubService(self.config)
        self.hooks = hooks or HookService(self.config.hook_file)
        self.display = display or DisplayService()

        self.locator = RepoLocator(self.config.bare_dir)
        self.registry = WorktreeRegistry(self.client)
        self.branch_resolver = BranchResolver(
            self.client, self.remote, self.config.default_branch_candidates
        )

    def layout(self) -> RepositoryLayout:
        """Resolve the repository for the invoking directory.

        Raises:
            NotManagedRepositoryError: if no bare store is found
        """
        return self.locator.locate(self.cwd)

    # ------------------------------------------------------------------ clone

    def clone(self, repo_input: str) -> CommandResult:
        """Clone a repository into `<name>/.bare` with a worktree for its main branch.

        Nothing is rolled back if a step after the bare clone fails; the
        error names the directory left behind.
        """
        source = self.github.resolve_clone_source(repo_input)
        root = self.cwd / source.name
        bare_path = root / self.config.bare_dir

        if root.exists():
            raise TargetExistsError(source.name)

        result = CommandResult("clone", path=str(root))
        try:
            bare_path.mkdir(parents=True)
            self.client.clone_bare(source.url, bare_path, self.remote)
            main_branch = self.branch_resolver.resolve(
                bare_path, source.default_branch if source.shorthand else None
            )
            worktree_path = root / main_branch
            self.client.add_worktree(bare_path, worktree_path, main_branch)
            self._track_remote(bare_path, main_branch)
            self.hooks.write_empty(root)
        except OSError as e:
            error = FileSystemError(e.filename or str(root), e.strerror or str(e))
            raise self._clone_failed(error, root) from e
        except TreeManagerError as e:
            raise self._clone_failed(e, root)

        result.branch = main_branch
        self.display.success(
            f"Cloned {repo_input} ({source.url}) into {source.name}/ with worktree structure"
        )
        self.display.info(
            f"Main branch '{main_branch}' created at {source.name}/{main_branch} "
            f"(bare store at {source.name}/{self.config.bare_dir})"
        )

        result.add(self.hooks.run(root, worktree_path))
        return result

    def _clone_failed(self, error: TreeManagerError, root: Path) -> TreeManagerError:
        """Attach guidance about what a failed clone left behind."""
        logger.error(f"Clone into {root} failed: {error}")
        if root.exists():
            error.guidance = list(error.guidance) + [
                f"Partially created {root} was left on disk; remove it before retrying"
            ]
        return error

    def _track_remote(self, bare_path: Path, branch: str) -> None:
        """Point a freshly checked out branch at its remote-tracking branch, if any."""
        try:
            if branch in self.client.remote_branches(bare_path, self.remote):
                self.client.set_upstream(bare_path, branch, f"{self.remote}/{branch}")
        except GitOperationError as e:
            logger.warning(f"Could not set upstream for {branch}: {e}")

    # --------------------------------------------------------- branch / add

    def branch(self, name: str) -> CommandResult:
        """Create a new branch and a worktree for it."""
        layout = self.layout()
        worktree_path = layout.worktree_path(name)
        if worktree_path.exists():
            raise WorktreeExistsError(name, str(worktree_path))

        self.client.create_branch(layout.bare_path, name)
        self.client.add_worktree(layout.bare_path, worktree_path, name)
        self.display.success(f"Created branch '{name}' and worktree at {worktree_path}")

        result = CommandResult("branch", path=str(worktree_path), branch=name)
        result.add(self.hooks.run(layout.root, worktree_path))
        return result

    def add(self, name: str) -> CommandResult:
        """Create a worktree for an existing local or remote-tracking branch."""
        layout = self.layout()
        worktree_path = layout.worktree_path(name)
        if worktree_path.exists():
            raise WorktreeExistsError(name, str(worktree_path))

        local = self.client.local_branches(layout.bare_path)
        if name not in local:
            remote = self.client.remote_branches(layout.bare_path, self.remote)
            if name not in remote:
                raise BranchNotFoundError(name)
            logger.info(f"Creating local branch {name} tracking {self.remote}/{name}")
            self.client.create_tracking_branch(layout.bare_path, name, f"{self.remote}/{name}")

        self.client.add_worktree(layout.bare_path, worktree_path, name)
        self.display.success(f"Created worktree for branch '{name}' at {worktree_path}")

        result = CommandResult("add", path=str(worktree_path), branch=name)
        result.add(self.hooks.run(layout.root, worktree_path))
        return result

    # --------------------------------------------------------------- remove

    def remove(self, name: str, options: Optional[RemoveOptions] = None) -> CommandResult:
        """Remove a worktree, then optionally force-delete its branch.

        Branch deletion is a separate step: if it fails the worktree stays
        removed and the failure is recorded on the result.
        """
        options = options or RemoveOptions()
        layout = self.layout()
        worktree_path = layout.worktree_path(name)
        if not worktree_path.is_dir():
            raise WorktreeNotFoundError(name)

        self.client.remove_worktree(layout.bare_path, worktree_path)
        self.display.success(f"Removed worktree at {worktree_path}")

        result = CommandResult("rm", path=str(worktree_path), branch=name)
        if options.delete_branch:
            try:
                self.client.delete_branch(layout.bare_path, name)
                self.display.success(f"Deleted branch '{name}'")
            except GitOperationError as e:
                logger.error(f"Worktree removed but branch {name} was not deleted: {e}")
                result.add(Failure.fatal(e, f"Worktree removed, but branch '{name}' was not deleted"))
        return result

    # ----------------------------------------------------------------- list

    def list(self) -> List[WorktreeRecord]:
        """All worktrees with status, sync and orphan information."""
        layout = self.layout()
        records = self.registry.list(layout.bare_path)
        for record in records:
            record.is_current = self._contains_cwd(record.path)
        self.display.display_worktrees(records)
        return records

    def _contains_cwd(self, path: str) -> bool:
        worktree = Path(os.path.abspath(path))
        return self.cwd == worktree or worktree in self.cwd.parents

    # ---------------------------------------------------------------- prune

    def prune(self) -> PruneReport:
        """Remove registrations of worktrees whose directory is gone.

        Each orphan is removed on its own; a failure is logged and the rest
        are still processed.
        """
        layout = self.layout()
        orphans = self.registry.orphans(layout.bare_path)
        report = PruneReport()

        if not orphans:
            self.display.info(report.summary())
            return report

        self.display.display_orphans(orphans)
        for record in orphans:
            try:
                self.client.remove_worktree(layout.bare_path, record.path)
                report.outcomes.append(PruneOutcome(record, removed=True))
            except GitOperationError as e:
                logger.error(f"Failed to prune worktree at {record.path}: {e}")
                report.outcomes.append(PruneOutcome(record, removed=False, error=str(e)))

        self.display.display_prune_report(report)
        return report

    # ----------------------------------------------------------------- sync

    def sync(self) -> SyncReport:
        """Fetch once, then fast-forward every clean worktree in listing order."""
        layout = self.layout()
        self.display.info(f"Fetching updates from {self.remote}...")
        self.client.fetch(layout.bare_path, self.remote)

        records = self.registry.list(layout.bare_path, enrich=False)
        self.display.info(f"\nSyncing {len(records)} worktree(s)...\n")

        report = SyncReport()
        for record in records:
            outcome = self._sync_worktree(record)
            report.outcomes.append(outcome)
            self.display.display_sync_outcome(outcome)

        self.display.display_sync_summary(report)
        return report

    def _sync_worktree(self, record: WorktreeRecord) -> SyncOutcome:
        try:
            record.dirty_count = self.client.status(record.path)
            record.status_known = True
        except GitOperationError as e:
            logger.warning(f"Could not check status of {record.path}: {e}")
            return SyncOutcome(record, SyncState.FAILED, e.message or str(e))

        if record.is_dirty:
            return SyncOutcome(record, SyncState.SKIPPED, "uncommitted changes")

        try:
            self.client.pull_ff(record.path)
        except GitOperationError as e:
            logger.warning(f"Could not sync {record.path}: {e}")
            return SyncOutcome(record, SyncState.FAILED, e.message or str(e))
        return SyncOutcome(record, SyncState.UPDATED)

    # --------------------------------------------------------------- switch

    def switch(self, name: str) -> str:
        """Print the absolute path of a worktree, and nothing else."""
        layout = self.layout()
        worktree_path = layout.worktree_path(name)
        if not worktree_path.is_dir():
            raise WorktreeNotFoundError(name, [
                f"Use 'tm add {name}' to create it from an existing branch",
                f"Or use 'tm branch {name}' to create a new branch",
            ])
        self.display.print_path(str(worktree_path))
        return str(worktree_path)
