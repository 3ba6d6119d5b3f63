"""GitHub API integration service"""
import os
import re
from pathlib import Path
from typing import Optional, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Github, Auth
from github.GithubException import GithubException

from tree_manager.exceptions import GitHubAPIError, InvalidRepoFormatError
from tree_manager.logging_config import get_logger
from tree_manager.models.repository import CloneSource, RemoteRepository

if TYPE_CHECKING:
    from tree_manager.config import Config

logger = get_logger(__name__)

SHORTHAND_PATTERN = re.compile(r"^([^/]+)/([^/]+)$")
URL_PREFIXES = ("https://", "http://", "ssh://", "git://", "file://", "git@")


def is_url(repo_input: str) -> bool:
    """Whether a clone argument is already something git can clone directly.

    A local directory only counts when it cannot be read as owner/repo, so
    shorthand always goes through the GitHub lookup.
    """
    return (
        repo_input.startswith(URL_PREFIXES)
        or repo_input.endswith(".git")
        or (os.path.isdir(repo_input) and not SHORTHAND_PATTERN.match(repo_input))
    )


def repo_name_from_url(url: str) -> str:
    """Directory name for a clone URL: last path segment without `.git`."""
    if url.startswith("git@") and ":" in url:
        path = url.split(":", 1)[1]
    elif "://" in url:
        path = urlparse(url).path
    else:
        path = url

    name = path.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    if not name or name in (".", ".."):
        raise InvalidRepoFormatError(url)
    return name


class GitHubService:
    """Look up owner/repo shorthand on GitHub."""

    def __init__(self, config: Union['Config', dict]):
        """Initialize the service."""
        self.config = config
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.github: Optional[Github] = None

    def _client(self) -> Github:
        """Create the API client, authenticated when a token is available."""
        if self.github is None:
            if self.github_token:
                self.github = Github(auth=Auth.Token(self.github_token))
            else:
                logger.debug("[GitHub] No GitHub token found. Using anonymous API access")
                self.github = Github()
        return self.github

    def get_repository(self, owner: str, name: str) -> RemoteRepository:
        """Fetch clone URL and default branch for owner/name.

        Raises:
            GitHubAPIError: if the repository cannot be found or accessed
        """
        full_name = f"{owner}/{name}"
        try:
            gh_repo = self._client().get_repo(full_name)
            logger.debug(f"[GitHub] Resolved {full_name} to {gh_repo.clone_url}")
            return RemoteRepository(
                owner=owner,
                name=name,
                clone_url=gh_repo.clone_url,
                default_branch=gh_repo.default_branch or None,
            )
        except GithubException as e:
            logger.debug(f"[GitHub] Error resolving {full_name}: {e}")
            raise GitHubAPIError(
                "get_repo", f'Repository "{full_name}" not found or is not accessible'
            )

    def resolve_clone_source(self, repo_input: str) -> CloneSource:
        """Turn a clone argument into a URL, directory name and optional default branch.

        Raises:
            InvalidRepoFormatError: if the input is neither a URL nor owner/repo
            GitHubAPIError: if shorthand cannot be resolved
        """
        repo_input = repo_input.strip()
        if is_url(repo_input):
            return CloneSource(url=repo_input, name=repo_name_from_url(repo_input))

        match = SHORTHAND_PATTERN.match(repo_input)
        if not match:
            raise InvalidRepoFormatError(repo_input)

        owner, name = match.groups()
        remote = self.get_repository(owner, name)
        return CloneSource(
            url=remote.clone_url,
            name=repo_name_from_url(remote.clone_url) if remote.clone_url else Path(name).name,
            default_branch=remote.default_branch,
            shorthand=True,
        )
