"""Configuration handling for git-tree-manager"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_BRANCH_CANDIDATES = ["main", "master", "develop", "dev"]


@dataclass
class Config:
    """Configuration for git-tree-manager with validation."""

    # Repository layout
    remote_name: str = "origin"
    bare_dir: str = ".bare"
    hook_file: str = "post-hook.json"

    # Default branch preference, in order, when the remote does not say
    default_branch_candidates: List[str] = field(
        default_factory=lambda: list(DEFAULT_BRANCH_CANDIDATES)
    )

    # GitHub integration (owner/repo shorthand for clone)
    github_token: Optional[str] = None

    # Execution modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_bare_dir()
        self._validate_hook_file()
        self._validate_candidates()
        if self.github_token is None:
            self.github_token = os.environ.get("GITHUB_TOKEN") or None

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_bare_dir(self):
        """Validate bare_dir is a single relative path component."""
        if not self.bare_dir or "/" in self.bare_dir or self.bare_dir in (".", ".."):
            raise ValueError(f"bare_dir must be a plain directory name, got '{self.bare_dir}'")

    def _validate_hook_file(self):
        """Validate hook_file is a single relative path component."""
        if not self.hook_file or "/" in self.hook_file:
            raise ValueError(f"hook_file must be a plain file name, got '{self.hook_file}'")

    def _validate_candidates(self):
        """Validate default_branch_candidates list."""
        if not isinstance(self.default_branch_candidates, list):
            raise ValueError("default_branch_candidates must be a list")
        self.default_branch_candidates = [
            name.strip() for name in self.default_branch_candidates if name and name.strip()
        ]

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "remote_name": self.remote_name,
            "bare_dir": self.bare_dir,
            "hook_file": self.hook_file,
            "default_branch_candidates": self.default_branch_candidates,
            "github_token": self.github_token,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "remote_name",
            "bare_dir",
            "hook_file",
            "default_branch_candidates",
            "github_token",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
