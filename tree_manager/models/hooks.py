"""Post-hook configuration model."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class PostHookConfig:
    """Shell commands run, in order, after a worktree is created."""

    hooks: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"hooks": list(self.hooks)}

    @classmethod
    def from_dict(cls, data: dict) -> "PostHookConfig":
        """Build from parsed JSON. A missing or non-list `hooks` key means no hooks."""
        if not isinstance(data, dict):
            raise ValueError("post-hook file must contain a JSON object")
        hooks = data.get("hooks", [])
        if not isinstance(hooks, list):
            return cls()
        return cls(hooks=[str(hook) for hook in hooks])
