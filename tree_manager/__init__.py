"""
git-tree-manager - Manage git worktrees that share a single bare store
"""

from .__version__ import __version__
from .core import TreeManager
from .cli.main import main

__all__ = ["TreeManager", "main", "__version__"]
