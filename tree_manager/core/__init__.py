"""Core orchestration for git-tree-manager."""

from .tree_manager import TreeManager

__all__ = ["TreeManager"]
