"""Version information for git-tree-manager."""

try:
    from tree_manager._version import __version__
except ImportError:
    # Fallback for development without tags or when running from source
    __version__ = "0.0.0+unknown"
