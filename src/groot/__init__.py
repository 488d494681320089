"""Groot - a minimal content-addressable version control system.

Groot stores file snapshots keyed by their SHA-256 hash, keeps a staging
index, links commits into a single linear history and shows line-level
differences between a commit and its parent.
"""

__version__ = "0.1.0"
__author__ = "Groot Contributors"

__all__ = ["__version__", "__author__"]
