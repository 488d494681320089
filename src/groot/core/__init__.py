"""Core engine layer for Groot.

This module provides the staging index and the commit chain.
"""

from groot.core.commit_chain import (
    Commit,
    CommitChain,
    CorruptCommitError,
    CorruptHistoryError,
    NothingStagedError,
)
from groot.core.staging import CorruptIndexError, StagingEntry, StagingError, StagingIndex

__all__ = [
    "StagingIndex",
    "StagingEntry",
    "StagingError",
    "CorruptIndexError",
    "Commit",
    "CommitChain",
    "NothingStagedError",
    "CorruptCommitError",
    "CorruptHistoryError",
]
