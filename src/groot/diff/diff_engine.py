"""Commit-level diff engine.

Compares every file recorded in a commit with the same path in the parent
commit, pulling blob content from the object store.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from groot.constants import ENCODING
from groot.core.commit_chain import Commit, CommitChain, CorruptHistoryError
from groot.diff.base import DiffKind, DiffRun, diff_text
from groot.storage import ObjectNotFoundError

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    """How a file in a commit relates to its parent."""

    ADDED = "added"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    MISSING = "missing"


class FileDiff:
    """Diff of one file between a commit and its parent.

    Attributes:
        path: Workspace-relative file path
        status: ADDED (no parent version), MODIFIED, UNCHANGED (same blob) or
            MISSING (the commit's own blob is not in the store)
        runs: Line diff runs; empty unless MODIFIED or UNCHANGED
    """

    def __init__(self, path: str, status: FileStatus, runs: Optional[List[DiffRun]] = None):
        self.path = path
        self.status = FileStatus(status)
        self.runs = runs or []

    def __repr__(self) -> str:
        return f"FileDiff({self.path!r}, {self.status.value}, runs={len(self.runs)})"

    @property
    def added_lines(self) -> int:
        return sum(r.line_count for r in self.runs if r.kind is DiffKind.ADDED)

    @property
    def removed_lines(self) -> int:
        return sum(r.line_count for r in self.runs if r.kind is DiffKind.REMOVED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": self.path,
            "status": self.status.value,
            "runs": [r.to_dict() for r in self.runs],
        }


class CommitDiffReport:
    """Per-file diff of a commit against its parent.

    Attributes:
        commit: The commit being shown
        parent: Its parent commit, or None for the initial commit
        files: One FileDiff per file of the commit, in commit order
    """

    def __init__(
        self,
        commit: Commit,
        parent: Optional[Commit] = None,
        files: Optional[List[FileDiff]] = None,
    ):
        self.commit = commit
        self.parent = parent
        self.files = files or []

    @property
    def is_initial(self) -> bool:
        """True when the commit has no parent, so there is nothing to diff."""
        return self.parent is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "commit": self.commit.hash,
            "parent": self.parent.hash if self.parent else None,
            "is_initial": self.is_initial,
            "files": [f.to_dict() for f in self.files],
        }


class DiffEngine:
    """Diffs commits against their parents.

    Attributes:
        chain: CommitChain used to load commits
        object_store: Object store holding the file blobs
    """

    def __init__(self, chain: CommitChain):
        self.chain = chain
        self.object_store = chain.object_store

    def show_commit_diff(self, commit_hash: str) -> CommitDiffReport:
        """Diff a commit against its parent.

        Args:
            commit_hash: Full hash of the commit to show

        Returns:
            CommitDiffReport; ``is_initial`` is set for the first commit

        Raises:
            ObjectNotFoundError: If the commit doesn't exist
            CorruptCommitError: If the commit or its parent doesn't parse
            CorruptHistoryError: If the parent commit doesn't exist
        """
        commit_obj = self.chain.get_commit(commit_hash)

        if commit_obj.parent is None:
            return CommitDiffReport(commit_obj)

        try:
            parent_obj = self.chain.get_commit(commit_obj.parent)
        except ObjectNotFoundError as e:
            raise CorruptHistoryError(
                f"Parent {commit_obj.parent} of commit {commit_hash} not found"
            ) from e

        files = [self._diff_file(entry.path, entry.hash, parent_obj) for entry in commit_obj.files]
        return CommitDiffReport(commit_obj, parent_obj, files)

    def _diff_file(self, path: str, blob_hash: str, parent_obj: Commit) -> FileDiff:
        new_content = self._read_text(blob_hash)
        if new_content is None:
            logger.warning("Blob %s for %s is missing from the object store", blob_hash, path)
            return FileDiff(path, FileStatus.MISSING)

        parent_entry = parent_obj.find_file(path)
        if parent_entry is None:
            return FileDiff(path, FileStatus.ADDED)

        old_content = self._read_text(parent_entry.hash)
        if old_content is None:
            # Parent version unreadable: report as new rather than diff against nothing
            return FileDiff(path, FileStatus.ADDED)

        status = FileStatus.UNCHANGED if parent_entry.hash == blob_hash else FileStatus.MODIFIED
        return FileDiff(path, status, diff_text(old_content, new_content))

    def _read_text(self, blob_hash: str) -> Optional[str]:
        """Blob content as text, or None if the blob is absent."""
        try:
            content = self.object_store.get(blob_hash)
        except ObjectNotFoundError:
            return None
        return content.decode(ENCODING, errors="replace")
