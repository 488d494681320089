"""Commit records and the linear commit history.

A commit is a snapshot of the staged entries plus a link to its parent. It
is stored in the object store as canonical JSON (sorted keys, no whitespace),
so its hash is the hash of exactly the bytes on disk.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from groot.constants import ENCODING
from groot.core.staging import StagingEntry, StagingIndex, parse_entries
from groot.storage import (
    HeadRef,
    ObjectCorruptedError,
    ObjectNotFoundError,
    ObjectStore,
    is_valid_hash,
)

logger = logging.getLogger(__name__)


class NothingStagedError(Exception):
    """Raised when a commit is attempted with an empty staging area."""


class CorruptCommitError(Exception):
    """Raised when a stored object doesn't parse as a commit."""


class CorruptHistoryError(Exception):
    """Raised when the parent chain is cyclic or references missing commits."""


class Commit:
    """An immutable commit record.

    Attributes:
        timestamp: ISO-8601 creation time (UTC)
        message: Commit message
        files: Staged entries captured by this commit, in staging order
        parent: Hash of the parent commit, or None for the first commit
        hash: Object hash, set once the commit has been stored or loaded
    """

    def __init__(
        self,
        timestamp: str,
        message: str,
        files: List[StagingEntry],
        parent: Optional[str] = None,
        hash: Optional[str] = None,  # noqa: A002
    ):
        self.timestamp = timestamp
        self.message = message
        self.files = tuple(StagingEntry(e.path, e.hash) for e in files)
        self.parent = parent
        self.hash = hash

    def __repr__(self) -> str:
        short = self.hash[:7] if self.hash else "unsaved"
        return f"Commit({short}, {self.message!r}, files={len(self.files)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @property
    def is_root(self) -> bool:
        """True for the first commit of the history."""
        return self.parent is None

    def find_file(self, path: str) -> Optional[StagingEntry]:
        """Return the entry for ``path``, or None."""
        return next((f for f in self.files if f.path == path), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (without the hash)."""
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "files": [f.to_dict() for f in self.files],
            "parent": self.parent,
        }

    def serialize(self) -> bytes:
        """Canonical byte form: sorted keys, no whitespace, UTF-8."""
        canonical_json = json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return canonical_json.encode(ENCODING)

    @classmethod
    def deserialize(cls, data: bytes, commit_hash: Optional[str] = None) -> "Commit":
        """Parse stored bytes into a Commit.

        Raises:
            CorruptCommitError: If ``data`` isn't a valid commit record
        """
        try:
            obj = json.loads(data.decode(ENCODING))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptCommitError(f"Commit {commit_hash} is not valid JSON: {e}") from e

        if not isinstance(obj, dict):
            raise CorruptCommitError(f"Commit {commit_hash} is not a JSON object")

        missing = {"timestamp", "message", "files", "parent"} - obj.keys()
        if missing:
            raise CorruptCommitError(
                f"Commit {commit_hash} is missing fields: {', '.join(sorted(missing))}"
            )

        timestamp = obj["timestamp"]
        message = obj["message"]
        parent = obj["parent"]

        if not isinstance(timestamp, str) or not isinstance(message, str):
            raise CorruptCommitError(f"Commit {commit_hash} has invalid timestamp or message")

        # An empty parent string also means "no parent"
        if parent == "":
            parent = None
        if parent is not None and not is_valid_hash(parent):
            raise CorruptCommitError(f"Commit {commit_hash} has invalid parent: {parent!r}")

        try:
            files = parse_entries(obj["files"])
        except ValueError as e:
            raise CorruptCommitError(f"Commit {commit_hash} has invalid file list: {e}") from e

        return cls(timestamp, message, files, parent=parent, hash=commit_hash)


class CommitChain:
    """Builds commits and walks the single linear history.

    Attributes:
        object_store: ObjectStore holding commit records and blobs
        staging: StagingIndex snapshotted by each commit
        head: HeadRef pointing at the newest commit
    """

    def __init__(self, object_store: ObjectStore, staging: StagingIndex, head: HeadRef):
        self.object_store = object_store
        self.staging = staging
        self.head = head

    def current_head(self) -> Optional[str]:
        """Return the newest commit hash, or None if there are no commits."""
        return self.head.read()

    def commit(self, message: str, timestamp: Optional[str] = None) -> str:
        """Commit the staged entries.

        The commit object is written before HEAD moves, so HEAD never points
        at a missing object. The index is cleared last; if that fails the
        commit still stands and the failure is logged.

        Args:
            message: Commit message
            timestamp: ISO-8601 timestamp (default: now, UTC)

        Returns:
            Hash of the new commit

        Raises:
            NothingStagedError: If the staging area is empty
            CorruptHistoryError: If HEAD doesn't name a stored object
        """
        entries = self.staging.load()
        if not entries:
            raise NothingStagedError("Nothing to commit (staging area is empty)")

        parent = self.current_head()
        if parent is not None and not self.object_store.exists(parent):
            raise CorruptHistoryError(f"HEAD references missing commit {parent!r}")
        if timestamp is None:
            timestamp = datetime.now(timezone.utc).isoformat()

        commit_obj = Commit(timestamp, message, entries, parent=parent)
        commit_hash = self.object_store.put(commit_obj.serialize())
        logger.debug("Wrote commit %s (parent %s)", commit_hash, parent)

        self.head.write(commit_hash)

        try:
            self.staging.clear()
        except OSError as e:
            logger.warning("Commit %s created but staging index was not cleared: %s", commit_hash, e)

        return commit_hash

    def get_commit(self, commit_hash: str) -> Commit:
        """Load a commit by its full hash.

        Raises:
            ObjectNotFoundError: If no object has this hash
            CorruptCommitError: If the object isn't a valid commit
        """
        try:
            data = self.object_store.get(commit_hash)
        except ObjectCorruptedError as e:
            raise CorruptCommitError(str(e)) from e

        return Commit.deserialize(data, commit_hash=commit_hash)

    def history(self, limit: Optional[int] = None) -> Iterator[Commit]:
        """Yield commits from HEAD back to the first commit.

        Args:
            limit: Maximum number of commits to yield (default: all)

        Raises:
            CorruptHistoryError: If a commit is reached twice or a parent
                doesn't resolve
            CorruptCommitError: If a commit object doesn't parse
        """
        visited = set()
        current = self.current_head()
        count = 0

        while current:
            if limit is not None and count >= limit:
                return
            if current in visited:
                raise CorruptHistoryError(f"Cycle in commit history at {current}")
            visited.add(current)

            try:
                commit_obj = self.get_commit(current)
            except ObjectNotFoundError as e:
                raise CorruptHistoryError(
                    f"Commit history references missing commit {current}"
                ) from e

            yield commit_obj
            count += 1
            current = commit_obj.parent
