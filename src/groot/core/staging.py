"""Staging area management for Groot.

The staging area (index) tracks which file versions go into the next commit.
Index format (JSON), an ordered array with at most one entry per path:

    [
        {"path": "relative/path/to/file", "hash": "sha256..."},
        ...
    ]
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from groot.constants import ENCODING, GROOT_DIR, INDEX_FILE
from groot.storage import ObjectStore, is_valid_hash
from groot.storage.atomic import write_atomic

logger = logging.getLogger(__name__)


class StagingError(Exception):
    """Exception raised when a file can't be staged."""


class CorruptIndexError(Exception):
    """Raised when the persisted index can't be parsed."""


class StagingEntry:
    """A staged file: workspace-relative path and blob hash."""

    def __init__(self, path: str, hash: str):  # noqa: A002
        self.path = path
        self.hash = hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StagingEntry):
            return NotImplemented
        return self.path == other.path and self.hash == other.hash

    def __repr__(self) -> str:
        return f"StagingEntry({self.path!r}, {self.hash[:7]})"

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary representation."""
        return {"path": self.path, "hash": self.hash}

    @classmethod
    def from_dict(cls, data: Any) -> "StagingEntry":
        """Build an entry from its dictionary form.

        Raises:
            ValueError: If ``data`` isn't a valid entry
        """
        if not isinstance(data, dict):
            raise ValueError(f"entry must be an object, got {type(data).__name__}")

        path = data.get("path")
        entry_hash = data.get("hash")

        if not isinstance(path, str) or not path:
            raise ValueError(f"entry has invalid path: {path!r}")
        if not is_valid_hash(entry_hash):
            raise ValueError(f"entry {path} has invalid hash: {entry_hash!r}")

        return cls(path, entry_hash)


def parse_entries(data: Any) -> List[StagingEntry]:
    """Validate a decoded JSON array of entries.

    Raises:
        ValueError: If ``data`` isn't a list of unique, valid entries
    """
    if not isinstance(data, list):
        raise ValueError(f"expected an array, got {type(data).__name__}")

    entries = [StagingEntry.from_dict(item) for item in data]

    seen = set()
    for entry in entries:
        if entry.path in seen:
            raise ValueError(f"duplicate entry for path {entry.path}")
        seen.add(entry.path)

    return entries


class StagingIndex:
    """Manager for the staging area (index).

    Attributes:
        workspace_root: Root directory of the workspace
        index_path: Path to the index file (.groot/index)
        object_store: ObjectStore used to store staged file contents
    """

    def __init__(self, workspace_root: Path, object_store: ObjectStore):
        """Initialize StagingIndex.

        Args:
            workspace_root: Root directory of workspace
            object_store: ObjectStore for blob storage
        """
        self.workspace_root = Path(workspace_root).resolve()
        self.groot_dir = self.workspace_root / GROOT_DIR
        self.index_path = self.groot_dir / INDEX_FILE
        self.object_store = object_store

    def initialize(self) -> None:
        """Persist an empty index for a new repository."""
        self._save([])

    def load(self) -> List[StagingEntry]:
        """Load staged entries in staging order.

        A missing index file loads as empty.

        Raises:
            CorruptIndexError: If the index isn't a well-formed entry array
        """
        try:
            raw = self.index_path.read_text(encoding=ENCODING)
        except FileNotFoundError:
            return []

        try:
            return parse_entries(json.loads(raw))
        except (json.JSONDecodeError, ValueError) as e:
            raise CorruptIndexError(f"Corrupted index file {self.index_path}: {e}") from e

    def upsert(self, path: str, blob_hash: str) -> StagingEntry:
        """Stage ``blob_hash`` under ``path``.

        An existing entry for ``path`` keeps its position and gets the new
        hash; otherwise the entry is appended.
        """
        entries = self.load()

        for entry in entries:
            if entry.path == path:
                entry.hash = blob_hash
                staged = entry
                break
        else:
            staged = StagingEntry(path, blob_hash)
            entries.append(staged)

        self._save(entries)
        logger.debug("Staged %s -> %s", path, blob_hash)
        return StagingEntry(staged.path, staged.hash)

    def stage_file(self, path: Path) -> StagingEntry:
        """Store a workspace file's content and stage it.

        Args:
            path: Absolute path, or path relative to the workspace root

        Returns:
            The staged entry

        Raises:
            FileNotFoundError: If the file doesn't exist
            StagingError: If the path is a directory, lies outside the
                workspace or inside .groot/
        """
        abs_path = self._resolve_path(Path(path))

        if not abs_path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if abs_path.is_dir():
            raise StagingError(f"{path} is a directory; only single files can be added")
        if self._is_groot_path(abs_path):
            raise StagingError(f"Refusing to stage repository internals: {path}")

        # POSIX format for cross-platform compatibility
        rel_path = abs_path.relative_to(self.workspace_root).as_posix()

        blob_hash = self.object_store.put(abs_path.read_bytes())
        return self.upsert(rel_path, blob_hash)

    def clear(self) -> None:
        """Clear all staged files."""
        self._save([])
        logger.debug("Cleared staging index")

    def is_empty(self) -> bool:
        """Check if staging area is empty."""
        return len(self.load()) == 0

    def _save(self, entries: List[StagingEntry]) -> None:
        data = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        write_atomic(self.index_path, data.encode(ENCODING), prefix=".tmp_index_")

    def _resolve_path(self, path: Path) -> Path:
        """Resolve path to absolute path within workspace."""
        if path.is_absolute():
            abs_path = path.resolve()
        else:
            abs_path = (self.workspace_root / path).resolve()

        try:
            abs_path.relative_to(self.workspace_root)
        except ValueError:
            raise StagingError(
                f"Path {path} is outside workspace root {self.workspace_root}"
            )

        return abs_path

    def _is_groot_path(self, abs_path: Path) -> bool:
        """Check if path is within .groot directory."""
        try:
            abs_path.relative_to(self.groot_dir)
            return True
        except ValueError:
            return False
