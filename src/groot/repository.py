"""Repository handle binding Groot's components to one workspace.

Every operation goes through an explicit ``Repository`` constructed with the
workspace root; nothing is cached at module level. State is reloaded from
disk on each call.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional

from groot.constants import GROOT_DIR, HEAD_FILE, INDEX_FILE, OBJECTS_DIR
from groot.core import Commit, CommitChain, StagingEntry, StagingIndex
from groot.diff import CommitDiffReport, DiffEngine
from groot.storage import HeadRef, ObjectStore

logger = logging.getLogger(__name__)


class AlreadyInitializedError(Exception):
    """Raised by init when the workspace already holds a repository."""


class NotARepositoryError(Exception):
    """Raised when an operation needs a repository and none exists."""


class Repository:
    """A Groot repository rooted at a workspace directory.

    Attributes:
        workspace_root: Directory whose files are versioned
        groot_dir: Path to the .groot directory

    Example:
        >>> repo = Repository(Path("."))
        >>> repo.init()
        >>> repo.add(Path("notes.txt"))
        >>> commit_hash = repo.commit("first")
    """

    def __init__(self, workspace_root: Path) -> None:
        self.workspace_root = Path(workspace_root).resolve()
        self.groot_dir = self.workspace_root / GROOT_DIR

    def is_initialized(self) -> bool:
        """Check that the repository layout exists."""
        return (
            (self.groot_dir / OBJECTS_DIR).is_dir()
            and (self.groot_dir / HEAD_FILE).is_file()
            and (self.groot_dir / INDEX_FILE).is_file()
        )

    def init(self) -> None:
        """Create the repository layout.

        Missing pieces of a partial layout are filled in; existing HEAD and
        index files are never overwritten.

        Raises:
            AlreadyInitializedError: If the repository already exists
        """
        if self.is_initialized():
            raise AlreadyInitializedError(
                f"Groot repository already exists in {self.workspace_root}"
            )

        (self.groot_dir / OBJECTS_DIR).mkdir(parents=True, exist_ok=True)

        store = ObjectStore(self.groot_dir)
        head = HeadRef(self.groot_dir)
        if not head.head_path.exists():
            head.initialize()
        staging = StagingIndex(self.workspace_root, store)
        if not staging.index_path.exists():
            staging.initialize()

        logger.debug("Initialized repository in %s", self.groot_dir)

    def add(self, path: Path) -> StagingEntry:
        """Stage one file. See StagingIndex.stage_file."""
        return self._staging().stage_file(Path(path))

    def staged(self) -> List[StagingEntry]:
        """Return the staged entries in staging order."""
        return self._staging().load()

    def commit(self, message: str) -> str:
        """Commit the staged entries. See CommitChain.commit."""
        return self._chain().commit(message)

    def current_head(self) -> Optional[str]:
        """Return the newest commit hash, or None."""
        return self._chain().current_head()

    def resolve(self, ref: str) -> str:
        """Expand a full or abbreviated object hash."""
        return self._object_store().resolve(ref)

    def get_commit(self, ref: str) -> Commit:
        """Load a commit by full or abbreviated hash."""
        return self._chain().get_commit(self.resolve(ref))

    def history(self, limit: Optional[int] = None) -> Iterator[Commit]:
        """Yield commits newest first. See CommitChain.history."""
        return self._chain().history(limit=limit)

    def show(self, ref: str) -> CommitDiffReport:
        """Diff a commit (full or abbreviated hash) against its parent."""
        commit_hash = self.resolve(ref)
        return DiffEngine(self._chain()).show_commit_diff(commit_hash)

    def _require_initialized(self) -> None:
        if not self.is_initialized():
            raise NotARepositoryError(
                f"Not a Groot repository (no {GROOT_DIR}/ found in {self.workspace_root})"
            )

    def _object_store(self) -> ObjectStore:
        self._require_initialized()
        return ObjectStore(self.groot_dir)

    def _staging(self) -> StagingIndex:
        return StagingIndex(self.workspace_root, self._object_store())

    def _chain(self) -> CommitChain:
        store = self._object_store()
        return CommitChain(
            store,
            StagingIndex(self.workspace_root, store),
            HeadRef(self.groot_dir),
        )
