"""Content-addressable object storage for Groot.

Blobs and commit records share one flat namespace under
``.groot/objects/<hash>``. An object's name is the SHA-256 hash of its exact
bytes, so writing the same content twice is a no-op and every object can be
verified by rehashing it.
"""

import logging
from pathlib import Path
from typing import List

from groot.constants import MIN_PREFIX_LENGTH, OBJECTS_DIR
from groot.storage.atomic import write_atomic
from groot.storage.hasher import compute_hash, is_valid_hash

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdef")


class ObjectNotFoundError(Exception):
    """Raised when no object with the requested hash exists."""

    pass


class ObjectCorruptedError(Exception):
    """Raised when an object's hash doesn't match its content."""

    pass


class AmbiguousHashError(Exception):
    """Raised when an abbreviated hash matches more than one object."""

    pass


class ObjectStore:
    """Content-addressable storage for blobs and commit records.

    Storage layout:
        .groot/objects/<hash>      # Raw object bytes

    Attributes:
        groot_dir: Path to the .groot directory
        objects_dir: Path to the objects directory

    Example:
        >>> store = ObjectStore(Path(".groot"))
        >>> object_hash = store.put(b"hello\\n")
        >>> assert store.get(object_hash) == b"hello\\n"
    """

    def __init__(self, groot_dir: Path) -> None:
        """Initialize the object store.

        Args:
            groot_dir: Path to .groot directory

        Raises:
            ValueError: If groot_dir doesn't exist
        """
        self.groot_dir = Path(groot_dir)
        self.objects_dir = self.groot_dir / OBJECTS_DIR

        if not self.groot_dir.exists():
            raise ValueError(f"Groot directory not found: {groot_dir}")

    def put(self, content: bytes) -> str:
        """Store ``content`` and return its hash.

        If an object with the same hash already exists nothing is written.

        Args:
            content: Binary content to store

        Returns:
            SHA-256 hash of the content (64 hex characters)

        Raises:
            OSError: If write fails (permissions, disk full, etc.)
        """
        object_hash = compute_hash(content)

        if self.exists(object_hash):
            logger.debug("Object %s already stored", object_hash)
            return object_hash

        self.objects_dir.mkdir(parents=True, exist_ok=True)
        write_atomic(self._get_object_path(object_hash), content, prefix=".tmp_object_")
        logger.debug("Stored object %s (%d bytes)", object_hash, len(content))

        return object_hash

    def get(self, object_hash: str, verify: bool = True) -> bytes:
        """Read an object from the store.

        Args:
            object_hash: SHA-256 hash of the object (64 hex characters)
            verify: Whether to recompute and verify the hash (default: True)

        Returns:
            Binary content of the object

        Raises:
            ObjectNotFoundError: If the object doesn't exist or the hash is
                malformed
            ObjectCorruptedError: If hash verification fails
        """
        if not self.exists(object_hash):
            raise ObjectNotFoundError(f"Object not found: {object_hash}")

        content = self._get_object_path(object_hash).read_bytes()

        if verify:
            actual_hash = compute_hash(content)
            if actual_hash != object_hash:
                raise ObjectCorruptedError(
                    f"Object corrupted: expected {object_hash}, got {actual_hash}"
                )

        return content

    def exists(self, object_hash: str) -> bool:
        """Check if an object exists in the store.

        Malformed hashes never exist, so they can't be used to reach files
        outside the objects directory.
        """
        if not is_valid_hash(object_hash):
            return False
        return self._get_object_path(object_hash).is_file()

    def resolve(self, prefix: str) -> str:
        """Expand an abbreviated hash to the full hash of a stored object.

        Args:
            prefix: Full hash or a unique prefix of at least
                MIN_PREFIX_LENGTH hex characters

        Returns:
            The full 64-character hash

        Raises:
            ObjectNotFoundError: If no object matches
            AmbiguousHashError: If more than one object matches
        """
        prefix = prefix.strip().lower()

        if is_valid_hash(prefix):
            if not self.exists(prefix):
                raise ObjectNotFoundError(f"Object not found: {prefix}")
            return prefix

        if len(prefix) < MIN_PREFIX_LENGTH or not all(c in _HEX_DIGITS for c in prefix):
            raise ObjectNotFoundError(f"Object not found: {prefix}")

        matches = [h for h in self.list_objects() if h.startswith(prefix)]

        if not matches:
            raise ObjectNotFoundError(f"Object not found: {prefix}")
        if len(matches) > 1:
            raise AmbiguousHashError(
                f"Hash prefix {prefix} is ambiguous ({len(matches)} objects match)"
            )
        return matches[0]

    def list_objects(self) -> List[str]:
        """Return the hashes of all stored objects, sorted."""
        if not self.objects_dir.exists():
            return []
        return sorted(
            p.name for p in self.objects_dir.iterdir() if p.is_file() and is_valid_hash(p.name)
        )

    def _get_object_path(self, object_hash: str) -> Path:
        return self.objects_dir / object_hash
