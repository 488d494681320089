"""Storage layer for Groot.

This module provides content hashing, the content-addressable object store
and the HEAD pointer.
"""

from groot.storage.hasher import compute_hash, is_valid_hash
from groot.storage.head import HeadRef
from groot.storage.object_store import (
    AmbiguousHashError,
    ObjectCorruptedError,
    ObjectNotFoundError,
    ObjectStore,
)

__all__ = [
    "compute_hash",
    "is_valid_hash",
    "HeadRef",
    "ObjectStore",
    "ObjectNotFoundError",
    "ObjectCorruptedError",
    "AmbiguousHashError",
]
