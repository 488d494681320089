"""Content hashing for Groot objects."""

import hashlib

from groot.constants import HASH_ALGORITHM, HASH_LENGTH

_HEX_DIGITS = frozenset("0123456789abcdef")


def compute_hash(content: bytes) -> str:
    """Compute the hex digest identifying ``content``.

    Args:
        content: Binary data to hash

    Returns:
        Lowercase hex string (64 characters for SHA-256)
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(content)
    return hasher.hexdigest()


def is_valid_hash(value: object) -> bool:
    """Check that ``value`` looks like a full object hash."""
    if not isinstance(value, str) or len(value) != HASH_LENGTH:
        return False
    return all(c in _HEX_DIGITS for c in value)
