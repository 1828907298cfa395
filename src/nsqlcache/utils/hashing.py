"""Hashing utilities for cache key generation."""

import hashlib


def hash_string(value: str) -> str:
    """Create a deterministic, fixed length hash of a string.

    Used to bound the length of canonical cache keys. Collisions are
    possible in theory and accepted.

    Args:
        value: The string to hash.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    return hashlib.sha256(value.encode()).hexdigest()[:16]
