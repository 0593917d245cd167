# src/cache/fingerprint.py — v3
"""Score cache keys for (query, document) pairs.

Each part is length-prefixed before hashing, so no choice of query or
document text can make two distinct pairs share the hashed pre-image.
"""

from __future__ import annotations

import hashlib


def score_cache_key(query: str, document: str) -> str:
    """SHA-256 fingerprint of a (query, document) pair."""
    hasher = hashlib.sha256()
    for part in (query, document):
        encoded = part.encode("utf-8")
        hasher.update(f"{len(encoded)}:".encode("ascii"))
        hasher.update(encoded)
    return hasher.hexdigest()
