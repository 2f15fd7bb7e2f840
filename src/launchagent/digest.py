"""SHA-256 content digests for change detection."""

from __future__ import annotations

import hashlib
from pathlib import Path

DEFAULT_CHUNK_SIZE = 8192


def digest_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute the SHA-256 hex digest of a file.

    The file is read in chunks so large documents never sit in memory
    whole.

    Args:
        path: File to hash.
        chunk_size: Bytes read per iteration.

    Returns:
        Hex-encoded SHA-256 digest.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def digest_bytes(data: bytes) -> str:
    """Compute the SHA-256 hex digest of an in-memory buffer."""
    return hashlib.sha256(data).hexdigest()
