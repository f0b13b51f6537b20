"""SHA-1 content hashing, matching the digests Neocities reports."""

import hashlib
from pathlib import Path

from errors import LocalIOError


def hash_of_bytes(data: bytes) -> str:
    """Return the lowercase hex SHA-1 digest of ``data`` (40 chars)."""
    return hashlib.sha1(data).hexdigest()


def read_local(path: str | Path) -> bytes:
    """Read a whole local file into memory.

    Raises:
        LocalIOError: if the file cannot be opened or read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise LocalIOError(f"cannot read {path}: {e.strerror or e}") from e


def hash_of_local(path: str | Path) -> str:
    """Return the SHA-1 digest of a local file's contents."""
    return hash_of_bytes(read_local(path))


def hashes_match(local_hash: str, remote_hash: str) -> bool:
    """Compare two hex digests, ignoring case."""
    return local_hash.lower() == remote_hash.lower()
