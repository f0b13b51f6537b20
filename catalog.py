"""In-memory catalog of a remote site, and local-vs-remote change detection.

Neocities reports a SHA-1 for every file in its site listing, so deciding
whether a local file needs uploading only takes the listing and a local
hash, never a download of the remote copy.
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from hashing import hash_of_bytes, hash_of_local, hashes_match
from manifest import ManifestEntry, RemoteDir, RemoteFile, is_dir, is_file, parse_listing

logger = logging.getLogger("neocities_sync.catalog")


class ListingSource(Protocol):
    def list_all(self) -> str: ...


class SiteCatalog:
    """The flat file listing of the authenticated user's site.

    Paths always start with ``/`` and lookups are exact and case-sensitive.
    The catalog keeps a reference to the client it was loaded with so it can
    be refreshed; entries are only ever replaced as a whole.
    """

    def __init__(self, gateway: ListingSource, entries: tuple[ManifestEntry, ...] = ()):
        self.gateway = gateway
        self._install(tuple(entries))

    @classmethod
    def load(cls, gateway: ListingSource) -> "SiteCatalog":
        """Fetch and parse the full site listing.

        Raises:
            NetworkError: if the request fails
            AuthError: if the client has no credentials
            ManifestParseError: if the listing is malformed
        """
        catalog = cls(gateway)
        catalog.refresh()
        return catalog

    def refresh(self) -> None:
        """Re-fetch the listing and replace all entries.

        On any error the current entries are left as they were.
        """
        logger.debug("Fetching site listing...")
        entries = parse_listing(self.gateway.list_all())
        self._install(entries)
        logger.debug("Site listing has %d entries", len(entries))

    def _install(self, entries: tuple[ManifestEntry, ...]) -> None:
        index: dict[str, ManifestEntry] = {}
        for entry in entries:
            # first occurrence wins, same as a front-to-back scan
            index.setdefault(entry.path, entry)
        self._entries = entries
        self._index = index

    @property
    def entries(self) -> tuple[ManifestEntry, ...]:
        return self._entries

    @property
    def files(self) -> list[RemoteFile]:
        return [e for e in self._entries if is_file(e)]

    @property
    def dirs(self) -> list[RemoteDir]:
        return [e for e in self._entries if is_dir(e)]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def lookup(self, path: str) -> ManifestEntry | None:
        return self._index.get(path)

    def lookup_file(self, path: str) -> RemoteFile | None:
        entry = self.lookup(path)
        return entry if isinstance(entry, RemoteFile) else None

    def lookup_dir(self, path: str) -> RemoteDir | None:
        entry = self.lookup(path)
        return entry if isinstance(entry, RemoteDir) else None

    def exists(self, path: str) -> bool:
        return self.lookup(path) is not None

    def file_exists(self, path: str) -> bool:
        return self.lookup_file(path) is not None

    def dir_exists(self, path: str) -> bool:
        return self.lookup_dir(path) is not None

    def hash_changed(self, local_hash: str, remote_path: str) -> bool:
        """True if there is no remote file at ``remote_path`` or its hash differs."""
        remote = self.lookup_file(remote_path)
        if remote is None:
            return True
        return not hashes_match(local_hash, remote.content_hash)

    def file_changed_local(self, local_path: str | Path, remote_path: str) -> bool:
        """Compare a local file against the remote copy at ``remote_path``.

        Returns True if the remote file is missing or differs.

        Raises:
            LocalIOError: if the local file can't be read
        """
        changed = self.hash_changed(hash_of_local(local_path), remote_path)
        logger.debug("%s -> %s: %s", local_path, remote_path, "changed" if changed else "unchanged")
        return changed

    def bytes_changed(self, data: bytes, remote_path: str) -> bool:
        """Compare in-memory bytes against the remote copy at ``remote_path``."""
        return self.hash_changed(hash_of_bytes(data), remote_path)
