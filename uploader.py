"""Publish a local site directory, uploading only what changed."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from catalog import SiteCatalog
from gateway import NeocitiesClient

logger = logging.getLogger("neocities_sync.uploader")


@dataclass
class UploadResult:
    total_files: int
    skipped_files: int
    uploaded_files: int
    deleted_files: int = 0
    dry_run: bool = False


def is_hidden(parts: tuple[str, ...] | list[str]) -> bool:
    """True if any path component is a dotfile or dot-directory."""
    return any(part.startswith(".") for part in parts)


def collect_local_files(site_dir: Path) -> list[tuple[Path, str]]:
    """List every publishable file under ``site_dir``.

    Hidden files and anything inside hidden directories are skipped.

    Returns:
        sorted list of (local_path, remote_path) tuples; remote paths start with "/"
    """
    local_files: list[tuple[Path, str]] = []

    for local_path in sorted(site_dir.rglob("*")):
        relative = local_path.relative_to(site_dir)
        if is_hidden(relative.parts):
            continue
        if not local_path.is_file():
            continue
        local_files.append((local_path, "/" + relative.as_posix()))

    return local_files


def get_files_to_upload(
    catalog: SiteCatalog,
    local_files: list[tuple[Path, str]],
    on_progress: Callable[[int, int], None] | None = None,
) -> list[tuple[Path, str]]:
    """Determine which local files differ from the remote site.

    A file needs uploading when the site has no file at its remote path or
    the remote SHA-1 differs from the local one.
    """
    to_upload: list[tuple[Path, str]] = []
    total = len(local_files)

    for i, (local_path, remote_path) in enumerate(local_files):
        if catalog.file_changed_local(local_path, remote_path):
            to_upload.append((local_path, remote_path))
        if on_progress:
            on_progress(i + 1, total)

    return to_upload


def get_remote_orphans(
    catalog: SiteCatalog,
    local_files: list[tuple[Path, str]],
) -> list[str]:
    """Remote file paths that have no local counterpart.

    Hidden remote paths are skipped, matching collect_local_files.
    """
    local_remotes = {remote for _, remote in local_files}
    return [
        f.path
        for f in catalog.files
        if f.path not in local_remotes and not is_hidden(f.path.lstrip("/").split("/"))
    ]


def _batches(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


def publish_site(
    client: NeocitiesClient,
    catalog: SiteCatalog,
    site_dir: Path,
    batch_size: int = 20,
    prune: bool = False,
    dry_run: bool = False,
    on_verify_start: Callable[[int], None] | None = None,
    on_verify_progress: Callable[[int, int], None] | None = None,
    on_verify_complete: Callable[[int], None] | None = None,
) -> UploadResult:
    """Upload changed files from ``site_dir`` and optionally delete orphans.

    The catalog is refreshed after any upload or delete so it matches the
    site again. Errors from the client propagate; files uploaded by earlier
    batches stay uploaded.

    Returns UploadResult with statistics.
    """
    local_files = collect_local_files(site_dir)
    total_files = len(local_files)

    if on_verify_start:
        on_verify_start(total_files)

    to_upload = get_files_to_upload(catalog, local_files, on_progress=on_verify_progress)
    orphans = get_remote_orphans(catalog, local_files) if prune else []

    if on_verify_complete:
        on_verify_complete(len(to_upload))

    for _, remote_path in to_upload:
        logger.debug("changed: %s", remote_path)
    for remote_path in orphans:
        logger.debug("orphan: %s", remote_path)

    result = UploadResult(
        total_files=total_files,
        skipped_files=total_files - len(to_upload),
        uploaded_files=len(to_upload),
        deleted_files=len(orphans),
        dry_run=dry_run,
    )

    if dry_run or not (to_upload or orphans):
        return result

    # The API takes paths relative to the site root
    for batch in _batches(to_upload, batch_size):
        client.upload_multiple([(local, remote.lstrip("/")) for local, remote in batch])

    for batch in _batches(orphans, batch_size):
        client.delete_multiple([remote.lstrip("/") for remote in batch])

    catalog.refresh()
    return result
