"""Site manifest parsing for neocities-sync.

The ``list`` endpoint returns a flat listing of every item on the site:

    {
        "result": "success",
        "files": [
            {
                "path": "index.html",
                "is_directory": false,
                "size": 1023,
                "updated_at": "Sat, 13 Feb 2016 03:04:00 -0000",
                "sha1_hash": "c8aac06f343c962a24a7eb111aad739ff48b7fb1"
            },
            {
                "path": "not_found.html",
                ...
            },
            {
                "path": "images",
                "is_directory": true,
                "updated_at": "Sat, 13 Feb 2016 03:04:00 -0000"
            }
        ]
    }

Paths come back without a leading slash; the parsed entries always carry one.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from errors import ManifestParseError


@dataclass(frozen=True)
class RemoteFile:
    path: str
    last_modified: datetime
    content_hash: str
    size: int


@dataclass(frozen=True)
class RemoteDir:
    path: str
    last_modified: datetime


ManifestEntry = RemoteFile | RemoteDir


def is_file(entry: ManifestEntry) -> bool:
    return isinstance(entry, RemoteFile)


def is_dir(entry: ManifestEntry) -> bool:
    return isinstance(entry, RemoteDir)


def _require(record: dict, field: str, expected: type) -> Any:
    if field not in record:
        raise ManifestParseError(f"missing field {field!r}")
    value = record[field]
    # bool is a subclass of int, but a JSON true is not a size
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ManifestParseError(
            f"field {field!r} should be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 2822 date into an aware UTC datetime."""
    try:
        parsed = parsedate_to_datetime(value)
        # "-0000" means UTC with no source zone; parsedate returns it naive
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (TypeError, ValueError, OverflowError) as e:
        raise ManifestParseError(f"invalid updated_at {value!r}") from e


def parse_entry(record: Any) -> ManifestEntry:
    """Parse one raw listing record into a RemoteFile or RemoteDir.

    Raises:
        ManifestParseError: on a missing field, wrong JSON type, negative
            size, or unparseable date
    """
    if not isinstance(record, dict):
        raise ManifestParseError(f"listing entry should be an object, got {type(record).__name__}")

    is_directory = _require(record, "is_directory", bool)
    path = "/" + _require(record, "path", str)
    modified = parse_timestamp(_require(record, "updated_at", str))

    if is_directory:
        return RemoteDir(path=path, last_modified=modified)

    content_hash = _require(record, "sha1_hash", str)
    size = _require(record, "size", int)
    if size < 0:
        raise ManifestParseError(f"negative size {size} for {path}")

    return RemoteFile(
        path=path,
        last_modified=modified,
        content_hash=content_hash,
        size=size,
    )


def parse_listing(text: str) -> tuple[ManifestEntry, ...]:
    """Parse a ``list`` response body into manifest entries, in API order.

    The first malformed entry aborts the whole parse.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"listing is not valid JSON: {e.msg}") from e

    if not isinstance(document, dict):
        raise ManifestParseError("listing should be a JSON object")
    files = _require(document, "files", list)

    return tuple(parse_entry(record) for record in files)
