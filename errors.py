"""Error kinds raised by neocities-sync."""

from enum import Enum


class ErrorKind(Enum):
    NETWORK = "network"
    MANIFEST_PARSE = "manifest_parse"
    LOCAL_IO = "local_io"
    AUTH = "auth"


class NeocitiesError(Exception):
    """Base for every error the client surfaces.

    The set of concrete errors is closed: NetworkError, ManifestParseError,
    LocalIOError and AuthError. Callers can catch NeocitiesError and branch
    on ``kind`` instead of on the subclass.
    """

    kind: ErrorKind

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.kind.value} error: {message}" if message else f"{self.kind.value} error"


class NetworkError(NeocitiesError):
    """Transport or HTTP status failure from the API."""

    kind = ErrorKind.NETWORK


class ManifestParseError(NeocitiesError):
    """The site list response was malformed or did not match the schema."""

    kind = ErrorKind.MANIFEST_PARSE


class LocalIOError(NeocitiesError):
    """A local file could not be read."""

    kind = ErrorKind.LOCAL_IO


class AuthError(NeocitiesError):
    """An authenticated endpoint was called without credentials."""

    kind = ErrorKind.AUTH
