"""HTTP client for the Neocities API.

Every method maps one-to-one onto an API endpoint and returns the raw
response body as text. Parsing the body is left to the caller (see
``manifest.parse_listing`` for the ``list`` endpoint).
"""

import logging
from pathlib import Path

import httpx

from errors import AuthError, NetworkError
from hashing import read_local

logger = logging.getLogger("neocities_sync.gateway")

DEFAULT_API_URL = "https://neocities.org/api/"
DEFAULT_TIMEOUT = 30.0


class NeocitiesClient:
    """Client for the Neocities API.

    Create one with a username and password, with an API key
    (``NeocitiesClient.with_key``), or without credentials
    (``NeocitiesClient.no_auth``). A client without credentials can only call
    ``info_no_auth``; every other method raises AuthError before sending
    anything.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.username = username
        self.password = password
        self.api_key = api_key
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"

        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def with_key(cls, api_key: str, **kwargs) -> "NeocitiesClient":
        return cls(api_key=api_key, **kwargs)

    @classmethod
    def no_auth(cls, **kwargs) -> "NeocitiesClient":
        return cls(**kwargs)

    @property
    def has_auth(self) -> bool:
        return bool(self.api_key) or self.username is not None

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "NeocitiesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _auth_kwargs(self) -> dict:
        if not self.has_auth:
            raise AuthError("this endpoint needs an API key or a username and password")
        if self.api_key:
            return {"headers": {"Authorization": f"Bearer {self.api_key}"}}
        return {"auth": httpx.BasicAuth(self.username, self.password or "")}

    def _send(self, method: str, endpoint: str, authenticated: bool = True, **kwargs) -> str:
        if authenticated:
            kwargs.update(self._auth_kwargs())

        logger.debug("%s %s%s", method, self.base_url, endpoint)
        try:
            response = self._http.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {endpoint} failed: {e}") from e
        return response.text

    def get(self, endpoint: str, params: dict | None = None) -> str:
        return self._send("GET", endpoint, params=params)

    def post_multipart(self, endpoint: str, parts: list[tuple[str, bytes]]) -> str:
        """POST files as multipart form data.

        Each ``(remote_path, data)`` pair is sent as a file whose field name
        and file name are the remote path.
        """
        files = [(remote, (remote, data)) for remote, data in parts]
        return self._send("POST", endpoint, files=files)

    def post_query(self, endpoint: str, query_pairs: list[tuple[str, str]]) -> str:
        return self._send("POST", endpoint, params=query_pairs)

    def info(self) -> str:
        """Get info about the authenticated user's site."""
        return self.get("info")

    def info_no_auth(self, site_name: str) -> str:
        """Get info about any site. Needs no credentials.

        An unknown site is not an HTTP failure on every server version, so
        the body may be an error document rather than site info.
        """
        return self._send("GET", "info", authenticated=False, params={"sitename": site_name})

    def list_all(self) -> str:
        """List every file and directory on the authenticated user's site."""
        return self.get("list")

    def list_path(self, path: str) -> str:
        """List files and directories under ``path``."""
        return self.get("list", params={"path": path})

    def upload(self, local_path: str | Path, remote_path: str) -> str:
        return self.upload_multiple([(local_path, remote_path)])

    def upload_multiple(self, paths: list[tuple[str | Path, str]]) -> str:
        """Upload local files, given as ``(local, remote)`` pairs.

        All files are read before the request is sent.

        Raises:
            LocalIOError: if any local file can't be read
        """
        files = [(read_local(local), remote) for local, remote in paths]
        return self.upload_bytes_multiple(files)

    def upload_bytes(self, data: bytes, remote_path: str) -> str:
        return self.upload_bytes_multiple([(data, remote_path)])

    def upload_bytes_multiple(self, files: list[tuple[bytes, str]]) -> str:
        """Upload in-memory data, given as ``(data, remote)`` pairs."""
        logger.info("Uploading %d file(s)", len(files))
        return self.post_multipart("upload", [(remote, data) for data, remote in files])

    def delete(self, path: str) -> str:
        return self.delete_multiple([path])

    def delete_multiple(self, paths: list[str]) -> str:
        logger.info("Deleting %d file(s)", len(paths))
        return self.post_query("delete", [("filenames[]", path) for path in paths])

    def get_key(self) -> str:
        """Get the API key for the authenticated user."""
        return self.get("key")
