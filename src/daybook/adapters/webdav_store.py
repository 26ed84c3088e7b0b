"""WebDAV adapter - HTTP client for month documents on a Nextcloud server."""

import logging
from urllib.parse import quote

import requests

from daybook.config import Config, load_config
from daybook.ports.document_store import (
    DocumentStoreError,
    NotFound,
    StoredDocument,
    WriteRejected,
)

logger = logging.getLogger(__name__)

DAV_FILES_PATH = "/remote.php/dav/files"


def files_url(server_url: str, username: str) -> str:
    """WebDAV root of a user's files on a Nextcloud server."""
    return f"{server_url.rstrip('/')}{DAV_FILES_PATH}/{quote(username)}"


class WebDAVDocumentStore:
    """
    WebDAV document storage.

    Implements DocumentStore protocol. GET/PUT on one folder, with the
    response ETag as version token. No business logic - just I/O.
    """

    def __init__(
        self,
        server_url: str,
        username: str,
        folder: str = "",
        password: str = "",
        access_token: str = "",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.base_url = files_url(server_url, username)
        self.folder = folder.strip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        if access_token:
            self._session.headers["Authorization"] = f"Bearer {access_token}"
        else:
            self._session.auth = (username, password)

    @classmethod
    def from_config(cls, config: Config | None = None) -> "WebDAVDocumentStore":
        config = config or load_config()
        if not config.webdav_url or not config.webdav_username:
            raise ValueError(
                "WEBDAV_URL and WEBDAV_USERNAME must be set in daybook.conf"
            )
        return cls(
            server_url=config.webdav_url,
            username=config.webdav_username,
            folder=config.webdav_folder,
            password=config.webdav_password,
            access_token=config.webdav_access_token,
            timeout=config.request_timeout_seconds,
        )

    def url_for(self, filename: str) -> str:
        """Full URL of a document in the configured folder."""
        path = f"{self.folder}/{filename}" if self.folder else filename
        return f"{self.base_url}/{quote(path)}"

    def read(self, filename: str) -> StoredDocument:
        """Read a document. Raises NotFound if it does not exist."""
        try:
            resp = self._session.get(self.url_for(filename), timeout=self.timeout)
        except requests.RequestException as e:
            raise DocumentStoreError(f"Failed to load {filename}: {e}") from e

        if resp.status_code == 404:
            raise NotFound(f"File not found: {filename}")
        if not resp.ok:
            raise DocumentStoreError(f"Failed to load {filename}: HTTP {resp.status_code}")

        # Documents are always UTF-8, whatever the server claims
        resp.encoding = "utf-8"
        return StoredDocument(content=resp.text, version_token=resp.headers.get("ETag"))

    def write(self, filename: str, content: str) -> None:
        """Write/overwrite a document. Raises WriteRejected on failure."""
        try:
            resp = self._session.put(
                self.url_for(filename),
                data=content.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"PUT {filename} failed: {e}")
            raise WriteRejected(f"Failed to save file: {filename}") from e

        if not resp.ok:
            logger.error(f"PUT {filename} rejected: HTTP {resp.status_code}")
            raise WriteRejected(f"Failed to save file: {filename} (HTTP {resp.status_code})")
