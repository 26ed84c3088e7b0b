"""File-based document storage adapter - the local fallback backend."""

import hashlib
import logging
import os
import stat
from pathlib import Path
from tempfile import NamedTemporaryFile

from daybook.ports.document_store import (
    DocumentStoreError,
    NotFound,
    StoredDocument,
    WriteRejected,
)

logger = logging.getLogger(__name__)

NEW_FILE_MODE = 0o644


class FileDocumentStore:
    """
    File-based document storage.

    Implements DocumentStore protocol. Each key is a file in one
    directory; the version token is a digest of the content.
    """

    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir).expanduser()
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, filename: str) -> Path:
        """Get the file path for a document name."""
        name = Path(filename).name
        if not name or name != filename:
            raise ValueError(f"Invalid document name: {filename!r}")
        return self.root_dir / name

    @staticmethod
    def _version_token(content: str) -> str:
        return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]

    @staticmethod
    def _file_mode(path: Path) -> int:
        try:
            return stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            return NEW_FILE_MODE

    def read(self, filename: str) -> StoredDocument:
        """Read a document. Raises NotFound if it does not exist."""
        path = self._path_for(filename)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFound(f"File not found: {filename}")
        except OSError as e:
            raise DocumentStoreError(f"Failed to read file: {filename}") from e
        return StoredDocument(content=content, version_token=self._version_token(content))

    def write(self, filename: str, content: str) -> None:
        """Write/overwrite a document atomically."""
        path = self._path_for(filename)
        tmp = None
        try:
            tmp = NamedTemporaryFile(
                "w", encoding="utf-8", dir=str(self.root_dir), delete=False, suffix=".tmp"
            )
            with tmp:
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            # Temp files are created 0600; keep the document's own mode
            os.chmod(tmp.name, self._file_mode(path))
            os.replace(tmp.name, path)
            tmp = None
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise WriteRejected(f"Failed to save file: {filename}") from e
        finally:
            if tmp is not None and os.path.exists(tmp.name):
                os.unlink(tmp.name)
