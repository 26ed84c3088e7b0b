"""Document storage interface."""

from dataclasses import dataclass
from typing import Protocol


class DocumentStoreError(Exception):
    """Base class for document store failures."""

    pass


class NotFound(DocumentStoreError):
    """Raised when the requested document does not exist."""

    pass


class WriteRejected(DocumentStoreError):
    """Raised when the store refuses or fails a write."""

    pass


@dataclass(frozen=True)
class StoredDocument:
    """A document's text plus the store's opaque version token."""

    content: str
    version_token: str | None = None


class DocumentStore(Protocol):
    """Interface for reading and writing month documents by filename."""

    def read(self, filename: str) -> StoredDocument:
        """Read a document. Raises NotFound if it does not exist."""
        ...

    def write(self, filename: str, content: str) -> None:
        """Write/overwrite a document. Raises WriteRejected on failure."""
        ...
