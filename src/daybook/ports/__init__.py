"""Ports - interfaces/protocols for external dependencies."""

from .document_store import (
    DocumentStore,
    DocumentStoreError,
    NotFound,
    StoredDocument,
    WriteRejected,
)
from .scheduler import CancelHandle, Scheduler
from .editor_view import EditorView

__all__ = [
    "DocumentStore",
    "DocumentStoreError",
    "NotFound",
    "StoredDocument",
    "WriteRejected",
    "CancelHandle",
    "Scheduler",
    "EditorView",
]
