"""Adapters - I/O implementations of ports."""

from .webdav_store import WebDAVDocumentStore
from .file_store import FileDocumentStore
from .apscheduler_timer import APSchedulerTimer, ScheduledTask
from .console_view import ConsoleView

__all__ = [
    "WebDAVDocumentStore",
    "FileDocumentStore",
    "APSchedulerTimer",
    "ScheduledTask",
    "ConsoleView",
]
