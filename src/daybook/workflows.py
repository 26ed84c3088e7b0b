"""Shared wiring between the CLI and the editing core.

Resolves the storage backend, clock and timers from config so that
commands only deal with engines and controllers.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .adapters.file_store import FileDocumentStore
from .adapters.webdav_store import WebDAVDocumentStore
from .config import DATA_DIR, Config
from .history import HistoryLoader, recent_days
from .merge import MergeEngine
from .ports.document_store import DocumentStore
from .ports.editor_view import EditorView
from .ports.scheduler import Scheduler
from .session import SessionController


def get_store(config: Config) -> DocumentStore:
    """Resolve the document store backend from config."""
    if config.storage_backend == "local":
        if config.local_dir:
            return FileDocumentStore(Path(config.local_dir).expanduser())
        return FileDocumentStore(DATA_DIR)
    return WebDAVDocumentStore.from_config(config)


def make_clock(config: Config) -> Callable[[], datetime]:
    """Wall clock in the configured timezone, or local time."""
    if config.timezone:
        try:
            tz = ZoneInfo(config.timezone)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone: {config.timezone}") from e
        return lambda: datetime.now(tz)
    return datetime.now


def create_engine(config: Config, store: DocumentStore | None = None) -> MergeEngine:
    return MergeEngine(store or get_store(config), clock=make_clock(config))


def create_controller(
    config: Config,
    scheduler: Scheduler,
    view: EditorView,
    store: DocumentStore | None = None,
) -> SessionController:
    """Build a session controller with config-driven timings."""
    return SessionController(
        engine=create_engine(config, store),
        scheduler=scheduler,
        view=view,
        clock=make_clock(config),
        autosave_delay=config.autosave_delay_seconds,
        commit_delay=config.session_commit_seconds,
    )


def create_history(config: Config, store: DocumentStore | None = None) -> HistoryLoader:
    today = make_clock(config)().date()
    return HistoryLoader(store or get_store(config), anchor=today, exclude=recent_days(today))
