"""Shared fakes for engine and controller tests."""

from datetime import datetime

import pytest

from daybook.ports.document_store import NotFound, StoredDocument, WriteRejected


class InMemoryStore:
    """Document store keeping files in a dict with a counter as ETag."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files: dict[str, str] = {}
        self.versions: dict[str, int] = {}
        self.writes: list[tuple[str, str]] = []
        self.reject_writes = False
        for name, content in (files or {}).items():
            self.put_external(name, content)

    def read(self, filename: str) -> StoredDocument:
        if filename not in self.files:
            raise NotFound(f"File not found: {filename}")
        return StoredDocument(self.files[filename], f"v{self.versions[filename]}")

    def write(self, filename: str, content: str) -> None:
        if self.reject_writes:
            raise WriteRejected(f"Failed to save file: {filename}")
        self.writes.append((filename, content))
        self.put_external(filename, content)

    def put_external(self, filename: str, content: str) -> None:
        """Simulate another device writing the file."""
        self.files[filename] = content
        self.versions[filename] = self.versions.get(filename, 0) + 1


class ManualScheduler:
    """Scheduler that only runs tasks when the test says so."""

    def __init__(self):
        self.pending: list["ManualTask"] = []

    def schedule_after(self, delay, task):
        handle = ManualTask(self, delay, task)
        self.pending.append(handle)
        return handle

    def run_pending(self, max_delay: float | None = None) -> None:
        """Run due tasks in scheduling order."""
        due = [t for t in self.pending if max_delay is None or t.delay <= max_delay]
        for handle in due:
            if handle in self.pending:
                self.pending.remove(handle)
                handle.task()


class ManualTask:
    def __init__(self, scheduler: ManualScheduler, delay: float, task):
        self.scheduler = scheduler
        self.delay = delay
        self.task = task
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        if self in self.scheduler.pending:
            self.scheduler.pending.remove(self)


class RecordingView:
    """EditorView that remembers what was rendered."""

    def __init__(self):
        self.committed = []
        self.live_text = None
        self.messages: list[str] = []

    def render_committed_sections(self, sections):
        self.committed = list(sections)

    def render_live_text(self, text):
        self.live_text = text

    def show_save_indicator(self, message):
        self.messages.append(message)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 14, 5))
