"""Session controller - drives autosave, inactivity commit and day rollover.

One controller lives as long as an open editor. It owns a JournalSession
for the day being edited and turns edits into debounced saves through
the merge engine. Saves are serialized: a timer that fires while a save
is in flight waits for it to finish.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable

from daybook.core.sections import split_sections
from daybook.merge import Baseline, MergeEngine, SaveMode, SaveResult
from daybook.ports.document_store import DocumentStoreError
from daybook.ports.editor_view import EditorView
from daybook.ports.scheduler import CancelHandle, Scheduler

logger = logging.getLogger(__name__)

AUTOSAVE_DELAY = 1.0  # seconds after the last keystroke
SESSION_COMMIT_DELAY = 30 * 60.0  # seconds of inactivity


class SessionStatus(Enum):
    ACTIVE = "active"
    COMMITTED = "committed"


@dataclass
class JournalSession:
    """Editing state for the day currently open."""

    entry_date: date
    baseline: Baseline
    custom_title: str = ""
    live_text: str = ""
    last_edit_time: datetime | None = None
    committed: bool = False

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.COMMITTED if self.committed else SessionStatus.ACTIVE


class SessionController:
    """
    Turns editor events into merge engine calls.

    Timers go through a Scheduler so the controller never sleeps itself:
    every edit cancels and replaces the pending autosave and the pending
    inactivity commit.
    """

    def __init__(
        self,
        engine: MergeEngine,
        scheduler: Scheduler,
        view: EditorView,
        clock: Callable[[], datetime] = datetime.now,
        autosave_delay: float = AUTOSAVE_DELAY,
        commit_delay: float = SESSION_COMMIT_DELAY,
    ):
        self.engine = engine
        self.scheduler = scheduler
        self.view = view
        self.clock = clock
        self.autosave_delay = autosave_delay
        self.commit_delay = commit_delay
        self.session: JournalSession | None = None
        self._autosave: CancelHandle | None = None
        self._commit: CancelHandle | None = None
        self._lock = threading.RLock()
        self._generation = 0
        self._closed = False

    @property
    def status(self) -> SessionStatus:
        if self.session is None:
            return SessionStatus.ACTIVE
        return self.session.status

    def open(self) -> JournalSession:
        """Load today's entry and start a fresh session for it."""
        with self._lock:
            today = self.clock().date()
            try:
                loaded = self.engine.load(today)
            except DocumentStoreError as e:
                logger.error(f"Error loading entry for {today.isoformat()}: {e}")
                self.view.show_save_indicator(f"Failed to load entry: {e}")
                self.session = JournalSession(entry_date=today, baseline=Baseline())
                self.view.render_committed_sections([])
                self.view.render_live_text("")
                return self.session

            sections = loaded.sections
            self.session = JournalSession(
                entry_date=today,
                baseline=loaded.baseline,
                custom_title=loaded.custom_title,
                live_text=sections.live_text,
            )
            self.view.render_committed_sections(sections.committed)
            self.view.render_live_text(sections.live_text)
            return self.session

    def on_text_changed(self, text: str) -> None:
        with self._lock:
            self._require_session().live_text = text
            self._mark_activity()

    def on_title_changed(self, title: str) -> None:
        with self._lock:
            self._require_session().custom_title = title.strip()
            self._mark_activity()

    def save_now(self) -> SaveResult | None:
        """
        Save the live text; the debounced autosave task.

        Returns None when nothing was saved because the day rolled over,
        the save failed, or the controller is closed.
        """
        with self._lock:
            if self._closed:
                return None
            session = self._require_session()

            today = self.clock().date()
            if today != session.entry_date:
                self._roll_over()
                return None

            try:
                result = self.engine.save(
                    today,
                    session.baseline,
                    session.committed,
                    session.custom_title,
                    session.live_text,
                )
            except DocumentStoreError as e:
                logger.error(f"Error saving entry: {e}")
                self.view.show_save_indicator(f"Failed to save entry: {e}")
                return None

            if result.mode is SaveMode.SKIPPED:
                return result

            session.baseline = result.baseline
            if result.mode.appended:
                session.committed = False
                sections = result.sections
                session.live_text = sections.live_text
                self.view.render_committed_sections(sections.committed)
                self.view.render_live_text(sections.live_text)
            self.view.show_save_indicator(result.message)
            return result

    def commit_session(self) -> None:
        """
        Seal the live text as history after inactivity.

        The pending text is flushed first; the next edit then starts a
        new timestamped section.
        """
        with self._lock:
            if self._closed:
                return
            session = self._require_session()
            if not session.live_text.strip():
                return

            self._cancel(self._autosave)
            self._autosave = None
            result = self.save_now()
            if result is None or self.session is not session:
                return

            session.committed = True
            session.live_text = ""
            self.view.render_committed_sections(split_sections(session.baseline.content).sealed())
            self.view.render_live_text("")
            logger.info("Session committed after inactivity")

    def close(self, flush: bool = False) -> None:
        """Cancel both timers; optionally write a pending autosave first."""
        with self._lock:
            if self._closed:
                return
            pending = self._autosave is not None
            self._cancel(self._autosave)
            self._cancel(self._commit)
            self._autosave = None
            self._commit = None
            if flush and pending and self.session is not None:
                self.save_now()
            self._closed = True

    def _require_session(self) -> JournalSession:
        if self.session is None:
            raise RuntimeError("No open session. Call open() first.")
        return self.session

    def _mark_activity(self) -> None:
        self.session.last_edit_time = self.clock()
        self._generation += 1
        generation = self._generation
        self._cancel(self._autosave)
        self._cancel(self._commit)
        self._commit = self.scheduler.schedule_after(
            self.commit_delay, lambda: self._commit_fired(generation)
        )
        self._autosave = self.scheduler.schedule_after(
            self.autosave_delay, lambda: self._autosave_fired(generation)
        )

    def _autosave_fired(self, generation: int) -> None:
        with self._lock:
            # A newer edit owns the pending timer
            if generation != self._generation:
                return
            self._autosave = None
            self.save_now()

    def _commit_fired(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._commit = None
            self.commit_session()

    def _roll_over(self) -> None:
        old = self.session
        logger.info(f"Day boundary crossed, leaving {old.entry_date.isoformat()}")
        if old.live_text.strip():
            try:
                self.engine.append_entry(old.entry_date, old.custom_title, old.live_text)
            except DocumentStoreError as e:
                logger.error(f"Error saving to old date {old.entry_date.isoformat()}: {e}")
                self.view.show_save_indicator(f"Failed to save previous day: {e}")

        self._cancel(self._commit)
        self._commit = None
        self.open()

    @staticmethod
    def _cancel(handle: CancelHandle | None) -> None:
        if handle is not None:
            handle.cancel()
