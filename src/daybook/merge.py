"""Merge engine - the single writer of a day's entry.

Every save reads the month document fresh, compares its version token
with the baseline taken at load time, and either rewrites the live
section in place or appends the text as a new timestamped section.
Concurrent edits are reconciled by appending, never by interleaving.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable

from daybook.core.codec import Entry, month_filename, parse_one, serialize
from daybook.core.sections import SplitBody, append_section, replace_live, split_sections
from daybook.ports.document_store import DocumentStore, NotFound, StoredDocument

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%H:%M"


class SaveMode(Enum):
    """Which branch a save took."""

    SKIPPED = "skipped"  # Nothing to write
    REPLACED = "replaced"  # Same-session edit of the live section
    NEW_SESSION = "new_session"  # Session was committed, appended
    MERGED = "merged"  # Document changed elsewhere, appended

    @property
    def appended(self) -> bool:
        return self in (SaveMode.NEW_SESSION, SaveMode.MERGED)


SAVE_MESSAGES = {
    SaveMode.SKIPPED: "",
    SaveMode.REPLACED: "Saved",
    SaveMode.NEW_SESSION: "Saved (new session started)",
    SaveMode.MERGED: "Saved (merged with external changes)",
}


@dataclass(frozen=True)
class Baseline:
    """Entry body and version token as last loaded or written."""

    content: str = ""
    version_token: str | None = None


@dataclass
class LoadedEntry:
    """Result of loading a day's entry for editing."""

    baseline: Baseline
    entry: Entry | None = None

    @property
    def custom_title(self) -> str:
        return self.entry.custom_title if self.entry else ""

    @property
    def sections(self) -> SplitBody:
        return split_sections(self.baseline.content)


@dataclass
class SaveResult:
    """Outcome of a save: the new baseline and the branch taken."""

    baseline: Baseline
    mode: SaveMode
    entry: Entry | None = None

    @property
    def message(self) -> str:
        return SAVE_MESSAGES[self.mode]

    @property
    def sections(self) -> SplitBody:
        return split_sections(self.baseline.content)


class MergeEngine:
    """
    Reconciles local edits against the possibly-changed month document.

    The engine holds no session state; callers pass the baseline and the
    session-committed flag on each call and keep what comes back.
    """

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def read_month(self, target_date: date) -> StoredDocument:
        """Read the month document for a date; a missing file reads as empty."""
        try:
            return self.store.read(month_filename(target_date))
        except NotFound:
            return StoredDocument(content="", version_token=None)

    def load(self, target_date: date) -> LoadedEntry:
        """Load a day's entry and take a fresh baseline."""
        document = self.read_month(target_date)
        entry = parse_one(document.content, target_date)
        body = entry.body if entry else ""
        return LoadedEntry(
            baseline=Baseline(content=body, version_token=document.version_token),
            entry=entry,
        )

    def save(
        self,
        today: date,
        baseline: Baseline,
        session_committed: bool,
        custom_title: str,
        live_text: str,
    ) -> SaveResult:
        """
        Write today's live text, appending or replacing as needed.

        Raises DocumentStoreError (other than NotFound) from the store.
        """
        text = live_text.strip()
        if not text:
            return SaveResult(baseline=baseline, mode=SaveMode.SKIPPED)

        document = self.read_month(today)
        external_change = (
            baseline.version_token is not None
            and baseline.version_token != document.version_token
        )

        if external_change:
            mode = SaveMode.MERGED
        elif session_committed:
            mode = SaveMode.NEW_SESSION
        else:
            mode = SaveMode.REPLACED

        entry = parse_one(document.content, today)
        existing = entry.body if entry else ""
        if mode.appended:
            body = append_section(existing, self._timestamp(), text)
            logger.info(f"Appending to {today.isoformat()} ({mode.value})")
        else:
            body = replace_live(existing, text)

        return self._write(today, document, custom_title, body, mode)

    def append_entry(self, target_date: date, custom_title: str, live_text: str) -> SaveResult:
        """Append text to any date's entry as a new timestamped section."""
        text = live_text.strip()
        if not text:
            return SaveResult(baseline=Baseline(), mode=SaveMode.SKIPPED)

        document = self.read_month(target_date)
        entry = parse_one(document.content, target_date)
        body = append_section(entry.body if entry else "", self._timestamp(), text)
        return self._write(target_date, document, custom_title, body, SaveMode.NEW_SESSION)

    def _timestamp(self) -> str:
        return self.clock().strftime(TIMESTAMP_FORMAT)

    def _write(
        self,
        target_date: date,
        document: StoredDocument,
        custom_title: str,
        body: str,
        mode: SaveMode,
    ) -> SaveResult:
        filename = month_filename(target_date)
        self.store.write(filename, serialize(document.content, target_date, custom_title, body))

        # Re-read for the token the store assigned to our write
        written = self.read_month(target_date)
        entry = parse_one(written.content, target_date)
        return SaveResult(
            baseline=Baseline(
                content=entry.body if entry else body,
                version_token=written.version_token,
            ),
            mode=mode,
            entry=entry,
        )
