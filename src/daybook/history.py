"""Read-only loading of older journal months."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

from daybook.core.codec import Entry, month_filename, parse, sort_newest_first
from daybook.ports.document_store import DocumentStore, DocumentStoreError, NotFound

logger = logging.getLogger(__name__)

MONTHS_PER_PAGE = 3


def shift_month(month_start: date, months: int) -> date:
    """First day of the month `months` away (negative goes back)."""
    index = month_start.year * 12 + (month_start.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def recent_days(today: date) -> frozenset[date]:
    """Today and yesterday, which the editor view already covers."""
    return frozenset({today, today - timedelta(days=1)})


def load_month(store: DocumentStore, month_start: date) -> list[Entry]:
    """Entries of one month; a missing or unreadable month is empty."""
    filename = month_filename(month_start)
    try:
        document = store.read(filename)
    except NotFound:
        return []
    except DocumentStoreError as e:
        logger.warning(f"Skipping {filename}: {e}")
        return []
    return parse(document.content)


class HistoryLoader:
    """
    Pages backwards through month documents.

    Keeps a cursor at the oldest month loaded so far; each page reads
    the preceding months in parallel. Dates in `exclude` never show up.
    """

    def __init__(
        self,
        store: DocumentStore,
        anchor: date,
        exclude: frozenset[date] = frozenset(),
        max_workers: int = MONTHS_PER_PAGE,
    ):
        self.store = store
        self.anchor = anchor
        self.exclude = exclude
        self.oldest_loaded = anchor.replace(day=1)
        self.max_workers = max_workers

    def _visible(self, entries: list[Entry]) -> list[Entry]:
        return sort_newest_first([e for e in entries if e.date not in self.exclude])

    def current_month(self) -> list[Entry]:
        """Entries of the anchor month, newest first."""
        return self._visible(load_month(self.store, self.anchor.replace(day=1)))

    def load_older(self, count: int = MONTHS_PER_PAGE) -> list[Entry]:
        """Load the `count` months before the cursor, newest first."""
        if count <= 0:
            return []
        months = [shift_month(self.oldest_loaded, -i) for i in range(1, count + 1)]

        with ThreadPoolExecutor(max_workers=min(self.max_workers, count)) as pool:
            pages = list(pool.map(lambda m: load_month(self.store, m), months))

        self.oldest_loaded = months[-1]
        return self._visible([entry for page in pages for entry in page])
