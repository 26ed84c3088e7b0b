"""Tests for loading older months."""

from datetime import date

import pytest

from daybook.history import HistoryLoader, load_month, recent_days, shift_month
from daybook.ports.document_store import DocumentStoreError


def test_recent_days_crosses_month_start():
    assert recent_days(date(2024, 3, 1)) == {date(2024, 3, 1), date(2024, 2, 29)}


class TestShiftMonth:
    def test_back_within_year(self):
        assert shift_month(date(2024, 3, 1), -1) == date(2024, 2, 1)

    def test_back_across_year(self):
        assert shift_month(date(2024, 2, 1), -3) == date(2023, 11, 1)

    def test_forward(self):
        assert shift_month(date(2024, 12, 1), 1) == date(2025, 1, 1)


class TestLoadMonth:
    def test_missing_month_is_empty(self, store):
        assert load_month(store, date(2024, 1, 1)) == []

    def test_unreadable_month_is_empty(self, store):
        def broken(filename):
            raise DocumentStoreError("boom")

        store.read = broken
        assert load_month(store, date(2024, 1, 1)) == []


@pytest.fixture
def filled_store(store):
    store.put_external("2024-03.md", "## 2024-03-15\nToday\n\n## 2024-03-02\nEarlier\n")
    store.put_external("2024-02.md", "## 2024-02-01\nFeb 1\n\n## 2024-02-20\nFeb 20\n")
    store.put_external("2023-12.md", "## 2023-12-24\nEve\n")
    store.put_external("2023-10.md", "## 2023-10-31\nHalloween\n")
    return store


class TestHistoryLoader:
    def test_current_month_excludes_recent_days(self, filled_store):
        filled_store.put_external(
            "2024-03.md", "## 2024-03-15\nToday\n\n## 2024-03-14\nYesterday\n\n## 2024-03-02\nEarlier\n"
        )
        loader = HistoryLoader(
            filled_store, anchor=date(2024, 3, 15), exclude=recent_days(date(2024, 3, 15))
        )
        assert [e.date for e in loader.current_month()] == [date(2024, 3, 2)]

    def test_current_month_without_exclusions(self, filled_store):
        loader = HistoryLoader(filled_store, anchor=date(2024, 3, 15))
        assert [e.date for e in loader.current_month()] == [date(2024, 3, 15), date(2024, 3, 2)]

    def test_yesterday_in_previous_month_is_hidden(self, filled_store):
        filled_store.put_external("2024-02.md", "## 2024-02-29\nLeap day\n\n## 2024-02-20\nFeb 20\n")
        loader = HistoryLoader(
            filled_store, anchor=date(2024, 3, 1), exclude=recent_days(date(2024, 3, 1))
        )
        assert [e.date for e in loader.load_older(1)] == [date(2024, 2, 20)]

    def test_load_older_newest_first(self, filled_store):
        loader = HistoryLoader(filled_store, anchor=date(2024, 3, 15))
        entries = loader.load_older(3)
        assert [e.date for e in entries] == [
            date(2024, 2, 20),
            date(2024, 2, 1),
            date(2023, 12, 24),
        ]
        assert loader.oldest_loaded == date(2023, 12, 1)

    def test_pages_move_backwards(self, filled_store):
        loader = HistoryLoader(filled_store, anchor=date(2024, 3, 15))
        loader.load_older(3)
        entries = loader.load_older(3)
        assert [e.date for e in entries] == [date(2023, 10, 31)]
        assert loader.oldest_loaded == date(2023, 9, 1)

    def test_zero_months(self, filled_store):
        loader = HistoryLoader(filled_store, anchor=date(2024, 3, 15))
        assert loader.load_older(0) == []
        assert loader.oldest_loaded == date(2024, 3, 1)
