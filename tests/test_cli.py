"""Tests for the command line interface."""

import json
from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from daybook.cli import main
from daybook.config import Config
from daybook.history import shift_month


@pytest.fixture
def journal_dir(tmp_path, monkeypatch):
    config = Config(storage_backend="local", local_dir=str(tmp_path))
    monkeypatch.setattr("daybook.cli.load_config", lambda: config)
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


def month_file(journal_dir):
    return journal_dir / f"{date.today():%Y-%m}.md"


class TestWrite:
    def test_creates_todays_entry(self, runner, journal_dir):
        result = runner.invoke(main, ["write", "Hello"])

        assert result.exit_code == 0
        assert "Saved" in result.output
        assert month_file(journal_dir).read_text() == f"## {date.today().isoformat()}\nHello\n"

    def test_new_session_appends(self, runner, journal_dir):
        runner.invoke(main, ["write", "Hello"])
        result = runner.invoke(main, ["write", "--new-session", "Again"])

        assert "new session started" in result.output
        assert "Hello\n\n*" in month_file(journal_dir).read_text()

    def test_title(self, runner, journal_dir):
        runner.invoke(main, ["write", "--title", "Trip", "Hello"])
        assert f"## {date.today().isoformat()} - Trip\n" in month_file(journal_dir).read_text()

    def test_empty_text(self, runner, journal_dir):
        result = runner.invoke(main, ["write", "   "])
        assert "Nothing to save." in result.output
        assert not month_file(journal_dir).exists()


class TestToday:
    def test_no_entry(self, runner, journal_dir):
        result = runner.invoke(main, ["today"])
        assert result.exit_code == 0
        assert "No entry yet." in result.output

    def test_json(self, runner, journal_dir):
        runner.invoke(main, ["write", "Hello"])
        result = runner.invoke(main, ["today", "--json"])

        data = json.loads(result.output)
        assert data["date"] == date.today().isoformat()
        assert data["sections"] == [{"timestamp": None, "text": "Hello"}]


class TestHistory:
    def test_empty(self, runner, journal_dir):
        result = runner.invoke(main, ["history"])
        assert result.exit_code == 0
        assert "No earlier entries." in result.output

    def test_lists_previous_month(self, runner, journal_dir):
        previous = shift_month(date.today().replace(day=1), -1)
        (journal_dir / f"{previous:%Y-%m}.md").write_text(f"## {previous.isoformat()}\nEarlier\n")

        result = runner.invoke(main, ["history", "--json", "--months", "1"])

        data = json.loads(result.output)
        assert [e["date"] for e in data] == [previous.isoformat()]
        assert data[0]["body"] == "Earlier"

    def test_hides_yesterday(self, runner, journal_dir):
        yesterday = date.today() - timedelta(days=1)
        (journal_dir / f"{yesterday:%Y-%m}.md").write_text(f"## {yesterday.isoformat()}\nLast night\n")

        result = runner.invoke(main, ["history", "--json", "--months", "1"])

        assert json.loads(result.output) == []

    def test_zero_months_shows_current_month_only(self, runner, journal_dir):
        previous = shift_month(date.today().replace(day=1), -1)
        (journal_dir / f"{previous:%Y-%m}.md").write_text(f"## {previous.isoformat()}\nEarlier\n")
        result = runner.invoke(main, ["history", "--json", "--months", "0"])
        assert json.loads(result.output) == []


class TestEdit:
    def test_lines_become_entry(self, runner, journal_dir):
        result = runner.invoke(main, ["edit"], input="First line\nSecond line\n")

        assert result.exit_code == 0
        content = month_file(journal_dir).read_text()
        assert "First line\nSecond line" in content


class TestErrors:
    def test_webdav_not_configured(self, runner, monkeypatch):
        monkeypatch.setattr("daybook.cli.load_config", lambda: Config())
        result = runner.invoke(main, ["today"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    @pytest.mark.parametrize("command", ["today", "history", "edit"])
    def test_unknown_timezone(self, runner, tmp_path, monkeypatch, command):
        config = Config(storage_backend="local", local_dir=str(tmp_path), timezone="Mars/Olympus")
        monkeypatch.setattr("daybook.cli.load_config", lambda: config)
        result = runner.invoke(main, [command], input="")
        assert result.exit_code == 1
        assert "Error: Unknown timezone: Mars/Olympus" in result.output
