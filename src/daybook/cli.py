"""Daybook CLI - markdown journal on WebDAV."""

import json
import logging
import sys

import click

from .adapters.apscheduler_timer import APSchedulerTimer
from .adapters.console_view import ConsoleView
from .config import load_config
from .core.codec import Entry
from .core.sections import split_sections
from .ports.document_store import DocumentStoreError
from .workflows import create_controller, create_engine, create_history, get_store, make_clock


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _entry_json(entry: Entry) -> dict:
    sections = split_sections(entry.body)
    return {
        "date": entry.date.isoformat(),
        "title": entry.custom_title,
        "body": entry.body,
        "sections": [
            {"timestamp": s.timestamp, "text": s.text} for s in sections.sealed()
        ],
    }


@click.group()
@click.version_option(package_name="daybook")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Daybook - markdown journal on WebDAV."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def today(as_json: bool):
    """Show today's entry."""
    config = load_config()
    try:
        engine = create_engine(config)
        day = make_clock(config)().date()
        loaded = engine.load(day)
    except (DocumentStoreError, ValueError) as e:
        _fail(str(e))

    if as_json:
        entry = loaded.entry or Entry(date=day)
        click.echo(json.dumps(_entry_json(entry), indent=2))
        return

    header = f"{day.isoformat()} - {loaded.custom_title}" if loaded.custom_title else day.isoformat()
    click.secho(f"## {header}", bold=True)
    if loaded.entry is None:
        click.echo("No entry yet.")
        return

    view = ConsoleView()
    sections = loaded.sections
    view.render_committed_sections(sections.committed)
    view.render_live_text(sections.live_text)


@main.command()
@click.argument("text")
@click.option("--title", default=None, help="Custom title for the day")
@click.option(
    "--new-session", is_flag=True, help="Append as a new timestamped section"
)
def write(text: str, title: str | None, new_session: bool):
    """Write TEXT into today's entry."""
    config = load_config()
    try:
        engine = create_engine(config)
        day = make_clock(config)().date()
        loaded = engine.load(day)
        custom_title = loaded.custom_title if title is None else title
        result = engine.save(day, loaded.baseline, new_session, custom_title, text)
    except (DocumentStoreError, ValueError) as e:
        _fail(str(e))

    click.echo(result.message or "Nothing to save.")


@main.command()
@click.option("--months", type=int, default=None, help="How many older months to load")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def history(months: int | None, as_json: bool):
    """Show earlier entries, newest first."""
    config = load_config()
    try:
        loader = create_history(config)
    except ValueError as e:
        _fail(str(e))

    entries = loader.current_month()
    entries += loader.load_older(months if months is not None else config.history_months)

    if as_json:
        click.echo(json.dumps([_entry_json(e) for e in entries], indent=2))
        return

    if not entries:
        click.echo("No earlier entries.")
        return

    for entry in entries:
        click.secho(entry.header, bold=True)
        click.echo(entry.body)
        click.echo()


@main.command()
@click.option("--title", default=None, help="Custom title for the day")
def edit(title: str | None):
    """Write into today's entry interactively (Ctrl-D to finish)."""
    config = load_config()
    timer = APSchedulerTimer()
    try:
        controller = create_controller(config, timer, ConsoleView(), store=get_store(config))
    except ValueError as e:
        _fail(str(e))

    session = controller.open()
    click.secho(f"## {session.entry_date.isoformat()}", bold=True, err=True)

    timer.start()
    try:
        if title is not None:
            controller.on_title_changed(title)
        for line in click.get_text_stream("stdin"):
            current = controller.session.live_text
            line = line.rstrip("\n")
            controller.on_text_changed(f"{current}\n{line}" if current else line)
    except KeyboardInterrupt:
        click.echo(err=True)
    finally:
        controller.close(flush=True)
        timer.shutdown()
