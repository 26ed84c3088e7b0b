"""Console adapter - renders the editor state in a terminal."""

import click

from daybook.core.sections import Section


class ConsoleView:
    """
    Terminal editor view.

    Implements EditorView protocol with click.echo.
    """

    def render_committed_sections(self, sections: list[Section]) -> None:
        for section in sections:
            if section.timestamp:
                click.secho(f"[{section.timestamp}]", fg="cyan")
            click.echo(section.text)
            click.echo()

    def render_live_text(self, text: str) -> None:
        if text:
            click.secho(text, bold=True)

    def show_save_indicator(self, message: str) -> None:
        if not message:
            return
        fg = "red" if message.startswith("Failed") else "green"
        click.secho(f"  ({message})", fg=fg, err=True)
