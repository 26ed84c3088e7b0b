"""Editor presentation interface."""

from typing import Protocol

from daybook.core.sections import Section


class EditorView(Protocol):
    """What the session controller drives on screen."""

    def render_committed_sections(self, sections: list[Section]) -> None:
        """Show the read-only history of today's entry."""
        ...

    def render_live_text(self, text: str) -> None:
        """Replace the editable text."""
        ...

    def show_save_indicator(self, message: str) -> None:
        """Flash a short save status message."""
        ...
