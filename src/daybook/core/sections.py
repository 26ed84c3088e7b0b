"""Split an entry body into committed sections and the live section.

Committed sections are introduced by a timestamp marker line:

    earlier text

    *14:05*
    appended text

A marker only counts when it opens the body or follows a blank line.
The run after the last marker is the live section, still editable.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Section:
    """A contiguous chunk of an entry body."""

    text: str
    timestamp: str | None = None


@dataclass
class SplitBody:
    """An entry body decomposed for editing."""

    committed: list[Section] = field(default_factory=list)
    live_text: str = ""
    live_timestamp: str | None = None

    def sealed(self) -> list[Section]:
        """All sections, treating the live one as committed too."""
        if not self.live_text:
            return list(self.committed)
        return self.committed + [Section(self.live_text, self.live_timestamp)]


def format_marker(timestamp: str) -> str:
    return f"*{timestamp}*"


def parse_marker(line: str) -> str | None:
    """Return HH:MM if the line is a timestamp marker, else None."""
    line = line.strip()
    if len(line) != 7 or line[0] != "*" or line[6] != "*" or line[3] != ":":
        return None
    digits = line[1:3] + line[4:6]
    if not digits.isdigit():
        return None
    return line[1:6]


def _marker_indexes(lines: list[str]) -> list[int]:
    return [
        i
        for i, line in enumerate(lines)
        if parse_marker(line) is not None and (i == 0 or not lines[i - 1].strip())
    ]


def split_sections(body: str) -> SplitBody:
    """
    Decompose a body into committed sections plus live text.

    A body without markers is entirely live. Text before the first
    marker becomes a committed section without timestamp. Empty runs
    never produce a section.
    """
    lines = body.split("\n")
    markers = _marker_indexes(lines)
    if not markers:
        return SplitBody(live_text=body.strip())

    runs: list[tuple[str | None, str]] = []
    preamble = "\n".join(lines[: markers[0]]).strip()
    if preamble:
        runs.append((None, preamble))

    bounds = markers + [len(lines)]
    for start, end in zip(bounds, bounds[1:]):
        timestamp = parse_marker(lines[start])
        runs.append((timestamp, "\n".join(lines[start + 1 : end]).strip()))

    live_timestamp, live_text = runs.pop()
    committed = [Section(text, timestamp) for timestamp, text in runs if text]
    return SplitBody(committed=committed, live_text=live_text, live_timestamp=live_timestamp)


def _render(section: Section) -> str:
    if section.timestamp is None:
        return section.text
    if not section.text:
        return format_marker(section.timestamp)
    return f"{format_marker(section.timestamp)}\n{section.text}"


def join_sections(
    committed: list[Section], live_text: str = "", live_timestamp: str | None = None
) -> str:
    """Rebuild a body from its committed sections and live text."""
    parts = [_render(s) for s in committed]
    if live_text or live_timestamp:
        parts.append(_render(Section(live_text, live_timestamp)))
    return "\n\n".join(parts)


def replace_live(body: str, live_text: str) -> str:
    """
    Swap the live section's text, keeping every preceding byte as is.
    """
    lines = body.split("\n")
    markers = _marker_indexes(lines)
    if not markers:
        return live_text
    kept = "\n".join(lines[: markers[-1] + 1])
    return f"{kept}\n{live_text}" if live_text else kept


def append_section(body: str, timestamp: str, text: str) -> str:
    """Close the current body as history and open a new timestamped section."""
    body = body.rstrip()
    if not body.strip():
        return text
    return f"{body}\n\n{format_marker(timestamp)}\n{text}"
