"""Monthly markdown document codec - pure, no I/O.

A month document is a sequence of entries, each introduced by a header:

    ## 2024-03-15 - optional title
    body lines...

Only a "## " line carrying a date ends the previous entry's body; other
markdown headings are ordinary body text.
"""

import logging
from dataclasses import dataclass
from datetime import date

logger = logging.getLogger(__name__)

HEADER_PREFIX = "## "
_DATE_LEN = len("YYYY-MM-DD")


class MalformedEntryError(ValueError):
    """Raised when a header line carries an unparseable date."""

    pass


@dataclass
class Entry:
    """One calendar day's record within a month document."""

    date: date
    custom_title: str = ""
    body: str = ""

    @property
    def header(self) -> str:
        return format_header(self.date, self.custom_title)


def month_filename(target_date: date) -> str:
    """Canonical document name for the month containing a date."""
    return f"{target_date.year:04d}-{target_date.month:02d}.md"


def format_header(target_date: date, custom_title: str = "") -> str:
    """Build the header line for an entry."""
    title = " ".join(custom_title.split())
    if title:
        return f"{HEADER_PREFIX}{target_date.isoformat()} - {title}"
    return f"{HEADER_PREFIX}{target_date.isoformat()}"


def _looks_like_iso_date(token: str) -> bool:
    if len(token) != _DATE_LEN:
        return False
    for i, ch in enumerate(token):
        if i in (4, 7):
            if ch != "-":
                return False
        elif not ch.isdigit():
            return False
    return True


def is_header(line: str) -> bool:
    """A "## " line followed by a YYYY-MM-DD shaped date starts an entry."""
    if not line.startswith(HEADER_PREFIX):
        return False
    start = len(HEADER_PREFIX)
    return _looks_like_iso_date(line[start : start + _DATE_LEN])


def parse_header(line: str) -> tuple[date, str] | None:
    """
    Parse a header line into (date, custom_title).

    Returns None if the line is not a header at all. Raises
    MalformedEntryError for a header whose date part is invalid.
    """
    if not is_header(line):
        return None

    rest = line[len(HEADER_PREFIX):]
    token = rest[:_DATE_LEN]
    try:
        entry_date = date.fromisoformat(token)
    except ValueError as e:
        raise MalformedEntryError(f"Invalid date in header: {line!r}") from e

    suffix = rest[_DATE_LEN:]
    if suffix.strip() and suffix[0] not in " \t-":
        raise MalformedEntryError(f"Unexpected text after date: {line!r}")

    title = suffix.strip()
    if title.startswith("-"):
        title = title[1:].strip()
    return entry_date, title


def _trim_body(lines: list[str]) -> str:
    """Drop leading blank lines and trailing whitespace."""
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    return "\n".join(lines[start:]).rstrip()


def parse(text: str) -> list[Entry]:
    """
    Parse a month document into entries, in document order.

    Headers with a bad date are skipped along with their body.
    """
    entries: list[Entry] = []
    current: Entry | None = None
    body: list[str] = []
    in_entry = False

    for line in text.split("\n"):
        if is_header(line):
            if current is not None:
                current.body = _trim_body(body)
                entries.append(current)
            current = None
            body = []
            in_entry = True
            try:
                entry_date, title = parse_header(line)
            except MalformedEntryError as e:
                logger.warning(f"Skipping malformed entry: {e}")
                continue
            current = Entry(date=entry_date, custom_title=title)
        elif in_entry:
            body.append(line)

    if current is not None:
        current.body = _trim_body(body)
        entries.append(current)

    return entries


def parse_one(text: str, target_date: date) -> Entry | None:
    """Find the entry for a single date, or None."""
    for entry in parse(text):
        if entry.date == target_date:
            return entry
    return None


def _find_header(lines: list[str], target_date: date) -> int:
    for i, line in enumerate(lines):
        if not is_header(line):
            continue
        try:
            parsed = parse_header(line)
        except MalformedEntryError:
            continue
        if parsed[0] == target_date:
            return i
    return -1


def serialize(text: str, target_date: date, custom_title: str, new_body: str) -> str:
    """
    Write an entry's header and body into a month document.

    An existing entry is rewritten in place, keeping every other line of
    the document untouched. A missing entry is inserted at the top.
    Applying the same arguments twice yields identical output.
    """
    header = format_header(target_date, custom_title)
    lines = text.split("\n") if text else []
    index = _find_header(lines, target_date)

    if index < 0:
        return "\n".join([header, new_body, ""] + lines)

    end = index + 1
    while end < len(lines) and not is_header(lines[end]):
        end += 1

    lines[index : end] = [header, new_body, ""]
    return "\n".join(lines)


def sort_newest_first(entries: list[Entry]) -> list[Entry]:
    """Display ordering: most recent date first."""
    return sorted(entries, key=lambda e: e.date, reverse=True)
