"""Functional core - pure journal document logic with no I/O."""

from .codec import (
    Entry,
    MalformedEntryError,
    format_header,
    month_filename,
    parse,
    parse_header,
    parse_one,
    serialize,
    sort_newest_first,
)
from .sections import (
    Section,
    SplitBody,
    append_section,
    join_sections,
    replace_live,
    split_sections,
)

__all__ = [
    # Codec
    "Entry",
    "MalformedEntryError",
    "format_header",
    "month_filename",
    "parse",
    "parse_header",
    "parse_one",
    "serialize",
    "sort_newest_first",
    # Sections
    "Section",
    "SplitBody",
    "append_section",
    "join_sections",
    "replace_live",
    "split_sections",
]
