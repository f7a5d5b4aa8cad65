"""Line and list-item predicates over plain markdown text.

All functions are pure: they take strings and offsets and return new
values, never mutating their input.
"""

import re
from dataclasses import dataclass
from typing import Optional

# Zero or more leading tabs, then a dash and a space.
LIST_ITEM_RE = re.compile(r'(\t*)- (.*)', re.DOTALL)

LIST_MARKER = "- "
INDENT = "\t"


@dataclass(frozen=True)
class LineSpan:
    """A line of text and its [start, end) offsets in the document."""
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class ListItemMatch:
    indent: str
    content: str

    @property
    def prefix(self) -> str:
        """Indentation plus the list marker, e.g. ``"\\t- "``."""
        return self.indent + LIST_MARKER

    @property
    def is_empty(self) -> bool:
        return self.content == ""


def clamp_offset(offset: int, text: str) -> int:
    """Clamp offset into [0, len(text)]."""
    return max(0, min(offset, len(text)))


def line_at(text: str, offset: int) -> LineSpan:
    """Return the line containing offset.

    A line runs from just after the preceding newline (or the start of the
    text) up to, but not including, the next newline (or the end of the
    text).
    """
    offset = clamp_offset(offset, text)
    start = text.rfind('\n', 0, offset) + 1
    end = text.find('\n', offset)
    if end == -1:
        end = len(text)
    return LineSpan(start, end, text[start:end])


def match_list_item(line: str) -> Optional[ListItemMatch]:
    """Match a single line against the list-item pattern."""
    if '\n' in line:
        return None
    match = LIST_ITEM_RE.fullmatch(line)
    if not match:
        return None
    return ListItemMatch(indent=match.group(1), content=match.group(2))


@dataclass(frozen=True)
class LineContext:
    line: LineSpan
    list_item: Optional[ListItemMatch]

    @property
    def in_list(self) -> bool:
        return self.list_item is not None


def classify(text: str, offset: int) -> LineContext:
    """Find the line holding offset and test it against the list pattern."""
    line = line_at(text, offset)
    return LineContext(line, match_list_item(line.text))
