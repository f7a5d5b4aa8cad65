"""Text buffer and selection model.

The buffer holds the whole document as one string plus a selection range.
Content only ever changes through :meth:`TextBuffer.replace_text`, which
swaps text and selection in a single step.
"""

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    start: int = 0
    end: int = 0

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end

    def shifted(self, delta: int) -> 'Selection':
        return Selection(self.start + delta, self.end + delta)


@dataclass(frozen=True)
class DocumentState:
    """Full document text together with its selection."""
    text: str = ""
    selection: Selection = Selection()

    def __post_init__(self):
        start, end = self.selection.start, self.selection.end
        if not 0 <= start <= end <= len(self.text):
            raise ValueError(
                f"Selection ({start}, {end}) is outside text of length {len(self.text)}"
            )

    @property
    def selected_text(self) -> str:
        return self.text[self.selection.start:self.selection.end]

    @classmethod
    def at_cursor(cls, text: str, offset: int) -> 'DocumentState':
        """Build a state with a collapsed selection at offset."""
        return cls(text, Selection(offset, offset))


ChangeCallback = Callable[[], None]


class TextBuffer:
    """In-memory document buffer.

    Subscribers registered with :meth:`on_external_change` are notified
    after every replacement, including ones made by the editor itself.
    Callers that write to the buffer decide which notifications to ignore.
    """

    def __init__(self, text: str = "", selection: Selection = None):
        self._state = DocumentState(text, selection or Selection(len(text), len(text)))
        self._listeners: list[ChangeCallback] = []

    @property
    def state(self) -> DocumentState:
        return self._state

    def read_text(self) -> str:
        return self._state.text

    def read_selection(self) -> Selection:
        return self._state.selection

    def replace_text(self, text: str, selection: Selection) -> None:
        """Atomically replace the whole content and the selection."""
        self._state = DocumentState(text, selection)
        logger.debug(f"Buffer replaced: {len(text)} chars, selection {selection}")
        for callback in list(self._listeners):
            callback()

    def set_selection(self, selection: Selection) -> None:
        """Move the selection without touching the text or notifying."""
        self._state = DocumentState(self._state.text, selection)

    def on_external_change(self, callback: ChangeCallback) -> None:
        self._listeners.append(callback)
