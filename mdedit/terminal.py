"""Minimal terminal host built on Blessed.

The host owns what the editor core leaves to its surroundings: drawing the
document, reading keys, and the default editing behavior for keys the
controller does not handle.
"""

import logging
from typing import Optional

import blessed

from .buffer import DocumentState, Selection, TextBuffer
from .controller import EditorController
from .keyboard import KeyEvent, create_keyboard_handler
from .settings import EditorSettings

logger = logging.getLogger(__name__)

TAB_WIDTH = 4
STATUS_TEXT = " Ctrl-Q quit  Ctrl-Z undo  Ctrl-Y redo  Ctrl-B bold  Alt-I italic"


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def get_key(self, timeout: Optional[float] = None):
        return self.term.inkey(timeout=timeout)

    def draw(self, state: DocumentState, status: str = STATUS_TEXT):
        """Draw the document and place the cursor at the selection end."""
        term = self.term
        rows = max(1, term.height - 1)
        lines = state.text.split('\n')
        cursor_row, cursor_col = cursor_coordinates(state.text, state.selection.end)
        top = max(0, cursor_row - rows + 1)

        print(term.home + term.clear, end='')
        for y, line in enumerate(lines[top:top + rows]):
            print(term.move(y, 0) + line.expandtabs(TAB_WIDTH)[:term.width], end='')
        print(term.move(term.height - 1, 0) + term.reverse + status[:term.width].ljust(term.width) + term.normal, end='')
        print(term.move(cursor_row - top, cursor_col) + term.normal_cursor, end='', flush=True)


def cursor_coordinates(text: str, offset: int) -> tuple[int, int]:
    """Screen row and column of offset, with tabs expanded."""
    before = text[:offset]
    row = before.count('\n')
    line = before[before.rfind('\n') + 1:]
    return row, len(line.expandtabs(TAB_WIDTH))


def apply_default_key(buffer: TextBuffer, key_event: KeyEvent) -> bool:
    """Perform the host's own editing for a key the editor let through.

    Returns:
        True if the key did something
    """
    state = buffer.state
    text, selection = state.text, state.selection
    start, end = selection.start, selection.end

    def replace(insert: str, cut_start: int, cut_end: int):
        new_text = text[:cut_start] + insert + text[cut_end:]
        cursor = cut_start + len(insert)
        buffer.replace_text(new_text, Selection(cursor, cursor))

    key = key_event.key
    if key_event.is_printable:
        replace(key, start, end)
    elif key == 'enter':
        replace('\n', start, end)
    elif key == 'backspace':
        if start != end:
            replace('', start, end)
        elif start > 0:
            replace('', start - 1, start)
        else:
            return False
    elif key == 'delete':
        if start != end:
            replace('', start, end)
        elif end < len(text):
            replace('', start, end + 1)
        else:
            return False
    elif key in ('left', 'right', 'home', 'end'):
        buffer.set_selection(_moved_selection(text, selection, key))
    else:
        return False
    return True


def _moved_selection(text: str, selection: Selection, key: str) -> Selection:
    offset = selection.end
    if key == 'left':
        offset = selection.start if not selection.is_collapsed else max(0, offset - 1)
    elif key == 'right':
        offset = offset if not selection.is_collapsed else min(len(text), offset + 1)
    elif key == 'home':
        offset = text.rfind('\n', 0, offset) + 1
    elif key == 'end':
        newline = text.find('\n', offset)
        offset = len(text) if newline == -1 else newline
    return Selection(offset, offset)


class TerminalEditor:
    """Interactive editor session in the terminal."""

    def __init__(self, text: str = "", settings: Optional[EditorSettings] = None,
                 terminal: Optional[TerminalInterface] = None):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = create_keyboard_handler(self.terminal)
        self.buffer = TextBuffer(text)
        self.controller = EditorController(self.buffer, settings=settings, key_source=self.keyboard)
        self.running = False

    def process_event(self, key_event: KeyEvent) -> None:
        """Feed one event through the controller and the host defaults."""
        if key_event.ctrl_or_meta and key_event.key == 'q':
            self.running = False
            return
        self.keyboard.publish(key_event)
        if not key_event.default_prevented:
            apply_default_key(self.buffer, key_event)

    def run(self) -> str:
        """Run until Ctrl-Q and return the final text."""
        self.terminal.setup()
        self.running = True
        logger.debug("Terminal session started")
        try:
            with self.terminal.term.raw():
                while self.running:
                    self.terminal.draw(self.buffer.state)
                    key_event = self.keyboard.get_key_event(timeout=None)
                    if key_event is not None:
                        self.process_event(key_event)
        finally:
            self.terminal.cleanup()
        return self.buffer.read_text()
