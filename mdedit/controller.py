"""Editor controller wiring interpreter, buffer and history together."""

import logging
from typing import Optional

from .buffer import DocumentState, TextBuffer
from .commands import CommandRegistry, HistoryAction
from .interpreter import interpret
from .keyboard import KeyboardHandler, KeyEvent
from .settings import EditorSettings
from .undo import CommandHistory

logger = logging.getLogger(__name__)


class EditorController:
    """Routes key events through the interpreter and records history.

    The controller is the only writer of the buffer. Changes it makes
    itself (interpreted edits and history replays) are kept out of the
    buffer's change notifications; any other change notification counts as
    one user edit and is recorded once.
    """

    def __init__(self, buffer: TextBuffer,
                 settings: Optional[EditorSettings] = None,
                 registry: Optional[CommandRegistry] = None,
                 key_source: Optional[KeyboardHandler] = None):
        self.buffer = buffer
        self.registry = registry or CommandRegistry(settings)
        self.history = CommandHistory(initial_state=buffer.state)
        self._writing = False
        buffer.on_external_change(self._on_external_change)
        if key_source is not None:
            key_source.subscribe(self.handle_key)

    @property
    def state(self) -> DocumentState:
        return self.buffer.state

    def handle_key(self, key_event: KeyEvent) -> bool:
        """Process one key event.

        Returns:
            True if the editor handled the key, False if the host's default
            behavior should run
        """
        state = self.buffer.state
        result = interpret(state, key_event, self.registry)
        if result.prevent_default:
            key_event.prevent_default()
        if not result.handled:
            return False

        if result.history_action is HistoryAction.UNDO:
            self.undo()
        elif result.history_action is HistoryAction.REDO:
            self.redo()
        elif result.new_state is not None and result.new_state != state:
            self._write(result.new_state)
            self.history.execute(result.new_state)
        return True

    def undo(self) -> bool:
        return self.history.undo(self)

    def redo(self) -> bool:
        return self.history.redo(self)

    def apply_snapshot(self, state: DocumentState) -> None:
        """Put a state from history back into the buffer."""
        self._write(state)

    def _write(self, state: DocumentState) -> None:
        self._writing = True
        try:
            self.buffer.replace_text(state.text, state.selection)
        finally:
            self._writing = False

    def _on_external_change(self) -> None:
        if self._writing:
            return
        logger.debug("External change recorded")
        self.history.execute(self.buffer.state)
