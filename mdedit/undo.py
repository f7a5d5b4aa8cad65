import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .buffer import DocumentState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """Snapshot of the full document state after one accepted edit."""
    state: DocumentState
    captured_at: float = field(default_factory=time.time)


class SnapshotTarget(Protocol):
    def apply_snapshot(self, state: DocumentState) -> None: ...


class CommandHistory:
    """Linear undo/redo history of whole-document snapshots.

    History is never pruned; every accepted edit keeps a full copy of the
    text.
    """

    def __init__(self, initial_state: Optional[DocumentState] = None):
        self._initial_state = initial_state or DocumentState()
        self._undo_stack: list[Command] = []
        self._redo_stack: list[Command] = []
        self._replaying = False

    @property
    def initial_state(self) -> DocumentState:
        return self._initial_state

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self._redo_stack)

    @property
    def current_state(self) -> DocumentState:
        """State the history believes the document is in."""
        if self._undo_stack:
            return self._undo_stack[-1].state
        return self._initial_state

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def execute(self, state: DocumentState) -> bool:
        if self._replaying:
            logger.debug("Ignoring history push during undo/redo replay")
            return False
        self._undo_stack.append(Command(state))
        # Any new edit invalidates redo history
        self._redo_stack.clear()
        logger.debug(f"History push: undo depth {len(self._undo_stack)}")
        return True

    def undo(self, editor: SnapshotTarget) -> bool:
        if self._replaying:
            logger.warning("undo() called while a replay is in progress")
            return False
        if not self._undo_stack:
            return False
        command = self._undo_stack.pop()
        self._redo_stack.append(command)
        # Restore whatever preceded the popped snapshot
        self._replay(editor, self.current_state)
        return True

    def redo(self, editor: SnapshotTarget) -> bool:
        if self._replaying:
            logger.warning("redo() called while a replay is in progress")
            return False
        if not self._redo_stack:
            return False
        command = self._redo_stack.pop()
        self._undo_stack.append(command)
        self._replay(editor, command.state)
        return True

    def _replay(self, editor: SnapshotTarget, state: DocumentState) -> None:
        self._replaying = True
        try:
            editor.apply_snapshot(state)
        finally:
            self._replaying = False
        logger.debug(f"Replayed state: undo depth {len(self._undo_stack)}, redo depth {len(self._redo_stack)}")
