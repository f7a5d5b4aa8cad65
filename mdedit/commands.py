"""Command pattern implementation for markdown key handling.

Every command is a pure function of the current document state and the key
event. It never touches a buffer: it returns an :class:`InterpretResult`
describing the single new state to apply, or asks the caller to delegate to
the history, or declines the key so the host's default behavior runs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from .buffer import DocumentState, Selection
from .markdown import INDENT, LineContext, classify
from .settings import EditorSettings

if TYPE_CHECKING:
    from .keyboard import KeyEvent


class HistoryAction(Enum):
    UNDO = "undo"
    REDO = "redo"


@dataclass(frozen=True)
class InterpretResult:
    """Outcome of interpreting one key event."""
    handled: bool
    new_state: Optional[DocumentState] = None
    prevent_default: bool = False
    history_action: Optional[HistoryAction] = None


PASS_THROUGH = InterpretResult(handled=False)


class EditorCommand(ABC):
    """Base class for key commands."""

    @abstractmethod
    def execute(self, state: DocumentState, key_event: 'KeyEvent') -> InterpretResult:
        """Interpret the key against state.

        Args:
            state: Document state at the time of the key press
            key_event: The key event that triggered this command

        Returns:
            The interpretation result; never mutates anything
        """
        pass


class EditCommand(EditorCommand):
    """Base class for commands that produce a new document state."""

    def execute(self, state: DocumentState, key_event: 'KeyEvent') -> InterpretResult:
        context = classify(state.text, state.selection.start)
        new_state = self._edit(state, context)
        if new_state is None:
            return PASS_THROUGH
        # A handled no-op still reports the unchanged state
        return InterpretResult(handled=True, new_state=new_state, prevent_default=True)

    @abstractmethod
    def _edit(self, state: DocumentState, context: LineContext) -> Optional[DocumentState]:
        """Return the new state, or None to let the key through."""
        pass


class TabCommand(EditCommand):
    """Tab indents list items at line start; elsewhere it types a tab."""

    def _edit(self, state, context):
        text, selection = state.text, state.selection
        if context.in_list:
            line_start = context.line.start
            new_text = text[:line_start] + INDENT + text[line_start:]
            return DocumentState(new_text, selection.shifted(1))
        new_text = text[:selection.start] + INDENT + text[selection.end:]
        return DocumentState.at_cursor(new_text, selection.start + 1)


class DedentCommand(EditCommand):
    """Shift+Tab removes one leading tab from the current line.

    On a line without a leading tab the state comes back unchanged.
    """

    def _edit(self, state, context):
        line = context.line
        if not line.text.startswith(INDENT):
            return state
        text = state.text
        new_text = text[:line.start] + text[line.start + len(INDENT):]

        def shift(offset):
            if offset <= line.start:
                return offset
            return max(line.start, offset - len(INDENT))

        selection = state.selection
        return DocumentState(new_text, Selection(shift(selection.start), shift(selection.end)))


class EnterCommand(EditCommand):
    """Enter continues a list item, or ends the list on an empty item."""

    def _edit(self, state, context):
        item = context.list_item
        if item is None:
            return None
        line = context.line
        selection = state.selection
        text = state.text
        if item.is_empty:
            cut = line.start - 1 if line.start > 0 else 0
            return DocumentState.at_cursor(text[:cut] + text[line.end:], cut)
        # Inside the marker of a filled item the plain newline is what the user wants
        if selection.start - line.start < len(item.prefix):
            return None
        insert = '\n' + item.prefix
        new_text = text[:selection.start] + insert + text[selection.end:]
        return DocumentState.at_cursor(new_text, selection.start + len(insert))


class WrapSelectionCommand(EditCommand):
    """Wrap the selection in a marker pair, e.g. ``**bold**``."""

    def __init__(self, prefix: str, suffix: Optional[str] = None, select_inner: bool = False):
        self.prefix = prefix
        self.suffix = prefix if suffix is None else suffix
        self.select_inner = select_inner

    def _edit(self, state, context):
        text, selection = state.text, state.selection
        selected = state.selected_text
        new_text = text[:selection.start] + self.prefix + selected + self.suffix + text[selection.end:]
        inner_start = selection.start + len(self.prefix)
        if self.select_inner:
            return DocumentState(new_text, Selection(inner_start, inner_start + len(selected)))
        return DocumentState.at_cursor(new_text, inner_start + len(selected) + len(self.suffix))


class HistoryCommand(EditorCommand):
    """Undo and redo are not edits; the controller forwards them to history."""
    action: HistoryAction

    def execute(self, state, key_event):
        return InterpretResult(handled=True, prevent_default=True, history_action=self.action)


class UndoCommand(HistoryCommand):
    action = HistoryAction.UNDO


class RedoCommand(HistoryCommand):
    action = HistoryAction.REDO


KeyBinding = Tuple[str, bool, bool]  # (key, shift, ctrl_or_meta)


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self, settings: Optional[EditorSettings] = None):
        self.settings = settings or EditorSettings()
        self._commands: Dict[KeyBinding, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Indentation and lists
        self.register(('tab', False, False), TabCommand())
        self.register(('tab', True, False), DedentCommand())
        self.register(('enter', False, False), EnterCommand())

        # Inline emphasis
        self.register(('b', False, True), WrapSelectionCommand(self.settings.bold_marker))
        self.register(('i', False, True), WrapSelectionCommand(self.settings.italic_marker))

        # Undo/redo
        self.register(('z', False, True), UndoCommand())
        self.register(('z', True, True), RedoCommand())
        self.register(('y', False, True), RedoCommand())

        for shortcut in self.settings.wrap_shortcuts:
            self.register(
                (shortcut.key, False, True),
                WrapSelectionCommand(shortcut.prefix, shortcut.suffix, shortcut.select_inner),
            )

    def register(self, key: KeyBinding, command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_event: 'KeyEvent') -> Optional[EditorCommand]:
        """Get the command for a key event.

        An exact binding wins; otherwise a Shift-modified key falls back to
        the binding without Shift.
        """
        binding = (key_event.key, key_event.shift, key_event.ctrl_or_meta)
        command = self._commands.get(binding)
        if command is None and key_event.shift:
            command = self._commands.get((key_event.key, False, key_event.ctrl_or_meta))
        return command
