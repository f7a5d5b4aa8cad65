"""mdedit - markdown-aware keystroke handling with undo/redo history."""

from .buffer import DocumentState, Selection, TextBuffer
from .commands import CommandRegistry, HistoryAction, InterpretResult
from .controller import EditorController
from .interpreter import interpret
from .keyboard import KeyboardHandler, KeyEvent
from .settings import EditorSettings, WrapShortcut
from .undo import Command, CommandHistory

__all__ = [
    'Command',
    'CommandHistory',
    'CommandRegistry',
    'DocumentState',
    'EditorController',
    'EditorSettings',
    'HistoryAction',
    'InterpretResult',
    'KeyEvent',
    'KeyboardHandler',
    'Selection',
    'TextBuffer',
    'WrapShortcut',
    'interpret',
]
