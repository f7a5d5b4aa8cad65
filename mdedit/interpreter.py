"""Markdown keystroke interpreter."""

import logging
from typing import Optional, TYPE_CHECKING

from .buffer import DocumentState
from .commands import PASS_THROUGH, CommandRegistry, InterpretResult

if TYPE_CHECKING:
    from .keyboard import KeyEvent

logger = logging.getLogger(__name__)

_default_registry: Optional[CommandRegistry] = None


def default_registry() -> CommandRegistry:
    """Registry with the built-in bindings and default settings."""
    global _default_registry
    if _default_registry is None:
        _default_registry = CommandRegistry()
    return _default_registry


def interpret(state: DocumentState, key_event: 'KeyEvent',
              registry: Optional[CommandRegistry] = None) -> InterpretResult:
    """Decide what a key press does to the document.

    Pure: the same state and key always give the same result, and nothing
    is written anywhere. Keys without a binding come back unhandled so the
    host's default behavior can run.
    """
    registry = registry or default_registry()
    command = registry.get_command(key_event)
    if command is None:
        return PASS_THROUGH
    result = command.execute(state, key_event)
    logger.debug(f"{type(command).__name__} for {key_event.key!r}: handled={result.handled}")
    return result
