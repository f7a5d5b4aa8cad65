"""Keyboard input handling.

Raw keys from blessed (or curtsies-style tokens such as ``<Ctrl-b>``) are
normalized into :class:`KeyEvent` objects, the only input type the editor
core understands.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class KeyEvent:
    """A normalized key press."""
    key: str  # Lowercase key name ('tab', 'enter', 'left') or the typed character
    shift: bool = False
    ctrl_or_meta: bool = False
    raw: str = ''
    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Ask the host not to run its own handling for this key."""
        self.default_prevented = True

    @property
    def is_printable(self) -> bool:
        return len(self.key) == 1 and not self.ctrl_or_meta and self.key.isprintable()


KeyListener = Callable[[KeyEvent], object]

# blessed keystroke names
_NAMED_KEYS = {
    'KEY_TAB': ('tab', False),
    'KEY_BTAB': ('tab', True),
    'KEY_ENTER': ('enter', False),
    'KEY_BACKSPACE': ('backspace', False),
    'KEY_DELETE': ('delete', False),
    'KEY_LEFT': ('left', False),
    'KEY_RIGHT': ('right', False),
    'KEY_UP': ('up', False),
    'KEY_DOWN': ('down', False),
    'KEY_HOME': ('home', False),
    'KEY_END': ('end', False),
    'KEY_ESCAPE': ('escape', False),
    'KEY_SLEFT': ('left', True),
    'KEY_SRIGHT': ('right', True),
}

_RAW_KEYS = {
    '\t': ('tab', False),
    '\x1b[Z': ('tab', True),
    '\r': ('enter', False),
    '\n': ('enter', False),
    '\x7f': ('backspace', False),
    '\x08': ('backspace', False),
    '\x1b': ('escape', False),
}

_TOKEN_ALIASES = {
    'return': 'enter',
    'esc': 'escape',
    'space': ' ',
    'spacebar': ' ',
    'bksp': 'backspace',
}


class KeyboardHandler:
    """Turns raw keys into :class:`KeyEvent` objects and publishes them.

    Editors subscribe to a handler explicitly, so several editors fed by
    different handlers never see each other's keys.
    """

    def __init__(self, terminal_interface=None):
        self.terminal = terminal_interface
        self._listeners: list[KeyListener] = []

    def subscribe(self, callback: KeyListener) -> None:
        self._listeners.append(callback)

    def unsubscribe(self, callback: KeyListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def publish(self, event: KeyEvent) -> KeyEvent:
        """Hand an already parsed event to every subscriber."""
        for callback in list(self._listeners):
            callback(event)
        return event

    def dispatch(self, key) -> KeyEvent:
        """Parse a raw key and publish the resulting event."""
        return self.publish(self.parse_key(key))

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Read the next key from the terminal and parse it."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a blessed keystroke or key string into a KeyEvent.

        Args:
            key: blessed.keyboard.Keystroke, or any object whose ``str()``
                is the raw key or a curtsies-style token like ``<Ctrl-b>``

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_token(key_str)

        name = getattr(key, 'name', None)
        if isinstance(name, str) and name in _NAMED_KEYS:
            base, shift = _NAMED_KEYS[name]
            return KeyEvent(key=base, shift=shift, raw=key_str)

        if key_str in _RAW_KEYS:
            base, shift = _RAW_KEYS[key_str]
            return KeyEvent(key=base, shift=shift, raw=key_str)

        # Ctrl-A .. Ctrl-Z; tab, enter and backspace were mapped above
        if len(key_str) == 1 and 1 <= ord(key_str) <= 26:
            return KeyEvent(key=chr(ord('a') + ord(key_str) - 1), ctrl_or_meta=True, raw=key_str)

        # Terminals report Alt/Meta as an escape prefix
        if len(key_str) == 2 and key_str[0] == '\x1b':
            ch = key_str[1]
            return KeyEvent(key=ch.lower(), shift=ch.isupper(), ctrl_or_meta=True, raw=key_str)

        return KeyEvent(key=key_str, shift=key_str.isupper(), raw=key_str)

    def _parse_token(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1].replace('+', '-')
        # '<Ctrl-->' style tokens would otherwise lose their base key
        if name.endswith('--'):
            parts = name[:-2].split('-') + ['-']
        else:
            parts = name.split('-')
        base = parts[-1]
        mods = {m.lower() for m in parts[:-1]}

        if len(base) != 1:
            base = base.lower()
        base = _TOKEN_ALIASES.get(base, base)
        shift = 'shift' in mods or (len(base) == 1 and base.isupper())
        ctrl_or_meta = bool(mods & {'ctrl', 'meta', 'alt', 'esc', 'cmd', 'super'})
        if len(base) == 1 and ctrl_or_meta:
            base = base.lower()
        return KeyEvent(key=base, shift=shift, ctrl_or_meta=ctrl_or_meta, raw=key_str)


def create_keyboard_handler(terminal_interface=None) -> KeyboardHandler:
    """Factory function to create a keyboard handler."""
    return KeyboardHandler(terminal_interface)
