"""Test keyboard input handling."""

import pytest
from unittest.mock import Mock
from mdedit.keyboard import KeyboardHandler, KeyEvent, create_keyboard_handler


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str, name=None):
        """Add a blessed-like keystroke to the queue."""
        key = Mock()
        key.__str__ = lambda self: key_str
        key.name = name
        self._key_queue.append(key)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


def test_blessed_named_keys(handler):
    terminal = handler.terminal
    terminal.add_key('\t', name='KEY_TAB')
    terminal.add_key('\x1b[Z', name='KEY_BTAB')
    terminal.add_key('\r', name='KEY_ENTER')
    terminal.add_key('\x1b[D', name='KEY_LEFT')

    tab = handler.get_key_event()
    assert (tab.key, tab.shift, tab.ctrl_or_meta) == ('tab', False, False)
    back_tab = handler.get_key_event()
    assert (back_tab.key, back_tab.shift) == ('tab', True)
    assert handler.get_key_event().key == 'enter'
    assert handler.get_key_event().key == 'left'
    assert handler.get_key_event() is None


def test_raw_control_characters(handler):
    bold = handler.parse_key('\x02')
    assert (bold.key, bold.ctrl_or_meta) == ('b', True)
    undo = handler.parse_key('\x1a')
    assert (undo.key, undo.ctrl_or_meta) == ('z', True)
    assert handler.parse_key('\x19').key == 'y'
    # Ctrl-I and Ctrl-M are indistinguishable from Tab and Enter on a tty
    assert handler.parse_key('\t').key == 'tab'
    assert handler.parse_key('\r').key == 'enter'
    assert handler.parse_key('\x7f').key == 'backspace'


def test_alt_prefix_counts_as_meta(handler):
    italic = handler.parse_key('\x1bi')
    assert (italic.key, italic.shift, italic.ctrl_or_meta) == ('i', False, True)
    redo = handler.parse_key('\x1bZ')
    assert (redo.key, redo.shift, redo.ctrl_or_meta) == ('z', True, True)


@pytest.mark.parametrize("token,expected", [
    ('<TAB>', ('tab', False, False)),
    ('<Shift-TAB>', ('tab', True, False)),
    ('<Ctrl-b>', ('b', False, True)),
    ('<Ctrl-Z>', ('z', True, True)),
    ('<Meta-i>', ('i', False, True)),
    ('<Esc+u>', ('u', False, True)),
    ('<Ctrl-Shift-z>', ('z', True, True)),
    ('<Ctrl-->', ('-', False, True)),
    ('<SPACE>', (' ', False, False)),
    ('<ESC>', ('escape', False, False)),
    ('<ENTER>', ('enter', False, False)),
])
def test_curtsies_tokens(handler, token, expected):
    event = handler.parse_key(token)
    assert (event.key, event.shift, event.ctrl_or_meta) == expected
    assert event.raw == token


def test_regular_characters(handler):
    lower = handler.parse_key('a')
    assert (lower.key, lower.shift, lower.ctrl_or_meta) == ('a', False, False)
    assert lower.is_printable
    upper = handler.parse_key('A')
    assert upper.shift
    assert upper.is_printable
    assert handler.parse_key('<').key == '<'


def test_prevent_default_flag():
    event = KeyEvent(key='tab')
    assert not event.default_prevented
    event.prevent_default()
    assert event.default_prevented


def test_subscribers_receive_dispatched_events():
    handler = KeyboardHandler()
    seen = []
    handler.subscribe(seen.append)
    event = handler.dispatch('\x02')
    assert seen == [event]

    handler.unsubscribe(seen.append)
    handler.dispatch('x')
    assert len(seen) == 1


def test_factory_builds_handler_bound_to_terminal():
    terminal = MockTerminal()
    handler = create_keyboard_handler(terminal)
    assert isinstance(handler, KeyboardHandler)
    terminal.add_key('\x02')
    event = handler.get_key_event()
    assert (event.key, event.ctrl_or_meta) == ('b', True)
