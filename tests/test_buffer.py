"""Test the text buffer and document state invariants."""

import pytest
from mdedit.buffer import DocumentState, Selection, TextBuffer


def test_new_buffer_puts_cursor_at_end():
    buffer = TextBuffer("abc")
    assert buffer.read_text() == "abc"
    assert buffer.read_selection() == Selection(3, 3)


def test_replace_text_swaps_text_and_selection_together():
    buffer = TextBuffer("abc")
    buffer.replace_text("hello", Selection(1, 4))
    assert buffer.state == DocumentState("hello", Selection(1, 4))
    assert buffer.state.selected_text == "ell"


def test_replace_text_notifies_every_listener_once():
    buffer = TextBuffer()
    calls = []
    buffer.on_external_change(lambda: calls.append('a'))
    buffer.on_external_change(lambda: calls.append('b'))
    buffer.replace_text("x", Selection(1, 1))
    assert calls == ['a', 'b']


def test_set_selection_does_not_notify():
    buffer = TextBuffer("abc")
    calls = []
    buffer.on_external_change(lambda: calls.append(True))
    buffer.set_selection(Selection(0, 2))
    assert buffer.read_selection() == Selection(0, 2)
    assert calls == []


@pytest.mark.parametrize("start,end", [(-1, 0), (2, 1), (0, 4)])
def test_invalid_selection_is_rejected(start, end):
    with pytest.raises(ValueError):
        DocumentState("abc", Selection(start, end))


def test_invalid_replacement_leaves_buffer_untouched():
    buffer = TextBuffer("abc")
    with pytest.raises(ValueError):
        buffer.replace_text("a", Selection(3, 3))
    assert buffer.state == DocumentState("abc", Selection(3, 3))


def test_selection_helpers():
    assert Selection(2, 2).is_collapsed
    assert not Selection(1, 2).is_collapsed
    assert Selection(1, 2).shifted(3) == Selection(4, 5)
    assert DocumentState.at_cursor("ab", 1).selection == Selection(1, 1)
