"""Test line lookup and list-item matching."""

import pytest
from mdedit.markdown import classify, clamp_offset, line_at, match_list_item


def test_line_at_single_line():
    line = line_at("hello", 3)
    assert (line.start, line.end, line.text) == (0, 5, "hello")


def test_line_at_middle_line():
    text = "one\ntwo\nthree"
    line = line_at(text, 5)
    assert (line.start, line.end, line.text) == (4, 7, "two")


def test_line_at_offset_on_newline_belongs_to_previous_line():
    text = "one\ntwo"
    # Offset 3 is the end of "one", just before the newline
    assert line_at(text, 3).text == "one"
    assert line_at(text, 4).text == "two"


def test_line_at_empty_last_line():
    line = line_at("one\n", 4)
    assert (line.start, line.end, line.text) == (4, 4, "")


def test_line_at_clamps_offsets():
    assert line_at("abc", 99).text == "abc"
    assert line_at("abc", -5).start == 0


def test_clamp_offset():
    assert clamp_offset(-1, "abc") == 0
    assert clamp_offset(2, "abc") == 2
    assert clamp_offset(10, "abc") == 3


@pytest.mark.parametrize("line,indent,content", [
    ("- item", "", "item"),
    ("\t- item", "\t", "item"),
    ("\t\t- ", "\t\t", ""),
    ("- ", "", ""),
    ("- - nested dash", "", "- nested dash"),
])
def test_match_list_item(line, indent, content):
    match = match_list_item(line)
    assert match is not None
    assert match.indent == indent
    assert match.content == content
    assert match.prefix == indent + "- "
    assert match.is_empty == (content == "")


@pytest.mark.parametrize("line", ["", "-", "-item", "  - spaces", "text - item", "* star"])
def test_non_list_lines(line):
    assert match_list_item(line) is None


def test_match_rejects_multiline_input():
    assert match_list_item("- a\n- b") is None


def test_classify_uses_whole_line_regardless_of_cursor():
    text = "intro\n\t- item\nafter"
    context = classify(text, 6)  # cursor at the very start of the list line
    assert context.in_list
    assert context.line.text == "\t- item"
    assert context.list_item.indent == "\t"
