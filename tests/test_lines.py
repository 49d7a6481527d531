from __future__ import annotations

import pytest

from razor_indent.lines import (
    analyze_document,
    analyze_line,
    count_indent_width,
    sanitize_indent_size,
    split_lines,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (4, 4),
        (1, 1),
        (2.7, 2),
        (0, 2),
        (-3, 2),
        (0.5, 2),
        (float("nan"), 2),
        (float("inf"), 2),
        (True, 2),
        ("4", 2),
        (None, 2),
    ],
)
def test_sanitize_indent_size(value, expected):
    assert sanitize_indent_size(value) == expected


def test_split_lines_detects_crlf():
    assert split_lines("a\r\nb\r\nc") == (["a", "b", "c"], "\r\n")


def test_split_lines_defaults_to_lf():
    assert split_lines("a\nb") == (["a", "b"], "\n")


def test_split_lines_empty_input_yields_one_line():
    assert split_lines("") == ([""], "\n")


def test_split_lines_keeps_trailing_empty_line():
    assert split_lines("a\n") == (["a", ""], "\n")


def test_split_lines_mixed_endings_use_crlf():
    assert split_lines("a\nb\r\nc") == (["a", "b", "c"], "\r\n")


def test_count_indent_width_expands_tabs_to_indent_unit():
    assert count_indent_width("\t  ", 4) == 6
    assert count_indent_width("\t\t", 2) == 4
    assert count_indent_width("", 4) == 0


def test_analyze_line_splits_leading_run():
    info = analyze_line(0, "\t  <div>", 4)

    assert info.index == 0
    assert info.original == "\t  <div>"
    assert info.leading == "\t  "
    assert info.rest == "<div>"
    assert info.leading_width == 6


def test_analyze_line_whitespace_only():
    info = analyze_line(3, "   ", 2)

    assert info.rest == ""
    assert info.leading == "   "
    assert info.leading_width == 3


def test_analyze_document_numbers_lines():
    infos, line_ending = analyze_document("<a>\r\n  b", 2)

    assert line_ending == "\r\n"
    assert [info.index for info in infos] == [0, 1]
    assert [info.rest for info in infos] == ["<a>", "b"]
