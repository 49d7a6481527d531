from __future__ import annotations

import pytest

from razor_indent import ContentDriftError, FormatError, FormatResult, IndentChange
from razor_indent.models import NO_CHANGES_MESSAGE, RawBlock, SwitchFrame, SwitchTracker


def test_indent_change_str():
    assert str(IndentChange(3, 0, 4)) == "Line 3: 0 -> 4"
    assert str(IndentChange.no_changes()) == NO_CHANGES_MESSAGE


def test_format_result_ok():
    result = FormatResult(output="x")

    assert result.ok is True
    result.raise_for_error()


def test_format_result_raise_for_error():
    result = FormatResult(output="x", error="Validation failed: boom", error_lines=(2,))

    assert result.ok is False
    with pytest.raises(ContentDriftError) as excinfo:
        result.raise_for_error()

    assert excinfo.value.line_numbers == (2,)
    assert str(excinfo.value) == "Validation failed: boom"
    assert isinstance(excinfo.value, FormatError)
    assert isinstance(excinfo.value, ValueError)


def test_raw_block_line_range():
    block = RawBlock(2, 4, "script", 1)

    assert list(block.line_range()) == [2, 3, 4]
    assert block.is_code_block is True
    assert RawBlock(2, 1, "text", 0).is_code_block is False
    assert list(RawBlock(2, 1, "text", 0).line_range()) == []


def test_switch_tracker_push_and_pop():
    tracker = SwitchTracker()
    tracker.advance(
        0, 1, is_switch_line=True, is_case_label=False, in_switch=False, opened_braces=1,
        code="switch (x) {",
    )
    assert tracker.depths == [1]
    assert tracker.in_switch(1) is True

    tracker.advance(
        1, 1, is_switch_line=False, is_case_label=True, in_switch=True, opened_braces=0,
        code="case 1:",
    )
    assert tracker.case_depth == 1
    assert tracker.case_indent_units(1, 1, is_case_label=False, is_closing_brace=False) == 1
    assert tracker.case_indent_units(1, 1, is_case_label=True, is_closing_brace=False) == 0
    assert tracker.case_indent_units(1, 0, is_case_label=False, is_closing_brace=True) == 0

    tracker.advance(
        1, 0, is_switch_line=False, is_case_label=False, in_switch=True, opened_braces=0,
        code="}",
    )
    assert tracker.depths == []
    assert tracker.case_depth is None


def test_switch_tracker_pending_header():
    tracker = SwitchTracker()
    tracker.advance(
        0, 0, is_switch_line=True, is_case_label=False, in_switch=False, opened_braces=0,
        code="switch (x)",
    )
    assert tracker.pending is True

    tracker.advance(
        0, 1, is_switch_line=False, is_case_label=False, in_switch=False, opened_braces=1,
        code="{",
    )
    assert tracker.pending is False
    assert tracker.depths == [1]


def test_switch_tracker_pending_cleared_by_other_code():
    tracker = SwitchTracker(pending=True)
    tracker.advance(
        0, 0, is_switch_line=False, is_case_label=False, in_switch=False, opened_braces=0,
        code="foo();",
    )

    assert tracker.pending is False
    assert tracker.depths == []


def test_switch_tracker_nested_frames_keep_outer_case_depth():
    tracker = SwitchTracker([SwitchFrame(1, case_depth=1)])
    tracker.advance(
        1, 2, is_switch_line=True, is_case_label=False, in_switch=True, opened_braces=1,
        code="switch (y) {",
    )
    tracker.advance(
        2, 2, is_switch_line=False, is_case_label=True, in_switch=True, opened_braces=0,
        code="case 2:",
    )

    assert tracker.frames == [SwitchFrame(1, 1), SwitchFrame(2, 2)]
    assert tracker.case_indent_units(2, 2, is_case_label=False, is_closing_brace=False) == 2
    assert tracker.case_indent_units(2, 2, is_case_label=True, is_closing_brace=False) == 1
    assert tracker.case_indent_units(2, 1, is_case_label=False, is_closing_brace=True) == 1

    tracker.advance(
        2, 1, is_switch_line=False, is_case_label=False, in_switch=True, opened_braces=0,
        code="}",
    )

    assert tracker.frames == [SwitchFrame(1, 1)]
    assert tracker.case_depth == 1


def test_switch_tracker_frame_without_label_adds_no_indent():
    tracker = SwitchTracker([SwitchFrame(1)])

    assert tracker.in_switch(1) is True
    assert tracker.in_switch(0) is False
    assert tracker.case_indent_units(1, 1, is_case_label=False, is_closing_brace=False) == 0
