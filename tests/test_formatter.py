from __future__ import annotations

import pytest

import razor_indent.formatter as formatter_module
from razor_indent import ContentDriftError, FormatOptions, IndentChange, format_text
from razor_indent.formatter import render_text_output_line

MIXED_RAZOR = '@page\n@model SampleApp.Pages.MixedTextTagModel\n@{\nViewData["Title"]="Razor messy <text> + @:";\n  var users=Model.Users;\n}\n\n<h1>@ViewData["Title"]</h1>\n@if(users!=null){\n<ul>\n @foreach(var u in users){\n<li>\n<text>\nユーザー:\n</text>\n@u.Name\n@if(u.IsAdmin){\n<text>\n(Admin)\n</text>\n }else{\n@: (User)\n }\n@if(u.Tags!=null && u.Tags.Count>0){\n<text>\nTags:\n</text>\n @foreach(var t in u.Tags){\n<text>\n[\n</text>\n@t\n<text>\n]\n</text>\n }\n}else{\n@: Tags: none\n}\n</li>\n}\n</ul>\n}else{\n<p>\n<text>\nNo users\n</text>\n</p>\n}\n\n<p>\n@{\n var prefix="ID:";\n}\n<text>\n@prefix\n</text>\n@Model.Id\n</p>\n\n@section Scripts{\n<script>\n function logUser(name){\nif(name){\n console.log("user:"+name);\n}else{\nconsole.log("no name");\n}}\n</script>\n}'

MIXED_RAZOR_EXPECTED = '@page\n@model SampleApp.Pages.MixedTextTagModel\n@{\n    ViewData["Title"]="Razor messy <text> + @:";\n    var users=Model.Users;\n}\n\n<h1>@ViewData["Title"]</h1>\n@if(users!=null){\n    <ul>\n        @foreach(var u in users){\n            <li>\n                <text>\n                    ユーザー:\n                </text>\n                @u.Name\n                @if(u.IsAdmin){\n                    <text>\n                        (Admin)\n                    </text>\n                }else{\n                    @: (User)\n                }\n                @if(u.Tags!=null && u.Tags.Count>0){\n                    <text>\n                        Tags:\n                    </text>\n                    @foreach(var t in u.Tags){\n                        <text>\n                            [\n                        </text>\n                        @t\n                        <text>\n                            ]\n                        </text>\n                    }\n                }else{\n                    @: Tags: none\n                }\n            </li>\n        }\n    </ul>\n}else{\n    <p>\n        <text>\n            No users\n        </text>\n    </p>\n}\n\n<p>\n    @{\n        var prefix="ID:";\n    }\n    <text>\n        @prefix\n    </text>\n    @Model.Id\n</p>\n\n@section Scripts{\n    <script>\n        function logUser(name){\n            if(name){\n                console.log("user:"+name);\n            }else{\n                console.log("no name");\n            }}\n    </script>\n}'


def _format(text: str, indent_size: int = 4, adjust_text_blocks: bool = True):
    result = format_text(
        text, FormatOptions(indent_size=indent_size, adjust_text_blocks=adjust_text_blocks)
    )
    assert result.error is None, result.error
    return result


def test_consistent_markup_is_unchanged():
    source = "<div>\n  <span>Test</span>\n</div>"

    result = _format(source, indent_size=2)

    assert result.output == source
    assert result.changes == [IndentChange.no_changes()]
    assert str(result.changes[0]) == "No indentation changes detected."


def test_markup_is_reindented_with_change_log():
    result = _format("<div>\n  <span>Test</span>\n</div>", indent_size=4)

    assert result.output == "<div>\n    <span>Test</span>\n</div>"
    assert result.changes == [IndentChange(2, 2, 4)]
    assert str(result.changes[0]) == "Line 2: 2 -> 4"


def test_text_block_code_is_reindented():
    source = '<text>\n    function test() {\nconsole.log("test");\n}\n</text>'

    result = _format(source)

    assert result.output == (
        '<text>\n    function test() {\n        console.log("test");\n    }\n</text>'
    )


def test_text_block_is_idempotent():
    source = "<div>\n  <text>\n        <span>Inner</span>\n    Text line\n  </text>\n</div>"

    first = _format(source, indent_size=2)
    second = _format(first.output, indent_size=2)

    assert first.output == "<div>\n  <text>\n    <span>Inner</span>\n    Text line\n  </text>\n</div>"
    assert second.output == first.output


def test_mixed_razor_document_matches_expected_layout():
    result = _format(MIXED_RAZOR)

    assert result.output == MIXED_RAZOR_EXPECTED


def test_mixed_razor_document_preserves_content_with_two_space_indent():
    result = _format(MIXED_RAZOR, indent_size=2)

    original_lines = MIXED_RAZOR.split("\n")
    output_lines = result.output.split("\n")
    assert len(output_lines) == len(original_lines)
    assert [line.lstrip() for line in output_lines] == [line.lstrip() for line in original_lines]


def test_switch_in_script_block_gets_case_layout_and_separators():
    source = "\n".join(
        [
            "<script>",
            "switch(mode){",
            'case "A":',
            "doA();",
            "break;",
            '  case "B":',
            "doB();",
            "break;",
            "}",
            "</script>",
        ]
    )

    result = _format(source)

    assert result.output == "\n".join(
        [
            "<script>",
            "switch (mode) {",
            '    case "A":',
            "        doA();",
            "        break;",
            "",
            '    case "B":',
            "        doB();",
            "        break;",
            "}",
            "</script>",
        ]
    )
    assert _format(result.output).output == result.output


def test_switch_with_text_output_labels_uses_prefix_separator():
    source = "\n".join(
        [
            "<script>",
            "@: switch (x) {",
            "@: case 1:",
            "@: a();",
            "@: break;",
            "@: case 2:",
            "@: b();",
            "@: }",
            "</script>",
        ]
    )

    result = _format(source, indent_size=2)

    assert result.output == "\n".join(
        [
            "<script>",
            "@: switch (x) {",
            "@:   case 1:",
            "@:     a();",
            "@:     break;",
            "@:",
            "@:   case 2:",
            "@:     b();",
            "@: }",
            "</script>",
        ]
    )
    assert _format(result.output, indent_size=2).output == result.output


def test_ambiguous_script_block_keeps_original_indentation():
    source = "\n".join(
        [
            "<div>",
            "<script>",
            "   var a = 1;",
            "@if (Model.Debug) {",
            " var b = 2;",
            "}",
            "</script>",
            "</div>",
        ]
    )

    result = _format(source)

    assert result.output == "\n".join(
        [
            "<div>",
            "    <script>",
            "   var a = 1;",
            "@if (Model.Debug) {",
            " var b = 2;",
            "}",
            "    </script>",
            "</div>",
        ]
    )


def test_nested_script_block_is_offset_from_parent():
    source = "<div>\n<script>\nif (a) {\nb();\n}\n</script>\n</div>"

    result = _format(source, indent_size=2)

    assert result.output == (
        "<div>\n  <script>\n    if (a) {\n      b();\n    }\n  </script>\n</div>"
    )


def test_disabled_block_adjustment_keeps_block_widths():
    source = "<div>\n<text>\nfoo\n</text>\n</div>"

    adjusted = _format(source, indent_size=2)
    kept = _format(source, indent_size=2, adjust_text_blocks=False)

    assert adjusted.output == "<div>\n  <text>\n    foo\n  </text>\n</div>"
    assert kept.output == "<div>\n  <text>\nfoo\n  </text>\n</div>"


def test_unterminated_block_keeps_original_widths():
    source = "<div>\n<text>\n   foo\n bar"

    result = _format(source, indent_size=2)

    assert result.output == "<div>\n  <text>\n   foo\n bar"


def test_single_line_script_does_not_capture_following_lines():
    source = '<script src="site.js"></script>\n<div>\n<p>x</p>\n</div>'

    result = _format(source, indent_size=2)

    assert result.output == '<script src="site.js"></script>\n<div>\n  <p>x</p>\n</div>'


def test_crlf_line_endings_are_preserved():
    result = _format("<div>\r\n<p>x</p>\r\n</div>\r\n", indent_size=2)

    assert result.output == "<div>\r\n  <p>x</p>\r\n</div>\r\n"


def test_tabs_are_replaced_by_spaces_of_the_same_width():
    result = _format("<div>\n\t<p>x</p>\n</div>", indent_size=4)

    assert result.output == "<div>\n    <p>x</p>\n</div>"
    assert result.changes == [IndentChange.no_changes()]


@pytest.mark.parametrize("indent_size", [0, -4, float("nan"), float("inf")])
def test_invalid_indent_size_falls_back_to_two(indent_size):
    result = format_text("<div>\n<p>x</p>\n</div>", indent_size=indent_size)

    assert result.output == "<div>\n  <p>x</p>\n</div>"


def test_keyword_overrides_take_precedence_over_options():
    result = format_text(
        "<div>\n<p>x</p>\n</div>", FormatOptions(indent_size=2), indent_size=3
    )

    assert result.output == "<div>\n   <p>x</p>\n</div>"


def test_none_overrides_fall_back_to_options():
    result = format_text(
        "<div>\n<p>x</p>\n</div>", FormatOptions(indent_size=4), indent_size=None
    )

    assert result.output == "<div>\n    <p>x</p>\n</div>"


def test_unknown_override_is_rejected():
    with pytest.raises(TypeError):
        format_text("<div>\n<p>x</p>\n</div>", indent=4)  # type: ignore[call-arg]


def test_switch_nested_under_case_keeps_outer_case_indent():
    source = "\n".join(
        [
            "<script>",
            "switch (x) {",
            "case 1:",
            "switch (y) {",
            "case 2:",
            "a();",
            "break;",
            "}",
            "break;",
            "default:",
            "b();",
            "}",
            "</script>",
        ]
    )
    expected = "\n".join(
        [
            "<script>",
            "switch (x) {",
            "  case 1:",
            "    switch (y) {",
            "      case 2:",
            "        a();",
            "        break;",
            "    }",
            "    break;",
            "",
            "  default:",
            "    b();",
            "}",
            "</script>",
        ]
    )

    result = _format(source, indent_size=2)

    assert result.output == expected
    assert _format(result.output, indent_size=2).output == expected


def test_excess_closers_never_go_negative():
    result = _format("</div>\n}\n</ul>\n<p>x</p>", indent_size=2)

    assert result.output == "</div>\n}\n</ul>\n<p>x</p>"


def test_empty_document():
    result = _format("")

    assert result.output == ""
    assert result.changes == [IndentChange.no_changes()]


def test_changes_are_listed_in_ascending_order():
    result = _format("<ul>\n<li>\n<b>x</b>\n</li>\n</ul>", indent_size=2)

    assert [change.line_number for change in result.changes] == [2, 3, 4]
    assert [(change.before, change.after) for change in result.changes] == [
        (0, 2),
        (0, 4),
        (0, 2),
    ]


def test_validation_failure_returns_original_text(monkeypatch):
    def _corrupt(line_infos, plan, layout):
        return ["corrupted" for _ in line_infos]

    monkeypatch.setattr(formatter_module, "render_lines", _corrupt)
    source = "<div>\n<p>x</p>\n</div>"

    result = format_text(source)

    assert result.output == source
    assert result.changes == []
    assert result.error == (
        "Validation failed: non-indentation content changed on line(s) 1, 2, 3."
    )
    assert not result.ok
    with pytest.raises(ContentDriftError) as excinfo:
        result.raise_for_error()
    assert excinfo.value.line_numbers == (1, 2, 3)


def test_render_text_output_line_places_content_offset_after_prefix():
    assert render_text_output_line("@:   case 1:", 4, 2) == "    @:   case 1:"
    assert render_text_output_line("@:", 4, 0) == "    @:"
    assert render_text_output_line("@:x", 0, 0) == "@: x"
