from __future__ import annotations

import pytest

from pr_markup.inline import (
    INLINE_MATCHERS,
    match_bold,
    match_italic,
    match_link,
    parse_inline,
)
from pr_markup.models import (
    Bold,
    BoldItalic,
    Code,
    Image,
    Italic,
    LineBreak,
    Link,
    ParserContext,
    Strikethrough,
    Text,
)


def test_empty_string_yields_nothing():
    assert parse_inline("") == []


def test_plain_text():
    assert parse_inline("Just plain text here") == [Text("Just plain text here")]


@pytest.mark.parametrize("source", ["**bold text**", "__bold text__"])
def test_bold(source: str):
    assert parse_inline(source) == [Bold((Text("bold text"),))]


def test_bold_in_middle_of_text():
    assert parse_inline("normal **bold** normal") == [
        Text("normal "),
        Bold((Text("bold"),)),
        Text(" normal"),
    ]


@pytest.mark.parametrize("source", ["*italic text*", "_italic text_"])
def test_italic(source: str):
    assert parse_inline(source) == [Italic((Text("italic text"),))]


@pytest.mark.parametrize("source", ["***bold and italic***", "___bold and italic___"])
def test_bold_italic(source: str):
    assert parse_inline(source) == [BoldItalic((Text("bold and italic"),))]


def test_strikethrough_in_sentence():
    assert parse_inline("This is ~~not~~ correct") == [
        Text("This is "),
        Strikethrough((Text("not"),)),
        Text(" correct"),
    ]


def test_inline_code_is_verbatim():
    assert parse_inline("`let x = **1** + 2`") == [Code("let x = **1** + 2")]


def test_inline_code_in_sentence():
    assert parse_inline("Use `print()` to debug") == [
        Text("Use "),
        Code("print()"),
        Text(" to debug"),
    ]


def test_triple_backticks_are_not_a_code_span():
    result = parse_inline("```not code```")

    assert all(not isinstance(node, Code) or node.code == "" for node in result)
    assert result[0] == Text("`")


def test_link():
    assert parse_inline("[GitHub](https://github.com)") == [
        Link(children=(Text("GitHub"),), url="https://github.com")
    ]


def test_link_with_formatted_text():
    assert parse_inline("[**Bold Link**](https://example.com)") == [
        Link(children=(Bold((Text("Bold Link"),)),), url="https://example.com")
    ]


def test_link_with_nested_brackets():
    assert parse_inline("[see [1]](https://example.com)") == [
        Link(children=(Text("see [1]"),), url="https://example.com")
    ]


def test_link_in_sentence():
    result = parse_inline("Visit [our site](https://example.com) for more")

    assert result == [
        Text("Visit "),
        Link(children=(Text("our site"),), url="https://example.com"),
        Text(" for more"),
    ]


def test_image():
    assert parse_inline("![Alt text](https://example.com/image.png)") == [
        Image(alt="Alt text", url="https://example.com/image.png")
    ]


def test_image_with_empty_alt():
    assert parse_inline("![](https://example.com/image.png)") == [
        Image(alt="", url="https://example.com/image.png")
    ]


def test_line_break_with_two_spaces():
    assert parse_inline("Line one  \nLine two") == [
        Text("Line one"),
        LineBreak(),
        Text("Line two"),
    ]


@pytest.mark.parametrize("tag", ["<br>", "<br/>", "<br />"])
def test_line_break_with_br_tag(tag: str):
    assert parse_inline(f"Line one{tag}Line two") == [
        Text("Line one"),
        LineBreak(),
        Text("Line two"),
    ]


def test_plain_newline_stays_in_text():
    assert parse_inline("one\ntwo") == [Text("one\ntwo")]


def test_multiple_formatting_types():
    result = parse_inline("**bold** and *italic* and `code`")

    assert result == [
        Bold((Text("bold"),)),
        Text(" and "),
        Italic((Text("italic"),)),
        Text(" and "),
        Code("code"),
    ]


def test_italic_closes_on_second_half_of_double_marker():
    result = parse_inline("*italic with **bold** inside*")

    assert result == [
        Italic((Text("italic with *"),)),
        Text("bold** inside*"),
    ]


def test_bold_inside_underscore_italic():
    result = parse_inline("_italic with **bold** inside_")

    assert result == [
        Italic((Text("italic with "), Bold((Text("bold"),)), Text(" inside"))),
    ]


@pytest.mark.parametrize(
    "source",
    ["**unclosed bold", "*unclosed italic", "`unclosed code", "~~unclosed", "[text](no-close"],
)
def test_unterminated_markers_stay_literal(source: str):
    assert parse_inline(source) == [Text(source)]


def test_space_padded_bold_is_literal():
    assert parse_inline("** padded **") == [Text("** padded **")]


def test_space_padded_italic_is_literal():
    assert parse_inline("* padded *") == [Text("* padded *")]


def test_unicode_text_is_preserved():
    assert parse_inline("日本語 🎉 **太字**") == [Text("日本語 🎉 "), Bold((Text("太字"),))]


def test_matcher_order():
    assert [matcher.__name__ for matcher in INLINE_MATCHERS] == [
        "match_bold_italic",
        "match_bold",
        "match_italic",
        "match_strikethrough",
        "match_code",
        "match_image",
        "match_link",
        "match_line_break",
    ]


def test_match_bold_reports_consumed_length():
    node, length = match_bold("say **hi** now", 4, ParserContext())

    assert node == Bold((Text("hi"),))
    assert length == 6


def test_match_italic_steps_one_character_past_double_marker():
    node, length = match_italic("*a **b** c* tail", 0, ParserContext())

    assert length == len("*a **")
    assert node == Italic((Text("a *"),))


def test_match_italic_skips_closer_that_starts_double_marker():
    node, length = match_italic("*x**", 0, ParserContext())

    assert node == Italic((Text("x*"),))
    assert length == 4


def test_match_italic_rejects_double_marker_opener():
    assert match_italic("**b**", 0, ParserContext()) is None


def test_match_link_requires_target():
    assert match_link("[text] (url)", 0, ParserContext()) is None


def test_depth_limit_keeps_nested_text_literal():
    ctx = ParserContext(max_depth=1)

    assert parse_inline("**a *b* c**", ctx) == [Bold((Text("a *b* c"),))]


def test_exhausted_context_returns_raw_text():
    assert parse_inline("**x**", ParserContext(max_depth=0)) == [Text("**x**")]


def test_deep_nesting_does_not_recurse_forever():
    source = "[" * 200 + "x" + "]" * 200 + "(u)"

    result = parse_inline(source)

    assert result
