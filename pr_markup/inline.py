"""Inline markdown scanning."""

from __future__ import annotations

from collections.abc import Callable

from .constants import LINE_BREAK_TAGS, TRAILING_SPACE_BREAK
from .models import (
    Bold,
    BoldItalic,
    Code,
    Image,
    Inline,
    Italic,
    LineBreak,
    Link,
    ParserContext,
    Strikethrough,
    Text,
)

InlineMatch = tuple[Inline, int]
Matcher = Callable[[str, int, ParserContext], InlineMatch | None]


def _find_closer(text: str, marker: str, start: int) -> str | None:
    """Return the non-empty content between `start` and the next `marker`."""
    end = text.find(marker, start)
    if end == -1 or end == start:
        return None
    return text[start:end]


def _is_padded(content: str) -> bool:
    return content.startswith(" ") or content.endswith(" ")


def match_bold_italic(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``***text***`` or ``___text___``."""
    for marker in ("***", "___"):
        if not text.startswith(marker, pos):
            continue
        content = _find_closer(text, marker, pos + 3)
        if content is not None:
            return BoldItalic(tuple(parse_inline(content, ctx.descend()))), len(content) + 6
    return None


def match_bold(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``**text**`` or ``__text__`` whose content is not space-padded."""
    for marker in ("**", "__"):
        if not text.startswith(marker, pos) or text.startswith(marker + marker[0], pos):
            continue
        content = _find_closer(text, marker, pos + 2)
        if content is not None and not _is_padded(content):
            return Bold(tuple(parse_inline(content, ctx.descend()))), len(content) + 4
    return None


def match_italic(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``*text*`` or ``_text_``.

    A marker that starts a doubled marker is not a closer, but the search
    resumes one character later, so the second half of ``**`` can close.
    """
    for marker in ("*", "_"):
        if not text.startswith(marker, pos) or text.startswith(marker * 2, pos):
            continue

        search = pos + 1
        while True:
            found = text.find(marker, search)
            if found == -1:
                break
            search = found + 1
            if text.startswith(marker * 2, found):
                continue
            content = text[pos + 1 : found]
            if content and not _is_padded(content):
                return Italic(tuple(parse_inline(content, ctx.descend()))), len(content) + 2
    return None


def match_strikethrough(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``~~text~~``."""
    if not text.startswith("~~", pos):
        return None
    content = _find_closer(text, "~~", pos + 2)
    if content is None:
        return None
    return Strikethrough(tuple(parse_inline(content, ctx.descend()))), len(content) + 4


def match_code(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match a single-backtick code span; the content is kept verbatim."""
    if not text.startswith("`", pos) or text.startswith("```", pos):
        return None
    end = text.find("`", pos + 1)
    if end == -1:
        return None
    content = text[pos + 1 : end]
    return Code(content), len(content) + 2


def _match_target(text: str, bracket_end: int) -> tuple[str, int] | None:
    """Read ``(url)`` directly after a closing bracket.

    Returns:
        tuple[str, int] | None: The url and the index just past ``)``.
    """
    if bracket_end + 1 >= len(text) or text[bracket_end + 1] != "(":
        return None
    paren_end = text.find(")", bracket_end + 2)
    if paren_end == -1:
        return None
    return text[bracket_end + 2 : paren_end], paren_end + 1


def match_image(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``![alt](url)``."""
    if not text.startswith("![", pos):
        return None
    bracket_end = text.find("]", pos + 2)
    if bracket_end == -1:
        return None
    target = _match_target(text, bracket_end)
    if target is None:
        return None
    url, end = target
    return Image(alt=text[pos + 2 : bracket_end], url=url), end - pos


def match_link(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match ``[text](url)``, pairing brackets by depth."""
    if not text.startswith("[", pos):
        return None

    depth = 0
    bracket_end = -1
    for index in range(pos, len(text)):
        if text[index] == "[":
            depth += 1
        elif text[index] == "]":
            depth -= 1
            if depth == 0:
                bracket_end = index
                break
    if bracket_end == -1:
        return None

    target = _match_target(text, bracket_end)
    if target is None:
        return None
    url, end = target
    children = tuple(parse_inline(text[pos + 1 : bracket_end], ctx.descend()))
    return Link(children=children, url=url), end - pos


def match_line_break(text: str, pos: int, ctx: ParserContext) -> InlineMatch | None:
    """Match two trailing spaces before a newline, or a ``<br>`` tag."""
    for token in (TRAILING_SPACE_BREAK, *LINE_BREAK_TAGS):
        if text.startswith(token, pos):
            return LineBreak(), len(token)
    return None


# Order is significant: earlier matchers win at the same position.
INLINE_MATCHERS: tuple[Matcher, ...] = (
    match_bold_italic,
    match_bold,
    match_italic,
    match_strikethrough,
    match_code,
    match_image,
    match_link,
    match_line_break,
)


def parse_inline(text: str, context: ParserContext | None = None) -> list[Inline]:
    """Parse span-level markdown into inline nodes.

    Scans left to right. At each position the matchers in `INLINE_MATCHERS`
    are tried in order; the first match emits its node, otherwise the
    character joins the pending plain text. Unterminated markers therefore
    stay literal. Once `context` reaches its depth limit the text is
    returned unparsed as a single `Text` node.

    Args:
        text: Inline markdown source.
        context: Recursion state; defaults to a fresh `ParserContext`.

    Returns:
        list[Inline]: Inline nodes in source order; empty for empty input.

    Examples:
        parse_inline("**bold** and `code`")
        # [Bold((Text("bold"),)), Text(" and "), Code("code")]
    """
    ctx = context or ParserContext()
    if not text:
        return []
    if ctx.exhausted:
        return [Text(text)]

    result: list[Inline] = []
    pending: list[str] = []
    pos = 0

    while pos < len(text):
        for matcher in INLINE_MATCHERS:
            match = matcher(text, pos, ctx)
            if match is None:
                continue
            node, length = match
            if pending:
                result.append(Text("".join(pending)))
                pending.clear()
            result.append(node)
            pos += length
            break
        else:
            pending.append(text[pos])
            pos += 1

    if pending:
        result.append(Text("".join(pending)))

    return result
