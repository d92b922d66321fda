"""Block-level markdown parsing."""

from __future__ import annotations

from .config import ParserConfig
from .constants import (
    BLOCKQUOTE_MARKER,
    CODE_FENCE,
    DEFAULT_SUMMARY,
    DETAILS_CLOSER,
    DETAILS_OPENERS,
    HORIZONTAL_RULE_CHARS,
    MAX_HEADING_LEVEL,
    ORDERED_LIST_PATTERN,
    SUMMARY_CLOSE,
    SUMMARY_OPEN,
    TABLE_SEPARATOR_CHARS,
    TASK_CHECKED,
    TASK_UNCHECKED,
    UNORDERED_LIST_MARKERS,
)
from .inline import parse_inline
from .models import (
    Block,
    Blockquote,
    CodeBlock,
    Details,
    Heading,
    HorizontalRule,
    Inline,
    ListItem,
    OrderedList,
    Paragraph,
    ParserContext,
    Table,
    TableAlignment,
    Text,
    UnorderedList,
)

BlockResult = tuple[Block | None, int]


def _is_details_opener(trimmed: str) -> bool:
    return trimmed.startswith(DETAILS_OPENERS)


def _is_horizontal_rule(trimmed: str) -> bool:
    """Check for a rule such as ``---``, ``***`` or ``- - -``.

    Examples:
        _is_horizontal_rule("- - -")  # True
        _is_horizontal_rule("-*-")  # False
    """
    stripped = "".join(trimmed.split())
    if len(stripped) < 3 or stripped[0] not in HORIZONTAL_RULE_CHARS:
        return False
    return stripped == stripped[0] * len(stripped)


def _heading_level(trimmed: str) -> int:
    """Return the ATX heading level of a line, or 0 when it is not a heading.

    One to six ``#`` characters must be followed directly by a space.

    Examples:
        _heading_level("## Title")  # 2
        _heading_level("#NoSpace")  # 0
    """
    level = 0
    while level < len(trimmed) and level < MAX_HEADING_LEVEL and trimmed[level] == "#":
        level += 1
    if level == 0 or level >= len(trimmed) or trimmed[level] != " ":
        return 0
    return level


def _is_code_fence(trimmed: str) -> bool:
    return trimmed.startswith(CODE_FENCE)


def _is_table_separator(line: str) -> bool:
    """Check for a separator row such as ``|:---|---:|``."""
    stripped = line.strip()
    if not stripped.startswith("|"):
        return False
    return all(char in TABLE_SEPARATOR_CHARS or char.isspace() for char in stripped)


def _starts_table(lines: list[str], index: int) -> bool:
    return (
        lines[index].strip().startswith("|")
        and index + 1 < len(lines)
        and _is_table_separator(lines[index + 1])
    )


def _is_blockquote(trimmed: str) -> bool:
    return trimmed.startswith(BLOCKQUOTE_MARKER)


def _is_unordered_item(trimmed: str) -> bool:
    return trimmed.startswith(UNORDERED_LIST_MARKERS)


def _is_ordered_item(trimmed: str) -> bool:
    return ORDERED_LIST_PATTERN.match(trimmed) is not None


def _interrupts_paragraph(lines: list[str], index: int) -> bool:
    """Check whether a line ends a paragraph by starting another block."""
    trimmed = lines[index].strip()
    return (
        not trimmed
        or _is_details_opener(trimmed)
        or _is_horizontal_rule(trimmed)
        or _heading_level(trimmed) > 0
        or _is_code_fence(trimmed)
        or _starts_table(lines, index)
        or _is_blockquote(trimmed)
        or _is_unordered_item(trimmed)
        or _is_ordered_item(trimmed)
    )


def _parse_heading(trimmed: str, ctx: ParserContext) -> Heading:
    level = _heading_level(trimmed)
    return Heading(level=level, children=tuple(parse_inline(trimmed[level + 1 :], ctx)))


def _parse_code_block(lines: list[str], index: int) -> BlockResult:
    """Capture a fenced code block verbatim.

    A missing closing fence captures everything up to the end of input.
    """
    language = lines[index].strip()[len(CODE_FENCE) :].strip() or None

    code_lines: list[str] = []
    index += 1
    while index < len(lines):
        line = lines[index]
        index += 1
        if _is_code_fence(line.strip()):
            break
        code_lines.append(line)

    return CodeBlock(language=language, code="\n".join(code_lines)), index


def _split_row(line: str) -> list[str]:
    """Split a table row on ``|``, dropping the empty outer segments."""
    parts = line.strip().split("|")
    last = len(parts) - 1
    return [
        part.strip()
        for position, part in enumerate(parts)
        if not ((position == 0 or position == last) and part == "")
    ]


def _parse_alignment(cell: str) -> TableAlignment:
    starts = cell.startswith(":")
    ends = cell.endswith(":")
    if starts and ends:
        return TableAlignment.CENTER
    if ends:
        return TableAlignment.RIGHT
    if starts:
        return TableAlignment.LEFT
    return TableAlignment.NONE


def _parse_row(line: str, ctx: ParserContext) -> tuple[tuple[Inline, ...], ...]:
    return tuple(tuple(parse_inline(cell, ctx)) for cell in _split_row(line))


def _parse_table(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    headers = _parse_row(lines[index], ctx)
    alignments = tuple(_parse_alignment(cell) for cell in _split_row(lines[index + 1]))

    rows = []
    index += 2
    while index < len(lines) and lines[index].strip().startswith("|"):
        rows.append(_parse_row(lines[index], ctx))
        index += 1

    return Table(headers=headers, alignments=alignments, rows=tuple(rows)), index


def _parse_blockquote(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    """Collect ``>`` lines and parse their content as a nested document.

    A blank line continues the quote only when the next line is quoted again.
    """
    quoted: list[str] = []

    while index < len(lines):
        trimmed = lines[index].strip()
        if _is_blockquote(trimmed):
            content = trimmed[len(BLOCKQUOTE_MARKER) :]
            quoted.append(content[1:] if content.startswith(" ") else content)
            index += 1
        elif not trimmed and quoted:
            index += 1
            if index < len(lines) and _is_blockquote(lines[index].strip()):
                quoted.append("")
            else:
                break
        else:
            break

    return Blockquote(children=tuple(_parse_nested("\n".join(quoted), ctx))), index


def _parse_task(content: str) -> tuple[bool, bool, str]:
    """Strip task-list syntax.

    Returns:
        tuple[bool, bool, str]: Task flag, checked flag, and remaining text.
    """
    if content.startswith(TASK_UNCHECKED):
        return True, False, content[len(TASK_UNCHECKED) :]
    if content.startswith(TASK_CHECKED):
        return True, True, content[len(TASK_CHECKED[0]) :]
    return False, False, content


def _list_item(content: str, ctx: ParserContext) -> ListItem:
    is_task, is_checked, text = _parse_task(content)
    paragraph = Paragraph(children=tuple(parse_inline(text, ctx)))
    return ListItem(is_task=is_task, is_checked=is_checked, children=(paragraph,))


def _parse_unordered_list(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    items = []
    while index < len(lines):
        trimmed = lines[index].strip()
        if not _is_unordered_item(trimmed):
            break
        items.append(_list_item(trimmed[2:], ctx))
        index += 1

    return UnorderedList(items=tuple(items)), index


def _parse_ordered_list(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    items = []
    start = 1
    while index < len(lines):
        match = ORDERED_LIST_PATTERN.match(lines[index].strip())
        if match is None:
            break
        if not items:
            start = int(match.group(1))
        items.append(_list_item(lines[index].strip()[match.end() :], ctx))
        index += 1

    return OrderedList(start=start, items=tuple(items)), index


def _parse_details(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    """Parse a ``<details>`` block with an optional one-line ``<summary>``.

    Content runs until a line that is exactly ``</details>`` or the end of
    input. Lines opening a multi-line summary are skipped until a summary
    has been found.
    """
    summary: tuple[Inline, ...] = (Text(DEFAULT_SUMMARY),)
    found_summary = False
    content_lines: list[str] = []

    index += 1
    while index < len(lines):
        line = lines[index]
        trimmed = line.strip()
        index += 1

        if trimmed.startswith(SUMMARY_OPEN) and trimmed.endswith(SUMMARY_CLOSE):
            summary_text = trimmed.replace(SUMMARY_OPEN, "").replace(SUMMARY_CLOSE, "").strip()
            summary = tuple(parse_inline(summary_text, ctx))
            found_summary = True
        elif trimmed == DETAILS_CLOSER:
            break
        elif found_summary or not trimmed.startswith("<summary"):
            content_lines.append(line)

    children = _parse_nested("\n".join(content_lines).strip(), ctx)
    return Details(summary=summary, children=tuple(children)), index


def _parse_paragraph(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    """Join lines up to the next blank line or block start.

    The first line is always consumed, so a line such as ``#NoSpace`` that
    starts no block becomes a paragraph.
    """
    paragraph_lines = [lines[index]]
    index += 1
    while index < len(lines) and not _interrupts_paragraph(lines, index):
        paragraph_lines.append(lines[index])
        index += 1

    children = parse_inline("\n".join(paragraph_lines), ctx)
    if not children:
        return None, index
    return Paragraph(children=tuple(children)), index


def _parse_block(lines: list[str], index: int, ctx: ParserContext) -> BlockResult:
    """Parse the block starting at `index`.

    Returns:
        BlockResult: The block (None for blank lines) and the index of the
            first unconsumed line.
    """
    trimmed = lines[index].strip()

    if not trimmed:
        return None, index + 1
    if _is_details_opener(trimmed):
        return _parse_details(lines, index, ctx)
    if _is_horizontal_rule(trimmed):
        return HorizontalRule(), index + 1
    if _heading_level(trimmed):
        return _parse_heading(trimmed, ctx), index + 1
    if _is_code_fence(trimmed):
        return _parse_code_block(lines, index)
    if _starts_table(lines, index):
        return _parse_table(lines, index, ctx)
    if _is_blockquote(trimmed):
        return _parse_blockquote(lines, index, ctx)
    if _is_unordered_item(trimmed):
        return _parse_unordered_list(lines, index, ctx)
    if _is_ordered_item(trimmed):
        return _parse_ordered_list(lines, index, ctx)
    return _parse_paragraph(lines, index, ctx)


def _parse_nested(text: str, ctx: ParserContext) -> list[Block]:
    nested = ctx.descend()
    if nested.exhausted:
        # Too deep to recurse; keep the raw text.
        return [Paragraph(children=(Text(text),))] if text.strip() else []
    return _parse_document(text, nested)


def _parse_document(text: str, ctx: ParserContext) -> list[Block]:
    lines = text.split("\n")
    blocks: list[Block] = []
    index = 0

    while index < len(lines):
        block, index = _parse_block(lines, index, ctx)
        if block is not None:
            blocks.append(block)

    return blocks


def parse_markdown(text: str, config: ParserConfig | None = None) -> list[Block]:
    """Parse a markdown document into block nodes.

    Supports ATX headings, fenced code blocks, blockquotes, bullet, numbered
    and task lists, pipe tables, horizontal rules, and ``<details>`` blocks.
    Block content is parsed with `parse_inline`. The function never raises;
    malformed constructs degrade to paragraphs or literal text.

    Args:
        text: The markdown document.
        config: Configuration providing the nesting limit. Defaults to a new
            `ParserConfig` when omitted.

    Returns:
        list[Block]: Blocks in source order; empty for blank input.

    Examples:
        parse_markdown("# Title\\n\\nSome *text*.")
    """
    config = config or ParserConfig()
    return _parse_document(text, ParserContext(max_depth=config.max_nesting_depth))
