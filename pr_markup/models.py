"""Data models for pr-markup."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import ClassVar

from .constants import DEFAULT_MAX_NESTING_DEPTH, LINE_NUMBER_WIDTH

# ---------------------------------------------------------------------------
# Unified diff
# ---------------------------------------------------------------------------


class LineKind(Enum):
    """Classification of a single line inside a diff hunk.

    Attributes:
        ADDITION: Line present only in the new version.
        DELETION: Line present only in the old version.
        CONTEXT: Unchanged line present in both versions.
        HUNK_HEADER: The ``@@ ... @@`` line that opens a hunk.
    """

    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"
    HUNK_HEADER = "hunk_header"


class FileStatus(Enum):
    """Per-file status reported by the hosting API."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffLine:
    """One classified, dual-numbered line of a hunk.

    Attributes:
        kind: Line classification.
        content: Line text without its leading marker character.
        old_line_number: Line number in the old file; set for deletions and
            context lines only.
        new_line_number: Line number in the new file; set for additions and
            context lines only.
    """

    node_type: ClassVar[str] = "diff_line"

    kind: LineKind
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None

    @property
    def line_number_display(self) -> str:
        """Gutter text with the old and new numbers in fixed-width columns."""
        old = "" if self.old_line_number is None else str(self.old_line_number)
        new = "" if self.new_line_number is None else str(self.new_line_number)
        return f"{old.ljust(LINE_NUMBER_WIDTH)}{new.ljust(LINE_NUMBER_WIDTH)}"


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous changed region of a file.

    The range counts are copied from the header and never recomputed.

    Attributes:
        header: Original header text.
        old_start: First line of the range in the old file.
        old_count: Number of old-file lines claimed by the header.
        new_start: First line of the range in the new file.
        new_count: Number of new-file lines claimed by the header.
        lines: Hunk lines in patch order.
    """

    node_type: ClassVar[str] = "diff_hunk"

    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class FileDiff:
    """Parsed diff of one file."""

    node_type: ClassVar[str] = "file_diff"

    filename: str
    status: FileStatus
    hunks: tuple[DiffHunk, ...]
    additions: int
    deletions: int


@dataclass(frozen=True)
class PatchFile:
    """Per-file record of a pull request as returned by the hosting API.

    Attributes:
        filename: Path of the file in the repository.
        status: Change status of the file.
        additions: Number of added lines reported by the API.
        deletions: Number of deleted lines reported by the API.
        changes: Total number of changed lines reported by the API.
        sha: Blob SHA of the file.
        patch: Unified diff text; None for binary or oversized files.
    """

    filename: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    sha: str = ""
    patch: str | None = None

    @classmethod
    def from_api(cls, payload: Mapping[str, object]) -> PatchFile:
        """Build a `PatchFile` from one entry of the API's file listing.

        Args:
            payload: Decoded JSON object for a single file.

        Returns:
            PatchFile: Record with missing counters defaulted to zero.

        Raises:
            KeyError: If ``filename`` or ``status`` is missing.
            ValueError: If ``status`` is not a known file status.

        Examples:
            PatchFile.from_api({"filename": "a.py", "status": "modified", "patch": "@@ ..."})
        """
        return cls(
            filename=str(payload["filename"]),
            status=FileStatus(payload["status"]),
            additions=int(payload.get("additions") or 0),
            deletions=int(payload.get("deletions") or 0),
            changes=int(payload.get("changes") or 0),
            sha=str(payload.get("sha") or ""),
            patch=payload.get("patch"),
        )


# ---------------------------------------------------------------------------
# Markdown inlines
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    node_type: ClassVar[str] = "text"

    text: str


@dataclass(frozen=True)
class Bold:
    node_type: ClassVar[str] = "bold"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Italic:
    node_type: ClassVar[str] = "italic"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class BoldItalic:
    node_type: ClassVar[str] = "bold_italic"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Strikethrough:
    node_type: ClassVar[str] = "strikethrough"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Code:
    """Inline code span; `code` is verbatim and never re-parsed."""

    node_type: ClassVar[str] = "code"

    code: str


@dataclass(frozen=True)
class Link:
    node_type: ClassVar[str] = "link"

    children: tuple[Inline, ...]
    url: str


@dataclass(frozen=True)
class Image:
    node_type: ClassVar[str] = "image"

    alt: str
    url: str


@dataclass(frozen=True)
class LineBreak:
    node_type: ClassVar[str] = "line_break"


Inline = Text | Bold | Italic | BoldItalic | Strikethrough | Code | Link | Image | LineBreak


# ---------------------------------------------------------------------------
# Markdown blocks
# ---------------------------------------------------------------------------


class TableAlignment(Enum):
    """Column alignment declared by a table separator row."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    NONE = "none"


@dataclass(frozen=True)
class Heading:
    node_type: ClassVar[str] = "heading"

    level: int
    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Paragraph:
    node_type: ClassVar[str] = "paragraph"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Blockquote:
    node_type: ClassVar[str] = "blockquote"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code block; `code` is verbatim and never re-parsed."""

    node_type: ClassVar[str] = "code_block"

    language: str | None
    code: str


@dataclass(frozen=True)
class ListItem:
    """List entry, optionally a task with a checkbox.

    Attributes:
        is_task: True when the item carried ``[ ]`` or ``[x]`` syntax.
        is_checked: Checkbox state; only meaningful when `is_task` is True.
        children: Nested blocks; in practice a single paragraph.
    """

    node_type: ClassVar[str] = "list_item"

    is_task: bool
    is_checked: bool
    children: tuple[Block, ...] = ()


@dataclass(frozen=True)
class UnorderedList:
    node_type: ClassVar[str] = "unordered_list"

    items: tuple[ListItem, ...] = ()


@dataclass(frozen=True)
class OrderedList:
    node_type: ClassVar[str] = "ordered_list"

    start: int
    items: tuple[ListItem, ...] = ()


@dataclass(frozen=True)
class Table:
    """Pipe table.

    Attributes:
        headers: One inline sequence per header cell.
        alignments: One alignment per separator cell.
        rows: Data rows, each a tuple of inline sequences.
    """

    node_type: ClassVar[str] = "table"

    headers: tuple[tuple[Inline, ...], ...]
    alignments: tuple[TableAlignment, ...]
    rows: tuple[tuple[tuple[Inline, ...], ...], ...] = ()


@dataclass(frozen=True)
class HorizontalRule:
    node_type: ClassVar[str] = "horizontal_rule"


@dataclass(frozen=True)
class Details:
    node_type: ClassVar[str] = "details"

    summary: tuple[Inline, ...]
    children: tuple[Block, ...] = ()


Block = (
    Heading
    | Paragraph
    | Blockquote
    | CodeBlock
    | UnorderedList
    | OrderedList
    | Table
    | HorizontalRule
    | Details
)


# ---------------------------------------------------------------------------
# Parser state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParserContext:
    """Recursion bookkeeping shared by the block and inline scanners.

    Attributes:
        max_depth: Deepest nesting level that is still parsed structurally.
        depth: Current nesting level.

    Examples:
        ctx = ParserContext(max_depth=2)
        ctx.descend().descend().exhausted  # True
    """

    max_depth: int = DEFAULT_MAX_NESTING_DEPTH
    depth: int = 0

    @property
    def exhausted(self) -> bool:
        return self.depth >= self.max_depth

    def descend(self) -> ParserContext:
        return replace(self, depth=self.depth + 1)
