"""Unified diff parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from .config import ParserConfig
from .constants import (
    ADDITION_MARKER,
    DEFAULT_HUNK_COUNT,
    DELETION_MARKER,
    HUNK_HEADER_PATTERN,
    HUNK_HEADER_PREFIX,
    NEW_FILE_MARKER,
    OLD_FILE_MARKER,
)
from .models import DiffHunk, DiffLine, FileDiff, LineKind, PatchFile


class HunkRange(NamedTuple):
    """Ranges declared by a ``@@ -a,b +c,d @@`` header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int


@dataclass
class PatchInfo:
    """Line-level change information extracted from a patch.

    Attributes:
        added_lines: New-file line numbers that are pure additions.
        deletions_before_line: Deleted line texts keyed by the new-file line
            number they precede, in patch order.
        trailing_deletions: Deletions with no following line in the patch.
    """

    added_lines: set[int] = field(default_factory=set)
    deletions_before_line: dict[int, list[str]] = field(default_factory=dict)
    trailing_deletions: list[str] = field(default_factory=list)


def parse_hunk_header(line: str) -> HunkRange | None:
    """Parse the ranges of a hunk header.

    The line must start with ``@@``; the ranges may follow anywhere after
    that. Omitted counts default to one.

    Args:
        line: Candidate header line.

    Returns:
        HunkRange | None: Parsed ranges, or None when the line does not match
            the header grammar.

    Examples:
        parse_hunk_header("@@ -1,3 +1,4 @@ def main():")  # HunkRange(1, 3, 1, 4)
        parse_hunk_header("@@ -1 +1 @@")  # HunkRange(1, 1, 1, 1)
    """
    if not line.startswith(HUNK_HEADER_PREFIX):
        return None
    match = HUNK_HEADER_PATTERN.search(line)
    if not match:
        return None

    old_start, old_count, new_start, new_count = match.groups()
    return HunkRange(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else DEFAULT_HUNK_COUNT,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else DEFAULT_HUNK_COUNT,
    )


def _is_addition(line: str) -> bool:
    return line.startswith(ADDITION_MARKER) and not line.startswith(NEW_FILE_MARKER)


def _is_deletion(line: str) -> bool:
    return line.startswith(DELETION_MARKER) and not line.startswith(OLD_FILE_MARKER)


class _HunkBuilder:
    """Accumulates the lines of one open hunk and its running counters."""

    def __init__(self, header: str, ranges: HunkRange):
        self.header = header
        self.ranges = ranges
        self.old_line = ranges.old_start
        self.new_line = ranges.new_start
        self.lines = [DiffLine(kind=LineKind.HUNK_HEADER, content=header)]

    def add(self, line: str) -> None:
        if _is_addition(line):
            self.lines.append(
                DiffLine(kind=LineKind.ADDITION, content=line[1:], new_line_number=self.new_line)
            )
            self.new_line += 1
        elif _is_deletion(line):
            self.lines.append(
                DiffLine(kind=LineKind.DELETION, content=line[1:], old_line_number=self.old_line)
            )
            self.old_line += 1
        else:
            content = line[1:] if line.startswith(" ") else line
            self.lines.append(
                DiffLine(
                    kind=LineKind.CONTEXT,
                    content=content,
                    old_line_number=self.old_line,
                    new_line_number=self.new_line,
                )
            )
            self.old_line += 1
            self.new_line += 1

    def build(self) -> DiffHunk:
        return DiffHunk(
            header=self.header,
            old_start=self.ranges.old_start,
            old_count=self.ranges.old_count,
            new_start=self.ranges.new_start,
            new_count=self.ranges.new_count,
            lines=tuple(self.lines),
        )


def parse_hunks(patch: str | None) -> list[DiffHunk]:
    """Split a unified diff patch into typed, line-numbered hunks.

    A header line opens a new hunk and closes the previous one. Lines before
    the first valid header are dropped, and a line that starts with ``@@``
    but does not match the header grammar is dropped without closing the
    open hunk. The function never raises.

    Args:
        patch: Patch text as returned by the hosting API. Empty or None for
            binary and unchanged files.

    Returns:
        list[DiffHunk]: Hunks in patch order; each starts with its header line.

    Examples:
        parse_hunks("@@ -10,4 +10,4 @@\\n line10\\n-deleted\\n+added\\n line12")
    """
    if not patch:
        return []

    hunks: list[DiffHunk] = []
    current: _HunkBuilder | None = None

    for line in patch.split("\n"):
        if line.startswith(HUNK_HEADER_PREFIX):
            ranges = parse_hunk_header(line)
            if ranges is None:
                continue
            if current is not None:
                hunks.append(current.build())
            current = _HunkBuilder(line, ranges)
        elif current is not None:
            current.add(line)

    if current is not None:
        hunks.append(current.build())

    return hunks


def count_changes(patch: str | None) -> tuple[int, int]:
    """Count the addition and deletion lines inside the hunks of a patch.

    Examples:
        count_changes("@@ -1 +1 @@\\n-old\\n+new")  # (1, 1)
    """
    kinds = [line.kind for hunk in parse_hunks(patch) for line in hunk.lines]
    return kinds.count(LineKind.ADDITION), kinds.count(LineKind.DELETION)


def parse_file_diff(file: PatchFile) -> FileDiff:
    """Parse the patch of a single file.

    Args:
        file: File record carrying the patch and API counters.

    Returns:
        FileDiff: Hunks of the patch plus the file's metadata, copied through
            unchanged. A missing patch yields no hunks.
    """
    return FileDiff(
        filename=file.filename,
        status=file.status,
        hunks=tuple(parse_hunks(file.patch)),
        additions=file.additions,
        deletions=file.deletions,
    )


def extract_patch_info(patch: str | None) -> PatchInfo:
    """Collect added line numbers and deletion positions from a patch.

    Deletions are buffered until the next context line (or hunk header) and
    are then filed under the new-file line number reached at that point.
    Deletions still buffered after the last patch line are reported as
    trailing.

    Args:
        patch: Patch text; empty or None yields empty information.

    Returns:
        PatchInfo: Added lines, positioned deletions, and trailing deletions.

    Examples:
        info = extract_patch_info("@@ -1,2 +1,2 @@\\n a\\n-b\\n+c\\n d")
        info.added_lines  # {2}
        info.deletions_before_line  # {3: ["b"]}
    """
    info = PatchInfo()
    if not patch:
        return info

    new_line = 0
    pending: list[str] = []

    def flush() -> None:
        if pending:
            info.deletions_before_line.setdefault(new_line, []).extend(pending)
            pending.clear()

    for line in patch.split("\n"):
        if line.startswith(HUNK_HEADER_PREFIX):
            ranges = parse_hunk_header(line)
            if ranges is not None:
                new_line = ranges.new_start
                flush()
        elif _is_addition(line):
            info.added_lines.add(new_line)
            new_line += 1
        elif _is_deletion(line):
            pending.append(line[1:])
        else:
            flush()
            new_line += 1

    info.trailing_deletions.extend(pending)
    return info


def parse_full_file(
    file: PatchFile, full_content: str | None, config: ParserConfig | None = None
) -> FileDiff:
    """Annotate the complete current file body with the changes of its patch.

    Produces one synthetic hunk spanning the whole file. Lines flagged as
    added by the patch become additions; every other line becomes context,
    preceded by the deletions the patch recorded before it. Deletions filed
    under an added line, or past the line after the end of the file, are
    not shown. Deletions share the old-file number of the context line that
    follows them.

    Args:
        file: File record carrying the patch and API counters.
        full_content: Current file body. When None, falls back to
            `parse_file_diff`.
        config: Configuration providing the synthetic hunk header text.
            Defaults to a new `ParserConfig` when omitted.

    Returns:
        FileDiff: Single-hunk diff covering every physical line of the file.

    Examples:
        parse_full_file(PatchFile("a.py", FileStatus.MODIFIED, patch=patch), body)
    """
    if full_content is None:
        return parse_file_diff(file)

    config = config or ParserConfig()
    info = extract_patch_info(file.patch)
    all_lines = full_content.split("\n")

    diff_lines: list[DiffLine] = []
    old_line = 1

    def emit_deletions(texts: list[str]) -> None:
        for text in texts:
            diff_lines.append(
                DiffLine(kind=LineKind.DELETION, content=text, old_line_number=old_line)
            )

    for line_number, content in enumerate(all_lines, start=1):
        if line_number in info.added_lines:
            diff_lines.append(
                DiffLine(kind=LineKind.ADDITION, content=content, new_line_number=line_number)
            )
            continue

        emit_deletions(info.deletions_before_line.get(line_number, []))
        diff_lines.append(
            DiffLine(
                kind=LineKind.CONTEXT,
                content=content,
                old_line_number=old_line,
                new_line_number=line_number,
            )
        )
        old_line += 1

    emit_deletions(info.deletions_before_line.get(len(all_lines) + 1, []))
    emit_deletions(info.trailing_deletions)

    hunk = DiffHunk(
        header=config.full_file_header,
        old_start=1,
        old_count=len(all_lines),
        new_start=1,
        new_count=len(all_lines),
        lines=tuple(diff_lines),
    )

    return FileDiff(
        filename=file.filename,
        status=file.status,
        hunks=(hunk,),
        additions=file.additions,
        deletions=file.deletions,
    )
