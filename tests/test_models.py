from __future__ import annotations

import dataclasses

import pytest

from pr_markup.models import (
    DiffLine,
    FileStatus,
    LineKind,
    ParserContext,
    PatchFile,
    TableAlignment,
    Text,
)


def test_line_kind_members():
    assert [kind.value for kind in LineKind] == ["addition", "deletion", "context", "hunk_header"]


def test_table_alignment_members():
    assert [alignment.value for alignment in TableAlignment] == ["left", "center", "right", "none"]


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        (DiffLine(LineKind.CONTEXT, "x", 10, 10), "10  10  "),
        (DiffLine(LineKind.DELETION, "x", 11, None), "11      "),
        (DiffLine(LineKind.ADDITION, "x", None, 11), "    11  "),
        (DiffLine(LineKind.HUNK_HEADER, "@@ -1 +1 @@"), "        "),
        (DiffLine(LineKind.CONTEXT, "x", 12345, 7), "123457   "),
    ],
)
def test_line_number_display(line: DiffLine, expected: str):
    assert line.line_number_display == expected


def test_models_are_immutable():
    line = DiffLine(LineKind.CONTEXT, "x", 1, 1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        line.content = "y"  # type: ignore[misc]


def test_nodes_compare_by_value():
    assert Text("a") == Text("a")
    assert Text("a") != Text("b")


def test_patch_file_from_api():
    payload = {
        "sha": "abc123",
        "filename": "src/app.py",
        "status": "modified",
        "additions": 4,
        "deletions": 2,
        "changes": 6,
        "patch": "@@ -1 +1 @@\n-a\n+b",
    }

    patch_file = PatchFile.from_api(payload)

    assert patch_file == PatchFile(
        filename="src/app.py",
        status=FileStatus.MODIFIED,
        additions=4,
        deletions=2,
        changes=6,
        sha="abc123",
        patch="@@ -1 +1 @@\n-a\n+b",
    )


def test_patch_file_from_api_defaults_missing_fields():
    patch_file = PatchFile.from_api({"filename": "logo.png", "status": "added"})

    assert patch_file.additions == 0
    assert patch_file.changes == 0
    assert patch_file.sha == ""
    assert patch_file.patch is None


def test_patch_file_from_api_rejects_unknown_status():
    with pytest.raises(ValueError):
        PatchFile.from_api({"filename": "a.py", "status": "exploded"})


def test_patch_file_from_api_requires_filename():
    with pytest.raises(KeyError):
        PatchFile.from_api({"status": "added"})


def test_parser_context_defaults():
    ctx = ParserContext()

    assert ctx.depth == 0
    assert ctx.max_depth == 32
    assert ctx.exhausted is False


def test_parser_context_descend_returns_new_context():
    ctx = ParserContext(max_depth=2)

    child = ctx.descend()

    assert ctx.depth == 0
    assert child.depth == 1
    assert child.max_depth == 2
    assert child.exhausted is False
    assert child.descend().exhausted is True
