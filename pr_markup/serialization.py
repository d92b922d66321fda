"""JSON persistence for parsed diff and markdown trees."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import fields
from enum import Enum

from .constants import DEFAULT_JSON_INDENT
from .exceptions import SerializationError
from .models import (
    Block,
    Blockquote,
    Bold,
    BoldItalic,
    Code,
    CodeBlock,
    Details,
    DiffHunk,
    DiffLine,
    FileDiff,
    FileStatus,
    Heading,
    HorizontalRule,
    Image,
    Italic,
    LineBreak,
    LineKind,
    Link,
    ListItem,
    OrderedList,
    Paragraph,
    Strikethrough,
    Table,
    TableAlignment,
    Text,
    UnorderedList,
)

TYPE_KEY = "type"

NODE_TYPES = {
    node_class.node_type: node_class
    for node_class in (
        DiffLine,
        DiffHunk,
        FileDiff,
        Text,
        Bold,
        Italic,
        BoldItalic,
        Strikethrough,
        Code,
        Link,
        Image,
        LineBreak,
        Heading,
        Paragraph,
        Blockquote,
        CodeBlock,
        ListItem,
        UnorderedList,
        OrderedList,
        Table,
        HorizontalRule,
        Details,
    )
}

BLOCK_TYPES = (
    Heading,
    Paragraph,
    Blockquote,
    CodeBlock,
    UnorderedList,
    OrderedList,
    Table,
    HorizontalRule,
    Details,
)

# Fields whose JSON strings decode to enum members.
ENUM_FIELDS: dict[str, type[Enum]] = {
    "kind": LineKind,
    "status": FileStatus,
    "alignments": TableAlignment,
}


def to_data(value: object) -> object:
    """Convert a model node into JSON-compatible data.

    Nodes become dicts tagged with their ``"type"``, tuples become lists and
    enum members become their values.

    Args:
        value: A model node, a tuple of nodes, or a plain value.

    Returns:
        object: Data accepted by `json.dumps`.

    Examples:
        to_data(Text("hi"))  # {"type": "text", "text": "hi"}
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [to_data(item) for item in value]
    node_type = getattr(type(value), "node_type", None)
    if node_type is None:
        return value

    data: dict[str, object] = {TYPE_KEY: node_type}
    for node_field in fields(value):
        data[node_field.name] = to_data(getattr(value, node_field.name))
    return data


def from_data(data: object, path: str = "") -> object:
    """Rebuild model nodes from data produced by `to_data`.

    Args:
        data: Decoded JSON data.
        path: Location of `data` in the enclosing payload, used in errors.

    Returns:
        object: The reconstructed node, tuple, or plain value.

    Raises:
        SerializationError: If a node type is unknown, fields are missing or
            unexpected, or an enum value is invalid.

    Examples:
        from_data({"type": "text", "text": "hi"})  # Text("hi")
    """
    if isinstance(data, list):
        return tuple(from_data(item, _join(path, index)) for index, item in enumerate(data))
    if not isinstance(data, dict):
        return data

    node_type = data.get(TYPE_KEY)
    node_class = NODE_TYPES.get(node_type) if isinstance(node_type, str) else None
    if node_class is None:
        raise SerializationError(f"Unknown node type {node_type!r}", path)

    expected = {node_field.name for node_field in fields(node_class)}
    provided = set(data) - {TYPE_KEY}
    if provided != expected:
        missing = ", ".join(sorted(expected - provided)) or "none"
        unexpected = ", ".join(sorted(provided - expected)) or "none"
        raise SerializationError(
            f"Fields of `{node_type}` do not match (missing: {missing}; unexpected: {unexpected})",
            path,
        )

    values = {
        name: _decode_field(name, data[name], _join(path, name)) for name in sorted(expected)
    }
    return node_class(**values)


def _decode_field(name: str, raw: object, path: str) -> object:
    enum_type = ENUM_FIELDS.get(name)
    if enum_type is None:
        return from_data(raw, path)

    try:
        if isinstance(raw, list):
            return tuple(enum_type(item) for item in raw)
        return enum_type(raw)
    except (TypeError, ValueError) as error:
        raise SerializationError(f"Invalid value for `{name}`: {raw!r}", path) from error


def _join(path: str, key: object) -> str:
    return f"{path}.{key}" if path else str(key)


def dump_file_diff(file_diff: FileDiff, indent: int | None = DEFAULT_JSON_INDENT) -> str:
    """Serialize a `FileDiff` to a JSON string."""
    return json.dumps(to_data(file_diff), indent=indent, ensure_ascii=False)


def load_file_diff(payload: str) -> FileDiff:
    """Deserialize a `FileDiff` produced by `dump_file_diff`.

    Raises:
        SerializationError: If the payload is not valid JSON or not a file diff.
    """
    result = from_data(_decode_json(payload))
    if not isinstance(result, FileDiff):
        raise SerializationError("Payload is not a file diff")
    return result


def dump_blocks(blocks: Iterable[Block], indent: int | None = DEFAULT_JSON_INDENT) -> str:
    """Serialize parsed markdown blocks to a JSON array."""
    return json.dumps(to_data(tuple(blocks)), indent=indent, ensure_ascii=False)


def load_blocks(payload: str) -> list[Block]:
    """Deserialize blocks produced by `dump_blocks`.

    Raises:
        SerializationError: If the payload is not valid JSON or not a list of
            blocks.
    """
    data = _decode_json(payload)
    if not isinstance(data, list):
        raise SerializationError("Payload is not a list of blocks")

    blocks = list(from_data(data))
    for index, block in enumerate(blocks):
        if not isinstance(block, BLOCK_TYPES):
            raise SerializationError(f"Item is not a block: {data[index]!r}", str(index))
    return blocks


def _decode_json(payload: str) -> object:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as error:
        raise SerializationError(f"Invalid JSON: {error}") from error
