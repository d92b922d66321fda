"""Parser settings and their discovery in TOML files."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_JSON_INDENT,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_NESTING_DEPTH,
    FULL_FILE_HEADER,
)

CONFIG_TABLE = "pr-markup"

# Searched in order inside every directory, each with the tables it may hold.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", CONFIG_TABLE),)),
    (".pr-markup.toml", ((CONFIG_TABLE,), ("tool", CONFIG_TABLE))),
)


@dataclass
class ParserConfig:
    """Configuration for the diff and markdown parsers.

    Attributes:
        max_nesting_depth: Deepest blockquote, details, or inline nesting that
            is parsed structurally; deeper content is kept as literal text.
        full_file_header: Header text of the synthetic hunk built from a full
            file body.
        max_file_size: Maximum input file size in bytes accepted by the CLI.
        json_indent: Indentation used when printing parsed trees as JSON;
            zero prints compact JSON.

    Examples:
        ParserConfig(max_nesting_depth=8, json_indent=0)
    """

    # Parsing
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    full_file_header: str = FULL_FILE_HEADER

    # Input and output
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    json_indent: int = DEFAULT_JSON_INDENT


class ConfigError(ValueError):
    """Raised when a settings table or a setting value is invalid.

    Examples:
        raise ConfigError("`max_nesting_depth` must be a positive integer")
    """


def load_config(search_path: Path) -> ParserConfig:
    """Find and load the settings that apply to `search_path`.

    Each directory from `search_path` up to the filesystem root is checked for
    the files in `CONFIG_SOURCES`: ``[tool.pr-markup]`` in `pyproject.toml`,
    then ``[pr-markup]`` or ``[tool.pr-markup]`` in `.pr-markup.toml`. The
    first table found wins, even when empty. Files that cannot be read or
    are not valid TOML are ignored.

    Args:
        search_path: Directory where the lookup starts.

    Returns:
        ParserConfig: Settings from the nearest table, or the defaults.

    Raises:
        ConfigError: If the nearest table is not a table or has unknown keys.

    Examples:
        load_config(Path("docs"))
    """
    for directory in (search_path.resolve(), *search_path.resolve().parents):
        for filename, table_paths in CONFIG_SOURCES:
            table = _find_table(directory / filename, table_paths)
            if table is not None:
                return _config_from_table(*table)

    return ParserConfig()


def _read_toml(path: Path) -> dict | None:
    if not path.is_file():
        return None
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _find_table(
    path: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[object, str, Path] | None:
    """Return the first matching table in `path` with its dotted name."""
    document = _read_toml(path)
    if document is None:
        return None

    for table_path in table_paths:
        node: object = document
        for key in table_path:
            if not isinstance(node, dict) or key not in node:
                break
            node = node[key]
        else:
            return node, ".".join(table_path), path
    return None


def _config_from_table(table: object, name: str, path: Path) -> ParserConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid `[{name}]` settings in {path}")

    # TOML keys are conventionally kebab-case.
    settings = {key.replace("-", "_"): value for key, value in table.items()}
    known = {config_field.name for config_field in fields(ParserConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ConfigError(
            f"Invalid `[{name}]` settings in {path}: unknown key(s) {', '.join(unknown)}"
        )
    return ParserConfig(**settings)


def validate_config(config: ParserConfig) -> None:
    """Check that every setting has a usable type and value.

    Args:
        config: Configuration to check.

    Raises:
        ConfigError: If a numeric setting is not an integer or out of range,
            or the full-file header is empty.

    Examples:
        validate_config(ParserConfig(max_nesting_depth=4))
    """
    limits = {
        "max_nesting_depth": 1,
        "max_file_size": 1,
        "json_indent": 0,
    }
    for name, minimum in limits.items():
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{name}` must be an integer")
        if value < minimum:
            qualifier = "a positive integer" if minimum == 1 else f">= {minimum}"
            raise ConfigError(f"`{name}` must be {qualifier}")

    if not isinstance(config.full_file_header, str) or not config.full_file_header:
        raise ConfigError("`full_file_header` must be a non-empty string")


def apply_overrides(config: ParserConfig, **overrides: object) -> ParserConfig:
    """Return `config` updated with the overrides that are not None.

    The same instance is returned when every override is None.

    Raises:
        TypeError: If an override name is not a `ParserConfig` field.

    Examples:
        apply_overrides(config, max_nesting_depth=8)
    """
    changes = {name: value for name, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def build_config(search_path: Path, **overrides: object) -> ParserConfig:
    """Load settings for `search_path`, apply CLI overrides, and validate.

    Raises:
        ConfigError: If the settings table or a resulting value is invalid.

    Examples:
        build_config(Path.cwd(), max_nesting_depth=8)
    """
    config = apply_overrides(load_config(search_path), **overrides)
    validate_config(config)
    return config
