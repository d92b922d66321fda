from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from pr_markup.config import (
    ConfigError,
    ParserConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".pr-markup.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 8
        full_file_header = "Entire file"
        max_file_size = 2048
        json_indent = 4
        """,
    )

    config = load_config(tmp_path)

    assert config == ParserConfig(
        max_nesting_depth=8,
        full_file_header="Entire file",
        max_file_size=2048,
        json_indent=4,
    )


def test_accepts_kebab_case_keys(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max-nesting-depth = 4
        json-indent = 0
        """,
    )

    config = load_config(tmp_path)

    assert config.max_nesting_depth == 4
    assert config.json_indent == 0


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [pr-markup]
        full_file_header = "Dotfile"
        """,
    )
    nested = tmp_path / "child"
    nested.mkdir()

    config = load_config(nested)

    assert config.full_file_header == "Dotfile"


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 3
        """,
    )

    assert load_config(tmp_path).max_nesting_depth == 3


def test_pyproject_wins_over_dotfile_in_same_directory(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 5
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [pr-markup]
        max_nesting_depth = 9
        """,
    )

    assert load_config(tmp_path).max_nesting_depth == 5


def test_load_config_walks_up_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 7
        """,
    )
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)

    config = load_config(nested)

    assert config.max_nesting_depth == 7


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        json_indent = 1
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [project]
        name = "other"
        """,
    )

    assert load_config(child).json_indent == 1


def test_empty_config_table_stops_inheritance(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 2
        """,
    )
    child = tmp_path / "child"
    child.mkdir()
    _write_pyproject(
        child,
        """
        [tool.pr-markup]
        """,
    )

    config = load_config(child)

    assert config.max_nesting_depth == ParserConfig().max_nesting_depth


def test_load_config_returns_defaults_when_missing(tmp_path: Path):
    config = load_config(tmp_path)

    assert config == ParserConfig()


def test_load_config_skips_invalid_toml(tmp_path: Path):
    invalid_dir = tmp_path / "invalid"
    invalid_dir.mkdir()
    _write_pyproject(invalid_dir, "not = {valid")
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        full_file_header = "From Parent"
        """,
    )

    nested = invalid_dir / "child"
    nested.mkdir()
    config = load_config(nested)

    assert config.full_file_header == "From Parent"


def test_load_config_errors_on_unknown_key(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 4
        unexpected = true
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_errors_on_non_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        pr-markup = 3
        """,
    )

    with pytest.raises(ConfigError, match=r"\[pr-markup\]"):
        load_config(tmp_path)


def test_partial_config_merges_with_defaults(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        json_indent = 0
        """,
    )

    config = load_config(tmp_path)

    assert config.json_indent == 0
    # Defaults preserved
    defaults = ParserConfig()
    assert config.max_nesting_depth == defaults.max_nesting_depth
    assert config.full_file_header == defaults.full_file_header


def test_apply_overrides_ignores_none():
    config = ParserConfig()

    assert apply_overrides(config, max_nesting_depth=None) is config


def test_apply_overrides_returns_updated_copy():
    config = ParserConfig()

    updated = apply_overrides(config, max_nesting_depth=3)

    assert updated.max_nesting_depth == 3
    assert config.max_nesting_depth == ParserConfig().max_nesting_depth


def test_apply_overrides_rejects_unknown_field():
    with pytest.raises(TypeError):
        apply_overrides(ParserConfig(), colour="red")


def test_build_config_applies_overrides_and_validates(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.pr-markup]
        max_nesting_depth = 5
        """,
    )

    assert build_config(tmp_path, max_nesting_depth=6).max_nesting_depth == 6

    with pytest.raises(ConfigError):
        build_config(tmp_path, max_nesting_depth=0)


@pytest.mark.parametrize(
    "config",
    [
        ParserConfig(max_nesting_depth=0),
        ParserConfig(max_nesting_depth=-3),
        ParserConfig(max_file_size=0),
        ParserConfig(json_indent=-1),
        ParserConfig(full_file_header=""),
    ],
)
def test_validate_config_rejects_invalid_values(config: ParserConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


@pytest.mark.parametrize(
    "config",
    [
        ParserConfig(max_nesting_depth="deep"),  # type: ignore[arg-type]
        ParserConfig(max_nesting_depth=True),
        ParserConfig(max_file_size="big"),  # type: ignore[arg-type]
        ParserConfig(json_indent=2.5),  # type: ignore[arg-type]
        ParserConfig(full_file_header=3),  # type: ignore[arg-type]
    ],
)
def test_validate_config_rejects_wrong_types(config: ParserConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(ParserConfig())
