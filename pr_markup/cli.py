"""
Parses pull request patches and markdown documents from the command line.
The parsed trees are printed to stdout as JSON.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, ParserConfig, build_config
from .diff_parser import count_changes, parse_file_diff, parse_full_file
from .exceptions import InputFileError
from .filesystem import get_max_file_size, read_input
from .markdown_parser import parse_markdown
from .models import FileStatus, PatchFile
from .serialization import dump_blocks, dump_file_diff

__all__ = ["cli"]

_STATUS_CHOICES = [status.value for status in FileStatus]


def _load_config(filepath: Path, max_nesting_depth: int | None) -> ParserConfig:
    try:
        return build_config(filepath.parent, max_nesting_depth=max_nesting_depth)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _read(filepath: Path, config: ParserConfig) -> str:
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        return read_input(filepath, max_file_size)
    except InputFileError as error:
        raise click.ClickException(str(error)) from error


def _indent(config: ParserConfig) -> int | None:
    return config.json_indent or None


@click.group()
@click.version_option(package_name="pr-markup")
def cli():
    """Parse unified diffs and GitHub-flavored markdown into JSON trees."""


@cli.command()
@click.argument("patch", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--full-content",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Current file body; annotates the whole file instead of the hunks.",
)
@click.option("--filename", help="Filename recorded in the output (defaults to the patch name).")
@click.option(
    "--status",
    type=click.Choice(_STATUS_CHOICES),
    default=FileStatus.MODIFIED.value,
    show_default=True,
    help="File status recorded in the output.",
)
@click.option("--max-nesting-depth", type=int, help="Maximum nesting depth.")
def diff(
    patch: Path,
    full_content: Path | None = None,
    filename: str | None = None,
    status: str = FileStatus.MODIFIED.value,
    max_nesting_depth: int | None = None,
):
    """
    Parse a unified diff patch and print the resulting file diff.

    Args:
        patch: Path to a file holding the patch of a single file.
        full_content: Optional path to the current body of the file.
        filename: Filename to record; defaults to the patch file name.
        status: File status to record.
        max_nesting_depth: Override for the configured nesting limit.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If an input file cannot be read safely.

    Examples:
        pr-markup diff change.patch --full-content src/app.py
    """
    config = _load_config(patch, max_nesting_depth)

    # Patch fields from the API carry no trailing newline.
    patch_text = _read(patch, config).removesuffix("\n")
    additions, deletions = count_changes(patch_text)
    patch_file = PatchFile(
        filename=filename or patch.name,
        status=FileStatus(status),
        additions=additions,
        deletions=deletions,
        patch=patch_text or None,
    )

    if full_content is not None:
        if patch_file.patch is None:
            click.echo(f"Warning: {patch} is empty; every line is reported as context.", err=True)
        file_diff = parse_full_file(patch_file, _read(full_content, config), config)
    else:
        file_diff = parse_file_diff(patch_file)
        if not file_diff.hunks:
            click.echo(f"Warning: no hunks found in {patch}.", err=True)

    click.echo(dump_file_diff(file_diff, indent=_indent(config)))


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max-nesting-depth", type=int, help="Maximum nesting depth.")
def markdown(filepath: Path, max_nesting_depth: int | None = None):
    """
    Parse a markdown document and print its block tree.

    Args:
        filepath: Path to the markdown document.
        max_nesting_depth: Override for the configured nesting limit.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the document cannot be read safely.

    Examples:
        pr-markup markdown PULL_REQUEST_TEMPLATE.md --max-nesting-depth 8
    """
    config = _load_config(filepath, max_nesting_depth)
    blocks = parse_markdown(_read(filepath, config), config)
    click.echo(dump_blocks(blocks, indent=_indent(config)))


if __name__ == "__main__":
    cli()
