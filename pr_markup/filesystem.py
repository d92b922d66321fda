"""Guarded reading of patch and markdown input files."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import InputFileError

MAX_FILE_SIZE_ENV_VAR = "PR_MARKUP_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the input size limit, honouring ``PR_MARKUP_MAX_FILE_SIZE``.

    Args:
        default: Limit in bytes used when the variable is not set.

    Returns:
        int: The size limit in bytes.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.

    Examples:
        get_max_file_size(default=1024 * 1024)
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR}={raw!r} is invalid (expected positive integer)"
        ) from error

    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {limit}.")
    return limit


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat `filepath` without following symlinks and require a regular file.

    Raises:
        InputFileError: If the path cannot be stat'ed, is a symlink, or is a
            directory, device, FIFO or socket.
    """
    try:
        info = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise InputFileError(f"Cannot access {filepath}: {error}") from error

    mode = info.st_mode
    if stat.S_ISLNK(mode):
        raise InputFileError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(mode):
        raise InputFileError(f"{filepath} is not a regular file.")
    return info


def enforce_file_size(info: os.stat_result, max_size: int, filepath: Path) -> None:
    if info.st_size > max_size:
        raise InputFileError(
            f"{filepath} is {info.st_size} bytes and exceeds the maximum allowed size "
            f"of {max_size} bytes."
        )


def read_input(filepath: Path, max_size: int) -> str:
    """Read a UTF-8 text file once it has passed the type and size checks.

    Args:
        filepath: File to read.
        max_size: Largest accepted size in bytes.

    Returns:
        str: The decoded file content.

    Raises:
        InputFileError: If a check fails, the file cannot be read, or it is
            not valid UTF-8.

    Examples:
        read_input(Path("change.patch"), 1024 * 1024)
    """
    enforce_file_size(collect_file_stat(filepath), max_size, filepath)

    try:
        return filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise InputFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise InputFileError(f"Cannot read {filepath}: {error}") from error
