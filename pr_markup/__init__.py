"""
pr-markup: parsers for pull request patches and GitHub-flavored markdown.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    pr-markup diff change.patch
    pr-markup markdown description.md

Library Usage:
    from pr_markup import PatchFile, FileStatus, parse_file_diff, parse_markdown

    file_diff = parse_file_diff(PatchFile("app.py", FileStatus.MODIFIED, patch=patch))
    blocks = parse_markdown(pull_request_body)
"""

from .config import ConfigError, ParserConfig
from .diff_parser import parse_file_diff, parse_full_file, parse_hunks
from .exceptions import InputFileError, SerializationError
from .inline import parse_inline
from .markdown_parser import parse_markdown
from .models import (
    Block,
    DiffHunk,
    DiffLine,
    FileDiff,
    FileStatus,
    Inline,
    LineKind,
    PatchFile,
    TableAlignment,
)
from .serialization import dump_blocks, dump_file_diff, load_blocks, load_file_diff

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_hunks",
    "parse_file_diff",
    "parse_full_file",
    "parse_markdown",
    "parse_inline",
    # Data models
    "Block",
    "DiffHunk",
    "DiffLine",
    "FileDiff",
    "FileStatus",
    "Inline",
    "LineKind",
    "PatchFile",
    "TableAlignment",
    # Persistence
    "dump_file_diff",
    "load_file_diff",
    "dump_blocks",
    "load_blocks",
    # Configuration
    "ParserConfig",
    # Exceptions
    "ConfigError",
    "InputFileError",
    "SerializationError",
    # Version
    "__version__",
]
