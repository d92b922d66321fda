"""Constants used across the pr-markup package."""

from __future__ import annotations

import re

# Unified diff
HUNK_HEADER_PREFIX = "@@"
HUNK_HEADER_PATTERN = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
ADDITION_MARKER = "+"
DELETION_MARKER = "-"
NEW_FILE_MARKER = "+++"
OLD_FILE_MARKER = "---"
DEFAULT_HUNK_COUNT = 1
FULL_FILE_HEADER = "Full file"
LINE_NUMBER_WIDTH = 4

# Markdown blocks
CODE_FENCE = "```"
BLOCKQUOTE_MARKER = ">"
DETAILS_OPENERS = ("<details>", "<details ")
DETAILS_CLOSER = "</details>"
SUMMARY_OPEN = "<summary>"
SUMMARY_CLOSE = "</summary>"
DEFAULT_SUMMARY = "Details"
MAX_HEADING_LEVEL = 6
HORIZONTAL_RULE_CHARS = frozenset("-*_")
UNORDERED_LIST_MARKERS = ("- ", "* ", "+ ")
ORDERED_LIST_PATTERN = re.compile(r"^(\d+)\. ")
TABLE_SEPARATOR_CHARS = frozenset("|:-")
TASK_UNCHECKED = "[ ] "
TASK_CHECKED = ("[x] ", "[X] ")

# Markdown inlines
LINE_BREAK_TAGS = ("<br />", "<br/>", "<br>")
TRAILING_SPACE_BREAK = "  \n"

# Limits
DEFAULT_MAX_NESTING_DEPTH = 32
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_JSON_INDENT = 2
