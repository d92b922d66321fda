"""Package-specific exception types."""

from __future__ import annotations


class SerializationError(ValueError):
    """Raised when a persisted tree cannot be decoded.

    Args:
        message: Description of the problem.
        path: Location of the offending value inside the payload, written as
            a dotted path (for example ``hunks.0.lines.3``).
    """

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(self._build_message(message))

    def _build_message(self, message: str) -> str:
        if not self.path:
            return message
        return f"{message} (at `{self.path}`)"


class InputFileError(IOError):
    """Raised when an input file cannot be read safely."""
