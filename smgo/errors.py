"""
smgo Exception Hierarchy

Function-level failures of the parser. Syntax errors in the parsed source
are not exceptions: they are reported inside the returned File.

    try:
        tree = parse(stream, "UTF-8")
    except SourceReadError as e:
        ...
"""

from typing import Any


class SmgoError(Exception):
    """Base exception for all smgo errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize smgo error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class UnsupportedEncodingError(SmgoError):
    """Source encoding other than UTF-8."""

    def __init__(self, encoding: str):
        super().__init__("Unsupported encoding", {"encoding": encoding})
        self.encoding = encoding


class SourceReadError(SmgoError):
    """Source stream could not be read."""

    pass


class BoundaryError(SmgoError):
    """Internal invariant violation while fixing block boundaries."""

    pass


class OffsetTranslationError(BoundaryError):
    """Byte offset outside the buffer or inside a multi-byte character."""

    def __init__(self, byte_offset: int, reason: str):
        super().__init__(f"Cannot translate byte offset {byte_offset}: {reason}", {"byte_offset": byte_offset})
        self.byte_offset = byte_offset
