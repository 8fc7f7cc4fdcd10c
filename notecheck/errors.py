# notecheck/errors.py

from __future__ import annotations


class NoteCheckError(Exception):
    """Base exception for the note checker core."""

    error_code: str = "NOTECHECK_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RangeError(NoteCheckError):
    """Invalid offsets passed to a buffer or span operation."""

    error_code: str = "RANGE_ERROR"


class CheckError(NoteCheckError):
    """Checker service failure (network, non-2xx, malformed payload)."""

    error_code: str = "CHECK_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(NoteCheckError):
    """Span id absent from the current annotation set."""

    error_code: str = "NOT_FOUND"


class ChoiceOutOfRange(NoteCheckError):
    """Choice index outside a span's replacement candidates."""

    error_code: str = "CHOICE_OUT_OF_RANGE"


class IoError(NoteCheckError):
    """Note file read/write failure."""

    error_code: str = "IO_ERROR"


class Cancelled(NoteCheckError):
    """User dismissed a file picker."""

    error_code: str = "CANCELLED"
