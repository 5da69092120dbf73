# label_forge/core/exceptions.py
"""
Consistent error types for the label core (codec, document).

No Qt dependencies: this module is pure Python so it can be used
in non-GUI contexts (tests, CLI tools, headless conversions).
"""
from __future__ import annotations

from typing import Optional


class LabelError(Exception):
    """Base exception for all label core errors."""


class CodeDecodeError(LabelError):
    """Printer code could not be parsed; the document was left unchanged."""

    def __init__(self, message: str, line_no: Optional[int] = None):
        if line_no is not None:
            message = f"Line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class CodeEncodeError(LabelError):
    """An element could not be turned into printer code."""


# ---------------------------------------------------------------------------
# Error-mapping helpers
# ---------------------------------------------------------------------------

_DECODE_PATTERNS: list[tuple[type, str]] = [
    (UnicodeError, "The pasted code contains characters that could not be read."),
    (ValueError, "The pasted code contains an invalid number."),
    (OverflowError, "The pasted code contains a number that is too large."),
]


def _chain(new: LabelError, cause: BaseException) -> LabelError:
    """Attach *cause* as ``__cause__`` (mimics ``raise new from cause``)."""
    new.__cause__ = cause
    return new


def map_exception(exc: BaseException) -> LabelError:
    """
    Wrap a low-level exception into a ``LabelError`` subclass with a
    user-friendly message while preserving the original as ``__cause__``.

    If *exc* is already a ``LabelError`` it is returned unchanged.
    Anything raised while reading printer code is a decode error; the
    codec never lets other exceptions escape.
    """
    if isinstance(exc, LabelError):
        return exc

    for exc_type, message in _DECODE_PATTERNS:
        if isinstance(exc, exc_type):
            return _chain(CodeDecodeError(message), exc)

    return _chain(CodeDecodeError(f"Unexpected error while parsing: {exc}"), exc)


def friendly_message(exc: BaseException) -> str:
    """Return a short, UI-safe description for *exc*."""
    mapped = map_exception(exc)
    return str(mapped)
