"""Public exception types for apptrace."""

from __future__ import annotations


class ApptraceError(Exception):
    """Base class for all apptrace exceptions."""


class InvalidTraceContextError(ApptraceError, ValueError):
    """Raised when trace-context header text does not follow the wire grammar."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid TraceContext: {text!r}")
        self.text = text


class ContextKeyTypeError(ApptraceError, TypeError):
    """Raised when a context value does not match the type declared by its key."""


class ApptraceLoadError(ApptraceError):
    """Raised when a span file cannot be loaded or parsed."""


class InvalidSpanIdError(ApptraceError, ValueError):
    """Raised when an id source yields an id that cannot travel in the header."""
