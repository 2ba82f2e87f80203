"""Codec for the trace-context header.

Wire form::

    <hex trace id>/<decimal span id>[;o=<options>][;<key>=<value>]...

Whitespace is allowed around every delimiter. The trace id holds 1-32 hex
digits and the span id must fit a signed 64-bit integer. ``o`` (any case) is
the options bitmask: bit 0 enables tracing, bit 1 enables stack traces.
"""

from __future__ import annotations

import re

from pydantic import ValidationError

from ..exceptions import InvalidTraceContextError
from ..models import TraceContext
from ..models.trace_context import MAX_SPAN_ID, OPTIONS_KEY, TOKEN_PATTERN

_MAX_TRACE_ID_DIGITS = 32
_MIN_OPTIONS = -(1 << 31)
_MAX_OPTIONS = (1 << 31) - 1
_HEADER_RE = re.compile(
    r"\s*(?P<trace_id>[0-9A-Fa-f]+)\s*/\s*(?P<span_id>[0-9]+)"
    rf"(?P<params>(?:\s*;\s*{TOKEN_PATTERN}\s*=\s*{TOKEN_PATTERN})*)\s*"
)
_PARAM_RE = re.compile(rf";\s*(?P<key>{TOKEN_PATTERN})\s*=\s*(?P<value>{TOKEN_PATTERN})")
_OPTIONS_RE = re.compile(r"[+-]?[0-9]+")


def parse_trace_context(text: str) -> TraceContext:
    """Parse header text into a ``TraceContext``.

    Raises ``InvalidTraceContextError`` when ``text`` does not match the wire
    grammar, the trace id is longer than 32 digits, the span id overflows a
    signed 64-bit integer or the options value is not a signed 32-bit integer.
    """
    if text is None:
        raise ValueError("text is required")
    match = _HEADER_RE.fullmatch(text)
    if match is None:
        raise InvalidTraceContextError(text)

    trace_digits = match.group("trace_id")
    if len(trace_digits) > _MAX_TRACE_ID_DIGITS:
        raise InvalidTraceContextError(text)
    span_id = int(match.group("span_id"))
    if span_id > MAX_SPAN_ID:
        raise InvalidTraceContextError(text)

    options = 0
    params: dict[str, str] = {}
    for param in _PARAM_RE.finditer(match.group("params")):
        key, value = param.group("key"), param.group("value")
        if key.lower() == OPTIONS_KEY:
            if not _OPTIONS_RE.fullmatch(value):
                raise InvalidTraceContextError(text)
            options = int(value)
            if not _MIN_OPTIONS <= options <= _MAX_OPTIONS:
                raise InvalidTraceContextError(text)
        else:
            params[key] = value

    try:
        return TraceContext(
            trace_id=int(trace_digits, 16),
            span_id=span_id,
            enabled=bool(options & 1),
            stack_trace_enabled=bool(options & 2),
            params=params,
        )
    except ValidationError as exc:
        raise InvalidTraceContextError(text) from exc


def format_trace_context(context: TraceContext) -> str:
    """Serialize ``context`` to its canonical header text."""
    parts = [f"{context.trace_id:x}/{context.span_id}"]
    if context.options:
        parts.append(f"{OPTIONS_KEY}={context.options}")
    parts.extend(f"{key}={value}" for key, value in context.params.items())
    return ";".join(parts)
