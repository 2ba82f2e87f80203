"""apptrace — hierarchical execution context and span tracing.

Convenience API (delegates to a default Tracer instance):
    apptrace.configure(...)   -> set up the default tracer
    apptrace.trace(header)    -> start a Trace continuing an inbound header
    apptrace.span(name)       -> open a span under the ambient span

DI API (construct your own Tracer):
    from apptrace.core import Tracer, TracerConfig
    tracer = Tracer(config=TracerConfig(...), sink=my_sink)
    tracer.trace("1234abcd/12345;o=1").run("handle", handler, request)
"""

from __future__ import annotations

from .core import (
    SPAN_KEY,
    CallbackSink,
    Context,
    ContextPropagatingExecutor,
    Key,
    MemorySink,
    NullSink,
    Span,
    SpanSink,
    Trace,
    Tracer,
    TracerConfig,
    current,
    current_span,
    empty_context,
    key,
    null_trace,
    outbound_context,
    span,
    traced,
)
from .core.tracer_config import DEFAULT_HEADER_NAME, IdSourceKind
from .exceptions import (
    ApptraceError,
    ContextKeyTypeError,
    InvalidSpanIdError,
    InvalidTraceContextError,
)
from .models import NULL_TRACE_CONTEXT, TraceContext
from .serializers import format_trace_context, parse_trace_context

_default_tracer: Tracer | None = None


def configure(
    *,
    sink: str | SpanSink = "memory",
    header_name: str = DEFAULT_HEADER_NAME,
    id_source: IdSourceKind = "random",
    sequence_start: int = 1,
) -> Tracer:
    """Configure and return the default global Tracer instance."""
    global _default_tracer
    config = TracerConfig(
        header_name=header_name,
        id_source=id_source,
        sequence_start=sequence_start,
    )
    _default_tracer = Tracer(config=config, sink=_resolve_sink(sink))
    return _default_tracer


def get_tracer() -> Tracer:
    global _default_tracer
    if _default_tracer is None:
        _default_tracer = Tracer()
    return _default_tracer


def trace(header: str | None = None) -> Trace:
    """Start a trace session using the default Tracer."""
    return get_tracer().trace(header)


def _reset_default_tracer() -> None:
    """Reset the default tracer. Used by test fixtures."""
    global _default_tracer
    _default_tracer = None


def _resolve_sink(sink: str | SpanSink) -> SpanSink:
    if not isinstance(sink, str):
        return sink
    if sink == "memory":
        return MemorySink()
    if sink == "null":
        return NullSink()
    raise ValueError("Unsupported sink value. Use 'memory', 'null', or a SpanSink instance.")


__all__ = [
    "NULL_TRACE_CONTEXT",
    "SPAN_KEY",
    "ApptraceError",
    "CallbackSink",
    "Context",
    "ContextKeyTypeError",
    "ContextPropagatingExecutor",
    "InvalidSpanIdError",
    "InvalidTraceContextError",
    "Key",
    "MemorySink",
    "NullSink",
    "Span",
    "SpanSink",
    "Trace",
    "TraceContext",
    "Tracer",
    "TracerConfig",
    "configure",
    "current",
    "current_span",
    "empty_context",
    "format_trace_context",
    "get_tracer",
    "key",
    "null_trace",
    "outbound_context",
    "parse_trace_context",
    "span",
    "trace",
    "traced",
]
