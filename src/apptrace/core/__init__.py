"""Core context propagation and tracing runtime."""

from .context import Context, Key, current, empty_context, key
from .decorators import traced
from .executor import ContextPropagatingExecutor
from .sinks import CallbackSink, MemorySink, NullSink, SpanSink
from .sources import (
    Clock,
    FixedClock,
    FixedIdSource,
    IdSource,
    RandomIdSource,
    SequenceIdSource,
    SystemClock,
)
from .span import SPAN_KEY, Span, current_span, outbound_context, span
from .trace import Trace, null_trace
from .tracer import Tracer
from .tracer_config import TracerConfig

__all__ = [
    "SPAN_KEY",
    "CallbackSink",
    "Clock",
    "Context",
    "ContextPropagatingExecutor",
    "FixedClock",
    "FixedIdSource",
    "IdSource",
    "Key",
    "MemorySink",
    "NullSink",
    "RandomIdSource",
    "SequenceIdSource",
    "Span",
    "SpanSink",
    "SystemClock",
    "Trace",
    "Tracer",
    "TracerConfig",
    "current",
    "current_span",
    "empty_context",
    "key",
    "null_trace",
    "outbound_context",
    "span",
    "traced",
]
