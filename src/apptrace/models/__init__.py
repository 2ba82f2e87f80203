"""Data models for trace propagation and export."""

from .span_record import SpanRecord
from .trace_context import NULL_TRACE_CONTEXT, TraceContext

__all__ = ["NULL_TRACE_CONTEXT", "SpanRecord", "TraceContext"]
