"""Serialization helpers."""

from .header import format_trace_context, parse_trace_context
from .json import load_spans_json, save_spans_json, spans_from_json, spans_to_json

__all__ = [
    "format_trace_context",
    "load_spans_json",
    "parse_trace_context",
    "save_spans_json",
    "spans_from_json",
    "spans_to_json",
]
