"""Header subcommand implementation."""

from __future__ import annotations

import sys

from ..exceptions import InvalidTraceContextError
from ..serializers import format_trace_context, parse_trace_context


def run_header(text: str, *, as_json: bool) -> int:
    try:
        context = parse_trace_context(text)
    except InvalidTraceContextError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if as_json:
        print(context.model_dump_json())
    else:
        print(format_trace_context(context))
    return 0
