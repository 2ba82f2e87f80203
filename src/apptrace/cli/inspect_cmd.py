"""Inspect subcommand implementation."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import Literal

from ..exceptions import ApptraceLoadError
from ..renderers import render_spans
from ..serializers import load_spans_json

VerbosityArg = Literal["minimal", "standard", "full"]


def run_inspect(span_file: Path, verbosity: VerbosityArg) -> int:
    try:
        records = load_spans_json(span_file)
    except FileNotFoundError:
        print(f"Error: file not found: {span_file}", file=sys.stderr)
        return 1
    except ApptraceLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error reading file: {exc}", file=sys.stderr)
        return 1

    trace_counts = Counter(record.trace_id for record in records)
    open_count = sum(1 for record in records if record.stop_time is None)

    print(f"Spans: {len(records)}")
    print(f"Open spans: {open_count}")
    print("Spans per trace:")
    for trace_id, count in sorted(trace_counts.items()):
        print(f"  - {trace_id}: {count}")
    print()
    print(render_spans(records, title=span_file.name, verbosity=verbosity))
    return 0
