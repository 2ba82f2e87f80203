"""Rich-based span tree rendering."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from io import StringIO
from typing import Literal

from rich.console import Console
from rich.tree import Tree

from ..models import SpanRecord

Verbosity = Literal["minimal", "standard", "full"]


def render_spans(
    records: Sequence[SpanRecord],
    *,
    title: str = "Spans",
    verbosity: Verbosity = "standard",
) -> str:
    """Render span records as a tree nested by ``parent_id``.

    Spans whose parent is not among ``records`` (for example the remote
    caller's span) are shown at the top level.
    """
    tree = Tree(f"{title} ({len(records)})")
    known_ids = {record.span_id for record in records}
    children_by_parent: dict[int | None, list[SpanRecord]] = defaultdict(list)
    for record in records:
        nested = record.parent_id in known_ids and record.parent_id != record.span_id
        parent = record.parent_id if nested else None
        children_by_parent[parent].append(record)

    for siblings in children_by_parent.values():
        siblings.sort(key=lambda record: record.start_time)

    for root in children_by_parent[None]:
        _add_span_branch(tree, root, children_by_parent, verbosity, seen=set())

    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()


def _add_span_branch(
    parent_tree: Tree,
    record: SpanRecord,
    children_by_parent: dict[int | None, list[SpanRecord]],
    verbosity: Verbosity,
    seen: set[int],
) -> None:
    line = record.name
    if verbosity != "minimal":
        duration = f"{record.duration_ms:.0f}ms" if record.duration_ms is not None else "open"
        line += f" ({duration})"
    branch = parent_tree.add(line)

    if verbosity == "full":
        branch.add(f"trace: {record.trace_id}")
        branch.add(f"span: {record.span_id} parent: {record.parent_id}")
        branch.add(f"start: {record.start_time.isoformat()}")
        if record.stop_time is not None:
            branch.add(f"stop: {record.stop_time.isoformat()}")

    # span ids may collide, so stop at an id already on this path
    if record.span_id in seen:
        return
    seen = seen | {record.span_id}
    for child in children_by_parent.get(record.span_id, []):
        _add_span_branch(branch, child, children_by_parent, verbosity, seen)
