"""Example 1: Cross-thread propagation.

A request handler fans work out to a thread pool. The pool is wrapped in a
ContextPropagatingExecutor, so every task opens its span under the
handler's span even though it runs on another thread.

Validates: context capture at submission time, parent ids across threads,
pooled-thread restoration.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from apptrace.core import ContextPropagatingExecutor, MemorySink, Tracer, TracerConfig, span
from apptrace.core.context import current, empty_context


def fetch(source: str) -> str:
    with span(f"fetch_{source}"):
        return f"{source} results"


def main() -> None:
    sink = MemorySink()
    tracer = Tracer(config=TracerConfig(id_source="sequence"), sink=sink)

    with ContextPropagatingExecutor(ThreadPoolExecutor(max_workers=2)) as executor:

        def handler() -> list[str]:
            return list(executor.map(fetch, ["web", "docs", "arxiv"]))

        results = tracer.trace("beef/7").run("handler", handler)
        leftover = executor.delegate.submit(current).result()

    # -- Assertions --
    *fetches, root = sink.spans
    assert results == ["web results", "docs results", "arxiv results"]
    assert root.name == "handler"
    assert root.parent_id == 7
    assert all(child.parent_id == root.id for child in fetches)
    assert leftover is empty_context(), "pooled threads must not keep a task's context"

    print(f"OK: {len(fetches)} fetch spans under span {root.id}")


if __name__ == "__main__":
    main()
