"""Edge-case tests for thread handoff, pooled reuse and deep context chains."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from apptrace.core import ContextPropagatingExecutor, MemorySink, Trace, span
from apptrace.core.context import current, empty_context, key

WORKER = key("worker", int)


# ---------------------------------------------------------------------------
# 1. Pooled threads never leak a previous task's context
# ---------------------------------------------------------------------------


def test_pooled_workers_see_each_submitters_context() -> None:
    with ContextPropagatingExecutor(ThreadPoolExecutor(max_workers=2)) as executor:
        futures = [
            empty_context().new_child(WORKER, i).run(executor.submit, WORKER.current_value)
            for i in range(50)
        ]
        assert [future.result() for future in futures] == list(range(50))
        leaked = [executor.delegate.submit(WORKER.current_value) for _ in range(10)]
        assert all(future.result() is None for future in leaked)


# ---------------------------------------------------------------------------
# 2. Each thread owns its current-context slot
# ---------------------------------------------------------------------------


def test_threads_do_not_observe_each_other() -> None:
    barrier = threading.Barrier(4)
    observed: dict[int, int | None] = {}

    def worker(index: int) -> None:
        def body() -> None:
            barrier.wait()
            observed[index] = WORKER.current_value()

        empty_context().new_child(WORKER, index).run(body)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert observed == {0: 0, 1: 1, 2: 2, 3: 3}


# ---------------------------------------------------------------------------
# 3. Long chains and shared ancestors
# ---------------------------------------------------------------------------


def test_deep_chain_lookup_reaches_root_binding() -> None:
    root_key = key("root", str)
    context = empty_context().new_child(root_key, "bottom")
    for depth in range(1000):
        context = context.new_child(WORKER, depth)

    assert root_key.value_for(context) == "bottom"
    assert WORKER.value_for(context) == 999
    assert current() is empty_context()


# ---------------------------------------------------------------------------
# 4. Fan-out from a span through the executor
# ---------------------------------------------------------------------------


def test_fan_out_tasks_share_parent_span(trace: Trace, sink: MemorySink) -> None:
    def fan_out() -> None:
        with ContextPropagatingExecutor(ThreadPoolExecutor(max_workers=3)) as executor:
            tasks = [lambda i=i: span(f"task-{i}", lambda: i) for i in range(5)]
            futures = executor.invoke_all(tasks)
            assert sorted(future.result() for future in futures) == [0, 1, 2, 3, 4]

    trace.run("fan_out", fan_out)

    *tasks, parent = sink.spans
    assert parent.name == "fan_out"
    assert len(tasks) == 5
    assert all(task.parent_id == parent.id for task in tasks)
    assert len({task.id for task in tasks}) == 5
