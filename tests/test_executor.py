from __future__ import annotations

import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

import pytest

from apptrace.core import ContextPropagatingExecutor
from apptrace.core.context import current, empty_context, key

REQUEST = key("request", str)


@pytest.fixture
def executor() -> Iterator[ContextPropagatingExecutor]:
    with ContextPropagatingExecutor(ThreadPoolExecutor(max_workers=1)) as executor:
        yield executor


def test_submit_runs_task_in_submitter_context(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "r-1")
    future = context.run(executor.submit, lambda: REQUEST.current_value())
    assert future.result() == "r-1"


def test_submit_forwards_arguments(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "r-2")
    future = context.run(executor.submit, lambda a, b=0: (REQUEST.current_value(), a + b), 1, b=2)
    assert future.result() == ("r-2", 3)


def test_pooled_thread_is_restored_between_tasks(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "first")
    context.run(executor.submit, lambda: None).result()

    # the same worker thread, used directly, sees its own empty context again
    assert executor.delegate.submit(current).result() is empty_context()
    assert executor.submit(lambda: REQUEST.current_value()).result() is None


def test_execute_runs_task_in_submitter_context(executor: ContextPropagatingExecutor) -> None:
    seen: list[str | None] = []
    context = empty_context().new_child(REQUEST, "fire-and-forget")
    context.run(executor.execute, lambda: seen.append(REQUEST.current_value()))
    executor.shutdown(wait=True)
    assert seen == ["fire-and-forget"]


def test_map_captures_context_once(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "batch")

    def tag(value: int) -> str:
        return f"{REQUEST.current_value()}-{value}"

    results = context.run(lambda: list(executor.map(tag, [1, 2, 3])))
    assert results == ["batch-1", "batch-2", "batch-3"]


def test_invoke_all_runs_every_task_in_context(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "all")
    tasks = [lambda i=i: (REQUEST.current_value(), i) for i in range(3)]

    futures = context.run(executor.invoke_all, tasks)

    assert all(future.done() for future in futures)
    assert [future.result() for future in futures] == [("all", 0), ("all", 1), ("all", 2)]


def test_invoke_any_returns_first_success(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "any")

    def fail() -> str:
        raise RuntimeError("boom")

    result = context.run(executor.invoke_any, [fail, lambda: REQUEST.current_value()])
    assert result == "any"


def test_invoke_any_raises_when_every_task_fails(executor: ContextPropagatingExecutor) -> None:
    def fail() -> str:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        executor.invoke_any([fail, fail])


def test_invoke_any_requires_tasks(executor: ContextPropagatingExecutor) -> None:
    with pytest.raises(ValueError):
        executor.invoke_any([])


def test_submitter_context_is_untouched(executor: ContextPropagatingExecutor) -> None:
    context = empty_context().new_child(REQUEST, "caller")
    context.run(executor.submit, lambda: None).result()
    assert current() is empty_context()


def test_context_is_captured_at_submission_not_execution(
    executor: ContextPropagatingExecutor,
) -> None:
    release = threading.Event()

    def read_after_release() -> str | None:
        release.wait(timeout=5)
        return REQUEST.current_value()

    submitted = empty_context().new_child(REQUEST, "at-submit")
    future = submitted.run(executor.submit, read_after_release)

    with empty_context().new_child(REQUEST, "after-submit").scope():
        release.set()
        assert future.result(timeout=5) == "at-submit"


def test_invoke_all_cancels_tasks_pending_at_timeout(executor: ContextPropagatingExecutor) -> None:
    release = threading.Event()
    started = threading.Event()

    def block() -> str:
        started.set()
        release.wait(timeout=5)
        return "blocked"

    try:
        futures = executor.invoke_all([block, lambda: "queued"], timeout=0.2)
        assert started.is_set()
        assert not futures[0].done()
        assert futures[1].cancelled()
    finally:
        release.set()
    assert futures[0].result(timeout=5) == "blocked"


def test_invoke_any_raises_timeout_error(executor: ContextPropagatingExecutor) -> None:
    release = threading.Event()

    def block() -> str:
        release.wait(timeout=5)
        return "late"

    try:
        with pytest.raises(TimeoutError):
            executor.invoke_any([block, block], timeout=0.05)
    finally:
        release.set()
