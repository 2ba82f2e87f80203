"""Executor wrapper that runs tasks in the submitter's context."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, CancelledError, Executor, Future
from concurrent.futures import wait as wait_for
from typing import Any, ParamSpec, TypeVar

from .context import current

P = ParamSpec("P")
R = TypeVar("R")


class ContextPropagatingExecutor(Executor):
    """Delegating executor that captures ``current()`` at submission time.

    Every task runs under the context that was ambient on the submitting
    thread, whichever worker thread picks it up. The worker's own context is
    restored once the task finishes. Batch operations capture the context
    once for the whole batch.
    """

    def __init__(self, delegate: Executor) -> None:
        self._delegate = delegate

    @property
    def delegate(self) -> Executor:
        return self._delegate

    def submit(self, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> Future[R]:
        return self._delegate.submit(current().wrap(fn), *args, **kwargs)

    def execute(self, fn: Callable[..., object], /, *args: Any, **kwargs: Any) -> None:
        """Submit ``fn`` without handing back a future."""
        self._delegate.submit(current().wrap(fn), *args, **kwargs)

    def map(
        self,
        fn: Callable[..., R],
        *iterables: Iterable[Any],
        timeout: float | None = None,
        chunksize: int = 1,
    ) -> Iterator[R]:
        return self._delegate.map(
            current().wrap(fn), *iterables, timeout=timeout, chunksize=chunksize
        )

    def invoke_all(
        self,
        tasks: Iterable[Callable[[], R]],
        timeout: float | None = None,
    ) -> list[Future[R]]:
        """Run every task and wait for all of them.

        Futures still pending when ``timeout`` expires are cancelled. The
        returned list keeps the order of ``tasks``.
        """
        context = current()
        futures = [self._delegate.submit(context.wrap(task)) for task in tasks]
        _, not_done = wait_for(futures, timeout=timeout)
        for future in not_done:
            future.cancel()
        return futures

    def invoke_any(
        self,
        tasks: Iterable[Callable[[], R]],
        timeout: float | None = None,
    ) -> R:
        """Return the result of the first task that completes without raising.

        Remaining tasks are cancelled. If every task fails, the last failure is
        raised; if ``timeout`` expires first, ``TimeoutError`` is raised.
        """
        context = current()
        pending = {self._delegate.submit(context.wrap(task)) for task in tasks}
        if not pending:
            raise ValueError("invoke_any requires at least one task")
        deadline = None if timeout is None else time.monotonic() + timeout
        failure: BaseException | None = None
        try:
            while pending:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                done, pending = wait_for(pending, timeout=remaining, return_when=FIRST_COMPLETED)
                if not done:
                    raise TimeoutError("No task completed before the timeout expired")
                for future in done:
                    if future.cancelled():
                        continue
                    error = future.exception()
                    if error is None:
                        return future.result()
                    failure = error
        finally:
            for future in pending:
                future.cancel()
        if failure is None:
            raise CancelledError("Every task was cancelled")
        raise failure

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self._delegate.shutdown(wait=wait, cancel_futures=cancel_futures)
