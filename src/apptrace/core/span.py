"""Span — a timed unit of work linked to its parent by id."""

from __future__ import annotations

import warnings
from collections.abc import Callable
from contextvars import Token
from datetime import datetime
from types import TracebackType
from typing import ParamSpec, TypeVar, overload

from ..models import NULL_TRACE_CONTEXT, SpanRecord, TraceContext
from .context import Context, current, key, push_context, reset_context
from .trace import Trace, null_trace

P = ParamSpec("P")
R = TypeVar("R")


class Span:
    """A named unit of work inside a ``Trace``.

    A span becomes the ambient span while it runs (``run``/``call`` or a
    ``with`` block), so spans opened inside it take its id as their parent
    id. Closing records the stop time and hands the span to the trace's sink;
    only the first close has any effect.
    """

    def __init__(self, trace: Trace, parent_id: int, span_id: int, name: str) -> None:
        self.trace = trace
        self.parent_id = parent_id
        self.id = span_id
        self.name = name
        self.start_time: datetime = trace.instant()
        self.stop_time: datetime | None = None
        self._tokens: list[Token[Context | None]] = []

    @property
    def closed(self) -> bool:
        return self.stop_time is not None

    def run(self, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> R:
        """Call ``fn`` with this span ambient, then close the span."""
        try:
            return current().new_child(SPAN_KEY, self).run(fn, *args, **kwargs)
        finally:
            self.close()

    call = run

    def close(self) -> None:
        if self.stop_time is not None:
            return
        self.stop_time = self.trace.instant()
        try:
            self.trace.span_closed(self)
        except Exception:
            warnings.warn(
                f"apptrace: sink failed to accept span '{self.name}'. Span data has been dropped.",
                stacklevel=2,
            )

    def to_record(self) -> SpanRecord:
        return SpanRecord(
            trace_id=f"{self.trace.context.trace_id:x}",
            span_id=self.id,
            parent_id=self.parent_id,
            name=self.name,
            start_time=self.start_time,
            stop_time=self.stop_time,
        )

    def __enter__(self) -> Span:
        self._tokens.append(push_context(current().new_child(SPAN_KEY, self)))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        try:
            if self._tokens:
                reset_context(self._tokens.pop())
        finally:
            self.close()
        return False

    async def __aenter__(self) -> Span:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        return self.__exit__(exc_type, exc, tb)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Span({self.name!r}, id={self.id}, parent_id={self.parent_id}, {state})"


SPAN_KEY = key(f"{__name__}.Span", Span)


def current_span() -> Span | None:
    return SPAN_KEY.current_value()


@overload
def span(name: str) -> Span: ...
@overload
def span(name: str, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> R: ...


def span(
    name: str, fn: Callable[..., R] | None = None, /, *args: object, **kwargs: object
) -> object:
    """Open a span under the ambient span, or under the null trace if there is none.

    With only a name, the new span is returned without being made ambient, for
    use as ``with span(name):`` or ``span(name).run(fn)``. With ``fn``, the span runs
    ``fn`` immediately and the call returns its result.
    """
    parent = current_span()
    if parent is not None:
        trace = parent.trace
        new_span = Span(trace, parent.id, trace.next_span_id(), name)
    else:
        trace = null_trace()
        new_span = Span(trace, NULL_TRACE_CONTEXT.span_id, trace.next_span_id(), name)
    if fn is None:
        return new_span
    return new_span.run(fn, *args, **kwargs)


def outbound_context() -> TraceContext:
    """Return the trace context to send downstream from the ambient span."""
    parent = current_span()
    if parent is None:
        return NULL_TRACE_CONTEXT
    inbound = parent.trace.context
    return TraceContext(
        trace_id=inbound.trace_id,
        span_id=parent.id,
        enabled=inbound.enabled,
        stack_trace_enabled=inbound.stack_trace_enabled,
        params=dict(inbound.params),
    )
