"""Trace — one tracing session and the capabilities its spans use."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from ..exceptions import InvalidSpanIdError
from ..models import NULL_TRACE_CONTEXT, TraceContext
from ..models.trace_context import MAX_SPAN_ID
from ..serializers import parse_trace_context
from .sinks import NullSink, SpanSink
from .sources import Clock, FixedClock, FixedIdSource, IdSource, RandomIdSource, SystemClock

if TYPE_CHECKING:
    from .span import Span

P = ParamSpec("P")
R = TypeVar("R")


class Trace:
    """Bundles the inbound trace context with a clock, an id source and a sink.

    The inbound context holds the remote caller's coordinates: top-level spans
    opened by ``run`` use its ``span_id`` as their parent id. Use
    ``null_trace()`` when there is no caller and no sink.
    """

    def __init__(
        self,
        context: TraceContext,
        sink: SpanSink,
        clock: Clock | None = None,
        id_source: IdSource | None = None,
    ) -> None:
        self.context = context
        self.sink = sink
        self.clock: Clock = clock or SystemClock()
        self.id_source: IdSource = id_source or RandomIdSource()

    @classmethod
    def from_header(
        cls,
        header: str,
        sink: SpanSink,
        clock: Clock | None = None,
        id_source: IdSource | None = None,
    ) -> Trace:
        return cls(parse_trace_context(header), sink, clock=clock, id_source=id_source)

    def start_span(self, name: str) -> Span:
        """Open a top-level span without installing it; see ``Span.run``."""
        from .span import Span

        return Span(self, self.context.span_id, self.next_span_id(), name)

    def run(self, name: str, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> R:
        """Call ``fn`` inside a new top-level span named ``name``."""
        return self.start_span(name).run(fn, *args, **kwargs)

    def instant(self) -> datetime:
        return self.clock.instant()

    def next_span_id(self) -> int:
        """Draw a span id, which must fit the header's span id field (0 to 2**63 - 1)."""
        span_id = self.id_source.next_id()
        if not 0 <= span_id <= MAX_SPAN_ID:
            raise InvalidSpanIdError(
                f"{type(self.id_source).__name__} produced span id {span_id}, "
                f"outside 0..{MAX_SPAN_ID}"
            )
        return span_id

    def span_closed(self, span: Span) -> None:
        self.sink.on_span_closed(span)

    def __repr__(self) -> str:
        return f"Trace(trace_id={self.context.trace_id:x}, span_id={self.context.span_id})"


_NULL_TRACE = Trace(
    NULL_TRACE_CONTEXT,
    NullSink(),
    clock=FixedClock(),
    id_source=FixedIdSource(0),
)


def null_trace() -> Trace:
    """Return the shared trace used when spans open outside any trace."""
    return _NULL_TRACE
