"""Span sink protocol and built-in sinks."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..models import SpanRecord

if TYPE_CHECKING:
    from .span import Span


@runtime_checkable
class SpanSink(Protocol):
    """Receives every span exactly once, synchronously, when it closes.

    Sinks own export and storage. They must not block indefinitely; an
    exception raised here is reported as a warning and otherwise dropped.
    """

    def on_span_closed(self, span: Span) -> None: ...


class NullSink:
    """Discards every span."""

    def on_span_closed(self, span: Span) -> None:
        pass


class CallbackSink:
    """Adapts a plain callable to the sink protocol."""

    def __init__(self, callback: Callable[[Span], None]) -> None:
        self._callback = callback

    def on_span_closed(self, span: Span) -> None:
        self._callback(span)


class MemorySink:
    """Keeps closed spans in close order. Good for tests and short-lived scripts."""

    def __init__(self) -> None:
        self._spans: list[Span] = []
        self._lock = threading.Lock()

    def on_span_closed(self, span: Span) -> None:
        with self._lock:
            self._spans.append(span)

    @property
    def spans(self) -> list[Span]:
        with self._lock:
            return list(self._spans)

    def records(self) -> list[SpanRecord]:
        return [span.to_record() for span in self.spans]

    def clear(self) -> None:
        with self._lock:
            self._spans.clear()
