"""Tracer — the DI-constructed factory for Trace sessions."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping

from ..models import NULL_TRACE_CONTEXT
from ..serializers import format_trace_context, parse_trace_context
from .sinks import MemorySink, SpanSink
from .sources import Clock, IdSource, RandomIdSource, SequenceIdSource, SystemClock
from .span import outbound_context
from .trace import Trace
from .tracer_config import TracerConfig


class Tracer:
    """Owns its config, sink and clock, and builds a ``Trace`` per inbound request.

    Error-handling contract
    ----------------------
    - Configuration errors (invalid ``TracerConfig``) and malformed inbound
      headers raise immediately; these are caller errors.
    - Sink failures while closing spans are reported with ``warnings.warn``
      so that the host application is never affected by tracing
      infrastructure.
    """

    def __init__(
        self,
        config: TracerConfig | None = None,
        sink: SpanSink | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or TracerConfig()
        self.sink: SpanSink = sink or MemorySink()
        self.clock: Clock = clock or SystemClock()
        self.id_source = self._build_id_source()

    def trace(self, header: str | None = None) -> Trace:
        """Start a trace continuing ``header``, or a fresh one when it is ``None``."""
        context = NULL_TRACE_CONTEXT if header is None else parse_trace_context(header)
        return Trace(context, self.sink, clock=self.clock, id_source=self.id_source)

    def extract(self, headers: Mapping[str, str]) -> Trace:
        """Start a trace from the configured header in ``headers``, matched case-insensitively."""
        wanted = self.config.header_name.lower()
        header = next((value for name, value in headers.items() if name.lower() == wanted), None)
        return self.trace(header)

    def inject(self, headers: MutableMapping[str, str]) -> None:
        """Write the outbound trace context of the ambient span into ``headers``."""
        headers[self.config.header_name] = format_trace_context(outbound_context())

    def _build_id_source(self) -> IdSource:
        if self.config.id_source == "sequence":
            return SequenceIdSource(self.config.sequence_start)
        return RandomIdSource()
