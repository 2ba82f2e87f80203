from __future__ import annotations

import pytest
from _support import TickingClock
from pydantic import ValidationError

import apptrace
from apptrace import configure, trace
from apptrace.core import (
    MemorySink,
    NullSink,
    RandomIdSource,
    SequenceIdSource,
    Tracer,
    TracerConfig,
    current_span,
    outbound_context,
    span,
)
from apptrace.exceptions import InvalidTraceContextError
from apptrace.models import NULL_TRACE_CONTEXT
from apptrace.serializers import format_trace_context


def test_tracer_di_construction() -> None:
    sink = MemorySink()
    tracer = Tracer(config=TracerConfig(id_source="sequence", sequence_start=7), sink=sink)

    session = tracer.trace("1234abcd/12345;o=1")
    session.run("handle", lambda: span("db", lambda: None))

    db, handle = sink.spans
    assert handle.id == 7
    assert handle.parent_id == 12345
    assert db.id == 8
    assert db.parent_id == 7
    assert session.context.enabled


def test_tracer_without_header_uses_null_context() -> None:
    tracer = Tracer(sink=NullSink())
    session = tracer.trace()
    assert session.context == NULL_TRACE_CONTEXT
    assert isinstance(session.id_source, RandomIdSource)


def test_tracer_rejects_malformed_header() -> None:
    with pytest.raises(InvalidTraceContextError):
        Tracer().trace("not a header")


def test_tracer_config_validation() -> None:
    with pytest.raises(ValidationError):
        TracerConfig(id_source="uuid")  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        TracerConfig(header_name="")


def test_extract_matches_header_name_case_insensitively() -> None:
    tracer = Tracer(sink=NullSink())
    session = tracer.extract({"x-cloud-trace-context": "abc/42;o=3;user=alice"})
    assert session.context.trace_id == 0xABC
    assert session.context.span_id == 42
    assert session.context.params == {"user": "alice"}


def test_extract_without_header_uses_null_context() -> None:
    session = Tracer(sink=NullSink()).extract({"Accept": "text/plain"})
    assert session.context == NULL_TRACE_CONTEXT


def test_inject_writes_outbound_context_of_ambient_span() -> None:
    tracer = Tracer(
        config=TracerConfig(header_name="X-Trace", id_source="sequence", sequence_start=100),
        sink=NullSink(),
    )
    headers: dict[str, str] = {}

    tracer.trace("abc/42;o=1;user=alice").run("call", tracer.inject, headers)

    assert headers == {"X-Trace": "abc/100;o=1;user=alice"}


def test_inject_outside_any_span_writes_null_context() -> None:
    headers: dict[str, str] = {}
    Tracer(sink=NullSink()).inject(headers)
    assert headers == {"X-Cloud-Trace-Context": "0/0"}


def test_outbound_context_roundtrips_through_next_hop() -> None:
    upstream = Tracer(sink=NullSink(), config=TracerConfig(id_source="sequence"))
    downstream_sink = MemorySink()
    downstream = Tracer(sink=downstream_sink)

    client = upstream.trace("beef/1")
    header = client.run("client", lambda: format_trace_context(outbound_context()))
    downstream.trace(header).run("server", lambda: None)

    [server] = downstream_sink.spans
    assert server.parent_id == 1
    assert server.trace.context.trace_id == 0xBEEF


def test_configure_and_trace_use_default_tracer() -> None:
    sink = MemorySink()
    tracer = configure(sink=sink, id_source="sequence")
    assert apptrace.get_tracer() is tracer

    trace("1/2").run("step", lambda: None)

    [step] = sink.spans
    assert step.parent_id == 2
    assert step.id == 1


def test_trace_without_configure_builds_default_tracer() -> None:
    session = trace()
    assert isinstance(apptrace.get_tracer().sink, MemorySink)
    assert session.sink is apptrace.get_tracer().sink


def test_configure_resolves_named_sinks() -> None:
    assert isinstance(configure(sink="null").sink, NullSink)
    assert isinstance(configure(sink="memory").sink, MemorySink)
    with pytest.raises(ValueError, match="Unsupported sink"):
        configure(sink="kafka")


def test_sequence_id_source_counts_up() -> None:
    source = SequenceIdSource(5)
    assert [source.next_id() for _ in range(3)] == [5, 6, 7]


def test_random_id_source_fits_header_span_id() -> None:
    source = RandomIdSource()
    assert all(0 <= source.next_id() < (1 << 63) for _ in range(100))


def test_explicit_clock_is_shared_by_traces() -> None:
    clock = TickingClock()
    tracer = Tracer(sink=NullSink(), clock=clock)
    first = tracer.trace().start_span("a")
    second = tracer.trace().start_span("b")
    assert second.start_time > first.start_time
    assert current_span() is None
