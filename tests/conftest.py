from __future__ import annotations

import apptrace


def reset_apptrace_config() -> None:
    """Reset the default tracer between tests."""
    apptrace._reset_default_tracer()


import pytest  # noqa: E402
from _support import TickingClock  # noqa: E402

from apptrace.core import MemorySink, SequenceIdSource, Trace  # noqa: E402
from apptrace.serializers import parse_trace_context  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_config() -> None:
    reset_apptrace_config()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def trace(sink: MemorySink) -> Trace:
    return Trace(
        parse_trace_context("1234abcd/12345"),
        sink,
        clock=TickingClock(),
        id_source=SequenceIdSource(20000),
    )
