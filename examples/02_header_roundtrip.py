"""Example 2: Header round trip between two services.

The client continues an inbound header, injects its own span as the parent
for the next hop, and the server extracts it from the request headers.
"""

from __future__ import annotations

from apptrace.core import MemorySink, Tracer
from apptrace.serializers import parse_trace_context


def main() -> None:
    client_sink = MemorySink()
    server_sink = MemorySink()
    client = Tracer(sink=client_sink)
    server = Tracer(sink=server_sink)

    def call_server() -> None:
        headers: dict[str, str] = {}
        client.inject(headers)
        print(f"outbound headers: {headers}")
        server.extract(headers).run("server_handle", lambda: None)

    client.trace("a1b2c3/1;o=3;tenant=acme").run("client_call", call_server)

    [server_span] = server_sink.spans
    [client_span] = client_sink.spans
    assert server_span.parent_id == client_span.id
    assert server_span.trace.context.params == {"tenant": "acme"}
    assert parse_trace_context(" a1b2c3 / 1 ; o=3 ").stack_trace_enabled

    print(f"OK: server span {server_span.id} is a child of client span {client_span.id}")


if __name__ == "__main__":
    main()
