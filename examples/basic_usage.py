"""Basic usage: continue an inbound trace, nest spans, and print the tree."""

from __future__ import annotations

import apptrace
from apptrace.core import MemorySink
from apptrace.renderers import render_spans


def handle_request(user: str) -> str:
    with apptrace.span("load_profile"):
        profile = f"profile:{user}"
    apptrace.span("render", lambda: None)
    return profile


def main() -> None:
    sink = MemorySink()
    apptrace.configure(sink=sink)

    session = apptrace.trace("1234abcd/12345;o=1")
    result = session.run("handle_request", handle_request, "alice")

    print(result)
    print(render_spans(sink.records(), title="handle_request"))


if __name__ == "__main__":
    main()
