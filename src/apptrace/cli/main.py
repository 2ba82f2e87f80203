"""Command line interface for apptrace."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import cast

from .header_cmd import run_header
from .inspect_cmd import VerbosityArg, run_inspect


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apptrace")
    subparsers = parser.add_subparsers(dest="command", required=True)

    header_parser = subparsers.add_parser(
        "header", help="Parse and normalize a trace-context header"
    )
    header_parser.add_argument("text", help="Header value, e.g. '1234abcd/12345;o=1'")
    header_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the parsed fields as JSON instead of the canonical header",
    )

    inspect_parser = subparsers.add_parser("inspect", help="Inspect a span JSON file")
    inspect_parser.add_argument("span_file", type=Path, help="Path to span JSON file")
    inspect_parser.add_argument(
        "--verbosity",
        choices=["minimal", "standard", "full"],
        default="standard",
        help="Console render verbosity",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "header":
        return run_header(args.text, as_json=args.json)
    if args.command == "inspect":
        return run_inspect(args.span_file, cast(VerbosityArg, args.verbosity))

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
