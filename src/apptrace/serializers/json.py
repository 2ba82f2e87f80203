"""JSON serialization helpers for span records."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..exceptions import ApptraceLoadError
from ..models import SpanRecord

_SPAN_LIST = TypeAdapter(list[SpanRecord])


def spans_to_json(records: Sequence[SpanRecord], *, indent: int | None = 2) -> str:
    return _SPAN_LIST.dump_json(list(records), indent=indent).decode("utf-8")


def spans_from_json(payload: str) -> list[SpanRecord]:
    """Parse a JSON array into span records.

    Raises ``ApptraceLoadError`` on invalid or unparseable input.
    """
    try:
        return _SPAN_LIST.validate_json(payload)
    except ValidationError as exc:
        raise ApptraceLoadError(f"Failed to parse span JSON: {exc}") from exc


def save_spans_json(
    records: Sequence[SpanRecord], path: str | Path, *, indent: int | None = 2
) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(spans_to_json(records, indent=indent), encoding="utf-8")
    return output_path


def load_spans_json(path: str | Path) -> list[SpanRecord]:
    """Load span records from a JSON file.

    Raises ``ApptraceLoadError`` on invalid content,
    or ``FileNotFoundError`` / ``OSError`` if the file is inaccessible.
    """
    payload = Path(path).read_text(encoding="utf-8")
    return spans_from_json(payload)
