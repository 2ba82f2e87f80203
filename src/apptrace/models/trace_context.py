"""TraceContext model — the value carried by the trace-context header."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
)

TOKEN_PATTERN = r"[A-Za-z0-9!#$%&'*+\-.^_`|~]+"
OPTIONS_KEY = "o"
MAX_TRACE_ID = (1 << 128) - 1
MAX_SPAN_ID = (1 << 63) - 1

_TOKEN_RE = re.compile(TOKEN_PATTERN)


class TraceContext(BaseModel):
    """Coordinates of the remote caller's span plus tracing options.

    ``params`` keeps insertion order and holds every header parameter except
    the reserved ``o`` options bitmask, which is exposed as ``enabled`` and
    ``stack_trace_enabled``. ``params`` is a read-only mapping.
    """

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    trace_id: int
    span_id: int
    enabled: bool = False
    stack_trace_enabled: bool = False
    params: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("trace_id")
    @classmethod
    def validate_trace_id(cls, trace_id: int) -> int:
        if not 0 <= trace_id <= MAX_TRACE_ID:
            raise ValueError("trace_id must fit in 128 unsigned bits")
        return trace_id

    @field_validator("span_id")
    @classmethod
    def validate_span_id(cls, span_id: int) -> int:
        if not 0 <= span_id <= MAX_SPAN_ID:
            raise ValueError("span_id must be a non-negative signed 64-bit integer")
        return span_id

    @field_validator("params")
    @classmethod
    def validate_params(cls, params: Mapping[str, str]) -> Mapping[str, str]:
        for name, value in params.items():
            if not _TOKEN_RE.fullmatch(name):
                raise ValueError(f"Invalid parameter name: {name!r}")
            if name.lower() == OPTIONS_KEY:
                raise ValueError("Parameter 'o' is reserved for the options bitmask")
            if not _TOKEN_RE.fullmatch(value):
                raise ValueError(f"Invalid value for parameter {name!r}: {value!r}")
        return MappingProxyType(dict(params))

    @field_serializer("params")
    def serialize_params(self, params: Mapping[str, str]) -> dict[str, str]:
        return dict(params)

    @computed_field(return_type=int)
    @property
    def options(self) -> int:
        return (1 if self.enabled else 0) | (2 if self.stack_trace_enabled else 0)

    def __hash__(self) -> int:
        return hash(
            (
                self.trace_id,
                self.span_id,
                self.enabled,
                self.stack_trace_enabled,
                frozenset(self.params.items()),
            )
        )

    @property
    def is_null(self) -> bool:
        return self.trace_id == 0 and self.span_id == 0


NULL_TRACE_CONTEXT = TraceContext(trace_id=0, span_id=0)
