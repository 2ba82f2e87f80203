"""Configuration for a Tracer instance."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

IdSourceKind = Literal["random", "sequence"]

DEFAULT_HEADER_NAME = "X-Cloud-Trace-Context"


class TracerConfig(BaseModel):
    """Validated configuration for a Tracer. Passed via DI at construction."""

    model_config = ConfigDict(frozen=True)

    header_name: str = Field(default=DEFAULT_HEADER_NAME, min_length=1)
    id_source: IdSourceKind = "random"
    sequence_start: int = 1
