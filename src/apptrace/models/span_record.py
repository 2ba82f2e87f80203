"""SpanRecord model — immutable snapshot of a span for export."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field


class SpanRecord(BaseModel):
    """Serializable view of a span, taken when it is handed to a sink."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    trace_id: str
    span_id: int
    parent_id: int
    name: str
    start_time: datetime
    stop_time: datetime | None = None

    @computed_field(return_type=float | None)
    @property
    def duration_ms(self) -> float | None:
        if self.stop_time is None:
            return None
        return (self.stop_time - self.start_time).total_seconds() * 1000.0
