"""Clock and span-id source capabilities injected into a Trace."""

from __future__ import annotations

import secrets
import threading
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@runtime_checkable
class Clock(Protocol):
    """Supplies span start and stop timestamps."""

    def instant(self) -> datetime: ...


@runtime_checkable
class IdSource(Protocol):
    """Supplies span ids in the range 0 to 2**63 - 1.

    Implementations make no uniqueness promise.
    """

    def next_id(self) -> int: ...


class SystemClock:
    def instant(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a single instant."""

    def __init__(self, instant: datetime = EPOCH) -> None:
        self._instant = instant

    def instant(self) -> datetime:
        return self._instant


class RandomIdSource:
    """Random non-negative 63-bit ids, so every id fits the header's span id field."""

    def next_id(self) -> int:
        return secrets.randbits(63)


class SequenceIdSource:
    """Thread-safe increasing ids. Good for tests and single-process debugging."""

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value


class FixedIdSource:
    def __init__(self, value: int = 0) -> None:
        self._value = value

    def next_id(self) -> int:
        return self._value
