"""Immutable, hierarchical execution context.

A ``Context`` is a node in a persistent singly-linked chain: each node binds
one ``Key`` to one value and points at its parent. Many leaf contexts can
share the same ancestors. The context active for the running thread (or
asyncio task) lives in a ``ContextVar``; ``Context.run`` installs a context
for the duration of a call and always restores the previous one.
"""

from __future__ import annotations

import contextvars
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar, overload

from ..exceptions import ContextKeyTypeError

P = ParamSpec("P")
R = TypeVar("R")
T = TypeVar("T")
D = TypeVar("D")

_current_context: contextvars.ContextVar[Context | None] = contextvars.ContextVar(
    "apptrace_current_context",
    default=None,
)


def current() -> Context:
    """Return the ambient context, or the empty root when none is installed."""
    context = _current_context.get()
    return EMPTY_CONTEXT if context is None else context


def empty_context() -> Context:
    return EMPTY_CONTEXT


def push_context(context: Context) -> contextvars.Token[Context | None]:
    return _current_context.set(context)


def reset_context(token: contextvars.Token[Context | None]) -> None:
    _current_context.reset(token)


def key(name: str, value_type: type[T]) -> Key[T]:
    """Return a new key identified by ``name`` and ``value_type``."""
    if name is None:
        raise ValueError("Context key name is required")
    if value_type is None:
        raise ValueError("Context key value_type is required")
    return Key(name, value_type)


class Context:
    """A single immutable binding of a key to a value, chained to its parent."""

    __slots__ = ("_key", "_parent", "_value")

    def __init__(self, parent: Context | None, key: Key[Any] | None, value: object) -> None:
        self._parent = parent
        self._key = key
        self._value = value

    @property
    def parent(self) -> Context | None:
        return self._parent

    def new_child(self, key: Key[T], value: T) -> Context:
        """Return a new context extending this one with ``key`` bound to ``value``."""
        return Context(self, key, value)

    def run(self, fn: Callable[P, R], /, *args: P.args, **kwargs: P.kwargs) -> R:
        """Call ``fn`` with this context installed, restoring the previous one afterwards."""
        token = push_context(self)
        try:
            return fn(*args, **kwargs)
        finally:
            reset_context(token)

    call = run

    @contextmanager
    def scope(self) -> Iterator[Context]:
        token = push_context(self)
        try:
            yield self
        finally:
            reset_context(token)

    def wrap(self, fn: Callable[P, R]) -> Callable[P, R]:
        """Bind ``fn`` to this context; the wrapper runs it here wherever it is invoked."""

        @wraps(fn)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
            return self.run(fn, *args, **kwargs)

        return wrapped

    def __iter__(self) -> Iterator[tuple[Key[Any], object]]:
        """Yield ``(key, value)`` bindings from this node towards the root."""
        context: Context | None = self
        while context is not None:
            if context._key is not None:
                yield context._key, context._value
            context = context._parent

    def __repr__(self) -> str:
        if self._key is None:
            return "Context(<empty>)"
        return f"Context({self._key.name}={self._value!r})"


class Key(Generic[T]):
    """Identifies a value in a context by name and value type."""

    __slots__ = ("name", "value_type")

    def __init__(self, name: str, value_type: type[T]) -> None:
        self.name = name
        self.value_type = value_type

    @overload
    def current_value(self) -> T | None: ...
    @overload
    def current_value(self, default: D) -> T | D: ...

    def current_value(self, default: object = None) -> object:
        return self.value_for(current(), default)

    @overload
    def value_for(self, context: Context) -> T | None: ...
    @overload
    def value_for(self, context: Context, default: D) -> T | D: ...

    def value_for(self, context: Context, default: object = None) -> object:
        """Return the value nearest to ``context`` bound to this key, or ``default``."""
        if context is None:
            raise ValueError("context is required")
        for bound_key, value in context:
            if bound_key == self:
                if not isinstance(value, self.value_type):
                    raise ContextKeyTypeError(
                        f"Context value for key {self.name!r} is "
                        f"{type(value).__name__}, expected {self.value_type.__name__}"
                    )
                return value
        return default

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Key):
            return NotImplemented
        return self.name == other.name and self.value_type == other.value_type

    def __hash__(self) -> int:
        return hash((self.name, self.value_type))

    def __repr__(self) -> str:
        return f"Key({self.name!r}, {self.value_type.__name__})"


EMPTY_CONTEXT = Context(None, None, None)
