"""Function decorators for span instrumentation."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar, cast

from .span import span

P = ParamSpec("P")
R = TypeVar("R")


def traced(name: str | None = None) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Run every call of the decorated function inside its own span.

    The span nests under the ambient span when there is one and falls back
    to the null trace otherwise, so decorated code runs the same either way.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        label = name or getattr(func, "__name__", "callable")

        if inspect.iscoroutinefunction(func):
            async_func = cast(Callable[P, Awaitable[R]], func)

            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                async with span(label):
                    return await async_func(*args, **kwargs)

            return cast(Callable[P, R], async_wrapper)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return span(label, func, *args, **kwargs)

        return wrapper

    return decorator
