"""Compose several middleware into one.

Example:
    >>> api = compose(["auth", "throttle:60,1", log_requests], container)
    >>> pipeline.pipe(api)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .pipeline import Pipeline

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .types import Container, MiddlewareHandler, Next


def compose(
    middleware: Iterable[MiddlewareHandler],
    container: Container | None = None,
) -> Callable[[Any, Next, Any], Awaitable[Any]]:
    """Compose multiple middleware into a single function middleware.

    The composed middleware runs its members as an inner pipeline whose
    destination is the outer ``next``, so the members nest inside the
    position the composed middleware occupies. The outer ``response`` is
    passed through to every member.

    Args:
        middleware: References to run, in order.
        container: Optional container for the inner pipeline.

    Returns:
        A middleware function ``(request, next, response)``.
    """
    inner = Pipeline(container).pipe(list(middleware))

    async def composed(request: Any, next: Next, response: Any = None) -> Any:
        return await inner.handle(request, lambda current, _response: next(current), response)

    return composed


__all__ = ["compose"]
