"""Middleware base class and reference classification.

This module provides the Middleware abstract base class for class-style
middleware, and ``classify`` which tags any middleware reference with
its ``MiddlewareKind``.

Subclassing Middleware is optional: any object with a callable ``handle``
attribute is accepted by the pipeline, as is any plain function taking
``(request, next, response, *arguments)``.

Example:
    >>> from pipeline_core import Middleware
    >>>
    >>> class RequireRole(Middleware):
    ...     middleware_name = "require_role"
    ...
    ...     async def handle(self, request, next, response=None, role=None):
    ...         if role and role not in request.roles:
    ...             return Forbidden()
    ...         return await next(request)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .exceptions import InvalidMiddlewareError
from .types import MiddlewareKind, Next


class Middleware(ABC):
    """Abstract base class for class-style middleware.

    Class Attributes:
        middleware_name: Identifier used in logs and events. Defaults to
            the class name.
    """

    middleware_name: str = ""

    @abstractmethod
    def handle(self, request: Any, next: Next, response: Any, *arguments: str) -> Any:
        """Process the request, delegating to ``next`` to continue the chain.

        Code before ``await next(request)`` runs on the way in, code after
        it runs on the way out. Returning without calling ``next``
        short-circuits the rest of the chain, destination included.

        Args:
            request: The (possibly transformed) request.
            next: Continuation running the remainder of the chain.
            response: Extra value given to ``Pipeline.handle``, or None.
            *arguments: Raw string arguments from a ``name:a,b`` token.

        Returns:
            The response, or an awaitable resolving to it.
        """
        ...

    @property
    def name(self) -> str:
        """Return the middleware name.

        Returns:
            The middleware_name class attribute, or the class name if not set.
        """
        return self.middleware_name or self.__class__.__name__

    def __repr__(self) -> str:
        """Return a string representation of the middleware."""
        return f"{self.__class__.__name__}(name={self.name!r})"


def classify(reference: Any) -> MiddlewareKind:
    """Tag a middleware reference with its kind.

    Classes are checked before callables because every class is callable;
    objects exposing ``handle`` are checked before plain callables so that
    a callable middleware instance is still driven through ``handle``.

    Args:
        reference: Any value placed in, or resolved for, the pipeline stack.

    Returns:
        The MiddlewareKind of the reference.

    Raises:
        InvalidMiddlewareError: If the reference has none of the accepted
            shapes.
    """
    if isinstance(reference, str):
        return MiddlewareKind.TOKEN
    if isinstance(reference, type):
        return MiddlewareKind.CLASS
    if callable(getattr(reference, "handle", None)):
        return MiddlewareKind.INSTANCE
    if callable(reference):
        return MiddlewareKind.FUNCTION
    raise InvalidMiddlewareError(reference)


def describe(reference: Any) -> str:
    """Return a short human-readable label for a reference (for logs)."""
    if isinstance(reference, str):
        return reference
    if isinstance(reference, Middleware):
        return reference.name
    name = getattr(reference, "__qualname__", None) or getattr(reference, "__name__", None)
    return name or type(reference).__name__


__all__ = ["Middleware", "classify", "describe"]
