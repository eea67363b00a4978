"""Pydantic models and shared types for pipeline_core.

This module provides the configuration and logging models, plus the
type aliases used across the resolver and the invoker.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from pydantic import BaseModel, Field

Next = Callable[[Any], Awaitable[Any]]
"""The continuation handed to each middleware. Calling it with a (possibly
transformed) request runs the rest of the chain and resolves to its result."""

Destination = Callable[[Any, Any], Any]
"""The terminal handler, called as ``destination(request, response)`` once
every middleware has delegated. May return a value or an awaitable."""

MiddlewareHandler = Union[str, type, Callable[..., Any], Any]
"""Any reference accepted by ``Pipeline.pipe``: a string token, a class, a
function, or an object exposing ``handle``."""


@runtime_checkable
class Container(Protocol):
    """Capability-resolution collaborator (dependency-injection container).

    The pipeline only ever calls ``make``, with either a string key or a
    class, and treats the result as opaque. Containers may additionally
    expose ``has(key) -> bool``; when they do, it is consulted before
    ``make`` for string keys.
    """

    def make(self, key: Any) -> Any: ...


class MiddlewareKind(str, Enum):
    """Shape of a middleware reference.

    Every reference is tagged with exactly one kind before it is invoked.
    """

    FUNCTION = "function"
    """Plain callable, invoked as ``fn(request, next, response, *arguments)``."""

    INSTANCE = "instance"
    """Object exposing ``handle(request, next, response, *arguments)``."""

    CLASS = "class"
    """Class whose instances expose ``handle``; instantiated per call."""

    TOKEN = "token"
    """String ``name`` or ``name:arg1,arg2`` naming an alias or a key."""


class PipelineConfig(BaseModel):
    """Declarative pipeline configuration.

    Mirrors the configuration surface of ``Pipeline``: the middleware
    stack, the group registry and the alias registry. References are
    strings here; aliases typically point at container keys or dotted
    ``module.ClassName`` paths.

    Example:
        >>> config = PipelineConfig(
        ...     middleware=["web"],
        ...     groups={"web": ["session", "csrf"]},
        ...     aliases={"session": "myapp.middleware.SessionMiddleware"},
        ... )
        >>> pipeline = Pipeline.from_config(config)
    """

    middleware: list[str] = Field(
        default_factory=list,
        description="Ordered middleware stack.",
    )
    groups: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Named middleware groups.",
    )
    aliases: dict[str, str | list[str]] = Field(
        default_factory=dict,
        description="Middleware aliases (single reference or list).",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level for the pipeline logger (trace, debug, info, warn, error).",
    )

    model_config = {"extra": "forbid"}


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(
        ...     correlation_id="abc-123",
        ...     middleware="auth",
        ...     operation="resolve",
        ... )
        >>> log_debug("Middleware resolved", context)
    """

    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID for request tracing.",
    )
    pipeline: str | None = Field(
        default=None,
        description="Pipeline identifier.",
    )
    middleware: str | None = Field(
        default=None,
        description="Middleware reference being processed.",
    )
    operation: str | None = Field(
        default=None,
        description="Current operation name.",
    )


__all__ = [
    "Next",
    "Destination",
    "MiddlewareHandler",
    "Container",
    "MiddlewareKind",
    "PipelineConfig",
    "LogContext",
]
