"""Custom exceptions for pipeline_core.

This module provides a hierarchy of exceptions for error handling
in the middleware pipeline.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline_core errors.

    All exceptions raised by the pipeline engine inherit from this class,
    making it easy to catch all pipeline-related errors. Errors raised by
    middleware or by the destination are never wrapped.

    Example:
        >>> try:
        ...     await pipeline.handle(request, destination)
        ... except PipelineError as e:
        ...     print(f"Pipeline error: {e}")
    """

    pass


class ConfigurationError(PipelineError):
    """Raised when groups, aliases or a config file are malformed.

    Example:
        >>> try:
        ...     config = load_pipeline_config("missing.yaml")
        ... except ConfigurationError as e:
        ...     print(f"Bad config: {e}")
    """

    pass


class MiddlewareCycleError(ConfigurationError):
    """Raised when a group or alias expands back into itself.

    Attributes:
        cycle: Names along the offending expansion path, ending with the
            name that was revisited.

    Example:
        >>> pipeline.set_middleware_groups({"web": ["api"], "api": ["web"]})
        >>> pipeline.pipe("web").flatten()
        Traceback (most recent call last):
        MiddlewareCycleError: Middleware cycle detected: web -> api -> web
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"Middleware cycle detected: {' -> '.join(self.cycle)}")


class InvalidMiddlewareError(PipelineError, TypeError):
    """Raised when a reference is neither callable nor exposes ``handle``.

    The in-flight ``handle`` call is aborted and nothing downstream runs.

    Attributes:
        reference: The offending reference.
    """

    def __init__(self, reference: Any, message: str | None = None) -> None:
        self.reference = reference
        super().__init__(
            message or f"Invalid middleware handler: {type(reference).__name__}"
        )


class UnknownMiddlewareError(InvalidMiddlewareError):
    """Raised when a string key matches no alias, group or resolver.

    Attributes:
        key: The unmatched key (without arguments).
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key, f"Invalid middleware handler: unknown key '{key}'")


__all__ = [
    "PipelineError",
    "ConfigurationError",
    "MiddlewareCycleError",
    "InvalidMiddlewareError",
    "UnknownMiddlewareError",
]
