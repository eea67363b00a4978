"""
Pipeline Core

This package provides an onion-model middleware pipeline: an ordered
stack of middleware runs around a terminal destination, each one able to
act before and after delegating, or to short-circuit the chain.

Middleware may be given as functions, objects exposing ``handle``,
classes (instantiated per call, through a container when one is
configured), or string tokens naming aliases, groups or container keys,
optionally with arguments (``"throttle:60,1"``).

Example:
    >>> import pipeline_core
    >>> pipeline_core.version()
    '0.1.0'

    >>> from pipeline_core import Pipeline
    >>> async def timing(request, next, response=None):
    ...     started = time.monotonic()
    ...     result = await next(request)
    ...     result.headers["X-Elapsed"] = str(time.monotonic() - started)
    ...     return result

    >>> pipeline = Pipeline(container)
    >>> pipeline.set_aliases({"auth": AuthMiddleware, "role": require_role})
    >>> pipeline.set_middleware_groups({"admin": ["auth", "role:admin"]})
    >>> pipeline.pipe([timing, "admin"])
    >>> response = await pipeline.handle(request, route)
"""

from __future__ import annotations

from pipeline_core.compose import compose
from pipeline_core.config import find_pipeline_config, load_pipeline_config
from pipeline_core.event_bridge import EventBridge, EventNames
from pipeline_core.exceptions import (
    ConfigurationError,
    InvalidMiddlewareError,
    MiddlewareCycleError,
    PipelineError,
    UnknownMiddlewareError,
)
from pipeline_core.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from pipeline_core.middleware import Middleware, classify
from pipeline_core.pipeline import Pipeline
from pipeline_core.registry import (
    BaseResolver,
    ClassLookupResolver,
    ContainerResolver,
    ExplicitMappingResolver,
    MiddlewareRegistry,
    MiddlewareToken,
    RegistryResolver,
    ResolverChain,
)
from pipeline_core.resolver import MiddlewareResolver, ResolvedMiddleware
from pipeline_core.types import (
    Container,
    LogContext,
    MiddlewareKind,
    Next,
    PipelineConfig,
)

__version__ = "0.1.0"


def version() -> str:
    """Return the package version string."""
    return __version__


__all__ = [
    # Version
    "__version__",
    "version",
    # Pipeline
    "Pipeline",
    "compose",
    "Middleware",
    "classify",
    "MiddlewareKind",
    "Next",
    "Container",
    # Resolution
    "MiddlewareResolver",
    "ResolvedMiddleware",
    "MiddlewareRegistry",
    "MiddlewareToken",
    "ResolverChain",
    "BaseResolver",
    "RegistryResolver",
    "ContainerResolver",
    "ExplicitMappingResolver",
    "ClassLookupResolver",
    # Configuration
    "PipelineConfig",
    "find_pipeline_config",
    "load_pipeline_config",
    # Events
    "EventBridge",
    "EventNames",
    # Logging
    "LogContext",
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    # Exceptions
    "PipelineError",
    "ConfigurationError",
    "MiddlewareCycleError",
    "InvalidMiddlewareError",
    "UnknownMiddlewareError",
]
