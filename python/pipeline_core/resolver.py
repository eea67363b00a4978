"""Per-position middleware resolution.

The MiddlewareResolver turns one flattened middleware reference into a
ResolvedMiddleware: a concrete function or ``handle``-capable object plus
the raw string arguments it should receive.

Resolution order for string tokens:
1. Alias names are replaced by their target, carrying the token's arguments
2. Any other name is looked up through the ResolverChain
3. No match raises UnknownMiddlewareError

Classes, whether given directly or produced by a resolver, are
instantiated through the container when one is configured, and with no
arguments otherwise. Nothing is cached: each call resolves afresh.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import (
    ConfigurationError,
    InvalidMiddlewareError,
    MiddlewareCycleError,
    UnknownMiddlewareError,
)
from .logging import log_trace
from .middleware import classify, describe
from .registry.middleware_token import MiddlewareToken
from .types import MiddlewareKind

if TYPE_CHECKING:
    from .registry.middleware_registry import MiddlewareRegistry
    from .registry.resolver_chain import ResolverChain
    from .types import Container, Next


@dataclass(frozen=True)
class ResolvedMiddleware:
    """A middleware ready to be invoked at one chain position.

    Attributes:
        handler: The function or ``handle``-capable object.
        kind: FUNCTION or INSTANCE.
        arguments: Raw string arguments appended after
            ``(request, next, response)``.
        reference: The flattened reference this was resolved from.
    """

    handler: Any
    kind: MiddlewareKind
    arguments: tuple[str, ...] = ()
    reference: Any = None

    def invoke(self, request: Any, next: Next, response: Any = None) -> Any:
        """Call the middleware as ``(request, next, response, *arguments)``."""
        if self.kind is MiddlewareKind.INSTANCE:
            return self.handler.handle(request, next, response, *self.arguments)
        return self.handler(request, next, response, *self.arguments)


class MiddlewareResolver:
    """Resolves flattened references into invocable middleware."""

    def __init__(
        self,
        registry: MiddlewareRegistry,
        chain: ResolverChain,
        container: Container | None = None,
    ) -> None:
        self._registry = registry
        self._chain = chain
        self._container = container

    def resolve(self, reference: Any) -> ResolvedMiddleware:
        """Resolve one flattened reference.

        Args:
            reference: A function, ``handle``-capable object, class or
                string token.

        Returns:
            The resolved middleware.

        Raises:
            InvalidMiddlewareError: If the reference, or what it resolves
                to, is neither callable nor ``handle``-capable.
            UnknownMiddlewareError: If a string key matches nothing.
            MiddlewareCycleError: If an alias resolves back into itself.
            ConfigurationError: If arguments are applied to a group or to
                an alias targeting several middleware.
        """
        resolved = self._resolve(reference, (), (), reference)
        log_trace(
            "Resolved middleware",
            {
                "middleware": describe(reference),
                "kind": resolved.kind.value,
                "arguments": ",".join(resolved.arguments),
            },
        )
        return resolved

    def _resolve(
        self,
        reference: Any,
        arguments: tuple[str, ...],
        path: tuple[str, ...],
        origin: Any,
    ) -> ResolvedMiddleware:
        if isinstance(reference, str):
            return self._resolve_token(reference, arguments, path, origin)
        return self._materialize(reference, arguments, origin)

    def _resolve_token(
        self,
        reference: str,
        arguments: tuple[str, ...],
        path: tuple[str, ...],
        origin: Any,
    ) -> ResolvedMiddleware:
        token = MiddlewareToken.parse(reference)
        name = token.name
        # Arguments from the outermost token win over the target's own.
        arguments = arguments or token.arguments

        if self._registry.is_alias(name):
            if name in path:
                raise MiddlewareCycleError([*path, name])
            target = self._registry.aliases[name]
            if isinstance(target, tuple):
                raise ConfigurationError(
                    f"Alias '{name}' targets several middleware and cannot be resolved in place"
                )
            return self._resolve(target, arguments, (*path, name), origin)

        if self._registry.is_group(name):
            raise ConfigurationError(
                f"Group '{name}' cannot be resolved to a single middleware"
            )

        handler = self._chain.resolve(name)
        if handler is None:
            raise UnknownMiddlewareError(name)
        return self._materialize(handler, arguments, origin)

    def _materialize(
        self, handler: Any, arguments: tuple[str, ...], origin: Any
    ) -> ResolvedMiddleware:
        kind = classify(handler)
        if kind is MiddlewareKind.CLASS:
            handler = self._instantiate(handler)
            kind = classify(handler)
        if kind not in (MiddlewareKind.FUNCTION, MiddlewareKind.INSTANCE):
            raise InvalidMiddlewareError(handler)
        return ResolvedMiddleware(handler, kind, tuple(arguments), origin)

    def _instantiate(self, middleware_class: type) -> Any:
        if self._container is not None:
            return self._container.make(middleware_class)
        return middleware_class()
