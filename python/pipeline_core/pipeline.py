"""Onion-model middleware pipeline.

The Pipeline runs an ordered stack of middleware around a terminal
destination. Each middleware runs code before delegating to ``next``,
may inspect or replace the result afterwards, and may short-circuit by
never calling ``next`` at all.

Execution of ``handle``:
1. The raw stack is flattened: groups and argument-less aliases expand in place
2. Position 0 is resolved into a concrete middleware and invoked with
   ``(request, next, response, *arguments)``
3. ``next`` resolves and invokes the following position, and so on
4. Past the last position, ``destination(request, response)`` is called
5. Results unwind back through each middleware in reverse order

Example:
    >>> pipeline = Pipeline(container)
    >>> pipeline.set_aliases({"auth": AuthMiddleware, "throttle": throttle})
    >>> pipeline.set_middleware_groups({"api": ["auth", "throttle:60,1"]})
    >>> pipeline.pipe("api").pipe(log_requests)
    >>>
    >>> response = await pipeline.handle(request, dispatch_to_route)
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError
from .logging import configure_logging, log_debug, log_trace
from .registry.middleware_registry import MiddlewareRegistry
from .registry.resolver_chain import ResolverChain
from .resolver import MiddlewareResolver
from .types import Container

if TYPE_CHECKING:
    from .event_bridge import EventBridge
    from .types import Destination, MiddlewareHandler, PipelineConfig


class Pipeline:
    """Executes a stack of middleware in an onion-style model.

    Configuration (``pipe``, ``set_middleware_groups``, ``set_aliases``,
    ``register``) is expected to happen before the pipeline serves
    requests. ``handle`` itself keeps all per-call state local, so one
    pipeline can serve any number of concurrent calls.

    Attributes:
        container: Optional dependency-injection container.
        registry: Group and alias registry.
        resolvers: Chain used for string keys that are not aliases.
    """

    def __init__(
        self,
        container: Container | None = None,
        *,
        resolvers: ResolverChain | None = None,
        events: EventBridge | None = None,
    ) -> None:
        """Create a new Pipeline instance.

        Args:
            container: Optional container exposing ``make(key)`` and
                optionally ``has(key)``. Used for string keys and to
                construct middleware classes.
            resolvers: Custom resolver chain. Defaults to
                ``ResolverChain.default(container)``.
            events: Optional EventBridge notified of pipeline lifecycle.

        Raises:
            ConfigurationError: If ``container`` has no ``make`` method.
        """
        if container is not None and not isinstance(container, Container):
            raise ConfigurationError(
                f"Container {type(container).__name__} does not provide make()"
            )
        self.container = container
        self.registry = MiddlewareRegistry()
        self.resolvers = resolvers if resolvers is not None else ResolverChain.default(container)
        self._resolver = MiddlewareResolver(self.registry, self.resolvers, container)
        self._events = events
        self._handlers: list[Any] = []
        self._lock = threading.RLock()
        self._flattened: tuple[Any, ...] = ()
        self._flattened_key: tuple[int, int] | None = None

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        container: Container | None = None,
        **kwargs: Any,
    ) -> Pipeline:
        """Build a pipeline from a PipelineConfig.

        Applies the configured log level, installs groups and aliases,
        then pipes the configured middleware stack.

        Args:
            config: Validated pipeline configuration.
            container: Optional dependency-injection container.
            **kwargs: Forwarded to the constructor.

        Returns:
            The configured pipeline.
        """
        configure_logging(config.log_level)
        pipeline = cls(container, **kwargs)
        pipeline.set_middleware_groups(config.groups)
        pipeline.set_aliases(config.aliases)
        pipeline.pipe(config.middleware)
        return pipeline

    def pipe(self, middleware: MiddlewareHandler | Iterable[MiddlewareHandler]) -> Pipeline:
        """Add middleware to the pipeline.

        Args:
            middleware: A single reference, or a list/tuple of references
                appended in order.

        Returns:
            Self for method chaining.
        """
        with self._lock:
            if isinstance(middleware, (list, tuple)):
                self._handlers.extend(middleware)
            else:
                self._handlers.append(middleware)
        return self

    def set_middleware_groups(self, groups: Mapping[str, Iterable[Any]]) -> Pipeline:
        """Set the middleware groups.

        Returns:
            Self for method chaining.
        """
        self.registry.set_groups(groups)
        return self

    def set_aliases(self, aliases: Mapping[str, Any]) -> Pipeline:
        """Set the middleware aliases.

        Returns:
            Self for method chaining.
        """
        self.registry.set_aliases(aliases)
        return self

    def register(self, key: str, middleware: Any) -> Pipeline:
        """Register middleware under a key without a container.

        Returns:
            Self for method chaining.
        """
        self.resolvers.register(key, middleware)
        return self

    @property
    def middleware(self) -> tuple[Any, ...]:
        """The raw middleware stack, in pipe order."""
        with self._lock:
            return tuple(self._handlers)

    def flatten(self) -> tuple[Any, ...]:
        """Flatten the stack by expanding groups and aliases.

        The result is cached until the stack grows or the registry changes.

        Returns:
            Flattened middleware references.
        """
        with self._lock:
            key = (self.registry.version, len(self._handlers))
            if key != self._flattened_key:
                self._flattened = self.registry.flatten(self._handlers)
                self._flattened_key = key
                log_debug(
                    f"Pipeline: Flattened {len(self._handlers)} middleware "
                    f"into {len(self._flattened)} positions"
                )
            return self._flattened

    async def handle(
        self,
        request: Any,
        destination: Destination,
        response: Any = None,
    ) -> Any:
        """Run the request through the pipeline to the given destination.

        Args:
            request: Request passed to the first middleware.
            destination: Terminal handler, called as
                ``destination(request, response)``.
            response: Optional extra value handed to every middleware as its
                third argument and to the destination.

        Returns:
            The result of the outermost middleware (or of the destination
            when the stack is empty).

        Raises:
            InvalidMiddlewareError: If a position resolves to something that
                is neither callable nor ``handle``-capable.
            ConfigurationError: If groups or aliases are malformed.
            Exception: Anything raised by middleware or the destination
                propagates unchanged.
        """
        chain = self.flatten()
        resolve = self._resolver.resolve
        events = self._events if self._events is not None and self._events.is_active else None

        async def invoke(index: int, current: Any) -> Any:
            if index >= len(chain):
                log_trace("Pipeline: Reached destination", {"position": index})
                return await _settle(destination(current, response))

            middleware = resolve(chain[index])
            if events is not None:
                events.middleware_resolved(index, middleware)

            async def next(next_request: Any) -> Any:
                return await invoke(index + 1, next_request)

            return await _settle(middleware.invoke(current, next, response))

        if events is not None:
            events.pipeline_started(request)

        try:
            result = await invoke(0, request)
        except Exception as e:
            log_debug(f"Pipeline: Request failed: {e}", {"error_type": type(e).__name__})
            if events is not None:
                events.pipeline_failed(request, e)
            raise

        if events is not None:
            events.pipeline_completed(request, result)
        return result

    def __len__(self) -> int:
        """Return the number of raw middleware references."""
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(middleware={len(self._handlers)})"


async def _settle(value: Any) -> Any:
    """Await the value if the middleware or destination returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
