"""Priority-ordered lookup of plain middleware keys.

A string token that names neither a group nor an alias is handed to the
ResolverChain. Each resolver is asked in priority order; the first one
that accepts the key and returns something other than None wins.

Default chain (``ResolverChain.default(container)``):
- 10  ContainerResolver        container.make(key), only when a container is given
- 20  ExplicitMappingResolver  keys registered with Pipeline.register()
- 100 ClassLookupResolver      dotted module.ClassName keys

Example:
    >>> chain = ResolverChain.default(container)
    >>> chain.add_resolver(VendorResolver())
    >>> chain.resolve("vendor.cors")
    <class 'vendor.middleware.Cors'>
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..logging import log_debug
from .resolvers import ClassLookupResolver, ContainerResolver, ExplicitMappingResolver

if TYPE_CHECKING:
    from ..types import Container
    from .base_resolver import BaseResolver


class ResolverChain:
    """Ordered set of key resolvers, at most one per name.

    The resolver list is an immutable snapshot replaced on every change, so
    lookups never hold the lock while calling into resolvers.
    """

    def __init__(self, resolvers: Iterable[BaseResolver] = ()) -> None:
        self._lock = threading.RLock()
        self._resolvers: tuple[BaseResolver, ...] = ()
        for resolver in resolvers:
            self.add_resolver(resolver)

    @classmethod
    def default(cls, container: Container | None = None) -> ResolverChain:
        """Build the standard chain.

        Args:
            container: When given, a ContainerResolver is placed first.
        """
        resolvers: list[BaseResolver] = [ExplicitMappingResolver(), ClassLookupResolver()]
        if container is not None:
            resolvers.insert(0, ContainerResolver(container))
        return cls(resolvers)

    def add_resolver(self, resolver: BaseResolver) -> ResolverChain:
        """Insert a resolver by priority, replacing one with the same name.

        Resolvers with equal priority keep insertion order.

        Returns:
            Self for method chaining.
        """
        with self._lock:
            kept = [r for r in self._resolvers if r.name != resolver.name]
            kept.append(resolver)
            self._resolvers = tuple(sorted(kept, key=lambda r: r.priority))
        log_debug(f"ResolverChain: Added '{resolver.name}' at priority {resolver.priority}")
        return self

    def remove_resolver(self, name: str) -> BaseResolver | None:
        """Remove and return the resolver called ``name``, if present."""
        with self._lock:
            removed = self.get_resolver(name)
            if removed is not None:
                self._resolvers = tuple(r for r in self._resolvers if r is not removed)
        return removed

    def get_resolver(self, name: str) -> BaseResolver | None:
        for resolver in self._resolvers:
            if resolver.name == name:
                return resolver
        return None

    @property
    def explicit_resolver(self) -> ExplicitMappingResolver | None:
        """The first ExplicitMappingResolver in the chain."""
        for resolver in self._resolvers:
            if isinstance(resolver, ExplicitMappingResolver):
                return resolver
        return None

    def register(self, key: str, middleware: Any) -> ResolverChain:
        """Register middleware on the chain's ExplicitMappingResolver.

        Returns:
            Self for method chaining.

        Raises:
            RuntimeError: If the chain has no ExplicitMappingResolver.
        """
        explicit = self.explicit_resolver
        if explicit is None:
            raise RuntimeError("No ExplicitMappingResolver in chain")
        explicit.register(key, middleware)
        return self

    def resolve(self, key: str) -> Any | None:
        """Resolve a plain key (no argument block).

        Returns:
            The first non-None reference a resolver produces, or None.
        """
        for resolver in self._resolvers:
            if not resolver.can_resolve(key):
                continue
            middleware = resolver.resolve(key)
            if middleware is not None:
                log_debug(f"ResolverChain: '{key}' resolved by '{resolver.name}'")
                return middleware

        log_debug(f"ResolverChain: No resolver matched '{key}'")
        return None

    def chain_info(self) -> list[dict[str, Any]]:
        """Describe each resolver for debugging."""
        return [
            {
                "name": r.name,
                "priority": r.priority,
                "callables": len(r.registered_callables()),
            }
            for r in self._resolvers
        ]

    @property
    def resolver_names(self) -> list[str]:
        return [r.name for r in self._resolvers]

    def __len__(self) -> int:
        return len(self._resolvers)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(self.resolver_names)})"
