"""Container resolver (priority 10).

This resolver delegates string keys to the capability-resolution
collaborator (the dependency-injection container). It is the highest
priority resolver in the default chain whenever a container is configured.

Example:
    >>> resolver = ContainerResolver(app.container)
    >>> resolver.can_resolve("auth")
    True
    >>> handler = resolver.resolve("auth")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..base_resolver import BaseResolver

if TYPE_CHECKING:
    from ...types import Container


class ContainerResolver(BaseResolver):
    """Resolver backed by a dependency-injection container.

    Priority 10 - checked first in the default chain.

    ``can_resolve`` uses the container's optional ``has(key)`` probe. A
    container without ``has`` is assumed to know every key, and ``make``
    is called unconditionally.
    """

    def __init__(self, container: Container, name: str = "container") -> None:
        """Initialize the resolver.

        Args:
            container: Object exposing ``make(key)`` and optionally ``has(key)``.
            name: Resolver name for identification.
        """
        self._container = container
        self._name = name

    @property
    def name(self) -> str:
        """Return the resolver name."""
        return self._name

    @property
    def priority(self) -> int:
        """Return the resolver priority (10 = highest)."""
        return 10

    @property
    def container(self) -> Container:
        """Return the wrapped container."""
        return self._container

    def can_resolve(self, key: str) -> bool:
        """Check if the container knows the key.

        Args:
            key: Middleware key.

        Returns:
            Result of ``container.has(key)``, or True if the container has
            no membership probe.
        """
        has = getattr(self._container, "has", None)
        if not callable(has):
            return True
        return bool(has(key))

    def resolve(self, key: str) -> Any | None:
        """Ask the container to make the key.

        Args:
            key: Middleware key.

        Returns:
            Whatever the container returns; None counts as unresolved.
        """
        return self._container.make(key)
