"""Contract for middleware key resolvers.

A resolver maps a plain string key (a token's name once groups and aliases
are ruled out) to a middleware reference. The ResolverChain asks resolvers
in ascending ``priority`` order:

1. ``can_resolve(key)``: cheap check, no side effects
2. ``resolve(key)``: produce the reference, or None to let the next
   resolver try

Whatever ``resolve`` returns is classified again by the pipeline, so a
resolver may hand back a function, an instance or a class.

Example:
    class SettingsResolver(BaseResolver):
        name = property(lambda self: "settings")
        priority = property(lambda self: 50)

        def can_resolve(self, key):
            return key in settings.MIDDLEWARE

        def resolve(self, key):
            return import_string(settings.MIDDLEWARE[key])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseResolver(ABC):
    """Abstract middleware key resolver."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name within a chain, used in logs and ``chain_info``."""

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lookup position; lower is asked first.

        Built-in values: 10 container, 20 explicit mapping, 100 class lookup.
        """

    @abstractmethod
    def can_resolve(self, key: str) -> bool:
        """Return True if this resolver may know ``key``."""

    @abstractmethod
    def resolve(self, key: str) -> Any | None:
        """Return the middleware reference for ``key``, or None."""

    def registered_callables(self) -> list[str]:
        """Keys this resolver can enumerate (empty for inferential resolvers)."""
        return []
