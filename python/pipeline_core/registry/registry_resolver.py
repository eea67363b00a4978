r"""Declarative base for custom key resolvers.

Subclass RegistryResolver and set class attributes instead of implementing
the full BaseResolver contract:

    class VendorResolver(RegistryResolver):
        _name = "vendor"
        _priority = 50
        pattern = r"^vendor\.(?P<package>\w+)\.(?P<middleware>\w+)$"

        def resolve_handler(self, key):
            match = self._match_pattern(key)
            if match is None:
                return None
            return VENDORS[match["package"]].get(match["middleware"])

    pipeline.resolvers.add_resolver(VendorResolver())
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from .base_resolver import BaseResolver


class RegistryResolver(BaseResolver):
    """Resolver configured through class attributes.

    A key is accepted when it matches ``pattern`` (a regex, anchored at
    the start) or, failing that, starts with ``prefix``. With neither set
    the resolver accepts nothing.

    Class Attributes:
        _name: Resolver name shown in ``ResolverChain.chain_info()``.
        _priority: Position in the chain; lower is asked first. Default 50.
        pattern: Optional key regex.
        prefix: Optional key prefix.
    """

    _name: ClassVar[str] = "custom_resolver"
    _priority: ClassVar[int] = 50
    pattern: ClassVar[str | None] = None
    prefix: ClassVar[str | None] = None

    def __init__(self) -> None:
        self._regex: re.Pattern[str] | None = re.compile(self.pattern) if self.pattern else None

    @property
    def name(self) -> str:
        return type(self)._name

    @property
    def priority(self) -> int:
        return type(self)._priority

    def can_resolve(self, key: str) -> bool:
        if self._regex is not None:
            return self._regex.match(key) is not None
        return bool(self.prefix) and key.startswith(self.prefix)

    def resolve(self, key: str) -> Any | None:
        return self.resolve_handler(key)

    def resolve_handler(self, key: str) -> Any | None:
        """Produce the middleware for an accepted key.

        Subclasses must override this. Returning None passes the key on
        to the next resolver in the chain.

        Raises:
            NotImplementedError: When not overridden.
        """
        raise NotImplementedError(
            f"{type(self).__name__} must implement resolve_handler()"
        )

    def _match_pattern(self, key: str) -> re.Match[str] | None:
        """Match ``key`` against ``pattern`` (None without a pattern)."""
        return self._regex.match(key) if self._regex is not None else None
