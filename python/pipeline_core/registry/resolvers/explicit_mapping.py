"""Explicit mapping resolver (priority 20).

Backs ``Pipeline.register(key, middleware)``: a plain in-process mapping
for applications that have no container.

Example:
    >>> pipeline.register("auth", AuthMiddleware).pipe("auth:api")
"""

from __future__ import annotations

import threading
from typing import Any

from ..base_resolver import BaseResolver


class ExplicitMappingResolver(BaseResolver):
    """Exact-key mapping from names to middleware references.

    Entries are returned exactly as registered. A class is therefore
    instantiated by the pipeline on every call, while a function or an
    instance is shared by all calls.
    """

    def __init__(self, name: str = "explicit_mapping") -> None:
        self._name = name
        self._entries: dict[str, Any] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return 20

    def can_resolve(self, key: str) -> bool:
        return key in self._entries

    def resolve(self, key: str) -> Any | None:
        return self._entries.get(key)

    def register(self, key: str, middleware: Any) -> None:
        """Map ``key`` to a middleware class, instance or function.

        Registering an existing key replaces its entry.
        """
        with self._lock:
            self._entries[key] = middleware

    def unregister(self, key: str) -> bool:
        """Remove ``key``. Returns False when it was not registered."""
        with self._lock:
            if key not in self._entries:
                return False
            del self._entries[key]
            return True

    def registered_callables(self) -> list[str]:
        with self._lock:
            return list(self._entries)
