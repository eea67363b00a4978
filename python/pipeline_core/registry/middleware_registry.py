"""Middleware group and alias registry.

The MiddlewareRegistry holds the two name maps a pipeline consults:

- groups: name -> ordered sequence of middleware references
- aliases: name -> single middleware reference, or a sequence of them

Both maps are stored as read-only snapshots. Replacing a map swaps the
snapshot and bumps ``version``, so a flattening pass that is already
running keeps a consistent view and cached flattened stacks can be
invalidated by comparing versions.

Example:
    >>> registry = MiddlewareRegistry()
    >>> registry.set_aliases({"m1": first, "m2": second})
    >>> registry.set_groups({"web": ["m1", "m2"]})
    >>> registry.flatten(["web"])
    (<function first>, <function second>)
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from ..exceptions import ConfigurationError, MiddlewareCycleError
from ..logging import log_debug
from .middleware_token import MiddlewareToken


class MiddlewareRegistry:
    """Read-mostly registry of middleware groups and aliases.

    Attributes:
        groups: Read-only view of the group map.
        aliases: Read-only view of the alias map. Sequence targets are
            stored as tuples.
        version: Incremented on every change to either map.
    """

    def __init__(
        self,
        groups: Mapping[str, Iterable[Any]] | None = None,
        aliases: Mapping[str, Any] | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._groups: Mapping[str, tuple[Any, ...]] = MappingProxyType({})
        self._aliases: Mapping[str, Any] = MappingProxyType({})
        self._version = 0
        if groups:
            self.set_groups(groups)
        if aliases:
            self.set_aliases(aliases)

    @property
    def groups(self) -> Mapping[str, tuple[Any, ...]]:
        return self._groups

    @property
    def aliases(self) -> Mapping[str, Any]:
        return self._aliases

    @property
    def version(self) -> int:
        return self._version

    def set_groups(self, groups: Mapping[str, Iterable[Any]]) -> None:
        """Replace the group map.

        Args:
            groups: Mapping of group name to an ordered sequence of references.

        Raises:
            ConfigurationError: If a name is not a string or a member list
                is not a list or tuple.
        """
        snapshot: dict[str, tuple[Any, ...]] = {}
        for name, members in _items(groups, "groups"):
            if not isinstance(members, (list, tuple)):
                raise ConfigurationError(
                    f"Middleware group '{name}' must be a list, got {type(members).__name__}"
                )
            snapshot[name] = tuple(members)

        with self._lock:
            self._groups = MappingProxyType(snapshot)
            self._version += 1
        log_debug(f"MiddlewareRegistry: Installed {len(snapshot)} groups")

    def set_aliases(self, aliases: Mapping[str, Any]) -> None:
        """Replace the alias map.

        Args:
            aliases: Mapping of alias name to a reference or a list of them.

        Raises:
            ConfigurationError: If a name is not a string.
        """
        snapshot: dict[str, Any] = {}
        for name, target in _items(aliases, "aliases"):
            snapshot[name] = tuple(target) if isinstance(target, (list, tuple)) else target

        with self._lock:
            self._aliases = MappingProxyType(snapshot)
            self._version += 1
        log_debug(f"MiddlewareRegistry: Installed {len(snapshot)} aliases")

    def is_group(self, name: str) -> bool:
        return name in self._groups

    def is_alias(self, name: str) -> bool:
        return name in self._aliases

    def flatten(self, stack: Iterable[Any]) -> tuple[Any, ...]:
        """Expand groups and argument-less aliases into a flat sequence.

        Order is preserved and expansion is depth-first. ``name:args``
        tokens naming an alias are kept verbatim so their arguments can be
        applied when the alias is resolved at call time. Every other
        reference passes through unchanged.

        Args:
            stack: Raw middleware references.

        Returns:
            Flattened references.

        Raises:
            MiddlewareCycleError: If a group or alias expands into itself.
            ConfigurationError: If arguments are given to an alias that
                targets several middleware.
        """
        with self._lock:
            groups, aliases = self._groups, self._aliases

        flattened: list[Any] = []
        _flatten_into(flattened, stack, groups, aliases, ())
        return tuple(flattened)


def _flatten_into(
    out: list[Any],
    handlers: Iterable[Any],
    groups: Mapping[str, tuple[Any, ...]],
    aliases: Mapping[str, Any],
    path: tuple[str, ...],
) -> None:
    for handler in handlers:
        if not isinstance(handler, str):
            out.append(handler)
            continue

        token = MiddlewareToken.parse(handler)
        name = token.name

        if token.has_arguments():
            if name in aliases and isinstance(aliases[name], tuple):
                raise ConfigurationError(
                    f"Cannot pass arguments to alias '{name}': it targets several middleware"
                )
            out.append(handler)
            continue

        if name in groups:
            members = groups[name]
        elif name in aliases:
            target = aliases[name]
            members = target if isinstance(target, tuple) else (target,)
        else:
            out.append(handler)
            continue

        if name in path:
            raise MiddlewareCycleError([*path, name])
        _flatten_into(out, members, groups, aliases, (*path, name))


def _items(mapping: Mapping[str, Any], label: str) -> Iterable[tuple[str, Any]]:
    if not isinstance(mapping, Mapping):
        raise ConfigurationError(f"Middleware {label} must be a mapping, got {type(mapping).__name__}")
    for name, value in mapping.items():
        if not isinstance(name, str):
            raise ConfigurationError(f"Middleware {label} names must be strings, got {name!r}")
        yield name, value
