r"""Middleware registry and key resolution infrastructure.

This package holds the pieces that turn configured names into middleware:

- MiddlewareRegistry: group and alias maps, and the flattening pass
- MiddlewareToken: parsed ``name:arg1,arg2`` string references
- ResolverChain: priority-ordered resolution of plain string keys

Built-in Resolvers:
- ContainerResolver (priority 10): Dependency-injection container lookup
- ExplicitMappingResolver (priority 20): Explicit key → middleware mappings
- ClassLookupResolver (priority 100): Class path inference via importlib

Custom Resolvers:
Extend RegistryResolver for developer-friendly custom resolution:

    from pipeline_core.registry import RegistryResolver

    class VendorResolver(RegistryResolver):
        _name = "vendor_resolver"
        _priority = 50
        prefix = "vendor."

        def resolve_handler(self, key):
            return VENDOR_MIDDLEWARE.get(key)
"""

from __future__ import annotations

from .base_resolver import BaseResolver
from .middleware_registry import MiddlewareRegistry
from .middleware_token import MiddlewareToken
from .registry_resolver import RegistryResolver
from .resolver_chain import ResolverChain
from .resolvers import ClassLookupResolver, ContainerResolver, ExplicitMappingResolver

__all__ = [
    # Core types
    "MiddlewareRegistry",
    "MiddlewareToken",
    # Resolver base classes
    "BaseResolver",
    "RegistryResolver",
    # Resolver chain
    "ResolverChain",
    # Built-in resolvers
    "ContainerResolver",
    "ExplicitMappingResolver",
    "ClassLookupResolver",
]
