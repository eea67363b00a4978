"""Built-in resolver implementations.

This module provides the default resolvers for the resolver chain:
- ContainerResolver (priority 10): Dependency-injection container lookup
- ExplicitMappingResolver (priority 20): Explicit key → middleware mappings
- ClassLookupResolver (priority 100): Class path inference via importlib
"""

from __future__ import annotations

from .class_lookup import ClassLookupResolver
from .container import ContainerResolver
from .explicit_mapping import ExplicitMappingResolver

__all__ = [
    "ContainerResolver",
    "ExplicitMappingResolver",
    "ClassLookupResolver",
]
