"""Class lookup resolver (priority 100).

This resolver infers middleware classes from dotted keys using Python's
importlib. It handles ``module.path.ClassName`` keys, which lets YAML
configuration name middleware classes directly.

Example:
    >>> resolver = ClassLookupResolver()
    >>> resolver.resolve("myapp.middleware.SessionMiddleware")
    <class 'myapp.middleware.SessionMiddleware'>
"""

from __future__ import annotations

import importlib
import re
from typing import Any

from ...logging import log_debug
from ..base_resolver import BaseResolver


class ClassLookupResolver(BaseResolver):
    """Resolver that imports middleware classes from dotted keys.

    Asked last in the default chain since it only guesses from key shape.

    The key must look like a Python class path (contains at least one dot
    and ends with a capitalized component). The class itself is returned;
    the pipeline instantiates it on each call.
    """

    # module.path.ClassName: at least one dot, capitalized last component
    CLASS_PATTERN = re.compile(
        r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)*\.[A-Z][a-zA-Z0-9_]*$"
    )

    @property
    def name(self) -> str:
        return "class_lookup"

    @property
    def priority(self) -> int:
        return 100

    def can_resolve(self, key: str) -> bool:
        """Check if the key looks like a class path."""
        return bool(self.CLASS_PATTERN.match(key))

    def resolve(self, key: str) -> Any | None:
        """Import ``module.path`` and return ``ClassName``, or None if either is missing."""
        module_path, _, class_name = key.rpartition(".")
        if not module_path:
            return None

        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            log_debug(f"ClassLookupResolver: Cannot import '{module_path}': {e}")
            return None

        middleware_class = getattr(module, class_name, None)
        if not isinstance(middleware_class, type):
            return None

        return middleware_class
