"""Module export tests.

These tests verify:
- Submodule exports are available
- Package-level names are the same objects as the submodule ones
- Exported types have the expected shape
"""

from __future__ import annotations

from abc import ABC

import pipeline_core


class TestSubmoduleExports:
    """Test that submodules expose their public names."""

    def test_registry_exports(self):
        """Test the registry subpackage exports."""
        from pipeline_core import registry

        assert set(registry.__all__) == {
            "MiddlewareRegistry",
            "MiddlewareToken",
            "BaseResolver",
            "RegistryResolver",
            "ResolverChain",
            "ContainerResolver",
            "ExplicitMappingResolver",
            "ClassLookupResolver",
        }

    def test_resolvers_exports(self):
        """Test the built-in resolvers subpackage exports."""
        from pipeline_core.registry.resolvers import (
            ClassLookupResolver,
            ContainerResolver,
            ExplicitMappingResolver,
        )

        assert ClassLookupResolver is pipeline_core.ClassLookupResolver
        assert ContainerResolver is pipeline_core.ContainerResolver
        assert ExplicitMappingResolver is pipeline_core.ExplicitMappingResolver

    def test_config_exports(self):
        """Test the config module exports."""
        from pipeline_core.config import (
            CONFIG_PATH_ENV,
            find_pipeline_config,
            load_pipeline_config,
        )

        assert CONFIG_PATH_ENV == "PIPELINE_CORE_CONFIG"
        assert find_pipeline_config is pipeline_core.find_pipeline_config
        assert load_pipeline_config is pipeline_core.load_pipeline_config

    def test_exceptions_exports(self):
        """Test the exceptions module exports."""
        from pipeline_core import exceptions

        for name in exceptions.__all__:
            assert getattr(exceptions, name) is getattr(pipeline_core, name)


class TestExportedTypes:
    """Test the shape of exported types."""

    def test_middleware_is_abstract(self):
        """Test Middleware is an abstract base class."""
        assert issubclass(pipeline_core.Middleware, ABC)

    def test_base_resolver_is_abstract(self):
        """Test BaseResolver is an abstract base class."""
        assert issubclass(pipeline_core.BaseResolver, ABC)

    def test_middleware_kind_values(self):
        """Test MiddlewareKind string values."""
        from pipeline_core import MiddlewareKind

        assert MiddlewareKind.FUNCTION == "function"
        assert MiddlewareKind.INSTANCE == "instance"
        assert MiddlewareKind.CLASS == "class"
        assert MiddlewareKind.TOKEN == "token"

    def test_pipeline_config_defaults(self):
        """Test PipelineConfig can be built with no arguments."""
        config = pipeline_core.PipelineConfig()

        assert config.middleware == []
        assert config.groups == {}
        assert config.aliases == {}
        assert config.log_level == "info"

    def test_container_protocol_is_runtime_checkable(self):
        """Test any object with make() satisfies Container."""

        class Simple:
            def make(self, key):
                return key

        assert isinstance(Simple(), pipeline_core.Container)
        assert not isinstance(object(), pipeline_core.Container)
