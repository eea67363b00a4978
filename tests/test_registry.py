"""Registry and flattening tests.

Tests the MiddlewareToken grammar, the MiddlewareRegistry snapshots and
the flattening pass over groups and aliases.
"""

from __future__ import annotations

import pytest

from pipeline_core import (
    ConfigurationError,
    MiddlewareCycleError,
    MiddlewareRegistry,
    MiddlewareToken,
    Pipeline,
)


def first(request, next, response):
    return next(request)


def second(request, next, response):
    return next(request)


# =============================================================================
# MiddlewareToken Tests
# =============================================================================


class TestMiddlewareToken:
    """Tests for the string token grammar."""

    def test_bare_name(self):
        """Test a token without arguments."""
        token = MiddlewareToken.parse("auth")

        assert token.name == "auth"
        assert token.arguments == ()
        assert token.has_arguments() is False

    def test_single_argument(self):
        """Test a token with one argument."""
        token = MiddlewareToken.parse("role:admin")

        assert token.name == "role"
        assert token.arguments == ("admin",)
        assert token.has_arguments() is True

    def test_multiple_arguments(self):
        """Test arguments split on commas in order."""
        assert MiddlewareToken.parse("gate:foo,bar,baz").arguments == ("foo", "bar", "baz")

    def test_only_first_colon_splits(self):
        """Test later colons stay inside the argument block."""
        token = MiddlewareToken.parse("cache:redis://host:6379")

        assert token.name == "cache"
        assert token.arguments == ("redis://host:6379",)

    def test_empty_argument_block(self):
        """Test 'name:' carries one empty argument."""
        token = MiddlewareToken.parse("gate:")

        assert token.has_arguments() is True
        assert token.arguments == ("",)

    def test_str_round_trips(self):
        """Test str() rebuilds the original token."""
        for raw in ("auth", "role:admin", "gate:foo,bar", "gate:"):
            assert str(MiddlewareToken.parse(raw)) == raw


# =============================================================================
# MiddlewareRegistry Tests
# =============================================================================


class TestMiddlewareRegistry:
    """Tests for group and alias snapshots."""

    def test_starts_empty(self):
        """Test a new registry has no groups or aliases."""
        registry = MiddlewareRegistry()

        assert dict(registry.groups) == {}
        assert dict(registry.aliases) == {}
        assert registry.version == 0

    def test_constructor_installs_maps(self):
        """Test groups and aliases passed to the constructor."""
        registry = MiddlewareRegistry(groups={"web": ["a"]}, aliases={"a": first})

        assert registry.is_group("web")
        assert registry.is_alias("a")
        assert registry.version == 2

    def test_snapshots_are_read_only(self):
        """Test the installed maps cannot be mutated."""
        registry = MiddlewareRegistry()
        registry.set_groups({"web": ["a", "b"]})

        with pytest.raises(TypeError):
            registry.groups["api"] = ("c",)  # type: ignore[index]

        assert registry.groups["web"] == ("a", "b")

    def test_snapshot_is_a_copy(self):
        """Test later changes to the caller's mapping are not seen."""
        groups = {"web": ["a"]}
        registry = MiddlewareRegistry(groups=groups)

        groups["web"].append("b")
        groups["api"] = ["c"]

        assert registry.groups["web"] == ("a",)
        assert not registry.is_group("api")

    def test_list_alias_targets_become_tuples(self):
        """Test sequence alias targets are stored as tuples."""
        registry = MiddlewareRegistry(aliases={"pair": [first, second], "one": first})

        assert registry.aliases["pair"] == (first, second)
        assert registry.aliases["one"] is first

    def test_version_bumps_on_change(self):
        """Test every replacement increments the version."""
        registry = MiddlewareRegistry()
        registry.set_groups({})
        registry.set_aliases({})

        assert registry.version == 2

    def test_rejects_non_list_group(self):
        """Test a group whose members are a string is rejected."""
        with pytest.raises(ConfigurationError, match="must be a list"):
            MiddlewareRegistry(groups={"web": "auth"})

    def test_rejects_non_string_names(self):
        """Test non-string names are rejected."""
        with pytest.raises(ConfigurationError, match="names must be strings"):
            MiddlewareRegistry(aliases={1: first})

    def test_rejects_non_mapping(self):
        """Test a non-mapping registry value is rejected."""
        registry = MiddlewareRegistry()

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            registry.set_groups([("web", ["a"])])  # type: ignore[arg-type]


# =============================================================================
# Flattening Tests
# =============================================================================


class TestFlatten:
    """Tests for group and alias expansion."""

    def test_non_strings_pass_through(self):
        """Test functions, instances and classes are kept as-is."""
        registry = MiddlewareRegistry()

        assert registry.flatten([first, Pipeline, second]) == (first, Pipeline, second)

    def test_unknown_strings_pass_through(self):
        """Test names matching neither map are left for the resolvers."""
        registry = MiddlewareRegistry(aliases={"a": first})

        assert registry.flatten(["auth", "throttle:60"]) == ("auth", "throttle:60")

    def test_group_expands_in_place(self):
        """Test a group's members are spliced where the group was."""
        registry = MiddlewareRegistry(groups={"web": [first, second]})

        assert registry.flatten(["x", "web", "y"]) == ("x", first, second, "y")

    def test_bare_alias_expands_eagerly(self):
        """Test argument-less aliases are substituted during flattening."""
        registry = MiddlewareRegistry(aliases={"a": first, "pair": [first, second]})

        assert registry.flatten(["a", "pair"]) == (first, first, second)

    def test_alias_with_arguments_is_deferred(self):
        """Test alias tokens with arguments are kept verbatim."""
        registry = MiddlewareRegistry(aliases={"role": first})

        assert registry.flatten(["role:admin"]) == ("role:admin",)

    def test_group_takes_precedence_over_alias(self):
        """Test a bare name found in both maps expands as the group."""
        registry = MiddlewareRegistry(groups={"web": [second]}, aliases={"web": first})

        assert registry.flatten(["web"]) == (second,)

    def test_alias_chain_expands_recursively(self):
        """Test aliases pointing at aliases and groups expand fully."""
        registry = MiddlewareRegistry(
            groups={"web": ["session", "csrf"]},
            aliases={"default": "web", "session": first, "csrf": second},
        )

        assert registry.flatten(["default"]) == (first, second)

    def test_repeated_names_are_not_cycles(self):
        """Test the same group used side by side expands twice."""
        registry = MiddlewareRegistry(groups={"web": [first]})

        assert registry.flatten(["web", "web"]) == (first, first)

    def test_direct_cycle_detected(self):
        """Test a group containing itself raises."""
        registry = MiddlewareRegistry(groups={"web": ["web"]})

        with pytest.raises(MiddlewareCycleError) as exc_info:
            registry.flatten(["web"])

        assert exc_info.value.cycle == ["web", "web"]
        assert "web -> web" in str(exc_info.value)

    def test_indirect_cycle_through_alias_detected(self):
        """Test a cycle running through an alias raises."""
        registry = MiddlewareRegistry(groups={"web": ["auth"]}, aliases={"auth": ["web"]})

        with pytest.raises(MiddlewareCycleError) as exc_info:
            registry.flatten(["web"])

        assert exc_info.value.cycle == ["web", "auth", "web"]

    def test_cycle_error_is_configuration_error(self):
        """Test cycles are reported as configuration errors."""
        assert issubclass(MiddlewareCycleError, ConfigurationError)


class TestPipelineFlatten:
    """Tests for the pipeline-level flattened stack cache."""

    def test_flatten_is_cached(self):
        """Test repeated flattening reuses the same tuple."""
        pipeline = Pipeline().pipe([first, second])

        assert pipeline.flatten() is pipeline.flatten()

    def test_pipe_invalidates_cache(self):
        """Test appending middleware refreshes the flattened stack."""
        pipeline = Pipeline().pipe(first)
        assert pipeline.flatten() == (first,)

        pipeline.pipe(second)

        assert pipeline.flatten() == (first, second)

    def test_registry_change_invalidates_cache(self):
        """Test replacing groups refreshes the flattened stack."""
        pipeline = Pipeline().pipe("web")
        assert pipeline.flatten() == ("web",)

        pipeline.set_middleware_groups({"web": [first]})

        assert pipeline.flatten() == (first,)

    def test_middleware_property_keeps_raw_stack(self):
        """Test the raw stack is kept unexpanded and in order."""
        pipeline = Pipeline().set_middleware_groups({"web": [first]}).pipe(["web", second])

        assert pipeline.middleware == ("web", second)
        assert len(pipeline) == 2
