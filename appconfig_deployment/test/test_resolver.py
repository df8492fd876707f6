"""
Tests for Resource Discovery

Tests name resolution and resource listing against the in-memory AppConfig
fake.
"""

import json

import pytest

from appconfig_deployment.api.models import ProfileKind
from appconfig_deployment.discovery import (
    ResourceLister,
    ResourceResolver,
    find_unique_id,
    format_human_readable,
    format_json,
)
from appconfig_deployment.error_handling import (
    AmbiguousResourceError,
    ErrorCodes,
    ResourceNotFoundError,
)
from appconfig_deployment.test.test_utilities import FakeAppConfigAPI, TestDataFactory


class TestFindUniqueId:
    """Test exact, case-sensitive name matching."""

    def test_single_match(self, fake_api):
        assert find_unique_id("application", "my-app", fake_api.applications) == "app-1"

    def test_no_match(self, fake_api):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            find_unique_id("application", "other", fake_api.applications)
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_NOT_FOUND

    def test_match_is_case_sensitive(self, fake_api):
        with pytest.raises(ResourceNotFoundError):
            find_unique_id("application", "My-App", fake_api.applications)

    def test_duplicate_names_are_ambiguous(self, fake_api):
        fake_api.add_application("my-app", "app-2")

        with pytest.raises(AmbiguousResourceError) as exc_info:
            find_unique_id("application", "my-app", fake_api.applications)

        assert exc_info.value.candidate_ids == ["app-1", "app-2"]
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_AMBIGUOUS


class TestResourceResolver:
    """Test resolving the full resource set."""

    def test_resolve_all(self, resolver):
        resolved = resolver.resolve_all("my-app", "my-profile", "production", "Canary10")

        assert resolved.application_id == "app-1"
        assert resolved.profile.id == "prof-1"
        assert resolved.profile.kind is ProfileKind.FREEFORM
        assert resolved.environment_id == "env-1"
        assert resolved.strategy_id == "strat-canary"

    def test_feature_flags_kind(self):
        api = TestDataFactory.create_api(kind=ProfileKind.FEATURE_FLAGS)
        profile = ResourceResolver(api).resolve_configuration_profile("app-1", "my-profile")

        assert profile.is_feature_flags
        assert profile.name == "my-profile"

    def test_predefined_strategy_needs_no_listing(self, fake_api, resolver):
        strategy_id = resolver.resolve_deployment_strategy("AppConfig.Linear50PercentEvery30Seconds")

        assert strategy_id == "AppConfig.Linear50PercentEvery30Seconds"
        assert "list_deployment_strategies" not in fake_api.call_names()

    def test_empty_strategy_skips_resolution(self, fake_api, resolver):
        resolved = resolver.resolve_all("my-app", "my-profile", "production")

        assert resolved.strategy_id == ""
        assert "list_deployment_strategies" not in fake_api.call_names()

    def test_unknown_environment(self, resolver):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            resolver.resolve_all("my-app", "my-profile", "staging")
        assert exc_info.value.resource_type == "environment"

    def test_ambiguous_profile(self, fake_api, resolver):
        fake_api.add_profile("app-1", "my-profile", "prof-2")

        with pytest.raises(AmbiguousResourceError):
            resolver.resolve_configuration_profile("app-1", "my-profile")

    def test_unknown_strategy(self, resolver):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            resolver.resolve_deployment_strategy("Nope")
        assert exc_info.value.resource_type == "deployment strategy"

    def test_resolve_strategy_name(self, fake_api, resolver):
        assert resolver.resolve_strategy_name("strat-canary") == "Canary10"
        assert resolver.resolve_strategy_name("AppConfig.AllAtOnce") == "AppConfig.AllAtOnce"
        assert resolver.resolve_strategy_name("strat-unknown") == "strat-unknown"
        assert resolver.resolve_strategy_name("") == ""


class TestResourceLister:
    """Test the ls-resources tree and its renderings."""

    @pytest.fixture
    def lister_api(self):
        api = FakeAppConfigAPI()
        api.add_application("zeta", "app-z")
        api.add_application("alpha", "app-a")
        api.add_profile("app-a", "settings", "prof-s")
        api.add_profile("app-a", "flags", "prof-f", ProfileKind.FEATURE_FLAGS)
        api.add_environment("app-a", "prod", "env-p")
        api.add_strategy("Slow", "strat-slow", growth_factor=20.0, growth_type="LINEAR")
        return api

    def test_tree_is_sorted_by_name(self, lister_api):
        tree = ResourceLister(lister_api, "us-east-1").list_resources()

        assert [app.name for app in tree.applications] == ["alpha", "zeta"]
        assert [p.name for p in tree.applications[0].configuration_profiles] == [
            "flags",
            "settings",
        ]
        assert tree.applications[1].environments == []

    def test_json_output(self, lister_api):
        tree = ResourceLister(lister_api, "us-east-1").list_resources()

        data = json.loads(format_json(tree))
        assert data["region"] == "us-east-1"
        assert "deployment_strategies" not in data
        assert data["applications"][0]["name"] == "alpha"

        with_strategies = json.loads(format_json(tree, show_strategies=True))
        assert with_strategies["deployment_strategies"][0]["name"] == "Slow"

    def test_human_readable_output(self, lister_api):
        tree = ResourceLister(lister_api, "us-east-1").list_resources()

        text = format_human_readable(tree, show_strategies=True)

        assert text.startswith("Region: us-east-1\n")
        assert "Deployment Strategies:" in text
        assert "  - Slow (ID: strat-slow)" in text
        assert "  [1] alpha (ID: app-a)" in text
        assert "  [2] zeta (ID: app-z)" in text
        assert "        - No environments" in text

    def test_empty_region(self):
        tree = ResourceLister(FakeAppConfigAPI(), "eu-west-1").list_resources()
        assert "No applications found." in format_human_readable(tree)
