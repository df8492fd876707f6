"""
Tests for the Deployment Orchestrator

Tests the deploy workflow end to end against the in-memory AppConfig fake.
"""

import json

import pytest

from appconfig_deployment.api.models import Deployment, DeploymentState, ProfileKind
from appconfig_deployment.content import ContentFormat
from appconfig_deployment.deployment import (
    DeploymentOrchestrator,
    DeployOutcome,
    WaitMode,
)
from appconfig_deployment.deployment.orchestrator import parse_version_number
from appconfig_deployment.discovery import ResourceResolver
from appconfig_deployment.error_handling import (
    ConfigurationError,
    ConflictError,
    DeploymentError,
    ErrorCodes,
    ParseError,
)
from appconfig_deployment.test.test_utilities import RecordingReporter, TestDataFactory

APP = TestDataFactory.APP_ID
ENV = TestDataFactory.ENV_ID
PROFILE = TestDataFactory.PROFILE_ID

MUTATIONS = ("create_hosted_configuration_version", "start_deployment")


def deploy_existing(fake_api, content, state=DeploymentState.COMPLETE, profile=PROFILE):
    version = fake_api.add_version(APP, profile, content)
    return fake_api.add_deployment(APP, ENV, profile, version, state=state)


class TestLatestDeployment:
    """Test finding the latest deployment of a profile."""

    def test_skips_other_profiles(self, fake_api, orchestrator):
        fake_api.add_profile(APP, "other", "prof-2")
        mine = deploy_existing(fake_api, b"{}")
        deploy_existing(fake_api, b"{}", profile="prof-2")

        latest = orchestrator.get_latest_deployment(APP, ENV, PROFILE)

        assert latest.number == mine
        assert latest.profile_id == PROFILE

    def test_skips_rolled_back_by_default(self, fake_api, orchestrator):
        good = deploy_existing(fake_api, b'{"v": 1}')
        rolled_back = deploy_existing(
            fake_api, b'{"v": 2}', state=DeploymentState.ROLLED_BACK
        )

        assert orchestrator.get_latest_deployment(APP, ENV, PROFILE).number == good
        assert (
            orchestrator.get_latest_deployment(
                APP, ENV, PROFILE, include_rolled_back=True
            ).number
            == rolled_back
        )

    def test_none_when_never_deployed(self, orchestrator):
        assert orchestrator.get_latest_deployment(APP, ENV, PROFILE) is None

    def test_check_ongoing_deployment(self, fake_api, orchestrator):
        assert orchestrator.check_ongoing_deployment(APP, ENV) == (False, None)

        number = deploy_existing(fake_api, b"{}", state=DeploymentState.BAKING)
        ongoing, deployment = orchestrator.check_ongoing_deployment(APP, ENV)

        assert ongoing
        assert deployment.number == number

    def test_parse_version_number(self):
        deployment = Deployment(number=1, state="COMPLETE", configuration_version="12")
        assert parse_version_number(deployment) == 12
        with pytest.raises(DeploymentError):
            parse_version_number(
                Deployment(number=1, state="COMPLETE", configuration_version="abc")
            )


class TestDeploy:
    """Test the deploy workflow."""

    def test_first_deployment(self, fake_api, orchestrator, resolved):
        result = orchestrator.deploy(resolved, b'{"key": "value"}', ContentFormat.JSON)

        assert result.outcome is DeployOutcome.STARTED
        assert result.first_deployment
        assert result.version_number == 1
        assert result.deployment_number == 1
        assert fake_api.call_names()[-2:] == list(MUTATIONS)

    def test_changed_content_is_deployed(self, fake_api, orchestrator, resolved):
        deploy_existing(fake_api, b'{"key": "value1"}')

        result = orchestrator.deploy(resolved, b'{"key": "value2"}', ContentFormat.JSON)

        assert result.outcome is DeployOutcome.STARTED
        assert result.diff.additions == 1
        assert result.diff.deletions == 1
        assert '-  "key": "value1"' in result.diff.unified_diff
        assert '+  "key": "value2"' in result.diff.unified_diff

        created = fake_api.versions[(APP, PROFILE)][result.version_number]
        assert created.content == b'{"key": "value2"}'
        assert created.content_type == "application/json"

        start = [args for name, args in fake_api.calls if name == "start_deployment"][0]
        assert start == (APP, ENV, PROFILE, "AppConfig.AllAtOnce", result.version_number)

    def test_unchanged_content_is_skipped(self, fake_api, orchestrator, resolved, reporter):
        deploy_existing(fake_api, b'{"b": 1, "a": 2}')

        result = orchestrator.deploy(
            resolved, b'{\n  "a": 2,\n  "b": 1\n}\n', ContentFormat.JSON
        )

        assert result.outcome is DeployOutcome.SKIPPED
        assert not result.diff.has_changes
        for mutation in MUTATIONS:
            assert mutation not in fake_api.call_names()
        assert "No changes detected - deployment skipped" in reporter.of_kind("success")

    def test_force_deploys_unchanged_content(self, fake_api, orchestrator, resolved):
        deploy_existing(fake_api, b'{"a": 1}')

        result = orchestrator.deploy(resolved, b'{"a": 1}', ContentFormat.JSON, force=True)

        assert result.outcome is DeployOutcome.STARTED
        assert "start_deployment" in fake_api.call_names()

    def test_ongoing_deployment_conflicts(self, fake_api, orchestrator, resolved):
        fake_api.add_profile(APP, "other", "prof-2")
        deploy_existing(fake_api, b"{}", state=DeploymentState.DEPLOYING, profile="prof-2")

        with pytest.raises(ConflictError) as exc_info:
            orchestrator.deploy(resolved, b'{"a": 1}', ContentFormat.JSON)

        assert exc_info.value.deployment_number == 1
        assert exc_info.value.state == DeploymentState.DEPLOYING
        for mutation in MUTATIONS:
            assert mutation not in fake_api.call_names()

    def test_invalid_content_is_not_uploaded(self, fake_api, orchestrator, resolved):
        with pytest.raises(ParseError):
            orchestrator.deploy(resolved, b'{"a": ', ContentFormat.JSON)

        for mutation in MUTATIONS:
            assert mutation not in fake_api.call_names()

    def test_unresolved_strategy(self, fake_api, resolver):
        resolved = resolver.resolve_all("my-app", "my-profile", "production")
        orchestrator = DeploymentOrchestrator(fake_api)

        with pytest.raises(ConfigurationError):
            orchestrator.deploy(resolved, b"{}", ContentFormat.JSON)
        assert "start_deployment" not in fake_api.call_names()

    def test_wait_for_bake(self, fake_api, orchestrator, resolved):
        # The next deployment number is 1; script it before it starts
        fake_api.script_states(
            1, [DeploymentState.DEPLOYING, DeploymentState.BAKING, DeploymentState.COMPLETE]
        )

        result = orchestrator.deploy(
            resolved, b'{"a": 1}', ContentFormat.JSON, wait_mode=WaitMode.BAKE
        )

        assert result.outcome is DeployOutcome.COMPLETED
        assert result.final_state == DeploymentState.COMPLETE

    def test_yaml_content_type(self, fake_api, orchestrator, resolved):
        result = orchestrator.deploy(resolved, b"a: 1\n", ContentFormat.YAML)

        created = fake_api.versions[(APP, PROFILE)][result.version_number]
        assert created.content_type == "application/x-yaml"

    def test_feature_flag_timestamps_are_ignored(self):
        api = TestDataFactory.create_api(kind=ProfileKind.FEATURE_FLAGS)
        resolved = ResourceResolver(api).resolve_all(
            "my-app", "my-profile", "production", "AppConfig.AllAtOnce"
        )
        remote = {
            "version": "1",
            "flags": {"beta": {"name": "beta"}},
            "values": {"beta": {"enabled": True, "_updatedAt": "2024-05-01T00:00:00Z"}},
        }
        local = {
            "version": "1",
            "flags": {"beta": {"name": "beta"}},
            "values": {"beta": {"enabled": True}},
        }
        deploy_existing(api, json.dumps(remote).encode())
        orchestrator = DeploymentOrchestrator(api, reporter=RecordingReporter())

        result = orchestrator.deploy(resolved, json.dumps(local), ContentFormat.JSON)

        assert result.outcome is DeployOutcome.SKIPPED


class TestComputeDiff:
    def test_nothing_deployed_diffs_against_empty(self, orchestrator, resolved):
        result = orchestrator.compute_diff(resolved, b'{"a": 1}', ContentFormat.JSON)

        assert result.has_changes
        assert result.deletions == 0
        assert result.additions == 3

    def test_remote_is_normalized_with_local_format(self, fake_api, orchestrator, resolved):
        deploy_existing(fake_api, b"b: 2\na: 1\n")
        deployed = orchestrator.fetch_deployed_version(resolved)

        result = orchestrator.compute_diff(resolved, b"a: 1\nb: 2\n", ContentFormat.YAML, deployed)

        assert not result.has_changes

    def test_remote_parse_failure_is_reported(self, fake_api, orchestrator, resolved):
        deploy_existing(fake_api, b"not json at all")
        deployed = orchestrator.fetch_deployed_version(resolved)

        with pytest.raises(ParseError) as exc_info:
            orchestrator.compute_diff(resolved, b"{}", ContentFormat.JSON, deployed)
        assert exc_info.value.error_code == ErrorCodes.CONTENT_PARSE_FAILED
