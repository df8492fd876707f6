"""
Pytest configuration and shared fixtures for AppConfig deployment tests.

Provides common fixtures built on the in-memory fakes in test_utilities.
"""

import logging
import tempfile
from pathlib import Path

import pytest

from appconfig_deployment.content.normalizer import ContentNormalizer
from appconfig_deployment.deployment import DeploymentOrchestrator, DeploymentWaiter
from appconfig_deployment.discovery import ResourceResolver
from appconfig_deployment.test.test_utilities import (
    CannedPrompter,
    FakeAppConfigDataAPI,
    FakeClock,
    RecordingReporter,
    TestDataFactory,
)


# Test configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


def pytest_collection_modifyitems(config, items):
    """Mark workflow and CLI tests as integration tests, the rest as unit tests."""
    for item in items:
        if "test_cli" in item.nodeid or "test_end_to_end" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def temp_workspace():
    """Provide a temporary workspace directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


# Fake collaborators
@pytest.fixture
def fake_api():
    return TestDataFactory.create_api()


@pytest.fixture
def fake_data_api():
    return FakeAppConfigDataAPI()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def prompter():
    return CannedPrompter(interactive=True, answers=["yes"])


# Component fixtures
@pytest.fixture
def resolver(fake_api):
    return ResourceResolver(fake_api)


@pytest.fixture
def resolved(resolver):
    """Resources of the standard fake world, with a predefined strategy."""
    return resolver.resolve_all(
        "my-app", "my-profile", "production", "AppConfig.AllAtOnce"
    )


@pytest.fixture
def waiter(fake_api, clock, reporter):
    return DeploymentWaiter(
        fake_api, poll_interval=5, clock=clock, sleep=clock.sleep, reporter=reporter
    )


@pytest.fixture
def orchestrator(fake_api, waiter, reporter):
    return DeploymentOrchestrator(
        fake_api, normalizer=ContentNormalizer(), waiter=waiter, reporter=reporter
    )


@pytest.fixture(autouse=True)
def test_logging(caplog):
    """Capture debug logging for every test."""
    caplog.set_level(logging.DEBUG)
    yield caplog

