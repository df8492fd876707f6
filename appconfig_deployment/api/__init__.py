"""
AppConfig API

Interfaces, models and the boto3-backed client for AWS AppConfig.
"""

from .appconfig_client import AppConfigClient, AppConfigDataClient
from .interface import AppConfigAPI, AppConfigDataAPI
from .models import (
    ConfigurationVersion,
    Deployment,
    DeploymentEvent,
    DeploymentState,
    DeploymentStrategy,
    ProfileInfo,
    ProfileKind,
    Resource,
    ResolvedResourceSet,
)

__all__ = [
    "AppConfigAPI",
    "AppConfigDataAPI",
    "AppConfigClient",
    "AppConfigDataClient",
    "ConfigurationVersion",
    "Deployment",
    "DeploymentEvent",
    "DeploymentState",
    "DeploymentStrategy",
    "ProfileInfo",
    "ProfileKind",
    "Resource",
    "ResolvedResourceSet",
]
