"""
AppConfig Client

boto3-backed implementations of the AppConfig control-plane and data-plane
interfaces. Every botocore failure is translated into the tool's error
taxonomy before it leaves this module.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config.constants import CONTENT_TYPE_JSON
from ..error_handling import classify_aws_error
from .interface import AppConfigAPI, AppConfigDataAPI
from .models import (
    ConfigurationVersion,
    Deployment,
    DeploymentStrategy,
    ProfileInfo,
    ProfileKind,
    Resource,
)

logger = logging.getLogger(__name__)


def _read_body(body: Any) -> bytes:
    """Return the bytes of a boto3 streaming body or a plain bytes value."""
    if body is None:
        return b""
    if hasattr(body, "read"):
        return body.read()
    return bytes(body)


def _call(operation: str, func: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
    try:
        return func(**kwargs)
    except (ClientError, BotoCoreError, ConnectionError) as e:
        raise classify_aws_error(e, operation) from e


class AppConfigClient(AppConfigAPI):
    """Wrapper around the boto3 ``appconfig`` client."""

    def __init__(self, region: Optional[str] = None, client: Any = None):
        self.region = region
        if client is not None:
            self._client = client
        elif region:
            self._client = boto3.client("appconfig", region_name=region)
        else:
            self._client = boto3.client("appconfig")

    def _paginate(self, operation: str, **kwargs) -> List[Dict[str, Any]]:
        """Collect ``Items`` from every page of a list operation."""
        items: List[Dict[str, Any]] = []
        try:
            paginator = self._client.get_paginator(operation)
            for page in paginator.paginate(**kwargs):
                items.extend(page.get("Items", []))
        except (ClientError, BotoCoreError, ConnectionError) as e:
            action = "".join(part.title() for part in operation.split("_"))
            raise classify_aws_error(e, action) from e
        logger.debug(f"{operation} returned {len(items)} items")
        return items

    def list_applications(self) -> List[Resource]:
        return [Resource.from_api(item) for item in self._paginate("list_applications")]

    def list_configuration_profiles(self, application_id: str) -> List[Resource]:
        items = self._paginate(
            "list_configuration_profiles", ApplicationId=application_id
        )
        return [Resource.from_api(item) for item in items]

    def get_configuration_profile(
        self, application_id: str, profile_id: str
    ) -> ProfileInfo:
        response = _call(
            "GetConfigurationProfile",
            self._client.get_configuration_profile,
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
        )
        return ProfileInfo(
            id=response.get("Id", profile_id),
            name=response.get("Name", ""),
            kind=ProfileKind.from_type(response.get("Type")),
        )

    def list_environments(self, application_id: str) -> List[Resource]:
        items = self._paginate("list_environments", ApplicationId=application_id)
        return [Resource.from_api(item) for item in items]

    def list_deployment_strategies(self) -> List[DeploymentStrategy]:
        items = self._paginate("list_deployment_strategies")
        return [DeploymentStrategy.from_api(item) for item in items]

    def list_deployments(
        self, application_id: str, environment_id: str
    ) -> List[Deployment]:
        items = self._paginate(
            "list_deployments",
            ApplicationId=application_id,
            EnvironmentId=environment_id,
        )
        return [Deployment.from_api(item) for item in items]

    def get_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> Deployment:
        response = _call(
            "GetDeployment",
            self._client.get_deployment,
            ApplicationId=application_id,
            EnvironmentId=environment_id,
            DeploymentNumber=deployment_number,
        )
        return Deployment.from_api(response)

    def list_hosted_configuration_versions(
        self, application_id: str, profile_id: str
    ) -> List[int]:
        items = self._paginate(
            "list_hosted_configuration_versions",
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
        )
        return [item["VersionNumber"] for item in items]

    def get_hosted_configuration_version(
        self, application_id: str, profile_id: str, version_number: int
    ) -> ConfigurationVersion:
        response = _call(
            "GetHostedConfigurationVersion",
            self._client.get_hosted_configuration_version,
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
            VersionNumber=version_number,
        )
        return ConfigurationVersion(
            version_number=response.get("VersionNumber", version_number),
            content_type=response.get("ContentType") or CONTENT_TYPE_JSON,
            content=_read_body(response.get("Content")),
            description=response.get("Description", "") or "",
        )

    def create_hosted_configuration_version(
        self,
        application_id: str,
        profile_id: str,
        content: bytes,
        content_type: str,
        description: Optional[str] = None,
    ) -> int:
        params: Dict[str, Any] = {
            "ApplicationId": application_id,
            "ConfigurationProfileId": profile_id,
            "Content": content,
            "ContentType": content_type,
        }
        if description:
            params["Description"] = description

        response = _call(
            "CreateHostedConfigurationVersion",
            self._client.create_hosted_configuration_version,
            **params,
        )
        version_number = response["VersionNumber"]
        logger.info(f"Created hosted configuration version {version_number}")
        return version_number

    def start_deployment(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
        strategy_id: str,
        version_number: int,
        description: Optional[str] = None,
    ) -> int:
        params: Dict[str, Any] = {
            "ApplicationId": application_id,
            "EnvironmentId": environment_id,
            "ConfigurationProfileId": profile_id,
            "DeploymentStrategyId": strategy_id,
            "ConfigurationVersion": str(version_number),
        }
        if description:
            params["Description"] = description

        response = _call("StartDeployment", self._client.start_deployment, **params)
        deployment_number = response["DeploymentNumber"]
        logger.info(f"Started deployment #{deployment_number}")
        return deployment_number

    def stop_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> None:
        _call(
            "StopDeployment",
            self._client.stop_deployment,
            ApplicationId=application_id,
            EnvironmentId=environment_id,
            DeploymentNumber=deployment_number,
        )
        logger.info(f"Stopped deployment #{deployment_number}")


class AppConfigDataClient(AppConfigDataAPI):
    """Wrapper around the boto3 ``appconfigdata`` client."""

    def __init__(self, region: Optional[str] = None, client: Any = None):
        self.region = region
        if client is not None:
            self._client = client
        elif region:
            self._client = boto3.client("appconfigdata", region_name=region)
        else:
            self._client = boto3.client("appconfigdata")

    def get_latest_configuration(
        self, application_id: str, environment_id: str, profile_id: str
    ) -> ConfigurationVersion:
        session = _call(
            "StartConfigurationSession",
            self._client.start_configuration_session,
            ApplicationIdentifier=application_id,
            EnvironmentIdentifier=environment_id,
            ConfigurationProfileIdentifier=profile_id,
        )
        response = _call(
            "GetLatestConfiguration",
            self._client.get_latest_configuration,
            ConfigurationToken=session["InitialConfigurationToken"],
        )
        version_label = response.get("VersionLabel")
        return ConfigurationVersion(
            version_number=int(version_label)
            if version_label and str(version_label).isdigit()
            else None,
            content_type=response.get("ContentType") or CONTENT_TYPE_JSON,
            content=_read_body(response.get("Configuration")),
        )
