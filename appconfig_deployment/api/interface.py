"""
AppConfig API Interfaces

Narrow interfaces over the AppConfig control plane and data plane. The
boto3-backed client implements them for production; tests provide in-memory
implementations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import (
    ConfigurationVersion,
    Deployment,
    DeploymentStrategy,
    ProfileInfo,
    Resource,
)


class AppConfigAPI(ABC):
    """Control-plane operations used by the tool.

    List methods return every item across all result pages.
    """

    @abstractmethod
    def list_applications(self) -> List[Resource]:
        pass

    @abstractmethod
    def list_configuration_profiles(self, application_id: str) -> List[Resource]:
        pass

    @abstractmethod
    def get_configuration_profile(
        self, application_id: str, profile_id: str
    ) -> ProfileInfo:
        pass

    @abstractmethod
    def list_environments(self, application_id: str) -> List[Resource]:
        pass

    @abstractmethod
    def list_deployment_strategies(self) -> List[DeploymentStrategy]:
        pass

    @abstractmethod
    def list_deployments(
        self, application_id: str, environment_id: str
    ) -> List[Deployment]:
        """Return deployment summaries for an application environment."""
        pass

    @abstractmethod
    def get_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> Deployment:
        pass

    @abstractmethod
    def list_hosted_configuration_versions(
        self, application_id: str, profile_id: str
    ) -> List[int]:
        """Return the version numbers of all hosted versions of a profile."""
        pass

    @abstractmethod
    def get_hosted_configuration_version(
        self, application_id: str, profile_id: str, version_number: int
    ) -> ConfigurationVersion:
        pass

    @abstractmethod
    def create_hosted_configuration_version(
        self,
        application_id: str,
        profile_id: str,
        content: bytes,
        content_type: str,
        description: Optional[str] = None,
    ) -> int:
        """Create a hosted version and return its version number."""
        pass

    @abstractmethod
    def start_deployment(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
        strategy_id: str,
        version_number: int,
        description: Optional[str] = None,
    ) -> int:
        """Start a deployment and return its deployment number."""
        pass

    @abstractmethod
    def stop_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> None:
        pass


class AppConfigDataAPI(ABC):
    """Data-plane access: configuration as an application sees it."""

    @abstractmethod
    def get_latest_configuration(
        self, application_id: str, environment_id: str, profile_id: str
    ) -> ConfigurationVersion:
        """Start a configuration session and fetch the latest configuration."""
        pass
