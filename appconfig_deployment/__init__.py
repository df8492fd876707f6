"""
AppConfig Deployment

Declarative deployment tooling for AWS AppConfig: resolve resources by name,
diff local configuration against what is deployed, roll out new versions,
wait for them and roll them back.
"""

from .api import AppConfigAPI, AppConfigClient, AppConfigDataClient
from .config import ConfigurationLoader, DeploymentConfig
from .content import ContentNormalizer, DiffEngine
from .deployment import DeploymentOrchestrator, DeploymentWaiter, RollbackController
from .discovery import ResourceResolver
from .error_handling import DeploymentSystemError

__version__ = "0.1.0"

__all__ = [
    "AppConfigAPI",
    "AppConfigClient",
    "AppConfigDataClient",
    "ConfigurationLoader",
    "DeploymentConfig",
    "ContentNormalizer",
    "DiffEngine",
    "DeploymentOrchestrator",
    "DeploymentWaiter",
    "RollbackController",
    "ResourceResolver",
    "DeploymentSystemError",
]
