"""
Deployment Configuration Models

Defines the data structure behind the ``apcdeploy.yml`` file.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..error_handling import ConfigurationError, ErrorCodes, ErrorContext
from .constants import DEFAULT_DEPLOYMENT_STRATEGY

REQUIRED_FIELDS = ("application", "configuration_profile", "environment", "data_file")


@dataclass
class DeploymentConfig:
    """Configuration for one profile deployed to one environment."""

    application: str
    configuration_profile: str
    environment: str
    data_file: str
    deployment_strategy: str = DEFAULT_DEPLOYMENT_STRATEGY
    region: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        for field_name in REQUIRED_FIELDS:
            if not getattr(self, field_name):
                raise ConfigurationError(
                    f"{field_name} is required",
                    error_code=ErrorCodes.CONFIG_MISSING_REQUIRED_FIELD,
                    context=ErrorContext(resource_name=field_name),
                    remediation=f"Add '{field_name}' to the config file",
                )

        if not self.deployment_strategy:
            self.deployment_strategy = DEFAULT_DEPLOYMENT_STRATEGY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentConfig":
        """Create configuration from a parsed YAML mapping."""
        return cls(
            application=data.get("application") or "",
            configuration_profile=data.get("configuration_profile") or "",
            environment=data.get("environment") or "",
            data_file=data.get("data_file") or "",
            deployment_strategy=data.get("deployment_strategy")
            or DEFAULT_DEPLOYMENT_STRATEGY,
            region=data.get("region") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the mapping written to the config file."""
        result = {
            "application": self.application,
            "configuration_profile": self.configuration_profile,
            "environment": self.environment,
            "deployment_strategy": self.deployment_strategy,
            "data_file": self.data_file,
        }
        if self.region:
            result["region"] = self.region
        return result
