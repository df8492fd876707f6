"""
Configuration Management

Loading, validation and generation of ``apcdeploy.yml``.
"""

from .deployment_config import DeploymentConfig
from .generator import ConfigGenerator, base_content_type, data_file_name_for
from .loader import ConfigurationLoader

__all__ = [
    "DeploymentConfig",
    "ConfigurationLoader",
    "ConfigGenerator",
    "base_content_type",
    "data_file_name_for",
]
