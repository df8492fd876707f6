"""
Configuration Loader

Loads ``apcdeploy.yml``, reads the configured data file and works out which
AWS region to talk to.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml

from ..error_handling import (
    ConfigurationError,
    ErrorCodes,
    ErrorContext,
    ErrorMessages,
    ValidationError,
)
from .constants import MAX_CONFIG_SIZE
from .deployment_config import DeploymentConfig

logger = logging.getLogger(__name__)

REGION_ENV_VARS = ("AWS_REGION", "AWS_DEFAULT_REGION")


class ConfigurationLoader:
    """Reads deployment configuration and data files from disk."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load_config(self, path: Union[str, Path]) -> DeploymentConfig:
        """Load and validate a config file.

        The returned ``data_file`` is absolute: relative paths are resolved
        against the directory holding the config file.
        """
        config_path = Path(path)
        context = ErrorContext(file_path=str(config_path), operation="load_config")

        if not config_path.is_file():
            raise ConfigurationError(
                f"config file not found: {config_path}",
                error_code=ErrorCodes.CONFIG_FILE_NOT_FOUND,
                context=context,
                remediation=ErrorMessages.get_remediation(
                    ErrorCodes.CONFIG_FILE_NOT_FOUND
                ),
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                context.line_number = mark.line + 1
            raise ConfigurationError(
                f"failed to parse config file {config_path}: {e}",
                error_code=ErrorCodes.CONFIG_INVALID_FORMAT,
                context=context,
                remediation="Fix the YAML syntax in the config file",
                cause=e,
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"config file {config_path} must contain a mapping",
                error_code=ErrorCodes.CONFIG_INVALID_FORMAT,
                context=context,
            )

        config = DeploymentConfig.from_dict(data)
        config.data_file = str(self.resolve_data_file_path(config_path, config.data_file))
        logger.debug(f"Loaded configuration from {config_path}: {config}")
        return config

    @staticmethod
    def resolve_data_file_path(config_path: Union[str, Path], data_file: str) -> Path:
        """Resolve a data file path relative to the config file's directory."""
        data_path = Path(data_file)
        if data_path.is_absolute():
            return data_path
        return Path(config_path).resolve().parent / data_path

    def load_data_file(self, path: Union[str, Path]) -> bytes:
        """Read a data file, enforcing the size limit before reading."""
        data_path = Path(path)
        context = ErrorContext(file_path=str(data_path), operation="load_data_file")

        if not data_path.is_file():
            raise ConfigurationError(
                f"data file not found: {data_path}",
                error_code=ErrorCodes.DATA_FILE_NOT_FOUND,
                context=context,
                remediation="Check data_file in the config file or run pull",
            )

        size = data_path.stat().st_size
        if size > MAX_CONFIG_SIZE:
            raise ValidationError(
                f"file size ({size} bytes) exceeds maximum allowed size "
                f"({MAX_CONFIG_SIZE} bytes)",
                error_code=ErrorCodes.CONTENT_TOO_LARGE,
                context=context,
                remediation=ErrorMessages.get_remediation(ErrorCodes.CONTENT_TOO_LARGE),
            )

        return data_path.read_bytes()

    def resolve_region(
        self, flag_region: Optional[str], config_region: Optional[str]
    ) -> str:
        """Pick the region from the flag, the config, then the environment."""
        candidates = [flag_region, config_region]
        candidates.extend(self.environ.get(name) for name in REGION_ENV_VARS)
        for region in candidates:
            if region:
                return region

        raise ConfigurationError(
            "AWS region is not configured",
            error_code=ErrorCodes.REGION_NOT_CONFIGURED,
            remediation=ErrorMessages.get_remediation(ErrorCodes.REGION_NOT_CONFIGURED),
        )
