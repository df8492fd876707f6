"""
Configuration Generator

Writes ``apcdeploy.yml`` and the initial data file for the init command.
"""

import logging
from pathlib import Path
from typing import Union

import yaml

from ..error_handling import ConfigurationError, ErrorCodes, ErrorContext
from .constants import CONTENT_TYPE_JSON, DATA_FILE_NAMES
from .deployment_config import DeploymentConfig

logger = logging.getLogger(__name__)


def base_content_type(content_type: str) -> str:
    """Lower-case a content type and drop parameters such as charset."""
    return content_type.split(";", 1)[0].strip().lower()


def data_file_name_for(content_type: str) -> str:
    """Pick the data file name for a content type; unknown types get JSON."""
    return DATA_FILE_NAMES.get(
        base_content_type(content_type), DATA_FILE_NAMES[CONTENT_TYPE_JSON]
    )


class ConfigGenerator:
    """Writes configuration scaffolding to disk."""

    def _check_writable(self, path: Path, what: str, force: bool) -> None:
        if path.exists() and not force:
            raise ConfigurationError(
                f"{what} already exists at {path} (use --force to overwrite)",
                error_code=ErrorCodes.CONFIG_FILE_EXISTS,
                context=ErrorContext(file_path=str(path), operation="init"),
                remediation="Pass --force to overwrite the existing file",
            )

    def write_config(
        self,
        config: DeploymentConfig,
        output_path: Union[str, Path],
        force: bool = False,
    ) -> Path:
        """Write the config file, refusing to overwrite unless forced."""
        path = Path(output_path)
        self._check_writable(path, "config file", force)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                config.to_dict(), f, sort_keys=False, default_flow_style=False
            )

        logger.info(f"Wrote config file {path}")
        return path

    def write_data_file(
        self,
        content: Union[str, bytes],
        output_path: Union[str, Path],
        force: bool = False,
    ) -> Path:
        """Write configuration data, refusing to overwrite unless forced."""
        path = Path(output_path)
        self._check_writable(path, "data file", force)

        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)

        logger.info(f"Wrote data file {path}")
        return path
