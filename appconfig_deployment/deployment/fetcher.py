"""
Configuration Fetcher

Retrieves deployed configuration for the get and pull commands.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..api.interface import AppConfigDataAPI
from ..api.models import ConfigurationVersion, ResolvedResourceSet
from ..content.normalizer import ContentFormat, ContentNormalizer, format_for_path
from ..error_handling import (
    DeploymentError,
    ErrorCodes,
    InteractiveUnavailableError,
    UserDeclinedError,
)
from ..ui.prompt import Prompter, is_affirmative
from .orchestrator import DeploymentOrchestrator

logger = logging.getLogger(__name__)

DATA_API_CONFIRMATION = (
    "This operation uses AWS AppConfig Data API (incurs charges). Proceed? (Y/Yes)"
)


@dataclass
class PullResult:
    deployment_number: int
    version_number: Optional[int]
    data_file: Path
    updated: bool


class ConfigurationFetcher:
    """Fetches what is deployed, through the data plane or the control plane."""

    def __init__(
        self,
        orchestrator: DeploymentOrchestrator,
        data_api: Optional[AppConfigDataAPI] = None,
        prompter: Optional[Prompter] = None,
        normalizer: Optional[ContentNormalizer] = None,
    ):
        self.orchestrator = orchestrator
        self.data_api = data_api
        self.prompter = prompter
        self.normalizer = normalizer or ContentNormalizer()

    def get_configuration(
        self, resolved: ResolvedResourceSet, skip_confirmation: bool = False
    ) -> ConfigurationVersion:
        """Fetch the configuration an application would receive right now.

        Data-plane calls are billed, so the user confirms first unless
        ``skip_confirmation`` is set.
        """
        if self.data_api is None:
            raise ValueError("a data-plane client is required to get configuration")

        if not skip_confirmation:
            if self.prompter is None or not self.prompter.is_interactive():
                raise InteractiveUnavailableError(
                    "interactive mode requires a TTY: use --yes to skip confirmation"
                )
            if not is_affirmative(self.prompter.input(DATA_API_CONFIRMATION)):
                raise UserDeclinedError()

        return self.data_api.get_latest_configuration(
            resolved.application_id, resolved.environment_id, resolved.profile.id
        )

    def render_for_file(
        self,
        version: ConfigurationVersion,
        resolved: ResolvedResourceSet,
        content_format: ContentFormat,
    ) -> bytes:
        """Format deployed content for writing to a local data file.

        JSON is written in canonical form; YAML and text are written as-is.
        """
        if content_format is ContentFormat.JSON:
            return self.normalizer.normalize(
                version.content, ContentFormat.JSON, resolved.profile.kind
            ).encode("utf-8")
        return version.content

    def pull(
        self, resolved: ResolvedResourceSet, data_file: Union[str, Path]
    ) -> PullResult:
        """Overwrite the local data file with the deployed version if it differs."""
        path = Path(data_file)
        deployed = self.orchestrator.fetch_deployed_version(resolved)
        if deployed is None:
            raise DeploymentError(
                "no deployment found for this configuration profile",
                error_code=ErrorCodes.NO_DEPLOYMENT,
                remediation="Run the run command to create the first deployment",
            )

        content_format = format_for_path(path)
        if path.is_file():
            diff = self.orchestrator.compute_diff(
                resolved, path.read_bytes(), content_format, deployed
            )
            if not diff.has_changes:
                logger.info(f"{path} already matches deployment #{deployed.deployment.number}")
                return PullResult(
                    deployment_number=deployed.deployment.number,
                    version_number=deployed.version.version_number,
                    data_file=path,
                    updated=False,
                )
        else:
            logger.warning(f"Local data file {path} does not exist; creating it")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.render_for_file(deployed.version, resolved, content_format))
        logger.info(f"Wrote deployment #{deployed.deployment.number} to {path}")
        return PullResult(
            deployment_number=deployed.deployment.number,
            version_number=deployed.version.version_number,
            data_file=path,
            updated=True,
        )
