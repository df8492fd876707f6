"""
Deployment Orchestrator

Drives a deployment from local content to a running (or finished) AppConfig
deployment: compare with what is deployed, refuse to overlap an in-flight
deployment, create a hosted version, start the rollout and optionally wait.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..api.interface import AppConfigAPI
from ..api.models import (
    ConfigurationVersion,
    Deployment,
    DeploymentState,
    ResolvedResourceSet,
)
from ..config.constants import DEFAULT_TIMEOUT
from ..content.diff_engine import DiffEngine, DiffResult
from ..content.normalizer import (
    ContentFormat,
    ContentNormalizer,
    content_type_for,
    validate_local_data,
)
from ..error_handling import (
    ConfigurationError,
    ConflictError,
    DeploymentError,
    ErrorCodes,
    ErrorContext,
)
from ..ui.reporter import ProgressReporter, SilentReporter
from .waiter import DeploymentWaiter, WaitMode

logger = logging.getLogger(__name__)


class DeployOutcome(Enum):
    SKIPPED = "skipped"
    STARTED = "started"
    COMPLETED = "completed"


@dataclass
class DeployedConfiguration:
    """The latest deployment of a profile and the version it deployed."""

    deployment: Deployment
    version: ConfigurationVersion


@dataclass
class DeployResult:
    outcome: DeployOutcome
    deployment_number: Optional[int] = None
    version_number: Optional[int] = None
    final_state: Optional[str] = None
    diff: Optional[DiffResult] = None
    first_deployment: bool = False


def parse_version_number(deployment: Deployment) -> int:
    """Hosted configuration versions are referenced by their number."""
    try:
        return int(deployment.configuration_version)
    except ValueError as e:
        raise DeploymentError(
            f"invalid version number {deployment.configuration_version!r} "
            f"in deployment #{deployment.number}",
            error_code=ErrorCodes.DEPLOYMENT_UNEXPECTED_STATE,
            cause=e,
        ) from e


class DeploymentOrchestrator:
    """Coordinates versions and deployments for one resolved resource set."""

    def __init__(
        self,
        api: AppConfigAPI,
        normalizer: Optional[ContentNormalizer] = None,
        diff_engine: Optional[DiffEngine] = None,
        waiter: Optional[DeploymentWaiter] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.api = api
        self.normalizer = normalizer or ContentNormalizer()
        self.diff_engine = diff_engine or DiffEngine()
        self.reporter = reporter or SilentReporter()
        self.waiter = waiter or DeploymentWaiter(api, reporter=self.reporter)

    def check_ongoing_deployment(
        self, application_id: str, environment_id: str
    ) -> Tuple[bool, Optional[Deployment]]:
        """Return whether a deployment is DEPLOYING or BAKING, and which one."""
        deployments = sorted(
            self.api.list_deployments(application_id, environment_id),
            key=lambda d: d.number,
            reverse=True,
        )
        for deployment in deployments:
            if deployment.is_ongoing:
                return True, deployment
        return False, None

    def get_latest_deployment(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
        include_rolled_back: bool = False,
    ) -> Optional[Deployment]:
        """Highest-numbered deployment of a profile in an environment.

        Listings do not say which profile a deployment belongs to, so each
        candidate is fetched, newest first, until one matches.
        """
        summaries = sorted(
            self.api.list_deployments(application_id, environment_id),
            key=lambda d: d.number,
            reverse=True,
        )
        for summary in summaries:
            if not include_rolled_back and summary.state == DeploymentState.ROLLED_BACK:
                continue
            deployment = self.api.get_deployment(
                application_id, environment_id, summary.number
            )
            if deployment.profile_id != profile_id:
                continue
            if not include_rolled_back and deployment.state == DeploymentState.ROLLED_BACK:
                continue
            return deployment
        return None

    def fetch_deployed_version(
        self, resolved: ResolvedResourceSet
    ) -> Optional[DeployedConfiguration]:
        """Latest non-rolled-back deployment of the profile and its version."""
        deployment = self.get_latest_deployment(
            resolved.application_id, resolved.environment_id, resolved.profile.id
        )
        if deployment is None:
            return None

        version = self.api.get_hosted_configuration_version(
            resolved.application_id,
            resolved.profile.id,
            parse_version_number(deployment),
        )
        return DeployedConfiguration(deployment=deployment, version=version)

    def compute_diff(
        self,
        resolved: ResolvedResourceSet,
        local_content: Union[str, bytes],
        content_format: ContentFormat,
        deployed: Optional[DeployedConfiguration] = None,
    ) -> DiffResult:
        """Compare local content with deployed content in canonical form.

        With nothing deployed, the remote side is empty.
        """
        kind = resolved.profile.kind
        local = self.normalizer.normalize(local_content, content_format, kind)
        remote = ""
        if deployed is not None:
            remote = self.normalizer.normalize(
                deployed.version.content, content_format, kind
            )
        return self.diff_engine.compare(local, remote)

    def deploy(
        self,
        resolved: ResolvedResourceSet,
        local_content: Union[str, bytes],
        content_format: ContentFormat,
        force: bool = False,
        wait_mode: WaitMode = WaitMode.NONE,
        timeout: float = DEFAULT_TIMEOUT,
        description: Optional[str] = None,
    ) -> DeployResult:
        """Deploy local content unless it matches what is already deployed."""
        if isinstance(local_content, str):
            local_content = local_content.encode("utf-8")

        self.reporter.progress("Fetching deployed configuration...")
        deployed = self.fetch_deployed_version(resolved)

        diff = None
        if deployed is None:
            logger.info("No previous deployment found; this is the first deployment")
        else:
            diff = self.compute_diff(resolved, local_content, content_format, deployed)
            if not diff.has_changes and not force:
                logger.info(
                    f"Local content matches deployment #{deployed.deployment.number}; "
                    "skipping"
                )
                self.reporter.success("No changes detected - deployment skipped")
                return DeployResult(
                    outcome=DeployOutcome.SKIPPED,
                    deployment_number=deployed.deployment.number,
                    diff=diff,
                )

        ongoing, current = self.check_ongoing_deployment(
            resolved.application_id, resolved.environment_id
        )
        if ongoing:
            raise ConflictError(
                current.number,
                current.state,
                current.started_at,
                context=ErrorContext(operation="deploy"),
            )

        if not resolved.strategy_id:
            raise ConfigurationError(
                "deployment strategy is not resolved",
                error_code=ErrorCodes.CONFIG_MISSING_REQUIRED_FIELD,
            )

        validate_local_data(local_content, content_format)
        content_type = content_type_for(content_format, resolved.profile.kind)

        self.reporter.progress("Creating configuration version...")
        version_number = self.api.create_hosted_configuration_version(
            resolved.application_id,
            resolved.profile.id,
            local_content,
            content_type,
            description,
        )
        self.reporter.success(f"Created configuration version {version_number}")

        self.reporter.progress("Starting deployment...")
        deployment_number = self.api.start_deployment(
            resolved.application_id,
            resolved.environment_id,
            resolved.profile.id,
            resolved.strategy_id,
            version_number,
            description,
        )
        self.reporter.success(f"Started deployment #{deployment_number}")

        result = DeployResult(
            outcome=DeployOutcome.STARTED,
            deployment_number=deployment_number,
            version_number=version_number,
            diff=diff,
            first_deployment=deployed is None,
        )

        if wait_mode is not WaitMode.NONE:
            final = self.waiter.wait(
                resolved.application_id,
                resolved.environment_id,
                deployment_number,
                wait_mode,
                timeout,
            )
            result.outcome = DeployOutcome.COMPLETED
            result.final_state = final.state

        return result
