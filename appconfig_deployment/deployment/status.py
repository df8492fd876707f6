"""
Deployment Status

Looks up a deployment for the status command.
"""

import logging
from typing import Optional, Tuple

from ..api.interface import AppConfigAPI
from ..api.models import Deployment, ResolvedResourceSet
from ..discovery.resolver import ResourceResolver
from ..error_handling import DeploymentError, ErrorCodes, ErrorContext
from .orchestrator import DeploymentOrchestrator

logger = logging.getLogger(__name__)


class DeploymentStatusChecker:
    def __init__(
        self,
        api: AppConfigAPI,
        resolver: ResourceResolver,
        orchestrator: DeploymentOrchestrator,
    ):
        self.api = api
        self.resolver = resolver
        self.orchestrator = orchestrator

    def get_status(
        self,
        resolved: ResolvedResourceSet,
        deployment_number: Optional[int] = None,
    ) -> Tuple[Deployment, str]:
        """Return a deployment and the name of its strategy.

        Without a number, the latest deployment of the profile is used,
        including rolled-back ones.
        """
        if deployment_number is not None:
            deployment = self.api.get_deployment(
                resolved.application_id, resolved.environment_id, deployment_number
            )
        else:
            deployment = self.orchestrator.get_latest_deployment(
                resolved.application_id,
                resolved.environment_id,
                resolved.profile.id,
                include_rolled_back=True,
            )
            if deployment is None:
                raise DeploymentError(
                    "no deployments found",
                    error_code=ErrorCodes.NO_DEPLOYMENT,
                    context=ErrorContext(
                        configuration_profile=resolved.profile.name,
                        operation="status",
                    ),
                    remediation="Run the run command to create the first deployment",
                )

        strategy_name = self.resolver.resolve_strategy_name(
            deployment.strategy_id or ""
        )
        logger.debug(f"Deployment #{deployment.number} is {deployment.state}")
        return deployment, strategy_name
