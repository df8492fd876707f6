"""
Rollback Controller

Stops the in-flight deployment of an application environment, which makes
AppConfig roll it back. The stop call is only made after the user agrees,
unless confirmation is explicitly skipped.
"""

import logging
from typing import Callable, Optional

from ..api.interface import AppConfigAPI
from ..api.models import Deployment, ResolvedResourceSet
from ..error_handling import (
    InteractiveUnavailableError,
    NoOngoingDeploymentError,
    UserDeclinedError,
)
from ..ui.prompt import Prompter, is_affirmative
from ..ui.reporter import ProgressReporter, SilentReporter

logger = logging.getLogger(__name__)


class RollbackController:
    """Finds, confirms and stops an ongoing deployment."""

    def __init__(
        self,
        api: AppConfigAPI,
        prompter: Prompter,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.api = api
        self.prompter = prompter
        self.reporter = reporter or SilentReporter()

    def find_ongoing_deployment(
        self, application_id: str, environment_id: str
    ) -> Deployment:
        ongoing = [
            d
            for d in self.api.list_deployments(application_id, environment_id)
            if d.is_ongoing
        ]
        if not ongoing:
            raise NoOngoingDeploymentError()
        return max(ongoing, key=lambda d: d.number)

    def confirm(self, deployment_number: int) -> None:
        """Ask the user to confirm; raise unless they answer yes."""
        if not self.prompter.is_interactive():
            raise InteractiveUnavailableError(
                "use --yes to skip confirmation: interactive mode requires a TTY"
            )

        response = self.prompter.input(
            f"Stop deployment #{deployment_number}? "
            "This will rollback the deployment. (Y/Yes)"
        )
        if not is_affirmative(response):
            raise UserDeclinedError()

    def stop_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> None:
        logger.info(f"Stopping deployment #{deployment_number}")
        self.api.stop_deployment(application_id, environment_id, deployment_number)

    def rollback(
        self,
        resolved: ResolvedResourceSet,
        skip_confirmation: bool = False,
        show_details: Optional[Callable[[Deployment], None]] = None,
    ) -> Deployment:
        """Stop the ongoing deployment and return it.

        ``show_details`` is called with the full deployment before the
        confirmation prompt.
        """
        self.reporter.progress("Checking for ongoing deployment...")
        summary = self.find_ongoing_deployment(
            resolved.application_id, resolved.environment_id
        )
        self.reporter.success(f"Found ongoing deployment #{summary.number}")

        if not skip_confirmation:
            if show_details is not None and self.prompter.is_interactive():
                show_details(
                    self.api.get_deployment(
                        resolved.application_id, resolved.environment_id, summary.number
                    )
                )
            self.confirm(summary.number)

        self.reporter.progress(f"Stopping deployment #{summary.number}...")
        self.stop_deployment(
            resolved.application_id, resolved.environment_id, summary.number
        )
        self.reporter.success(f"Deployment #{summary.number} stopped")
        return summary
