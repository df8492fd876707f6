"""
Deployment Waiter

Polls a deployment until it reaches the state the caller is waiting for.
The waiter is a small state machine driven by the deployment states the
service reports; time is read from an injectable clock and slept through an
injectable sleep function.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..api.interface import AppConfigAPI
from ..api.models import Deployment, DeploymentState
from ..config.constants import DEFAULT_POLL_INTERVAL
from ..error_handling import (
    DeploymentError,
    DeploymentTimeoutError,
    ErrorCodes,
    RetryHandler,
    RetryPolicies,
    RetryPolicy,
    TransientAPIError,
)
from ..ui.reporter import ProgressReporter, SilentReporter

logger = logging.getLogger(__name__)


class WaitMode(Enum):
    """What a caller waits for after starting a deployment."""

    NONE = "none"
    # Rollout finished: BAKING or COMPLETE
    DEPLOY = "deploy"
    # Bake finished: COMPLETE
    BAKE = "bake"


class WaitStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"


def evaluate_state(deployment: Deployment, mode: WaitMode) -> WaitStatus:
    """Transition function of the waiter.

    Raises ``DeploymentError`` for a rolled-back deployment or a state the
    waiter does not know.
    """
    state = deployment.state

    if state == DeploymentState.COMPLETE:
        return WaitStatus.SUCCEEDED
    if state == DeploymentState.BAKING:
        if mode is WaitMode.DEPLOY:
            return WaitStatus.SUCCEEDED
        return WaitStatus.PENDING
    if state == DeploymentState.DEPLOYING:
        return WaitStatus.PENDING

    if state == DeploymentState.ROLLED_BACK:
        reason = deployment.rollback_reason()
        message = "deployment was rolled back"
        if reason:
            message += f": {reason}"
        raise DeploymentError(
            message,
            error_code=ErrorCodes.DEPLOYMENT_ROLLED_BACK,
            remediation="Check the deployment's alarms and event log, then fix and redeploy",
        )

    raise DeploymentError(
        f"unexpected deployment state: {state}",
        error_code=ErrorCodes.DEPLOYMENT_UNEXPECTED_STATE,
    )


class DeploymentWaiter:
    """Waits for a deployment with a fixed time budget."""

    def __init__(
        self,
        api: AppConfigAPI,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        retry_policy: Optional[RetryPolicy] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.api = api
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep
        self.retry_policy = retry_policy or RetryPolicies.POLLING_RETRY
        self.reporter = reporter or SilentReporter()

    def wait(
        self,
        application_id: str,
        environment_id: str,
        deployment_number: int,
        mode: WaitMode,
        timeout: float,
    ) -> Deployment:
        """Poll until ``mode`` is satisfied and return the last observation.

        The state is checked once immediately and then every poll interval.
        Transient API errors are retried while time remains; the deployment
        itself keeps running remotely when the wait times out.
        """
        if mode is WaitMode.NONE:
            raise ValueError("wait mode must be DEPLOY or BAKE")

        deadline = self.clock() + timeout
        retry = RetryHandler(self.retry_policy, sleep=self.sleep, clock=self.clock)
        last_state: Optional[str] = None

        while True:
            try:
                deployment = retry.retry(
                    self.api.get_deployment,
                    application_id,
                    environment_id,
                    deployment_number,
                    deadline=deadline,
                )
            except (TransientAPIError, ConnectionError) as e:
                logger.error(
                    f"Giving up on deployment #{deployment_number} after repeated "
                    f"transient errors: {e}"
                )
                raise DeploymentTimeoutError(
                    timeout, last_state, deployment_number
                ) from e

            if deployment.state != last_state:
                logger.info(
                    f"Deployment #{deployment_number} is {deployment.state} "
                    f"({deployment.percentage_complete:.1f}%)"
                )
                self.reporter.progress(
                    f"Deployment #{deployment_number}: {deployment.state}"
                )
            else:
                logger.debug(
                    f"Deployment #{deployment_number} still {deployment.state} "
                    f"({deployment.percentage_complete:.1f}%)"
                )
            last_state = deployment.state

            if evaluate_state(deployment, mode) is WaitStatus.SUCCEEDED:
                return deployment

            now = self.clock()
            if now >= deadline:
                raise DeploymentTimeoutError(timeout, last_state, deployment_number)
            self.sleep(min(self.poll_interval, deadline - now))
