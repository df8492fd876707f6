"""
Deployment Workflows

Deploy, wait, roll back, inspect, fetch and scaffold AppConfig deployments.
"""

from .fetcher import ConfigurationFetcher, PullResult
from .initializer import InitOptions, InitResult, ProjectInitializer
from .orchestrator import (
    DeployedConfiguration,
    DeploymentOrchestrator,
    DeployOutcome,
    DeployResult,
)
from .rollback import RollbackController
from .status import DeploymentStatusChecker
from .waiter import DeploymentWaiter, WaitMode, WaitStatus, evaluate_state

__all__ = [
    "DeploymentOrchestrator",
    "DeployedConfiguration",
    "DeployOutcome",
    "DeployResult",
    "DeploymentWaiter",
    "WaitMode",
    "WaitStatus",
    "evaluate_state",
    "RollbackController",
    "DeploymentStatusChecker",
    "ConfigurationFetcher",
    "PullResult",
    "ProjectInitializer",
    "InitOptions",
    "InitResult",
]
