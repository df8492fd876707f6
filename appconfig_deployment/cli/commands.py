"""
CLI Commands

Wires configuration, AWS clients and workflows together for each command.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

from ..api.appconfig_client import AppConfigClient, AppConfigDataClient
from ..api.interface import AppConfigAPI, AppConfigDataAPI
from ..api.models import ConfigurationVersion, Deployment, ResolvedResourceSet
from ..config.constants import DEFAULT_CONFIG_FILE, DEFAULT_TIMEOUT
from ..config.deployment_config import DeploymentConfig
from ..config.loader import ConfigurationLoader
from ..content.diff_engine import DiffResult
from ..content.normalizer import ContentNormalizer, format_for_path
from ..deployment import (
    ConfigurationFetcher,
    DeploymentOrchestrator,
    DeploymentStatusChecker,
    DeployResult,
    InitOptions,
    InitResult,
    ProjectInitializer,
    PullResult,
    RollbackController,
    WaitMode,
)
from ..discovery import ResourceLister, ResourceResolver, ResourcesTree
from ..ui.display import format_deployment_status
from ..ui.prompt import Prompter, TerminalPrompter
from ..ui.reporter import ConsoleReporter, ProgressReporter, SilentReporter

logger = logging.getLogger(__name__)

APIFactory = Callable[[str], AppConfigAPI]
DataAPIFactory = Callable[[str], AppConfigDataAPI]


class AppConfigDeploymentCLI:
    """Command-line interface for AppConfig deployments.

    AWS clients are built lazily, once the region is known; tests pass
    factories that return in-memory fakes.
    """

    def __init__(
        self,
        config_file: str = DEFAULT_CONFIG_FILE,
        region: Optional[str] = None,
        silent: bool = False,
        api_factory: Optional[APIFactory] = None,
        data_api_factory: Optional[DataAPIFactory] = None,
        prompter: Optional[Prompter] = None,
        reporter: Optional[ProgressReporter] = None,
        loader: Optional[ConfigurationLoader] = None,
    ):
        self.config_file = config_file
        self.region_flag = region
        self.api_factory = api_factory or (lambda r: AppConfigClient(region=r))
        self.data_api_factory = data_api_factory or (
            lambda r: AppConfigDataClient(region=r)
        )
        self.prompter = prompter or TerminalPrompter()
        if reporter is None:
            reporter = SilentReporter() if silent else ConsoleReporter()
        self.reporter = reporter
        self.loader = loader or ConfigurationLoader()
        self.normalizer = ContentNormalizer()

        self._config: Optional[DeploymentConfig] = None
        self._region: Optional[str] = None
        self._api: Optional[AppConfigAPI] = None

    @property
    def config(self) -> DeploymentConfig:
        if self._config is None:
            self._config = self.loader.load_config(self.config_file)
        return self._config

    @property
    def region(self) -> str:
        if self._region is None:
            self._region = self.loader.resolve_region(
                self.region_flag, self.config.region
            )
        return self._region

    @property
    def api(self) -> AppConfigAPI:
        if self._api is None:
            logger.debug(f"Creating AppConfig client for {self.region}")
            self._api = self.api_factory(self.region)
        return self._api

    @property
    def resolver(self) -> ResourceResolver:
        return ResourceResolver(self.api)

    def orchestrator(self) -> DeploymentOrchestrator:
        return DeploymentOrchestrator(
            self.api, normalizer=self.normalizer, reporter=self.reporter
        )

    def resolve(self, with_strategy: bool = False) -> ResolvedResourceSet:
        config = self.config
        self.reporter.progress("Resolving resources...")
        resolved = self.resolver.resolve_all(
            config.application,
            config.configuration_profile,
            config.environment,
            config.deployment_strategy if with_strategy else "",
        )
        self.reporter.success("Resources resolved")
        return resolved

    def init(self, options: InitOptions) -> InitResult:
        # init runs before a config file exists
        self._region = self.loader.resolve_region(options.region, None)
        initializer = ProjectInitializer(
            self.api,
            self.resolver,
            self.orchestrator(),
            prompter=self.prompter,
            reporter=self.reporter,
            normalizer=self.normalizer,
        )
        return initializer.run(options)

    def diff(self) -> Tuple[DiffResult, Optional[Deployment]]:
        """Diff the local data file against the deployed version."""
        resolved = self.resolve()
        orchestrator = self.orchestrator()
        local = self.loader.load_data_file(self.config.data_file)

        self.reporter.progress("Fetching deployed configuration...")
        deployed = orchestrator.fetch_deployed_version(resolved)
        if deployed is None:
            self.reporter.warning("No deployment found - comparing against empty content")

        result = orchestrator.compute_diff(
            resolved, local, format_for_path(self.config.data_file), deployed
        )
        return result, deployed.deployment if deployed else None

    def run(
        self,
        wait_mode: WaitMode = WaitMode.NONE,
        timeout: float = DEFAULT_TIMEOUT,
        force: bool = False,
    ) -> DeployResult:
        resolved = self.resolve(with_strategy=True)
        local = self.loader.load_data_file(self.config.data_file)
        return self.orchestrator().deploy(
            resolved,
            local,
            format_for_path(self.config.data_file),
            force=force,
            wait_mode=wait_mode,
            timeout=timeout,
        )

    def status(self, deployment_number: Optional[int] = None) -> str:
        resolved = self.resolve()
        checker = DeploymentStatusChecker(self.api, self.resolver, self.orchestrator())
        deployment, strategy_name = checker.get_status(resolved, deployment_number)
        return format_deployment_status(
            deployment,
            self.config.application,
            self.config.configuration_profile,
            self.config.environment,
            strategy_name,
        )

    def get(self, skip_confirmation: bool = False) -> ConfigurationVersion:
        resolved = self.resolve()
        fetcher = ConfigurationFetcher(
            self.orchestrator(),
            data_api=self.data_api_factory(self.region),
            prompter=self.prompter,
            normalizer=self.normalizer,
        )
        return fetcher.get_configuration(resolved, skip_confirmation)

    def pull(self) -> PullResult:
        resolved = self.resolve()
        fetcher = ConfigurationFetcher(self.orchestrator(), normalizer=self.normalizer)
        return fetcher.pull(resolved, Path(self.config.data_file))

    def rollback(
        self,
        skip_confirmation: bool = False,
        show_details: Optional[Callable[[Deployment], None]] = None,
    ) -> Deployment:
        resolved = self.resolve()
        controller = RollbackController(self.api, self.prompter, self.reporter)
        return controller.rollback(resolved, skip_confirmation, show_details)

    def list_resources(self) -> ResourcesTree:
        # Listing needs no config file; only a region
        self._region = self.loader.resolve_region(self.region_flag, None)
        self.reporter.progress(f"Listing AppConfig resources in {self._region}...")
        return ResourceLister(self.api, self._region).list_resources()
