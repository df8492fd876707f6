"""
Project Initializer

Scaffolds ``apcdeploy.yml`` and a data file from resources that already
exist in AppConfig. Missing resource names are chosen interactively when a
terminal is attached.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..api.interface import AppConfigAPI
from ..api.models import ConfigurationVersion, ProfileKind
from ..config.constants import CONTENT_TYPE_JSON, DEFAULT_DEPLOYMENT_STRATEGY
from ..config.deployment_config import DeploymentConfig
from ..config.generator import ConfigGenerator, data_file_name_for
from ..content.normalizer import (
    ContentFormat,
    ContentNormalizer,
    format_for_content_type,
)
from ..discovery.resolver import ResourceResolver
from ..error_handling import (
    ConfigurationError,
    ErrorCodes,
    InteractiveUnavailableError,
)
from ..ui.prompt import Prompter
from ..ui.reporter import ProgressReporter, SilentReporter
from .orchestrator import DeploymentOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class InitOptions:
    application: Optional[str] = None
    configuration_profile: Optional[str] = None
    environment: Optional[str] = None
    region: Optional[str] = None
    config_file: str = "apcdeploy.yml"
    output_data: Optional[str] = None
    force: bool = False


@dataclass
class InitResult:
    config_file: Path
    data_file: str
    deployment_strategy: str
    profile_kind: ProfileKind
    data_path: Optional[Path] = None
    version_number: Optional[int] = None


class ProjectInitializer:
    def __init__(
        self,
        api: AppConfigAPI,
        resolver: ResourceResolver,
        orchestrator: DeploymentOrchestrator,
        prompter: Optional[Prompter] = None,
        reporter: Optional[ProgressReporter] = None,
        generator: Optional[ConfigGenerator] = None,
        normalizer: Optional[ContentNormalizer] = None,
    ):
        self.api = api
        self.resolver = resolver
        self.orchestrator = orchestrator
        self.prompter = prompter
        self.reporter = reporter or SilentReporter()
        self.generator = generator or ConfigGenerator()
        self.normalizer = normalizer or ContentNormalizer()

    def _choose(self, what: str, flag: str, list_names: Callable[[], List[str]]) -> str:
        if self.prompter is None or not self.prompter.is_interactive():
            raise InteractiveUnavailableError(
                f"{what} is required: pass {flag} or run in a terminal"
            )
        names = sorted(list_names())
        if not names:
            raise ConfigurationError(
                f"no {what}s found",
                error_code=ErrorCodes.RESOURCE_NOT_FOUND,
                remediation=f"Create the {what} in AWS AppConfig first",
            )
        return self.prompter.select(f"Select {what}:", names)

    def complete_options(self, options: InitOptions) -> InitOptions:
        """Fill in missing resource names by asking the user."""
        if not options.application:
            options.application = self._choose(
                "application",
                "--app",
                lambda: [a.name for a in self.api.list_applications()],
            )

        if not options.configuration_profile or not options.environment:
            app_id = self.resolver.resolve_application(options.application)
            if not options.configuration_profile:
                options.configuration_profile = self._choose(
                    "configuration profile",
                    "--profile",
                    lambda: [
                        p.name for p in self.api.list_configuration_profiles(app_id)
                    ],
                )
            if not options.environment:
                options.environment = self._choose(
                    "environment",
                    "--env",
                    lambda: [e.name for e in self.api.list_environments(app_id)],
                )
        return options

    def _latest_version(
        self, application_id: str, profile_id: str
    ) -> Optional[ConfigurationVersion]:
        numbers = self.api.list_hosted_configuration_versions(application_id, profile_id)
        if not numbers:
            return None
        return self.api.get_hosted_configuration_version(
            application_id, profile_id, max(numbers)
        )

    def _strategy_from_latest_deployment(self, resolved) -> str:
        deployment = self.orchestrator.get_latest_deployment(
            resolved.application_id, resolved.environment_id, resolved.profile.id
        )
        if deployment is None or not deployment.strategy_id:
            self.reporter.warning(
                "No previous deployments found - using default deployment strategy"
            )
            return DEFAULT_DEPLOYMENT_STRATEGY
        return self.resolver.resolve_strategy_name(deployment.strategy_id)

    def run(self, options: InitOptions) -> InitResult:
        self.reporter.progress("Initializing apcdeploy configuration...")
        options = self.complete_options(options)

        config_path = Path(options.config_file)
        self.reporter.progress("Resolving AWS resources...")
        resolved = self.resolver.resolve_all(
            options.application, options.configuration_profile, options.environment
        )
        self.reporter.success(f"Application: {options.application} (ID: {resolved.application_id})")
        self.reporter.success(
            f"Configuration Profile: {options.configuration_profile} "
            f"(ID: {resolved.profile.id})"
        )
        self.reporter.success(f"Environment: {options.environment} (ID: {resolved.environment_id})")

        self.reporter.progress("Fetching latest configuration version...")
        version = self._latest_version(resolved.application_id, resolved.profile.id)
        if version is None:
            self.reporter.warning(
                "No configuration versions found - config file will be created without data"
            )
        else:
            self.reporter.success(
                f"Found version: {version.version_number} "
                f"(ContentType: {version.content_type})"
            )

        strategy = self._strategy_from_latest_deployment(resolved)

        if options.output_data:
            data_file = options.output_data
        elif version is not None:
            data_file = data_file_name_for(version.content_type)
        else:
            data_file = data_file_name_for(CONTENT_TYPE_JSON)

        config = DeploymentConfig(
            application=options.application,
            configuration_profile=options.configuration_profile,
            environment=options.environment,
            data_file=data_file,
            deployment_strategy=strategy,
            region=options.region,
        )
        data_path = None
        if version is not None:
            data_path = Path(data_file)
            if not data_path.is_absolute():
                data_path = config_path.parent / data_path

        # Both targets are checked before either is written
        for path, what in ((config_path, "config file"), (data_path, "data file")):
            if path is not None and path.exists() and not options.force:
                raise ConfigurationError(
                    f"{what} already exists at {path} (use --force to overwrite)",
                    error_code=ErrorCodes.CONFIG_FILE_EXISTS,
                    remediation="Pass --force to overwrite the existing file",
                )

        self.generator.write_config(config, config_path, force=options.force)
        self.reporter.success(f"Created: {config_path}")

        if version is not None:
            content = version.content
            if format_for_content_type(version.content_type) is ContentFormat.JSON:
                content = self.normalizer.normalize_json(
                    version.text(), resolved.profile.kind
                ).encode("utf-8")
            self.generator.write_data_file(content, data_path, force=options.force)
            self.reporter.success(f"Created: {data_path}")

        logger.info(
            f"Initialized {config_path} for {options.application}/"
            f"{options.configuration_profile}/{options.environment}"
        )
        return InitResult(
            config_file=config_path,
            data_file=data_file,
            deployment_strategy=strategy,
            profile_kind=resolved.profile.kind,
            data_path=data_path,
            version_number=version.version_number if version else None,
        )
