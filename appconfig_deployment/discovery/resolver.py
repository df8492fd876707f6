"""
Resource Resolver

Resolves human-readable AppConfig resource names to the identifiers the API
expects. Matching is exact and case-sensitive over complete listings.
"""

import logging
from typing import List

from ..api.interface import AppConfigAPI
from ..api.models import ProfileInfo, Resource, ResolvedResourceSet
from ..config.constants import STRATEGY_PREFIX_PREDEFINED
from ..error_handling import AmbiguousResourceError, ResourceNotFoundError

logger = logging.getLogger(__name__)

APPLICATION = "application"
CONFIGURATION_PROFILE = "configuration profile"
ENVIRONMENT = "environment"
DEPLOYMENT_STRATEGY = "deployment strategy"


def find_unique_id(resource_type: str, name: str, items: List[Resource]) -> str:
    """Return the ID of the single item called ``name``."""
    matches = [item.id for item in items if item.name == name]
    if not matches:
        raise ResourceNotFoundError(resource_type, name)
    if len(matches) > 1:
        raise AmbiguousResourceError(resource_type, name, matches)
    return matches[0]


class ResourceResolver:
    """Resolves resource names through the AppConfig API."""

    def __init__(self, api: AppConfigAPI):
        self.api = api

    def resolve_application(self, name: str) -> str:
        app_id = find_unique_id(APPLICATION, name, self.api.list_applications())
        logger.debug(f"Resolved application '{name}' to {app_id}")
        return app_id

    def resolve_environment(self, application_id: str, name: str) -> str:
        env_id = find_unique_id(
            ENVIRONMENT, name, self.api.list_environments(application_id)
        )
        logger.debug(f"Resolved environment '{name}' to {env_id}")
        return env_id

    def resolve_configuration_profile(
        self, application_id: str, name: str
    ) -> ProfileInfo:
        """Resolve a profile name and fetch its type."""
        profile_id = find_unique_id(
            CONFIGURATION_PROFILE,
            name,
            self.api.list_configuration_profiles(application_id),
        )
        profile = self.api.get_configuration_profile(application_id, profile_id)
        logger.debug(
            f"Resolved configuration profile '{name}' to {profile_id} "
            f"({profile.kind.value})"
        )
        return ProfileInfo(id=profile_id, name=name, kind=profile.kind)

    def resolve_deployment_strategy(self, name: str) -> str:
        """Resolve a strategy name; predefined strategies need no lookup."""
        if name.startswith(STRATEGY_PREFIX_PREDEFINED):
            return name

        strategies = [
            Resource(id=s.id, name=s.name)
            for s in self.api.list_deployment_strategies()
        ]
        strategy_id = find_unique_id(DEPLOYMENT_STRATEGY, name, strategies)
        logger.debug(f"Resolved deployment strategy '{name}' to {strategy_id}")
        return strategy_id

    def resolve_strategy_name(self, strategy_id: str) -> str:
        """Map a strategy ID back to its name; unknown IDs come back as-is."""
        if not strategy_id or strategy_id.startswith(STRATEGY_PREFIX_PREDEFINED):
            return strategy_id

        for strategy in self.api.list_deployment_strategies():
            if strategy.id == strategy_id:
                return strategy.name
        return strategy_id

    def resolve_all(
        self,
        application: str,
        configuration_profile: str,
        environment: str,
        deployment_strategy: str = "",
    ) -> ResolvedResourceSet:
        """Resolve every resource in dependency order.

        An empty ``deployment_strategy`` skips strategy resolution, for
        commands that never start a deployment.
        """
        application_id = self.resolve_application(application)
        profile = self.resolve_configuration_profile(
            application_id, configuration_profile
        )
        environment_id = self.resolve_environment(application_id, environment)

        strategy_id = ""
        if deployment_strategy != "":
            strategy_id = self.resolve_deployment_strategy(deployment_strategy)

        return ResolvedResourceSet(
            application_id=application_id,
            profile=profile,
            environment_id=environment_id,
            strategy_id=strategy_id,
        )
