"""
Resource Lister

Builds a tree of the applications, profiles, environments and deployment
strategies visible in a region, for the ls-resources command.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..api.interface import AppConfigAPI
from ..api.models import DeploymentStrategy, Resource

logger = logging.getLogger(__name__)


@dataclass
class ApplicationNode:
    name: str
    id: str
    configuration_profiles: List[Resource] = field(default_factory=list)
    environments: List[Resource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "configuration_profiles": [
                {"name": p.name, "id": p.id} for p in self.configuration_profiles
            ],
            "environments": [{"name": e.name, "id": e.id} for e in self.environments],
        }


@dataclass
class ResourcesTree:
    region: str
    applications: List[ApplicationNode] = field(default_factory=list)
    deployment_strategies: List[DeploymentStrategy] = field(default_factory=list)

    def to_dict(self, show_strategies: bool = False) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "region": self.region,
            "applications": [app.to_dict() for app in self.applications],
        }
        if show_strategies:
            result["deployment_strategies"] = [
                s.to_dict() for s in self.deployment_strategies
            ]
        return result


def _by_name(items):
    return sorted(items, key=lambda item: item.name)


class ResourceLister:
    """Lists every AppConfig resource in a region."""

    def __init__(self, api: AppConfigAPI, region: str):
        self.api = api
        self.region = region

    def list_resources(self) -> ResourcesTree:
        tree = ResourcesTree(region=self.region)
        tree.deployment_strategies = _by_name(self.api.list_deployment_strategies())

        for app in _by_name(self.api.list_applications()):
            if not app.id or not app.name:
                continue
            tree.applications.append(
                ApplicationNode(
                    name=app.name,
                    id=app.id,
                    configuration_profiles=_by_name(
                        self.api.list_configuration_profiles(app.id)
                    ),
                    environments=_by_name(self.api.list_environments(app.id)),
                )
            )

        logger.info(
            f"Found {len(tree.applications)} applications in {self.region}"
        )
        return tree


def format_json(tree: ResourcesTree, show_strategies: bool = False) -> str:
    return json.dumps(tree.to_dict(show_strategies), indent=2) + "\n"


def format_human_readable(tree: ResourcesTree, show_strategies: bool = False) -> str:
    """Render the resource tree as indented text."""
    lines = [f"Region: {tree.region}", ""]

    if show_strategies:
        lines.append("Deployment Strategies:")
        if not tree.deployment_strategies:
            lines.append("  No deployment strategies found.")
        for strategy in tree.deployment_strategies:
            lines.append(f"  - {strategy.name} (ID: {strategy.id})")
            if strategy.description:
                lines.append(f"    Description: {strategy.description}")
            lines.append(
                f"    Deployment Duration: "
                f"{strategy.deployment_duration_in_minutes} minutes"
            )
            lines.append(
                f"    Final Bake Time: {strategy.final_bake_time_in_minutes} minutes"
            )
            lines.append(f"    Growth Factor: {strategy.growth_factor:.1f}%")
            if strategy.growth_type:
                lines.append(f"    Growth Type: {strategy.growth_type}")
        lines.append("")

    lines.append("Applications:")
    if not tree.applications:
        lines.append("  No applications found.")

    for i, app in enumerate(tree.applications, start=1):
        if i > 1:
            lines.append("")
        lines.append(f"  [{i}] {app.name} (ID: {app.id})")
        lines.append("      Configuration Profiles:")
        if not app.configuration_profiles:
            lines.append("        - No configuration profiles")
        for profile in app.configuration_profiles:
            lines.append(f"        - {profile.name} (ID: {profile.id})")
        lines.append("      Environments:")
        if not app.environments:
            lines.append("        - No environments")
        for env in app.environments:
            lines.append(f"        - {env.name} (ID: {env.id})")

    return "\n".join(lines) + "\n"
