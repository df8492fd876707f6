"""
AppConfig Models

Plain data structures for the AppConfig resources the tool reads and
creates. Each model knows how to build itself from a boto3 response item.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.constants import (
    CONTENT_TYPE_JSON,
    PROFILE_TYPE_FEATURE_FLAGS,
    PROFILE_TYPE_FREEFORM,
)


class ProfileKind(Enum):
    """Kinds of configuration profile."""

    FEATURE_FLAGS = "FeatureFlags"
    FREEFORM = "Freeform"

    @classmethod
    def from_type(cls, profile_type: Optional[str]) -> "ProfileKind":
        """Map a provider type string; anything unrecognised is Freeform."""
        if profile_type == PROFILE_TYPE_FEATURE_FLAGS:
            return cls.FEATURE_FLAGS
        return cls.FREEFORM

    @property
    def type_string(self) -> str:
        if self is ProfileKind.FEATURE_FLAGS:
            return PROFILE_TYPE_FEATURE_FLAGS
        return PROFILE_TYPE_FREEFORM


class DeploymentState:
    """Deployment states reported by AppConfig."""

    DEPLOYING = "DEPLOYING"
    BAKING = "BAKING"
    COMPLETE = "COMPLETE"
    ROLLED_BACK = "ROLLED_BACK"

    ONGOING = frozenset({DEPLOYING, BAKING})
    KNOWN = frozenset({DEPLOYING, BAKING, COMPLETE, ROLLED_BACK})


ROLLBACK_EVENT_TYPES = frozenset({"ROLLBACK_STARTED", "ROLLBACK_COMPLETED"})


@dataclass
class Resource:
    """A named AppConfig resource: application, profile or environment."""

    id: str
    name: str
    description: str = ""
    type: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Resource":
        return cls(
            id=item.get("Id", ""),
            name=item.get("Name", ""),
            description=item.get("Description", "") or "",
            type=item.get("Type"),
        )


@dataclass
class DeploymentStrategy:
    """A deployment strategy and its rollout parameters."""

    id: str
    name: str
    description: str = ""
    deployment_duration_in_minutes: int = 0
    final_bake_time_in_minutes: int = 0
    growth_factor: float = 0.0
    growth_type: str = ""
    replicate_to: str = ""

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "DeploymentStrategy":
        return cls(
            id=item.get("Id", ""),
            name=item.get("Name", ""),
            description=item.get("Description", "") or "",
            deployment_duration_in_minutes=item.get("DeploymentDurationInMinutes", 0),
            final_bake_time_in_minutes=item.get("FinalBakeTimeInMinutes", 0),
            growth_factor=item.get("GrowthFactor", 0.0),
            growth_type=item.get("GrowthType", "") or "",
            replicate_to=item.get("ReplicateTo", "") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "deployment_duration_in_minutes": self.deployment_duration_in_minutes,
            "final_bake_time_in_minutes": self.final_bake_time_in_minutes,
            "growth_factor": self.growth_factor,
            "growth_type": self.growth_type,
            "replicate_to": self.replicate_to,
        }


@dataclass(frozen=True)
class ProfileInfo:
    """A resolved configuration profile."""

    id: str
    name: str
    kind: ProfileKind = ProfileKind.FREEFORM

    @property
    def is_feature_flags(self) -> bool:
        return self.kind is ProfileKind.FEATURE_FLAGS


@dataclass
class DeploymentEvent:
    """One entry of a deployment's event log."""

    event_type: str
    description: str = ""
    triggered_by: str = ""
    occurred_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "DeploymentEvent":
        return cls(
            event_type=item.get("EventType", ""),
            description=item.get("Description", "") or "",
            triggered_by=item.get("TriggeredBy", "") or "",
            occurred_at=item.get("OccurredAt"),
        )


@dataclass
class Deployment:
    """A deployment as reported by the service.

    Listing calls return summaries without ``profile_id``, ``strategy_id``
    or the event log; ``get_deployment`` fills them in.
    """

    number: int
    state: str
    configuration_version: str = ""
    percentage_complete: float = 0.0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    strategy_id: Optional[str] = None
    profile_id: Optional[str] = None
    description: str = ""
    growth_factor: float = 0.0
    final_bake_time_in_minutes: int = 0
    deployment_duration_in_minutes: int = 0
    event_log: List[DeploymentEvent] = field(default_factory=list)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Deployment":
        return cls(
            number=item.get("DeploymentNumber", 0),
            state=item.get("State", ""),
            configuration_version=str(item.get("ConfigurationVersion", "") or ""),
            percentage_complete=item.get("PercentageComplete", 0.0) or 0.0,
            started_at=item.get("StartedAt"),
            completed_at=item.get("CompletedAt"),
            strategy_id=item.get("DeploymentStrategyId"),
            profile_id=item.get("ConfigurationProfileId"),
            description=item.get("Description", "") or "",
            growth_factor=item.get("GrowthFactor", 0.0) or 0.0,
            final_bake_time_in_minutes=item.get("FinalBakeTimeInMinutes", 0) or 0,
            deployment_duration_in_minutes=item.get("DeploymentDurationInMinutes", 0)
            or 0,
            event_log=[DeploymentEvent.from_api(e) for e in item.get("EventLog", [])],
        )

    @property
    def is_ongoing(self) -> bool:
        return self.state in DeploymentState.ONGOING

    def rollback_reason(self) -> str:
        """Description of the most recent rollback event, or an empty string.

        AppConfig lists events newest first; timestamps win when every
        candidate carries one.
        """
        candidates = [
            event
            for event in self.event_log
            if event.event_type in ROLLBACK_EVENT_TYPES and event.description
        ]
        if not candidates:
            return ""
        if all(event.occurred_at is not None for event in candidates):
            return max(candidates, key=lambda event: event.occurred_at).description
        return candidates[0].description


@dataclass
class ConfigurationVersion:
    """A hosted configuration version and its content."""

    version_number: Optional[int]
    content_type: str = CONTENT_TYPE_JSON
    content: bytes = b""
    description: str = ""

    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class ResolvedResourceSet:
    """Identifiers resolved for a single invocation."""

    application_id: str
    profile: ProfileInfo
    environment_id: str
    strategy_id: str = ""
