"""
Catalog of public health response actions, grouped by urgency bucket.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum


class Urgency(str, Enum):
    """Recommendation bucket selected from the risk tier"""
    URGENT = "urgent"
    TARGETED = "targeted"
    PREVENTIVE = "preventive"


class ActionType(str, Enum):
    """Kinds of response actions"""
    ADVISORY = "advisory"
    RESPONSE_TEAM = "response_team"
    WATER_TESTING = "water_testing"
    SUPPLIES = "supplies"
    SURVEILLANCE = "surveillance"
    EDUCATION = "education"


@dataclass
class ResponseAction:
    """A recommended public health action"""
    id: str
    action_type: ActionType
    text: str
    urgency: Urgency
    tags: List[str] = field(default_factory=list)
    priority: int = 0  # Higher priority listed first

    def render(self, region: str) -> str:
        """Fill the region into the action text."""
        return self.text.format(region=region or "the affected")


class ActionCatalog:
    """
    Default response actions, used when the oracle returns an assessment
    without recommendations.
    """

    def __init__(self):
        self.actions: Dict[str, ResponseAction] = {}
        self._initialize_default_actions()

    def _initialize_default_actions(self):
        # Urgent: high tier
        self.add_action(ResponseAction(
            id="boil_water_advisory",
            action_type=ActionType.ADVISORY,
            text="Issue an immediate boil-water advisory for the {region} area.",
            urgency=Urgency.URGENT,
            tags=["water", "advisory"],
            priority=100
        ))
        self.add_action(ResponseAction(
            id="rapid_response_team",
            action_type=ActionType.RESPONSE_TEAM,
            text="Deploy rapid response medical teams to affected villages in {region} to manage cases.",
            urgency=Urgency.URGENT,
            tags=["cases", "response"],
            priority=95
        ))
        self.add_action(ResponseAction(
            id="emergency_water_testing",
            action_type=ActionType.WATER_TESTING,
            text="Begin emergency testing of all community water sources in {region}.",
            urgency=Urgency.URGENT,
            tags=["water", "testing"],
            priority=90
        ))
        self.add_action(ResponseAction(
            id="ors_distribution",
            action_type=ActionType.SUPPLIES,
            text="Distribute Oral Rehydration Solution (ORS) packets and hygiene kits to all households.",
            urgency=Urgency.URGENT,
            tags=["supplies", "diarrhea"],
            priority=85
        ))

        # Targeted: medium tier
        self.add_action(ResponseAction(
            id="increase_water_testing",
            action_type=ActionType.WATER_TESTING,
            text="Increase water testing frequency at the main water sources in {region}.",
            urgency=Urgency.TARGETED,
            tags=["water", "testing"],
            priority=70
        ))
        self.add_action(ResponseAction(
            id="heightened_surveillance",
            action_type=ActionType.SURVEILLANCE,
            text="Heighten case surveillance and ask field workers to report daily from {region}.",
            urgency=Urgency.TARGETED,
            tags=["surveillance"],
            priority=65
        ))
        self.add_action(ResponseAction(
            id="targeted_hygiene_promotion",
            action_type=ActionType.EDUCATION,
            text="Begin targeted hygiene promotion in communities with rising cases.",
            urgency=Urgency.TARGETED,
            tags=["education", "hygiene"],
            priority=60
        ))

        # Preventive: low tier
        self.add_action(ResponseAction(
            id="routine_monitoring",
            action_type=ActionType.SURVEILLANCE,
            text="Continue routine water quality monitoring and public health surveillance.",
            urgency=Urgency.PREVENTIVE,
            tags=["surveillance", "water"],
            priority=40
        ))
        self.add_action(ResponseAction(
            id="safe_storage_education",
            action_type=ActionType.EDUCATION,
            text="Reinforce community education on handwashing and safe water storage.",
            urgency=Urgency.PREVENTIVE,
            tags=["education", "hygiene"],
            priority=35
        ))
        self.add_action(ResponseAction(
            id="worker_readiness",
            action_type=ActionType.SURVEILLANCE,
            text="Ensure local health workers are prepared to identify and report any increase in symptoms.",
            urgency=Urgency.PREVENTIVE,
            tags=["surveillance", "workers"],
            priority=30
        ))

    def add_action(self, action: ResponseAction):
        """Add an action to the catalog"""
        self.actions[action.id] = action

    def get_action(self, action_id: str) -> Optional[ResponseAction]:
        """Get action by ID"""
        return self.actions.get(action_id)

    def filter_by_urgency(self, urgency: Urgency) -> List[ResponseAction]:
        """Actions in one bucket, highest priority first"""
        matching = [a for a in self.actions.values() if a.urgency == Urgency(urgency)]
        return sorted(matching, key=lambda a: a.priority, reverse=True)

    def recommendations_for(
        self,
        urgency: Urgency,
        region: str = "",
        max_actions: int = 4
    ) -> List[str]:
        """Rendered action texts for a bucket"""
        return [a.render(region) for a in self.filter_by_urgency(urgency)[:max_actions]]
