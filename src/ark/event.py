"""Discrete colony events produced by the day tick and the resolvers.

Events are plain records: the simulation fills them in while a tick is
running and hands the finished list to whoever renders narrative.  The
``context`` bag carries structured side-channel data (for instance which
survivor was newly infected) so that consumers never have to parse it
back out of the description text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping


class EventType(str, Enum):
    SUPPLIES_CONSUMED = "SuppliesConsumed"
    SUPPLIES_STOLEN = "SuppliesStolen"
    STARVATION = "Starvation"
    MENTAL_BREAKDOWN = "MentalBreakdown"
    INFECTION_DETECTED = "InfectionDetected"
    ILLNESS = "Illness"
    DEATH = "Death"
    RANDOM = "RandomEvent"
    TEAM_CONFLICT = "TeamConflict"
    SUPPLY_SCARCITY = "SupplyScarcity"
    ZOMBIE_ATTACK = "ZombieAttack"
    HUNGRY_THEFT = "HungryTheft"
    SABOTAGE = "Sabotage"
    REFUSAL = "Refusal"
    TASK_COMPLETED = "TaskCompleted"
    TASK_FAILED = "TaskFailed"
    CUSTOM = "Custom"


@dataclass(slots=True)
class Event:
    type: EventType
    day: int
    description: str = ""
    involved: List[str] = field(default_factory=list)
    context: Dict[str, Any] = field(default_factory=dict)

    def add_involved(self, name: str) -> None:
        if name not in self.involved:
            self.involved.append(name)

    def set_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def get_context(self, key: str, default: Any = None) -> Any:
        return self.context.get(key, default)

    def as_record(self) -> Mapping[str, object]:
        """Flatten into the mapping shape stored by the telemetry ring."""

        return {
            "type": self.type.value,
            "day": self.day,
            "description": self.description,
            "involved": list(self.involved),
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        return f"[Day {self.day}] {self.type.value}: {self.description}"


__all__ = ["Event", "EventType"]
