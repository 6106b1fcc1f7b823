"""Ark colony simulation package public façade."""

from .event import Event, EventType
from .runtime.config import apply_config_overrides
from .runtime.locations import execute_location_action, get_available_location_actions
from .runtime.rng_service import RNGService
from .runtime.session import ColonySession
from .runtime.simulation import (
    ColonyOutcome,
    advance_day,
    assign_random_secrets,
    assign_random_secrets_to_all,
    check_colony_outcome,
    exile_survivor,
    modify_survivor_attribute,
)
from .runtime.tasks import Task, TaskManager, TaskStatus, TaskType
from .state import Location, LocationType, Survivor, WorldState
from .worldgen import generate_colony

__all__ = [
    "ColonyOutcome",
    "ColonySession",
    "Event",
    "EventType",
    "Location",
    "LocationType",
    "RNGService",
    "Survivor",
    "Task",
    "TaskManager",
    "TaskStatus",
    "TaskType",
    "WorldState",
    "advance_day",
    "apply_config_overrides",
    "assign_random_secrets",
    "assign_random_secrets_to_all",
    "check_colony_outcome",
    "execute_location_action",
    "exile_survivor",
    "generate_colony",
    "get_available_location_actions",
    "modify_survivor_attribute",
]
