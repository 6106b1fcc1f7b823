"""Location resolver: player-directed actions inside the shelter.

Every failure is local and diegetic: the resolver returns ``False`` and
appends a line to the world log, it never raises for a precondition miss.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ..state import Location, LocationType, Survivor, WorldState
from .config import ATTR_MAX, ATTR_MIN, ROLE_ENGINEER
from .rng_service import RNGService, ensure_rng_service

REPAIR_PREFIX = "Repair "

ACTION_NAMES: Dict[LocationType, str] = {
    LocationType.MEDICAL_WARD: "Use Medical Ward",
    LocationType.RECREATION_ROOM: "Use Recreation Room",
    LocationType.REST_AREA: "Use Rest Area",
    LocationType.STORAGE_ROOM: "Check Storage Room",
}

_ACTION_TARGETS: Dict[str, LocationType] = {name: kind for kind, name in ACTION_NAMES.items()}


def get_available_location_actions(world: WorldState) -> List[str]:
    """Usable location actions first, then one repair action per damaged location."""

    actions = [ACTION_NAMES[location.type] for location in world.locations if location.usable and location.type in ACTION_NAMES]
    actions.extend(f"{REPAIR_PREFIX}{location.name}" for location in world.locations if location.damage_level > 0)
    return actions


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------


def _use_medical_ward(world: WorldState, survivor: Survivor, location: Location) -> bool:
    if survivor.hp >= ATTR_MAX:
        world.append_log(f"{survivor.name} does not need treatment.")
        return False
    heal = int(world.location_cfg.medical_heal * location.efficiency)
    survivor.adjust("hp", heal)
    world.append_log(f"{survivor.name} was treated in the {location.name} and recovered {heal} HP.")
    return True


def _use_recreation_room(world: WorldState, survivor: Survivor, location: Location) -> bool:
    if survivor.stress <= ATTR_MIN:
        world.append_log(f"{survivor.name} isn't feeling any stress.")
        return False
    relief = int(world.location_cfg.recreation_stress_reduce * location.efficiency)
    survivor.adjust("stress", -relief)
    world.append_log(f"{survivor.name} unwinds in the {location.name}, shedding {relief} stress.")
    return True


def _use_rest_area(world: WorldState, survivor: Survivor, location: Location) -> bool:
    increase = int(world.location_cfg.rest_trust_increase * location.efficiency)
    others = [other for other in world.alive_survivors() if other is not survivor]
    if not others:
        world.append_log(f"{survivor.name} rests in the {location.name}, but there is nobody to talk to.")
        return False
    for other in others:
        survivor.modify_trust(other.name, increase)
        other.modify_trust(survivor.name, increase)
    world.append_log(f"{survivor.name} spends time with the others in the {location.name}; trust grows by {increase}.")
    return True


def _check_storage_room(world: WorldState, survivor: Survivor, location: Location) -> bool:
    if not location.usable:
        world.append_log(f"{survivor.name} can't get into the {location.name}; it may be wrecked.")
        return False
    world.append_log(f"{survivor.name} checks the {location.name}: {world.supplies} units of supplies left.")
    return True


_HANDLERS: Dict[LocationType, Callable[[WorldState, Survivor, Location], bool]] = {
    LocationType.MEDICAL_WARD: _use_medical_ward,
    LocationType.RECREATION_ROOM: _use_recreation_room,
    LocationType.REST_AREA: _use_rest_area,
    LocationType.STORAGE_ROOM: _check_storage_room,
}


def repair_location(world: WorldState, survivor: Survivor, location: Location) -> bool:
    if location.damage_level == 0:
        world.append_log(f"The {location.name} is in good shape and needs no repair.")
        return False
    cfg = world.location_cfg
    amount = cfg.repair_amount
    if survivor.role == ROLE_ENGINEER:
        amount = int(amount * cfg.engineer_repair_mult)
    location.repair(amount)
    world.append_log(f"{survivor.name} repaired the {location.name}, fixing {amount} points of damage.")
    return True


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _accepts_order(world: WorldState, survivor: Survivor, rng: RNGService, action_name: str) -> bool:
    if not world.location_cfg.trust_gate_enabled:
        return True
    roll = rng.rand("locations.trust_gate", scope={"day": world.day, "survivor": survivor.name, "action": action_name})
    return roll <= survivor.trust / 100.0


def _resolve_target(world: WorldState, action_name: str) -> tuple[Optional[Location], bool]:
    if action_name.startswith(REPAIR_PREFIX):
        return world.get_location(action_name[len(REPAIR_PREFIX) :]), True
    kind = _ACTION_TARGETS.get(action_name)
    if kind is None:
        return None, False
    return world.get_location(kind), False


def execute_location_action(
    world: WorldState,
    survivor: Survivor,
    action_name: str,
    *,
    rng: Optional[RNGService] = None,
) -> bool:
    """Run ``action_name`` for ``survivor`` and report whether it took effect."""

    if not survivor.alive:
        world.append_log(f"{survivor.name} is no longer with the group.")
        return False

    location, is_repair = _resolve_target(world, action_name)
    if location is None:
        world.append_log(f"Nothing happens: '{action_name}' is not something anyone can do here.")
        return False
    if not is_repair and not location.usable:
        world.append_log(f"The {location.name} is closed until someone repairs it.")
        return False

    rng = rng or ensure_rng_service(world)
    if not _accepts_order(world, survivor, rng, action_name):
        world.append_log(f"{survivor.name} ignores your request to {action_name.lower()}.")
        return False

    if is_repair:
        return repair_location(world, survivor, location)
    return _HANDLERS[location.type](world, survivor, location)


__all__ = [
    "ACTION_NAMES",
    "REPAIR_PREFIX",
    "execute_location_action",
    "get_available_location_actions",
    "repair_location",
]
