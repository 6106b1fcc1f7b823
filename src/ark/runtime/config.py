"""Runtime configuration constants and tunable subsystem records."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .telemetry import DEBUG_LEVELS

# Attribute bounds
ATTR_MIN: int = 0
ATTR_MAX: int = 100
INTEGRITY_MIN: int = -100
INTEGRITY_MAX: int = 100
TRUST_MIN: int = 0
TRUST_MAX: int = 100

# Colony start
INITIAL_DAY: int = 1
INITIAL_SUPPLIES: int = 50
INITIAL_DEFENSE: int = 50
INITIAL_TRUST: int = 50

INITIAL_HP: int = 100
INITIAL_HUNGER: int = 0
INITIAL_STAMINA: int = 100
INITIAL_STRESS: int = 0
INITIAL_INTEGRITY: int = 0
INITIAL_SUSPICION: int = 0

# Reserved relationship key for the player; folded into ``Survivor.trust``.
PLAYER_ID: str = "Player"

SECRET_INFECTED: str = "Infected"
SECRET_THIEF: str = "Thief"
SECRET_TRAITOR: str = "Traitor"
SECRET_COWARD: str = "Coward"
ALL_SECRETS: tuple[str, ...] = (SECRET_INFECTED, SECRET_THIEF, SECRET_TRAITOR, SECRET_COWARD)

ROLE_DOCTOR: str = "Doctor"
ROLE_MERCENARY: str = "Mercenary"
ROLE_ENGINEER: str = "Engineer"
ROLE_FARMER: str = "Farmer"
ROLE_SCOUT: str = "Scout"

# Locations close once damage reaches this level.
LOCATION_CLOSURE_DAMAGE: int = 80


@dataclass(slots=True)
class SimulationConfig:
    supplies_per_survivor: int = 1
    no_supply_hunger_gain: int = 20
    no_supply_stress_gain: int = 10

    infection_hp_loss: int = 5
    infection_detect_chance: float = 0.2
    infection_suspicion_min: int = 5
    infection_suspicion_max: int = 15
    infection_trust_loss: int = 5

    starvation_hunger_threshold: int = 80
    starvation_hp_loss: int = 10
    starvation_stress_gain: int = 15

    breakdown_stress_threshold: int = 80
    breakdown_chance: float = 0.3
    breakdown_stress_relief: int = 30

    theft_multiplier: float = 0.5
    theft_integrity_bonus: float = 0.3
    theft_thief_bonus: float = 0.15
    theft_amount: int = 1

    secret_draws: int = 2
    secret_chance: float = 0.35

    victory_day: int = 30


@dataclass(slots=True)
class LocationConfig:
    trust_gate_enabled: bool = True
    medical_heal: int = 20
    recreation_stress_reduce: int = 15
    rest_trust_increase: int = 5
    repair_amount: int = 20
    engineer_repair_mult: float = 1.5


@dataclass(slots=True)
class TaskConfig:
    refuse_trust_threshold: int = 20
    refuse_chance: float = 0.3
    stamina_cost_per_day: int = 10
    scavenge_supply_threshold: int = 20
    support_stress_threshold: float = 50.0

    patrol_defense_bonus: int = 10
    patrol_min_stamina: int = 50
    repair_duration: int = 2
    scavenge_min_stamina: int = 60
    scavenge_yield_min: int = 3
    scavenge_yield_max: int = 8
    guard_min_stamina: int = 40
    guard_stress_reduction: int = 5
    support_min_integrity: int = 20
    support_team_stress_reduction: int = 10

    engineer_repair_mult: float = 1.5
    mercenary_defense_mult: float = 1.5
    scout_supply_mult: float = 1.2


@dataclass(slots=True)
class RandomEventConfig:
    enabled: bool = True

    flavor_chance: float = 0.25

    team_stress_threshold: float = 60.0
    team_stress_chance: float = 0.3
    team_stress_trust_loss: int = 10

    scarcity_supply_threshold: int = 10
    scarcity_chance: float = 0.3
    scarcity_find_chance: float = 0.5
    scarcity_find_min: int = 2
    scarcity_find_max: int = 5

    zombie_chance: float = 0.15
    zombie_defense_min: int = 5
    zombie_defense_max: int = 15
    zombie_injure_chance: float = 0.5
    zombie_injury_min: int = 10
    zombie_injury_max: int = 25
    zombie_infect_chance: float = 0.25

    hungry_theft_chance: float = 0.1
    hungry_theft_min_hunger: int = 50
    hungry_theft_min: int = 1
    hungry_theft_max: int = 3
    hungry_theft_trust_loss: int = 5

    sabotage_chance: float = 0.1
    sabotage_stress_threshold: int = 70
    sabotage_damage_min: int = 20
    sabotage_damage_max: int = 40
    sabotage_stress_relief: int = 20

    refusal_chance: float = 0.2
    refusal_trust_threshold: int = 20


_SECTIONS: dict[str, str] = {
    "sim": "sim_cfg",
    "locations": "location_cfg",
    "tasks": "task_cfg",
    "events": "event_cfg",
    "debug": "debug_cfg",
}


def _coerce(current: Any, value: Any) -> Any:
    if isinstance(current, bool):
        if isinstance(value, str):
            lowered = value.lower()
            if lowered not in {"true", "false"}:
                raise ValueError(f"Expected a boolean, received '{value}'")
            return lowered == "true"
        return bool(value)
    if isinstance(current, int):
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Expected an integer, received {value!r}")
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, str):
        return str(value)
    return value


def apply_config_overrides(world: Any, overrides: Mapping[str, Any]) -> None:
    """Apply ``section.field`` overrides onto the world's config records.

    Sections are ``sim``, ``locations``, ``tasks``, ``events`` and
    ``debug``.  Values are coerced to the type of the field they replace.
    """

    for key, value in overrides.items():
        section, _, name = key.partition(".")
        attr = _SECTIONS.get(section)
        if attr is None or not name:
            raise KeyError(f"Unknown config section in '{key}'")
        cfg = getattr(world, attr)
        names = {f.name for f in fields(cfg)}
        if name not in names:
            raise KeyError(f"Unknown config field '{name}' in section '{section}'")
        coerced = _coerce(getattr(cfg, name), value)
        if key == "debug.level" and coerced not in DEBUG_LEVELS:
            raise ValueError(f"Unknown debug level '{coerced}'")
        setattr(cfg, name, coerced)


__all__ = [
    "ALL_SECRETS",
    "ATTR_MAX",
    "ATTR_MIN",
    "INITIAL_DAY",
    "INITIAL_DEFENSE",
    "INITIAL_HP",
    "INITIAL_HUNGER",
    "INITIAL_INTEGRITY",
    "INITIAL_STAMINA",
    "INITIAL_STRESS",
    "INITIAL_SUPPLIES",
    "INITIAL_SUSPICION",
    "INITIAL_TRUST",
    "INTEGRITY_MAX",
    "INTEGRITY_MIN",
    "LOCATION_CLOSURE_DAMAGE",
    "LocationConfig",
    "PLAYER_ID",
    "ROLE_DOCTOR",
    "ROLE_ENGINEER",
    "ROLE_FARMER",
    "ROLE_MERCENARY",
    "ROLE_SCOUT",
    "RandomEventConfig",
    "SECRET_COWARD",
    "SECRET_INFECTED",
    "SECRET_THIEF",
    "SECRET_TRAITOR",
    "SimulationConfig",
    "TRUST_MAX",
    "TRUST_MIN",
    "TaskConfig",
    "apply_config_overrides",
]
