"""Structured world state for the colony simulation.

The module holds the passive records every runtime pass mutates: the
survivors, the shelter's locations and the :class:`WorldState` aggregate
that owns them.  Bounded attributes are re-clamped by every mutation
helper so that no other component ever reads an out-of-range value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from statistics import fmean
from typing import Callable, Dict, FrozenSet, List, Optional, Set

from .runtime.config import (
    ATTR_MAX,
    ATTR_MIN,
    INITIAL_DAY,
    INITIAL_DEFENSE,
    INITIAL_HP,
    INITIAL_HUNGER,
    INITIAL_INTEGRITY,
    INITIAL_STAMINA,
    INITIAL_STRESS,
    INITIAL_SUPPLIES,
    INITIAL_SUSPICION,
    INITIAL_TRUST,
    INTEGRITY_MAX,
    INTEGRITY_MIN,
    LOCATION_CLOSURE_DAMAGE,
    PLAYER_ID,
    TRUST_MAX,
    TRUST_MIN,
    LocationConfig,
    RandomEventConfig,
    SimulationConfig,
    TaskConfig,
)
from .runtime.rng_service import RNGService
from .runtime.telemetry import DebugConfig, EventRing, Metrics


def clamp(value: int, lo: int = ATTR_MIN, hi: int = ATTR_MAX) -> int:
    return max(lo, min(hi, value))


# Attribute name -> (lo, hi).  ``trust`` is the player-directed scalar.
ATTRIBUTE_BOUNDS: Dict[str, tuple[int, int]] = {
    "hp": (ATTR_MIN, ATTR_MAX),
    "hunger": (ATTR_MIN, ATTR_MAX),
    "stamina": (ATTR_MIN, ATTR_MAX),
    "stress": (ATTR_MIN, ATTR_MAX),
    "integrity": (INTEGRITY_MIN, INTEGRITY_MAX),
    "suspicion": (ATTR_MIN, ATTR_MAX),
    "trust": (TRUST_MIN, TRUST_MAX),
}


@dataclass(slots=True)
class Survivor:
    name: str
    role: str
    bio: str = ""
    hp: int = INITIAL_HP
    hunger: int = INITIAL_HUNGER
    stamina: int = INITIAL_STAMINA
    stress: int = INITIAL_STRESS
    integrity: int = INITIAL_INTEGRITY
    suspicion: int = INITIAL_SUSPICION
    trust: int = INITIAL_TRUST
    secrets: Set[str] = field(default_factory=set, repr=False)
    relationships: Dict[str, int] = field(default_factory=dict)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    # ------------------------------------------------------------------
    # Trust
    # ------------------------------------------------------------------
    def get_trust(self, peer: str) -> int:
        """Return trust toward ``peer``; the player key reads ``trust``."""

        if peer == PLAYER_ID:
            return self.trust
        return self.relationships.get(peer, TRUST_MIN)

    def set_trust(self, peer: str, value: int) -> None:
        value = clamp(int(value), TRUST_MIN, TRUST_MAX)
        if peer == PLAYER_ID:
            self.trust = value
            return
        self.relationships[peer] = value

    def modify_trust(self, peer: str, delta: int) -> None:
        self.set_trust(peer, self.get_trust(peer) + delta)

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------
    def has_secret(self, secret: str) -> bool:
        return secret in self.secrets

    def add_secret(self, secret: str) -> None:
        self.secrets.add(secret)

    def remove_secret(self, secret: str) -> None:
        self.secrets.discard(secret)

    def reveal_secrets(self, debug_mode: bool = False) -> FrozenSet[str]:
        """Return the hidden labels, but only to debug tooling."""

        if not debug_mode:
            return frozenset()
        return frozenset(self.secrets)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------
    def adjust(self, attribute: str, delta: int) -> int:
        """Add ``delta`` to a bounded attribute, clamp, and return the new value."""

        lo, hi = ATTRIBUTE_BOUNDS[attribute]
        value = clamp(getattr(self, attribute) + int(delta), lo, hi)
        setattr(self, attribute, value)
        return value

    def clamp_values(self) -> None:
        for attribute, (lo, hi) in ATTRIBUTE_BOUNDS.items():
            setattr(self, attribute, clamp(getattr(self, attribute), lo, hi))
        for peer, score in self.relationships.items():
            self.relationships[peer] = clamp(score, TRUST_MIN, TRUST_MAX)

    def check_invariants(self) -> None:
        """Fail fast when a bounded attribute escaped a clamp elsewhere."""

        for attribute, (lo, hi) in ATTRIBUTE_BOUNDS.items():
            value = getattr(self, attribute)
            assert lo <= value <= hi, f"{self.name}.{attribute}={value} outside [{lo}, {hi}]"
        for peer, score in self.relationships.items():
            assert TRUST_MIN <= score <= TRUST_MAX, f"{self.name}->{peer} trust={score} out of range"

    def __str__(self) -> str:
        return f"{self.name} ({self.role}) - HP:{self.hp} Hunger:{self.hunger} Stress:{self.stress}"


class LocationType(str, Enum):
    MEDICAL_WARD = "MedicalWard"
    RECREATION_ROOM = "RecreationRoom"
    STORAGE_ROOM = "StorageRoom"
    REST_AREA = "RestArea"
    MAIN_HALL = "MainHall"


@dataclass(slots=True)
class Location:
    name: str
    description: str
    type: LocationType
    capacity: int
    is_available: bool = True
    damage_level: int = 0

    @property
    def efficiency(self) -> float:
        return max(0.1, (100 - self.damage_level) / 100.0)

    @property
    def usable(self) -> bool:
        return self.is_available and self.damage_level < LOCATION_CLOSURE_DAMAGE

    def damage(self, amount: int) -> None:
        self.damage_level = min(100, self.damage_level + max(0, int(amount)))
        if self.damage_level >= LOCATION_CLOSURE_DAMAGE:
            self.is_available = False

    def repair(self, amount: int) -> None:
        self.damage_level = max(0, self.damage_level - max(0, int(amount)))
        if self.damage_level < LOCATION_CLOSURE_DAMAGE:
            self.is_available = True

    def __str__(self) -> str:
        status = "usable" if self.usable else "closed"
        return f"{self.name} ({self.type.value}) - {status} (damage: {self.damage_level}%)"


LogSink = Callable[[str], None]


@dataclass
class WorldState:
    seed: int = 0
    day: int = INITIAL_DAY
    supplies: int = INITIAL_SUPPLIES
    defense: int = INITIAL_DEFENSE
    survivors: List[Survivor] = field(default_factory=list)
    locations: List[Location] = field(default_factory=list)
    log: List[str] = field(default_factory=list)

    sim_cfg: SimulationConfig = field(default_factory=SimulationConfig)
    location_cfg: LocationConfig = field(default_factory=LocationConfig)
    task_cfg: TaskConfig = field(default_factory=TaskConfig)
    event_cfg: RandomEventConfig = field(default_factory=RandomEventConfig)
    debug_cfg: DebugConfig = field(default_factory=DebugConfig)

    metrics: Metrics = field(default_factory=Metrics)
    event_ring: Optional[EventRing] = None
    rng_service: Optional[RNGService] = None
    log_sink: Optional[LogSink] = field(default=None, repr=False)

    # ------------------------------------------------------------------
    # Log
    # ------------------------------------------------------------------
    def append_log(self, text: str, *, day: Optional[int] = None) -> str:
        line = f"[Day {self.day if day is None else day}] {text}"
        self.log.append(line)
        if self.log_sink is not None:
            self.log_sink(line)
        return line

    def recent_logs(self, count: int) -> List[str]:
        if count <= 0:
            return []
        return list(self.log[-count:])

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def adjust_supplies(self, delta: int) -> int:
        self.supplies = max(0, self.supplies + int(delta))
        return self.supplies

    def adjust_defense(self, delta: int) -> int:
        self.defense = max(0, self.defense + int(delta))
        return self.defense

    # ------------------------------------------------------------------
    # Survivors
    # ------------------------------------------------------------------
    def get_survivor(self, name: str) -> Optional[Survivor]:
        for survivor in self.survivors:
            if survivor.name == name:
                return survivor
        return None

    def alive_survivors(self) -> List[Survivor]:
        return [survivor for survivor in self.survivors if survivor.alive]

    def alive_count(self) -> int:
        return sum(1 for survivor in self.survivors if survivor.alive)

    def all_alive(self) -> bool:
        return all(survivor.alive for survivor in self.survivors)

    def average_stress(self) -> float:
        alive = self.alive_survivors()
        if not alive:
            return 0.0
        return fmean(survivor.stress for survivor in alive)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------
    def get_location(self, key: str | LocationType) -> Optional[Location]:
        for location in self.locations:
            if isinstance(key, LocationType):
                if location.type == key:
                    return location
            elif location.name == key:
                return location
        return None

    def available_locations(self) -> List[Location]:
        return [location for location in self.locations if location.usable]

    def __str__(self) -> str:
        return (
            f"Day {self.day} - Supplies:{self.supplies} Defense:{self.defense} "
            f"Survivors:{self.alive_count()}/{len(self.survivors)}"
        )


__all__ = [
    "ATTRIBUTE_BOUNDS",
    "Location",
    "LocationType",
    "LogSink",
    "Survivor",
    "WorldState",
    "clamp",
]
