"""Seeded colony generation.

Builds the shelter the way every run starts: four founding survivors
with their asymmetric peer-trust web, the five shared locations, and the
starting stock of supplies and defense.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, Tuple

from .runtime.config import (
    INITIAL_DAY,
    INITIAL_DEFENSE,
    INITIAL_SUPPLIES,
    INITIAL_TRUST,
    ROLE_DOCTOR,
    ROLE_ENGINEER,
    ROLE_FARMER,
    ROLE_MERCENARY,
)
from .runtime.rng_service import RNGService
from .runtime.simulation import assign_random_secrets_to_all
from .state import Location, LocationType, Survivor, WorldState


@dataclass(frozen=True)
class SurvivorSeed:
    name: str
    role: str
    bio: str
    player_trust: int
    peers: Mapping[str, int] = field(default_factory=dict)


FOUNDERS: Tuple[SurvivorSeed, ...] = (
    SurvivorSeed(
        "Sarah",
        ROLE_DOCTOR,
        "A seasoned doctor who has sworn to keep everyone breathing.",
        INITIAL_TRUST,
        {"Jake": 30, "Lisa": 50, "Tom": 40},
    ),
    SurvivorSeed(
        "Jake",
        ROLE_MERCENARY,
        "Ex special forces. Good with a rifle, better at scouting.",
        40,
        {"Sarah": 20, "Lisa": 10, "Tom": 35},
    ),
    SurvivorSeed(
        "Lisa",
        ROLE_ENGINEER,
        "A sharp engineer who keeps the shelter's machinery alive.",
        45,
        {"Sarah": 60, "Jake": 15, "Tom": 55},
    ),
    SurvivorSeed(
        "Tom",
        ROLE_FARMER,
        "A former farmer who knows how to make things grow in the dirt.",
        55,
        {"Sarah": 50, "Jake": 25, "Lisa": 60},
    ),
)

# (name, description, type, capacity)
SHELTER_LAYOUT: Tuple[Tuple[str, str, LocationType, int], ...] = (
    ("Medical Ward", "Treat the wounded and restore health.", LocationType.MEDICAL_WARD, 4),
    ("Recreation Room", "Cards and old board games to take the edge off.", LocationType.RECREATION_ROOM, 6),
    ("Storage Room", "Where the colony keeps what little it has.", LocationType.STORAGE_ROOM, 8),
    ("Rest Area", "A quiet corner where people talk and bond.", LocationType.REST_AREA, 8),
    ("Main Hall", "The main gathering space of the shelter.", LocationType.MAIN_HALL, 12),
)

WELCOME_LINE = "Welcome to the ruins. You and the survivors begin a new day."


def build_survivor(seed: SurvivorSeed) -> Survivor:
    survivor = Survivor(name=seed.name, role=seed.role, bio=seed.bio)
    survivor.trust = seed.player_trust
    for peer, score in seed.peers.items():
        survivor.set_trust(peer, score)
    return survivor


def build_locations() -> list[Location]:
    return [
        Location(name=name, description=description, type=kind, capacity=capacity)
        for name, description, kind, capacity in SHELTER_LAYOUT
    ]


def generate_colony(
    seed: int = 0,
    *,
    founders: Sequence[SurvivorSeed] = FOUNDERS,
    assign_secrets: bool = False,
) -> WorldState:
    """Return a freshly initialised colony.

    With ``assign_secrets`` every founder receives random hidden secrets
    drawn from the world's seeded RNG service.
    """

    world = WorldState(seed=seed, day=INITIAL_DAY, supplies=INITIAL_SUPPLIES, defense=INITIAL_DEFENSE)
    world.rng_service = RNGService(seed=seed)
    world.survivors = [build_survivor(entry) for entry in founders]
    world.locations = build_locations()
    if assign_secrets:
        assign_random_secrets_to_all(world)
    world.append_log(WELCOME_LINE)
    return world


def relationship_matrix(world: WorldState) -> Dict[str, Dict[str, int]]:
    """Peer-trust web keyed by survivor name, for debugging and tests."""

    return {survivor.name: dict(survivor.relationships) for survivor in world.survivors}


__all__ = [
    "FOUNDERS",
    "SHELTER_LAYOUT",
    "SurvivorSeed",
    "WELCOME_LINE",
    "build_locations",
    "build_survivor",
    "generate_colony",
    "relationship_matrix",
]
