"""Read-only snapshots of the colony for narrative consumers and debug tooling.

Snapshots are built after a tick has finished and never hold references
back into the live :class:`~ark.state.WorldState`.  Hidden secrets only
appear when the caller explicitly asks for debug mode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Tuple

from ..state import Survivor, WorldState


# ---------------------------------------------------------------------------
# Snapshot data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SurvivorSnapshot:
    name: str
    role: str
    alive: bool
    hp: int
    hunger: int
    stamina: int
    stress: int
    integrity: int
    suspicion: int
    trust: int
    relationships: Tuple[Tuple[str, int], ...] = ()
    secrets: FrozenSet[str] = frozenset()


@dataclass(frozen=True, slots=True)
class LocationSnapshot:
    name: str
    type: str
    usable: bool
    damage_level: int


@dataclass(frozen=True, slots=True)
class WorldSnapshot:
    day: int
    supplies: int
    defense: int
    alive_count: int
    average_stress: float
    survivors: Tuple[SurvivorSnapshot, ...]
    locations: Tuple[LocationSnapshot, ...]
    recent_log: Tuple[str, ...] = ()
    metrics: Dict[str, float] = field(default_factory=dict)


def snapshot_survivor(survivor: Survivor, *, debug_mode: bool = False) -> SurvivorSnapshot:
    return SurvivorSnapshot(
        name=survivor.name,
        role=survivor.role,
        alive=survivor.alive,
        hp=survivor.hp,
        hunger=survivor.hunger,
        stamina=survivor.stamina,
        stress=survivor.stress,
        integrity=survivor.integrity,
        suspicion=survivor.suspicion,
        trust=survivor.trust,
        relationships=tuple(sorted(survivor.relationships.items())),
        secrets=survivor.reveal_secrets(debug_mode),
    )


def snapshot_world(world: WorldState, *, debug_mode: bool = False, log_lines: int = 10) -> WorldSnapshot:
    return WorldSnapshot(
        day=world.day,
        supplies=world.supplies,
        defense=world.defense,
        alive_count=world.alive_count(),
        average_stress=world.average_stress(),
        survivors=tuple(snapshot_survivor(survivor, debug_mode=debug_mode) for survivor in world.survivors),
        locations=tuple(
            LocationSnapshot(location.name, location.type.value, location.usable, location.damage_level)
            for location in world.locations
        ),
        recent_log=tuple(world.recent_logs(log_lines)),
        metrics=dict(world.metrics.counters),
    )


def render_world(snapshot: WorldSnapshot) -> List[str]:
    """Plain-text panel used by the console and the CLI."""

    lines = [
        f"Day {snapshot.day} | Supplies {snapshot.supplies} | Defense {snapshot.defense} "
        f"| Alive {snapshot.alive_count}/{len(snapshot.survivors)} | Avg stress {snapshot.average_stress:.1f}",
    ]
    for survivor in snapshot.survivors:
        status = "" if survivor.alive else " [dead]"
        lines.append(
            f"  {survivor.name} ({survivor.role}){status} HP:{survivor.hp} Hunger:{survivor.hunger} "
            f"Stamina:{survivor.stamina} Stress:{survivor.stress} Trust:{survivor.trust}"
        )
        if survivor.secrets:
            lines.append(f"    secrets: {', '.join(sorted(survivor.secrets))}")
    closed = [location.name for location in snapshot.locations if not location.usable]
    if closed:
        lines.append(f"  Closed: {', '.join(closed)}")
    return lines


__all__ = [
    "LocationSnapshot",
    "SurvivorSnapshot",
    "WorldSnapshot",
    "render_world",
    "snapshot_survivor",
    "snapshot_world",
]
