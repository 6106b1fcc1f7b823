"""Day tick engine for the colony.

``advance_day`` runs the passes in a fixed order over one shared
:class:`~ark.state.WorldState`:

1. supply consumption (feed everyone or starve everyone, never both)
2. per-survivor degradation: infection, hunger, breakdown, death
3. covert theft, which never names the culprit
4. day increment
5. the independent random-event bank

All events of a tick carry the pre-increment day.  The finished list is
logged and counted in telemetry before it is returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from ..event import Event, EventType
from ..state import ATTRIBUTE_BOUNDS, Survivor, WorldState
from .config import ALL_SECRETS, SECRET_INFECTED, SECRET_THIEF, SimulationConfig
from .random_events import run_random_event_bank
from .rng_service import RNGService, ensure_rng_service
from .telemetry import ensure_metrics, record_event


class ColonyOutcome(str, Enum):
    ONGOING = "ongoing"
    VICTORY = "victory"
    DEFEAT = "defeat"


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------


def process_supplies(world: WorldState, *, day: Optional[int] = None) -> Event:
    """Feed the living colony for a day, or apply the starvation penalty."""

    cfg = world.sim_cfg
    day = world.day if day is None else day
    alive = world.alive_survivors()
    cost = len(alive) * cfg.supplies_per_survivor

    if world.supplies >= cost:
        world.adjust_supplies(-cost)
        for survivor in alive:
            survivor.hunger = 0
        event = Event(EventType.SUPPLIES_CONSUMED, day, f"Rationed out {cost} units of supplies.")
        event.set_context("consumed", cost)
        return event

    for survivor in alive:
        survivor.adjust("hunger", cfg.no_supply_hunger_gain)
        survivor.adjust("stress", cfg.no_supply_stress_gain)
    event = Event(EventType.STARVATION, day, "The stores are empty. The survivors go hungry...")
    event.set_context("shortfall", cost - world.supplies)
    return event


def degrade_survivor(
    world: WorldState,
    survivor: Survivor,
    *,
    rng: Optional[RNGService] = None,
    day: Optional[int] = None,
) -> List[Event]:
    """Apply one day of infection, hunger and stress to ``survivor``.

    Dead survivors are skipped.  A Death event is emitted when this pass
    itself brings hp to zero.
    """

    if not survivor.alive:
        return []
    survivor.check_invariants()

    rng = rng or ensure_rng_service(world)
    cfg = world.sim_cfg
    day = world.day if day is None else day
    scope = {"day": day, "survivor": survivor.name}
    events: List[Event] = []

    if survivor.has_secret(SECRET_INFECTED):
        survivor.adjust("hp", -cfg.infection_hp_loss)
        if rng.rand("sim.infection_detect", scope=scope) < cfg.infection_detect_chance:
            gain = rng.randint(
                "sim.infection_suspicion", cfg.infection_suspicion_min, cfg.infection_suspicion_max, scope=scope
            )
            survivor.adjust("suspicion", gain)
            for other in world.survivors:
                if other is not survivor and other.alive:
                    other.modify_trust(survivor.name, -cfg.infection_trust_loss)
            event = Event(EventType.INFECTION_DETECTED, day, f"{survivor.name} is showing strange symptoms...")
            event.add_involved(survivor.name)
            event.set_context("suspicion", survivor.suspicion)
            events.append(event)

    if survivor.hunger > cfg.starvation_hunger_threshold:
        survivor.adjust("hp", -cfg.starvation_hp_loss)
        survivor.adjust("stress", cfg.starvation_stress_gain)
        event = Event(EventType.STARVATION, day, f"{survivor.name} is weak from severe hunger...")
        event.add_involved(survivor.name)
        events.append(event)

    if survivor.stress > cfg.breakdown_stress_threshold:
        if rng.rand("sim.breakdown", scope=scope) < cfg.breakdown_chance:
            event = Event(EventType.MENTAL_BREAKDOWN, day, f"{survivor.name} has a mental breakdown!")
            event.add_involved(survivor.name)
            events.append(event)
            survivor.adjust("stress", -cfg.breakdown_stress_relief)

    if survivor.hp <= 0:
        event = Event(EventType.DEATH, day, f"{survivor.name} has passed away...")
        event.add_involved(survivor.name)
        events.append(event)

    survivor.clamp_values()
    return events


def theft_chance(survivor: Survivor, cfg: SimulationConfig) -> float:
    chance = survivor.hunger * cfg.theft_multiplier / 100.0
    if survivor.integrity < 0:
        chance += cfg.theft_integrity_bonus
    if survivor.has_secret(SECRET_THIEF):
        chance += cfg.theft_thief_bonus
    return chance


def process_covert_theft(
    world: WorldState,
    *,
    rng: Optional[RNGService] = None,
    day: Optional[int] = None,
) -> List[Event]:
    rng = rng or ensure_rng_service(world)
    cfg = world.sim_cfg
    day = world.day if day is None else day
    events: List[Event] = []

    for survivor in world.survivors:
        if not survivor.alive:
            continue
        roll = rng.rand("sim.theft", scope={"day": day, "survivor": survivor.name})
        if roll >= theft_chance(survivor, cfg) or world.supplies <= 0:
            continue
        taken = min(cfg.theft_amount, world.supplies)
        world.adjust_supplies(-taken)
        # The culprit stays out of the record entirely.
        event = Event(EventType.SUPPLIES_STOLEN, day, "Supplies have gone missing, and nothing points to a culprit...")
        event.set_context("amount", taken)
        events.append(event)
    return events


def _publish(world: WorldState, events: Iterable[Event]) -> None:
    metrics = ensure_metrics(world)
    for event in events:
        world.append_log(event.description, day=event.day)
        metrics.inc(f"events.{event.type.value}")
        record_event(world, event.as_record())
    metrics.set_gauge("colony.supplies", world.supplies)
    metrics.set_gauge("colony.defense", world.defense)
    metrics.set_gauge("colony.alive", world.alive_count())
    metrics.set_gauge("colony.day", world.day)


def record_death(world: WorldState, survivor: Survivor, *, day: Optional[int] = None) -> Event:
    """Publish the Death event for a survivor killed outside the day tick."""

    day = world.day if day is None else day
    event = Event(EventType.DEATH, day, f"{survivor.name} has passed away...")
    event.add_involved(survivor.name)
    _publish(world, [event])
    return event


def advance_day(world: WorldState, *, rng: Optional[RNGService] = None) -> List[Event]:
    """Advance the colony by exactly one day and return the tick's events."""

    rng = rng or ensure_rng_service(world)
    day = world.day
    events: List[Event] = [process_supplies(world, day=day)]

    for survivor in world.survivors:
        events.extend(degrade_survivor(world, survivor, rng=rng, day=day))

    events.extend(process_covert_theft(world, rng=rng, day=day))

    world.day = day + 1

    events.extend(run_random_event_bank(world, rng=rng, day=day))

    _publish(world, events)
    return events


# ---------------------------------------------------------------------------
# Colony setup and console entry points
# ---------------------------------------------------------------------------


def assign_random_secrets(survivor: Survivor, rng: RNGService, cfg: Optional[SimulationConfig] = None) -> List[str]:
    """Give ``survivor`` up to ``cfg.secret_draws`` distinct hidden secrets.

    Returns the labels added, for debug tooling only.
    """

    cfg = cfg or SimulationConfig()
    added: List[str] = []
    for draw in range(cfg.secret_draws):
        scope = {"survivor": survivor.name, "draw": draw}
        if rng.rand("secrets.roll", scope=scope) >= cfg.secret_chance:
            continue
        candidates = [secret for secret in ALL_SECRETS if not survivor.has_secret(secret)]
        if not candidates:
            break
        secret = rng.choice("secrets.pick", candidates, scope=scope)
        survivor.add_secret(secret)
        added.append(secret)
    return added


def assign_random_secrets_to_all(world: WorldState, rng: Optional[RNGService] = None) -> int:
    rng = rng or ensure_rng_service(world)
    return sum(len(assign_random_secrets(survivor, rng, world.sim_cfg)) for survivor in world.survivors)


def exile_survivor(world: WorldState, name: str) -> bool:
    survivor = world.get_survivor(name)
    if survivor is None:
        world.append_log(f"There is nobody called {name} to exile.")
        return False
    if not survivor.alive:
        world.append_log(f"{name} is already gone.")
        return False
    survivor.hp = 0
    world.append_log(f"{name} was driven out of the shelter by the group...")
    return True


def modify_survivor_attribute(survivor: Survivor, attribute: str, delta: int) -> bool:
    """Debug entry point: nudge a named attribute by ``delta``.

    Unknown names are ignored.  Death is sticky, so hp never rises on a
    dead survivor.
    """

    attribute = attribute.lower()
    if attribute not in ATTRIBUTE_BOUNDS:
        return False
    if attribute == "hp" and not survivor.alive and delta > 0:
        return False
    survivor.adjust(attribute, delta)
    survivor.clamp_values()
    return True


def check_colony_outcome(world: WorldState) -> ColonyOutcome:
    if world.alive_count() == 0:
        return ColonyOutcome.DEFEAT
    if world.day > world.sim_cfg.victory_day:
        return ColonyOutcome.VICTORY
    return ColonyOutcome.ONGOING


__all__ = [
    "ColonyOutcome",
    "advance_day",
    "assign_random_secrets",
    "assign_random_secrets_to_all",
    "check_colony_outcome",
    "degrade_survivor",
    "exile_survivor",
    "modify_survivor_attribute",
    "process_covert_theft",
    "process_supplies",
    "record_death",
    "theft_chance",
]
