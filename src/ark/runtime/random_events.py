"""Independent random-event bank rolled once per day tick.

Every trigger draws its own roll from a dedicated ``events.*`` stream
scoped to the tick's day, so triggers never share randomness and any
number of them can fire together.  Evaluation order is fixed.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..event import Event, EventType
from ..state import WorldState
from .config import SECRET_INFECTED
from .rng_service import RNGService

BASE_FLAVOR_LINES: Sequence[str] = (
    "Strange noises drift in from somewhere outside.",
    "Someone had nightmares and screamed through the night.",
    "A cold draft finds its way through the barricades.",
)


def _roll(rng: RNGService, key: str, day: int, chance: float) -> bool:
    return rng.rand(f"events.{key}", scope={"day": day}) < chance


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


def flavor_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "flavor", day, cfg.flavor_chance):
        return None
    line = rng.choice("events.flavor.line", list(BASE_FLAVOR_LINES), scope={"day": day})
    return Event(EventType.RANDOM, day, line)


def team_stress_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "team_stress", day, cfg.team_stress_chance):
        return None
    alive = world.alive_survivors()
    if len(alive) < 2 or world.average_stress() <= cfg.team_stress_threshold:
        return None
    first, second = rng.sample("events.team_stress.pair", alive, 2, scope={"day": day})
    first.modify_trust(second.name, -cfg.team_stress_trust_loss)
    second.modify_trust(first.name, -cfg.team_stress_trust_loss)
    event = Event(
        EventType.TEAM_CONFLICT,
        day,
        f"Tempers flare. {first.name} and {second.name} get into a heated argument.",
    )
    event.add_involved(first.name)
    event.add_involved(second.name)
    return event


def scarcity_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "scarcity", day, cfg.scarcity_chance):
        return None
    if world.supplies >= cfg.scarcity_supply_threshold:
        return None
    found = 0
    if rng.rand("events.scarcity.find", scope={"day": day}) < cfg.scarcity_find_chance:
        found = rng.randint("events.scarcity.amount", cfg.scarcity_find_min, cfg.scarcity_find_max, scope={"day": day})
        world.adjust_supplies(found)
    if found:
        description = f"Running low, the group scrapes together {found} units of overlooked supplies."
    else:
        description = "The shelves are almost bare. Worry spreads through the shelter."
    event = Event(EventType.SUPPLY_SCARCITY, day, description)
    event.set_context("found", found)
    return event


def zombie_attack_event(world: WorldState, rng: RNGService, day: int) -> List[Event]:
    cfg = world.event_cfg
    scope = {"day": day}
    if not _roll(rng, "zombie", day, cfg.zombie_chance):
        return []
    loss = rng.randint("events.zombie.defense", cfg.zombie_defense_min, cfg.zombie_defense_max, scope=scope)
    world.adjust_defense(-loss)
    event = Event(EventType.ZOMBIE_ATTACK, day, f"The dead hammer at the barricades. Defense drops by {loss}.")
    event.set_context("defense_loss", loss)
    events = [event]

    alive = world.alive_survivors()
    if not alive or rng.rand("events.zombie.injure", scope=scope) >= cfg.zombie_injure_chance:
        return events
    victim = rng.choice("events.zombie.victim", alive, scope=scope)
    injury = rng.randint("events.zombie.injury", cfg.zombie_injury_min, cfg.zombie_injury_max, scope=scope)
    victim.adjust("hp", -injury)
    event.add_involved(victim.name)
    event.set_context("injured", victim.name)
    event.set_context("injury", injury)
    event.description += f" {victim.name} is wounded in the fight."

    if victim.alive and not victim.has_secret(SECRET_INFECTED):
        if rng.rand("events.zombie.infect", scope=scope) < cfg.zombie_infect_chance:
            victim.add_secret(SECRET_INFECTED)
            event.set_context("newly_infected", victim.name)
    victim.clamp_values()

    if not victim.alive:
        death = Event(EventType.DEATH, day, f"{victim.name} did not survive the attack...")
        death.add_involved(victim.name)
        events.append(death)
    return events


def hungry_theft_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "hungry_theft", day, cfg.hungry_theft_chance):
        return None
    alive = world.alive_survivors()
    if not alive or world.supplies <= 0:
        return None
    thief = max(alive, key=lambda survivor: survivor.hunger)
    if thief.hunger < cfg.hungry_theft_min_hunger:
        return None
    amount = rng.randint("events.hungry_theft.amount", cfg.hungry_theft_min, cfg.hungry_theft_max, scope={"day": day})
    amount = min(amount, world.supplies)
    world.adjust_supplies(-amount)
    for other in alive:
        if other is not thief:
            other.modify_trust(thief.name, -cfg.hungry_theft_trust_loss)
    event = Event(EventType.HUNGRY_THEFT, day, f"Driven by hunger, {thief.name} was caught taking {amount} units of food.")
    event.add_involved(thief.name)
    event.set_context("amount", amount)
    return event


def sabotage_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "sabotage", day, cfg.sabotage_chance):
        return None
    alive = world.alive_survivors()
    targets = world.available_locations()
    if not alive or not targets:
        return None
    saboteur = max(alive, key=lambda survivor: survivor.stress)
    if saboteur.stress <= cfg.sabotage_stress_threshold:
        return None
    location = rng.choice("events.sabotage.location", targets, scope={"day": day})
    damage = rng.randint("events.sabotage.damage", cfg.sabotage_damage_min, cfg.sabotage_damage_max, scope={"day": day})
    location.damage(damage)
    saboteur.adjust("stress", -cfg.sabotage_stress_relief)
    # Nobody witnessed it: the saboteur only appears in the context bag.
    event = Event(EventType.SABOTAGE, day, f"Someone wrecked part of the {location.name} during the night.")
    event.set_context("location", location.name)
    event.set_context("damage", damage)
    event.set_context("saboteur", saboteur.name)
    return event


def refusal_event(world: WorldState, rng: RNGService, day: int) -> Optional[Event]:
    cfg = world.event_cfg
    if not _roll(rng, "refusal", day, cfg.refusal_chance):
        return None
    alive = world.alive_survivors()
    if not alive:
        return None
    holdout = min(alive, key=lambda survivor: survivor.trust)
    if holdout.trust >= cfg.refusal_trust_threshold:
        return None
    event = Event(EventType.REFUSAL, day, f"{holdout.name} flatly refuses to take orders from you today.")
    event.add_involved(holdout.name)
    return event


def run_random_event_bank(world: WorldState, *, rng: RNGService, day: int) -> List[Event]:
    """Roll every trigger once and return the events that fired, in order."""

    if not world.event_cfg.enabled:
        return []

    events: List[Event] = []
    for single in (
        flavor_event(world, rng, day),
        team_stress_event(world, rng, day),
        scarcity_event(world, rng, day),
    ):
        if single is not None:
            events.append(single)
    events.extend(zombie_attack_event(world, rng, day))
    for single in (
        hungry_theft_event(world, rng, day),
        sabotage_event(world, rng, day),
        refusal_event(world, rng, day),
    ):
        if single is not None:
            events.append(single)
    return events


__all__ = [
    "BASE_FLAVOR_LINES",
    "flavor_event",
    "hungry_theft_event",
    "refusal_event",
    "run_random_event_bank",
    "sabotage_event",
    "scarcity_event",
    "team_stress_event",
    "zombie_attack_event",
]
