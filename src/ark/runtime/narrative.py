"""Boundary with the narrative collaborator.

Flavor text is produced outside the simulation (static templates here, a
language model in a full deployment).  The core only ever hands it an
event type, a plain description and a read-only world, and applies the
structured effects it may send back through the two ``apply_*`` helpers
below, which validate and clamp everything they touch.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Protocol, Sequence

from ..event import Event, EventType
from ..state import Survivor, WorldState
from .config import PLAYER_ID
from .rng_service import RNGService
from .simulation import record_death


class NarrativeSource(Protocol):
    def __call__(self, event_type: str, description: str, world: WorldState) -> str:
        ...


FLAVOR_TEMPLATES: Mapping[str, Sequence[str]] = {
    EventType.SUPPLIES_CONSUMED.value: (
        "Another dull day. The rations were handed out.",
        "Everyone got their share. For now, nobody complains.",
        "The stockpile is holding. No need to worry... yet.",
    ),
    EventType.SUPPLIES_STOLEN.value: (
        "Some supplies are missing. Someone had ideas in the night, and the air is thick with tension.",
        "The count is off again. Nobody owns up. Everyone avoids each other's eyes.",
        "Another theft. Silence settles over the camp as trust wears thin.",
    ),
    EventType.MENTAL_BREAKDOWN.value: (
        "A scream cuts through the shelter. Fear and madness fill their eyes.",
        "They repeat the same sentence over and over. Nobody dares come close.",
    ),
    EventType.INFECTION_DETECTED.value: (
        "A cough that won't stop echoes through the night. It doesn't sound right.",
        "Something is off about their skin. People keep their distance.",
    ),
    EventType.ILLNESS.value: (
        "Someone has fallen ill. Everyone keeps their distance.",
        "A fever burns through one of the cots. Nobody wants to get close.",
    ),
    EventType.RANDOM.value: (
        "Strange noises drift in from somewhere far away.",
        "Someone has nightmares and screams through the night.",
        "The wind rattles the barricades until dawn.",
        "A radio crackles to life for a moment, then falls silent.",
    ),
}


@dataclass
class TemplateNarrator:
    """Static-template stand-in for the language-model narrator."""

    rng: RNGService
    templates: Mapping[str, Sequence[str]] = field(default_factory=lambda: FLAVOR_TEMPLATES)

    def __call__(self, event_type: str, description: str, world: WorldState) -> str:
        options = self.templates.get(event_type)
        if not options:
            return description
        return self.rng.choice("narrative.template", list(options), scope={"type": event_type, "day": world.day})


def narrate(events: Sequence[Event], world: WorldState, narrator: NarrativeSource) -> list[str]:
    """Render a finished tick's events; never call this mid-tick."""

    return [narrator(event.type.value, event.description, world) for event in events]


# ---------------------------------------------------------------------------
# Structured effects returned by the collaborator
# ---------------------------------------------------------------------------


def parse_random_event(text: str) -> Mapping[str, Any]:
    """Decode a random-event payload, tolerating a fenced code block."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.startswith("json"):
            cleaned = cleaned[len("json") :]
    payload = json.loads(cleaned)
    if not isinstance(payload, Mapping):
        raise ValueError("Random event payload must be a JSON object")
    return payload


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _event_type(raw: Any) -> EventType:
    try:
        return EventType(str(raw))
    except ValueError:
        return EventType.CUSTOM


def _names(raw: Any) -> List[str]:
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw if isinstance(item, (str, int))]
    return []


def apply_random_event_effects(
    world: WorldState, payload: Mapping[str, Any], *, day: Optional[int] = None
) -> List[Event]:
    """Apply a collaborator-generated random event and return its records.

    The first event describes the payload itself; a Death event follows for
    every survivor the payload killed.  Malformed parts of the payload are
    skipped, as are unknown or dead survivors named in ``NpcEffects``.
    Every touched value is clamped.
    """

    day = world.day if day is None else day
    description = str(payload.get("Description", "")).strip()
    event = Event(_event_type(payload.get("EventType")), day, description)
    event.set_context("source_type", str(payload.get("EventType", "")))

    for name in _names(payload.get("InvolvedNpcs")):
        if world.get_survivor(name) is not None:
            event.add_involved(name)

    effects = payload.get("Effects")
    if not isinstance(effects, Mapping):
        effects = {}
    supplies_delta = _int(effects.get("SuppliesDelta"))
    defense_delta = _int(effects.get("DefenseDelta"))
    if supplies_delta:
        world.adjust_supplies(supplies_delta)
        event.set_context("supplies_delta", supplies_delta)
    if defense_delta:
        world.adjust_defense(defense_delta)
        event.set_context("defense_delta", defense_delta)

    killed: List[Survivor] = []
    npc_effects = effects.get("NpcEffects")
    for entry in npc_effects if isinstance(npc_effects, (list, tuple)) else ():
        if not isinstance(entry, Mapping):
            continue
        survivor = world.get_survivor(str(entry.get("NpcName", "")))
        if survivor is None or not survivor.alive:
            continue
        # Collaborator output may wound but never revive.
        survivor.adjust("hp", _int(entry.get("HpDelta")))
        survivor.adjust("stress", _int(entry.get("StressDelta")))
        survivor.modify_trust(PLAYER_ID, _int(entry.get("TrustDelta")))
        survivor.clamp_values()
        event.add_involved(survivor.name)
        if not survivor.alive:
            killed.append(survivor)

    if description:
        world.append_log(description, day=day)
    return [event, *(record_death(world, survivor, day=day) for survivor in killed)]


@dataclass(slots=True)
class InteractionResponse:
    text: str = ""
    stress_delta: int = 0
    trust_delta: int = 0
    success: bool = False
    mood: str = "Neutral"

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "InteractionResponse":
        return cls(
            text=str(payload.get("NarrativeText", "")),
            stress_delta=_int(payload.get("StressDelta")),
            trust_delta=_int(payload.get("TrustDelta")),
            success=bool(payload.get("IsSuccess", False)),
            mood=str(payload.get("Mood", "Neutral")),
        )


def apply_interaction_response(world: WorldState, survivor: Survivor, response: InteractionResponse) -> bool:
    if not survivor.alive:
        world.append_log(f"{survivor.name} cannot answer anymore.")
        return False
    survivor.adjust("stress", response.stress_delta)
    survivor.modify_trust(PLAYER_ID, response.trust_delta)
    survivor.clamp_values()
    if response.text:
        world.append_log(f"{survivor.name}: {response.text}")
    return True


__all__ = [
    "FLAVOR_TEMPLATES",
    "InteractionResponse",
    "NarrativeSource",
    "TemplateNarrator",
    "apply_interaction_response",
    "apply_random_event_effects",
    "narrate",
    "parse_random_event",
]
