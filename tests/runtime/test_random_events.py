from ark.event import EventType
from ark.runtime.config import SECRET_INFECTED
from ark.runtime.random_events import BASE_FLAVOR_LINES, run_random_event_bank
from ark.runtime.rng_service import RNGService
from ark.worldgen import generate_colony

_TRIGGERS = ("flavor", "team_stress", "scarcity", "zombie", "hungry_theft", "sabotage", "refusal")


def _make_world(*only: str, seed: int = 13):
    world = generate_colony(seed=seed)
    for key in _TRIGGERS:
        setattr(world.event_cfg, f"{key}_chance", 1.0 if key in only else 0.0)
    return world


def _run(world):
    return run_random_event_bank(world, rng=RNGService(seed=world.seed), day=world.day)


def test_disabled_bank_is_silent():
    world = _make_world(*_TRIGGERS)
    world.event_cfg.enabled = False
    assert _run(world) == []


def test_no_trigger_fires_at_zero_probability():
    world = _make_world()
    for survivor in world.survivors:
        survivor.stress = 95
        survivor.hunger = 95
        survivor.trust = 0
    world.supplies = 1
    assert _run(world) == []


def test_flavor_event_draws_a_base_line():
    world = _make_world("flavor")
    events = _run(world)
    assert len(events) == 1
    assert events[0].type is EventType.RANDOM
    assert events[0].description in BASE_FLAVOR_LINES
    assert events[0].day == world.day


def test_team_stress_lowers_mutual_trust_of_a_pair():
    world = _make_world("team_stress")
    for survivor in world.survivors:
        survivor.stress = 70
    before = {s.name: dict(s.relationships) for s in world.survivors}

    events = _run(world)

    assert [event.type for event in events] == [EventType.TEAM_CONFLICT]
    first, second = events[0].involved
    assert world.get_survivor(first).get_trust(second) == max(0, before[first][second] - 10)
    assert world.get_survivor(second).get_trust(first) == max(0, before[second][first] - 10)


def test_team_stress_needs_high_average_stress():
    world = _make_world("team_stress")
    assert _run(world) == []


def test_scarcity_only_when_supplies_low():
    world = _make_world("scarcity")
    assert _run(world) == []

    world.supplies = 4
    world.event_cfg.scarcity_find_chance = 1.0
    events = _run(world)
    found = events[0].get_context("found")
    assert events[0].type is EventType.SUPPLY_SCARCITY
    assert 2 <= found <= 5
    assert world.supplies == 4 + found


def test_zombie_attack_injures_and_infects():
    world = _make_world("zombie")
    world.event_cfg.zombie_injure_chance = 1.0
    world.event_cfg.zombie_infect_chance = 1.0

    events = _run(world)

    attack = events[0]
    assert attack.type is EventType.ZOMBIE_ATTACK
    assert 5 <= attack.get_context("defense_loss") <= 15
    assert world.defense == 50 - attack.get_context("defense_loss")
    victim = world.get_survivor(attack.get_context("injured"))
    assert victim.hp == 100 - attack.get_context("injury")
    assert attack.get_context("newly_infected") == victim.name
    assert victim.has_secret(SECRET_INFECTED)
    assert SECRET_INFECTED not in attack.description


def test_zombie_attack_can_kill_the_victim():
    world = _make_world("zombie")
    world.event_cfg.zombie_injure_chance = 1.0
    for survivor in world.survivors:
        survivor.hp = 1

    events = _run(world)

    assert [event.type for event in events] == [EventType.ZOMBIE_ATTACK, EventType.DEATH]
    assert events[1].involved == [events[0].get_context("injured")]
    assert "newly_infected" not in events[0].context


def test_hungry_theft_targets_the_hungriest():
    world = _make_world("hungry_theft")
    world.get_survivor("Jake").hunger = 90
    world.get_survivor("Tom").hunger = 60
    supplies = world.supplies
    sarah_trust = world.get_survivor("Sarah").get_trust("Jake")

    events = _run(world)

    assert events[0].type is EventType.HUNGRY_THEFT
    assert events[0].involved == ["Jake"]
    assert world.supplies == supplies - events[0].get_context("amount")
    assert world.get_survivor("Sarah").get_trust("Jake") == max(0, sarah_trust - 5)


def test_hungry_theft_needs_real_hunger():
    world = _make_world("hungry_theft")
    assert _run(world) == []


def test_sabotage_damages_a_location_and_hides_the_saboteur():
    world = _make_world("sabotage")
    world.get_survivor("Lisa").stress = 90

    events = _run(world)

    sabotage = events[0]
    assert sabotage.type is EventType.SABOTAGE
    assert sabotage.involved == []
    assert "Lisa" not in sabotage.description
    assert sabotage.get_context("saboteur") == "Lisa"
    assert world.get_survivor("Lisa").stress == 70
    location = world.get_location(sabotage.get_context("location"))
    assert location.damage_level == sabotage.get_context("damage")


def test_refusal_is_flavor_only():
    world = _make_world("refusal")
    world.get_survivor("Tom").trust = 5
    snapshot = [(s.name, s.hp, s.stress, s.trust) for s in world.survivors]

    events = _run(world)

    assert [event.type for event in events] == [EventType.REFUSAL]
    assert events[0].involved == ["Tom"]
    assert [(s.name, s.hp, s.stress, s.trust) for s in world.survivors] == snapshot


def test_triggers_fire_together_in_fixed_order():
    world = _make_world("flavor", "zombie", "refusal")
    world.event_cfg.zombie_injure_chance = 0.0
    world.get_survivor("Tom").trust = 5
    events = _run(world)
    assert [event.type for event in events] == [EventType.RANDOM, EventType.ZOMBIE_ATTACK, EventType.REFUSAL]
