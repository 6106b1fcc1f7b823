import pytest

from ark.runtime.config import PLAYER_ID, SECRET_INFECTED
from ark.state import Location, LocationType, Survivor, WorldState, clamp


def _make_survivor(name: str = "Sarah", **overrides) -> Survivor:
    survivor = Survivor(name=name, role="Doctor")
    for key, value in overrides.items():
        setattr(survivor, key, value)
    return survivor


def test_clamp_bounds():
    assert clamp(-5) == 0
    assert clamp(150) == 100
    assert clamp(-150, -100, 100) == -100
    assert clamp(42) == 42


def test_adjust_clamps_every_attribute():
    survivor = _make_survivor()
    assert survivor.adjust("hp", 50) == 100
    assert survivor.adjust("stress", -10) == 0
    assert survivor.adjust("integrity", -500) == -100
    assert survivor.adjust("trust", 80) == 100


def test_player_trust_is_folded_into_scalar():
    survivor = _make_survivor(trust=40)
    assert survivor.get_trust(PLAYER_ID) == 40
    survivor.set_trust(PLAYER_ID, 250)
    assert survivor.trust == 100
    assert PLAYER_ID not in survivor.relationships
    survivor.modify_trust(PLAYER_ID, -30)
    assert survivor.trust == 70


def test_peer_trust_defaults_to_zero_and_clamps():
    survivor = _make_survivor()
    assert survivor.get_trust("Jake") == 0
    survivor.set_trust("Jake", 30)
    survivor.modify_trust("Jake", 90)
    assert survivor.relationships["Jake"] == 100
    survivor.modify_trust("Jake", -400)
    assert survivor.relationships["Jake"] == 0


def test_secrets_are_hidden_outside_debug_mode():
    survivor = _make_survivor()
    survivor.add_secret(SECRET_INFECTED)
    assert survivor.has_secret(SECRET_INFECTED)
    assert survivor.reveal_secrets() == frozenset()
    assert survivor.reveal_secrets(debug_mode=True) == frozenset({SECRET_INFECTED})
    assert SECRET_INFECTED not in repr(survivor)
    survivor.remove_secret(SECRET_INFECTED)
    assert not survivor.has_secret(SECRET_INFECTED)


def test_clamp_values_repairs_raw_assignments():
    survivor = _make_survivor()
    survivor.hp = 140
    survivor.hunger = -3
    survivor.relationships["Tom"] = 180
    survivor.clamp_values()
    assert survivor.hp == 100
    assert survivor.hunger == 0
    assert survivor.relationships["Tom"] == 100


def test_check_invariants_fails_fast():
    survivor = _make_survivor()
    survivor.stress = 120
    with pytest.raises(AssertionError):
        survivor.check_invariants()


def test_location_damage_closes_and_repair_reopens():
    location = Location("Medical Ward", "", LocationType.MEDICAL_WARD, 4)
    location.damage(50)
    assert location.usable
    assert location.efficiency == pytest.approx(0.5)
    location.damage(40)
    assert location.damage_level == 90
    assert not location.is_available
    assert not location.usable
    location.repair(20)
    assert location.damage_level == 70
    assert location.usable
    location.repair(500)
    assert location.damage_level == 0


def test_location_efficiency_floor():
    location = Location("Main Hall", "", LocationType.MAIN_HALL, 12)
    location.damage(100)
    assert location.efficiency == pytest.approx(0.1)


def test_world_log_uses_day_prefix_and_sink():
    seen = []
    world = WorldState(day=3, log_sink=seen.append)
    line = world.append_log("Quiet night.")
    world.append_log("Earlier.", day=2)
    assert line == "[Day 3] Quiet night."
    assert seen == ["[Day 3] Quiet night.", "[Day 2] Earlier."]
    assert world.recent_logs(1) == ["[Day 2] Earlier."]
    assert world.recent_logs(0) == []


def test_world_aggregates_skip_the_dead():
    alive = _make_survivor("Sarah", stress=40)
    dead = _make_survivor("Jake", hp=0, stress=100)
    world = WorldState(survivors=[alive, dead])
    assert world.alive_count() == 1
    assert world.alive_survivors() == [alive]
    assert not world.all_alive()
    assert world.average_stress() == pytest.approx(40.0)
    assert world.get_survivor("Jake") is dead
    assert world.get_survivor("Nobody") is None


def test_resources_never_go_negative():
    world = WorldState(supplies=3, defense=2)
    assert world.adjust_supplies(-10) == 0
    assert world.adjust_defense(-10) == 0


def test_get_location_by_name_or_type():
    ward = Location("Medical Ward", "", LocationType.MEDICAL_WARD, 4)
    world = WorldState(locations=[ward])
    assert world.get_location("Medical Ward") is ward
    assert world.get_location(LocationType.MEDICAL_WARD) is ward
    assert world.get_location(LocationType.REST_AREA) is None
