from ark.runtime.locations import execute_location_action, get_available_location_actions
from ark.state import LocationType
from ark.worldgen import generate_colony


def _make_world(seed: int = 3):
    world = generate_colony(seed=seed)
    for survivor in world.survivors:
        survivor.trust = 100
    return world


def test_default_actions_cover_usable_locations():
    world = _make_world()
    assert get_available_location_actions(world) == [
        "Use Medical Ward",
        "Use Recreation Room",
        "Check Storage Room",
        "Use Rest Area",
    ]


def test_damaged_locations_offer_repair_and_closed_ones_drop_out():
    world = _make_world()
    world.get_location(LocationType.RECREATION_ROOM).damage(90)
    world.get_location(LocationType.MAIN_HALL).damage(10)
    actions = get_available_location_actions(world)
    assert "Use Recreation Room" not in actions
    assert actions[-2:] == ["Repair Recreation Room", "Repair Main Hall"]


def test_rest_area_raises_mutual_trust_between_two_survivors():
    world = _make_world()
    world.get_survivor("Jake").hp = 0
    world.get_survivor("Tom").hp = 0
    sarah = world.get_survivor("Sarah")
    lisa = world.get_survivor("Lisa")
    sarah_to_lisa = sarah.get_trust("Lisa")
    lisa_to_sarah = lisa.get_trust("Sarah")
    sarah_to_jake = sarah.get_trust("Jake")

    assert execute_location_action(world, sarah, "Use Rest Area")

    assert sarah.get_trust("Lisa") == sarah_to_lisa + 5
    assert lisa.get_trust("Sarah") == lisa_to_sarah + 5
    assert sarah.get_trust("Jake") == sarah_to_jake


def test_rest_area_alone_does_nothing():
    world = _make_world()
    for survivor in world.survivors[1:]:
        survivor.hp = 0
    assert not execute_location_action(world, world.survivors[0], "Use Rest Area")
    assert "nobody to talk to" in world.log[-1]


def test_medical_ward_scales_with_efficiency():
    world = _make_world()
    world.get_location(LocationType.MEDICAL_WARD).damage(50)
    jake = world.get_survivor("Jake")
    jake.hp = 40
    assert execute_location_action(world, jake, "Use Medical Ward")
    assert jake.hp == 50


def test_medical_ward_skips_full_health():
    world = _make_world()
    assert not execute_location_action(world, world.get_survivor("Jake"), "Use Medical Ward")


def test_recreation_room_reduces_stress_until_floor():
    world = _make_world()
    tom = world.get_survivor("Tom")
    tom.stress = 10
    assert execute_location_action(world, tom, "Use Recreation Room")
    assert tom.stress == 0
    assert not execute_location_action(world, tom, "Use Recreation Room")


def test_storage_room_reports_supplies():
    world = _make_world()
    world.supplies = 17
    assert execute_location_action(world, world.survivors[0], "Check Storage Room")
    assert "17 units" in world.log[-1]


def test_closed_location_refuses_use():
    world = _make_world()
    world.get_location(LocationType.MEDICAL_WARD).damage(85)
    jake = world.get_survivor("Jake")
    jake.hp = 30
    assert not execute_location_action(world, jake, "Use Medical Ward")
    assert jake.hp == 30
    assert "closed" in world.log[-1]


def test_engineer_repairs_faster_and_reopens_location():
    world = _make_world()
    ward = world.get_location(LocationType.MEDICAL_WARD)
    ward.damage(90)
    assert execute_location_action(world, world.get_survivor("Lisa"), "Repair Medical Ward")
    assert ward.damage_level == 60
    assert ward.usable

    ward.damage(40)
    assert execute_location_action(world, world.get_survivor("Tom"), "Repair Medical Ward")
    assert ward.damage_level == 80
    assert not ward.usable


def test_repair_on_undamaged_location_fails():
    world = _make_world()
    assert not execute_location_action(world, world.get_survivor("Lisa"), "Repair Storage Room")


def test_dead_or_unknown_inputs_fail_with_a_log_line():
    world = _make_world()
    dead = world.get_survivor("Jake")
    dead.hp = 0
    size = len(world.log)
    assert not execute_location_action(world, dead, "Use Rest Area")
    assert not execute_location_action(world, world.get_survivor("Sarah"), "Dance")
    assert not execute_location_action(world, world.get_survivor("Sarah"), "Repair Greenhouse")
    assert len(world.log) == size + 3


def test_zero_trust_refuses_orders():
    world = _make_world()
    tom = world.get_survivor("Tom")
    tom.trust = 0
    tom.stress = 40
    assert not execute_location_action(world, tom, "Use Recreation Room")
    assert tom.stress == 40
    assert "ignores" in world.log[-1]


def test_trust_gate_can_be_disabled():
    world = _make_world()
    world.location_cfg.trust_gate_enabled = False
    tom = world.get_survivor("Tom")
    tom.trust = 0
    tom.stress = 40
    assert execute_location_action(world, tom, "Use Recreation Room")
    assert tom.stress == 25
