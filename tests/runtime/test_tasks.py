from ark.event import EventType
from ark.runtime.tasks import (
    Task,
    TaskManager,
    TaskStatus,
    TaskType,
    generate_available_tasks,
    meets_requirements,
)
from ark.state import LocationType, Survivor
from ark.worldgen import generate_colony


def _make_world(seed: int = 17):
    return generate_colony(seed=seed)


def _ids(tasks):
    return [task.id for task in tasks]


def test_quiet_colony_only_offers_guard_duty():
    world = _make_world()
    assert _ids(generate_available_tasks(world)) == ["guard_1"]


def test_tasks_follow_world_thresholds():
    world = _make_world()
    world.defense = 40
    world.supplies = 10
    world.get_location(LocationType.MEDICAL_WARD).damage(30)
    for survivor in world.survivors:
        survivor.stress = 60

    tasks = generate_available_tasks(world)

    assert _ids(tasks) == ["patrol_1", "repair_Medical Ward_1", "scavenge_1", "guard_1", "support_1"]
    repair = tasks[1]
    assert repair.type is TaskType.REPAIR_FACILITY
    assert repair.duration == 2
    assert repair.requirements == {"target_location": "Medical Ward"}
    assert all(task.status is TaskStatus.AVAILABLE for task in tasks)


def test_scavenge_reward_is_stable_within_a_day():
    world = _make_world()
    world.supplies = 5
    first = [t for t in generate_available_tasks(world) if t.type is TaskType.SCAVENGE_SUPPLY][0]
    second = [t for t in generate_available_tasks(world) if t.type is TaskType.SCAVENGE_SUPPLY][0]
    assert first.rewards == second.rewards
    assert 3 <= first.rewards["supplies"] <= 8


def test_requirement_failure_is_logged_and_not_assigned():
    world = _make_world()
    world.defense = 40
    jake = world.get_survivor("Jake")
    jake.stamina = 30
    manager = TaskManager()

    assert not manager.assign_task(world, "patrol_1", "Jake")

    assert manager.get_active_tasks() == []
    assert "requirements" in world.log[-1]


def test_unknown_requirement_keys_are_ignored():
    task = Task(id="t", name="t", description="", type=TaskType.MAINTAIN_EQUIP, requirements={"mystery": 5})
    assert meets_requirements(task, Survivor(name="Tom", role="Farmer"))
    task.requirements["role"] = "Engineer"
    assert not meets_requirements(task, Survivor(name="Tom", role="Farmer"))


def test_unknown_task_or_survivor_fails():
    world = _make_world()
    manager = TaskManager()
    assert not manager.assign_task(world, "patrol_1", "Jake")
    assert not manager.assign_task(world, "guard_1", "Nobody")
    world.get_survivor("Tom").hp = 0
    assert not manager.assign_task(world, "guard_1", "Tom")
    assert manager.get_active_tasks() == []


def test_guard_duty_completes_next_tick():
    world = _make_world()
    jake = world.get_survivor("Jake")
    jake.stress = 30
    manager = TaskManager()

    assert manager.assign_task(world, "guard_1", "Jake")
    active = manager.get_active_tasks()
    assert active[0].status is TaskStatus.IN_PROGRESS
    assert active[0].assigned_survivor == "Jake"
    assert not manager.assign_task(world, "guard_1", "Sarah")

    events = manager.process_active_tasks(world)

    assert [event.type for event in events] == [EventType.TASK_COMPLETED]
    assert events[0].involved == ["Jake"]
    assert jake.stress == 25
    assert manager.get_active_tasks() == []


def test_active_list_is_a_copy():
    world = _make_world()
    manager = TaskManager()
    manager.assign_task(world, "guard_1", "Sarah")
    manager.get_active_tasks().clear()
    assert len(manager.get_active_tasks()) == 1


def test_repair_takes_two_days_and_costs_stamina():
    world = _make_world()
    ward = world.get_location(LocationType.MEDICAL_WARD)
    ward.damage(50)
    lisa = world.get_survivor("Lisa")
    manager = TaskManager()
    assert manager.assign_task(world, "repair_Medical Ward_1", "Lisa")

    assert manager.process_active_tasks(world) == []
    assert lisa.stamina == 90
    assert manager.get_active_tasks()[0].progress == 1

    events = manager.process_active_tasks(world)
    assert events[0].get_context("repair_amount") == 30
    assert ward.damage_level == 20


def test_mercenary_patrol_bonus():
    world = _make_world()
    world.defense = 30
    manager = TaskManager()
    assert manager.assign_task(world, "patrol_1", "Jake")
    manager.process_active_tasks(world)
    assert world.defense == 45


def test_scout_brings_back_more():
    world = _make_world()
    world.supplies = 5
    world.survivors.append(Survivor(name="Mia", role="Scout", trust=80))
    haul = [t for t in generate_available_tasks(world) if t.type is TaskType.SCAVENGE_SUPPLY][0].rewards["supplies"]
    manager = TaskManager()
    assert manager.assign_task(world, "scavenge_1", "Mia")
    manager.process_active_tasks(world)
    assert world.supplies == 5 + int(haul * 1.2)


def test_support_reduces_team_stress():
    world = _make_world()
    for survivor in world.survivors:
        survivor.stress = 60
        survivor.integrity = 30
    manager = TaskManager()
    assert manager.assign_task(world, "support_1", "Sarah")
    manager.process_active_tasks(world)
    assert all(survivor.stress == 50 for survivor in world.survivors)


def test_task_fails_when_assignee_dies():
    world = _make_world()
    manager = TaskManager()
    assert manager.assign_task(world, "guard_1", "Tom")
    world.get_survivor("Tom").hp = 0

    events = manager.process_active_tasks(world)

    assert [event.type for event in events] == [EventType.TASK_FAILED]
    assert manager.get_active_tasks() == []


def test_low_trust_survivor_may_refuse():
    world = _make_world()
    tom = world.get_survivor("Tom")
    tom.trust = 10
    world.task_cfg.refuse_chance = 1.0
    manager = TaskManager()
    assert not manager.assign_task(world, "guard_1", "Tom")
    assert "refuses" in world.log[-1]

    world.task_cfg.refuse_chance = 0.0
    assert manager.assign_task(world, "guard_1", "Tom")
