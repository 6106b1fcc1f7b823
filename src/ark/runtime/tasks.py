"""Task subsystem.

Available tasks are derived from the world on every call and never
stored; a task only becomes durable once it is assigned, at which point
it sits in the manager's active list until it completes or fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..event import Event, EventType
from ..state import Survivor, WorldState
from .config import INITIAL_DEFENSE, ROLE_ENGINEER, ROLE_MERCENARY, ROLE_SCOUT
from .rng_service import RNGService, ensure_rng_service, stable_rng
from .telemetry import ensure_metrics


class TaskType(str, Enum):
    PATROL = "Patrol"
    REPAIR_FACILITY = "RepairFacility"
    SCAVENGE_SUPPLY = "ScavengeSupply"
    GUARD_DUTY = "GuardDuty"
    MAINTAIN_EQUIP = "MaintainEquip"
    SOCIAL_SUPPORT = "SocialSupport"


class TaskStatus(str, Enum):
    AVAILABLE = "Available"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(slots=True)
class Task:
    id: str
    name: str
    description: str
    type: TaskType
    duration: int = 1
    status: TaskStatus = TaskStatus.AVAILABLE
    assigned_survivor: Optional[str] = None
    progress: int = 0
    requirements: Dict[str, Any] = field(default_factory=dict)
    rewards: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in {TaskStatus.COMPLETED, TaskStatus.FAILED}


def meets_requirements(task: Task, survivor: Survivor) -> bool:
    """Check every known requirement key; unknown keys are ignored."""

    for key, value in task.requirements.items():
        if key == "min_stamina" and survivor.stamina < int(value):
            return False
        if key == "min_integrity" and survivor.integrity < int(value):
            return False
        if key == "role" and survivor.role != value:
            return False
    return True


def generate_available_tasks(world: WorldState) -> List[Task]:
    """Derive the day's candidate tasks from the current world state.

    The result is a pure function of ``world``; ids repeat across calls
    within the same day, so callers re-derive instead of caching.
    """

    cfg = world.task_cfg
    day = world.day
    tasks: List[Task] = []

    if world.defense < INITIAL_DEFENSE:
        tasks.append(
            Task(
                id=f"patrol_{day}",
                name="Perimeter patrol",
                description="Walk the perimeter and shore up the shelter's defenses.",
                type=TaskType.PATROL,
                requirements={"min_stamina": cfg.patrol_min_stamina},
                rewards={"defense_bonus": cfg.patrol_defense_bonus},
            )
        )

    for location in world.locations:
        if location.damage_level > 0:
            tasks.append(
                Task(
                    id=f"repair_{location.name}_{day}",
                    name=f"Repair the {location.name}",
                    description=f"Patch up the damaged {location.name} and get it working again.",
                    type=TaskType.REPAIR_FACILITY,
                    duration=cfg.repair_duration,
                    requirements={"target_location": location.name},
                    rewards={"repair_amount": world.location_cfg.repair_amount},
                )
            )

    if world.supplies < cfg.scavenge_supply_threshold:
        haul = stable_rng(world.seed, day, "scavenge").randint(cfg.scavenge_yield_min, cfg.scavenge_yield_max)
        tasks.append(
            Task(
                id=f"scavenge_{day}",
                name="Scavenge for supplies",
                description="Head outside and look for food and anything useful.",
                type=TaskType.SCAVENGE_SUPPLY,
                requirements={"min_stamina": cfg.scavenge_min_stamina},
                rewards={"supplies": haul},
            )
        )

    tasks.append(
        Task(
            id=f"guard_{day}",
            name="Guard duty",
            description="Keep watch at a choke point.",
            type=TaskType.GUARD_DUTY,
            requirements={"min_stamina": cfg.guard_min_stamina},
            rewards={"stress_reduction": cfg.guard_stress_reduction},
        )
    )

    if world.average_stress() > cfg.support_stress_threshold:
        tasks.append(
            Task(
                id=f"support_{day}",
                name="Emotional support",
                description="Help the others work through what they're carrying.",
                type=TaskType.SOCIAL_SUPPORT,
                requirements={"min_integrity": cfg.support_min_integrity},
                rewards={"team_stress_reduction": cfg.support_team_stress_reduction},
            )
        )

    return tasks


class TaskManager:
    """Owns the active task list for one colony session."""

    def __init__(self, rng: Optional[RNGService] = None) -> None:
        self.rng = rng
        self._active: List[Task] = []

    def generate_available_tasks(self, world: WorldState) -> List[Task]:
        return generate_available_tasks(world)

    def get_active_tasks(self) -> List[Task]:
        return list(self._active)

    def _refuses(self, world: WorldState, survivor: Survivor, task: Task) -> bool:
        cfg = world.task_cfg
        if survivor.trust >= cfg.refuse_trust_threshold:
            return False
        rng = self.rng or ensure_rng_service(world)
        roll = rng.rand("tasks.refuse", scope={"day": world.day, "survivor": survivor.name, "task": task.id})
        return roll < cfg.refuse_chance

    def assign_task(self, world: WorldState, task_id: str, survivor_name: str) -> bool:
        task = next((candidate for candidate in generate_available_tasks(world) if candidate.id == task_id), None)
        if task is None:
            world.append_log(f"There is no task '{task_id}' to hand out today.")
            return False
        if any(active.id == task_id for active in self._active):
            world.append_log(f"Somebody is already working on {task.name}.")
            return False

        survivor = world.get_survivor(survivor_name)
        if survivor is None or not survivor.alive:
            world.append_log(f"{survivor_name} is not around to take on {task.name}.")
            return False
        if not meets_requirements(task, survivor):
            world.append_log(f"{survivor_name} doesn't meet the requirements for {task.name}.")
            return False
        if self._refuses(world, survivor, task):
            world.append_log(f"{survivor_name} refuses to do {task.name}; they don't trust your judgement.")
            return False

        task.assigned_survivor = survivor.name
        task.status = TaskStatus.IN_PROGRESS
        task.progress = 0
        self._active.append(task)
        world.append_log(f"{survivor_name} starts working on: {task.name}")
        return True

    def process_active_tasks(self, world: WorldState, *, day: Optional[int] = None) -> List[Event]:
        """Advance every active task by one day and retire finished ones.

        ``day`` stamps the events and log lines; it defaults to the current
        world day.
        """

        day = world.day if day is None else day
        metrics = ensure_metrics(world)
        events: List[Event] = []

        for task in self._active:
            survivor = world.get_survivor(task.assigned_survivor or "")
            if survivor is None or not survivor.alive:
                task.status = TaskStatus.FAILED
                event = Event(EventType.TASK_FAILED, day, f"{task.name} was abandoned; {task.assigned_survivor} is gone.")
                event.set_context("task_id", task.id)
                events.append(event)
                world.append_log(event.description, day=day)
                metrics.inc("tasks.failed")
                continue

            task.progress += 1
            if task.progress >= task.duration:
                task.status = TaskStatus.COMPLETED
                events.append(self._complete(world, task, survivor, day))
                metrics.inc("tasks.completed")
            else:
                survivor.adjust("stamina", -world.task_cfg.stamina_cost_per_day)

        self._active = [task for task in self._active if not task.finished]
        return events

    def _complete(self, world: WorldState, task: Task, survivor: Survivor, day: int) -> Event:
        cfg = world.task_cfg
        parts = [f"{survivor.name} finished the task: {task.name}."]
        applied: Dict[str, int] = {}

        for key, value in task.rewards.items():
            if key == "defense_bonus":
                bonus = int(value)
                if survivor.role == ROLE_MERCENARY:
                    bonus = int(bonus * cfg.mercenary_defense_mult)
                world.adjust_defense(bonus)
                applied[key] = bonus
                parts.append(f"Defense rises by {bonus}.")
            elif key == "repair_amount":
                location = world.get_location(str(task.requirements.get("target_location", "")))
                if location is None:
                    continue
                amount = int(value)
                if survivor.role == ROLE_ENGINEER:
                    amount = int(amount * cfg.engineer_repair_mult)
                location.repair(amount)
                applied[key] = amount
                parts.append(f"The {location.name} is repaired by {amount} points.")
            elif key == "supplies":
                haul = int(value)
                if survivor.role == ROLE_SCOUT:
                    haul = int(haul * cfg.scout_supply_mult)
                world.adjust_supplies(haul)
                applied[key] = haul
                parts.append(f"Brought back {haul} units of supplies.")
            elif key == "stress_reduction":
                survivor.adjust("stress", -int(value))
                applied[key] = int(value)
                parts.append(f"Stress drops by {int(value)}.")
            elif key == "team_stress_reduction":
                for member in world.alive_survivors():
                    member.adjust("stress", -int(value))
                applied[key] = int(value)
                parts.append(f"The whole team's stress drops by {int(value)}.")

        event = Event(EventType.TASK_COMPLETED, day, " ".join(parts))
        event.add_involved(survivor.name)
        event.set_context("task_id", task.id)
        for key, amount in applied.items():
            event.set_context(key, amount)
        world.append_log(event.description, day=day)
        return event


__all__ = [
    "Task",
    "TaskManager",
    "TaskStatus",
    "TaskType",
    "generate_available_tasks",
    "meets_requirements",
]
