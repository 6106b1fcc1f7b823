"""Headless orchestration of a colony run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..event import Event
from ..state import WorldState
from .narrative import NarrativeSource, narrate
from .rng_service import RNGService, ensure_rng_service
from .simulation import ColonyOutcome, advance_day, check_colony_outcome
from .tasks import TaskManager


@dataclass
class DayReport:
    day: int
    events: List[Event]
    narration: List[str]
    outcome: ColonyOutcome


@dataclass
class ColonySession:
    """One seeded RNG and one task subsystem shared by every tick of a run."""

    world: WorldState
    rng: Optional[RNGService] = None
    tasks: Optional[TaskManager] = None
    narrator: Optional[NarrativeSource] = None
    outcome: ColonyOutcome = ColonyOutcome.ONGOING
    history: List[DayReport] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = ensure_rng_service(self.world)
        else:
            self.world.rng_service = self.rng
        if self.tasks is None:
            self.tasks = TaskManager(self.rng)

    @property
    def finished(self) -> bool:
        return self.outcome is not ColonyOutcome.ONGOING

    def next_day(self) -> DayReport:
        if self.finished:
            raise RuntimeError(f"Colony run already ended in {self.outcome.value}")
        day = self.world.day
        events = advance_day(self.world, rng=self.rng)
        events.extend(self.tasks.process_active_tasks(self.world, day=day))
        # Narration only sees the finished tick.
        narration = narrate(events, self.world, self.narrator) if self.narrator is not None else []
        self.outcome = check_colony_outcome(self.world)
        report = DayReport(day=day, events=events, narration=narration, outcome=self.outcome)
        self.history.append(report)
        return report

    def run(self, days: int) -> List[DayReport]:
        reports: List[DayReport] = []
        for _ in range(max(0, days)):
            if self.finished:
                break
            reports.append(self.next_day())
        return reports


__all__ = ["ColonySession", "DayReport"]
