from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(slots=True)
class Metrics:
    counters: dict[str, float] = field(default_factory=dict)
    gauges: dict[str, Any] = field(default_factory=dict)

    def inc(self, path: str, n: float = 1.0) -> float:
        self.counters[path] = self.counters.get(path, 0.0) + float(n)
        return self.counters[path]

    def set_gauge(self, path: str, value: Any) -> Any:
        self.gauges[path] = value
        return value

    def counter(self, path: str) -> float:
        return self.counters.get(path, 0.0)


@dataclass(slots=True)
class EventRing:
    capacity: int = 200
    events: list[Mapping[str, object]] = field(default_factory=list)

    def append(self, event: Mapping[str, object]) -> None:
        self.events.append(dict(event))
        if len(self.events) > max(1, int(self.capacity)):
            self.events = self.events[-int(self.capacity) :]

    def tail(self, n: int = 10) -> list[Mapping[str, object]]:
        return list(self.events[-max(0, int(n)) :])


DEBUG_LEVELS: tuple[str, ...] = ("minimal", "standard", "verbose")


@dataclass(slots=True)
class DebugConfig:
    level: str = "minimal"

    def has_event_ring(self) -> bool:
        return self.level in {"standard", "verbose"}

    def debug_mode(self) -> bool:
        return self.level == "verbose"


def ensure_metrics(world: Any) -> Metrics:
    metrics = getattr(world, "metrics", None)
    if isinstance(metrics, Metrics):
        return metrics
    metrics = Metrics()
    world.metrics = metrics
    return metrics


def ensure_event_ring(world: Any) -> EventRing:
    cfg = getattr(world, "debug_cfg", None)
    if not isinstance(cfg, DebugConfig):
        cfg = DebugConfig()
        world.debug_cfg = cfg
    ring = getattr(world, "event_ring", None)
    if cfg.has_event_ring():
        if not isinstance(ring, EventRing):
            ring = EventRing()
            world.event_ring = ring
        return ring
    return ring if isinstance(ring, EventRing) else EventRing(capacity=0)


def record_event(world: Any, event: Mapping[str, object]) -> None:
    ring = ensure_event_ring(world)
    if ring.capacity <= 0:
        return
    payload = dict(event)
    if "day" not in payload:
        payload["day"] = getattr(world, "day", 0)
    ring.append(payload)


__all__ = [
    "DEBUG_LEVELS",
    "DebugConfig",
    "EventRing",
    "Metrics",
    "ensure_event_ring",
    "ensure_metrics",
    "record_event",
]
