"""Seeded randomness for the colony simulation.

A draw is fixed by the session seed, the stream key naming what is being
rolled (``"sim.theft"``, ``"events.zombie"``), the scope it is rolled for
(day, survivor, task) and how often that stream was already drawn in that
scope.  Two sessions built from the same seed replay the same colony, and
a new stream never shifts the draws of existing ones.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Any, Dict, Sequence, Tuple, TypeVar

T = TypeVar("T")

SALT = "ark-colony-v1"

Scope = Dict[str, object]


def _scope_key(scope: Scope | None) -> str:
    if not scope:
        return ""
    return json.dumps(scope, sort_keys=True, separators=(",", ":"), default=str)


def stable_rng(seed: int, *parts: object) -> random.Random:
    """Return a generator fixed by ``seed`` and ``parts`` alone.

    Used where a value must be re-derivable from world state, e.g. task
    rewards that are regenerated on every listing.
    """

    blob = ":".join(str(part) for part in (seed, *parts))
    digest = sha256(blob.encode("utf-8")).hexdigest()
    return random.Random(int(digest, 16) % (2**32))


@dataclass
class RNGService:
    seed: int
    draws: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def _generator(self, stream_key: str, scope: Scope | None) -> random.Random:
        slot = (stream_key, _scope_key(scope))
        index = self.draws.get(slot, 0)
        self.draws[slot] = index + 1
        blob = "|".join((SALT, str(self.seed), stream_key, slot[1], str(index)))
        digest = sha256(blob.encode("utf-8")).digest()
        return random.Random(int.from_bytes(digest[:8], "big"))

    def rand(self, stream_key: str, *, scope: Scope | None = None) -> float:
        return self._generator(stream_key, scope).random()

    def randint(self, stream_key: str, a: int, b: int, *, scope: Scope | None = None) -> int:
        return self._generator(stream_key, scope).randint(a, b)

    def choice(self, stream_key: str, seq: Sequence[T], *, scope: Scope | None = None) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self._generator(stream_key, scope).randrange(len(seq))]

    def sample(self, stream_key: str, seq: Sequence[T], k: int, *, scope: Scope | None = None) -> list[T]:
        return self._generator(stream_key, scope).sample(list(seq), k)

    def signature(self) -> str:
        """Short digest of every stream's draw count; equal for replayed runs."""

        rows = sorted([stream_key, scope, count] for (stream_key, scope), count in self.draws.items())
        return sha256(json.dumps(rows, separators=(",", ":")).encode("utf-8")).hexdigest()[:16]

    def draws_by_stream(self) -> list[tuple[str, int]]:
        totals: Dict[str, int] = {}
        for (stream_key, _), count in self.draws.items():
            totals[stream_key] = totals.get(stream_key, 0) + count
        return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def ensure_rng_service(world: Any) -> RNGService:
    service = getattr(world, "rng_service", None)
    if not isinstance(service, RNGService):
        service = RNGService(seed=getattr(world, "seed", 0))
        world.rng_service = service
    return service


__all__ = ["RNGService", "ensure_rng_service", "stable_rng"]
