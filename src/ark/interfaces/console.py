"""Debug console commands.

Commands mutate the world through the same entry points the rest of the
runtime uses and return their output as lines; rendering them is left to
whoever owns the screen.
"""

from __future__ import annotations

import shlex
from typing import Callable, Dict, List, Sequence

from ..runtime.config import SECRET_INFECTED
from ..runtime.simulation import exile_survivor, modify_survivor_attribute, record_death
from ..state import Survivor, WorldState
from .admin_debug import render_world, snapshot_world

CONSOLE_DAMAGE = 20

HELP_LINES: Sequence[str] = (
    "Available commands:",
    "  help - show this help",
    "  status - show the colony status",
    "  secrets - list every hidden secret (debug only)",
    "  damage <name> - wound a survivor",
    "  infect <name> - infect a survivor",
    "  exile <name> - drive a survivor out of the shelter",
    "  modify <name> <attribute> <delta> - nudge a survivor attribute",
)


class ConsoleCommandProcessor:
    def __init__(self, world: WorldState, *, debug_mode: bool | None = None) -> None:
        self.world = world
        self.debug_mode = world.debug_cfg.debug_mode() if debug_mode is None else debug_mode
        self._commands: Dict[str, Callable[[List[str]], List[str]]] = {
            "help": self._help,
            "status": self._status,
            "secrets": self._secrets,
            "damage": self._damage,
            "infect": self._infect,
            "exile": self._exile,
            "modify": self._modify,
        }

    def execute(self, line: str) -> List[str]:
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            return [f"Could not parse command: {exc}"]
        if not parts:
            return []
        handler = self._commands.get(parts[0].lower())
        if handler is None:
            return [f"Unknown command: {parts[0]}. Type 'help' for a list of commands."]
        return handler(parts[1:])

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _help(self, args: List[str]) -> List[str]:
        return list(HELP_LINES)

    def _status(self, args: List[str]) -> List[str]:
        return [str(self.world), *render_world(snapshot_world(self.world))]

    def _secrets(self, args: List[str]) -> List[str]:
        if not self.debug_mode:
            return ["Secrets are only visible in debug mode."]
        lines = []
        for survivor in self.world.survivors:
            secrets = survivor.reveal_secrets(debug_mode=True)
            if secrets:
                lines.append(f"{survivor.name}: {', '.join(sorted(secrets))}")
        return lines or ["Nobody is hiding anything. Yet."]

    def _target(self, args: List[str], usage: str):
        if not args:
            return None, [f"Usage: {usage}"]
        survivor = self.world.get_survivor(args[0])
        if survivor is None:
            return None, [f"No survivor named {args[0]}."]
        return survivor, []

    def _deaths(self, survivor: Survivor, was_alive: bool) -> List[str]:
        if was_alive and not survivor.alive:
            record_death(self.world, survivor)
            return self.world.recent_logs(1)
        return []

    def _damage(self, args: List[str]) -> List[str]:
        survivor, errors = self._target(args, "damage <name>")
        if survivor is None:
            return errors
        was_alive = survivor.alive
        modify_survivor_attribute(survivor, "hp", -CONSOLE_DAMAGE)
        lines = [self.world.append_log(f"{survivor.name} takes {CONSOLE_DAMAGE} damage.")]
        return lines + self._deaths(survivor, was_alive)

    def _infect(self, args: List[str]) -> List[str]:
        survivor, errors = self._target(args, "infect <name>")
        if survivor is None:
            return errors
        survivor.add_secret(SECRET_INFECTED)
        return [self.world.append_log(f"{survivor.name} has been infected.")]

    def _exile(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: exile <name>"]
        exile_survivor(self.world, args[0])
        return self.world.recent_logs(1)

    def _modify(self, args: List[str]) -> List[str]:
        if len(args) < 3:
            return ["Usage: modify <name> <attribute> <delta>"]
        survivor, errors = self._target(args, "modify <name> <attribute> <delta>")
        if survivor is None:
            return errors
        try:
            delta = int(args[2])
        except ValueError:
            return [f"Delta must be an integer, got {args[2]!r}."]
        was_alive = survivor.alive
        if not modify_survivor_attribute(survivor, args[1], delta):
            return [f"Nothing changed: {args[1]} cannot be modified on {survivor.name}."]
        lines = [f"{survivor.name}.{args[1].lower()} is now {getattr(survivor, args[1].lower())}."]
        return lines + self._deaths(survivor, was_alive)


__all__ = ["CONSOLE_DAMAGE", "ConsoleCommandProcessor", "HELP_LINES"]
