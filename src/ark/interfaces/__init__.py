"""Read-only debug views and the debug console."""

from .admin_debug import SurvivorSnapshot, WorldSnapshot, snapshot_world
from .console import ConsoleCommandProcessor

__all__ = ["ConsoleCommandProcessor", "SurvivorSnapshot", "WorldSnapshot", "snapshot_world"]
