"""Command line interface for headless colony runs."""

from __future__ import annotations

import argparse
from typing import Dict, Sequence

from .interfaces.admin_debug import render_world, snapshot_world
from .runtime.config import apply_config_overrides
from .runtime.narrative import TemplateNarrator
from .runtime.session import ColonySession, DayReport
from .runtime.telemetry import DEBUG_LEVELS, DebugConfig
from .worldgen import generate_colony


def _parse_overrides(pairs: Sequence[str]) -> Dict[str, object]:
    overrides: Dict[str, object] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Overrides must be of the form key=value, received '{pair}'")
        key, raw_value = pair.split("=", 1)
        overrides[key.strip()] = _coerce_value(raw_value.strip())
    return overrides


def _coerce_value(raw: str) -> object:
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    return raw


def _print_day(report: DayReport, *, narrated: bool) -> None:
    print(f"--- Day {report.day} ---")
    lines = report.narration if narrated else [event.description for event in report.events]
    for line in lines:
        print(f"  {line}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless survival colony")
    parser.add_argument("--days", type=int, default=7, help="Number of days to simulate")
    parser.add_argument("--seed", type=int, default=0, help="World seed")
    parser.add_argument(
        "--config",
        action="append",
        default=[],
        metavar="key=value",
        help="Override config fields, e.g. sim.victory_day=10",
    )
    parser.add_argument("--secrets", action="store_true", help="Hand out random secrets at colony setup")
    parser.add_argument(
        "--debug-level",
        choices=DEBUG_LEVELS,
        default="minimal",
        help="Telemetry level; verbose also reveals secrets in the status panel",
    )
    parser.add_argument("--narrate", action="store_true", help="Render events through the template narrator")
    args = parser.parse_args(argv)

    try:
        overrides = _parse_overrides(args.config)
        world = generate_colony(args.seed, assign_secrets=args.secrets)
        world.debug_cfg = DebugConfig(level=args.debug_level)
        apply_config_overrides(world, overrides)
    except (KeyError, ValueError) as exc:
        parser.error(str(exc))

    narrator = TemplateNarrator(world.rng_service) if args.narrate else None
    session = ColonySession(world, rng=world.rng_service, narrator=narrator)
    for report in session.run(args.days):
        _print_day(report, narrated=narrator is not None)

    print("")
    for line in render_world(snapshot_world(world, debug_mode=world.debug_cfg.debug_mode())):
        print(line)
    print(f"Outcome: {session.outcome.value}")
    if world.debug_cfg.level != "minimal":
        for path, value in sorted(world.metrics.counters.items()):
            print(f"  {path}: {value:g}")
        print(f"RNG signature: {session.rng.signature()}")
        for stream_key, count in session.rng.draws_by_stream():
            print(f"  {stream_key}: {count} draws")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
