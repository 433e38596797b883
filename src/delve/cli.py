from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .config import GameConfig, load_config
from .data.loader import load_definitions
from .dungeon.generator import DungeonGenerator
from .engine.intents import (
    Ascend,
    CancelMode,
    ConfirmTarget,
    Descend,
    Direction,
    DropItem,
    EnterLookMode,
    EnterRangedMode,
    Equip,
    Intent,
    Move,
    MoveCursor,
    PickUp,
    Unequip,
    UseItem,
    Wait,
)
from .engine.scheduler import TurnScheduler
from .exceptions import DataValidationError, DelveError, GameOverError
from .items import EquipSlot

logger = logging.getLogger(__name__)


class IntentParseError(ValueError):
    pass


def parse_intent(line: str) -> Intent:
    """Parse one line of a play script (``move up``, ``use 0``, ``wait`` ...)."""
    tokens = line.split()
    if not tokens:
        raise IntentParseError("empty line")
    verb, args = tokens[0].lower(), tokens[1:]
    try:
        if verb in ("move", "m") and len(args) == 1:
            return Move(Direction.parse(args[0]))
        if verb == "cursor" and len(args) == 1:
            return MoveCursor(Direction.parse(args[0]))
        if verb in ("use", "drop", "equip") and len(args) == 1:
            slot = int(args[0])
            return {"use": UseItem, "drop": DropItem, "equip": Equip}[verb](slot)
        if verb == "unequip" and len(args) == 1:
            return Unequip(EquipSlot(args[0].lower()))
    except (KeyError, ValueError) as e:
        raise IntentParseError(f"bad argument in {line!r}: {e}") from e
    simple = {
        "wait": Wait,
        "pickup": PickUp,
        "descend": Descend,
        "ascend": Ascend,
        "look": EnterLookMode,
        "ranged": EnterRangedMode,
        "confirm": ConfirmTarget,
        "cancel": CancelMode,
    }
    if verb in simple and not args:
        return simple[verb]()
    raise IntentParseError(f"unknown action {line!r}")


def _config(args: argparse.Namespace) -> GameConfig:
    return load_config(args.config) if args.config else load_config()


def _cmd_generate(args: argparse.Namespace) -> int:
    config = _config(args)
    tables = load_definitions()
    generator = DungeonGenerator(config.generation, config.gauntlet, tables)
    level = generator.generate(args.depth, args.seed)
    if args.json:
        summary = {
            "depth": level.depth,
            "seed": level.seed,
            "gauntlet": level.gauntlet,
            "rooms": [[r.x, r.y, r.w, r.h] for r in level.rooms],
            "entry": list(level.entry),
            "stairs_down": list(level.stairs_down),
            "stairs_up": list(level.stairs_up) if level.stairs_up else None,
            "enemies": [{"id": e.def_id, "pos": list(e.pos)} for e in level.enemies],
            "items": [{"id": fi.item.def_id, "pos": list(fi.pos)} for fi in level.items],
            "signature": level.grid.signature(),
            "grid": level.grid.to_ascii(),
        }
        print(json.dumps(summary, indent=2))
        return 0
    rows = [list(row) for row in level.grid.to_ascii()]
    for fi in level.items:
        rows[fi.y][fi.x] = fi.item.glyph
    for enemy in level.enemies:
        rows[enemy.y][enemy.x] = enemy.glyph
    for row in rows:
        print("".join(row))
    print(
        f"depth={level.depth} seed={level.seed} rooms={len(level.rooms)} enemies={len(level.enemies)} "
        f"items={len(level.items)} gauntlet={level.gauntlet} signature={level.grid.signature()}"
    )
    return 0


def run_script(scheduler: TurnScheduler, lines: Iterable[str], out: TextIO) -> int:
    """Feed script lines to ``scheduler``; returns the number of lines that could not be parsed."""
    errors = 0
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            if line.startswith("/"):
                result = scheduler.submit_command(line[1:])
            else:
                result = scheduler.submit(parse_intent(line))
        except IntentParseError as e:
            errors += 1
            print(f"?? {e}", file=out)
            continue
        except GameOverError:
            print("-- game over; ignoring remaining input --", file=out)
            break
        for event in result.events:
            print(f"[{event.round:>4}] {event.type.value:<9} {event.message}", file=out)
    return errors


def _cmd_play(args: argparse.Namespace) -> int:
    scheduler = TurnScheduler(_config(args), seed=args.seed)
    if args.script == "-":
        errors = run_script(scheduler, sys.stdin, sys.stdout)
    else:
        try:
            with Path(args.script).open("r", encoding="utf-8") as fh:
                errors = run_script(scheduler, fh, sys.stdout)
        except OSError as e:
            print(f"ERROR: {e}")
            return 1
    if args.show_map:
        print("\n".join(scheduler.snapshot().render(fog=True)))
    stats = scheduler.player_stats()
    print(
        f"seed={scheduler.seed} depth={scheduler.depth} round={scheduler.round} state={scheduler.state.value} "
        f"hp={stats.hp}/{stats.max_hp} level={stats.level}"
    )
    return 1 if errors else 0


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        tables = load_definitions(args.enemies, args.items)
    except DataValidationError as e:
        print(f"INVALID\n{e.to_human()}")
        return 1
    except OSError as e:
        print(f"ERROR: {e}")
        return 1
    print(f"OK: {len(tables.enemies)} enemies, {len(tables.items)} items")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="delve", description="Delve dungeon simulation core")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING...)")
    p.add_argument("--config", default=None, help="Path to a YAML config file")
    sub = p.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate one level and print it")
    g.add_argument("--depth", type=int, default=1)
    g.add_argument("--seed", type=int, required=True)
    g.add_argument("--json", action="store_true", help="Print a JSON summary instead of the map")
    g.set_defaults(func=_cmd_generate)

    pl = sub.add_parser("play", help="Run a headless game from an action script")
    pl.add_argument("script", help="Script file, one action per line ('-' for stdin)")
    pl.add_argument("--seed", type=int, default=None)
    pl.add_argument("--show-map", action="store_true", help="Print the final map with fog of war")
    pl.set_defaults(func=_cmd_play)

    v = sub.add_parser("validate-data", help="Validate enemy and item tables against their schemas")
    v.add_argument("--enemies", default=None, help="Enemy table JSON (bundled copy by default)")
    v.add_argument("--items", default=None, help="Item table JSON (bundled copy by default)")
    v.set_defaults(func=_cmd_validate)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    try:
        return args.func(args)
    except DelveError as e:
        logger.error("%s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
