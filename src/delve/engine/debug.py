from __future__ import annotations

import logging
import shlex
from typing import List, Optional

from ..entities import STAT_NAMES
from ..exceptions import DebugCommandError
from .intents import (
    DebugGodMode,
    DebugNoclip,
    DebugRevealAll,
    DebugSetStat,
    DebugSpawnItem,
    DebugTeleport,
    Intent,
)

logger = logging.getLogger(__name__)

SETTABLE_STATS = STAT_NAMES + ("hp", "max_hp")

USAGE = """\
teleport X Y        move the player to (X, Y)
set STAT VALUE      set a stat (strength, dexterity, vitality, perception, hp, max_hp)
reveal              mark the whole level explored
noclip [on|off]     walk through walls and closed doors
god [on|off]        take no damage
spawn ITEM_ID       put an item in the pack (or at your feet when it is full)"""


def _int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise DebugCommandError(f"{what} must be an integer, got {token!r}") from None


def _toggle(args: List[str], command: str) -> Optional[bool]:
    if not args:
        return None
    if len(args) == 1 and args[0].lower() in ("on", "off"):
        return args[0].lower() == "on"
    raise DebugCommandError(f"usage: {command} [on|off]")


def parse_debug_command(text: str) -> Intent:
    """Turn a debug console line into a debug intent.

    Raises:
        DebugCommandError: on unknown commands or malformed arguments.
    """
    try:
        tokens = shlex.split(text)
    except ValueError as e:
        raise DebugCommandError(f"cannot parse command: {e}") from e
    if not tokens:
        raise DebugCommandError("empty command")
    command, args = tokens[0].lower(), tokens[1:]
    logger.debug("Parsing debug command %r %r", command, args)

    if command in ("teleport", "tp"):
        if len(args) != 2:
            raise DebugCommandError("usage: teleport X Y")
        return DebugTeleport(_int(args[0], "X"), _int(args[1], "Y"))
    if command == "set":
        if len(args) != 2:
            raise DebugCommandError("usage: set STAT VALUE")
        stat = args[0].lower()
        if stat not in SETTABLE_STATS:
            raise DebugCommandError(f"unknown stat {stat!r}; expected one of {', '.join(SETTABLE_STATS)}")
        return DebugSetStat(stat, _int(args[1], "VALUE"))
    if command == "reveal":
        if args:
            raise DebugCommandError("usage: reveal")
        return DebugRevealAll()
    if command == "noclip":
        return DebugNoclip(_toggle(args, command))
    if command == "god":
        return DebugGodMode(_toggle(args, command))
    if command == "spawn":
        if len(args) != 1:
            raise DebugCommandError("usage: spawn ITEM_ID")
        return DebugSpawnItem(args[0])
    raise DebugCommandError(f"unknown command {command!r}")
