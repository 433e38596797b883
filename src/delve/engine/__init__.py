from .debug import parse_debug_command
from .scheduler import GameState, SubMode, TickResult, TurnScheduler
from .snapshot import LevelSnapshot, PlayerStatsView

__all__ = [
    "GameState",
    "LevelSnapshot",
    "PlayerStatsView",
    "SubMode",
    "TickResult",
    "TurnScheduler",
    "parse_debug_command",
]
