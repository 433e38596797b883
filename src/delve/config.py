from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DELVE_CONFIG"


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


@dataclass(frozen=True)
class GenerationParams:
    """Inputs to the dungeon generator.

    Room sizes describe the floor interior; every room also gets a one-tile wall
    ring, and the outermost row/column of the grid is always wall.
    """

    width: int = 64
    height: int = 32
    min_room_count: int = 5
    max_room_count: int = 9
    min_room_width: int = 4
    min_room_height: int = 3
    max_room_width: int = 10
    max_room_height: int = 7
    corridor_width: int = 1
    placement_attempts: int = 300
    max_path_iterations: int = 4000
    extra_corridor_chance: int = 5  # percent per non-tree edge
    max_generation_attempts: int = 5
    min_enemies_per_room: int = 1
    max_enemies_per_room: int = 2
    max_items_per_room: int = 1

    def __post_init__(self) -> None:
        _require(self.min_room_width >= 1 and self.min_room_height >= 1, "minimum room size must be >= 1")
        _require(self.max_room_width >= self.min_room_width, "max_room_width must be >= min_room_width")
        _require(self.max_room_height >= self.min_room_height, "max_room_height must be >= min_room_height")
        _require(self.width >= self.min_room_width + 4, "grid width too small for the minimum room")
        _require(self.height >= self.min_room_height + 4, "grid height too small for the minimum room")
        _require(1 <= self.min_room_count <= self.max_room_count, "room counts must satisfy 1 <= min <= max")
        _require(self.corridor_width >= 1, "corridor_width must be >= 1")
        _require(self.placement_attempts >= 1, "placement_attempts must be >= 1")
        _require(self.max_path_iterations >= 1, "max_path_iterations must be >= 1")
        _require(0 <= self.extra_corridor_chance <= 100, "extra_corridor_chance is a percentage")
        _require(self.max_generation_attempts >= 1, "max_generation_attempts must be >= 1")
        _require(
            0 <= self.min_enemies_per_room <= self.max_enemies_per_room,
            "enemies per room must satisfy 0 <= min <= max",
        )
        _require(self.max_items_per_room >= 0, "max_items_per_room must be >= 0")

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> "GenerationParams":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class GauntletParams:
    """Challenge floors: every ``interval``-th depth is intensified."""

    interval: int = 5
    enemy_multiplier: int = 2
    spawn_loot: bool = False

    def __post_init__(self) -> None:
        _require(self.interval >= 1, "gauntlet interval must be >= 1")
        _require(self.enemy_multiplier >= 1, "gauntlet enemy_multiplier must be >= 1")

    def is_gauntlet(self, depth: int) -> bool:
        return depth % self.interval == 0


@dataclass(frozen=True)
class CombatParams:
    crit_multiplier: int = 2
    unarmed_damage: str = "1d1"
    unarmed_crit_chance: int = 5
    max_dodge: int = 50
    ranged_distance_penalty: int = 2
    cover_bonus: int = 15

    def __post_init__(self) -> None:
        _require(self.crit_multiplier >= 1, "crit_multiplier must be >= 1")
        _require(0 <= self.max_dodge <= 100, "max_dodge is a percentage")


@dataclass(frozen=True)
class GameConfig:
    """Top-level configuration for a run."""

    generation: GenerationParams = field(default_factory=GenerationParams)
    gauntlet: GauntletParams = field(default_factory=GauntletParams)
    combat: CombatParams = field(default_factory=CombatParams)
    base_sight_radius: int = 3
    perception_divisor: int = 2
    inventory_capacity: int = 12
    ai_max_path_iterations: int = 200
    overdose_threshold: int = 3
    overdose_decay_rounds: int = 20
    xp_per_level: int = 100
    player_stats: Dict[str, int] = field(
        default_factory=lambda: {"strength": 10, "dexterity": 10, "vitality": 10, "perception": 10}
    )
    hp_per_vitality: int = 10

    def __post_init__(self) -> None:
        _require(self.base_sight_radius >= 0, "base_sight_radius must be >= 0")
        _require(self.perception_divisor >= 1, "perception_divisor must be >= 1")
        _require(self.inventory_capacity >= 1, "inventory_capacity must be >= 1")
        _require(self.ai_max_path_iterations >= 1, "ai_max_path_iterations must be >= 1")
        _require(self.overdose_threshold >= 1, "overdose_threshold must be >= 1")
        _require(self.overdose_decay_rounds >= 1, "overdose_decay_rounds must be >= 1")
        _require(self.xp_per_level >= 1, "xp_per_level must be >= 1")
        _require(self.hp_per_vitality >= 1, "hp_per_vitality must be >= 1")
        missing = {"strength", "dexterity", "vitality", "perception"} - set(self.player_stats)
        _require(not missing, f"player_stats missing {sorted(missing)}")

    def sight_radius(self, perception: int) -> int:
        return self.base_sight_radius + max(0, perception) // self.perception_divisor

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GameConfig":
        """Build a config from a (partial) mapping; unknown keys are rejected."""
        raw = dict(raw or {})
        sections = {
            "generation": GenerationParams,
            "gauntlet": GauntletParams,
            "combat": CombatParams,
        }
        kwargs: Dict[str, Any] = {}
        for name, section_cls in sections.items():
            if name in raw:
                kwargs[name] = _build(section_cls, raw.pop(name), name)
        if "player_stats" in raw:
            kwargs["player_stats"] = {str(k): int(v) for k, v in dict(raw.pop("player_stats")).items()}
        kwargs.update(_checked_fields(cls, raw, "config"))
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ConfigError(str(e)) from e


def _checked_fields(cls: type, raw: Mapping[str, Any], where: str) -> Dict[str, Any]:
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(raw) - names)
    if unknown:
        raise ConfigError(f"Unknown {where} keys: {unknown}")
    return dict(raw)


def _build(cls: type, raw: Any, where: str) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Section '{where}' must be a mapping")
    try:
        return cls(**_checked_fields(cls, raw, where))
    except TypeError as e:
        raise ConfigError(f"Invalid '{where}' section: {e}") from e


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """Load configuration from YAML.

    Resolution order: explicit ``path``, the ``DELVE_CONFIG`` environment
    variable, then the bundled ``delve/data/defaults.yaml`` resource.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR) or None
    if path is None:
        text = resource_files("delve.data").joinpath("defaults.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded default config resource")
    else:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {p}")
        text = p.read_text(encoding="utf-8")
        logger.debug("Loaded config from path: %s", p)
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config: {e}") from e
    if not isinstance(raw, Mapping):
        raise ConfigError("Config root must be a mapping")
    cfg = GameConfig.from_dict(raw)
    logger.info(
        "Config: grid=%dx%d rooms=%d..%d gauntlet_interval=%d",
        cfg.generation.width,
        cfg.generation.height,
        cfg.generation.min_room_count,
        cfg.generation.max_room_count,
        cfg.gauntlet.interval,
    )
    return cfg


__all__ = ["CombatParams", "GameConfig", "GauntletParams", "GenerationParams", "load_config"]
