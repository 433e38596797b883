from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from .items import Item
from .rng import Dice

if TYPE_CHECKING:  # pragma: no cover
    from .effects import ActiveEffect

STAT_NAMES: Tuple[str, ...] = ("strength", "dexterity", "vitality", "perception")


@dataclass
class Stats:
    """Base stat block shared by the player and every enemy kind."""

    strength: int = 10
    dexterity: int = 10
    vitality: int = 10
    perception: int = 10

    def get(self, name: str) -> int:
        if name not in STAT_NAMES:
            raise KeyError(f"Unknown stat: {name}")
        return getattr(self, name)

    def set(self, name: str, value: int) -> None:
        if name not in STAT_NAMES:
            raise KeyError(f"Unknown stat: {name}")
        setattr(self, name, int(value))

    def copy(self) -> "Stats":
        return Stats(**{f.name: getattr(self, f.name) for f in fields(self)})

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Stats":
        return cls(**{name: int(raw.get(name, 10)) for name in STAT_NAMES})


class ActorKind(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"


@dataclass(frozen=True)
class EnemyDef:
    """Static definition of an enemy kind, keyed by ``def_id`` in the data table."""

    def_id: str
    name: str
    glyph: str
    max_hp: int
    damage: Dice
    stats: Stats
    aggro_range: int = 6
    mitigation: int = 0
    xp: int = 25
    min_depth: int = 1

    @classmethod
    def from_dict(cls, def_id: str, raw: Mapping[str, Any]) -> "EnemyDef":
        return cls(
            def_id=def_id,
            name=str(raw["name"]),
            glyph=str(raw.get("glyph", def_id[:1])),
            max_hp=int(raw["hp"]),
            damage=Dice.parse(str(raw.get("damage", "1d2"))),
            stats=Stats.from_dict(raw.get("stats", {})),
            aggro_range=int(raw.get("aggro_range", 6)),
            mitigation=int(raw.get("mitigation", 0)),
            xp=int(raw.get("xp", 25)),
            min_depth=int(raw.get("min_depth", 1)),
        )


@dataclass
class Actor:
    """A living thing on the grid.

    One shape for every variant: ``kind`` tags player vs. enemy and ``def_id``
    names the enemy kind. Code that needs variant behavior branches on ``kind``.
    """

    eid: int
    kind: ActorKind
    name: str
    x: int
    y: int
    stats: Stats
    max_hp: int
    hp: int = -1
    glyph: str = "@"
    def_id: Optional[str] = None
    weapon: Optional[Item] = None
    armor: Optional[Item] = None
    natural_damage: Optional[Dice] = None
    natural_mitigation: int = 0
    aggro_range: int = 0
    xp_value: int = 0
    inventory: List[Item] = field(default_factory=list)
    level: int = 1
    experience: int = 0
    effects: List["ActiveEffect"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.max_hp <= 0:
            raise ValueError("max_hp must be positive")
        if self.hp < 0:
            self.hp = self.max_hp

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def is_player(self) -> bool:
        return self.kind is ActorKind.PLAYER

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def stat(self, name: str) -> int:
        """Base stat plus any active effect modifiers, never below zero."""
        total = self.stats.get(name)
        for effect in self.effects:
            if effect.stat == name:
                total += effect.delta
        return max(0, total)

    def effective_stats(self) -> Stats:
        return Stats(**{name: self.stat(name) for name in STAT_NAMES})

    def take_damage(self, amount: int) -> int:
        """Apply damage, clamping HP at zero; returns the HP actually lost."""
        if amount <= 0:
            return 0
        before = self.hp
        self.hp = max(0, self.hp - amount)
        return before - self.hp

    def heal(self, amount: int) -> int:
        if amount <= 0 or not self.alive:
            return 0
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def gain_experience(self, amount: int, xp_per_level: int = 100, hp_per_level: int = 10) -> int:
        """Add experience; returns how many levels were gained."""
        self.experience += max(0, amount)
        gained = 0
        while self.experience >= self.level * xp_per_level:
            self.experience -= self.level * xp_per_level
            self.level += 1
            self.stats.strength += 1
            self.stats.dexterity += 1
            self.stats.vitality += 1
            self.max_hp += hp_per_level
            self.hp = self.max_hp
            gained += 1
        return gained

    def __repr__(self) -> str:
        return f"Actor({self.kind.value}:{self.name}@{self.x},{self.y} hp={self.hp}/{self.max_hp})"


def make_player(eid: int, stats: Stats, hp_per_vitality: int = 10, name: str = "Hero") -> Actor:
    return Actor(
        eid=eid,
        kind=ActorKind.PLAYER,
        name=name,
        x=0,
        y=0,
        stats=stats.copy(),
        max_hp=max(1, stats.vitality * hp_per_vitality),
        glyph="@",
    )


def spawn_enemy(eid: int, definition: EnemyDef, x: int, y: int) -> Actor:
    return Actor(
        eid=eid,
        kind=ActorKind.ENEMY,
        name=definition.name,
        x=x,
        y=y,
        stats=definition.stats.copy(),
        max_hp=definition.max_hp,
        glyph=definition.glyph,
        def_id=definition.def_id,
        natural_damage=definition.damage,
        natural_mitigation=definition.mitigation,
        aggro_range=definition.aggro_range,
        xp_value=definition.xp,
    )


__all__ = ["Actor", "ActorKind", "EnemyDef", "STAT_NAMES", "Stats", "make_player", "spawn_enemy"]
