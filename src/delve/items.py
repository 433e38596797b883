from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .rng import Dice


class ItemCategory(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    POTION = "potion"
    FOOD = "food"


class EquipSlot(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"


# Display color per category; every item of a category shares it regardless
# of rarity.
CATEGORY_COLORS: Dict[ItemCategory, str] = {
    ItemCategory.WEAPON: "gray",
    ItemCategory.ARMOR: "yellow",
    ItemCategory.POTION: "magenta",
    ItemCategory.FOOD: "red",
}


@dataclass(frozen=True)
class Item:
    """Immutable item definition; inventories and floors hold these directly."""

    def_id: str
    name: str
    category: ItemCategory
    glyph: str = "?"
    damage: Optional[Dice] = None
    crit_chance: int = 5
    ranged: bool = False
    range: int = 1
    mitigation: int = 0
    effect: Optional[str] = None
    amount: int = 0
    duration: int = 0
    min_depth: int = 1

    @property
    def color(self) -> str:
        return CATEGORY_COLORS[self.category]

    @property
    def slot(self) -> Optional[EquipSlot]:
        if self.category is ItemCategory.WEAPON:
            return EquipSlot.WEAPON
        if self.category is ItemCategory.ARMOR:
            return EquipSlot.ARMOR
        return None

    @property
    def consumable(self) -> bool:
        return self.category in (ItemCategory.POTION, ItemCategory.FOOD)

    @classmethod
    def from_dict(cls, def_id: str, raw: Mapping[str, Any]) -> "Item":
        damage = raw.get("damage")
        return cls(
            def_id=def_id,
            name=str(raw["name"]),
            category=ItemCategory(raw["category"]),
            glyph=str(raw.get("glyph", "?")),
            damage=Dice.parse(damage) if damage is not None else None,
            crit_chance=int(raw.get("crit_chance", 5)),
            ranged=bool(raw.get("ranged", False)),
            range=int(raw.get("range", 1)),
            mitigation=int(raw.get("mitigation", 0)),
            effect=raw.get("effect"),
            amount=int(raw.get("amount", raw.get("nutrition", 0))),
            duration=int(raw.get("duration", 0)),
            min_depth=int(raw.get("min_depth", 1)),
        )


__all__ = ["CATEGORY_COLORS", "EquipSlot", "Item", "ItemCategory"]
