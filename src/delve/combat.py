from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import CombatParams
from .entities import Actor
from .map.grid import Grid
from .rng import Dice, DiceRoller

logger = logging.getLogger(__name__)


class AttackKind(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


@dataclass(frozen=True)
class CombatOutcome:
    """Result of a single attack.

    ``raw_damage`` is the rolled damage after crit and before mitigation;
    ``damage`` is what was actually applied to the defender.
    """

    hit: bool
    crit: bool
    damage: int
    raw_damage: int
    killed: bool


# -- derived stats ------------------------------------------------------------


def strength_bonus(actor: Actor) -> int:
    return max(0, (actor.stat("strength") - 10) // 2)


def mitigation(actor: Actor) -> int:
    armor = actor.armor.mitigation if actor.armor is not None else 0
    return armor + actor.natural_mitigation + actor.stat("vitality") // 5


def dodge_chance(
    defender: Actor,
    params: CombatParams,
    kind: AttackKind = AttackKind.MELEE,
    distance: int = 1,
    in_doorway: bool = False,
) -> int:
    chance = min(params.max_dodge, defender.stat("dexterity") // 2)
    if kind is AttackKind.RANGED:
        chance += params.ranged_distance_penalty * max(0, distance - 1)
        if in_doorway:
            chance += params.cover_bonus
    return chance


def damage_dice(attacker: Actor, params: CombatParams, kind: AttackKind = AttackKind.MELEE) -> Dice:
    weapon = attacker.weapon
    if kind is AttackKind.RANGED:
        if weapon is None or not weapon.ranged or weapon.damage is None:
            raise ValueError(f"{attacker.name} has no ranged weapon equipped")
        return weapon.damage
    if weapon is not None and not weapon.ranged and weapon.damage is not None:
        return weapon.damage
    if attacker.natural_damage is not None:
        return attacker.natural_damage
    return Dice.parse(params.unarmed_damage)


def crit_chance(attacker: Actor, params: CombatParams) -> int:
    if attacker.weapon is not None:
        return attacker.weapon.crit_chance
    return params.unarmed_crit_chance


# -- resolution ------------------------------------------------------------------


class CombatResolver:
    """Settles attacks with rolls from a single :class:`DiceRoller`.

    Rolls are taken in a fixed order (dodge d100, damage dice, crit d100) so a
    scripted roller reproduces any outcome.
    """

    def __init__(self, roller: DiceRoller, params: Optional[CombatParams] = None) -> None:
        self.roller = roller
        self.params = params or CombatParams()

    def resolve(
        self,
        attacker: Actor,
        defender: Actor,
        kind: AttackKind = AttackKind.MELEE,
        distance: int = 1,
        grid: Optional[Grid] = None,
        immune: bool = False,
    ) -> CombatOutcome:
        """Roll one attack and apply its damage to ``defender``.

        Args:
            attacker: The attacking actor.
            defender: The target.
            kind: Melee or ranged.
            distance: Tiles between the two, used for the ranged dodge penalty.
            grid: When given, a defender standing in a doorway gets cover against ranged attacks.
            immune: The defender takes no damage (debug god mode).
        """
        if not attacker.alive:
            logger.warning("%s attempted to attack while dead; no action taken.", attacker.name)
            return CombatOutcome(hit=False, crit=False, damage=0, raw_damage=0, killed=not defender.alive)

        in_doorway = grid is not None and grid[defender.pos].is_door
        dodge = dodge_chance(defender, self.params, kind, distance, in_doorway)
        if self.roller.roll(1, 100) <= dodge:
            logger.debug("%s dodged %s (dodge=%d)", defender.name, attacker.name, dodge)
            return CombatOutcome(hit=False, crit=False, damage=0, raw_damage=0, killed=False)

        raw = self.roller.roll_dice(damage_dice(attacker, self.params, kind))
        if kind is AttackKind.MELEE:
            raw += strength_bonus(attacker)
        raw = max(0, raw)
        crit = self.roller.roll(1, 100) <= crit_chance(attacker, self.params)
        if crit:
            raw *= self.params.crit_multiplier

        damage = 0 if immune else max(0, raw - mitigation(defender))
        applied = defender.take_damage(damage)
        logger.debug(
            "%s %s %s: raw=%d crit=%s mitigation=%d applied=%d (HP %d/%d)",
            attacker.name,
            kind.value,
            defender.name,
            raw,
            crit,
            mitigation(defender),
            applied,
            defender.hp,
            defender.max_hp,
        )
        return CombatOutcome(hit=True, crit=crit, damage=applied, raw_damage=raw, killed=not defender.alive)


__all__ = [
    "AttackKind",
    "CombatOutcome",
    "CombatResolver",
    "crit_chance",
    "damage_dice",
    "dodge_chance",
    "mitigation",
    "strength_bonus",
]
