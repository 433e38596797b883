from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .entities import Actor
from .items import Item, ItemCategory

logger = logging.getLogger(__name__)

# Effect names carried by consumable item definitions.
HEAL = "heal"
STRENGTH = "strength"
DEXTERITY = "dexterity"

# Damage over time applied by repeated healing potions, per overdose step.
_HEAL_OVERDOSE_POISON = (20, 35, 45)
_POISON_TICKS = 10
_OVERWORK_DAMAGE_PER_TICK = 2
_OVERWORK_TICKS = 5
_CRAMP_DURATION = 2


class EffectKind(str, Enum):
    BUFF = "buff"
    POISON = "poison"
    FATIGUE = "fatigue"
    CRAMP = "cramp"


@dataclass
class ActiveEffect:
    """A timed modifier on an actor.

    Stat effects add ``delta`` to ``stat`` while active; poison deals
    ``damage_per_tick`` each round. ``remaining`` counts rounds left.
    """

    kind: EffectKind
    remaining: int
    stat: Optional[str] = None
    delta: int = 0
    damage_per_tick: int = 0

    @property
    def expired(self) -> bool:
        return self.remaining <= 0


@dataclass
class ConsumeResult:
    healed: int = 0
    applied: List[ActiveEffect] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    overdose: bool = False


@dataclass
class TickResult:
    damage: int = 0
    expired: List[ActiveEffect] = field(default_factory=list)


class OverdoseTracker:
    """Per-effect usage counters that decay by one every ``decay_rounds`` rounds."""

    def __init__(self, threshold: int = 3, decay_rounds: int = 20) -> None:
        if threshold < 1 or decay_rounds < 1:
            raise ValueError("threshold and decay_rounds must be >= 1")
        self.threshold = threshold
        self.decay_rounds = decay_rounds
        self._counts: Dict[str, int] = {}

    def record(self, effect: str) -> int:
        self._counts[effect] = self._counts.get(effect, 0) + 1
        return self._counts[effect]

    def count(self, effect: str) -> int:
        return self._counts.get(effect, 0)

    def on_round(self, round_number: int) -> bool:
        """Decay all counters on every ``decay_rounds``-th round; True when a decay happened."""
        if round_number % self.decay_rounds != 0 or not self._counts:
            return False
        self._counts = {k: v - 1 for k, v in self._counts.items() if v > 1}
        logger.debug("Overdose counters decayed at round %d: %s", round_number, self._counts)
        return True

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)


def consume(actor: Actor, item: Item, tracker: OverdoseTracker) -> ConsumeResult:
    """Apply a potion or food item to ``actor``.

    Potions count toward overdose: from the tracker's threshold onwards a
    healing potion still heals but also poisons, and stat potions turn into
    a penalty (fatigue for strength, cramp for dexterity), with poison added
    on top once the count runs past the threshold.
    """
    if item.category is ItemCategory.FOOD:
        healed = actor.heal(item.amount)
        return ConsumeResult(healed=healed, messages=[f"You eat the {item.name} and regain {healed} HP."])
    if item.category is not ItemCategory.POTION:
        raise ValueError(f"{item.def_id} is not consumable")

    result = ConsumeResult()
    count = tracker.record(item.effect or item.def_id)
    over = count - tracker.threshold  # >= 0 means overdosing

    if item.effect == HEAL:
        result.healed = actor.heal(item.amount)
        result.messages.append(f"You regain {result.healed} HP.")
        if over >= 0:
            total = _HEAL_OVERDOSE_POISON[min(over, len(_HEAL_OVERDOSE_POISON) - 1)]
            result.applied.append(
                ActiveEffect(EffectKind.POISON, _POISON_TICKS, damage_per_tick=total // _POISON_TICKS)
            )
            result.messages.append(f"Poisoned! You will take {total} HP damage over time.")
    elif item.effect in (STRENGTH, DEXTERITY):
        if over < 0:
            result.applied.append(ActiveEffect(EffectKind.BUFF, item.duration, stat=item.effect, delta=item.amount))
            result.messages.append(f"{item.effect.capitalize()} increased by {item.amount} for {item.duration} turns.")
        elif item.effect == STRENGTH:
            penalty = max(1, item.amount // 2)
            result.applied.append(ActiveEffect(EffectKind.FATIGUE, item.duration, stat=STRENGTH, delta=-penalty))
            result.messages.append(f"Fatigued! Strength reduced by {penalty} for {item.duration} turns.")
        else:
            result.applied.append(ActiveEffect(EffectKind.CRAMP, _CRAMP_DURATION, stat=DEXTERITY, delta=-item.amount))
            result.messages.append(f"Cramp! Dexterity reduced by {item.amount} for {_CRAMP_DURATION} turns.")
        if over >= 1:
            result.applied.append(
                ActiveEffect(EffectKind.POISON, _OVERWORK_TICKS, damage_per_tick=_OVERWORK_DAMAGE_PER_TICK)
            )
            result.messages.append(
                f"Overworked! You will take {_OVERWORK_DAMAGE_PER_TICK * _OVERWORK_TICKS} HP damage "
                f"over {_OVERWORK_TICKS} turns."
            )
    else:
        raise ValueError(f"Unknown potion effect: {item.effect!r}")

    result.overdose = over >= 0
    actor.effects.extend(result.applied)
    logger.debug("%s consumed %s (count=%d): %s", actor.name, item.def_id, count, result.messages)
    return result


def tick_effects(actor: Actor, immune: bool = False) -> TickResult:
    """Advance every effect on ``actor`` by one round; poison damage is skipped when ``immune``."""
    result = TickResult()
    for effect in actor.effects:
        if effect.kind is EffectKind.POISON and not immune:
            result.damage += actor.take_damage(effect.damage_per_tick)
        effect.remaining -= 1
    result.expired = [e for e in actor.effects if e.expired]
    actor.effects = [e for e in actor.effects if not e.expired]
    return result


__all__ = [
    "ActiveEffect",
    "ConsumeResult",
    "EffectKind",
    "OverdoseTracker",
    "TickResult",
    "consume",
    "tick_effects",
]
