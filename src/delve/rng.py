from __future__ import annotations

import hashlib
import json
import logging
import random
import re
import secrets
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable, List, MutableSequence, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DICE_RE = re.compile(
    r"^\s*(?:(?P<count>\d*)[dD](?P<faces>\d+)|(?P<flat>-?\d+))?\s*(?:(?P<sign>[+-])\s*(?P<mod>\d+))?\s*$"
)


def _to_stable_json(value: Any) -> str:
    """Stable JSON encoding for hashing.

    Ensures consistent ordering and representation across runs, which keeps seed
    derivation deterministic.
    """
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def derive_seed(master: int, domain: str, *identifiers: Any) -> int:
    """Derive a 64-bit integer seed from a master seed and domain identifiers.

    Domain examples: "level", "attempt", "population".
    """
    payload = {
        "domain": domain,
        "ids": identifiers,
        "master": int(master),
        "algo": "blake2b-64",
        "version": 1,
    }
    data = _to_stable_json(payload).encode("utf-8")
    h = hashlib.blake2b(data, digest_size=8)
    seed_int = int.from_bytes(h.digest(), "big", signed=False)
    logger.debug("Derived seed for domain=%s ids=%s -> %d", domain, identifiers, seed_int)
    return seed_int


@dataclass(frozen=True)
class Dice:
    """Dice notation ``NdM+K``: N dice with M faces plus a flat modifier K."""

    count: int
    faces: int
    modifier: int = 0

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"dice count must be >= 0, got {self.count}")
        if self.faces < 1:
            raise ValueError(f"dice faces must be >= 1, got {self.faces}")

    @property
    def minimum(self) -> int:
        return self.count + self.modifier

    @property
    def maximum(self) -> int:
        return self.count * self.faces + self.modifier

    @classmethod
    def parse(cls, text: str) -> "Dice":
        """Parse ``"2d6+1"``, ``"d8"``, ``"1d4-1"`` or a bare integer like ``"3"``."""
        if not isinstance(text, str):
            raise TypeError(f"dice notation must be a string, got {type(text).__name__}")
        m = _DICE_RE.match(text)
        if not m or not text.strip():
            raise ValueError(f"Invalid dice notation: {text!r}")
        modifier = int(m.group("mod")) if m.group("mod") else 0
        if m.group("sign") == "-":
            modifier = -modifier
        if m.group("faces") is None:
            # Constant roll: "3", "-1" or "+2".
            if m.group("flat") is None and m.group("sign") is None:
                raise ValueError(f"Invalid dice notation: {text!r}")
            flat = int(m.group("flat")) if m.group("flat") else 0
            return cls(0, 1, flat + modifier)
        count = int(m.group("count")) if m.group("count") else 1
        return cls(count, int(m.group("faces")), modifier)

    def __str__(self) -> str:
        if self.count == 0:
            return str(self.modifier)
        base = f"{self.count}d{self.faces}"
        if self.modifier > 0:
            return f"{base}+{self.modifier}"
        if self.modifier < 0:
            return f"{base}{self.modifier}"
        return base


class DiceRoller:
    """Seeded source of dice rolls.

    ``roll`` is the single primitive; every other helper is expressed through it
    so that a scripted roller can stand in for the whole source. Instances never
    touch the module-level ``random`` state.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = int.from_bytes(secrets.token_bytes(8), "big")
            logger.info("No seed provided; generated random seed: %d", seed)
        self.seed = int(seed)
        self._rng = random.Random(self.seed)

    def roll(self, count: int, faces: int, modifier: int = 0) -> int:
        """Roll ``count`` dice with ``faces`` sides and add ``modifier``."""
        if count < 0:
            raise ValueError(f"dice count must be >= 0, got {count}")
        if faces < 1:
            raise ValueError(f"dice faces must be >= 1, got {faces}")
        total = 0
        for _ in range(count):
            total += self._rng.randint(1, faces)
        return total + modifier

    def roll_dice(self, dice: Dice) -> int:
        return self.roll(dice.count, dice.faces, dice.modifier)

    def randint(self, a: int, b: int) -> int:
        """Inclusive integer in ``[a, b]`` as a single die roll."""
        if b < a:
            raise ValueError(f"empty range [{a}, {b}]")
        return self.roll(1, b - a + 1, a - 1)

    def percent(self, chance: int) -> bool:
        """True when a d100 roll is at or below ``chance``."""
        return self.roll(1, 100) <= chance

    def choice(self, seq: Sequence[T]) -> T:
        items = list(seq)
        if not items:
            raise ValueError("DiceRoller.choice() received an empty sequence")
        return items[self.roll(1, len(items)) - 1]

    def shuffle(self, items: MutableSequence[T]) -> None:
        """In-place Fisher-Yates shuffle."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def fork(self, domain: str, *identifiers: Any) -> "DiceRoller":
        """Independent roller whose seed depends only on this seed and the identifiers."""
        return DiceRoller(derive_seed(self.seed, domain, *identifiers))


class SequenceRoller(DiceRoller):
    """Roller that replays recorded results before falling back to its seed.

    Each queued value is clamped into the legal range of the requested roll, so a
    scripted ``100`` on a ``1d100`` hit check and a scripted ``100`` on a ``1d6``
    damage roll both stay valid.
    """

    def __init__(self, values: Iterable[int], seed: int = 0) -> None:
        super().__init__(seed)
        self._queue = deque(int(v) for v in values)
        self.calls: List[tuple[int, int, int]] = []

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def push(self, *values: int) -> None:
        self._queue.extend(int(v) for v in values)

    def roll(self, count: int, faces: int, modifier: int = 0) -> int:
        self.calls.append((count, faces, modifier))
        if not self._queue:
            return super().roll(count, faces, modifier)
        value = self._queue.popleft()
        low = count + modifier
        high = count * faces + modifier
        return max(low, min(high, value))


__all__ = ["Dice", "DiceRoller", "SequenceRoller", "derive_seed"]
