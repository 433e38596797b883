from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..ai import EnemyAction, EnemyActionKind, EnemyBehavior
from ..combat import AttackKind, CombatOutcome, CombatResolver, crit_chance, damage_dice, dodge_chance, mitigation
from ..config import GameConfig
from ..data.loader import DefinitionTables, load_definitions
from ..dungeon.generator import DungeonGenerator
from ..dungeon.level import Level
from ..effects import OverdoseTracker, consume, tick_effects
from ..entities import STAT_NAMES, Actor, Stats, make_player
from ..events import EventLog, EventType, GameEvent
from ..exceptions import DebugCommandError, GameOverError
from ..fov.fov import has_line_of_sight
from ..fov.fog_of_war import FogTileState
from ..items import EquipSlot, Item
from ..map.grid import Coord, Tile
from ..rng import DiceRoller, derive_seed
from .debug import parse_debug_command
from .intents import (
    DEBUG_INTENTS,
    MODE_INTENTS,
    Ascend,
    CancelMode,
    ConfirmTarget,
    DebugGodMode,
    DebugNoclip,
    DebugRevealAll,
    DebugSetStat,
    DebugSpawnItem,
    DebugTeleport,
    Descend,
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
from .snapshot import LevelSnapshot, PlayerStatsView

logger = logging.getLogger(__name__)

PLAYER_EID = 0

_TILE_NAMES = {
    Tile.WALL: "a wall",
    Tile.FLOOR: "the floor",
    Tile.DOOR_CLOSED: "a closed door",
    Tile.DOOR_OPEN: "an open door",
    Tile.STAIRS_UP: "stairs leading up",
    Tile.STAIRS_DOWN: "stairs leading down",
}


class GameState(str, Enum):
    AWAITING_INPUT = "awaiting_input"
    RESOLVING_PLAYER_ACTION = "resolving_player_action"
    ADVANCING_WORLD = "advancing_world"
    ENEMY_TURN = "enemy_turn"
    GAME_OVER = "game_over"


class SubMode(str, Enum):
    NONE = "none"
    LOOK = "look"
    RANGED_TARGETING = "ranged_targeting"


@dataclass(frozen=True)
class TickResult:
    events: Tuple[GameEvent, ...]
    turn_consumed: bool
    state: GameState


class TurnScheduler:
    """Owns the run: the player, the level cache and the turn state machine.

    Every submitted intent is resolved synchronously. An intent that consumes a
    turn is followed by exactly one world advance (round counter, effects,
    overdose decay, visibility) and one enemy pass in spawn order. Rejected
    intents, sub-mode navigation and debug commands consume no turn.

    Levels are generated on first arrival at a depth from
    ``derive_seed(seed, "level", depth)`` and cached for the rest of the run.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        tables: Optional[DefinitionTables] = None,
        roller: Optional[DiceRoller] = None,
        player_name: str = "Hero",
    ) -> None:
        self.config = config or GameConfig()
        self.seed = seed if seed is not None else DiceRoller().seed
        self.tables = tables or load_definitions()
        self.roller = roller or DiceRoller(derive_seed(self.seed, "combat"))
        self.generator = DungeonGenerator(self.config.generation, self.config.gauntlet, self.tables)
        self.combat = CombatResolver(self.roller, self.config.combat)
        self.behavior = EnemyBehavior(self.config.ai_max_path_iterations)
        self.events = EventLog()
        self.overdose = OverdoseTracker(self.config.overdose_threshold, self.config.overdose_decay_rounds)
        self.player = make_player(
            PLAYER_EID, Stats.from_dict(self.config.player_stats), self.config.hp_per_vitality, name=player_name
        )
        self.levels: Dict[int, Level] = {}
        self.level: Level
        self.state = GameState.AWAITING_INPUT
        self.mode = SubMode.NONE
        self.cursor: Optional[Coord] = None
        self.round = 0
        self.noclip = False
        self.god_mode = False
        self.last_enemy_actions: List[Tuple[int, EnemyAction]] = []
        self._enter_level(1, descending=True)
        logger.info("New run (seed=%d) starting at depth 1", self.seed)

    # -- queries ----------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self.level.depth

    @property
    def game_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    def sight_radius(self) -> int:
        return self.config.sight_radius(self.player.stat("perception"))

    def snapshot(self) -> LevelSnapshot:
        return LevelSnapshot.capture(
            self.level, self.player, self.round, self.state.value, self.mode.value, self.cursor
        )

    def player_stats(self) -> PlayerStatsView:
        p = self.player
        return PlayerStatsView(
            hp=p.hp,
            max_hp=p.max_hp,
            level=p.level,
            experience=p.experience,
            strength=p.stat("strength"),
            dexterity=p.stat("dexterity"),
            vitality=p.stat("vitality"),
            perception=p.stat("perception"),
            mitigation=mitigation(p),
            dodge=dodge_chance(p, self.config.combat),
            damage=str(damage_dice(p, self.config.combat)),
            crit_chance=crit_chance(p, self.config.combat),
            sight_radius=self.sight_radius(),
            weapon=p.weapon.name if p.weapon else None,
            armor=p.armor.name if p.armor else None,
            inventory=tuple(item.name for item in p.inventory),
            effects=tuple(f"{e.kind.value}:{e.stat or ''}{e.delta:+d}/{e.remaining}" for e in p.effects),
        )

    def inspect(self, pos: Coord) -> str:
        """Describe what the player knows about ``pos``."""
        grid = self.level.grid
        if not grid.in_bounds(*pos):
            return "Nothing is there."
        fog = self.level.visibility.state(*pos)
        if fog is FogTileState.UNKNOWN:
            return "You have not explored that spot."
        parts: List[str] = []
        if pos == self.player.pos:
            parts.append("you")
        if fog is FogTileState.VISIBLE:
            enemy = self.level.enemy_at(pos)
            if enemy is not None:
                parts.append(f"{enemy.name} ({enemy.hp}/{enemy.max_hp} HP)")
            parts.extend(fi.item.name for fi in self.level.items_at(pos))
        parts.append(_TILE_NAMES[grid[pos]])
        prefix = "You see" if fog is FogTileState.VISIBLE else "You remember"
        return f"{prefix} {', '.join(parts)}."

    # -- submission -----------------------------------------------------------------

    def submit(self, intent: Intent) -> TickResult:
        if self.state is GameState.GAME_OVER:
            raise GameOverError("The game is over; no further actions are accepted")
        start = len(self.events)
        self.state = GameState.RESOLVING_PLAYER_ACTION
        consumed = self._resolve(intent)
        if consumed and self.player.alive:
            self._advance_world()
            if self.player.alive:
                self._enemy_turn()
        else:
            self._update_visibility()
        if not self.player.alive:
            self._end_game()
        else:
            self.state = GameState.AWAITING_INPUT
        return TickResult(tuple(self.events.since(start)), consumed, self.state)

    def submit_command(self, text: str) -> TickResult:
        """Parse a debug console line and submit it; malformed input is rejected."""
        if self.state is GameState.GAME_OVER:
            raise GameOverError("The game is over; no further actions are accepted")
        try:
            intent = parse_debug_command(text)
        except DebugCommandError as e:
            event = self._emit(EventType.REJECTED, f"Debug command rejected: {e}", reason="bad_command")
            return TickResult((event,), False, self.state)
        return self.submit(intent)

    # -- resolution -----------------------------------------------------------------

    def _resolve(self, intent: Intent) -> bool:
        if isinstance(intent, DEBUG_INTENTS):
            self._resolve_debug(intent)
            return False
        if self.mode is not SubMode.NONE and not isinstance(intent, MODE_INTENTS):
            return self._reject(f"Finish {self.mode.value} mode first.", "in_mode")

        if isinstance(intent, Move):
            return self._move(intent)
        if isinstance(intent, Wait):
            self._emit(EventType.WAIT, "You wait.", actor=PLAYER_EID)
            return True
        if isinstance(intent, PickUp):
            if not self.level.items_at(self.player.pos):
                return self._reject("There is nothing here to pick up.", "nothing_here")
            return self._pick_up()
        if isinstance(intent, UseItem):
            return self._use(intent.slot)
        if isinstance(intent, DropItem):
            return self._drop(intent.slot)
        if isinstance(intent, Equip):
            return self._equip(intent.slot)
        if isinstance(intent, Unequip):
            return self._unequip(intent.slot)
        if isinstance(intent, Descend):
            if self.level.grid[self.player.pos] is not Tile.STAIRS_DOWN:
                return self._reject("There are no stairs down here.", "no_stairs")
            self._change_level(self.depth + 1)
            return True
        if isinstance(intent, Ascend):
            if self.level.grid[self.player.pos] is not Tile.STAIRS_UP:
                return self._reject("There are no stairs up here.", "no_stairs")
            self._change_level(self.depth - 1)
            return True
        if isinstance(intent, EnterLookMode):
            self._set_mode(SubMode.LOOK, self.player.pos)
            return False
        if isinstance(intent, EnterRangedMode):
            return self._enter_ranged_mode()
        if isinstance(intent, MoveCursor):
            return self._move_cursor(intent)
        if isinstance(intent, ConfirmTarget):
            return self._confirm_target()
        if isinstance(intent, CancelMode):
            if self.mode is SubMode.NONE:
                return self._reject("Nothing to cancel.", "no_mode")
            self._set_mode(SubMode.NONE, None)
            return False
        return self._reject(f"Unknown intent {intent!r}.", "unknown_intent")

    def _reject(self, message: str, reason: str) -> bool:
        self._emit(EventType.REJECTED, message, reason=reason)
        return False

    def _move(self, intent: Move) -> bool:
        player = self.player
        target = (player.x + intent.direction.dx, player.y + intent.direction.dy)
        grid = self.level.grid
        if not grid.in_bounds(*target):
            return self._reject("You cannot go that way.", "out_of_bounds")

        enemy = self.level.enemy_at(target)
        if enemy is not None:
            self._player_attack(enemy, AttackKind.MELEE, 1)
            return True

        tile = grid[target]
        if not self.noclip:
            if tile is Tile.WALL:
                return self._reject("You bump into a wall.", "wall")
            if tile is Tile.DOOR_CLOSED:
                grid.open_door(*target)
                self._emit(EventType.DOOR, "You open the door.", actor=PLAYER_EID, pos=target)
                return True

        origin = player.pos
        player.move_to(*target)
        self._emit(EventType.MOVE, f"You move to {target}.", actor=PLAYER_EID, origin=origin, pos=target)
        if tile is Tile.STAIRS_DOWN:
            self._change_level(self.depth + 1)
        elif tile is Tile.STAIRS_UP and self.depth > 1:
            self._change_level(self.depth - 1)
        elif self.level.items_at(target):
            self._pick_up()
        return True

    def _pick_up(self) -> bool:
        """Pick up everything under the player that fits; False when nothing fit."""
        picked = False
        for floor_item in self.level.items_at(self.player.pos):
            if len(self.player.inventory) >= self.config.inventory_capacity:
                self._emit(EventType.REJECTED, "Your pack is full.", reason="inventory_full")
                break
            picked = True
            self.level.remove_item(floor_item)
            self.player.inventory.append(floor_item.item)
            self._emit(
                EventType.PICKUP,
                f"You pick up the {floor_item.item.name}.",
                actor=PLAYER_EID,
                item=floor_item.item.def_id,
                color=floor_item.item.color,
            )
        return picked

    def _inventory_item(self, slot: int) -> Optional[Item]:
        if 0 <= slot < len(self.player.inventory):
            return self.player.inventory[slot]
        return None

    def _use(self, slot: int) -> bool:
        item = self._inventory_item(slot)
        if item is None:
            return self._reject(f"No item in slot {slot}.", "bad_slot")
        if not item.consumable:
            return self._reject(f"You cannot use the {item.name}.", "not_consumable")
        self.player.inventory.pop(slot)
        result = consume(self.player, item, self.overdose)
        self._emit(
            EventType.USE, f"You use the {item.name}.", actor=PLAYER_EID, item=item.def_id, healed=result.healed
        )
        for message in result.messages:
            self._emit(EventType.EFFECT, message, actor=PLAYER_EID, overdose=result.overdose)
        return True

    def _drop(self, slot: int) -> bool:
        item = self._inventory_item(slot)
        if item is None:
            return self._reject(f"No item in slot {slot}.", "bad_slot")
        self.player.inventory.pop(slot)
        self.level.add_item(self.player.pos, item)
        self._emit(EventType.DROP, f"You drop the {item.name}.", actor=PLAYER_EID, item=item.def_id)
        return True

    def _equip(self, slot: int) -> bool:
        item = self._inventory_item(slot)
        if item is None:
            return self._reject(f"No item in slot {slot}.", "bad_slot")
        if item.slot is None:
            return self._reject(f"You cannot equip the {item.name}.", "not_equippable")
        self.player.inventory.pop(slot)
        if item.slot is EquipSlot.WEAPON:
            previous, self.player.weapon = self.player.weapon, item
        else:
            previous, self.player.armor = self.player.armor, item
        if previous is not None:
            self.player.inventory.append(previous)
        self._emit(EventType.EQUIP, f"You equip the {item.name}.", actor=PLAYER_EID, item=item.def_id)
        return True

    def _unequip(self, slot: EquipSlot) -> bool:
        item = self.player.weapon if slot is EquipSlot.WEAPON else self.player.armor
        if item is None:
            return self._reject(f"Nothing equipped as {slot.value}.", "empty_slot")
        if len(self.player.inventory) >= self.config.inventory_capacity:
            return self._reject("Your pack is full.", "inventory_full")
        if slot is EquipSlot.WEAPON:
            self.player.weapon = None
        else:
            self.player.armor = None
        self.player.inventory.append(item)
        self._emit(EventType.UNEQUIP, f"You take off the {item.name}.", actor=PLAYER_EID, item=item.def_id)
        return True

    # -- sub-modes ------------------------------------------------------------------

    def _set_mode(self, mode: SubMode, cursor: Optional[Coord]) -> None:
        self.mode = mode
        self.cursor = cursor
        self._emit(EventType.MODE, f"Mode: {mode.value}.", mode=mode.value, cursor=cursor)

    def _enter_ranged_mode(self) -> bool:
        weapon = self.player.weapon
        if weapon is None or not weapon.ranged:
            return self._reject("You have no ranged weapon equipped.", "no_ranged_weapon")
        targets = [e for e in self.level.living_enemies() if self._valid_ranged_target(e.pos)]
        targets.sort(key=lambda e: (self._distance(e.pos), e.eid))
        self._set_mode(SubMode.RANGED_TARGETING, targets[0].pos if targets else self.player.pos)
        return False

    def _move_cursor(self, intent: MoveCursor) -> bool:
        if self.mode is SubMode.NONE or self.cursor is None:
            return self._reject("No cursor to move.", "no_mode")
        grid = self.level.grid
        x = min(max(self.cursor[0] + intent.direction.dx, 0), grid.width - 1)
        y = min(max(self.cursor[1] + intent.direction.dy, 0), grid.height - 1)
        self.cursor = (x, y)
        self._emit(EventType.INSPECT, self.inspect(self.cursor), cursor=self.cursor)
        return False

    def _confirm_target(self) -> bool:
        if self.mode is SubMode.NONE or self.cursor is None:
            return self._reject("Nothing to confirm.", "no_mode")
        if self.mode is SubMode.LOOK:
            self._emit(EventType.INSPECT, self.inspect(self.cursor), cursor=self.cursor)
            self._set_mode(SubMode.NONE, None)
            return False
        enemy = self.level.enemy_at(self.cursor)
        if enemy is None or not self._valid_ranged_target(enemy.pos):
            return self._reject("No valid target there.", "bad_target")
        distance = self._distance(enemy.pos)
        self._set_mode(SubMode.NONE, None)
        self._player_attack(enemy, AttackKind.RANGED, distance)
        return True

    def _distance(self, pos: Coord) -> int:
        return abs(pos[0] - self.player.x) + abs(pos[1] - self.player.y)

    def _valid_ranged_target(self, pos: Coord) -> bool:
        weapon = self.player.weapon
        if weapon is None or not weapon.ranged:
            return False
        return (
            self.level.visibility.is_visible(pos)
            and 0 < self._distance(pos) <= weapon.range
            and has_line_of_sight(self.level.grid, self.player.pos, pos)
        )

    # -- combat ----------------------------------------------------------------------

    def _player_attack(self, enemy: Actor, kind: AttackKind, distance: int) -> CombatOutcome:
        outcome = self.combat.resolve(self.player, enemy, kind, distance, self.level.grid)
        self._report_attack(self.player, enemy, kind, outcome)
        if outcome.killed:
            self.level.purge_dead()
            gained = self.player.gain_experience(
                enemy.xp_value, self.config.xp_per_level, self.config.hp_per_vitality
            )
            for _ in range(gained):
                self._emit(
                    EventType.LEVEL_UP,
                    f"You reach level {self.player.level}!",
                    actor=PLAYER_EID,
                    level=self.player.level,
                )
        return outcome

    def _report_attack(self, attacker: Actor, defender: Actor, kind: AttackKind, outcome: CombatOutcome) -> None:
        if not outcome.hit:
            self._emit(
                EventType.MISS,
                f"{attacker.name} misses {defender.name}.",
                actor=attacker.eid,
                target=defender.eid,
                kind=kind.value,
            )
            return
        crit = " Critical hit!" if outcome.crit else ""
        self._emit(
            EventType.ATTACK,
            f"{attacker.name} hits {defender.name} for {outcome.damage} damage.{crit}",
            actor=attacker.eid,
            target=defender.eid,
            kind=kind.value,
            damage=outcome.damage,
            raw_damage=outcome.raw_damage,
            crit=outcome.crit,
        )
        if outcome.killed:
            self._emit(EventType.DEATH, f"{defender.name} dies.", actor=defender.eid, killer=attacker.eid)

    # -- world & enemies ----------------------------------------------------------------

    def _advance_world(self) -> None:
        self.state = GameState.ADVANCING_WORLD
        self.round += 1
        ticked = tick_effects(self.player, immune=self.god_mode)
        if ticked.damage:
            self._emit(EventType.EFFECT, f"Poison deals {ticked.damage} damage.", actor=PLAYER_EID,
                       damage=ticked.damage)
        for effect in ticked.expired:
            self._emit(EventType.EFFECT, f"The {effect.kind.value} effect wears off.", actor=PLAYER_EID,
                       expired=effect.kind.value)
        self.overdose.on_round(self.round)
        self._update_visibility()
        if not self.player.alive:
            self._emit(EventType.DEATH, f"{self.player.name} succumbs to poison.", actor=PLAYER_EID)

    def _enemy_turn(self) -> None:
        self.state = GameState.ENEMY_TURN
        self.last_enemy_actions = []
        for enemy in list(self.level.enemies):
            if not self.player.alive:
                break
            if not enemy.alive:
                continue
            occupied = {e.pos for e in self.level.living_enemies() if e is not enemy}
            action = self.behavior.decide(enemy, self.player, self.level, occupied)
            if action.kind is EnemyActionKind.IDLE:
                continue
            self.last_enemy_actions.append((enemy.eid, action))
            self._perform_enemy_action(enemy, action, occupied)
        self.level.purge_dead()

    def _perform_enemy_action(self, enemy: Actor, action: EnemyAction, occupied: set) -> None:
        target = action.target
        if action.kind is EnemyActionKind.ATTACK:
            outcome = self.combat.resolve(enemy, self.player, AttackKind.MELEE, 1, immune=self.god_mode)
            self._report_attack(enemy, self.player, AttackKind.MELEE, outcome)
        elif action.kind is EnemyActionKind.OPEN_DOOR and target is not None:
            if self.level.grid.open_door(*target):
                self._emit(EventType.DOOR, f"{enemy.name} opens a door.", actor=enemy.eid, pos=target)
        elif action.kind is EnemyActionKind.MOVE and target is not None:
            if target in occupied or target == self.player.pos:
                return
            origin = enemy.pos
            enemy.move_to(*target)
            self._emit(EventType.MOVE, f"{enemy.name} moves.", actor=enemy.eid, origin=origin, pos=target)

    def _end_game(self) -> None:
        self.state = GameState.GAME_OVER
        self.mode = SubMode.NONE
        self.cursor = None
        self._emit(
            EventType.GAME_OVER,
            f"{self.player.name} has died on depth {self.depth} after {self.round} rounds.",
            depth=self.depth,
            rounds=self.round,
        )

    # -- levels ------------------------------------------------------------------------

    def _enter_level(self, depth: int, descending: bool) -> None:
        first_visit = depth not in self.levels
        if first_visit:
            self.levels[depth] = self.generator.generate(depth, derive_seed(self.seed, "level", depth))
        self.level = self.levels[depth]
        arrival = self.level.entry if descending else self.level.stairs_down
        self.player.move_to(*self._free_tile_near(arrival))
        self.mode = SubMode.NONE
        self.cursor = None
        self._update_visibility()
        if first_visit and self.level.gauntlet:
            self._emit(EventType.GAUNTLET, f"Depth {depth} is a gauntlet. Brace yourself.", depth=depth)

    def _change_level(self, depth: int) -> None:
        descending = depth > self.depth
        self._enter_level(depth, descending)
        verb = "descend" if descending else "climb"
        self._emit(EventType.STAIRS, f"You {verb} to depth {depth}.", actor=PLAYER_EID, depth=depth)

    def _free_tile_near(self, pos: Coord) -> Coord:
        """``pos`` itself unless an enemy stands there; otherwise the nearest free open tile."""
        grid = self.level.grid
        seen = {pos}
        queue = deque([pos])
        while queue:
            current = queue.popleft()
            if self.level.enemy_at(current) is None:
                return current
            for nxt in grid.neighbors4(*current):
                if nxt not in seen and grid[nxt].walkable:
                    seen.add(nxt)
                    queue.append(nxt)
        return pos

    def _update_visibility(self) -> None:
        self.level.visibility.update(self.level.grid, self.player.pos, self.sight_radius())

    # -- debug ----------------------------------------------------------------------------

    def _resolve_debug(self, intent: Intent) -> None:
        player = self.player
        if isinstance(intent, DebugTeleport):
            target = (intent.x, intent.y)
            if not self.level.grid.in_bounds(*target):
                self._reject(f"Teleport target {target} is out of bounds.", "out_of_bounds")
                return
            if self.level.enemy_at(target) is not None:
                self._reject(f"Teleport target {target} is occupied.", "occupied")
                return
            player.move_to(*target)
            self._emit(EventType.DEBUG, f"Teleported to {target}.", command="teleport", pos=target)
        elif isinstance(intent, DebugSetStat):
            if intent.stat in STAT_NAMES:
                player.stats.set(intent.stat, max(0, intent.value))
            elif intent.stat == "max_hp":
                player.max_hp = max(1, intent.value)
                player.hp = min(player.hp, player.max_hp)
            elif intent.stat == "hp":
                player.hp = min(max(0, intent.value), player.max_hp)
            else:
                self._reject(f"Unknown stat {intent.stat!r}.", "bad_stat")
                return
            self._emit(EventType.DEBUG, f"Set {intent.stat} to {intent.value}.", command="set", stat=intent.stat)
        elif isinstance(intent, DebugRevealAll):
            self.level.visibility.reveal_all()
            self._emit(EventType.DEBUG, "Level revealed.", command="reveal")
        elif isinstance(intent, DebugNoclip):
            self.noclip = (not self.noclip) if intent.enabled is None else intent.enabled
            self._emit(EventType.DEBUG, f"Noclip {'on' if self.noclip else 'off'}.", command="noclip",
                       enabled=self.noclip)
        elif isinstance(intent, DebugGodMode):
            self.god_mode = (not self.god_mode) if intent.enabled is None else intent.enabled
            self._emit(EventType.DEBUG, f"God mode {'on' if self.god_mode else 'off'}.", command="god",
                       enabled=self.god_mode)
        elif isinstance(intent, DebugSpawnItem):
            if intent.def_id not in self.tables.items:
                self._reject(f"Unknown item {intent.def_id!r}.", "unknown_item")
                return
            item = self.tables.item(intent.def_id)
            if len(player.inventory) < self.config.inventory_capacity:
                player.inventory.append(item)
                where = "pack"
            else:
                self.level.add_item(player.pos, item)
                where = "floor"
            self._emit(EventType.DEBUG, f"Spawned {item.name} ({where}).", command="spawn", item=item.def_id)

    def _emit(self, event_type: EventType, message: str, **data) -> GameEvent:
        return self.events.emit(event_type, message, self.round, **data)


__all__ = ["GameState", "SubMode", "TickResult", "TurnScheduler"]
