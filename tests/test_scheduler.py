import pytest

from delve.ai import EnemyActionKind
from delve.data.loader import load_definitions
from delve.dungeon.level import Level
from delve.engine.intents import (
    Ascend,
    CancelMode,
    ConfirmTarget,
    Descend,
    Direction,
    DropItem,
    EnterLookMode,
    EnterRangedMode,
    Equip,
    Move,
    MoveCursor,
    PickUp,
    Unequip,
    UseItem,
    Wait,
)
from delve.engine.scheduler import GameState, SubMode, TurnScheduler
from delve.entities import spawn_enemy
from delve.events import EventType
from delve.exceptions import GameOverError
from delve.items import EquipSlot
from delve.map.grid import Grid, Tile
from delve.rng import SequenceRoller

ROOM = [
    "#########",
    "#.......#",
    "#.......#",
    "#...>...#",
    "#########",
]


@pytest.fixture(scope="module")
def tables():
    return load_definitions()


def install(sched, rows, player_pos, depth=1):
    """Swap in a hand-drawn level so tests do not depend on generated layouts."""
    grid = Grid.from_ascii(rows)
    down = grid.positions(Tile.STAIRS_DOWN)
    up = grid.positions(Tile.STAIRS_UP)
    level = Level(
        depth=depth,
        grid=grid,
        rooms=[],
        entry=up[0] if up else player_pos,
        stairs_down=down[0] if down else player_pos,
        stairs_up=up[0] if up else None,
        gauntlet=False,
        seed=0,
    )
    sched.levels[depth] = level
    sched.level = level
    sched.player.move_to(*player_pos)
    level.visibility.update(grid, player_pos, sched.sight_radius())
    return level


def types(result):
    return [e.type for e in result.events]


@pytest.fixture
def sched(tables):
    return TurnScheduler(seed=42, tables=tables)


def test_new_run_starts_on_depth_one(sched):
    assert sched.depth == 1
    assert sched.round == 0
    assert sched.state is GameState.AWAITING_INPUT
    assert sched.player.pos == sched.level.entry
    assert sched.level.visibility.is_visible(sched.player.pos)
    assert not [e for e in sched.level.enemies if e.pos == sched.player.pos]


def test_same_seed_same_first_level(tables):
    a = TurnScheduler(seed=5, tables=tables)
    b = TurnScheduler(seed=5, tables=tables)
    assert a.level.grid == b.level.grid
    assert [e.pos for e in a.level.enemies] == [e.pos for e in b.level.enemies]


def test_wait_with_adjacent_enemy_gives_one_enemy_action(sched, tables):
    level = install(sched, ROOM, (2, 2))
    goblin = spawn_enemy(900, tables.enemy("goblin"), 3, 2)
    level.enemies.append(goblin)

    result = sched.submit(Wait())

    assert result.turn_consumed
    assert sched.round == 1
    assert len(sched.last_enemy_actions) == 1
    eid, action = sched.last_enemy_actions[0]
    assert eid == 900 and action.kind is EnemyActionKind.ATTACK
    enemy_swings = [e for e in result.events if e.type in (EventType.ATTACK, EventType.MISS)]
    assert len(enemy_swings) == 1
    assert result.state is GameState.AWAITING_INPUT


def test_move_into_wall_is_rejected_without_a_turn(sched):
    install(sched, ROOM, (1, 1))
    result = sched.submit(Move(Direction.LEFT))
    assert not result.turn_consumed
    assert types(result) == [EventType.REJECTED]
    assert sched.round == 0
    assert sched.player.pos == (1, 1)


def test_noclip_walks_through_walls(sched):
    install(sched, ROOM, (1, 1))
    assert not sched.submit_command("noclip on").turn_consumed
    result = sched.submit(Move(Direction.LEFT))
    assert result.turn_consumed
    assert sched.player.pos == (0, 1)


def test_plain_move_consumes_a_turn(sched):
    install(sched, ROOM, (1, 1))
    result = sched.submit(Move(Direction.RIGHT))
    assert result.turn_consumed
    assert sched.player.pos == (2, 1)
    assert EventType.MOVE in types(result)
    assert sched.round == 1


def test_bumping_a_closed_door_opens_it(sched):
    level = install(sched, ["#####", "#.+.#", "#####"], (1, 1))
    result = sched.submit(Move(Direction.RIGHT))
    assert result.turn_consumed
    assert level.grid[(2, 1)] is Tile.DOOR_OPEN
    assert sched.player.pos == (1, 1)
    assert EventType.DOOR in types(result)


def test_bumping_an_enemy_attacks(sched, tables):
    level = install(sched, ROOM, (2, 2))
    goblin = spawn_enemy(900, tables.enemy("goblin"), 3, 2)
    level.enemies.append(goblin)
    result = sched.submit(Move(Direction.RIGHT))
    assert result.turn_consumed
    assert sched.player.pos == (2, 2)
    first = result.events[0]
    assert first.type in (EventType.ATTACK, EventType.MISS)
    assert first.data["actor"] == 0 and first.data["target"] == 900


def test_killing_an_enemy_awards_experience(tables):
    sched = TurnScheduler(seed=1, tables=tables, roller=SequenceRoller([100, 1, 100]))
    level = install(sched, ROOM, (2, 2))
    goblin = spawn_enemy(900, tables.enemy("goblin"), 3, 2)
    goblin.hp = 1
    level.enemies.append(goblin)
    result = sched.submit(Move(Direction.RIGHT))
    assert EventType.DEATH in types(result)
    assert goblin not in level.enemies
    assert sched.player.experience == 25


def test_level_up_event(tables):
    sched = TurnScheduler(seed=1, tables=tables, roller=SequenceRoller([100, 1, 100]))
    level = install(sched, ROOM, (2, 2))
    sched.player.experience = 90
    goblin = spawn_enemy(900, tables.enemy("goblin"), 3, 2)
    goblin.hp = 1
    level.enemies.append(goblin)
    result = sched.submit(Move(Direction.RIGHT))
    assert EventType.LEVEL_UP in types(result)
    assert sched.player.level == 2
    assert sched.player.stats.strength == 11


def test_stairs_descend_and_ascend_use_the_cache(sched):
    top = install(sched, ROOM, (3, 3))
    result = sched.submit(Move(Direction.RIGHT))
    assert sched.depth == 2
    assert EventType.STAIRS in types(result)
    below = sched.level
    assert sched.player.pos == below.entry
    assert below.grid[below.entry] is Tile.STAIRS_UP

    result = sched.submit(Ascend())
    assert result.turn_consumed
    assert sched.depth == 1
    assert sched.level is top
    assert sched.player.pos == top.stairs_down

    sched.submit(Descend())
    assert sched.level is below


def test_stair_intents_need_stairs(sched):
    install(sched, ROOM, (1, 1))
    assert types(sched.submit(Descend())) == [EventType.REJECTED]
    assert types(sched.submit(Ascend())) == [EventType.REJECTED]
    assert sched.round == 0


def test_walking_onto_an_item_picks_it_up(sched, tables):
    level = install(sched, ROOM, (1, 1))
    level.add_item((2, 1), tables.item("potion_healing"))
    result = sched.submit(Move(Direction.RIGHT))
    assert EventType.PICKUP in types(result)
    assert [i.def_id for i in sched.player.inventory] == ["potion_healing"]
    assert level.items == []


def test_inventory_actions(sched, tables):
    level = install(sched, ROOM, (1, 1))
    sched.player.inventory.extend([tables.item("weapon_dagger"), tables.item("potion_healing")])

    assert types(sched.submit(Equip(0)))[0] is EventType.EQUIP
    assert sched.player.weapon.def_id == "weapon_dagger"
    assert [i.def_id for i in sched.player.inventory] == ["potion_healing"]

    sched.player.hp = 50
    sched.submit(UseItem(0))
    assert sched.player.hp == 65
    assert sched.player.inventory == []

    sched.submit(Unequip(EquipSlot.WEAPON))
    assert sched.player.weapon is None
    sched.submit(DropItem(0))
    assert [fi.item.def_id for fi in level.items_at((1, 1))] == ["weapon_dagger"]

    result = sched.submit(PickUp())
    assert result.turn_consumed
    assert [i.def_id for i in sched.player.inventory] == ["weapon_dagger"]


@pytest.mark.parametrize("intent", [UseItem(5), DropItem(0), Equip(3), Unequip(EquipSlot.ARMOR), PickUp()])
def test_invalid_inventory_intents_are_rejected(sched, intent):
    install(sched, ROOM, (1, 1))
    result = sched.submit(intent)
    assert not result.turn_consumed
    assert types(result) == [EventType.REJECTED]
    assert sched.round == 0


def test_pickup_with_full_pack_costs_no_turn(sched, tables):
    level = install(sched, ROOM, (1, 1))
    cake = tables.item("food_cake")
    sched.player.inventory.extend([cake] * sched.config.inventory_capacity)
    level.add_item((1, 1), tables.item("weapon_dagger"))

    result = sched.submit(PickUp())
    assert not result.turn_consumed
    assert types(result) == [EventType.REJECTED]
    assert result.events[0].data["reason"] == "inventory_full"
    assert sched.round == 0
    assert len(level.items_at((1, 1))) == 1


def test_pickup_stops_when_pack_fills(sched, tables):
    level = install(sched, ROOM, (1, 1))
    cake = tables.item("food_cake")
    sched.player.inventory.extend([cake] * (sched.config.inventory_capacity - 1))
    level.add_item((1, 1), tables.item("weapon_dagger"))
    level.add_item((1, 1), tables.item("potion_healing"))

    result = sched.submit(PickUp())
    assert result.turn_consumed
    assert types(result) == [EventType.PICKUP, EventType.REJECTED]
    assert [fi.item.def_id for fi in level.items_at((1, 1))] == ["potion_healing"]


def test_using_equipment_is_rejected(sched, tables):
    install(sched, ROOM, (1, 1))
    sched.player.inventory.append(tables.item("armor_leather"))
    assert not sched.submit(UseItem(0)).turn_consumed


def test_look_mode_consumes_no_turns(sched):
    install(sched, ROOM, (1, 1))
    assert not sched.submit(EnterLookMode()).turn_consumed
    assert sched.mode is SubMode.LOOK
    assert sched.cursor == (1, 1)

    result = sched.submit(MoveCursor(Direction.RIGHT))
    assert sched.cursor == (2, 1)
    assert types(result) == [EventType.INSPECT]

    assert types(sched.submit(Move(Direction.DOWN))) == [EventType.REJECTED]
    sched.submit(CancelMode())
    assert sched.mode is SubMode.NONE
    assert sched.cursor is None
    assert sched.round == 0
    assert sched.player.pos == (1, 1)


def test_ranged_mode_requires_ranged_weapon(sched):
    install(sched, ROOM, (1, 1))
    result = sched.submit(EnterRangedMode())
    assert types(result) == [EventType.REJECTED]
    assert sched.mode is SubMode.NONE


def test_ranged_attack_through_targeting(sched, tables):
    level = install(sched, ROOM, (1, 2))
    sched.player.weapon = tables.item("weapon_shortbow")
    goblin = spawn_enemy(900, tables.enemy("goblin"), 4, 2)
    level.enemies.append(goblin)

    assert not sched.submit(EnterRangedMode()).turn_consumed
    assert sched.mode is SubMode.RANGED_TARGETING
    assert sched.cursor == (4, 2)

    result = sched.submit(ConfirmTarget())
    assert result.turn_consumed
    first = result.events[1]
    assert first.type in (EventType.ATTACK, EventType.MISS)
    assert first.data["kind"] == "ranged"
    assert sched.mode is SubMode.NONE


def test_confirm_on_empty_tile_keeps_targeting(sched, tables):
    level = install(sched, ROOM, (1, 2))
    sched.player.weapon = tables.item("weapon_shortbow")
    level.enemies.append(spawn_enemy(900, tables.enemy("goblin"), 4, 2))
    sched.submit(EnterRangedMode())
    sched.submit(MoveCursor(Direction.UP))
    result = sched.submit(ConfirmTarget())
    assert not result.turn_consumed
    assert sched.mode is SubMode.RANGED_TARGETING


def test_inspect_reports_known_tiles(sched, tables):
    level = install(sched, ROOM, (1, 1))
    level.enemies.append(spawn_enemy(900, tables.enemy("orc"), 3, 1))
    assert "Orc" in sched.inspect((3, 1))
    assert "wall" in sched.inspect((0, 0))
    assert sched.inspect((99, 99)) == "Nothing is there."


def test_game_over_blocks_further_input(sched):
    install(sched, ROOM, (1, 1))
    result = sched.submit_command("set hp 0")
    assert result.state is GameState.GAME_OVER
    assert EventType.GAME_OVER in types(result)
    with pytest.raises(GameOverError):
        sched.submit(Wait())
    with pytest.raises(GameOverError):
        sched.submit_command("god on")


def test_god_mode_survives_attacks(sched, tables):
    level = install(sched, ROOM, (2, 2))
    level.enemies.append(spawn_enemy(900, tables.enemy("orc"), 3, 2))
    sched.submit_command("god")
    for _ in range(20):
        sched.submit(Wait())
    assert sched.player.hp == sched.player.max_hp
    assert sched.round == 20


def test_malformed_debug_command_is_rejected(sched):
    result = sched.submit_command("teleport nowhere")
    assert not result.turn_consumed
    assert types(result) == [EventType.REJECTED]


def test_debug_commands_take_no_turn(sched):
    install(sched, ROOM, (1, 1))
    for line in ("teleport 5 2", "set strength 18", "reveal", "spawn potion_healing", "god off"):
        assert not sched.submit_command(line).turn_consumed
    assert sched.player.pos == (5, 2)
    assert sched.player.stats.strength == 18
    assert len(sched.level.visibility.ever_explored) == 9 * 5
    assert [i.def_id for i in sched.player.inventory] == ["potion_healing"]
    assert sched.round == 0


def test_unknown_spawn_is_rejected(sched):
    assert types(sched.submit_command("spawn no_such_item")) == [EventType.REJECTED]


def test_living_actors_never_share_a_tile(tables):
    sched = TurnScheduler(seed=77, tables=tables)
    sched.submit_command("god on")
    directions = list(Direction)
    for step in range(120):
        sched.submit(Move(directions[(step * 7 + step // 5) % 4]))
        positions = [e.pos for e in sched.level.living_enemies()] + [sched.player.pos]
        assert len(positions) == len(set(positions))


def test_round_counter_only_moves_on_consumed_turns(sched):
    install(sched, ROOM, (1, 1))
    sched.submit(Wait())
    sched.submit(Move(Direction.LEFT))  # wall
    sched.submit(EnterLookMode())
    sched.submit(CancelMode())
    sched.submit(Wait())
    assert sched.round == 2


def test_snapshot_and_player_stats(sched):
    install(sched, ROOM, (1, 1))
    snap = sched.snapshot()
    assert snap.depth == 1
    assert snap.player.x == 1 and snap.player.y == 1
    assert snap.tiles[0] == "#########"
    assert (1, 1) in snap.visible
    rendered = snap.render()
    assert rendered[1][1] == "@"

    stats = sched.player_stats()
    assert stats.hp == stats.max_hp == 100
    assert stats.mitigation == 2
    assert stats.dodge == 5
    assert stats.damage == "1d1"
    assert stats.sight_radius == 8


def test_event_subscription(sched):
    seen = []
    sched.events.subscribe(seen.append, EventType.WAIT)
    install(sched, ROOM, (1, 1))
    sched.submit(Wait())
    assert [e.type for e in seen] == [EventType.WAIT]
