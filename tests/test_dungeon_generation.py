import pytest

from delve.config import GauntletParams, GenerationParams
from delve.data.loader import load_definitions
from delve.dungeon.generator import DungeonGenerator
from delve.dungeon.pathfinding import reachable_from, stepped_path
from delve.exceptions import GenerationError
from delve.map.grid import Grid, Tile


@pytest.fixture(scope="module")
def tables():
    return load_definitions()


def open_tiles(grid):
    return {(x, y) for y in range(grid.height) for x in range(grid.width) if grid[(x, y)].passable}


def test_seed_42_depth_1_layout():
    params = GenerationParams(min_room_count=5, max_room_count=8)
    level = DungeonGenerator(params).generate(1, 42)
    grid = level.grid

    assert 1 <= len(level.rooms) <= 8
    assert grid.count(Tile.STAIRS_DOWN) == 1
    assert grid.count(Tile.STAIRS_UP) == 0
    assert level.stairs_up is None
    assert reachable_from(grid, level.entry) == open_tiles(grid)


def test_same_seed_same_level(tables):
    gen = DungeonGenerator(tables=tables)
    a = gen.generate(3, 1234)
    b = gen.generate(3, 1234)
    assert a.grid == b.grid
    assert a.rooms == b.rooms
    assert [(e.def_id, e.pos) for e in a.enemies] == [(e.def_id, e.pos) for e in b.enemies]
    assert [(fi.item.def_id, fi.pos) for fi in a.items] == [(fi.item.def_id, fi.pos) for fi in b.items]


def test_different_seeds_differ():
    gen = DungeonGenerator()
    assert gen.generate(1, 1).grid.signature() != gen.generate(1, 2).grid.signature()


@pytest.mark.parametrize("seed", [0, 7, 99, 2024, 31337])
def test_connectivity_and_frame(seed):
    level = DungeonGenerator().generate(2, seed)
    grid = level.grid
    assert reachable_from(grid, level.entry) == open_tiles(grid)
    for x in range(grid.width):
        assert grid[(x, 0)] is Tile.WALL and grid[(x, grid.height - 1)] is Tile.WALL
    for y in range(grid.height):
        assert grid[(0, y)] is Tile.WALL and grid[(grid.width - 1, y)] is Tile.WALL


@pytest.mark.parametrize("seed", [3, 11, 500])
def test_rooms_respect_bounds_and_spacing(seed):
    params = GenerationParams()
    level = DungeonGenerator(params).generate(1, seed)
    for room in level.rooms:
        assert room.w >= params.min_room_width and room.h >= params.min_room_height
        assert room.x - 1 >= 1 and room.y - 1 >= 1
        assert room.x + room.w <= params.width - 2
        assert room.y + room.h <= params.height - 2
    for i, a in enumerate(level.rooms):
        for b in level.rooms[i + 1:]:
            assert not a.intersects(b, padding=2)


@pytest.mark.parametrize("seed", [5, 8, 13])
def test_doors_sit_on_straight_crossings(seed):
    grid = DungeonGenerator().generate(1, seed).grid
    for x, y in grid.positions(Tile.DOOR_CLOSED):
        vertical = grid[(x, y - 1)].passable and grid[(x, y + 1)].passable
        horizontal = grid[(x - 1, y)].passable and grid[(x + 1, y)].passable
        assert vertical or horizontal


def test_stairs_placement_below_first_depth():
    level = DungeonGenerator().generate(4, 77)
    assert level.stairs_up == level.entry
    assert level.grid[level.entry] is Tile.STAIRS_UP
    assert level.grid[level.stairs_down] is Tile.STAIRS_DOWN
    assert level.stairs_down != level.entry
    if len(level.rooms) > 1:
        assert level.stairs_down in [r.center() for r in level.rooms[1:]]


def test_entry_is_center_of_first_room():
    level = DungeonGenerator().generate(1, 4)
    assert level.entry == level.rooms[0].center()


def test_single_room_stairs_go_to_far_corner():
    params = GenerationParams(width=20, height=12, min_room_count=1, max_room_count=1)
    level = DungeonGenerator(params).generate(1, 9)
    assert len(level.rooms) == 1
    room = level.rooms[0]
    assert room.contains(*level.stairs_down)
    assert level.stairs_down != level.entry


def test_corridor_width_widens_corridors():
    narrow = DungeonGenerator(GenerationParams()).generate(1, 21)
    wide = DungeonGenerator(GenerationParams(corridor_width=2)).generate(1, 21)
    assert wide.grid.count(Tile.FLOOR) > narrow.grid.count(Tile.FLOOR)
    assert reachable_from(wide.grid, wide.entry) == open_tiles(wide.grid)


def test_gauntlet_flag_follows_interval():
    gen = DungeonGenerator(gauntlet=GauntletParams(interval=3))
    assert not gen.generate(2, 1).gauntlet
    assert gen.generate(3, 1).gauntlet
    assert gen.generate(6, 1).gauntlet


def test_generation_error_after_retries():
    # A lone 1x1 room leaves no tile for the down stairs.
    params = GenerationParams(
        width=6,
        height=6,
        min_room_count=1,
        max_room_count=1,
        min_room_width=1,
        max_room_width=1,
        min_room_height=1,
        max_room_height=1,
        max_generation_attempts=2,
    )
    with pytest.raises(GenerationError) as info:
        DungeonGenerator(params).generate(1, 42)
    err = info.value
    assert err.depth == 1
    assert err.seed == 42
    assert err.params["max_generation_attempts"] == 2
    assert "seed=42" in str(err)


def test_depth_must_be_positive():
    with pytest.raises(ValueError):
        DungeonGenerator().generate(0, 1)


def test_corridor_falls_back_to_stepped_path():
    gen = DungeonGenerator(GenerationParams(max_path_iterations=1))
    grid = Grid(12, 8)
    path = gen.carve_corridor(grid, (2, 2), (9, 5), {})
    assert path == stepped_path((2, 2), (9, 5), horizontal_first=True)
    assert all(grid[pos].passable for pos in path)


@pytest.mark.parametrize("seed", [1, 4, 42, 77, 808])
def test_starved_pathfinder_still_yields_connected_levels(seed, caplog):
    caplog.set_level("WARNING", logger="delve.dungeon.generator")
    level = DungeonGenerator(GenerationParams(max_path_iterations=1)).generate(1, seed)
    grid = level.grid
    assert any("fell back to a stepped path" in r.getMessage() for r in caplog.records)
    assert reachable_from(grid, level.entry) == open_tiles(grid)
    for x in range(grid.width):
        assert grid[(x, 0)] is Tile.WALL and grid[(x, grid.height - 1)] is Tile.WALL
    for y in range(grid.height):
        assert grid[(0, y)] is Tile.WALL and grid[(grid.width - 1, y)] is Tile.WALL
