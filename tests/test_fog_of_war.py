import pytest

from delve.fov.fog_of_war import FogTileState, VisibilitySet
from delve.fov.fov import bresenham_line, compute_visible, has_line_of_sight
from delve.map.grid import Grid, Tile


def test_open_room_visibility_is_a_disc():
    grid = Grid(7, 7, Tile.FLOOR)
    visible = compute_visible(grid, (3, 3), 3)
    expected = {(x, y) for y in range(7) for x in range(7) if (x - 3) ** 2 + (y - 3) ** 2 <= 9}
    assert visible == expected


def test_wall_blocks_sight_and_wall_is_visible():
    rows = [
        "..#....",
        "..#....",
        "..#....",
        "..#....",
        "..#....",
    ]
    grid = Grid.from_ascii(rows)
    visible = compute_visible(grid, (1, 2), 10)
    assert (2, 2) in visible
    assert (4, 2) not in visible
    assert (6, 0) not in visible


def test_closed_door_blocks_open_door_does_not():
    closed = Grid.from_ascii([".+..."])
    opened = Grid.from_ascii([".'..."])
    assert compute_visible(closed, (0, 0), 5) == {(0, 0), (1, 0)}
    assert (4, 0) in compute_visible(opened, (0, 0), 5)


def test_radius_zero_sees_only_origin():
    assert compute_visible(Grid(3, 3, Tile.FLOOR), (1, 1), 0) == {(1, 1)}


def test_bad_arguments():
    grid = Grid(3, 3, Tile.FLOOR)
    with pytest.raises(ValueError):
        compute_visible(grid, (5, 5), 3)
    with pytest.raises(ValueError):
        compute_visible(grid, (1, 1), -1)


def test_visibility_is_symmetric_between_floor_tiles():
    rows = [
        ".........",
        "..#......",
        "......#..",
        "...#.....",
        ".........",
    ]
    grid = Grid.from_ascii(rows)
    floors = grid.positions(Tile.FLOOR)
    seen = {p: compute_visible(grid, p, 6) for p in floors}
    for a in floors:
        for b in floors:
            assert (b in seen[a]) == (a in seen[b]), (a, b)


def test_bresenham_endpoints():
    line = bresenham_line(0, 0, 4, 2)
    assert line[0] == (0, 0) and line[-1] == (4, 2)
    assert len(line) == 5


def test_line_of_sight():
    grid = Grid.from_ascii([".....", "..#..", "....."])
    assert has_line_of_sight(grid, (0, 0), (4, 0))
    assert not has_line_of_sight(grid, (0, 1), (4, 1))
    # Endpoints themselves never block.
    assert has_line_of_sight(grid, (1, 1), (2, 1))
    assert not has_line_of_sight(grid, (0, 0), (9, 9))


def test_visibility_set_monotonic_exploration():
    grid = Grid.from_ascii(
        [
            "...........",
            "...........",
            "...........",
        ]
    )
    vis = VisibilitySet(grid.width, grid.height)
    assert vis.state(0, 0) is FogTileState.UNKNOWN

    vis.update(grid, (0, 1), 2)
    first_explored = vis.ever_explored
    assert vis.state(0, 1) is FogTileState.VISIBLE

    vis.update(grid, (10, 1), 2)
    assert first_explored <= vis.ever_explored
    assert vis.currently_visible <= vis.ever_explored
    assert vis.state(0, 1) is FogTileState.REMEMBERED
    assert vis.state(10, 1) is FogTileState.VISIBLE
    assert vis.state(5, 1) is FogTileState.UNKNOWN


def test_visibility_state_out_of_bounds():
    vis = VisibilitySet(2, 2)
    with pytest.raises(IndexError):
        vis.state(2, 0)


def test_reveal_all():
    vis = VisibilitySet(4, 3)
    vis.reveal_all()
    assert len(vis.ever_explored) == 12
    assert vis.state(3, 2) is FogTileState.REMEMBERED
