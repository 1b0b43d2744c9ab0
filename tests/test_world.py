import math

import pytest

from raycube.world import (
    Game,
    Key,
    check_collision,
    grid_size,
    wall_kind,
)

ROOM = ["1111111", "1000001", "1000001", "1000001", "1111111"]


def make_grid(rows):
    width = max(map(len, rows))
    return [list(row.ljust(width, "\0")) for row in rows]


def make_game(rows=ROOM, x=224.0, y=160.0, angle=0.0):
    game = Game()
    game.grid = make_grid(rows)
    game.player.x = x
    game.player.y = y
    game.player.angle = angle
    return game


def test_wall_kind_classifies_cells():
    grid = make_grid(["1D0"])
    assert wall_kind(10, 10, grid) == 1
    assert wall_kind(70, 10, grid) == 2
    assert wall_kind(130, 10, grid) == 0


def test_wall_kind_outside_grid_is_wall():
    grid = make_grid(["000"])
    assert wall_kind(1000, 10, grid) == 1
    assert wall_kind(10, 1000, grid) == 1


def test_grid_size_axes():
    grid = make_grid(ROOM)
    assert grid_size("y", grid) == len(ROOM)
    assert grid_size("x", grid) == len(ROOM[0])
    assert grid_size("z", grid) == 0


def test_grid_size_ignores_padding_and_uses_longest_row():
    rows = ["11", "1111"]
    assert grid_size("x", make_grid(rows)) == len(rows[1])
    assert grid_size("x", [list(r) for r in rows]) == len(rows[1])


def test_check_collision_free_and_blocked():
    grid = make_grid(ROOM)
    assert check_collision(224, 160, grid) is True
    assert check_collision(380, 160, grid) is False


def test_move_forward():
    game = make_game()
    game.input.w = True
    game.handle_movement()
    assert game.player.x == pytest.approx(224 + 20)
    assert game.player.y == pytest.approx(160)


def test_move_backward():
    game = make_game()
    game.input.s = True
    game.handle_movement()
    assert game.player.x == pytest.approx(224 - 20)
    assert game.player.y == pytest.approx(160)


def test_strafe_right_moves_along_facing_plus_quarter_turn():
    game = make_game()
    game.input.d = True
    game.handle_movement()
    assert game.player.x == pytest.approx(224)
    assert game.player.y == pytest.approx(160 + 20)


def test_blocked_by_wall():
    game = make_game(x=360.0)
    assert game.check_distance("w") is True
    game.input.w = True
    game.handle_movement()
    assert game.player.x == 360.0


def test_check_distance_open_space():
    game = make_game()
    assert game.check_distance("w") is False
    assert game.check_distance("s") is False


def test_turn_left_wraps_angle():
    game = make_game()
    game.input.left = True
    game.handle_movement()
    assert game.player.angle == pytest.approx(2 * math.pi - 0.07)


def test_turn_right():
    game = make_game()
    game.input.right = True
    game.handle_movement()
    assert game.player.angle == pytest.approx(0.07)


@pytest.mark.parametrize(
    "key, flag",
    [
        (Key.W, "w"),
        (Key.W_UPPER, "w"),
        (Key.A, "a"),
        (Key.S_UPPER, "s"),
        (Key.D, "d"),
        (Key.C, "c"),
        (Key.LEFT, "left"),
        (Key.RIGHT, "right"),
    ],
)
def test_press_and_release_flags(key, flag):
    game = make_game()
    game.on_keypress(key)
    assert getattr(game.input, flag) is True
    game.on_keyrelease(key)
    assert getattr(game.input, flag) is False


def test_fire_key_is_not_cleared_on_release():
    game = make_game()
    game.on_keypress(Key.F_UPPER)
    game.on_keyrelease(Key.F_UPPER)
    assert game.input.f is True


def test_minimap_key_cycles_levels():
    game = make_game()
    levels = []
    for _ in range(3):
        game.on_keypress(Key.M)
        levels.append(game.level)
    assert levels == [1, 2, 0]


def test_escape_stops_game():
    game = make_game()
    game.on_keypress(Key.ESCAPE)
    assert game.running is False


def test_door_toggles_with_e():
    rows = ["1111111", "1000001", "100D001", "1111111"]
    game = make_game(rows=rows, x=160.0, y=160.0)
    game.on_keypress(Key.E)
    assert game.grid[2][3] == "d"
    game.on_keypress(Key.E)
    assert game.grid[2][3] == "D"


def test_closed_door_blocks_movement():
    rows = ["1111111", "1000001", "10D0001", "1111111"]
    game = make_game(rows=rows, x=96.0, y=160.0)
    game.input.w = True
    game.handle_movement()
    assert game.player.x == 96.0