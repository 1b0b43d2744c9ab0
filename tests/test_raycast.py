import math

import pytest

from raycube.image import Image
from raycube.raycast import WallSlice, assign_widths, cast_ray, cast_rays, make_slice
from raycube.world import Game, Textures

ROOM = ["11111", "10001", "10D01", "10001", "11111"]


def make_game(rows=ROOM, **kwargs):
    textures = Textures(
        north=Image(4, 4),
        south=Image(4, 4),
        east=Image(4, 4),
        west=Image(4, 4),
        door=Image(4, 4),
        ceiling=0,
        floor=0,
    )
    game = Game(grid=[list(r) for r in rows], textures=textures, **kwargs)
    game.player.x = 96.0
    game.player.y = 96.0
    return game


def test_cast_ray_east_hits_far_wall():
    game = make_game()
    length, hit_x, hit_y, side = cast_ray(game, 0.001)
    assert side == 0
    assert game.side == 0
    assert length == pytest.approx(256 - 96, rel=1e-3)
    assert hit_x > 96


def test_cast_ray_south_hits_horizontal_face():
    game = make_game()
    length, _, hit_y, side = cast_ray(game, math.pi / 2 + 0.001)
    assert side == 1
    assert length == pytest.approx(256 - 96, rel=1e-3)
    assert hit_y > 96


@pytest.mark.parametrize("angle", [0.3, 1.2, 2.0, 3.5, 4.4, 5.9])
def test_cast_ray_stays_inside_room(angle):
    game = make_game()
    length, _, _, side = cast_ray(game, angle)
    assert side in (0, 1)
    assert 0 < length < 320 * math.sqrt(2)


@pytest.mark.parametrize(
    "side, angle, slot, direction",
    [
        (0, math.pi, "west", 3),
        (0, 0.1, "east", 1),
        (1, 4.0, "north", 0),
        (1, 1.0, "south", 2),
    ],
)
def test_make_slice_picks_texture(side, angle, slot, direction):
    game = make_game()
    wall = make_slice(game, 100.0, 96.0, 96.0, angle, side)
    assert wall.texture is getattr(game.textures, slot)
    assert wall.direction == direction
    assert not wall.is_door


def test_make_slice_door_cell_uses_door_texture():
    game = make_game()
    wall = make_slice(game, 100.0, 140.0, 140.0, 0.1, 0)
    assert wall.is_door
    assert wall.texture is game.textures.door


def test_make_slice_straight_ahead_keeps_length():
    game = make_game()
    game.player.angle = 0.5
    wall = make_slice(game, 123.0, 96.0, 96.0, 0.5, 0)
    assert wall.ray_length == pytest.approx(123.0)
    assert wall.angle == 0.5


def test_make_slice_column_is_centred_and_closer_is_taller():
    game = make_game()
    near = make_slice(game, 80.0, 96.0, 96.0, 0.0, 0)
    far = make_slice(game, 200.0, 96.0, 96.0, 0.0, 0)
    assert near.wall_top + near.wall_bottom == game.win_height
    assert far.wall_top + far.wall_bottom == game.win_height
    assert near.wall_height > far.wall_height


def test_make_slice_rejects_bad_side():
    game = make_game()
    with pytest.raises(ValueError):
        make_slice(game, 100.0, 96.0, 96.0, 0.0, 2)


def test_assign_widths_groups_by_hit_column():
    slices = [WallSlice(0.0, x, 0.0) for x in (0.5, 0.7, 3.2, 3.9, 5.0)]
    assign_widths(slices)
    assert [s.idx for s in slices] == list(range(5))
    assert [s.wall_width for s in slices] == [1, 1, 1, 1, 0]


def test_assign_widths_single_run_leaves_last_at_zero():
    slices = [WallSlice(0.0, 7.1, 0.0) for _ in range(4)]
    assign_widths(slices)
    assert [s.idx for s in slices] == list(range(4))
    assert slices[-1].wall_width == 0
    assert len({s.wall_width for s in slices[:-1]}) == 1


def test_cast_rays_one_slice_per_column():
    game = make_game(win_width=30)
    game.player.angle = 0.7
    slices = cast_rays(game)
    assert len(slices) == 30
    assert [s.idx for s in slices] == list(range(30))
    known = {
        id(t)
        for t in (
            game.textures.north,
            game.textures.south,
            game.textures.east,
            game.textures.west,
            game.textures.door,
        )
    }
    assert all(id(s.texture) in known for s in slices)
    assert all(s.ray_length > 0 for s in slices)