import math

import pytest

from raycube.image import Image
from raycube.parsing import (
    DOOR_TEXTURE,
    SceneError,
    check_blank_lines,
    find_max_len,
    flood_check,
    is_cub,
    load_scene,
    locate_player,
    parse_color,
    parse_scene,
    trim_map,
)
from raycube.world import Game

HEADER = (
    "NO ./north.xpm\n"
    "SO ./south.xpm\n"
    "WE ./west.xpm\n"
    "EA ./east.xpm\n"
    "F 220,100,0\n"
    "C 225,30,0\n"
)
MAP = "111111\n100001\n10N001\n111111\n"
SCENE = HEADER + "\n" + MAP


class FakeLoader:
    def __init__(self, fail=()):
        self.paths = []
        self.fail = set(fail)

    def __call__(self, path):
        self.paths.append(path)
        if path in self.fail:
            return None
        return Image(64, 32)


def test_is_cub():
    assert is_cub("maps/a.cub") is True
    assert is_cub(".cub") is True
    assert is_cub("a.cu") is False
    assert is_cub("a.cub.txt") is False


def test_check_blank_lines_returns_map_part():
    assert check_blank_lines(HEADER + "\n\n" + MAP) == MAP


def test_check_blank_lines_allows_one_trailing_empty_line():
    assert check_blank_lines(HEADER + "111\n\n") == "111\n\n"


def test_check_blank_lines_rejects_gap_in_map():
    with pytest.raises(SceneError, match="new line in map"):
        check_blank_lines(HEADER + "111\n\n101\n")


def test_parse_color_packs_components():
    assert parse_color("255,0,0") == 0xFF0000
    assert parse_color("0,0,255") == 255


@pytest.mark.parametrize("spec", ["1,2", "1,2,3,4", "256,0,0", "-1,0,0", "1,,2"])
def test_parse_color_rejects(spec):
    with pytest.raises(SceneError):
        parse_color(spec)


def test_find_max_len_skips_header():
    lines = HEADER.splitlines() + ["1", "111"]
    assert find_max_len(lines) == len("111")
    assert find_max_len(HEADER.splitlines()) == -1


def test_trim_map_pads_play_grid_only():
    lines = HEADER.splitlines() + ["11", "1111"]
    grid, check = trim_map(lines, 6)
    assert grid[0] == ["1", "1", "\0", "\0"]
    assert all(len(row) == len("1111") for row in grid)
    assert check == [list("11"), list("1111")]


def test_locate_player_sets_position_and_angle():
    game = Game()
    rows = ["111", "1S1", "111"]
    game.grid = [list(r) for r in rows]
    check = [list(r) for r in rows]
    locate_player(game, check)
    assert game.player.existence is True
    assert game.player.x == 64 + 32
    assert game.player.y == 64 + 32
    assert game.player.angle == pytest.approx(90 * math.pi / 180)
    assert check[1][1] == "0"
    assert game.grid[1][1] == "0"


def test_locate_player_without_player():
    game = Game()
    with pytest.raises(SceneError, match="character not found"):
        locate_player(game, [list("111"), list("101")])


def test_flood_check_fills_closed_room():
    grid = [list("1111"), list("10D1"), list("1111")]
    flood_check(grid)
    assert grid[1] == list("1111")


def test_flood_check_open_room():
    grid = [list("1111"), list("1001"), list("1101")]
    with pytest.raises(SceneError, match="not protected"):
        flood_check(grid)


def test_flood_check_strange_char():
    grid = [list("11111"), list("10X01"), list("11111")]
    with pytest.raises(SceneError, match="strange char"):
        flood_check(grid)


def test_parse_scene_builds_game():
    game = Game()
    loader = FakeLoader()
    parse_scene(game, SCENE, loader)
    assert loader.paths[0] == "./north.xpm"
    assert DOOR_TEXTURE in loader.paths
    assert game.textures.ceiling == parse_color("225,30,0")
    assert game.textures.floor == parse_color("220,100,0")
    assert game.texture_width == 64
    assert game.texture_height == 32
    assert game.player.x == 2 * 64 + 32
    assert game.player.y == 2 * 64 + 32
    assert game.player.angle == pytest.approx(270 * math.pi / 180)
    assert game.grid[2][2] == "0"
    assert len(game.grid) == len(MAP.splitlines())


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "empty file"),
        (HEADER + "111111\n100001\n10N001\n110111\n", "not protected"),
        (HEADER + "111111\n1X0001\n10N001\n111111\n", "strange char"),
        (HEADER + "111111\n100001\n100001\n111111\n", "character not found"),
        (HEADER.replace("C 225,30,0\n", "") + MAP, "missing textur or color"),
        (HEADER.replace("SO", "NO") + MAP, "textur not found"),
        (HEADER.replace("225,30,0", "300,30,0") + MAP, "color not found"),
        (HEADER + "111111\n\n100001\n10N001\n111111\n", "new line in map"),
    ],
)
def test_parse_scene_errors(text, message):
    with pytest.raises(SceneError, match=message):
        parse_scene(Game(), text, FakeLoader())


def test_parse_scene_missing_texture_image():
    with pytest.raises(SceneError, match="missing textur"):
        parse_scene(Game(), SCENE, FakeLoader(fail={"./north.xpm"}))


def test_load_scene_from_file(tmp_path):
    path = tmp_path / "room.cub"
    path.write_text(SCENE)
    game = Game()
    load_scene(game, path, FakeLoader())
    assert game.player.existence is True
    assert game.grid_check[1] == list("111111")


def test_load_scene_requires_cub_extension(tmp_path):
    path = tmp_path / "room.txt"
    path.write_text(SCENE)
    with pytest.raises(SceneError, match=".cub required"):
        load_scene(Game(), path, FakeLoader())


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(SceneError, match="no such file"):
        load_scene(Game(), tmp_path / "absent.cub", FakeLoader())