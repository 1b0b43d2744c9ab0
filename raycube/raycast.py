"""Casting one ray per screen column and turning hits into wall slices."""

from __future__ import annotations

import math
from dataclasses import dataclass

from raycube.image import Image
from raycube.world import TILE, Game, Grid, grid_size, wall_kind

FOV = 60 * (math.pi / 180)
TWO_PI = 2 * math.pi

NORTH, EAST, SOUTH, WEST = 0, 1, 2, 3


@dataclass
class WallSlice:
    """One screen column's worth of wall: where the ray hit and how to draw it."""

    angle: float
    hit_x: float
    hit_y: float
    ray_length: float = 0.0
    texture: Image | None = None
    direction: int = NORTH
    is_door: bool = False
    wall_height: int = 0
    wall_top: int = 0
    wall_bottom: int = 0
    wall_width: int = 0
    idx: int = 0


def _wrap(angle: float) -> float:
    if angle < 0:
        angle += TWO_PI
    if angle > TWO_PI:
        angle -= TWO_PI
    return angle


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _inv_abs(value: float) -> float:
    return math.inf if value == 0 else abs(1 / value)


def _cell(grid: Grid, x: int, y: int) -> str | None:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return None


def cast_ray(game: Game, angle: float) -> tuple[float, float, float, int]:
    """March a ray from the player one world unit at a time until it meets a wall.

    Returns (length, hit_x, hit_y, side), side 0 for a vertical face and 1
    for a horizontal one; the side is also stored on the game.
    """
    pos_x, pos_y = game.player.x, game.player.y
    dir_x, dir_y = math.cos(angle), math.sin(angle)
    map_x, map_y = int(pos_x), int(pos_y)
    delta_x, delta_y = _inv_abs(dir_x), _inv_abs(dir_y)

    if dir_x < 0:
        step_x = -1
        side_x = (pos_x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - pos_x) * delta_x
    if dir_y < 0:
        step_y = -1
        side_y = (pos_y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - pos_y) * delta_y

    side = 0
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if wall_kind(map_x, map_y, game.grid):
            break
    game.side = side

    dist = side_x if side == 0 else side_y
    hit_x = pos_x + dist * dir_x
    hit_y = pos_y + dist * dir_y
    if side == 0:
        length = (map_x - pos_x + (1 - step_x) // 2) / dir_x
    else:
        length = (map_y - pos_y + (1 - step_y) // 2) / dir_y
    return length, hit_x, hit_y, side


def _choose_texture(game: Game, angle: float, side: int) -> tuple[Image | None, int]:
    textures = game.textures
    if side == 0:
        if math.cos(angle) < 0:
            return textures.west, WEST
        return textures.east, EAST
    if side == 1:
        if math.sin(angle) < 0:
            return textures.north, NORTH
        return textures.south, SOUTH
    raise ValueError(f"side must be 0 or 1, got {side}")


def make_slice(
    game: Game, length: float, hit_x: float, hit_y: float, angle: float, side: int
) -> WallSlice:
    """Build a wall slice from a ray hit, correcting fisheye and sizing the column."""
    relative = _wrap(angle - game.player.angle)
    ray_length = length * math.cos(relative)
    texture, direction = _choose_texture(game, angle, side)
    wall = WallSlice(angle, hit_x, hit_y, ray_length, texture, direction)

    rows = grid_size("y", game.grid)
    cols = grid_size("x", game.grid)
    y = min(max(_trunc_div(int(hit_y), TILE), 0), rows - 1)
    x = min(max(_trunc_div(int(hit_x), TILE), 0), cols - 1)
    if _cell(game.grid, x, y) == "D":
        wall.texture = game.textures.door
        wall.is_door = True

    if ray_length:
        height = int(game.win_height * TILE / ray_length)
    else:
        height = game.win_height * TILE
    half = _trunc_div(height, 2)
    wall.wall_height = height
    wall.wall_top = game.win_height // 2 - half
    wall.wall_bottom = game.win_height // 2 + half
    return wall


def assign_widths(slices: list[WallSlice]) -> None:
    """Number the slices by column and record, for each run hitting the same x, its width."""
    for index, wall in enumerate(slices):
        wall.idx = index
    last = len(slices) - 1
    start = 0
    while start < last:
        key = int(slices[start].hit_x)
        end = start
        while end < last and int(slices[end].hit_x) == key:
            end += 1
        width = end - start - 1
        for wall in slices[start:end]:
            wall.wall_width = width
        start = end


def cast_rays(game: Game) -> list[WallSlice]:
    """Cast one ray per window column across the field of view."""
    count = game.win_width
    step = FOV / count
    angle = _wrap(game.player.angle - FOV / 2)
    slices: list[WallSlice] = []
    for _ in range(count):
        length, hit_x, hit_y, side = cast_ray(game, angle)
        slices.append(make_slice(game, length, hit_x, hit_y, angle, side))
        angle = _wrap(angle + step)
    assign_widths(slices)
    return slices