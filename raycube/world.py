"""Game state, keyboard input, collisions and player movement."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

from raycube.image import Image

TILE = 64
PLAYER_SIZE = 5
MOVE_STEP = 20
PROBE_DISTANCE = 20
ROT_STEP = 0.07
DOOR_REACH = 60
WIN_WIDTH = 1600
WIN_HEIGHT = 900
TWO_PI = 2 * math.pi

Grid = list[list[str]]


class Key(IntEnum):
    """Keysyms the game reacts to."""

    A_UPPER = 0x41
    D_UPPER = 0x44
    F_UPPER = 0x46
    S_UPPER = 0x53
    W_UPPER = 0x57
    A = 0x61
    C = 0x63
    D = 0x64
    E = 0x65
    F = 0x66
    M = 0x6D
    S = 0x73
    W = 0x77
    LEFT = 0xFF51
    RIGHT = 0xFF53
    ESCAPE = 0xFF1B


_FORWARD = frozenset({Key.W, Key.W_UPPER})
_LEFT = frozenset({Key.A, Key.A_UPPER})
_BACK = frozenset({Key.S, Key.S_UPPER})
_RIGHT = frozenset({Key.D, Key.D_UPPER})
_FIRE = frozenset({Key.F, Key.F_UPPER})


@dataclass
class InputState:
    """Which controls are held, plus the door currently in the crosshair."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    f: bool = False
    c: bool = False
    left: bool = False
    right: bool = False
    is_door: bool = False
    door: tuple[int, int] = (0, 0)


@dataclass
class Player:
    """Player position in world units and facing angle in radians."""

    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0
    existence: bool = False


@dataclass
class Textures:
    """Wall and door images with the ceiling and floor colours (-1 when unset)."""

    north: Image | None = None
    south: Image | None = None
    east: Image | None = None
    west: Image | None = None
    door: Image | None = None
    ceiling: int = -1
    floor: int = -1


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _cell(grid: Grid, x: int, y: int) -> str | None:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return None


def _wrap(angle: float) -> float:
    if angle < 0:
        angle += TWO_PI
    if angle > TWO_PI:
        angle -= TWO_PI
    return angle


def wall_kind(x: float, y: float, grid: Grid) -> int:
    """Classify the tile under a world point: 2 closed door, 1 wall, 0 free.

    Points outside the grid count as wall.
    """
    cell = _cell(grid, _trunc_div(int(x), TILE), _trunc_div(int(y), TILE))
    if cell is None or cell == "1":
        return 1
    if cell == "D":
        return 2
    return 0


def _row_length(row: list[str]) -> int:
    try:
        return row.index("\0")
    except ValueError:
        return len(row)


def grid_size(axis: str, grid: Grid) -> int:
    """Return the widest row for axis 'x', the row count for 'y', else 0."""
    if axis == "x":
        return max((_row_length(row) for row in grid), default=0)
    if axis == "y":
        return len(grid)
    return 0


def check_collision(x: float, y: float, grid: Grid) -> bool:
    """Return True when a player centred on (x, y) touches no wall or closed door."""
    return not any(
        wall_kind(x + dx, y + dy, grid)
        for dx, dy in (
            (-PLAYER_SIZE, -PLAYER_SIZE),
            (PLAYER_SIZE, -PLAYER_SIZE),
            (-PLAYER_SIZE, PLAYER_SIZE),
            (PLAYER_SIZE, PLAYER_SIZE),
        )
    )


@dataclass
class Game:
    """Everything one running game holds."""

    grid: Grid = field(default_factory=list)
    grid_check: Grid = field(default_factory=list)
    player: Player = field(default_factory=Player)
    input: InputState = field(default_factory=InputState)
    textures: Textures = field(default_factory=Textures)
    level: int = 0
    win_width: int = WIN_WIDTH
    win_height: int = WIN_HEIGHT
    prev_mouse_x: int = 400
    side: int = 0
    texture_width: int = 0
    texture_height: int = 0
    mini_width: int = 0
    mini_height: int = 0
    mini_start_x: int = 0
    mini_start_y: int = 0
    running: bool = True

    def check_distance(self, direction: str) -> bool:
        """Return True when a short probe in the given direction ('w', 'a', 's', 'd') hits a wall."""
        angle = self.player.angle
        if direction == "a":
            angle -= math.pi / 2
        elif direction == "d":
            angle += math.pi / 2
        elif direction == "s":
            angle += math.pi
        angle = _wrap(angle)
        probe_x = self.player.x + math.cos(angle) * PROBE_DISTANCE
        probe_y = self.player.y + math.sin(angle) * PROBE_DISTANCE
        return not check_collision(probe_x, probe_y, self.grid)

    def _move_to(self, x: float, y: float) -> None:
        if check_collision(x, y, self.grid):
            self.player.x = x
            self.player.y = y

    def _turn(self) -> None:
        angle = self.player.angle
        if self.input.left:
            angle -= ROT_STEP
        if self.input.right:
            angle += ROT_STEP
        self.player.angle = _wrap(angle)

    def handle_movement(self) -> None:
        """Apply one tick of the held movement and turning keys."""
        p = self.player
        if self.input.w and not self.check_distance("w"):
            self._move_to(
                p.x + math.cos(p.angle) * MOVE_STEP,
                p.y + math.sin(p.angle) * MOVE_STEP,
            )
        if self.input.s and not self.check_distance("s"):
            self._move_to(
                p.x - math.cos(p.angle) * MOVE_STEP,
                p.y - math.sin(p.angle) * MOVE_STEP,
            )
        if self.input.a and not self.check_distance("a"):
            side = p.angle + math.pi / 2
            self._move_to(
                p.x - math.cos(side) * MOVE_STEP,
                p.y - math.sin(side) * MOVE_STEP,
            )
        if self.input.d and not self.check_distance("d"):
            side = p.angle - math.pi / 2
            self._move_to(
                p.x - math.cos(side) * MOVE_STEP,
                p.y - math.sin(side) * MOVE_STEP,
            )
        self._turn()

    def open_door(self) -> None:
        """Toggle the door just ahead of the player between open ('d') and closed ('D')."""
        angle = self.player.angle
        x = _trunc_div(int(self.player.x + math.cos(angle) * DOOR_REACH), TILE)
        y = _trunc_div(int(self.player.y + math.sin(angle) * DOOR_REACH), TILE)
        cell = _cell(self.grid, x, y)
        if cell == "d":
            self.grid[y][x] = "D"
        elif cell == "D":
            self.grid[y][x] = "d"

    def on_keypress(self, keysym: int) -> None:
        """React to a key going down."""
        if keysym in _FORWARD:
            self.input.w = True
        elif keysym in _LEFT:
            self.input.a = True
        elif keysym in _BACK:
            self.input.s = True
        elif keysym in _RIGHT:
            self.input.d = True
        if keysym in _FIRE:
            self.input.f = True
        if keysym == Key.C:
            self.input.c = True
        if keysym == Key.E:
            self.open_door()
        if keysym == Key.M:
            self.level = 0 if self.level >= 2 else self.level + 1
        if keysym == Key.LEFT:
            self.input.left = True
        if keysym == Key.RIGHT:
            self.input.right = True
        if keysym == Key.ESCAPE:
            self.running = False

    def on_keyrelease(self, keysym: int) -> None:
        """React to a key coming up."""
        if keysym in _FORWARD:
            self.input.w = False
        if keysym in _LEFT:
            self.input.a = False
        if keysym in _BACK:
            self.input.s = False
        if keysym in _RIGHT:
            self.input.d = False
        if keysym == Key.C:
            self.input.c = False
        if keysym == Key.LEFT:
            self.input.left = False
        if keysym == Key.RIGHT:
            self.input.right = False