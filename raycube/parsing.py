"""Reading and validating .cub scene files."""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from os import PathLike, fspath
from pathlib import Path

from raycube.image import Image
from raycube.world import TILE, Game, Grid
from raycube.xpm import load_xpm

HEADER_LINES = 6
DOOR_TEXTURE = "./textures/door.xpm"

Loader = Callable[[str], "Image | None"]

_WALL_SLOTS = {"NO": "north", "SO": "south", "EA": "east", "WE": "west"}
_PREFIXES = ("NO", "SO", "WE", "EA", "C", "F")
_ANGLES = {
    "E": 0.0,
    "S": 90 * (math.pi / 180),
    "W": 180 * (math.pi / 180),
    "N": 270 * (math.pi / 180),
}
_ATOI = re.compile(r"[\t\n\v\f\r ]*([+-]?[0-9]+)")


class SceneError(ValueError):
    """Raised when a scene file is unusable."""


def is_cub(path: str) -> bool:
    """Return True when the path ends in '.cub'."""
    return path.endswith(".cub")


def check_blank_lines(text: str) -> str:
    """Reject blank lines inside the map and return the map part of the text.

    The map part starts after the six header lines and any blank lines after
    them; a single empty line at its very end is allowed.
    """
    pos = 0
    found = 0
    while found < HEADER_LINES and pos < len(text):
        end = text.find("\n", pos)
        if end == -1:
            end = len(text)
        if end != pos:
            found += 1
        pos = end + 1
    body = text[pos:].lstrip("\n")
    i = 0
    while i < len(body):
        end = body.find("\n", i)
        if end == -1:
            break
        if end == i:
            if end + 1 < len(body):
                raise SceneError("new line in map")
            break
        i = end + 1
    return body


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def parse_color(spec: str) -> int:
    """Turn 'r,g,b' with components 0..255 into 0xRRGGBB."""
    parts = [part for part in spec.split(",") if part]
    if spec.count(",") != 2 or len(parts) != 3:
        raise SceneError(f"bad colour: {spec!r}")
    red, green, blue = (_atoi(part) for part in parts)
    if not all(0 <= value <= 255 for value in (red, green, blue)):
        raise SceneError(f"colour component out of range: {spec!r}")
    return red << 16 | green << 8 | blue


def find_max_len(rows: list[str]) -> int:
    """Return the longest line after the header, or -1 when there is none."""
    return max((len(row) for row in rows[HEADER_LINES:]), default=-1)


def trim_map(lines: list[str], start: int) -> tuple[Grid, Grid]:
    """Split the map lines off; return the padded play grid and an unpadded copy."""
    width = find_max_len(lines)
    rows = lines[start:]
    grid = [list(row.ljust(width, "\0")) for row in rows]
    check = [list(row) for row in rows]
    return grid, check


def locate_player(game: Game, grid: Grid) -> None:
    """Place the player on the first N/S/E/W tile and clear it to floor."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if not game.player.existence and cell in _ANGLES:
                game.player.x = x * TILE + TILE // 2
                game.player.y = y * TILE + TILE // 2
                game.player.angle = _ANGLES[cell]
                row[x] = "0"
                if y < len(game.grid) and x < len(game.grid[y]):
                    game.grid[y][x] = "0"
                game.player.existence = True
    if not game.player.existence:
        raise SceneError("character not found")


def _classify(grid: Grid, x: int, y: int) -> int | None:
    if not (0 <= y < len(grid) and 0 <= x < len(grid[y])):
        return 1
    cell = grid[y][x]
    if cell == "1":
        return 0
    if x == 0 or y == 0 or y == len(grid) - 1 or cell in ("\0", " "):
        return 1
    if cell not in ("0", "D"):
        return -1
    return None


def _fill(grid: Grid, x: int, y: int) -> int:
    total = 0
    stack = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        verdict = _classify(grid, cx, cy)
        if verdict is not None:
            total += verdict
            continue
        grid[cy][cx] = "1"
        stack.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))
    return total


def flood_check(grid: Grid) -> None:
    """Flood the walkable area, filling it with walls, and check it is closed.

    Raises SceneError when floor reaches the edge or an unknown tile is met.
    """
    total = 0
    for y, row in enumerate(grid):
        for x in range(len(row)):
            if row[x] not in ("1", " "):
                total += _fill(grid, x, y)
    if total > 0:
        raise SceneError("map not protected by wall")
    if total < 0:
        raise SceneError("strange char")


def _load(game: Game, loader: Loader, path: str) -> Image | None:
    try:
        image = loader(path)
    except (OSError, ValueError):
        return None
    if image is not None:
        game.texture_width = image.width
        game.texture_height = image.height
    return image


def _put_texture(game: Game, line: str, loader: Loader) -> None:
    textures = game.textures
    dot = line.find(".")
    if dot != -1:
        slot = _WALL_SLOTS.get(line[:2])
        if slot is None or getattr(textures, slot) is not None:
            raise SceneError(f"textur not found: {line}")
        setattr(textures, slot, _load(game, loader, line[dot:]))
    else:
        try:
            if textures.ceiling == -1 and line.startswith("C"):
                textures.ceiling = parse_color(line.strip("C "))
            elif textures.floor == -1 and line.startswith("F"):
                textures.floor = parse_color(line.strip("F "))
            else:
                raise SceneError(line)
        except SceneError:
            raise SceneError(f"color not found: {line}") from None
    if textures.door is None:
        textures.door = _load(game, loader, DOOR_TEXTURE)


def _textures_complete(game: Game) -> bool:
    t = game.textures
    images = (t.door, t.east, t.north, t.south, t.west)
    return all(image is not None for image in images) and -1 not in (t.floor, t.ceiling)


def parse_scene(game: Game, text: str, loader: Loader = load_xpm) -> None:
    """Fill a game from the text of a scene, loading textures with loader."""
    if not text:
        raise SceneError("empty file")
    check_blank_lines(text)
    lines = [line for line in text.split("\n") if line]
    header = lines[:HEADER_LINES]
    if len(header) < HEADER_LINES:
        raise SceneError("missing textur or color")
    for line in header:
        if not line.startswith(_PREFIXES):
            raise SceneError("missing textur or color")
        _put_texture(game, line, loader)
    game.grid, game.grid_check = trim_map(lines, HEADER_LINES)
    locate_player(game, game.grid_check)
    if not _textures_complete(game):
        raise SceneError("missing textur")
    flood_check(game.grid_check)


def load_scene(game: Game, path: str | PathLike[str], loader: Loader = load_xpm) -> None:
    """Read a .cub file and fill a game from it."""
    name = fspath(path)
    if not is_cub(name):
        raise SceneError(".cub required")
    try:
        text = Path(name).read_bytes().decode("latin-1")
    except OSError as exc:
        raise SceneError(f"no such file: {name}") from exc
    parse_scene(game, text, loader)