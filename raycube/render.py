"""Drawing a frame: walls, ceiling and floor, the gun sprite and the minimap."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from raycube.image import Image, img_pixel_put, texture_color
from raycube.raycast import EAST, WEST, WallSlice
from raycube.world import TILE, Game, Grid, grid_size
from raycube.xpm import load_xpm

DOOR_COLUMN = 900
SPRITE_KEY = 0x00FFFFFF
PLAYER_COLOR = 16776960
WALL_COLOR = 4210752
FLOOR_COLOR = 12632256
DOOR_COLOR = 13037520
OTHER_COLOR = 16711680
DEFAULT_FRAMES = tuple(f"./textures/gun{n}.xpm" for n in range(1, 6))


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _c_mod(value: int, divisor: int) -> int:
    return value - _trunc_div(value, divisor) * divisor


def _cell(grid: Grid, x: int, y: int) -> str | None:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return None


def draw_image(background: Image, image: Image, start_x: int, start_y: int) -> None:
    """Copy a sprite onto a background, skipping pure-white key pixels."""
    for y in range(image.height):
        for x in range(image.width):
            color = texture_color(image, x, y)
            if color != SPRITE_KEY:
                img_pixel_put(background, color, start_x + x, start_y + y)


class GunAnimation:
    """The gun sprite in the lower right corner and its firing animation."""

    def __init__(
        self,
        frames: Sequence[str] = DEFAULT_FRAMES,
        loader: Callable[[str], Image] = load_xpm,
    ) -> None:
        if len(frames) != 5:
            raise ValueError(f"the gun needs 5 frames, got {len(frames)}")
        self.frames = tuple(frames)
        self.loader = loader
        self.time = 0
        self._cache: dict[str, Image] = {}

    def _image(self, path: str) -> Image:
        if path not in self._cache:
            self._cache[path] = self.loader(path)
        return self._cache[path]

    def _show(self, game: Game, frame: Image, index: int) -> None:
        image = self._image(self.frames[index])
        draw_image(
            frame, image, game.win_width - image.width, game.win_height - image.height
        )

    def draw(self, game: Game, frame: Image) -> None:
        """Draw the current gun frame, advancing the animation while firing."""
        if not game.input.f:
            self._show(game, frame, 0)
            return
        if 0 <= self.time < 8:
            self._show(game, frame, self.time // 2 + 1)
        elif self.time >= 8:
            self._show(game, frame, 0)
            self.time = 0
            game.input.f = False
            if game.input.is_door:
                x, y = game.input.door
                game.grid[y][x] = "d"
        self.time += 1


def _check_door(game: Game, wall: WallSlice) -> None:
    if wall.idx != DOOR_COLUMN:
        return
    x = _trunc_div(int(wall.hit_x), TILE)
    y = _trunc_div(int(wall.hit_y), TILE)
    if _cell(game.grid, x, y) == "D":
        game.input.door = (x, y)
        game.input.is_door = True
    else:
        game.input.is_door = False


def paint_column(game: Game, frame: Image, wall: WallSlice) -> None:
    """Paint ceiling, floor and the textured wall for one screen column."""
    if wall.direction in (EAST, WEST):
        tex_x = _c_mod(int(wall.hit_y), TILE)
    else:
        tex_x = _c_mod(int(wall.hit_x), TILE)
    column = wall.idx
    if wall.wall_top <= game.win_height:
        for y in range(0, wall.wall_top):
            img_pixel_put(frame, game.textures.ceiling, column, y)
    if wall.wall_bottom > 0:
        for y in range(wall.wall_bottom - 1, game.win_height):
            img_pixel_put(frame, game.textures.floor, column, y)

    top = max(wall.wall_top, 0)
    bottom = min(wall.wall_bottom, game.win_height)
    if top < bottom:
        _check_door(game, wall)
    tex_height = game.texture_height
    for y in range(top, bottom):
        tex_y = int((y - wall.wall_top) * tex_height / wall.wall_height)
        if tex_y >= tex_height:
            tex_y = tex_height - 1
        color = texture_color(wall.texture, tex_x, tex_y) if wall.texture else 0
        img_pixel_put(frame, color, column, y)


def minimap_color(x: int, y: int, grid: Grid) -> int:
    """Return the minimap colour of a tile, clamping the coordinates into the grid."""
    rows = grid_size("y", grid)
    cols = grid_size("x", grid)
    y = min(max(y, 0), rows - 1)
    x = min(max(x, 0), cols - 1)
    cell = _cell(grid, x, y)
    if cell == "1":
        return WALL_COLOR
    if cell == "0":
        return FLOOR_COLOR
    if cell in ("D", "d"):
        return DOOR_COLOR
    if cell is None or cell == "\0":
        return 0
    return OTHER_COLOR


def _put_mini(game: Game, mini: Image) -> None:
    player = game.player
    own_x, own_y = int(player.x / TILE), int(player.y / TILE)
    tile_x = int(player.x / TILE - 3)
    counter = 0
    for col in range(mini.width):
        tile_y = int(player.y / TILE - 1)
        for row in range(mini.height):
            if game.level == 2 or (game.level == 1 and counter % 2 == 0):
                if (tile_x, tile_y) == (own_x, own_y):
                    color = PLAYER_COLOR
                else:
                    color = minimap_color(tile_x, tile_y, game.grid)
                img_pixel_put(mini, color, col, row)
            counter += 1
            if (row + 1) % 32 == 0:
                tile_y += 1
        counter += 1
        if (col + 1) % 32 == 0:
            tile_x += 1


def _overlay(game: Game, frame: Image, mini: Image) -> None:
    for col in range(mini.width):
        for row in range(mini.height):
            # Each destination row takes the source row just below it.
            color = texture_color(mini, col, row + 1)
            if color != 0:
                img_pixel_put(
                    frame, color, game.mini_start_x + col, game.mini_start_y + row
                )


def draw_minimap(game: Game, frame: Image) -> None:
    """Overlay the minimap when its level is 1 (dotted) or 2 (solid)."""
    if game.level == 0:
        return
    game.mini_height = grid_size("y", game.grid) * 16
    game.mini_width = grid_size("x", game.grid) * 16 // 2
    if game.mini_width <= 0 or game.mini_height <= 0:
        return
    mini = Image(game.mini_width, game.mini_height)
    _put_mini(game, mini)
    _overlay(game, frame, mini)


def render_frame(
    game: Game, slices: Sequence[WallSlice], gun: GunAnimation | None
) -> Image:
    """Render a full frame from the cast slices; the final slice is not drawn."""
    frame = Image(game.win_width, game.win_height)
    for wall in slices[:-1]:
        paint_column(game, frame, wall)
    if gun is not None:
        gun.draw(game, frame)
    draw_minimap(game, frame)
    return frame