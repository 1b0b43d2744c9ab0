# raycube

raycube is a small first-person game. It draws a maze with grid-based
raycasting and casts one ray for each screen column. The result is shown in
a 1600×900 pygame window. Walls are textured with XPM images, and the maze
is read from a `.cub` scene file.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
raycube path/to/scene.cub
```

The command takes exactly one argument, and that argument must name a file
ending in `.cub`. If the arguments are wrong or the scene is not valid,
raycube prints a message starting with `ERROR` to standard error and exits
with status 1.

## Scene files

A scene file starts with six header lines, which may come in any order:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

- `NO`, `SO`, `WE` and `EA` name the XPM texture for walls facing north,
  south, west and east. The path is taken from the first `.` on the line,
  so write it as `./...`. Each of these may appear only once.
- `F` sets the floor colour and `C` the ceiling colour. Each is three
  numbers from 0 to 255, separated by commas.

The map comes after the header. Each character is one cell:

| Character | Meaning |
|---|---|
| `1` | wall |
| `0` | floor |
| `D` | closed door |
| space | nothing (outside the map) |
| `N`, `S`, `E`, `W` | the player's start and facing direction; the first one found is used |

Any other character inside the walkable area is rejected. Floor and doors
must be fully enclosed by walls: a walkable cell on the map border, or next
to a space or the end of a shorter row, is an error. Blank lines are not
allowed inside the map, although one trailing empty line is accepted.

raycube also reads some textures from fixed paths, relative to the
directory it is started from:

- `./textures/door.xpm` is the door texture. If it cannot be loaded, the
  scene is rejected.
- `./textures/gun1.xpm` to `./textures/gun5.xpm` are the gun frames. The
  game needs them while it runs.

## Controls

| Key | Action |
|---|---|
| W / A / S / D | move forward, left, backward, right |
| ← / → | turn left or right |
| mouse | turn, unless C is held down |
| F | fire (plays the gun animation) |
| E | open or close the door just ahead |
| M | cycle the minimap: off, dotted, full |
| Esc, or closing the window | quit |

A door that is open (`d`) can be walked through. A closed door (`D`) blocks
you the same way a wall does. If you fire while screen column 900 shows a
closed door, that door opens when the gun animation finishes.

## Library use

You can also use the modules on their own:

- `raycube.xpm`: `parse_xpm(text)`, `parse_xpm_lines(lines)` and
  `load_xpm(path)` read XPM images into a `raycube.image.Image`. They raise
  `XpmError` when the image cannot be read.
- `raycube.colors`: `color_by_name(name)` looks up X11 colour names without
  regard to case. `color_names()` lists every name.
- `raycube.image`: `Image` is a 32-bit pixel grid with `get_pixel`,
  `set_pixel`, `fill` and `to_rgb_bytes`.
- `raycube.parsing`: `load_scene(game, path, loader)` and
  `parse_scene(game, text, loader)` fill a `raycube.world.Game` and raise
  `SceneError` on bad input. By default `loader` is `load_xpm`.
- `raycube.world`: `Game` holds the state. It reacts to keysyms through
  `on_keypress` and `on_keyrelease`, and `handle_movement` advances it by
  one tick.
- `raycube.raycast`: `cast_rays(game)` returns one `WallSlice` per window
  column.
- `raycube.render`: `render_frame(game, slices, gun)` draws the slices, the
  `GunAnimation` and the minimap into an `Image`.
- `raycube.app`: `App(game, gun, screen)` runs the pygame loop, and `main`
  is the command's entry point.

## What it does not do

The gun is only an animation. There are no enemies, no sound and no
scoring. The window size, field of view and movement speed are fixed.