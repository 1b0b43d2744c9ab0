"""Grid-based raycasting game: .cub scene loading, XPM textures, rendering and a pygame window."""

__version__ = "0.1.0"