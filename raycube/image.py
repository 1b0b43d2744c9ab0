"""In-memory 32-bit images and the pixel helpers the renderer relies on."""

from __future__ import annotations

import sys
from array import array

_MASK = 0xFFFFFFFF


class Image:
    """A width x height grid of 32-bit 0xAARRGGBB pixels, initially black."""

    bpp = 32

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels = array("I", [0]) * (width * height)

    def __repr__(self) -> str:
        return f"Image({self.width}x{self.height})"

    @property
    def size_line(self) -> int:
        """Number of bytes in one row of pixels."""
        return self.width * (self.bpp // 8)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.width + x

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel at (x, y)."""
        return self._pixels[self._offset(x, y)]

    def set_pixel(self, x: int, y: int, color: int) -> None:
        """Store a colour at (x, y); the value is kept to 32 bits."""
        self._pixels[self._offset(x, y)] = color & _MASK

    def fill(self, color: int) -> None:
        """Set every pixel to one colour."""
        self._pixels = array("I", [color & _MASK]) * (self.width * self.height)

    def to_rgb_bytes(self) -> bytes:
        """Return the pixels as packed R, G, B bytes, row by row."""
        raw = array("I", self._pixels)
        if sys.byteorder == "big":
            raw.byteswap()
        data = raw.tobytes()
        out = bytearray(len(self._pixels) * 3)
        out[0::3] = data[2::4]
        out[1::3] = data[1::4]
        out[2::3] = data[0::4]
        return bytes(out)


def _mask_shifts(mask: int) -> tuple[int, int]:
    if mask <= 0:
        raise ValueError(f"colour mask must be a positive bit mask, got {mask:#x}")
    low = (mask & -mask).bit_length() - 1
    shifted = mask >> low
    ones = (shifted ^ (shifted + 1)).bit_length() - 1
    return low, ones


def rgb_shifts(red_mask: int, green_mask: int, blue_mask: int) -> tuple[int, ...]:
    """Return (offset, width) pairs for the red, green and blue masks of a visual."""
    return tuple(
        value
        for mask in (red_mask, green_mask, blue_mask)
        for value in _mask_shifts(mask)
    )


def good_color(color: int, depth: int, shifts: tuple[int, ...]) -> int:
    """Convert a 0xRRGGBB colour to a pixel value for a visual of the given depth."""
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    return (
        ((red >> (16 - shifts[1])) << shifts[0])
        + ((green >> (16 - shifts[3])) << shifts[2])
        + ((blue >> (16 - shifts[5])) << shifts[4])
    )


def texture_color(image: Image, tex_x: int, tex_y: int) -> int:
    """Read a texel; a negative x reads column 0, and an x past the row runs into the next row.

    Reads that fall outside the pixel store give 0.
    """
    tex_x = max(tex_x, 0)
    offset = tex_y * image.width + tex_x
    if 0 <= offset < len(image._pixels):
        return image._pixels[offset]
    return 0


def img_pixel_put(image: Image, color: int, x: int, y: int) -> None:
    """Draw one pixel, silently ignoring coordinates outside the image."""
    if 0 <= x < image.width and 0 <= y < image.height:
        image.set_pixel(x, y, color)