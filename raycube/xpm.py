"""Reading XPM images into :class:`raycube.image.Image`."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from os import PathLike

from raycube.colors import color_by_name
from raycube.image import Image

TRANSPARENT = 0xFF000000

_HEX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_INT = re.compile(r"\s*([+-]?\d+)")


class XpmError(ValueError):
    """Raised when an XPM image cannot be read or understood."""


def split_words(text: str) -> list[str]:
    """Split on runs of spaces and tabs, dropping empty words."""
    return [word for word in re.split(r"[ \t]+", text) if word]


def find_unquoted(text: str, needle: str) -> int:
    """Return the first index of needle outside double quotes, or -1."""
    if not needle:
        raise ValueError("needle must not be empty")
    inside = False
    for pos in range(len(text) - len(needle) + 1):
        if text[pos] == '"':
            inside = not inside
        if not inside and text.startswith(needle, pos):
            return pos
    return -1


def _blank(text: str, opener: str, closer: str, keep_closer: bool) -> str:
    while (begin := find_unquoted(text, opener)) != -1:
        close = text.find(closer, begin + len(opener))
        stop = len(text) if close == -1 else close + len(closer)
        if not keep_closer and close == -1:
            stop = len(text)
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    return text


def strip_comments(text: str) -> str:
    """Blank out C comments outside strings, keeping the text's length."""
    text = _blank(text, "/*", "*/", keep_closer=False)
    return _blank(text, "//", "\n", keep_closer=False)


def text_to_rgb(name: str, end: str | None) -> int:
    """Resolve an XPM colour spec: '#hex', or a colour name of one or two words.

    Unknown names give 0; 'None' gives -1.
    """
    if name.startswith("#"):
        match = _HEX.match(name, 1)
        if not match:
            return 0
        value = int(match.group(2), 16)
        return -value if match.group(1) == "-" else value
    if end:
        name = f"{name} {end}"[:63]
    try:
        return color_by_name(name)
    except KeyError:
        return 0


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def parse_xpm_lines(lines: Iterable[str]) -> Image:
    """Build an image from the string contents of an XPM file, in order."""
    source = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"missing {what}") from None

    header = split_words(next_line("header"))
    if len(header) < 4:
        raise XpmError("header needs width, height, colours and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError(f"bad header values: {' '.join(header[:4])}")

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour line")
        words = split_words(line[cpp:])
        try:
            at = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour line without 'c' key: {line!r}") from None
        if at >= len(words):
            raise XpmError(f"colour line without a colour: {line!r}")
        end = words[at + 1] if at + 1 < len(words) else None
        rgb = text_to_rgb(words[at], end)
        key = line[:cpp]
        # Short keys keep the last definition, long keys the first.
        if cpp <= 2:
            palette[key] = rgb
        else:
            palette.setdefault(key, rgb)

    image = Image(width, height)
    for y in range(height):
        line = next_line("pixel row")
        for x in range(width):
            color = palette.get(line[cpp * x : cpp * (x + 1)], 0)
            image.set_pixel(x, y, TRANSPARENT if color == -1 else color)
    return image


def _quoted_strings(text: str) -> Iterator[str]:
    pos = 0
    while (start := text.find('"', pos)) != -1:
        stop = text.find('"', start + 1)
        if stop == -1:
            return
        yield text[start + 1 : stop]
        pos = stop + 1


def parse_xpm(text: str) -> Image:
    """Parse the text of an XPM file."""
    return parse_xpm_lines(_quoted_strings(strip_comments(text)))


def load_xpm(path: str | PathLike[str]) -> Image:
    """Read and parse an XPM file."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(text)