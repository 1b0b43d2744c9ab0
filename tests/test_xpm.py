import pytest

from raycube.colors import color_by_name
from raycube.xpm import (
    XpmError,
    find_unquoted,
    load_xpm,
    parse_xpm,
    parse_xpm_lines,
    split_words,
    strip_comments,
    text_to_rgb,
)

SAMPLE = """/* XPM */
static char *sample[] = {
/* columns rows colors chars-per-pixel */
"3 2 3 1",
"  c None",
"r c #FF0000",
"g c green",
/* pixels */
"r g",
"grr"
};
"""


def test_split_words():
    assert split_words("  a\tb  c ") == ["a", "b", "c"]
    assert split_words(" \t ") == []


def test_find_unquoted_skips_quoted_match():
    text = '"/*" /*'
    pos = find_unquoted(text, "/*")
    assert text[pos : pos + 2] == "/*"
    assert pos > text.index('"', 1)


def test_find_unquoted_missing():
    assert find_unquoted('"//"', "//") == -1
    assert find_unquoted("ab", "abc") == -1


def test_find_unquoted_rejects_empty_needle():
    with pytest.raises(ValueError):
        find_unquoted("abc", "")


def test_strip_comments():
    text = '/* XPM */\n"a /* b"\n// tail\nx'
    cleaned = strip_comments(text)
    assert len(cleaned) == len(text)
    assert "XPM" not in cleaned
    assert "tail" not in cleaned
    assert '"a /* b"' in cleaned
    assert cleaned.endswith("x")


def test_strip_comments_unterminated_blanks_rest():
    cleaned = strip_comments('"k" /* open')
    assert cleaned.rstrip() == '"k"'


def test_text_to_rgb_hex_and_names():
    assert text_to_rgb("#ff8800", None) == 0xFF8800
    assert text_to_rgb("dark", "grey") == color_by_name("dark grey")
    assert text_to_rgb("GREEN", None) == color_by_name("green")
    assert text_to_rgb("None", None) == -1


def test_text_to_rgb_unknown_is_zero():
    assert text_to_rgb("nosuchcolour", None) == 0
    assert text_to_rgb("#", None) == 0


def test_parse_sample():
    image = parse_xpm(SAMPLE)
    assert (image.width, image.height) == (3, 2)
    assert image.get_pixel(0, 0) == 0xFF0000
    assert image.get_pixel(1, 0) == 0xFF000000
    assert image.get_pixel(2, 0) == image.get_pixel(1, 1)
    assert image.get_pixel(0, 1) == color_by_name("green")


def test_unknown_pixel_key_is_black():
    image = parse_xpm_lines(["2 1 1 1", "a c #000007", "az"])
    assert image.get_pixel(0, 0) == 7
    assert image.get_pixel(1, 0) == 0


def test_duplicate_short_key_keeps_last():
    image = parse_xpm_lines(["1 1 2 1", "a c #000001", "a c #000002", "a"])
    assert image.get_pixel(0, 0) == 2


def test_duplicate_long_key_keeps_first():
    image = parse_xpm_lines(["1 1 2 3", "abc c #000001", "abc c #000002", "abc"])
    assert image.get_pixel(0, 0) == 1


@pytest.mark.parametrize(
    "lines",
    [
        ["0 1 1 1", "a c #000001", "a"],
        ["1 1 1", "a c #000001", "a"],
        ["1 1 1 1", "a #000001", "a"],
        ["1 1 1 1", "a c", "a"],
        ["1 2 1 1", "a c #000001", "a"],
        [],
    ],
)
def test_parse_errors(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)


def test_load_xpm_round_trip(tmp_path):
    path = tmp_path / "sample.xpm"
    path.write_text(SAMPLE, encoding="latin-1")
    loaded = load_xpm(path)
    parsed = parse_xpm(SAMPLE)
    assert loaded.to_rgb_bytes() == parsed.to_rgb_bytes()
    assert (loaded.width, loaded.height) == (parsed.width, parsed.height)


def test_load_xpm_missing_file(tmp_path):
    with pytest.raises(XpmError):
        load_xpm(tmp_path / "absent.xpm")