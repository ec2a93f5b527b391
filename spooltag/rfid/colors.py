"""Nearest named colour for a raw RGB value read from a tag."""

import math

# Reference filament colours, checked in order; the first closest match wins
PALETTE = (
    ("Jade White", (255, 255, 255)),
    ("Beige", (247, 230, 222)),
    ("Gold", (228, 189, 104)),
    ("Silver", (166, 169, 170)),
    ("Gray", (142, 144, 137)),
    ("Bronze", (132, 125, 72)),
    ("Brown", (157, 67, 44)),
    ("Red", (193, 46, 31)),
    ("Magenta", (236, 0, 140)),
    ("Pink", (245, 90, 116)),
    ("Orange", (255, 106, 19)),
    ("Yellow", (244, 238, 42)),
    ("Bambu Green", (0, 174, 66)),
    ("Mistletoe Green", (63, 142, 67)),
    ("Cyan", (0, 134, 214)),
    ("Blue", (10, 41, 137)),
    ("Purple", (94, 67, 183)),
    ("Blue Gray", (91, 101, 121)),
    ("Light Gray", (209, 211, 213)),
    ("Dark Gray", (84, 84, 84)),
    ("Black", (0, 0, 0)),
)


def color_distance(a: tuple[int, int, int], b: tuple[int, int, int]) -> float:
    """Euclidean distance in RGB space."""
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def nearest_color_name(r: int, g: int, b: int) -> str:
    """Return the palette name closest to (r, g, b)."""
    return min(PALETTE, key=lambda item: color_distance(item[1], (r, g, b)))[0]


def color_name_from_bytes(color_bytes: bytes) -> str:
    """Name the colour of an RGB or RGBA byte sequence; alpha is ignored."""
    if len(color_bytes) < 3:
        raise ValueError(f"Color needs at least 3 bytes, got {len(color_bytes)}")
    return nearest_color_name(color_bytes[0], color_bytes[1], color_bytes[2])
