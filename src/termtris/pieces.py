"""Static sprite table: seven shapes, up to four orientations each."""

from __future__ import annotations

from typing import Optional, Tuple

Mask = Tuple[str, str, str, str]

LIT = "#"
ORIENTATIONS = 4
SHAPE_COUNT = 7


# Indexed [shape][orientation]; None marks an orientation the shape lacks.
SPRITES: Tuple[Tuple[Optional[Mask], ...], ...] = (
    (
        ("....", "....", "####", "...."),
        (".#..", ".#..", ".#..", ".#.."),
        None,
        None,
    ),
    (
        ("....", ".##.", ".##.", "...."),
        None,
        None,
        None,
    ),
    (
        ("....", "###.", ".#..", "...."),
        (".#..", "##..", ".#..", "...."),
        (".#..", "###.", "....", "...."),
        (".#..", ".##.", ".#..", "...."),
    ),
    (
        ("....", ".##.", "##..", "...."),
        ("#...", "##..", ".#..", "...."),
        None,
        None,
    ),
    (
        ("....", "##..", ".##.", "...."),
        (".#..", "##..", "#...", "...."),
        None,
        None,
    ),
    (
        ("....", "###.", "#...", "...."),
        ("##..", ".#..", ".#..", "...."),
        ("..#.", "###.", "....", "...."),
        (".#..", ".#..", ".##.", "...."),
    ),
    (
        ("....", "###.", "..#.", "...."),
        (".#..", ".#..", "##..", "...."),
        ("#...", "###.", "....", "...."),
        (".##.", ".#..", ".#..", "...."),
    ),
)


def orientation_mask(shape: int, orientation: int) -> Mask | None:
    """Return the 4x4 mask of a shape orientation, or None when it is absent."""
    if not 0 <= shape < SHAPE_COUNT or not 0 <= orientation < ORIENTATIONS:
        return None
    return SPRITES[shape][orientation]


def is_lit(mask: Mask, x: int, y: int) -> bool:
    """Return whether cell (x, y) of the mask is part of the piece."""
    return mask[y][x] == LIT


def lit_cells(mask: Mask) -> list[tuple[int, int]]:
    """Return the (x, y) offsets of every lit cell."""
    return [(x, y) for y in range(4) for x in range(4) if is_lit(mask, x, y)]


def orientation_count(shape: int) -> int:
    return sum(1 for mask in SPRITES[shape] if mask is not None)


def rotate(shape: int, orientation: int, direction: int) -> int:
    """Step orientation by +1 or -1, skipping slots the shape does not have."""
    step = 1 if direction >= 0 else -1
    candidate = (orientation + step) % ORIENTATIONS
    while SPRITES[shape][candidate] is None:
        candidate = (candidate + step) % ORIENTATIONS
    return candidate


def color_of(shape: int) -> int:
    """Color tag written into the board for a shape."""
    return shape + 1


def spawn_row(shape: int) -> int:
    """Row at which a shape enters; extra blank top rows lift it off the grid."""
    mask = SPRITES[shape][0]
    if mask is None:
        return 0
    blank = 0
    for row in mask:
        if LIT in row:
            break
        blank += 1
    return -max(0, blank - 1)
