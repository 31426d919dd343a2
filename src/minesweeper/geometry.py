"""
Grid geometry helpers.

Coordinates are (x, y) with x the column and y the row. Cells are stored
row-major, so the flat index of (x, y) is ``y * width + x``.
"""
from typing import Iterator, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


# ============================================================================
# Constants
# ============================================================================

# Relative positions of the 8 surrounding cells
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


# ============================================================================
# Coordinate Utilities
# ============================================================================

def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    """Check if (x, y) lies on a width x height grid."""
    return 0 <= x < width and 0 <= y < height


def index_of(x: int, y: int, width: int) -> int:
    """Flat row-major index of (x, y)."""
    return y * width + x


def neighbour_coordinates(
    x: int, y: int, width: int, height: int
) -> Iterator[Tuple[int, int]]:
    """
    Yield in-bounds neighbours of (x, y).

    There is no wraparound: cells on an edge have 5 neighbours,
    corners have 3.
    """
    for delta_x, delta_y in NEIGHBOUR_OFFSETS:
        new_x = x + delta_x
        new_y = y + delta_y
        if in_bounds(new_x, new_y, width, height):
            yield new_x, new_y


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split a flat sequence into consecutive lists of ``size`` items."""
    if size < 1:
        raise ValueError("Chunk size must be positive")
    return [list(items[start:start + size]) for start in range(0, len(items), size)]
