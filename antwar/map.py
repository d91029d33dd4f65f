"""
Hex grid map for the ant-war arena.

Offset coordinates (x, y) on a fixed 19x19 board. Row parity is taken on y:
even and odd rows use different neighbour offsets. Cells are void, path,
barrier, or one of the two players' highlands.
"""

from enum import IntEnum
from typing import Optional


EDGE = 10
MAP_SIZE = 2 * EDGE - 1


class PointType(IntEnum):
    VOID = -1
    PATH = 0
    BARRIER = 1
    PLAYER0_HIGHLAND = 2
    PLAYER1_HIGHLAND = 3


# Indexed MAP_PROPERTY[x][y]
MAP_PROPERTY = (
    (-1, -1, -1, -1, -1, -1, -1, -1, 0, 1, 0, -1, -1, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, 0, 0, 1, 0, 1, 0, 0, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, 0, 0, 0, 1, 1, 0, 1, 1, 0, 0, 0, -1, -1, -1, -1),
    (-1, -1, 0, 0, 0, 1, 1, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, -1, -1),
    (0, 0, 2, 2, 0, 1, 0, 0, 0, 2, 0, 0, 0, 1, 0, 2, 2, 0, 0),
    (0, 0, 0, 2, 0, 0, 2, 2, 0, 2, 0, 2, 2, 0, 0, 2, 0, 0, 0),
    (0, 2, 2, 0, 2, 0, 0, 2, 0, 2, 0, 2, 0, 0, 2, 0, 2, 2, 0),
    (0, 2, 0, 0, 0, 2, 0, 0, 2, 0, 2, 0, 0, 2, 0, 0, 0, 2, 0),
    (0, 0, 2, 0, 2, 0, 0, 2, 0, 0, 0, 2, 0, 0, 2, 0, 2, 0, 0),
    (0, 1, 3, 0, 3, 1, 0, 1, 0, 1, 0, 1, 0, 1, 3, 0, 3, 1, 0),
    (0, 0, 0, 0, 0, 0, 0, 3, 3, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0),
    (0, 3, 3, 0, 3, 3, 0, 0, 0, 0, 0, 0, 0, 3, 3, 0, 3, 3, 0),
    (0, 3, 0, 0, 0, 0, 3, 3, 0, 3, 0, 3, 3, 0, 0, 0, 0, 3, 0),
    (0, 0, 3, 3, 0, 0, 0, 3, 0, 3, 0, 3, 0, 0, 0, 3, 3, 0, 0),
    (-1, 0, 0, 3, 0, 1, 1, 0, 0, 3, 0, 0, 1, 1, 0, 3, 0, 0, -1),
    (-1, -1, -1, 0, 0, 1, 0, 0, 1, 0, 1, 0, 0, 1, 0, 0, -1, -1, -1),
    (-1, -1, -1, -1, -1, 0, 0, 1, 1, 0, 1, 1, 0, 0, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, -1, 0, 0, 0, 0, 0, -1, -1, -1, -1, -1, -1, -1),
    (-1, -1, -1, -1, -1, -1, -1, -1, -1, 1, -1, -1, -1, -1, -1, -1, -1, -1, -1),
)

# OFFSET[y % 2][direction] -> (dx, dy)
OFFSET = (
    ((0, 1), (-1, 0), (0, -1), (1, -1), (1, 0), (1, 1)),
    ((-1, 1), (-1, 0), (-1, -1), (0, -1), (1, 0), (0, 1)),
)

NUM_DIRECTIONS = 6


def reverse_direction(direction: int) -> int:
    return (direction + 3) % NUM_DIRECTIONS


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < MAP_SIZE and 0 <= y < MAP_SIZE


def point_type(x: int, y: int) -> PointType:
    """Cell kind at (x, y); anything off the board reads as void."""
    if not in_bounds(x, y):
        return PointType.VOID
    return PointType(MAP_PROPERTY[x][y])


def is_valid_pos(x: int, y: int) -> bool:
    return point_type(x, y) != PointType.VOID


def is_path(x: int, y: int) -> bool:
    return point_type(x, y) == PointType.PATH


def is_highland(player: int, x: int, y: int) -> bool:
    """Whether (x, y) is a tower site belonging to `player`."""
    kind = point_type(x, y)
    if player == 0:
        return kind == PointType.PLAYER0_HIGHLAND
    return kind == PointType.PLAYER1_HIGHLAND


def distance(x0: int, y0: int, x1: int, y1: int) -> int:
    """
    Hex distance between two offset coordinates.

    Symmetric, zero iff the points coincide, and 1 for every pair produced
    by a single OFFSET step.
    """
    dy = abs(y0 - y1)
    if dy % 2:
        if x0 > x1:
            dx = max(0, abs(x0 - x1) - dy // 2 - y0 % 2)
        else:
            dx = max(0, abs(x0 - x1) - dy // 2 - (1 - y0 % 2))
    else:
        dx = max(0, abs(x0 - x1) - dy // 2)
    return dx + dy


def neighbor(x: int, y: int, direction: int) -> tuple[int, int]:
    dx, dy = OFFSET[y % 2][direction]
    return x + dx, y + dy


def get_direction(x0: int, y0: int, x1: int, y1: int) -> Optional[int]:
    """Direction index leading from (x0, y0) to (x1, y1), or None if not adjacent."""
    delta = (x1 - x0, y1 - y0)
    for i, offset in enumerate(OFFSET[y0 % 2]):
        if offset == delta:
            return i
    return None


def points_in_range(x: int, y: int, radius: int) -> list[tuple[int, int]]:
    """All valid cells within `radius` of (x, y), in (x, y) order."""
    points = []
    for px in range(max(0, x - radius - 1), min(MAP_SIZE, x + radius + 2)):
        for py in range(max(0, y - radius), min(MAP_SIZE, y + radius + 1)):
            if is_valid_pos(px, py) and distance(x, y, px, py) <= radius:
                points.append((px, py))
    return points
