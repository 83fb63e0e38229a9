# geometry.py - positioned text fragments and directional proximity

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Tolerated overlap back into the anchor, as a fraction of its size
RIGHT_OVERLAP_FACTOR = 0.2
DOWN_OVERLAP_FACTOR = 0.5

INFINITE_DISTANCE = math.inf


class Direction(Enum):
    """The direction to search for an adjacent fragment."""
    RIGHT = "right"
    DOWN = "down"


@dataclass(frozen=True)
class Fragment:
    """A unit of text with its page-local position (top-left origin) and size."""
    text: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TextRun:
    """A positioned text item made of one or more already decoded sub-runs."""
    x: float
    y: float
    runs: Tuple[str, ...]

    @classmethod
    def from_fragment(cls, fragment: Fragment) -> "TextRun":
        return cls(x=fragment.x, y=fragment.y, runs=(fragment.text,))


def _squared_distance(point1: Tuple[float, float], point2: Tuple[float, float]) -> float:
    dx = point2[0] - point1[0]
    dy = point2[1] - point1[1]
    return dx * dx + dy * dy


def calculate_distance(fragment1: Fragment, fragment2: Fragment, direction: Direction) -> float:
    """
    Squared Euclidean distance from fragment1 to fragment2 in the given direction.

    Only used for ordering, so the square root is never taken. A fragment that
    reaches too far back into fragment1 is not adjacent and gets INFINITE_DISTANCE,
    as does any unknown direction.
    """
    if direction == Direction.RIGHT:
        point1 = (fragment1.x + fragment1.width, fragment1.y + fragment1.height / 2)
        point2 = (fragment2.x, fragment2.y + fragment2.height / 2)
        if point2[0] < point1[0] - fragment1.width * RIGHT_OVERLAP_FACTOR:
            return INFINITE_DISTANCE
        return _squared_distance(point1, point2)

    if direction == Direction.DOWN:
        point1 = (fragment1.x + fragment1.width / 2, fragment1.y + fragment1.height)
        # Clamp to fragment2's own box when fragment1 is the wider of the two
        point2 = (min(fragment2.x + fragment1.width / 2, fragment2.x + fragment2.width), fragment2.y)
        if point2[1] < point1[1] - fragment1.height * DOWN_OVERLAP_FACTOR:
            return INFINITE_DISTANCE
        return _squared_distance(point1, point2)

    return INFINITE_DISTANCE


def is_overlap(fragment1: Fragment, fragment2: Fragment, direction: Direction) -> bool:
    """Whether the two fragments' projected ranges intersect for the given direction."""
    if direction == Direction.RIGHT:
        return fragment2.y < fragment1.y + fragment1.height and fragment2.y + fragment2.height > fragment1.y
    if direction == Direction.DOWN:
        return fragment2.x < fragment1.x + fragment1.width and fragment2.x + fragment2.width > fragment1.x
    return False
