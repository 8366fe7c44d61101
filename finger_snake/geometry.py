"""
Plane geometry helpers.
"""
import math

from .types import Point


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    dx = p1.x - p2.x
    dy = p1.y - p2.y
    return math.sqrt(dx * dx + dy * dy)


def scale_normalized(xy, width: int, height: int) -> Point:
    """Map a normalized (x, y) in [0, 1] to canvas pixel space."""
    return Point(xy[0] * width, xy[1] * height)
