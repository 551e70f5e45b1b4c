# ground-plane point types and projections
# src/mapping/geometry.py
"""
Point types shared by the occupancy index and the pathfinder.

World positions arrive either as 2D ground-plane points (x, y) or as 3D
points (x, y, z) with y as the vertical axis. The ground plane of a 3D
point is (x, z).
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple, Union

# (x, y) on the ground plane
Point2 = Tuple[float, float]

# (x, y, z) world coordinates, y up
Point3 = Tuple[float, float, float]

AnyPoint = Union[Point2, Point3, Sequence[float]]


def ground_projection(point: Point3) -> Point2:
    """Drop the vertical axis of a 3D world point."""
    x, _, z = point
    return float(x), float(z)


def as_point2(point: AnyPoint) -> Point2:
    """
    Normalize a 2D or 3D point into a ground-plane Point2.

    Raises ValueError for anything that is not 2 or 3 components long.
    """
    if len(point) == 3:
        return ground_projection(point)  # type: ignore[arg-type]
    if len(point) == 2:
        return float(point[0]), float(point[1])
    raise ValueError(f"Expected a 2D or 3D point, got {len(point)} components")


def euclidean(a: Point2, b: Point2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


__all__ = ["Point2", "Point3", "AnyPoint", "ground_projection", "as_point2", "euclidean"]
