# bounded quadtree occupancy index over the ground plane
# src/mapping/quadtree.py
"""
OccupancyQuadTree: sparse occupancy map of visited ground.

The root covers a fixed square region [origin, origin + extent) on both
axes and is subdivided max_depth times down to unit cells of size
extent / 2**max_depth. Nodes are created lazily on the first write into a
quadrant and never removed; clear() only resets leaf flags.

Boundary policy:
- Points outside the root region are never occupied.
- Writes to points outside the root region are ignored (no exception).

All public methods hold one coarse re-entrant lock so a tracking thread
can write while a render/search thread reads. Listener notification runs
after the write has completed and outside the lock.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Iterator, List, Optional, Tuple

from .geometry import Point2

log = logging.getLogger(__name__)

# Inset applied to the upper edges of each cell in the display polygon so
# adjacent cells stay visually separated.
PLANE_SPACER = 0.02

# Called with the canonical coordinate of a newly occupied cell.
IndexListener = Callable[[Point2], None]


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass
class QuadNode:
    """
    Square region of the plane.

    depth is the number of subdivisions left until a unit cell; depth == 0
    is a leaf and only leaves carry a meaningful `occupied` flag.

    Child slots by quadrant:
        0 = (x <  mid, y <  mid)
        1 = (x <  mid, y >= mid)
        2 = (x >= mid, y <  mid)
        3 = (x >= mid, y >= mid)
    """

    origin: Point2
    extent: float
    depth: int
    occupied: bool = False
    children: List[Optional["QuadNode"]] = field(
        default_factory=lambda: [None, None, None, None]
    )

    @property
    def is_leaf(self) -> bool:
        return self.depth == 0

    def child_index(self, point: Point2) -> int:
        half = self.extent / 2.0
        left = point[0] < self.origin[0] + half
        low = point[1] < self.origin[1] + half
        if left:
            return 0 if low else 1
        return 2 if low else 3

    def child_origin(self, index: int) -> Point2:
        half = self.extent / 2.0
        x, y = self.origin
        if index == 0:
            return (x, y)
        if index == 1:
            return (x, y + half)
        if index == 2:
            return (x + half, y)
        return (x + half, y + half)

    def get_or_create_child(self, index: int) -> "QuadNode":
        child = self.children[index]
        if child is None:
            child = QuadNode(
                origin=self.child_origin(index),
                extent=self.extent / 2.0,
                depth=self.depth - 1,
            )
            self.children[index] = child
        return child

    def iter_leaves(self) -> Iterator["QuadNode"]:
        """Pre-order walk over existing leaves, quadrants 0..3."""
        if self.is_leaf:
            yield self
            return
        for child in self.children:
            if child is not None:
                yield from child.iter_leaves()


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class OccupancyQuadTree:
    """
    Occupancy index of visited unit cells.

    Usage:

        index = OccupancyQuadTree(origin=(-80.0, -80.0), extent=160.0, max_depth=8)
        index.mark_visited((1.3, 2.7))
        index.is_occupied((1.4, 2.6))   # True, same 0.625-sized cell
        index.rasterize((1.3, 2.7))     # (1.25, 2.5)
    """

    def __init__(self, origin: Point2, extent: float, max_depth: int) -> None:
        if extent <= 0:
            raise ValueError(f"extent must be positive, got {extent}")
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        self._root = QuadNode(
            origin=(float(origin[0]), float(origin[1])),
            extent=float(extent),
            depth=int(max_depth),
        )
        self._max_depth = int(max_depth)
        self._listener: Optional[IndexListener] = None
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def origin(self) -> Point2:
        return self._root.origin

    @property
    def extent(self) -> float:
        return self._root.extent

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def unit_size(self) -> float:
        """Side length of the smallest addressable cell."""
        return self._root.extent / (2 ** self._max_depth)

    @contextmanager
    def locked(self) -> Iterator["OccupancyQuadTree"]:
        """
        Hold the index lock across several calls.

        The lock is re-entrant, so the regular public methods can still be
        used inside the block.
        """
        with self._lock:
            yield self

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_listener(self, listener: Optional[IndexListener]) -> None:
        """Register the single change listener, replacing any earlier one."""
        with self._lock:
            self._listener = listener

    def mark_visited(self, point: Point2) -> None:
        """Mark the unit cell containing `point` as occupied."""
        with self._lock:
            self._mark(point)

    def mark_visited_and_notify(self, point: Point2) -> bool:
        """
        Mark the cell containing `point` and notify the listener if the cell
        went from unoccupied to occupied.

        Returns True when that transition happened.
        """
        with self._lock:
            leaf, newly_filled = self._mark(point)
            listener = self._listener

        if newly_filled and listener is not None and leaf is not None:
            listener(leaf.origin)
        return newly_filled

    def clear(self) -> None:
        """Reset every leaf to unoccupied; created nodes are kept."""
        with self._lock:
            for leaf in self._root.iter_leaves():
                leaf.occupied = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def contains(self, point: Point2) -> bool:
        """True if `point` lies inside the root region."""
        x0, y0 = self._root.origin
        size = self._root.extent
        return x0 <= point[0] < x0 + size and y0 <= point[1] < y0 + size

    def is_occupied(self, point: Point2) -> bool:
        with self._lock:
            leaf = self._find_leaf(point)
            return leaf is not None and leaf.occupied

    def occupied_cell_at(self, point: Point2) -> Optional[Point2]:
        """Canonical coordinate of the cell containing `point`, if occupied."""
        with self._lock:
            leaf = self._find_leaf(point)
            if leaf is None or not leaf.occupied:
                return None
            return leaf.origin

    def rasterize(self, point: Point2) -> Point2:
        """
        Snap `point` to the canonical coordinate of its containing cell.

        If that cell is not occupied the point is returned unchanged, so
        callers should check is_occupied() before relying on the result.
        """
        cell = self.occupied_cell_at(point)
        if cell is None:
            return point
        return cell

    def occupied_cells(self) -> List[Point2]:
        with self._lock:
            return [leaf.origin for leaf in self._root.iter_leaves() if leaf.occupied]

    def occupied_boundary_as_polygon(self) -> List[Point2]:
        """
        Two counter-clockwise triangles per occupied cell, flattened.

        Each cell is shrunk by PLANE_SPACER on its upper edges. Shared
        edges between neighbouring cells are not merged.
        """
        with self._lock:
            vertices: List[Point2] = []
            for leaf in self._root.iter_leaves():
                if not leaf.occupied:
                    continue
                x, y = leaf.origin
                far = leaf.extent - PLANE_SPACER
                vertices.extend(
                    [
                        (x, y),
                        (x + far, y),
                        (x, y + far),
                        (x, y + far),
                        (x + far, y),
                        (x + far, y + far),
                    ]
                )
            return vertices

    def occupied_count(self) -> int:
        with self._lock:
            return sum(1 for leaf in self._root.iter_leaves() if leaf.occupied)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _mark(self, point: Point2) -> Tuple[Optional[QuadNode], bool]:
        """
        Create the path to the leaf for `point` and fill it (lock held).

        Returns (leaf, newly_filled); leaf is None for out-of-range points.
        """
        if not self.contains(point):
            log.debug("Ignoring out-of-range point %s", point)
            return None, False

        node = self._root
        while not node.is_leaf:
            node = node.get_or_create_child(node.child_index(point))

        if node.occupied:
            return node, False
        node.occupied = True
        return node, True

    def _find_leaf(self, point: Point2) -> Optional[QuadNode]:
        """Walk to the leaf for `point` without creating nodes (lock held)."""
        if not self.contains(point):
            return None

        node: Optional[QuadNode] = self._root
        while node is not None and not node.is_leaf:
            node = node.children[node.child_index(point)]
        return node


__all__ = ["PLANE_SPACER", "IndexListener", "QuadNode", "OccupancyQuadTree"]
