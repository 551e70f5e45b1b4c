# A* search over visited cells of the occupancy index
# src/nav/pathfinder.py
"""
A* pathfinding over an OccupancyQuadTree.

- 8-connected moves between unit cells (4 axis-aligned, 4 diagonal).
- Only cells the index reports as occupied are passable.
- g = hops from the start, h = floor(euclidean / unit) + 1.

The "+1" in h means the heuristic can overestimate by one hop, so the
result is not guaranteed optimal in every layout. It is kept as is; changing
it changes which of several near-equal routes is returned.

This module never mutates the index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from mapping.geometry import AnyPoint, Point2, as_point2, euclidean
from mapping.quadtree import OccupancyQuadTree

from .errors import NoPathFound, RegionNotMapped

log = logging.getLogger(__name__)

# Expansion order of neighbours, in units. Ties between equal-f frontier
# entries go to whichever was inserted first, so this order is observable.
_NEIGHBOUR_OFFSETS = (
    (1, 0),
    (1, 1),
    (1, -1),
    (-1, 0),
    (-1, 1),
    (-1, -1),
    (0, 1),
    (0, -1),
)


@dataclass(frozen=True)
class SearchNode:
    """
    Cell coordinate reached during one search, plus how it was reached.

    Equality and hashing use (x, y) only.
    """

    x: float
    y: float
    parent: Optional["SearchNode"] = field(default=None, compare=False, repr=False)
    g: int = field(default=0, compare=False)

    @property
    def coord(self) -> Point2:
        return (self.x, self.y)


class PathFinder:
    """
    Shortest-route search between two world points through visited ground.

    Stateless between calls: every find_path() builds its own frontier and
    closed set and discards them when it returns.

    max_expansions optionally bounds the number of closed nodes per search;
    None means unbounded.
    """

    def __init__(
        self,
        index: OccupancyQuadTree,
        max_expansions: Optional[int] = None,
    ) -> None:
        self._index = index
        self._unit = index.unit_size()
        self._max_expansions = max_expansions

    @property
    def unit(self) -> float:
        return self._unit

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_path(self, start: AnyPoint, goal: AnyPoint) -> List[Point2]:
        """
        Search a route from `start` to `goal`.

        Points may be 2D ground-plane points or 3D world points (x, y, z),
        in which case (x, z) is used.

        Returns the waypoints ordered goal → start, with the start cell
        itself left out. Raises RegionNotMapped if either endpoint lies in
        an unoccupied cell, NoPathFound if no route exists.
        """
        start_pt = as_point2(start)
        goal_pt = as_point2(goal)

        # Hold the index for the whole search so a concurrent writer cannot
        # change occupancy between expansions.
        with self._index.locked():
            start_cell = self._index.occupied_cell_at(start_pt)
            goal_cell = self._index.occupied_cell_at(goal_pt)

            if start_cell is None:
                raise RegionNotMapped(
                    reason="start_not_mapped",
                    details={"start": list(start_pt), "goal": list(goal_pt)},
                )
            if goal_cell is None:
                raise RegionNotMapped(
                    reason="goal_not_mapped",
                    details={"start": list(start_pt), "goal": list(goal_pt)},
                )

            return self._search(SearchNode(*start_cell), SearchNode(*goal_cell))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _search(self, start: SearchNode, goal: SearchNode) -> List[Point2]:
        frontier: Dict[Point2, SearchNode] = {start.coord: start}
        closed: Set[Point2] = set()
        expansions = 0

        while frontier:
            current = self._closest(frontier, goal)

            if current == goal:
                path = _reconstruct_path(current)
                log.debug(
                    "Path found: %d waypoints after %d expansions",
                    len(path),
                    expansions,
                )
                return path

            if self._max_expansions is not None and expansions >= self._max_expansions:
                raise NoPathFound(
                    reason="max_expansions_exhausted",
                    details={
                        "start": list(start.coord),
                        "goal": list(goal.coord),
                        "expansions": expansions,
                    },
                )

            del frontier[current.coord]
            closed.add(current.coord)
            expansions += 1
            self._expand(current, goal, frontier, closed)

        raise NoPathFound(
            reason="no_path_found",
            details={
                "start": list(start.coord),
                "goal": list(goal.coord),
                "expansions": expansions,
            },
        )

    def _closest(self, frontier: Dict[Point2, SearchNode], goal: SearchNode) -> SearchNode:
        """Frontier entry with the smallest f; the first one wins on ties."""
        best: Optional[SearchNode] = None
        best_f = 0
        for node in frontier.values():
            f = self._f(node, goal)
            if best is None or f < best_f:
                best = node
                best_f = f
        assert best is not None
        return best

    def _expand(
        self,
        current: SearchNode,
        goal: SearchNode,
        frontier: Dict[Point2, SearchNode],
        closed: Set[Point2],
    ) -> None:
        unit = self._unit
        half = unit / 2.0

        for dx, dy in _NEIGHBOUR_OFFSETS:
            # Probe the neighbour at its centre so float drift on the cell
            # corner cannot route the lookup into the wrong cell.
            probe = (current.x + dx * unit + half, current.y + dy * unit + half)
            cell = self._index.occupied_cell_at(probe)
            if cell is None or cell in closed:
                continue

            neighbour = SearchNode(cell[0], cell[1], parent=current, g=current.g + 1)
            existing = frontier.get(cell)
            if existing is not None and self._f(existing, goal) < self._f(neighbour, goal):
                continue
            frontier[cell] = neighbour

    def _f(self, node: SearchNode, goal: SearchNode) -> int:
        return node.g + _heuristic(node.coord, goal.coord, self._unit)


def _heuristic(a: Point2, b: Point2, unit: float) -> int:
    """Euclidean distance in whole units, plus one."""
    return int(euclidean(a, b) / unit) + 1


def _reconstruct_path(node: SearchNode) -> List[Point2]:
    """Walk parents from the goal, stopping before the parentless start."""
    path: List[Point2] = []
    current = node
    while current.parent is not None:
        path.append(current.coord)
        current = current.parent
    return path


def find_path(
    index: OccupancyQuadTree,
    start: AnyPoint,
    goal: AnyPoint,
    max_expansions: Optional[int] = None,
) -> List[Point2]:
    """Convenience wrapper: one-off PathFinder search."""
    return PathFinder(index, max_expansions=max_expansions).find_path(start, goal)


__all__ = ["SearchNode", "PathFinder", "find_path"]
