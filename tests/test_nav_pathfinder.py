# tests/test_nav_pathfinder.py
"""
Unit tests for the A* pathfinder over visited cells.

Worlds are built by marking cells on small unit grids, so every expected
coordinate is exact.
"""

from __future__ import annotations

import threading
import time
from typing import Iterable, List, Sequence, Tuple

import pytest

from mapping.geometry import Point2
from mapping.quadtree import OccupancyQuadTree
from nav import NoPathFound, PathFinder, RegionNotMapped, SearchNode, find_path


def fill(index: OccupancyQuadTree, cells: Iterable[Tuple[int, int]]) -> None:
    unit = index.unit_size()
    ox, oy = index.origin
    for ix, iy in cells:
        index.mark_visited((ox + (ix + 0.5) * unit, oy + (iy + 0.5) * unit))


def assert_walkable(
    index: OccupancyQuadTree,
    path: Sequence[Point2],
    start: Point2,
) -> None:
    """Every waypoint is visited and consecutive cells are 8-neighbours."""
    unit = index.unit_size()
    chain: List[Point2] = list(path) + [index.rasterize(start)]
    for waypoint in path:
        assert index.is_occupied(waypoint)
    for a, b in zip(chain, chain[1:]):
        dx = round((b[0] - a[0]) / unit)
        dy = round((b[1] - a[1]) / unit)
        assert max(abs(dx), abs(dy)) == 1


def test_diagonal_route_through_open_block(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, y) for x in range(3) for y in range(3)])

    path = find_path(unit_index, (0.0, 0.0), (2.0, 2.0))

    assert path == [(2.0, 2.0), (1.0, 1.0)]


def test_path_is_goal_to_start_without_start(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, 0) for x in range(5)])

    path = find_path(unit_index, (0.2, 0.7), (4.9, 0.1))

    assert path == [(4.0, 0.0), (3.0, 0.0), (2.0, 0.0), (1.0, 0.0)]


def test_same_cell_yields_empty_path(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(3, 3)])
    assert find_path(unit_index, (3.1, 3.1), (3.9, 3.8)) == []


def test_isolated_endpoints_have_no_path(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(0, 0), (5, 5)])

    with pytest.raises(NoPathFound) as excinfo:
        find_path(unit_index, (0.0, 0.0), (5.0, 5.0))

    assert excinfo.value.reason == "no_path_found"
    assert excinfo.value.kind == "NoPathFound"


def test_disconnected_regions_have_no_path(unit_index: OccupancyQuadTree) -> None:
    left = [(x, y) for x in range(2) for y in range(8)]
    right = [(x, y) for x in range(5, 8) for y in range(8)]
    fill(unit_index, left + right)

    with pytest.raises(NoPathFound):
        find_path(unit_index, (0.5, 0.5), (7.5, 7.5))


def test_unvisited_goal_is_not_mapped(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(0, 0), (1, 0)])

    with pytest.raises(RegionNotMapped) as excinfo:
        find_path(unit_index, (0.5, 0.5), (6.5, 6.5))

    assert excinfo.value.reason == "goal_not_mapped"


def test_unvisited_start_is_not_mapped(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(0, 0), (1, 0)])

    with pytest.raises(RegionNotMapped) as excinfo:
        find_path(unit_index, (6.5, 6.5), (0.5, 0.5))

    assert excinfo.value.reason == "start_not_mapped"


def test_out_of_range_endpoint_is_not_mapped(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(0, 0)])

    with pytest.raises(RegionNotMapped):
        find_path(unit_index, (0.5, 0.5), (-3.0, 20.0))


def test_route_follows_l_shaped_corridor(unit_index: OccupancyQuadTree) -> None:
    corridor = [(x, 0) for x in range(6)] + [(5, y) for y in range(1, 6)]
    fill(unit_index, corridor)

    path = find_path(unit_index, (0.5, 0.5), (5.5, 5.5))

    assert path[0] == (5.0, 5.0)
    assert len(path) >= 9
    assert_walkable(unit_index, path, (0.5, 0.5))


def test_route_goes_around_wall(unit_index: OccupancyQuadTree) -> None:
    # 5x5 block with a wall at x == 2 that only opens at y == 4
    cells = [(x, y) for x in range(5) for y in range(5) if x != 2 or y == 4]
    fill(unit_index, cells)

    path = find_path(unit_index, (0.5, 0.5), (4.5, 0.5))

    assert path[0] == (4.0, 0.0)
    assert (2.0, 4.0) in path
    for x, y in path:
        assert not (x == 2.0 and y < 4.0)
    assert_walkable(unit_index, path, (0.5, 0.5))


def test_accepts_3d_points_on_ground_plane(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, y) for x in range(3) for y in range(3)])

    # (x, height, z): height is dropped, z becomes the ground-plane y
    path = find_path(unit_index, (0.5, 9.0, 0.5), (2.5, -3.0, 2.5))

    assert path == [(2.0, 2.0), (1.0, 1.0)]


def test_rejects_malformed_points(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(0, 0)])
    with pytest.raises(ValueError):
        find_path(unit_index, (0.5,), (0.5, 0.5))


def test_search_does_not_mutate_index(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, y) for x in range(4) for y in range(2)])
    before = set(unit_index.occupied_cells())

    find_path(unit_index, (0.5, 0.5), (3.5, 1.5))

    assert set(unit_index.occupied_cells()) == before


def test_max_expansions_bounds_search(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, y) for x in range(8) for y in range(8)])
    finder = PathFinder(unit_index, max_expansions=1)

    with pytest.raises(NoPathFound) as excinfo:
        finder.find_path((0.5, 0.5), (7.5, 7.5))

    assert excinfo.value.reason == "max_expansions_exhausted"
    assert excinfo.value.details["expansions"] == 1


def test_negative_origin_with_fractional_unit() -> None:
    index = OccupancyQuadTree(origin=(-80.0, -80.0), extent=160.0, max_depth=8)
    x = -1.2
    while x <= 1.2:
        index.mark_visited((x, 0.1))
        x += 0.3

    path = find_path(index, (-1.1, 0.1), (1.1, 0.1))

    assert path
    assert path[0] == index.rasterize((1.1, 0.1))
    assert_walkable(index, path, (-1.1, 0.1))


def test_search_node_identity_is_coordinate_only() -> None:
    root = SearchNode(1.0, 2.0)
    a = SearchNode(3.0, 4.0, parent=root, g=1)
    b = SearchNode(3.0, 4.0, parent=None, g=7)

    assert a == b
    assert hash(a) == hash(b)
    assert a != root
    assert a.coord == (3.0, 4.0)


def test_finder_is_reusable_between_calls(unit_index: OccupancyQuadTree) -> None:
    fill(unit_index, [(x, 0) for x in range(4)])
    finder = PathFinder(unit_index)

    first = finder.find_path((0.5, 0.5), (3.5, 0.5))
    with pytest.raises(RegionNotMapped):
        finder.find_path((0.5, 0.5), (3.5, 3.5))
    second = finder.find_path((0.5, 0.5), (3.5, 0.5))

    assert first == second


def test_writer_waits_for_running_search(unit_index: OccupancyQuadTree, monkeypatch) -> None:
    fill(unit_index, [(x, 0) for x in range(6)])
    written = threading.Event()

    def write() -> None:
        unit_index.mark_visited((3.5, 5.5))
        written.set()

    writer = threading.Thread(target=write)
    lookup = unit_index.occupied_cell_at
    written_during_search: List[bool] = []

    def occupied_cell_at(point: Point2):
        if not writer.is_alive() and not written.is_set():
            writer.start()
            time.sleep(0.05)
        written_during_search.append(written.is_set())
        return lookup(point)

    monkeypatch.setattr(unit_index, "occupied_cell_at", occupied_cell_at)

    path = find_path(unit_index, (0.5, 0.5), (5.5, 0.5))

    writer.join(timeout=2.0)
    assert path[0] == (5.0, 0.0)
    assert written_during_search and not any(written_during_search)
    assert written.is_set()
    assert unit_index.is_occupied((3.5, 5.5))
