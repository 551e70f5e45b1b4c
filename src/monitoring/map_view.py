# rich-based console view of the occupancy map
# src/monitoring/map_view.py
"""
Console rendering of the occupancy index for debugging and demos.

Renders the bounding box of visited cells as a character grid, top row =
largest y:

    #  visited cell
    .  unvisited cell
    *  path waypoint
    S  start endpoint
    E  end endpoint

This is a developer view, not the on-device map.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Optional, Tuple

from rich.panel import Panel
from rich.text import Text

from mapping.geometry import Point2
from mapping.quadtree import OccupancyQuadTree

CellKey = Tuple[int, int]

_STYLES: Dict[str, str] = {
    "#": "green",
    ".": "dim",
    "*": "bold yellow",
    "S": "bold cyan",
    "E": "bold red",
}


def _cell_key(index: OccupancyQuadTree, point: Point2) -> CellKey:
    unit = index.unit_size()
    ox, oy = index.origin
    return (
        int(math.floor((point[0] - ox) / unit + 1e-9)),
        int(math.floor((point[1] - oy) / unit + 1e-9)),
    )


def render_occupancy(
    index: OccupancyQuadTree,
    path: Optional[Iterable[Point2]] = None,
    start: Optional[Point2] = None,
    end: Optional[Point2] = None,
) -> Text:
    """Character grid of visited cells, path and endpoints."""
    marks: Dict[CellKey, str] = {}
    for cell in index.occupied_cells():
        marks[_cell_key(index, cell)] = "#"
    for waypoint in path or ():
        marks[_cell_key(index, waypoint)] = "*"
    if start is not None and index.contains(start):
        marks[_cell_key(index, start)] = "S"
    if end is not None and index.contains(end):
        marks[_cell_key(index, end)] = "E"

    if not marks:
        return Text("(empty map)", style="dim")

    xs = [k[0] for k in marks]
    ys = [k[1] for k in marks]

    text = Text()
    for row, iy in enumerate(range(max(ys), min(ys) - 1, -1)):
        if row:
            text.append("\n")
        for ix in range(min(xs), max(xs) + 1):
            ch = marks.get((ix, iy), ".")
            text.append(ch, style=_STYLES[ch])
    return text


def map_panel(
    index: OccupancyQuadTree,
    path: Optional[Iterable[Point2]] = None,
    start: Optional[Point2] = None,
    end: Optional[Point2] = None,
) -> Panel:
    """render_occupancy() framed with cell count and unit size."""
    body = render_occupancy(index, path=path, start=start, end=end)
    title = f"occupancy: {index.occupied_count()} cells, unit {index.unit_size():g}"
    return Panel(body, title=title)


__all__ = ["render_occupancy", "map_panel"]
