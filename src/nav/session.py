# position stream + path requests over one occupancy index
# src/nav/session.py
"""
NavigationSession: glue between a position stream, endpoint designation
and the pathfinder.

Flow:
    - The tracking side calls update_position() for every pose update.
    - The UI side calls set_start() / set_end(); once both exist a path is
      (re)computed.
    - Both failure kinds are caught per request, logged and published as
      PATH_FAILED; the session keeps running.

Rules:
- The session owns no geometry of its own; the index is the single source
  of truth for visited ground.
- Each path request starts from scratch. A newer request simply replaces
  the previous result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from mapping.floor_plan import (
    DEFAULT_MAX_VERTICES,
    DEFAULT_PATH_HEIGHT,
    floor_plan_vertices,
    waypoints_to_markers,
)
from mapping.geometry import AnyPoint, Point2, Point3, as_point2
from mapping.quadtree import OccupancyQuadTree
from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event

from .errors import NavigationError
from .pathfinder import PathFinder

if TYPE_CHECKING:
    from env.schema import NavigationProfile

log = logging.getLogger(__name__)

_MODULE = "nav.session"


class NavigationSession:
    """
    Keeps the occupancy index, the current endpoints and the last path.

    bus is optional; without it the session only logs through the
    standard logging module.
    """

    def __init__(
        self,
        index: OccupancyQuadTree,
        bus: Optional[EventBus] = None,
        *,
        max_expansions: Optional[int] = None,
        path_height: float = DEFAULT_PATH_HEIGHT,
        max_vertices: int = DEFAULT_MAX_VERTICES,
    ) -> None:
        self._index = index
        self._bus = bus
        self._max_expansions = max_expansions
        self._path_height = path_height
        self._max_vertices = max_vertices

        self._start: Optional[Point2] = None
        self._end: Optional[Point2] = None
        self._path: Optional[List[Point2]] = None
        self._last_error: Optional[NavigationError] = None
        self._request_seq = 0

        self._index.set_listener(self._on_cell_filled)

    @classmethod
    def from_profile(
        cls,
        profile: "NavigationProfile",
        bus: Optional[EventBus] = None,
    ) -> "NavigationSession":
        """Build an index and a session from a loaded NavigationProfile."""
        from env.loader import build_index

        return cls(
            build_index(profile),
            bus,
            max_expansions=profile.pathfinder.max_expansions,
            path_height=profile.floor_plan.path_height,
            max_vertices=profile.floor_plan.max_vertices,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def index(self) -> OccupancyQuadTree:
        return self._index

    @property
    def start(self) -> Optional[Point2]:
        return self._start

    @property
    def end(self) -> Optional[Point2]:
        return self._end

    @property
    def path(self) -> Optional[List[Point2]]:
        """Last successful path (goal → start), or None."""
        return None if self._path is None else list(self._path)

    @property
    def last_error(self) -> Optional[NavigationError]:
        return self._last_error

    # ------------------------------------------------------------------
    # Position stream
    # ------------------------------------------------------------------

    def update_position(self, point: AnyPoint) -> bool:
        """
        Record a tracked position as visited ground.

        Returns True if this opened up a previously unvisited cell.
        """
        return self._index.mark_visited_and_notify(as_point2(point))

    # ------------------------------------------------------------------
    # Endpoints + path requests
    # ------------------------------------------------------------------

    def set_start(self, point: AnyPoint) -> Optional[List[Point2]]:
        """Designate the start; the point itself counts as visited."""
        self._start = as_point2(point)
        self.update_position(self._start)
        return self._maybe_recompute()

    def set_end(self, point: AnyPoint) -> Optional[List[Point2]]:
        """Designate the goal; the point itself counts as visited."""
        self._end = as_point2(point)
        self.update_position(self._end)
        return self._maybe_recompute()

    def recompute_path(self) -> Optional[List[Point2]]:
        """
        Search a fresh path between the current endpoints.

        Returns the waypoints, or None if an endpoint is missing or the
        search failed (see last_error).
        """
        if self._start is None or self._end is None:
            return None

        self._request_seq += 1
        correlation_id = f"path-{self._request_seq}"
        self._publish(
            EventType.PATH_REQUESTED,
            "Path requested",
            {"start": list(self._start), "end": list(self._end)},
            correlation_id,
        )

        finder = PathFinder(self._index, max_expansions=self._max_expansions)
        try:
            path = finder.find_path(self._start, self._end)
        except NavigationError as exc:
            self._path = None
            self._last_error = exc
            log.warning("Path request %s failed: %s", correlation_id, exc)
            self._publish(
                EventType.PATH_FAILED,
                "Path search failed",
                {"kind": exc.kind, "reason": exc.reason, "details": exc.details},
                correlation_id,
            )
            return None

        self._path = path
        self._last_error = None
        log.info("Path request %s: %d waypoints", correlation_id, len(path))
        self._publish(
            EventType.PATH_FOUND,
            "Path found",
            {"waypoints": len(path), "path": [list(p) for p in path]},
            correlation_id,
        )
        return list(path)

    def reset(self) -> None:
        """Forget visited ground, endpoints and the last path."""
        self._index.clear()
        self._start = None
        self._end = None
        self._path = None
        self._last_error = None
        self._publish(EventType.INDEX_CLEARED, "Occupancy index cleared", {})

    # ------------------------------------------------------------------
    # Render buffers
    # ------------------------------------------------------------------

    def path_markers(self) -> List[Point3]:
        if not self._path:
            return []
        return waypoints_to_markers(self._path, height=self._path_height)

    def floor_plan(self) -> List[float]:
        return floor_plan_vertices(self._index, max_vertices=self._max_vertices)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _maybe_recompute(self) -> Optional[List[Point2]]:
        if self._start is None or self._end is None:
            return None
        return self.recompute_path()

    def _on_cell_filled(self, cell: Point2) -> None:
        self._publish(
            EventType.OCCUPANCY_CHANGED,
            "Cell visited",
            {"cell": list(cell), "unit": self._index.unit_size()},
        )

    def _publish(
        self,
        event_type: EventType,
        message: str,
        payload: Dict[str, Any],
        correlation_id: Optional[str] = None,
    ) -> None:
        if self._bus is None:
            return
        log_event(
            bus=self._bus,
            module=_MODULE,
            event_type=event_type,
            message=message,
            payload=payload,
            correlation_id=correlation_id,
        )


__all__ = ["NavigationSession"]
