# tests/test_nav_session.py
"""
Tests for NavigationSession.

Covers:
- position stream → OCCUPANCY_CHANGED events
- endpoint designation triggers path requests
- both failure kinds are caught and published, not raised
- reset() and render buffers
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from env.loader import load_navigation_profile
from mapping.quadtree import OccupancyQuadTree
from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from nav import NavigationSession, NoPathFound, RegionNotMapped


@pytest.fixture
def bus_events():
    bus = EventBus()
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    return bus, events


def of_type(events: List[MonitoringEvent], event_type: EventType) -> List[MonitoringEvent]:
    return [e for e in events if e.event_type == event_type]


def test_position_updates_publish_new_cells_once(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)

    assert session.update_position((0.2, 0.3)) is True
    assert session.update_position((0.8, 0.9)) is False
    assert session.update_position((1.5, 0.5)) is True

    changed = of_type(events, EventType.OCCUPANCY_CHANGED)
    assert [e.payload["cell"] for e in changed] == [[0.0, 0.0], [1.0, 0.0]]
    assert all(e.module == "nav.session" for e in changed)


def test_3d_positions_use_ground_plane(unit_index: OccupancyQuadTree) -> None:
    session = NavigationSession(unit_index)
    session.update_position((2.5, -1.4, 6.5))
    assert unit_index.is_occupied((2.0, 6.0))


def test_no_search_until_both_endpoints_set(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)

    assert session.set_start((0.5, 0.5)) is None
    assert of_type(events, EventType.PATH_REQUESTED) == []
    assert session.recompute_path() is None


def test_walk_then_endpoints_finds_path(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)

    for x in range(3):
        for y in range(3):
            session.update_position((x + 0.5, y + 0.5))
    session.set_start((0.0, 0.0))
    path = session.set_end((2.0, 2.0))

    assert path == [(2.0, 2.0), (1.0, 1.0)]
    assert session.path == path
    assert session.last_error is None

    found = of_type(events, EventType.PATH_FOUND)
    assert len(found) == 1
    assert found[0].payload["waypoints"] == 2
    assert found[0].payload["path"] == [[2.0, 2.0], [1.0, 1.0]]
    assert found[0].correlation_id == of_type(events, EventType.PATH_REQUESTED)[0].correlation_id


def test_unreachable_goal_is_reported_not_raised(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)

    session.set_start((0.5, 0.5))
    path = session.set_end((5.5, 5.5))

    assert path is None
    assert session.path is None
    assert isinstance(session.last_error, NoPathFound)

    failed = of_type(events, EventType.PATH_FAILED)
    assert len(failed) == 1
    assert failed[0].payload["kind"] == "NoPathFound"
    assert failed[0].payload["reason"] == "no_path_found"


def test_out_of_range_goal_is_region_not_mapped(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)

    session.set_start((0.5, 0.5))
    assert session.set_end((50.0, 50.0)) is None

    assert isinstance(session.last_error, RegionNotMapped)
    assert of_type(events, EventType.PATH_FAILED)[0].payload["kind"] == "RegionNotMapped"


def test_exploring_more_ground_recovers_path(unit_index: OccupancyQuadTree) -> None:
    session = NavigationSession(unit_index)
    session.set_start((0.5, 0.5))
    assert session.set_end((3.5, 0.5)) is None

    session.update_position((1.5, 0.5))
    session.update_position((2.5, 0.5))
    path = session.recompute_path()

    assert path == [(3.0, 0.0), (2.0, 0.0), (1.0, 0.0)]
    assert session.last_error is None


def test_reset_forgets_everything(unit_index: OccupancyQuadTree, bus_events) -> None:
    bus, events = bus_events
    session = NavigationSession(unit_index, bus)
    session.set_start((0.5, 0.5))
    session.set_end((1.5, 0.5))
    assert session.path == [(1.0, 0.0)]

    session.reset()

    assert unit_index.occupied_cells() == []
    assert session.start is None and session.end is None
    assert session.path is None
    assert len(of_type(events, EventType.INDEX_CLEARED)) == 1


def test_path_markers_and_floor_plan(unit_index: OccupancyQuadTree) -> None:
    session = NavigationSession(unit_index, path_height=-1.2)
    assert session.path_markers() == []

    session.update_position((1.5, 0.5))
    session.set_start((0.5, 0.5))
    session.set_end((2.5, 0.5))

    assert session.path_markers() == [(2.0, -1.2, 0.0), (1.0, -1.2, 0.0)]
    # three visited cells, six vertices each, three floats per vertex
    assert len(session.floor_plan()) == 3 * 6 * 3


def test_from_profile_uses_config(tmp_path: Path, bus_events, monkeypatch) -> None:
    monkeypatch.delenv("NAV_PROFILE", raising=False)
    cfg = tmp_path / "navigation.yaml"
    cfg.write_text(
        "profile: small\n"
        "profiles:\n"
        "  small:\n"
        "    index: {origin: [0, 0], extent: 4, max_depth: 2}\n"
        "    floor_plan: {path_height: 0.5}\n",
        encoding="utf-8",
    )
    bus, events = bus_events
    session = NavigationSession.from_profile(load_navigation_profile(path=cfg), bus)

    assert session.index.unit_size() == 1.0
    for x in range(3):
        session.update_position((x + 0.5, 0.5))
    session.set_start((0.5, 0.5))
    session.set_end((2.5, 0.5))

    assert session.path_markers() == [(2.0, 0.5, 0.0), (1.0, 0.5, 0.0)]
    assert len(of_type(events, EventType.OCCUPANCY_CHANGED)) == 3
