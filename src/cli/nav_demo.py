# src/cli/nav_demo.py
"""
Replay a recorded walk into a navigation session and print the result.

Trace file (YAML):

    positions:          # tracked positions, 2D [x, y] or 3D [x, y, z]
      - [0.0, 0.0]
      - [0.6, 0.1]
    start: [0.0, 0.0]
    end: [3.0, 1.0]

Exit codes: 0 path found, 1 navigation failure, 2 unreadable trace,
3 unreadable config or unknown profile.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from rich.console import Console
from rich.table import Table

from app.logging_config import configure_logging
from app.runtime import create_runtime
from monitoring.map_view import map_panel

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_PATH = 1
EXIT_BAD_TRACE = 2
EXIT_BAD_CONFIG = 3


def load_trace(path: Path) -> Dict[str, Any]:
    """Read and shape-check a trace file."""
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    positions = data.get("positions") or []
    if not isinstance(positions, list):
        raise ValueError("'positions' must be a list of points")
    for key in ("start", "end"):
        if key not in data:
            raise ValueError(f"Trace is missing '{key}'")
    return {"positions": positions, "start": data["start"], "end": data["end"]}


def _waypoint_table(path: List[Any]) -> Table:
    table = Table(title="waypoints (goal → start)")
    table.add_column("#", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for i, (x, y) in enumerate(path):
        table.add_row(str(i), f"{x:g}", f"{y:g}")
    return table


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replay a walk into the occupancy map and search a path."
    )
    parser.add_argument("trace", type=Path, help="YAML trace file")
    parser.add_argument("--profile", default=None, help="Profile name (from navigation.yaml)")
    parser.add_argument("--config", type=Path, default=None, help="Alternate navigation.yaml")
    parser.add_argument("--event-log", type=Path, default=None, help="Write JSONL events here")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    console = Console()

    try:
        trace = load_trace(args.trace)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        console.print(f"[red]cannot read trace:[/red] {exc}")
        return EXIT_BAD_TRACE

    try:
        runtime = create_runtime(args.profile, args.config, args.event_log)
    except (OSError, KeyError, ValueError, yaml.YAMLError) as exc:
        console.print(f"[red]cannot load navigation config:[/red] {exc}")
        return EXIT_BAD_CONFIG

    try:
        session = runtime.session
        try:
            for point in trace["positions"]:
                session.update_position(point)
            session.set_start(trace["start"])
            path = session.set_end(trace["end"])
        except (TypeError, ValueError) as exc:
            console.print(f"[red]bad point in trace:[/red] {exc}")
            return EXIT_BAD_TRACE

        console.print(
            map_panel(session.index, path=path, start=session.start, end=session.end)
        )

        if path is None:
            err = session.last_error
            kind = err.kind if err is not None else "NavigationError"
            reason = err.reason if err is not None else "unknown"
            console.print(f"[red]{kind}[/red]: {reason}")
            return EXIT_NO_PATH

        console.print(_waypoint_table(path))
        return EXIT_OK
    finally:
        runtime.close()


if __name__ == "__main__":
    sys.exit(main())
