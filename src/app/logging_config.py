# src/app/logging_config.py
"""
Stdout logging for the navigation runtime.

Loggers in this repo, by module name:

    mapping.quadtree     DEBUG: positions dropped outside the root region
    mapping.floor_plan   WARNING: floor-plan buffer truncated at max_vertices
    nav.pathfinder       DEBUG: waypoint and expansion counts per search
    nav.session          INFO: paths found, WARNING: failed path requests
    monitoring.bus       ERROR: subscriber callbacks that raised
    monitoring.logger    WARNING: events dropped by the JSONL writer
    app.runtime          INFO: resolved profile, unit size, event log path

nav-demo runs at WARNING unless --verbose is given, so a normal replay shows
failed path requests and dropped or truncated output only.
"""

from __future__ import annotations

import logging
import sys
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for names it does not know
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Attach one stdout handler to the root logger.

    A no-op when the root logger already has handlers, so a host application
    that set up its own logging keeps it. `level` may be an int or a level
    name such as "DEBUG"; unknown names fall back to INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))
