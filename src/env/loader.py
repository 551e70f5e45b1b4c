from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from mapping.quadtree import OccupancyQuadTree

from .schema import (
    FloorPlanConfig,
    IndexConfig,
    MonitoringConfig,
    NavigationProfile,
    PathfinderConfig,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG = CONFIG_ROOT / "navigation.yaml"

# Overrides the active profile without editing navigation.yaml.
PROFILE_ENV_VAR = "NAV_PROFILE"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from `path`."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _select_profile(
    cfg: Dict[str, Any],
    name: Optional[str],
) -> Tuple[str, Dict[str, Any]]:
    """Return (active_profile_name, active_profile_mapping)."""
    profile_name = name or os.getenv(PROFILE_ENV_VAR) or cfg.get("profile")
    if not profile_name:
        raise ValueError("navigation.yaml must define a 'profile' key.")
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ValueError("navigation.yaml must define a 'profiles' mapping.")
    if profile_name not in profiles:
        raise KeyError(f"Profile '{profile_name}' not found in navigation.yaml profiles.")
    raw = profiles[profile_name] or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Profile '{profile_name}' must be a mapping, got {type(raw)}")
    return profile_name, raw


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Section '{key}' must be a mapping, got {type(value)}")
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_navigation_profile(
    name: Optional[str] = None,
    path: Optional[Path] = None,
) -> NavigationProfile:
    """
    Main entry point: returns a fully resolved NavigationProfile.

    Profile precedence: explicit `name`, then $NAV_PROFILE, then the
    file's own `profile` key. Missing sections fall back to defaults.
    """
    cfg = _load_yaml(Path(path) if path is not None else DEFAULT_CONFIG)
    profile_name, raw = _select_profile(cfg, name)

    defaults = IndexConfig()
    index_raw = _section(raw, "index")
    origin_raw = index_raw.get("origin", defaults.origin)
    if not isinstance(origin_raw, (list, tuple)) or len(origin_raw) != 2:
        raise ValueError(f"index.origin must be a pair of numbers, got {origin_raw!r}")
    index = IndexConfig(
        origin=(float(origin_raw[0]), float(origin_raw[1])),
        extent=float(index_raw.get("extent", defaults.extent)),
        max_depth=int(index_raw.get("max_depth", defaults.max_depth)),
    )

    finder_raw = _section(raw, "pathfinder")
    max_expansions = finder_raw.get("max_expansions")
    pathfinder = PathfinderConfig(
        max_expansions=None if max_expansions is None else int(max_expansions),
    )

    plan_defaults = FloorPlanConfig()
    plan_raw = _section(raw, "floor_plan")
    floor_plan = FloorPlanConfig(
        max_vertices=int(plan_raw.get("max_vertices", plan_defaults.max_vertices)),
        path_height=float(plan_raw.get("path_height", plan_defaults.path_height)),
    )

    mon_raw = _section(raw, "monitoring")
    monitoring = MonitoringConfig(event_log=mon_raw.get("event_log"))

    profile = NavigationProfile(
        name=profile_name,
        index=index,
        pathfinder=pathfinder,
        floor_plan=floor_plan,
        monitoring=monitoring,
    )
    _validate_profile(profile)
    return profile


def build_index(profile: NavigationProfile) -> OccupancyQuadTree:
    """Construct the empty occupancy index described by `profile`."""
    cfg = profile.index
    return OccupancyQuadTree(origin=cfg.origin, extent=cfg.extent, max_depth=cfg.max_depth)


def _validate_profile(profile: NavigationProfile) -> None:
    """Minimal sanity checks for a navigation profile."""
    if profile.index.extent <= 0:
        raise ValueError(f"index.extent must be positive, got {profile.index.extent}")
    if profile.index.max_depth < 0:
        raise ValueError(f"index.max_depth must be >= 0, got {profile.index.max_depth}")
    if profile.pathfinder.max_expansions is not None and profile.pathfinder.max_expansions <= 0:
        raise ValueError("pathfinder.max_expansions must be positive or null")
    if profile.floor_plan.max_vertices < 0:
        raise ValueError("floor_plan.max_vertices must be >= 0")
