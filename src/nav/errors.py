# src/nav/errors.py
"""
Failure kinds raised by the pathfinder.

Both are recoverable per request:
- RegionNotMapped: an endpoint lies on ground nobody has visited yet
  ("keep exploring").
- NoPathFound: both endpoints are mapped but no route through visited
  cells connects them ("blocked").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(eq=False)
class NavigationError(RuntimeError):
    """
    Base class for pathfinding failures.

    reason is a short machine-readable code, details carries JSON-safe
    context (endpoints, expansion counts) for logging and monitoring.
    """

    reason: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return f"{self.kind}(reason={self.reason!r}, details={self.details!r})"


class RegionNotMapped(NavigationError):
    """The cell containing the start or the goal is not occupied."""


class NoPathFound(NavigationError):
    """The search frontier was exhausted without reaching the goal."""


__all__ = ["NavigationError", "RegionNotMapped", "NoPathFound"]
