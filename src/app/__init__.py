# src/app/__init__.py
"""
Application entrypoints for the navigation stack.

Exposes:
- configure_logging: one-time stdout logging setup
- create_runtime: config → index → session → monitoring wiring
"""

from __future__ import annotations

from .logging_config import configure_logging
from .runtime import NavigationRuntime, create_runtime

__all__ = [
    "configure_logging",
    "NavigationRuntime",
    "create_runtime",
]
