# src/app/runtime.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from env.loader import load_navigation_profile
from env.schema import NavigationProfile
from monitoring.bus import EventBus
from monitoring.logger import JsonFileLogger
from nav.session import NavigationSession

log = logging.getLogger(__name__)


@dataclass
class NavigationRuntime:
    """Everything a host application needs to drive one navigation session."""

    profile: NavigationProfile
    bus: EventBus
    session: NavigationSession
    event_logger: Optional[JsonFileLogger] = None

    def close(self) -> None:
        """Flush and detach the event log, if any."""
        if self.event_logger is not None:
            self.event_logger.close()
            self.event_logger = None


def create_runtime(
    profile_name: Optional[str] = None,
    config_path: Optional[Path] = None,
    event_log: Optional[Path] = None,
) -> NavigationRuntime:
    """
    Wire config → index → session → monitoring.

    event_log overrides the profile's monitoring.event_log; when neither is
    set no JSONL file is written.
    """
    profile = load_navigation_profile(profile_name, config_path)
    bus = EventBus()

    log_path = event_log
    if log_path is None and profile.monitoring.event_log:
        log_path = Path(profile.monitoring.event_log)
    event_logger = JsonFileLogger(log_path, bus) if log_path is not None else None

    session = NavigationSession.from_profile(profile, bus)
    log.info(
        "Navigation runtime ready: profile=%s unit=%.4f event_log=%s",
        profile.name,
        session.index.unit_size(),
        log_path,
    )
    return NavigationRuntime(
        profile=profile,
        bus=bus,
        session=session,
        event_logger=event_logger,
    )
