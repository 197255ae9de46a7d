"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ccpulse.data.processes import CommandRunner, LiveSessionFinder
from ccpulse.services.analytics_service import AnalyticsService
from ccpulse.services.live_service import LiveSessionService
from ccpulse.services.monitor import SessionMonitor
from ccpulse.services.session_service import SessionHistoryService

if TYPE_CHECKING:
    from ccpulse.config import Config


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    config: Config
    session_service: SessionHistoryService
    analytics_service: AnalyticsService
    live_service: LiveSessionService
    monitor: SessionMonitor

    @classmethod
    def create(cls, config: Config, runner: CommandRunner | None = None) -> ServiceContainer:
        """Factory that wires all dependencies."""
        live_service = LiveSessionService(LiveSessionFinder(config, runner=runner))
        return cls(
            config=config,
            session_service=SessionHistoryService(config.projects_dir),
            analytics_service=AnalyticsService(config.stats_cache_path),
            live_service=live_service,
            monitor=SessionMonitor(
                live_service,
                interval=config.poll_interval,
                kill_refresh_delay=config.kill_refresh_delay,
            ),
        )
