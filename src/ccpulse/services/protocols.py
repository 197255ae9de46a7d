"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from ccpulse.models.analytics import AnalyticsSnapshot, Period, UsageSummary
from ccpulse.models.live import LiveSession
from ccpulse.models.sessions import LedgerScan, SessionRecord


class SessionHistoryServiceProtocol(Protocol):
    """Interface for session history operations."""

    async def load_sessions(self) -> Result[LedgerScan, str]: ...

    async def get_session(
        self, session_id: str, project_path: str
    ) -> Result[SessionRecord, str]: ...


class AnalyticsServiceProtocol(Protocol):
    """Interface for analytics operations."""

    async def get_analytics(self, period: Period = ...) -> Result[AnalyticsSnapshot, str]: ...

    async def get_usage_summary(self) -> Result[UsageSummary, str]: ...


class LiveSessionServiceProtocol(Protocol):
    """Interface for live session operations."""

    async def find_sessions(self) -> Result[list[LiveSession], str]: ...

    async def kill(self, session: LiveSession) -> Result[bool, str]: ...
