"""Session history service: transcript scans and aggregates over them."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime, timedelta
from pathlib import Path

from result import Err, Ok, Result

from ccpulse.data.ledger import load_session, read_sessions
from ccpulse.models.sessions import LedgerScan, SessionRecord


class SessionHistoryService:
    """Service for session history queries."""

    def __init__(self, projects_dir: Path) -> None:
        self._projects_dir = projects_dir

    async def load_sessions(self) -> Result[LedgerScan, str]:
        """Scan all project transcripts off the event loop, newest first."""
        scan = await asyncio.to_thread(read_sessions, self._projects_dir)
        return Ok(scan)

    async def get_session(self, session_id: str, project_path: str) -> Result[SessionRecord, str]:
        """Load a single session by ID."""
        record = await asyncio.to_thread(load_session, self._projects_dir, session_id, project_path)
        if record is None:
            return Err(f"Session {session_id} not found")
        return Ok(record)


def total_tokens(records: Sequence[SessionRecord]) -> int:
    return sum(r.total_tokens for r in records)


def total_cost(records: Sequence[SessionRecord]) -> float:
    return sum(r.estimated_cost for r in records)


def unique_projects(records: Sequence[SessionRecord]) -> int:
    return len({r.project_path for r in records})


def sessions_for_project(records: Sequence[SessionRecord], project_path: str) -> list[SessionRecord]:
    return [r for r in records if r.project_path == project_path]


def todays_sessions(
    records: Sequence[SessionRecord], now: datetime | None = None
) -> list[SessionRecord]:
    """Sessions that started on the local calendar day of ``now``."""
    today = (now or datetime.now().astimezone()).astimezone().date()
    return [r for r in records if r.start_time.astimezone().date() == today]


def last_week_sessions(
    records: Sequence[SessionRecord], now: datetime | None = None
) -> list[SessionRecord]:
    """Sessions that started within the last seven days."""
    week_ago = (now or datetime.now().astimezone()) - timedelta(days=7)
    return [r for r in records if r.start_time >= week_ago]
