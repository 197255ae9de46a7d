"""Live session service: background offloading for process-table scans."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from result import Ok, Result

if TYPE_CHECKING:
    from ccpulse.data.processes import LiveSessionFinder
    from ccpulse.models.live import LiveSession


class LiveSessionService:
    """Service for discovering and terminating running sessions."""

    def __init__(self, finder: LiveSessionFinder) -> None:
        self._finder = finder

    async def find_sessions(self) -> Result[list[LiveSession], str]:
        """Scan processes and lock files in a worker thread."""
        sessions = await asyncio.to_thread(self._finder.find_sessions)
        return Ok(sessions)

    async def kill(self, session: LiveSession) -> Result[bool, str]:
        """Send SIGTERM to ``session``; see :meth:`LiveSessionFinder.kill`."""
        return await asyncio.to_thread(self._finder.kill, session)
