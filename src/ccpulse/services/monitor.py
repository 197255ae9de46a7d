"""Fixed-interval polling of live sessions with stale-result suppression."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from result import Err, Ok, Result

if TYPE_CHECKING:
    from ccpulse.models.live import LiveSession
    from ccpulse.services.protocols import LiveSessionServiceProtocol

logger = logging.getLogger(__name__)

SessionsCallback = Callable[[list["LiveSession"]], None]

T = TypeVar("T")


class LatestValue(Generic[T]):
    """Holds the most recent scan result.

    Each scan takes a generation number from :meth:`begin`. A result is
    published only if no newer scan has already published, so a slow scan
    that finishes late cannot overwrite fresher data. Publishing swaps the
    whole value in one assignment.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._generation = 0
        self._published_generation = 0

    @property
    def value(self) -> T:
        return self._value

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def publish(self, generation: int, value: T) -> bool:
        if generation < self._published_generation:
            return False
        self._published_generation = generation
        self._value = value
        return True


class SessionMonitor:
    """Polls the live session service and notifies subscribers."""

    def __init__(
        self,
        service: LiveSessionServiceProtocol,
        interval: float = 5.0,
        kill_refresh_delay: float = 0.5,
    ) -> None:
        self._service = service
        self._interval = interval
        self._kill_refresh_delay = kill_refresh_delay
        self._latest: LatestValue[list[LiveSession]] = LatestValue([])
        self._subscribers: list[SessionsCallback] = []
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[Any]] = set()
        self.last_error: str | None = None

    @property
    def sessions(self) -> list[LiveSession]:
        return self._latest.value

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: SessionsCallback) -> None:
        self._subscribers.append(callback)

    def start(self) -> None:
        """Refresh now, then every ``interval`` seconds. Requires a running loop."""
        self.stop()
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval)

    async def refresh(self) -> list[LiveSession]:
        """Run one scan and publish it unless a newer scan already did."""
        generation = self._latest.begin()
        try:
            result = await self._service.find_sessions()
        except Exception as exc:
            logger.exception("Live session scan failed")
            self.last_error = f"Live session scan failed: {exc}"
            return self.sessions
        if isinstance(result, Err):
            self.last_error = result.err_value
            return self.sessions
        if self._latest.publish(generation, result.ok_value):
            self.last_error = None
            for callback in list(self._subscribers):
                try:
                    callback(result.ok_value)
                except Exception:
                    logger.exception("Live session subscriber failed")
        return self.sessions

    async def kill(self, session: LiveSession) -> Result[bool, str]:
        """Terminate ``session`` and schedule a refresh shortly after."""
        result = await self._service.kill(session)
        if isinstance(result, Err):
            self.last_error = result.err_value
            return result
        if result.ok_value:
            self.last_error = None
            task = asyncio.create_task(self._refresh_later())
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return Ok(result.ok_value)

    async def _refresh_later(self) -> None:
        await asyncio.sleep(self._kill_refresh_delay)
        await self.refresh()

    async def wait_pending(self) -> None:
        """Wait for refreshes scheduled by :meth:`kill`."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
