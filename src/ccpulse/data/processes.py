"""Discover running Claude Code sessions from the process table and IDE lock files."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from result import Err, Ok, Result

from ccpulse.data.security import load_secure_bytes
from ccpulse.models.live import IdeLockFile, LiveSession, SessionKind

if TYPE_CHECKING:
    from ccpulse.config import Config

logger = logging.getLogger(__name__)

# ps -o lstart output, e.g. "Fri Jan  3 15:50:00 2025"
_LSTART_FORMAT = "%a %b %d %H:%M:%S %Y"

CommandRunner = Callable[[list[str]], str | None]


def run_command(args: list[str], timeout: float = 5.0) -> str | None:
    """Run ``args`` and return stdout, or None if it fails or times out."""
    try:
        completed = subprocess.run(
            args, capture_output=True, text=True, errors="replace", timeout=timeout
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Command %s failed: %s", args[0], exc)
        return None
    if completed.returncode != 0 and not completed.stdout:
        return None
    return completed.stdout


def parse_process_list(output: str, binary: str) -> list[int]:
    """Return PIDs from ``ps -eo pid,comm`` output whose command is ``binary``."""
    pids: list[int] = []
    for line in output.splitlines():
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        pid_str, command = parts
        if os.path.basename(command.strip()) != binary:
            continue
        try:
            pids.append(int(pid_str))
        except ValueError:
            continue
    return pids


def parse_lsof_cwd(output: str) -> str | None:
    """Extract the path from ``lsof -Fn`` output (the first ``n`` field)."""
    for line in output.splitlines():
        if line.startswith("n") and len(line) > 1:
            return line[1:]
    return None


def parse_lstart(output: str) -> datetime | None:
    """Parse ``ps -o lstart=`` output, interpreted in local time."""
    normalized = " ".join(output.split())
    if not normalized:
        return None
    try:
        return datetime.strptime(normalized, _LSTART_FORMAT).astimezone()
    except ValueError:
        logger.debug("Unparseable process start time: %r", output)
        return None


class LiveSessionFinder:
    """Blocking scanner for running sessions. Call from a worker thread."""

    def __init__(self, config: Config, runner: CommandRunner | None = None) -> None:
        self._config = config
        self._runner: CommandRunner = runner or (
            lambda args: run_command(args, timeout=config.subprocess_timeout)
        )

    def list_cli_processes(self) -> list[int]:
        output = self._runner(["ps", "-eo", "pid,comm"])
        if output is None:
            logger.error("Error listing processes")
            return []
        return parse_process_list(output, self._config.cli_binary)

    def working_directory(self, pid: int) -> str:
        output = self._runner(["lsof", "-a", "-p", str(pid), "-d", "cwd", "-Fn"])
        return (parse_lsof_cwd(output) if output else None) or "Unknown"

    def process_start_time(self, pid: int) -> datetime | None:
        output = self._runner(["ps", "-p", str(pid), "-o", "lstart="])
        return parse_lstart(output) if output else None

    def find_process_sessions(self) -> list[LiveSession]:
        sessions: list[LiveSession] = []
        for pid in self.list_cli_processes():
            sessions.append(
                LiveSession(
                    id=f"process-{pid}",
                    pid=pid,
                    working_directory=self.working_directory(pid),
                    start_time=self.process_start_time(pid),
                    kind=SessionKind.PROCESS,
                )
            )
        return sessions

    def find_ide_sessions(self) -> list[LiveSession]:
        ide_dir = self._config.ide_dir
        try:
            lock_files = sorted(p for p in ide_dir.iterdir() if p.suffix == ".lock")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.debug("Error scanning IDE lock files: %s", exc)
            return []

        sessions: list[LiveSession] = []
        for lock_path in lock_files:
            session = self._read_lock_file(lock_path)
            if session is not None:
                sessions.append(session)
        return sessions

    def _read_lock_file(self, lock_path: Path) -> LiveSession | None:
        loaded = load_secure_bytes(lock_path)
        if isinstance(loaded, Err):
            return None
        try:
            lock = IdeLockFile.model_validate_json(loaded.ok_value)
        except ValidationError:
            logger.debug("Skipping malformed lock file %s", lock_path.name)
            return None
        return LiveSession(
            id=f"ide-{lock_path.name}",
            pid=lock.pid,
            working_directory=lock.working_directory,
            start_time=_creation_time(lock_path),
            kind=SessionKind.IDE,
            ide_name=lock.ide_name,
            transport=lock.transport,
        )

    def find_sessions(self) -> list[LiveSession]:
        """Process-table sessions followed by IDE sessions, not de-duplicated."""
        return [*self.find_process_sessions(), *self.find_ide_sessions()]

    def kill(self, session: LiveSession) -> Result[bool, str]:
        """Send SIGTERM to a CLI session.

        Returns:
            Ok(True) if the signal was sent, Ok(False) if the session has no
            PID or is not a CLI process, Err with the OS error otherwise.
        """
        if session.pid is None or session.kind is not SessionKind.PROCESS:
            return Ok(False)
        try:
            os.kill(session.pid, signal.SIGTERM)
        except OSError as exc:
            message = f"Failed to terminate session: {exc.strerror or exc}"
            logger.error(message)
            return Err(message)
        logger.info("Successfully terminated session with PID %d", session.pid)
        return Ok(True)


def _creation_time(path: Path) -> datetime | None:
    try:
        info = path.stat()
    except OSError:
        return None
    created = getattr(info, "st_birthtime", None) or info.st_ctime
    return datetime.fromtimestamp(created).astimezone()
