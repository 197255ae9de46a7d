"""Live (running) session models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from ccpulse.data.paths import project_name_from_path


class SessionKind(StrEnum):
    PROCESS = "process"  # running CLI invocation
    IDE = "ide"  # IDE integration lock file

    @property
    def label(self) -> str:
        return "CLI" if self is SessionKind.PROCESS else "IDE"


class LiveSession(BaseModel):
    """A currently running Claude Code session."""

    model_config = ConfigDict(frozen=True)

    id: str
    pid: int | None = None
    working_directory: str = "Unknown"
    start_time: datetime | None = None
    model: str | None = None
    kind: SessionKind = SessionKind.PROCESS
    ide_name: str | None = None
    transport: str | None = None

    @property
    def project_name(self) -> str:
        return project_name_from_path(self.working_directory)

    def elapsed(self, now: datetime | None = None) -> str | None:
        """Running time as ``"1h 5m"``, ``"12m"`` or ``"<1m"``."""
        if self.start_time is None:
            return None
        if now is None:
            now = datetime.now(tz=self.start_time.tzinfo)
        seconds = int((now - self.start_time).total_seconds())
        hours, minutes = seconds // 3600, (seconds % 3600) // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        if minutes > 0:
            return f"{minutes}m"
        return "<1m"


class IdeLockFile(BaseModel):
    """Contents of ``~/.claude/ide/*.lock``.

    Example: ``{"pid": 84923, "workspaceFolders": ["/path"], "ideName": "Cursor",
    "transport": "ws", "runningInWindows": false, "authToken": "..."}``
    """

    model_config = ConfigDict(populate_by_name=True)

    pid: int | None = None
    workspace_folders: list[str] | None = Field(default=None, alias="workspaceFolders")
    ide_name: str | None = Field(default=None, alias="ideName")
    transport: str | None = None
    running_in_windows: bool | None = Field(default=None, alias="runningInWindows")
    auth_token: str | None = Field(default=None, alias="authToken", repr=False, exclude=True)

    @property
    def working_directory(self) -> str:
        if self.workspace_folders:
            return self.workspace_folders[0]
        return "Unknown"

