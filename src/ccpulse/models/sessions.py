"""Session history models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ccpulse.services.cost import estimate_cost


class SessionRecord(BaseModel):
    """Summary of one session transcript file."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    project_path: str
    project_name: str
    file_path: str = ""
    encoded_project_dir: str = ""
    start_time: datetime
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    message_count: int = 0
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def estimated_cost(self) -> float:
        return estimate_cost(
            self.model or "sonnet",
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            cache_read_tokens=self.cache_read_tokens,
            cache_write_tokens=self.cache_write_tokens,
        )

    @property
    def formatted_duration(self) -> str:
        total = int(self.duration_seconds)
        hours, minutes, seconds = total // 3600, (total % 3600) // 60, total % 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    @property
    def formatted_cost(self) -> str:
        return f"${self.estimated_cost:.4f}"


class LedgerScan(BaseModel):
    """Outcome of scanning the projects directory.

    ``root_missing`` is set when the projects directory does not exist yet,
    which is the normal state before the first session. ``errors`` holds one
    message per project directory that could not be scanned.
    """

    records: list[SessionRecord] = Field(default_factory=list)
    root_missing: bool = False
    errors: list[str] = Field(default_factory=list)
