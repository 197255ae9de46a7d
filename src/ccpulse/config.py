"""Configuration for ccpulse."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    claude_dir: Path = field(default_factory=lambda: Path.home() / ".claude")
    poll_interval: float = 5.0
    cli_binary: str = "claude"
    kill_refresh_delay: float = 0.5
    subprocess_timeout: float = 5.0

    @property
    def projects_dir(self) -> Path:
        return self.claude_dir / "projects"

    @property
    def stats_cache_path(self) -> Path:
        return self.claude_dir / "stats-cache.json"

    @property
    def ide_dir(self) -> Path:
        return self.claude_dir / "ide"
