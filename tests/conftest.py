"""Shared fixtures for ccpulse tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ccpulse.config import Config

TranscriptWriter = Callable[..., Path]


@pytest.fixture
def claude_dir(tmp_path: Path) -> Path:
    """An empty temporary Claude data directory."""
    path = tmp_path / ".claude"
    path.mkdir()
    return path


@pytest.fixture
def test_config(claude_dir: Path) -> Config:
    """Config pointing at the temporary Claude directory."""
    return Config(claude_dir=claude_dir, poll_interval=0.01, kill_refresh_delay=0.0)


@pytest.fixture
def write_transcript(claude_dir: Path) -> TranscriptWriter:
    """Write JSONL records (dicts or raw strings) to projects/<encoded>/<id>.jsonl."""

    def _write(
        records: list[dict[str, Any] | str],
        *,
        project_dir: str = "-Users-test-myproject",
        session_id: str = "session-001",
    ) -> Path:
        directory = claude_dir / "projects" / project_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{session_id}.jsonl"
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        path.chmod(0o600)
        return path

    return _write


@pytest.fixture
def sample_transcript() -> list[dict[str, Any]]:
    """A small user/assistant exchange with usage data."""
    return [
        {
            "type": "user",
            "cwd": "/Users/test/my-project",
            "timestamp": "2025-01-03T10:00:00.000Z",
            "message": {"role": "user", "content": "hello"},
        },
        {
            "type": "assistant",
            "cwd": "/Users/test/my-project",
            "timestamp": "2025-01-03T10:00:05.250Z",
            "message": {
                "role": "assistant",
                "model": "claude-sonnet-4-5-20250929",
                "usage": {
                    "input_tokens": 100,
                    "output_tokens": 50,
                    "cache_read_input_tokens": 1000,
                    "cache_creation_input_tokens": 200,
                },
            },
        },
        {"type": "summary", "summary": "Greeting", "timestamp": "2025-01-03T10:02:05Z"},
        {
            "type": "assistant",
            "timestamp": "2025-01-03T10:03:05Z",
            "message": {
                "role": "assistant",
                "model": "claude-opus-4-5-20251101",
                "usage": {"input_tokens": 10, "output_tokens": 5},
            },
        },
    ]


@pytest.fixture
def stats_cache_payload() -> dict[str, Any]:
    """A stats-cache.json document in the current schema."""
    return {
        "version": 2,
        "lastComputedDate": "2025-01-01",
        "dailyActivity": [
            {"date": "2025-01-01", "messageCount": 10, "sessionCount": 1, "toolCallCount": 3}
        ],
        "dailyModelTokens": [{"date": "2025-01-01", "tokensByModel": {"claude-sonnet-4.5": 1000}}],
        "modelUsage": {
            "claude-sonnet-4.5": {
                "inputTokens": 800,
                "outputTokens": 200,
                "cacheReadInputTokens": 0,
                "cacheCreationInputTokens": 0,
                "webSearchRequests": 0,
                "costUSD": 0.0,
                "contextWindow": 200000,
            }
        },
        "totalSessions": 1,
        "totalMessages": 10,
        "longestSession": {
            "sessionId": "abc",
            "duration": 60000,
            "messageCount": 10,
            "timestamp": "2025-01-01T09:00:00Z",
        },
        "firstSessionDate": "2025-01-01T09:00:00Z",
        "hourCounts": {"9": 4, "14": 6},
    }


@pytest.fixture
def write_stats_cache(claude_dir: Path) -> Callable[[object], Path]:
    """Write a stats-cache.json (dict payload or raw text) with 0600 permissions."""

    def _write(payload: object) -> Path:
        path = claude_dir / "stats-cache.json"
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        path.chmod(0o600)
        return path

    return _write
