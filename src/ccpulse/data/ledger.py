"""Scan per-project session transcripts into session summaries."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ccpulse.data.paths import decode_project_path, encode_project_path, project_name_from_path
from ccpulse.models.sessions import LedgerScan, SessionRecord

logger = logging.getLogger(__name__)

# Richer form (fractional seconds) first, then the plain form.
_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


@dataclass
class _Totals:
    cwd: str = ""
    first_timestamp: datetime | None = None
    last_timestamp: datetime | None = None
    message_count: int = 0
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0


def list_project_directories(root: Path) -> list[Path]:
    """List project subdirectories of ``root`` (non-recursive)."""
    try:
        entries = sorted(root.iterdir())
    except OSError:
        return []
    directories: list[Path] = []
    for entry in entries:
        try:
            if entry.is_dir():
                directories.append(entry)
        except OSError:
            continue
    return directories


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp with or without fractional seconds."""
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_transcript(path: Path, *, fallback_project_path: str = "") -> SessionRecord | None:
    """Summarize one JSONL transcript, or return None if nothing decodes.

    Args:
        path: The ``<session-id>.jsonl`` file.
        fallback_project_path: Project path to use when no record carries a
            ``cwd``. Defaults to decoding the parent directory name.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read transcript %s: %s", path, exc)
        return None

    totals = _Totals()
    decoded_lines = 0
    for line_num, line in enumerate(content.splitlines(), 1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Invalid JSON at %s:%d", path, line_num)
            continue
        if not isinstance(raw, dict):
            continue
        decoded_lines += 1
        _accumulate(totals, raw)

    if decoded_lines == 0:
        return None

    project_path = totals.cwd or fallback_project_path or decode_project_path(path.parent.name)
    start = totals.first_timestamp
    end = totals.last_timestamp
    duration = (end - start).total_seconds() if start and end else 0.0
    if start is None:
        start = _file_mtime(path)

    return SessionRecord(
        session_id=path.stem,
        project_path=project_path,
        project_name=project_name_from_path(project_path),
        file_path=str(path),
        encoded_project_dir=path.parent.name,
        start_time=start,
        end_time=end,
        duration_seconds=max(duration, 0.0),
        message_count=totals.message_count,
        model=totals.model,
        input_tokens=totals.input_tokens,
        output_tokens=totals.output_tokens,
        cache_read_tokens=totals.cache_read_tokens,
        cache_write_tokens=totals.cache_write_tokens,
    )


def _accumulate(totals: _Totals, raw: dict[str, object]) -> None:
    cwd = raw.get("cwd")
    if not totals.cwd and isinstance(cwd, str) and cwd:
        totals.cwd = cwd

    timestamp = raw.get("timestamp")
    if isinstance(timestamp, str):
        parsed = parse_timestamp(timestamp)
        if parsed is not None:
            if totals.first_timestamp is None:
                totals.first_timestamp = parsed
            totals.last_timestamp = parsed

    if raw.get("type") in ("user", "assistant"):
        totals.message_count += 1

    message = raw.get("message")
    if not isinstance(message, dict):
        return
    model = message.get("model")
    if totals.model is None and isinstance(model, str):
        totals.model = model
    usage = message.get("usage")
    if isinstance(usage, dict):
        totals.input_tokens += _int(usage.get("input_tokens"))
        totals.output_tokens += _int(usage.get("output_tokens"))
        totals.cache_read_tokens += _int(usage.get("cache_read_input_tokens"))
        totals.cache_write_tokens += _int(usage.get("cache_creation_input_tokens"))


def read_sessions(root: Path) -> LedgerScan:
    """Parse every transcript under ``root``, newest first."""
    if not root.is_dir():
        logger.info("Projects directory not found: %s", root)
        return LedgerScan(root_missing=True)

    records: list[SessionRecord] = []
    errors: list[str] = []
    for project_dir in list_project_directories(root):
        try:
            transcripts = sorted(p for p in project_dir.iterdir() if p.suffix == ".jsonl")
            for transcript in transcripts:
                record = parse_transcript(transcript)
                if record is not None:
                    records.append(record)
        except OSError as exc:
            logger.warning("Failed to scan project directory %s: %s", project_dir, exc)
            errors.append(f"{project_dir.name}: {exc}")

    records.sort(key=lambda r: r.start_time, reverse=True)
    return LedgerScan(records=records, errors=errors)


def load_session(root: Path, session_id: str, project_path: str) -> SessionRecord | None:
    """Load a single session by ID from its project's directory."""
    transcript = root / encode_project_path(project_path) / f"{session_id}.jsonl"
    if not transcript.is_file():
        return None
    return parse_transcript(transcript, fallback_project_path=project_path)


def _file_mtime(path: Path) -> datetime:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
    except OSError:
        return datetime.now(tz=UTC)


def _int(val: object) -> int:
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, int):
        return val
    return 0
