"""Load the CLI-maintained ``stats-cache.json`` usage cache."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError
from result import Err, Ok, Result

from ccpulse.data.security import load_secure_bytes
from ccpulse.models.analytics import (
    DailyActivityEntry,
    DailyMetric,
    LegacyUsageCache,
    UsageCache,
    UsageSummary,
)

logger = logging.getLogger(__name__)


def decode_usage_cache(data: bytes) -> Result[UsageCache, str]:
    """Decode the current schema, falling back to the legacy totals-only schema."""
    try:
        return Ok(UsageCache.model_validate_json(data))
    except ValidationError as exc:
        first_error = exc

    try:
        legacy = LegacyUsageCache.model_validate_json(data)
    except ValidationError:
        logger.error("Error decoding stats cache: %s", first_error)
        return Err(f"Corrupt stats cache: {first_error.error_count()} schema error(s)")

    logger.info("Stats cache uses the legacy schema; daily model data unavailable")
    return Ok(_from_legacy(legacy))


def load_usage_cache(path: Path) -> Result[UsageCache | None, str]:
    """Load the usage cache at ``path``.

    Returns:
        Ok(None) if the file does not exist yet, Ok(cache) on success, or Err
        with a reason that distinguishes security rejection from corruption.
    """
    if not path.exists():
        logger.info("Stats cache file not found at: %s", path)
        return Ok(None)

    loaded = load_secure_bytes(path)
    if isinstance(loaded, Err):
        return loaded
    return decode_usage_cache(loaded.ok_value)


def summarize_usage_cache(cache: UsageCache | None) -> UsageSummary:
    """Build the schema-independent overview used by the summary screen."""
    if cache is None:
        return UsageSummary()
    return UsageSummary(
        daily_metrics={
            entry.date: DailyMetric(
                message_count=entry.message_count,
                session_count=entry.session_count,
                tool_calls=entry.tool_call_count,
            )
            for entry in cache.daily_activity
        },
        total_sessions=cache.total_sessions,
        total_messages=cache.total_messages,
    )


def _from_legacy(legacy: LegacyUsageCache) -> UsageCache:
    metrics = legacy.daily_metrics or {}
    return UsageCache(
        version=0,
        last_computed_date="",
        daily_activity=[
            DailyActivityEntry(
                date=day,
                message_count=metric.message_count or 0,
                session_count=metric.session_count or 0,
                tool_call_count=metric.tool_calls or 0,
            )
            for day, metric in sorted(metrics.items())
        ],
        daily_model_tokens=[],
        model_usage={},
        total_sessions=legacy.total_sessions or 0,
        total_messages=legacy.total_messages or 0,
        hour_counts={},
    )
