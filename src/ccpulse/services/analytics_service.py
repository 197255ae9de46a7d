"""Analytics service: time-windowed cost, token and activity rollups."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from pathlib import Path

from result import Err, Ok, Result

from ccpulse.data.usage_cache import load_usage_cache, summarize_usage_cache
from ccpulse.models.analytics import (
    AnalyticsSnapshot,
    DailyStat,
    HourlyStat,
    ModelStat,
    Period,
    UsageCache,
    UsageSummary,
)
from ccpulse.services.cost import cache_savings, estimate_cost, model_display_name

logger = logging.getLogger(__name__)

_LOOKBACK_DAYS: dict[Period, int] = {
    # 24h looks back two days so a cache computed yesterday still shows data
    Period.DAY: 2,
    Period.WEEK: 7,
    Period.MONTH: 30,
}


def cutoff_for(period: Period, now: datetime) -> datetime:
    """Earliest timestamp included in ``period``."""
    days = _LOOKBACK_DAYS.get(period)
    if days is None:
        return datetime.min
    return now - timedelta(days=days)


def compute_analytics(
    cache: UsageCache | None,
    period: Period,
    *,
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    """Derive an analytics snapshot for ``period`` from the usage cache.

    The cache tracks only input+output tokens per model per day, so per-model
    cache-read/write tokens for the period are estimated by scaling each
    model's all-time totals by (period input+output) / (all-time input+output).
    This is an approximation, not an exact accounting.
    """
    if cache is None:
        return AnalyticsSnapshot()

    if now is None:
        now = datetime.now()
    elif now.tzinfo is not None:
        # Cache dates are local calendar days; compare in naive local time.
        now = now.astimezone().replace(tzinfo=None)
    cutoff = cutoff_for(period, now)

    filtered_activity: list[tuple[date, int, int, str]] = []
    for entry in cache.daily_activity:
        day = _parse_day(entry.date)
        if day is None or datetime.combine(day, datetime.min.time()) < cutoff:
            continue
        filtered_activity.append((day, entry.message_count, entry.session_count, entry.date))

    tokens_by_date: dict[str, int] = {}
    tokens_by_model: dict[str, int] = defaultdict(int)
    for daily in cache.daily_model_tokens:
        day = _parse_day(daily.date)
        if day is None or datetime.combine(day, datetime.min.time()) < cutoff:
            continue
        tokens_by_date[daily.date] = sum(daily.tokens_by_model.values())
        for model, tokens in daily.tokens_by_model.items():
            tokens_by_model[model] += tokens

    daily_stats = sorted(
        (
            DailyStat(
                date=day,
                message_count=messages,
                session_count=sessions,
                tokens=tokens_by_date.get(key, 0),
            )
            for day, messages, sessions, key in filtered_activity
        ),
        key=lambda stat: stat.date,
    )

    model_stats: list[ModelStat] = []
    for model, usage in cache.model_usage.items():
        all_time = usage.input_tokens + usage.output_tokens
        scale = tokens_by_model.get(model, 0) / all_time if all_time > 0 else 0.0
        input_tokens = int(usage.input_tokens * scale)
        output_tokens = int(usage.output_tokens * scale)
        cache_read_tokens = int(usage.cache_read_input_tokens * scale)
        cache_write_tokens = int(usage.cache_creation_input_tokens * scale)
        model_stats.append(
            ModelStat(
                model=model,
                display_name=model_display_name(model),
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                cache_read_tokens=cache_read_tokens,
                cache_write_tokens=cache_write_tokens,
                cost=estimate_cost(
                    model,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    cache_read_tokens=cache_read_tokens,
                    cache_write_tokens=cache_write_tokens,
                ),
            )
        )

    total_cost = sum(stat.cost for stat in model_stats)
    breakdown = sorted(
        (
            stat.model_copy(
                update={"percentage": stat.cost / total_cost * 100 if total_cost > 0 else 0.0}
            )
            for stat in model_stats
        ),
        key=lambda stat: stat.cost,
        reverse=True,
    )

    # Hour histogram is all-time; the cache has no per-day hour breakdown.
    hourly: list[HourlyStat] = []
    for hour_key, count in cache.hour_counts.items():
        try:
            hourly.append(HourlyStat(hour=int(hour_key), count=count))
        except ValueError:
            continue
    hourly.sort(key=lambda stat: stat.hour)

    total_input = sum(stat.input_tokens for stat in model_stats)
    total_cache_read = sum(stat.cache_read_tokens for stat in model_stats)
    denominator = total_input + total_cache_read

    return AnalyticsSnapshot(
        daily_stats=daily_stats,
        model_breakdown=breakdown,
        hourly_activity=hourly,
        total_cost=total_cost,
        total_tokens=sum(stat.tokens for stat in daily_stats),
        total_sessions=sum(sessions for _, _, sessions, _ in filtered_activity),
        total_messages=sum(messages for _, messages, _, _ in filtered_activity),
        cache_efficiency=total_cache_read / denominator * 100 if denominator > 0 else 0.0,
        cache_savings=sum(cache_savings(stat.model, stat.cache_read_tokens) for stat in model_stats),
    )


def _parse_day(value: str) -> date | None:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


class AnalyticsService:
    """Service for usage-cache analytics."""

    def __init__(self, stats_cache_path: Path) -> None:
        self._stats_cache_path = stats_cache_path

    async def get_analytics(self, period: Period = Period.WEEK) -> Result[AnalyticsSnapshot, str]:
        """Load the cache off the event loop and compute a snapshot for ``period``.

        A missing cache yields an empty snapshot; a rejected or corrupt cache
        yields Err with the reason.
        """
        loaded = await asyncio.to_thread(load_usage_cache, self._stats_cache_path)
        if isinstance(loaded, Err):
            return loaded
        return Ok(compute_analytics(loaded.ok_value, period))

    async def get_usage_summary(self) -> Result[UsageSummary, str]:
        """Get the stats-cache totals overview."""
        loaded = await asyncio.to_thread(load_usage_cache, self._stats_cache_path)
        if isinstance(loaded, Err):
            return loaded
        return Ok(summarize_usage_cache(loaded.ok_value))
