"""Usage-cache schema and analytics models."""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CacheModel(BaseModel):
    """Base for models decoded from the camelCase stats-cache JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DailyActivityEntry(_CacheModel):
    date: str
    message_count: int
    session_count: int
    tool_call_count: int = 0


class DailyModelTokens(_CacheModel):
    date: str
    tokens_by_model: dict[str, int]


class ModelUsageStats(_CacheModel):
    """Cumulative all-time usage for one model."""

    input_tokens: int
    output_tokens: int
    cache_read_input_tokens: int
    cache_creation_input_tokens: int
    web_search_requests: int = 0
    cost_usd: float = Field(default=0.0, alias="costUSD")
    context_window: int = 0


class LongestSessionInfo(_CacheModel):
    session_id: str
    duration: int
    message_count: int
    timestamp: str


class UsageCache(_CacheModel):
    """Schema of ``~/.claude/stats-cache.json`` as written by the CLI."""

    version: int
    last_computed_date: str
    daily_activity: list[DailyActivityEntry]
    daily_model_tokens: list[DailyModelTokens]
    model_usage: dict[str, ModelUsageStats]
    total_sessions: int
    total_messages: int
    longest_session: LongestSessionInfo | None = None
    first_session_date: str | None = None
    hour_counts: dict[str, int]


class LegacyDailyMetric(_CacheModel):
    message_count: int | None = None
    session_count: int | None = None
    tool_calls: int | None = None


class LegacyUsageCache(_CacheModel):
    """Older, minimal stats-cache schema holding only aggregate totals."""

    daily_metrics: dict[str, LegacyDailyMetric] | None = None
    total_sessions: int | None = None
    total_messages: int | None = None


class DailyMetric(BaseModel):
    message_count: int = 0
    session_count: int = 0
    tool_calls: int = 0


class UsageSummary(BaseModel):
    """Quick overview of the stats cache, independent of schema version."""

    daily_metrics: dict[str, DailyMetric] = Field(default_factory=dict)
    total_sessions: int = 0
    total_messages: int = 0


class Period(StrEnum):
    """Analytics time window."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "All"

    @property
    def display_name(self) -> str:
        match self:
            case Period.DAY:
                return "Today"
            case Period.WEEK:
                return "Week"
            case Period.MONTH:
                return "Month"
            case _:
                return "All Time"


class DailyStat(BaseModel):
    date: dt.date
    message_count: int = 0
    session_count: int = 0
    tokens: int = 0

    @property
    def label(self) -> str:
        return f"{self.date.strftime('%b')} {self.date.day}"


class ModelStat(BaseModel):
    """Estimated usage and cost of one model within the selected period."""

    model: str
    display_name: str
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0
    cost: float = 0.0
    percentage: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens + self.cache_read_tokens + self.cache_write_tokens


class HourlyStat(BaseModel):
    hour: int
    count: int = 0

    @property
    def label(self) -> str:
        hour = self.hour % 24
        suffix = "am" if hour < 12 else "pm"
        return f"{hour % 12 or 12}{suffix}"


class AnalyticsSnapshot(BaseModel):
    """Derived analytics for one period. Recomputed from scratch, never patched."""

    daily_stats: list[DailyStat] = Field(default_factory=list)
    model_breakdown: list[ModelStat] = Field(default_factory=list)
    hourly_activity: list[HourlyStat] = Field(default_factory=list)
    total_cost: float = 0.0
    total_tokens: int = 0
    total_sessions: int = 0
    total_messages: int = 0
    cache_efficiency: float = 0.0
    cache_savings: float = 0.0

    def hourly_series(self) -> list[HourlyStat]:
        """Return exactly 24 entries (hours 0-23), zero-filled where absent."""
        counts = {stat.hour: stat.count for stat in self.hourly_activity}
        return [HourlyStat(hour=hour, count=counts.get(hour, 0)) for hour in range(24)]
