"""Pydantic models for ccpulse."""

from ccpulse.models.analytics import (
    AnalyticsSnapshot,
    DailyActivityEntry,
    DailyMetric,
    DailyModelTokens,
    DailyStat,
    HourlyStat,
    LegacyUsageCache,
    LongestSessionInfo,
    ModelStat,
    ModelUsageStats,
    Period,
    UsageCache,
    UsageSummary,
)
from ccpulse.models.live import IdeLockFile, LiveSession, SessionKind
from ccpulse.models.sessions import LedgerScan, SessionRecord

__all__ = [
    "AnalyticsSnapshot",
    "DailyActivityEntry",
    "DailyMetric",
    "DailyModelTokens",
    "DailyStat",
    "HourlyStat",
    "IdeLockFile",
    "LedgerScan",
    "LegacyUsageCache",
    "LiveSession",
    "LongestSessionInfo",
    "ModelStat",
    "ModelUsageStats",
    "Period",
    "SessionKind",
    "SessionRecord",
    "UsageCache",
    "UsageSummary",
]
