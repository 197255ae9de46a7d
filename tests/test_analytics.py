"""Tests for period analytics over the usage cache."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

import pytest

from ccpulse.models.analytics import AnalyticsSnapshot, HourlyStat, Period, UsageCache
from ccpulse.services.analytics_service import compute_analytics, cutoff_for
from ccpulse.services.cost import cache_savings

NOW = datetime(2025, 1, 2, 12, 0)


def _cache(payload: dict[str, Any]) -> UsageCache:
    return UsageCache.model_validate(payload)


def _usage(input_tokens: int, output_tokens: int, cache_read: int = 0, cache_write: int = 0) -> dict:
    return {
        "inputTokens": input_tokens,
        "outputTokens": output_tokens,
        "cacheReadInputTokens": cache_read,
        "cacheCreationInputTokens": cache_write,
    }


class TestCutoff:
    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            (Period.DAY, datetime(2024, 12, 31, 12, 0)),
            (Period.WEEK, datetime(2024, 12, 26, 12, 0)),
            (Period.MONTH, datetime(2024, 12, 3, 12, 0)),
            (Period.ALL, datetime.min),
        ],
    )
    def test_cutoffs(self, period: Period, expected: datetime) -> None:
        assert cutoff_for(period, NOW) == expected


class TestComputeAnalytics:
    def test_no_cache_gives_empty_snapshot(self) -> None:
        snapshot = compute_analytics(None, Period.ALL, now=NOW)
        assert snapshot == AnalyticsSnapshot()
        assert len(snapshot.hourly_series()) == 24

    def test_single_day_example(self, stats_cache_payload: dict[str, Any]) -> None:
        snapshot = compute_analytics(_cache(stats_cache_payload), Period.WEEK, now=NOW)

        assert snapshot.total_messages == 10
        assert snapshot.total_sessions == 1
        assert snapshot.total_tokens == 1000
        assert [d.date for d in snapshot.daily_stats] == [date(2025, 1, 1)]
        assert snapshot.daily_stats[0].tokens == 1000
        assert snapshot.daily_stats[0].label == "Jan 1"

        [stat] = snapshot.model_breakdown
        assert stat.display_name == "Sonnet 4.5"
        assert (stat.input_tokens, stat.output_tokens) == (800, 200)
        assert stat.cost == pytest.approx(0.0054)
        assert stat.percentage == pytest.approx(100.0)
        assert snapshot.total_cost == pytest.approx(0.0054)
        assert snapshot.cache_efficiency == 0.0
        assert snapshot.cache_savings == 0.0

    def test_day_window_drops_older_days(self, stats_cache_payload: dict[str, Any]) -> None:
        cache = _cache(stats_cache_payload)
        assert compute_analytics(cache, Period.DAY, now=NOW).total_messages == 10

        later = compute_analytics(cache, Period.DAY, now=datetime(2025, 1, 3, 12, 0))
        assert later.total_messages == 0
        assert later.daily_stats == []
        assert later.model_breakdown[0].input_tokens == 0
        assert later.model_breakdown[0].percentage == 0.0
        assert later.total_cost == 0.0

    def test_longer_periods_never_shrink(self, stats_cache_payload: dict[str, Any]) -> None:
        stats_cache_payload["dailyActivity"].append(
            {"date": "2024-12-15", "messageCount": 5, "sessionCount": 2}
        )
        stats_cache_payload["dailyModelTokens"].append(
            {"date": "2024-12-15", "tokensByModel": {"claude-sonnet-4.5": 500}}
        )
        cache = _cache(stats_cache_payload)

        totals = [
            compute_analytics(cache, period, now=NOW)
            for period in (Period.DAY, Period.WEEK, Period.MONTH, Period.ALL)
        ]
        messages = [s.total_messages for s in totals]
        tokens = [s.total_tokens for s in totals]
        assert messages == sorted(messages)
        assert tokens == sorted(tokens)
        assert messages[-1] == 15
        assert [d.date for d in totals[-1].daily_stats] == [date(2024, 12, 15), date(2025, 1, 1)]

    def test_scales_cache_tokens_to_period(self, stats_cache_payload: dict[str, Any]) -> None:
        stats_cache_payload["modelUsage"]["claude-sonnet-4.5"] = _usage(1600, 400, 2000, 400)
        snapshot = compute_analytics(_cache(stats_cache_payload), Period.WEEK, now=NOW)

        [stat] = snapshot.model_breakdown
        assert (stat.input_tokens, stat.output_tokens) == (800, 200)
        assert (stat.cache_read_tokens, stat.cache_write_tokens) == (1000, 200)
        assert stat.total_tokens == 2200
        expected_cost = (800 * 3.0 + 200 * 15.0 + 1000 * 0.30 + 200 * 3.75) / 1_000_000
        assert stat.cost == pytest.approx(expected_cost)
        assert snapshot.cache_efficiency == pytest.approx(1000 / 1800 * 100)
        assert snapshot.cache_savings == pytest.approx(cache_savings("claude-sonnet-4.5", 1000))

    def test_percentages_sum_to_one_hundred(self, stats_cache_payload: dict[str, Any]) -> None:
        stats_cache_payload["dailyModelTokens"][0]["tokensByModel"]["claude-opus-4-5"] = 1000
        stats_cache_payload["modelUsage"]["claude-opus-4-5"] = _usage(800, 200)
        snapshot = compute_analytics(_cache(stats_cache_payload), Period.ALL, now=NOW)

        assert [s.display_name for s in snapshot.model_breakdown] == ["Opus 4.5", "Sonnet 4.5"]
        assert sum(s.percentage for s in snapshot.model_breakdown) == pytest.approx(100.0)
        assert snapshot.total_tokens == 2000

    def test_model_without_usage_in_period_costs_nothing(
        self, stats_cache_payload: dict[str, Any]
    ) -> None:
        stats_cache_payload["modelUsage"]["claude-haiku-4-5"] = _usage(0, 0)
        snapshot = compute_analytics(_cache(stats_cache_payload), Period.ALL, now=NOW)

        haiku = next(s for s in snapshot.model_breakdown if "haiku" in s.model)
        assert haiku.cost == 0.0
        assert haiku.percentage == 0.0
        assert snapshot.model_breakdown[-1] is haiku

    def test_invalid_dates_are_skipped(self, stats_cache_payload: dict[str, Any]) -> None:
        stats_cache_payload["dailyActivity"].append(
            {"date": "not-a-date", "messageCount": 99, "sessionCount": 9}
        )
        stats_cache_payload["dailyModelTokens"].append(
            {"date": "2025-13-45", "tokensByModel": {"claude-sonnet-4.5": 99}}
        )
        snapshot = compute_analytics(_cache(stats_cache_payload), Period.ALL, now=NOW)
        assert snapshot.total_messages == 10
        assert snapshot.total_tokens == 1000

    def test_hourly_activity_is_sorted_and_unfiltered(
        self, stats_cache_payload: dict[str, Any]
    ) -> None:
        stats_cache_payload["hourCounts"] = {"14": 6, "9": 4, "bogus": 1}
        snapshot = compute_analytics(
            _cache(stats_cache_payload), Period.DAY, now=datetime(2026, 1, 1)
        )
        assert snapshot.hourly_activity == [
            HourlyStat(hour=9, count=4),
            HourlyStat(hour=14, count=6),
        ]
        series = snapshot.hourly_series()
        assert len(series) == 24
        assert series[9].count == 4
        assert series[0].count == 0
        assert (series[0].label, series[9].label, series[14].label) == ("12am", "9am", "2pm")


def test_period_display_names() -> None:
    assert [p.display_name for p in Period] == ["Today", "Week", "Month", "All Time"]
    assert Period("7d") is Period.WEEK


def test_aware_now_is_accepted(stats_cache_payload: dict[str, Any]) -> None:
    aware = datetime(2025, 1, 2, 12, 0).astimezone()
    snapshot = compute_analytics(_cache(stats_cache_payload), Period.WEEK, now=aware)
    assert snapshot.total_messages == 10
    assert snapshot == compute_analytics(_cache(stats_cache_payload), Period.WEEK, now=NOW)
    utc = compute_analytics(
        _cache(stats_cache_payload), Period.WEEK, now=datetime(2025, 1, 2, tzinfo=UTC)
    )
    assert utc.total_messages == 10
