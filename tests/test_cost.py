"""Tests for pricing and cost estimation."""

from __future__ import annotations

import pytest

from ccpulse.services.cost import (
    HAIKU,
    OPUS,
    SONNET,
    cache_savings,
    estimate_cost,
    get_pricing,
    model_display_name,
)


class TestGetPricing:
    @pytest.mark.parametrize(
        ("model", "expected"),
        [
            ("claude-opus-4-20250514", OPUS),
            ("claude-OPUS-4-5", OPUS),
            ("claude-haiku-4-5-20251001", HAIKU),
            ("claude-sonnet-4-5-20250929", SONNET),
            ("gpt-4", SONNET),
            ("", SONNET),
        ],
    )
    def test_family_substring_match(self, model: str, expected: object) -> None:
        assert get_pricing(model) == expected

    def test_rate_cards(self) -> None:
        assert (OPUS.input, OPUS.output, OPUS.cache_read, OPUS.cache_write) == (5.0, 25.0, 0.5, 6.25)
        assert (SONNET.input, SONNET.output, SONNET.cache_read, SONNET.cache_write) == (
            3.0,
            15.0,
            0.3,
            3.75,
        )
        assert (HAIKU.input, HAIKU.output, HAIKU.cache_read, HAIKU.cache_write) == (
            1.0,
            5.0,
            0.1,
            1.25,
        )


def test_estimate_cost_sums_categories() -> None:
    cost = estimate_cost(
        "claude-sonnet-4.5",
        input_tokens=800,
        output_tokens=200,
        cache_read_tokens=1_000_000,
        cache_write_tokens=1_000_000,
    )
    assert cost == pytest.approx(0.0054 + 0.30 + 3.75)


def test_cache_savings_uses_input_minus_cache_read_rate() -> None:
    assert cache_savings("claude-opus-4-5", 1_000_000) == pytest.approx(4.5)
    assert cache_savings("unknown", 0) == 0


@pytest.mark.parametrize(
    ("model", "expected"),
    [
        ("claude-opus-4-5-20251101", "Opus 4.5"),
        ("claude-sonnet-4-5", "Sonnet 4.5"),
        ("claude-haiku-4-5", "Haiku 4.5"),
        ("claude-instant-1", "Instant 1"),
        ("gpt-4o", "Gpt 4o"),
    ],
)
def test_model_display_name(model: str, expected: str) -> None:
    assert model_display_name(model) == expected
