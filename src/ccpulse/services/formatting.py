"""Display formatting helpers shared by presentation layers."""

from __future__ import annotations

from datetime import datetime


def format_tokens(count: int) -> str:
    """Format a token count with K/M suffixes for readability."""
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}K"
    return f"{count / 1_000_000:.1f}M"


def format_cost(amount: float) -> str:
    """Format a dollar amount."""
    if amount < 0.01:
        return f"${amount:.4f}"
    return f"${amount:.2f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_datetime(value: datetime | None, now: datetime | None = None) -> str:
    """Format a datetime for display.

    Examples: "Today 14:30", "Yesterday 09:15", "Feb 12 16:45", "2025-11-03 10:00"
    """
    if value is None:
        return ""
    local = value.astimezone() if value.tzinfo else value
    current = now or datetime.now(tz=local.tzinfo)
    if current.tzinfo:
        current = current.astimezone()
    today = current.date()
    time_part = local.strftime("%H:%M")

    if local.date() == today:
        return f"Today {time_part}"
    delta = (today - local.date()).days
    if delta == 1:
        return f"Yesterday {time_part}"
    if local.year == current.year:
        return f"{local.strftime('%b %d')} {time_part}"
    return f"{local.strftime('%Y-%m-%d')} {time_part}"
