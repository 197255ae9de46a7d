"""Typer CLI for ccpulse: session history, analytics and live sessions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from result import Err

from ccpulse.config import Config
from ccpulse.models.analytics import AnalyticsSnapshot, Period, UsageSummary
from ccpulse.models.live import LiveSession, SessionKind
from ccpulse.models.sessions import SessionRecord
from ccpulse.services import session_service
from ccpulse.services.container import ServiceContainer
from ccpulse.services.formatting import format_cost, format_datetime, format_percent, format_tokens

app = typer.Typer(
    name="ccpulse",
    help="Session history, usage analytics and live sessions for Claude Code.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    claude_dir: Annotated[
        Path | None,
        typer.Option("--claude-dir", help="Path to Claude data directory"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Configure logging and the data directory for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Config(claude_dir=claude_dir or Path.home() / ".claude")


@app.command()
def sessions(
    ctx: typer.Context,
    project: Annotated[
        str | None, typer.Option("--project", help="Only sessions for this project path")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", help="Maximum rows to show")] = 20,
) -> None:
    """List past sessions, newest first."""
    asyncio.run(_do_sessions(ctx.obj, project, limit))


async def _do_sessions(config: Config, project: str | None, limit: int) -> None:
    container = ServiceContainer.create(config)
    result = await container.session_service.load_sessions()
    if isinstance(result, Err):
        typer.echo(result.err_value, err=True)
        raise typer.Exit(1)
    scan = result.ok_value
    if scan.root_missing:
        typer.echo("No session history yet.")
        return
    for error in scan.errors:
        typer.echo(f"warning: {error}", err=True)

    records = scan.records
    if project:
        records = session_service.sessions_for_project(records, project)
    for record in records[:limit]:
        typer.echo(_session_row(record))
    typer.echo(
        f"\n{len(records)} sessions across {session_service.unique_projects(records)} projects, "
        f"{format_tokens(session_service.total_tokens(records))} tokens, "
        f"{format_cost(session_service.total_cost(records))} estimated"
    )


def _session_row(record: SessionRecord) -> str:
    return (
        f"{format_datetime(record.start_time):<20} {record.project_name[:24]:<24} "
        f"{record.message_count:>5} msgs {record.formatted_duration:>8} "
        f"{format_tokens(record.total_tokens):>7} {record.formatted_cost}"
    )


@app.command()
def analytics(
    ctx: typer.Context,
    period: Annotated[
        Period, typer.Option("--period", "-p", help="Time window", case_sensitive=False)
    ] = Period.WEEK,
) -> None:
    """Show usage analytics from the stats cache."""
    asyncio.run(_do_analytics(ctx.obj, period))


async def _do_analytics(config: Config, period: Period) -> None:
    container = ServiceContainer.create(config)
    result = await container.analytics_service.get_analytics(period)
    if isinstance(result, Err):
        typer.echo(result.err_value, err=True)
        _print_snapshot(AnalyticsSnapshot(), period)
        raise typer.Exit(1)
    _print_snapshot(result.ok_value, period)


def _print_snapshot(snapshot: AnalyticsSnapshot, period: Period) -> None:
    typer.echo(f"Analytics: {period.display_name}")
    typer.echo(
        f"  cost {format_cost(snapshot.total_cost)}  tokens {format_tokens(snapshot.total_tokens)}  "
        f"sessions {snapshot.total_sessions}  messages {snapshot.total_messages}"
    )
    typer.echo(
        f"  cache efficiency {format_percent(snapshot.cache_efficiency)}  "
        f"cache savings {format_cost(snapshot.cache_savings)}"
    )
    if snapshot.daily_stats:
        typer.echo("\nDaily")
        for day in snapshot.daily_stats:
            typer.echo(
                f"  {day.label:<8} {day.message_count:>6} msgs {day.session_count:>4} sessions "
                f"{format_tokens(day.tokens):>7}"
            )
    if snapshot.model_breakdown:
        typer.echo("\nModels")
        for stat in snapshot.model_breakdown:
            typer.echo(
                f"  {stat.display_name:<14} {format_cost(stat.cost):>10} "
                f"{format_percent(stat.percentage):>7} {format_tokens(stat.total_tokens):>7}"
            )
    if snapshot.hourly_activity:
        typer.echo("\nHourly")
        for hour in snapshot.hourly_series():
            typer.echo(f"  {hour.label:>4} {hour.count}")


@app.command()
def summary(ctx: typer.Context) -> None:
    """Show stats-cache totals."""
    asyncio.run(_do_summary(ctx.obj))


async def _do_summary(config: Config) -> None:
    container = ServiceContainer.create(config)
    result = await container.analytics_service.get_usage_summary()
    if isinstance(result, Err):
        typer.echo(result.err_value, err=True)
        raise typer.Exit(1)
    _print_summary(result.ok_value)


def _print_summary(usage: UsageSummary) -> None:
    typer.echo(f"Total sessions: {usage.total_sessions}")
    typer.echo(f"Total messages: {usage.total_messages}")
    for day, metric in sorted(usage.daily_metrics.items()):
        typer.echo(
            f"  {day} {metric.message_count:>6} msgs {metric.session_count:>4} sessions "
            f"{metric.tool_calls:>5} tool calls"
        )


@app.command()
def live(
    ctx: typer.Context,
    watch: Annotated[bool, typer.Option("--watch", "-w", help="Keep polling")] = False,
    interval: Annotated[
        float | None, typer.Option("--interval", help="Polling interval in seconds")
    ] = None,
) -> None:
    """List running sessions."""
    config: Config = ctx.obj
    if interval is not None:
        config = replace(config, poll_interval=interval)
    try:
        asyncio.run(_do_live(config, watch))
    except KeyboardInterrupt:
        pass


async def _do_live(config: Config, watch: bool) -> None:
    container = ServiceContainer.create(config)
    if not watch:
        _print_live(await container.monitor.refresh())
        return

    monitor = container.monitor
    monitor.subscribe(_print_live)
    monitor.start()
    try:
        await asyncio.Event().wait()
    finally:
        monitor.stop()


def _print_live(found: list[LiveSession]) -> None:
    if not found:
        typer.echo("No running sessions.")
        return
    for item in found:
        pid = str(item.pid) if item.pid is not None else "-"
        source = item.kind.label if item.kind is SessionKind.PROCESS else item.ide_name or "IDE"
        typer.echo(
            f"{source:<8} {pid:>7} {item.project_name[:24]:<24} "
            f"{item.elapsed() or '':>7} {item.working_directory}"
        )


@app.command()
def kill(
    ctx: typer.Context,
    pid: Annotated[int, typer.Argument(help="PID of the CLI session")],
) -> None:
    """Gracefully terminate a running CLI session (SIGTERM)."""
    asyncio.run(_do_kill(ctx.obj, pid))


async def _do_kill(config: Config, pid: int) -> None:
    container = ServiceContainer.create(config)
    found = await container.live_service.find_sessions()
    if isinstance(found, Err):
        typer.echo(found.err_value, err=True)
        raise typer.Exit(1)
    target = next(
        (s for s in found.ok_value if s.kind is SessionKind.PROCESS and s.pid == pid),
        None,
    )
    if target is None:
        typer.echo(f"No running {config.cli_binary} session with PID {pid}", err=True)
        raise typer.Exit(1)
    result = await container.live_service.kill(target)
    if isinstance(result, Err):
        typer.echo(result.err_value, err=True)
        raise typer.Exit(1)
    typer.echo(f"Sent SIGTERM to {pid}")
