"""
Command-line interface for the VC intelligence hub.

Usage:
    vc-intel trends --limit 10   # Ranked trends as JSON
    vc-intel deals               # Deduplicated deals as JSON
    vc-intel founders            # Deduplicated founders as JSON
    vc-intel sources             # Source enablement and capabilities
    vc-intel health              # Source health checks
    vc-intel watch --interval 60 # Periodic refresh with a metrics endpoint

Pass --mock to any data command to use synthetic sources.
"""

import asyncio
import json
import sys
from typing import Any

import click

from vc_intel.config.settings import get_settings
from vc_intel.observability.logging import bind_context, setup_logging


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _service(mock: bool):
    from vc_intel.services.intelligence_service import IntelligenceService

    return IntelligenceService.from_settings(use_mock=mock)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """VC Intelligence Hub - multi-source trend, deal and founder signals."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()
    bind_context(command=ctx.invoked_subcommand)


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
@click.option("--limit", default=None, type=int, help="Maximum trends to print")
def trends(mock: bool, limit: int | None) -> None:
    """Collect, deduplicate, score and rank trends."""
    service = _service(mock)
    report = asyncio.run(service.get_trends(limit=limit))
    _echo_json(report.to_dict())


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
def deals(mock: bool) -> None:
    """Collect and deduplicate funding deals."""
    service = _service(mock)
    _echo_json(asyncio.run(service.get_deals()).to_dict())


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
def founders(mock: bool) -> None:
    """Collect and deduplicate founder mentions."""
    service = _service(mock)
    _echo_json(asyncio.run(service.get_founders()).to_dict())


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
def sources(mock: bool) -> None:
    """Show registered sources and whether they are enabled."""
    _echo_json(_service(mock).source_status())


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
@click.option("--interval", default=300.0, type=float, help="Seconds between refreshes")
@click.option("--iterations", default=0, type=int, help="Stop after N refreshes (0 = run forever)")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def watch(
    mock: bool,
    interval: float,
    iterations: int,
    metrics: bool,
    metrics_port: int | None,
) -> None:
    """Refresh trends on an interval, exposing Prometheus metrics."""
    import structlog

    from vc_intel.observability.metrics import get_metrics

    logger = structlog.get_logger(__name__)
    service = _service(mock)

    async def run():
        if metrics:
            get_metrics().start_server(port=metrics_port)

        completed = 0
        while True:
            report = await service.get_trends(limit=10)
            completed += 1
            top = report.trends[0] if report.trends else None
            click.echo(
                f"[{completed}] {len(report.trends)} trends, "
                f"top: {top.name if top else '-'} ({top.momentum_score if top else 0}), "
                f"failures: {len(report.failures or [])}"
            )
            if iterations and completed >= iterations:
                break
            await asyncio.sleep(interval)
            if service.cache is not None:
                logger.debug("Cache purged", removed=service.cache.purge_expired())

    asyncio.run(run())


@main.command()
@click.option("--mock", is_flag=True, help="Use mock sources")
def health(mock: bool) -> None:
    """Check health of all registered sources."""
    service = _service(mock)
    results = asyncio.run(service.manager.health_check())

    click.echo("\nSource Health:")
    click.echo("-" * 40)
    for name, status in results.items():
        icon = "✓" if status else "✗"
        color = "green" if status else "red"
        click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
    click.echo("-" * 40)

    if any(results.values()):
        click.echo(click.style("At least one source available", fg="green"))
        sys.exit(0)
    click.echo(click.style("No sources available!", fg="red"))
    sys.exit(1)


if __name__ == "__main__":
    main()
