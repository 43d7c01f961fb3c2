"""
CLI command: once

Runs a single relay cycle immediately and reports each symbol.
"""

import logging

import click

from quoterelay.app import build_scheduler, settings_from_context
from quoterelay.relay.errors import ConfigurationError

# Configure module-level logger
logger = logging.getLogger("quoterelay.cli.once")


@click.command("once")
@click.option("--symbols", help="Comma separated symbols, overrides configuration")
@click.pass_context
def cli(ctx, symbols: str) -> None:
    """
    Relay every tracked symbol once and exit.

    Exits with status 1 when any symbol failed to fetch or publish.
    """
    settings = settings_from_context(ctx)

    try:
        scheduler = build_scheduler(
            settings, symbols=symbols.split(",") if symbols else None
        )
    except ConfigurationError as exc:
        logger.critical("Cannot start relay: %s", exc)
        click.echo(f"Error: {exc}")
        raise click.Abort()

    report = scheduler.run_cycle()

    for result in report.results:
        if result.success:
            click.echo(f"✓ {result.symbol}: {result.record.price} at {result.record.timestamp}")
        else:
            click.echo(f"✗ {result.symbol}: {result.status.value} ({result.error_message})")

    click.echo(
        f"\nCompleted: {len(report.published)}/{len(report.results)} symbols relayed"
    )
    if not report.ok:
        ctx.exit(1)
